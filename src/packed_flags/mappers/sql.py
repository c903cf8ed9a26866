"""SQL fragments for filtering and updating packed flag columns."""

from __future__ import annotations

from typing import Literal, Optional
import warnings

from packed_flags.codec import Desired, normalize_desired, split_masks
from packed_flags.errors import ConfigurationError, UnknownFlagError
from packed_flags.schema.assignment import BitAssignment


QueryMode = Literal["bit_operator", "bit_operator_or", "in_list"]
UpdateStyle = Literal["subtract", "and_not"]

QUERY_MODES: tuple[str, ...] = ("bit_operator", "bit_operator_or", "in_list")
UPDATE_STYLES: tuple[str, ...] = ("subtract", "and_not")

# Predicate returned for an empty request; callers should skip the statement.
MATCH_ALL = "1 = 1"

# in_list enumerates 2 ** n values for n unconstrained bits below the highest
# declared weight, gaps included.
IN_LIST_WARN_FLAGS = 10
IN_LIST_MAX_FLAGS = 20


def check_query_mode(mode: str) -> QueryMode:
    if mode not in QUERY_MODES:
        raise ConfigurationError(f"Unknown query mode {mode!r}; expected one of {QUERY_MODES}.")
    return mode  # type: ignore[return-value]


def check_update_style(style: str) -> UpdateStyle:
    if style not in UPDATE_STYLES:
        raise ConfigurationError(
            f"Unknown update style {style!r}; expected one of {UPDATE_STYLES}."
        )
    return style  # type: ignore[return-value]


class SqlFragmentBuilder:
    """Builds WHERE predicates and SET assignments for one packed column.

    Filters never decode rows: every mode compares masked column values against
    constants computed from the assignment.
    """

    def __init__(
        self,
        assignment: BitAssignment,
        column: str,
        *,
        table: Optional[str] = None,
        query_mode: str = "bit_operator",
        update_style: str = "subtract",
    ) -> None:
        if not isinstance(column, str) or not column:
            raise ConfigurationError("Column name must be a non-empty string.")
        if table is not None and (not isinstance(table, str) or not table):
            raise ConfigurationError("Table name must be a non-empty string when given.")
        self.assignment = assignment
        self.column = column
        self.table = table
        self.query_mode = check_query_mode(query_mode)
        self.update_style = check_update_style(update_style)

    @property
    def target(self) -> str:
        if self.table:
            return f"{self.table}.{self.column}"
        return self.column

    def filter_sql(self, desired: Desired, *, query_mode: Optional[str] = None) -> str:
        mode = check_query_mode(query_mode) if query_mode is not None else self.query_mode
        values = self._normalize(desired)
        if not values:
            return MATCH_ALL
        if mode == "bit_operator":
            return self._bit_operator_sql(values)
        if mode == "bit_operator_or":
            return self._bit_operator_or_sql(values)
        return self._in_list_sql(values)

    def update_sql(self, desired: Desired) -> str:
        values = self._normalize(desired)
        col = self.target
        if not values:
            return f"{col} = {col}"
        set_mask, clear_mask = split_masks(self.assignment, values)
        if self.update_style == "and_not":
            return f"{col} = ({col} | {set_mask}) & ~{clear_mask}"
        # Every cleared bit is OR-ed in first, so subtracting it cannot borrow.
        return f"{col} = ({col} | {set_mask | clear_mask}) - {clear_mask}"

    def in_list_values(self, desired: Desired) -> list[int]:
        """All values below the highest declared bit consistent with ``desired``.

        Undeclared bits inside that span are left free, so rows carrying them
        match exactly as they do in bit_operator mode.
        """

        values = self._normalize(desired)
        set_mask, clear_mask = split_masks(self.assignment, values)
        span = self.assignment.mask.bit_length()
        free = [1 << bit for bit in range(span) if not (set_mask | clear_mask) >> bit & 1]
        if len(free) > IN_LIST_MAX_FLAGS:
            raise ConfigurationError(
                f"in_list query on {self.column} would enumerate {2 ** len(free)} values; "
                f"at most {IN_LIST_MAX_FLAGS} unconstrained bits are supported"
            )
        if len(free) > IN_LIST_WARN_FLAGS:
            warnings.warn(
                f"in_list query on {self.column} enumerates {2 ** len(free)} values; "
                "consider the bit_operator query mode"
            )
        result: list[int] = []
        for combo in range(1 << len(free)):
            value = set_mask
            for index, weight in enumerate(free):
                if combo >> index & 1:
                    value |= weight
            result.append(value)
        return sorted(result)

    def _bit_operator_sql(self, values: dict[str, bool]) -> str:
        set_mask, clear_mask = split_masks(self.assignment, values)
        return f"({self.target} & {set_mask | clear_mask}) = {set_mask}"

    def _bit_operator_or_sql(self, values: dict[str, bool]) -> str:
        terms: list[str] = []
        for name, weight in self.assignment.items():
            if name not in values:
                continue
            expected = weight if values[name] else 0
            terms.append(f"({self.target} & {weight}) = {expected}")
        return " OR ".join(terms)

    def _in_list_sql(self, values: dict[str, bool]) -> str:
        listed = ", ".join(str(value) for value in self.in_list_values(values))
        return f"{self.target} IN ({listed})"

    def _normalize(self, desired: Desired) -> dict[str, bool]:
        try:
            return normalize_desired(self.assignment, desired)
        except UnknownFlagError as exc:
            raise UnknownFlagError(exc.flag, self.column, kind=exc.kind) from None
