"""Field groups and the per-record-type collection of packed columns."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, Mapping, Optional

from packed_flags.codec import Desired, normalize_desired
from packed_flags.errors import ConfigurationError, UnknownFlagError
from packed_flags.mappers.sql import (
    MATCH_ALL,
    QueryMode,
    SqlFragmentBuilder,
    UpdateStyle,
    check_query_mode,
    check_update_style,
)
from packed_flags.registry import AccessorRegistry
from packed_flags.schema.assignment import BitAssignment


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldGroupOptions:
    """Toggles and defaults of one field group."""

    accessors: bool = True
    scopes: bool = True
    query_mode: QueryMode = "bit_operator"
    update_style: UpdateStyle = "subtract"

    def __post_init__(self) -> None:
        check_query_mode(self.query_mode)
        check_update_style(self.update_style)


@dataclass(frozen=True)
class FieldGroup:
    """One packed integer column with its bit assignment."""

    column: str
    assignment: BitAssignment
    options: FieldGroupOptions = field(default_factory=FieldGroupOptions)

    def __post_init__(self) -> None:
        if not isinstance(self.column, str) or not self.column:
            raise ConfigurationError("Field group column must be a non-empty string.")
        if not isinstance(self.assignment, BitAssignment):
            raise ConfigurationError(
                f"Field group {self.column!r} needs a BitAssignment, got {self.assignment!r}."
            )

    def builder(self, table: Optional[str] = None) -> SqlFragmentBuilder:
        return SqlFragmentBuilder(
            self.assignment,
            self.column,
            table=table,
            query_mode=self.options.query_mode,
            update_style=self.options.update_style,
        )


class BitfieldSchema:
    """All field groups of a record type.

    Flag names are unique across groups, so a flag alone identifies its column.
    """

    def __init__(self, groups: Iterable[FieldGroup]) -> None:
        self._groups: dict[str, FieldGroup] = {}
        self._columns_by_flag: dict[str, str] = {}
        for group in groups:
            if group.column in self._groups:
                raise ConfigurationError(f"Column {group.column!r} is declared more than once.")
            for name in group.assignment.names():
                other = self._columns_by_flag.get(name)
                if other is not None:
                    raise ConfigurationError(
                        f"Flag {name!r} is declared in both {other!r} and {group.column!r}."
                    )
                self._columns_by_flag[name] = group.column
            self._groups[group.column] = group
        if not self._groups:
            raise ConfigurationError("A bitfield schema needs at least one field group.")
        self._registry: Optional[AccessorRegistry] = None
        logger.debug(
            "Built bitfield schema with columns %s (%d flags)",
            ", ".join(self._groups),
            len(self._columns_by_flag),
        )

    def columns(self) -> tuple[str, ...]:
        return tuple(self._groups)

    def groups(self) -> tuple[FieldGroup, ...]:
        return tuple(self._groups.values())

    def group(self, column: str) -> FieldGroup:
        try:
            return self._groups[column]
        except KeyError:
            raise ConfigurationError(f"No field group for column {column!r}.") from None

    def column_of(self, flag: str) -> str:
        try:
            return self._columns_by_flag[flag]
        except (KeyError, TypeError):
            raise UnknownFlagError(flag) from None

    def flag_names(self) -> tuple[str, ...]:
        return tuple(name for group in self._groups.values() for name in group.assignment.names())

    def flags(self) -> dict[str, dict[str, int]]:
        return {
            column: dict(group.assignment.items()) for column, group in self._groups.items()
        }

    def split_by_column(self, desired: Desired) -> dict[str, dict[str, bool]]:
        """Route requested flag values to their columns, in column declaration order."""

        pairs = desired.items() if isinstance(desired, Mapping) else desired
        routed: dict[str, list[tuple[str, object]]] = {}
        for name, value in pairs:
            routed.setdefault(self.column_of(name), []).append((name, value))
        return {
            column: normalize_desired(self._groups[column].assignment, routed[column])
            for column in self._groups
            if column in routed
        }

    def filter_sql(
        self,
        desired: Desired,
        *,
        query_mode: Optional[str] = None,
        table: Optional[str] = None,
    ) -> str:
        by_column = self.split_by_column(desired)
        if not by_column:
            return MATCH_ALL
        fragments = []
        modes = []
        for column, values in by_column.items():
            group = self._groups[column]
            mode = query_mode if query_mode is not None else group.options.query_mode
            modes.append(check_query_mode(mode))
            fragments.append(group.builder(table).filter_sql(values, query_mode=mode))
        if len(fragments) == 1:
            return fragments[0]
        if all(mode == "bit_operator_or" for mode in modes):
            return " OR ".join(f"({fragment})" for fragment in fragments)
        return " AND ".join(
            f"({fragment})" if mode == "bit_operator_or" else fragment
            for fragment, mode in zip(fragments, modes)
        )

    def update_sql(self, desired: Desired, *, table: Optional[str] = None) -> str:
        by_column = self.split_by_column(desired)
        if not by_column:
            # Identity assignment on the first column keeps the SET clause valid.
            first = next(iter(self._groups.values()))
            return first.builder(table).update_sql({})
        return ", ".join(
            self._groups[column].builder(table).update_sql(values)
            for column, values in by_column.items()
        )

    def registry(self) -> AccessorRegistry:
        if self._registry is None:
            self._registry = AccessorRegistry(self)
        return self._registry
