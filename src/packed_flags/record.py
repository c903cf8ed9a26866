"""Per-record binding of packed columns and their change trackers."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from packed_flags.bitfields import BitfieldSchema
from packed_flags.codec import (
    Desired,
    FlagState,
    coerce_flag_value,
    decode,
    encode,
    validate_packed,
)
from packed_flags.errors import ConfigurationError, InvalidPackedValueError
from packed_flags.tracking.tracker import ChangeScope, ChangeTracker


logger = logging.getLogger(__name__)


class BitfieldRecord:
    """Packed flag state of one record.

    The host hands over the stored integer of every column and then reports two
    events: flag assignments (``set``/``update``/``write_packed``) and a successful
    save (``commit``). Nothing here touches storage.
    """

    def __init__(self, schema: BitfieldSchema, values: Mapping[str, Any]) -> None:
        extra = set(values) - set(schema.columns())
        if extra:
            raise ConfigurationError(f"Unknown bitfield column(s): {', '.join(sorted(extra))}")
        self.schema = schema
        self._packed: dict[str, int] = {}
        self._trackers: dict[str, ChangeTracker] = {}
        for group in schema.groups():
            if group.column not in values:
                raise InvalidPackedValueError(None, group.column)
            packed = validate_packed(values[group.column], group.column)
            self._packed[group.column] = packed
            self._trackers[group.column] = ChangeTracker(
                decode(group.assignment, packed), column=group.column
            )

    def get(self, flag: str) -> bool:
        column = self.schema.column_of(flag)
        weight = self.schema.group(column).assignment.weight_of(flag)
        return self._packed[column] & weight == weight

    def values(self, column: str) -> FlagState:
        return decode(self.schema.group(column).assignment, self.packed(column))

    def packed(self, column: str) -> int:
        try:
            return self._packed[column]
        except KeyError:
            raise ConfigurationError(f"No field group for column {column!r}.") from None

    def set(self, flag: str, value: Any) -> None:
        column = self.schema.column_of(flag)
        value = coerce_flag_value(flag, value)
        assignment = self.schema.group(column).assignment
        self._packed[column] = encode(assignment, self._packed[column], {flag: value})
        self._trackers[column].assign(flag, value)

    def update(self, desired: Desired) -> None:
        """Assign several flags at once; nothing changes if any entry is invalid."""

        for column, values in self.schema.split_by_column(desired).items():
            assignment = self.schema.group(column).assignment
            self._packed[column] = encode(assignment, self._packed[column], values)
            for name, value in values.items():
                self._trackers[column].assign(name, value)

    def write_packed(self, column: str, value: Any) -> None:
        """Replace the raw integer of a column, tracking every flag it touches."""

        group = self.schema.group(column)
        packed = validate_packed(value, column)
        self._packed[column] = packed
        self._trackers[column].observe(decode(group.assignment, packed))

    def commit(self) -> None:
        for tracker in self._trackers.values():
            tracker.commit()
        logger.debug("Record committed bitfield columns %s", ", ".join(self._trackers))

    def tracker(self, column: str) -> ChangeTracker:
        self.schema.group(column)
        return self._trackers[column]

    def was(self, flag: str) -> bool:
        return self._tracker_for(flag).was(flag)

    def changed(self, flag: str, *, scope: ChangeScope = "pending") -> bool:
        return self._tracker_for(flag).changed(flag, scope=scope)

    def change(self, flag: str, *, scope: ChangeScope = "pending") -> Optional[tuple[bool, bool]]:
        return self._tracker_for(flag).change(flag, scope=scope)

    def became_true(self, flag: str, *, scope: ChangeScope = "pending") -> bool:
        return self._tracker_for(flag).became_true(flag, scope=scope)

    def became_false(self, flag: str, *, scope: ChangeScope = "pending") -> bool:
        return self._tracker_for(flag).became_false(flag, scope=scope)

    def changes(self, *, scope: ChangeScope = "pending") -> dict[str, tuple[bool, bool]]:
        result: dict[str, tuple[bool, bool]] = {}
        for tracker in self._trackers.values():
            result.update(tracker.all_changes(scope=scope))
        return result

    def _tracker_for(self, flag: str) -> ChangeTracker:
        return self._trackers[self.schema.column_of(flag)]
