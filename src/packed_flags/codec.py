"""Encode and decode packed flag values."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from packed_flags.errors import (
    ConflictingFlagError,
    InvalidFlagValueError,
    InvalidPackedValueError,
)
from packed_flags.schema.assignment import BitAssignment


FlagState = dict[str, bool]
Desired = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]

TRUE_VALUES = frozenset({"1", "t", "true"})
FALSE_VALUES = frozenset({"0", "f", "false"})


def validate_packed(value: object, column: Optional[str] = None) -> int:
    """Return ``value`` if it is a usable packed integer, raise otherwise."""

    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidPackedValueError(value, column)
    return value


def coerce_flag_value(name: str, value: Any) -> bool:
    """Read a flag value the way form input arrives: bools, 0/1, "t"/"false"..."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
    raise InvalidFlagValueError(name, value)


def normalize_desired(assignment: BitAssignment, desired: Desired) -> dict[str, bool]:
    """Validate requested flag values.

    ``desired`` may be a mapping or a sequence of ``(name, value)`` pairs; only the
    pair form can express a conflict, which is reported instead of letting the
    last entry win.
    """

    pairs = desired.items() if isinstance(desired, Mapping) else desired
    result: dict[str, bool] = {}
    for name, raw in pairs:
        assignment.weight_of(name)
        value = coerce_flag_value(name, raw)
        if name in result and result[name] != value:
            raise ConflictingFlagError(name)
        result[name] = value
    return result


def split_masks(assignment: BitAssignment, desired: Desired) -> tuple[int, int]:
    """Return ``(set_mask, clear_mask)`` for the requested values."""

    set_mask = 0
    clear_mask = 0
    for name, value in normalize_desired(assignment, desired).items():
        if value:
            set_mask |= assignment.weight_of(name)
        else:
            clear_mask |= assignment.weight_of(name)
    return set_mask, clear_mask


def decode(assignment: BitAssignment, packed: object) -> FlagState:
    packed = validate_packed(packed)
    return {name: packed & weight == weight for name, weight in assignment.items()}


def encode(assignment: BitAssignment, packed: object, desired: Desired) -> int:
    """Apply ``desired`` on top of ``packed``; unnamed bits are kept as they are."""

    packed = validate_packed(packed)
    set_mask, clear_mask = split_masks(assignment, desired)
    return (packed | set_mask) & ~clear_mask
