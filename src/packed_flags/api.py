"""Unified entrypoint for packed flag columns."""

from __future__ import annotations

from packed_flags.errors import (
    BitfieldError,
    ConfigurationError,
    UnknownFlagError,
    InvalidPackedValueError,
    ConflictingFlagError,
    InvalidFlagValueError,
)
from packed_flags.schema.assignment import BitAssignment, FlagSpec
from packed_flags.codec import (
    FlagState,
    decode,
    encode,
    normalize_desired,
    split_masks,
    coerce_flag_value,
)
from packed_flags.tracking.tracker import ChangeTracker, FlagTransition
from packed_flags.mappers.sql import (
    SqlFragmentBuilder,
    MATCH_ALL,
    QueryMode,
    UpdateStyle,
)
from packed_flags.bitfields import BitfieldSchema, FieldGroup, FieldGroupOptions
from packed_flags.registry import AccessorRegistry, FlagAccessor, FlagScope
from packed_flags.record import BitfieldRecord
from packed_flags.config import FieldGroupDeclaration, load_group, load_schema

__all__ = [
    "BitfieldError",
    "ConfigurationError",
    "UnknownFlagError",
    "InvalidPackedValueError",
    "ConflictingFlagError",
    "InvalidFlagValueError",
    "BitAssignment",
    "FlagSpec",
    "FlagState",
    "decode",
    "encode",
    "normalize_desired",
    "split_masks",
    "coerce_flag_value",
    "ChangeTracker",
    "FlagTransition",
    "SqlFragmentBuilder",
    "MATCH_ALL",
    "QueryMode",
    "UpdateStyle",
    "BitfieldSchema",
    "FieldGroup",
    "FieldGroupOptions",
    "AccessorRegistry",
    "FlagAccessor",
    "FlagScope",
    "BitfieldRecord",
    "FieldGroupDeclaration",
    "load_group",
    "load_schema",
]
