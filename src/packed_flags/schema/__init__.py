"""Bit assignment types."""

from packed_flags.schema.assignment import SUPPORTED_WIDTHS, BitAssignment, FlagSpec

__all__ = [
    "SUPPORTED_WIDTHS",
    "BitAssignment",
    "FlagSpec",
]
