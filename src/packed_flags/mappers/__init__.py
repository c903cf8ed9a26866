"""SQL fragment builders."""

from packed_flags.mappers.sql import (
    IN_LIST_MAX_FLAGS,
    IN_LIST_WARN_FLAGS,
    MATCH_ALL,
    QUERY_MODES,
    UPDATE_STYLES,
    QueryMode,
    SqlFragmentBuilder,
    UpdateStyle,
)

__all__ = [
    "IN_LIST_MAX_FLAGS",
    "IN_LIST_WARN_FLAGS",
    "MATCH_ALL",
    "QUERY_MODES",
    "UPDATE_STYLES",
    "QueryMode",
    "SqlFragmentBuilder",
    "UpdateStyle",
]
