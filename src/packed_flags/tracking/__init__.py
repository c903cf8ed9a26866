"""Change tracking for packed flags."""

from packed_flags.tracking.tracker import (
    ChangeScope,
    ChangeTracker,
    FlagTransition,
    TrackerState,
)

__all__ = [
    "ChangeScope",
    "ChangeTracker",
    "FlagTransition",
    "TrackerState",
]
