"""Per-record change tracking for packed flags.

A tracker lives through change cycles. Assignments open a cycle (``dirty``),
the host's commit notification closes it (``committed``). Queries read either
the pending transitions or the ones captured by the last commit.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Literal, Mapping, Optional

from packed_flags.codec import coerce_flag_value
from packed_flags.errors import ConfigurationError, UnknownFlagError


logger = logging.getLogger(__name__)

TrackerState = Literal["clean", "dirty", "committed"]
ChangeScope = Literal["pending", "saved"]


@dataclass(frozen=True)
class FlagTransition:
    """Before/after value of one flag within a change cycle."""

    old: bool
    new: bool

    @property
    def changed(self) -> bool:
        return self.old != self.new

    @property
    def became_true(self) -> bool:
        return not self.old and self.new

    @property
    def became_false(self) -> bool:
        return self.old and not self.new

    def as_tuple(self) -> tuple[bool, bool]:
        return (self.old, self.new)


class ChangeTracker:
    """Tracks flag transitions for one field group of one record."""

    def __init__(self, baseline: Mapping[str, bool], column: Optional[str] = None) -> None:
        self.column = column
        self._baseline: dict[str, bool] = dict(baseline)
        self._pending: dict[str, FlagTransition] = {}
        self._saved: dict[str, FlagTransition] = {}
        self._state: TrackerState = "clean"

    @property
    def state(self) -> TrackerState:
        return self._state

    def assign(self, name: str, value: Any) -> None:
        """Record that ``name`` was set to ``value`` (bools, 0/1 or form strings)."""

        old = self.was(name)
        self._pending[name] = FlagTransition(old=old, new=coerce_flag_value(name, value))
        self._state = "dirty"

    def observe(self, state: Mapping[str, bool]) -> None:
        """Record a whole decoded state, e.g. after the raw integer was written."""

        for name, value in state.items():
            self.assign(name, value)

    def commit(self) -> None:
        """Close the current cycle; pending transitions become the saved ones."""

        self._saved = self._pending
        self._pending = {}
        for name, transition in self._saved.items():
            self._baseline[name] = transition.new
        self._state = "committed"
        logger.debug(
            "Committed %d flag transition(s) for column %s", len(self._saved), self.column
        )

    def was(self, name: str) -> bool:
        """Value of ``name`` as of the last commit (or construction)."""

        self._check(name)
        return self._baseline[name]

    def current(self, name: str) -> bool:
        transition = self._transitions("pending").get(name)
        if transition is None:
            return self.was(name)
        return transition.new

    def change(self, name: str, *, scope: ChangeScope = "pending") -> Optional[tuple[bool, bool]]:
        self._check(name)
        transition = self._transitions(scope).get(name)
        if transition is None or not transition.changed:
            return None
        return transition.as_tuple()

    def changed(self, name: str, *, scope: ChangeScope = "pending") -> bool:
        return self.change(name, scope=scope) is not None

    def became_true(self, name: str, *, scope: ChangeScope = "pending") -> bool:
        self._check(name)
        transition = self._transitions(scope).get(name)
        return transition is not None and transition.became_true

    def became_false(self, name: str, *, scope: ChangeScope = "pending") -> bool:
        self._check(name)
        transition = self._transitions(scope).get(name)
        return transition is not None and transition.became_false

    def all_changes(self, *, scope: ChangeScope = "pending") -> dict[str, tuple[bool, bool]]:
        transitions = self._transitions(scope)
        return {
            name: transitions[name].as_tuple()
            for name in self._baseline
            if name in transitions and transitions[name].changed
        }

    def _transitions(self, scope: ChangeScope) -> dict[str, FlagTransition]:
        if scope == "pending":
            return self._pending
        if scope == "saved":
            return self._saved
        raise ConfigurationError(f"Unknown change scope: {scope!r}")

    def _check(self, name: str) -> None:
        if name not in self._baseline:
            raise UnknownFlagError(name, self.column)
