"""Registry of per-flag accessors and query scopes.

Each declared flag gets a set of plain functions instead of generated
attribute names: accessors operate on a ``BitfieldRecord``, scopes return
filter fragments. Groups can switch either kind off.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TYPE_CHECKING

from packed_flags.errors import ConfigurationError, UnknownFlagError

if TYPE_CHECKING:
    from packed_flags.bitfields import BitfieldSchema, FieldGroup
    from packed_flags.record import BitfieldRecord
    from packed_flags.tracking.tracker import ChangeScope


@dataclass(frozen=True)
class FlagAccessor:
    """Read/write/change functions bound to one flag."""

    name: str
    column: str
    get: Callable[["BitfieldRecord"], bool]
    set: Callable[["BitfieldRecord", Any], None]
    was: Callable[["BitfieldRecord"], bool]
    changed: Callable[..., bool]
    change: Callable[..., Optional[tuple[bool, bool]]]
    became_true: Callable[..., bool]
    became_false: Callable[..., bool]


@dataclass(frozen=True)
class FlagScope:
    """Filter fragments selecting rows where one flag is set or unset."""

    name: str
    column: str
    where: Callable[..., str]
    where_not: Callable[..., str]


class AccessorRegistry:
    """Lookup of accessors and scopes by flag name."""

    def __init__(self, schema: "BitfieldSchema") -> None:
        self._known: dict[str, str] = {}
        self._accessors: dict[str, FlagAccessor] = {}
        self._scopes: dict[str, FlagScope] = {}
        for group in schema.groups():
            for name in group.assignment.names():
                self._known[name] = group.column
                if group.options.accessors:
                    self.register_accessor(_make_accessor(name, group.column))
                if group.options.scopes:
                    self.register_scope(_make_scope(name, group))

    def register_accessor(self, accessor: FlagAccessor) -> None:
        if accessor.name in self._accessors:
            raise ConfigurationError(f"Accessor already registered: {accessor.name}")
        self._accessors[accessor.name] = accessor

    def register_scope(self, scope: FlagScope) -> None:
        if scope.name in self._scopes:
            raise ConfigurationError(f"Scope already registered: {scope.name}")
        self._scopes[scope.name] = scope

    def accessor(self, name: str) -> FlagAccessor:
        self._check(name)
        try:
            return self._accessors[name]
        except KeyError:
            raise ConfigurationError(
                f"Accessors are disabled for column {self._known[name]!r} (flag {name!r})."
            ) from None

    def scope(self, name: str) -> FlagScope:
        self._check(name)
        try:
            return self._scopes[name]
        except KeyError:
            raise ConfigurationError(
                f"Scopes are disabled for column {self._known[name]!r} (flag {name!r})."
            ) from None

    def accessors(self) -> dict[str, FlagAccessor]:
        return dict(self._accessors)

    def scopes(self) -> dict[str, FlagScope]:
        return dict(self._scopes)

    def _check(self, name: str) -> None:
        if name not in self._known:
            raise UnknownFlagError(name)


def _make_accessor(name: str, column: str) -> FlagAccessor:
    def get(record: "BitfieldRecord") -> bool:
        return record.get(name)

    def set_(record: "BitfieldRecord", value: Any) -> None:
        record.set(name, value)

    def was(record: "BitfieldRecord") -> bool:
        return record.was(name)

    def changed(record: "BitfieldRecord", *, scope: "ChangeScope" = "pending") -> bool:
        return record.changed(name, scope=scope)

    def change(
        record: "BitfieldRecord", *, scope: "ChangeScope" = "pending"
    ) -> Optional[tuple[bool, bool]]:
        return record.change(name, scope=scope)

    def became_true(record: "BitfieldRecord", *, scope: "ChangeScope" = "pending") -> bool:
        return record.became_true(name, scope=scope)

    def became_false(record: "BitfieldRecord", *, scope: "ChangeScope" = "pending") -> bool:
        return record.became_false(name, scope=scope)

    return FlagAccessor(
        name=name,
        column=column,
        get=get,
        set=set_,
        was=was,
        changed=changed,
        change=change,
        became_true=became_true,
        became_false=became_false,
    )


def _make_scope(name: str, group: "FieldGroup") -> FlagScope:
    def where(table: Optional[str] = None) -> str:
        return group.builder(table).filter_sql({name: True})

    def where_not(table: Optional[str] = None) -> str:
        return group.builder(table).filter_sql({name: False})

    return FlagScope(name=name, column=group.column, where=where, where_not=where_not)
