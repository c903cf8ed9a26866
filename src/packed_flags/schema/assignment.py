"""Bit assignment: flag names mapped to power-of-two weights."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Sequence, Union

from packed_flags.errors import ConfigurationError, UnknownFlagError


SUPPORTED_WIDTHS = (8, 16, 32, 64)

FlagSpec = Union[Mapping[int, str], Sequence[str]]


@dataclass(frozen=True)
class BitAssignment:
    """Immutable mapping from flag name to bit weight.

    Attributes:
        entries: ``(name, weight)`` pairs. Stored ordered by ascending weight,
            whatever order they were declared in.
        width: Width in bits of the host integer column.
    """

    entries: tuple[tuple[str, int], ...]
    width: int = 64
    _by_name: dict[str, int] = field(init=False, repr=False, compare=False)
    _by_weight: dict[int, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.width not in SUPPORTED_WIDTHS:
            raise ConfigurationError(
                f"Unsupported integer width {self.width!r}; expected one of {SUPPORTED_WIDTHS}."
            )
        if not self.entries:
            raise ConfigurationError("A bit assignment needs at least one flag.")
        by_name: dict[str, int] = {}
        by_weight: dict[int, str] = {}
        for name, weight in self.entries:
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Flag name must be a non-empty string: {name!r}")
            _check_weight(name, weight, self.width)
            if name in by_name:
                raise ConfigurationError(f"Flag {name!r} is declared more than once.")
            if weight in by_weight:
                raise ConfigurationError(
                    f"Weight {weight} is shared by flags {by_weight[weight]!r} and {name!r}."
                )
            by_name[name] = weight
            by_weight[weight] = name
        ordered = tuple(sorted(self.entries, key=lambda entry: entry[1]))
        object.__setattr__(self, "entries", ordered)
        object.__setattr__(self, "_by_name", {name: by_name[name] for name, _ in ordered})
        object.__setattr__(self, "_by_weight", {weight: by_weight[weight] for _, weight in ordered})

    @classmethod
    def build(cls, spec: FlagSpec, *, width: int = 64) -> "BitAssignment":
        """Build an assignment from ``{weight: name}`` or an ordered list of names.

        A list is numbered from weight 1 upwards in declaration order.
        """

        if isinstance(spec, Mapping):
            entries = tuple((name, weight) for weight, name in spec.items())
        elif isinstance(spec, (str, bytes)):
            raise ConfigurationError(
                "Flag specification must be a mapping or a list of names, not a string."
            )
        elif isinstance(spec, Iterable):
            names = list(spec)
            if len(names) > width:
                raise ConfigurationError(
                    f"{len(names)} flags do not fit into a {width}-bit column."
                )
            entries = tuple((name, 1 << index) for index, name in enumerate(names))
        else:
            raise ConfigurationError(f"Unsupported flag specification: {spec!r}")
        return cls(entries=entries, width=width)

    def weight_of(self, name: str) -> int:
        try:
            return self._by_name[name]
        except (KeyError, TypeError):
            raise UnknownFlagError(name) from None

    def name_of(self, weight: int) -> str:
        try:
            return self._by_weight[weight]
        except (KeyError, TypeError):
            raise UnknownFlagError(weight, kind="weight") from None

    def bit_of(self, name: str) -> int:
        """Zero-based bit position of a flag."""

        return self.weight_of(name).bit_length() - 1

    def names(self) -> tuple[str, ...]:
        return tuple(self._by_name)

    def items(self) -> tuple[tuple[str, int], ...]:
        return self.entries

    def mask_of(self, names: Iterable[str]) -> int:
        mask = 0
        for name in names:
            mask |= self.weight_of(name)
        return mask

    @property
    def mask(self) -> int:
        return self.mask_of(self._by_name)

    def to_dict(self) -> dict[int, str]:
        return dict(self._by_weight)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self.entries)


def _check_weight(name: str, weight: Any, width: int) -> None:
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise ConfigurationError(f"Weight of flag {name!r} must be an integer: {weight!r}")
    if weight <= 0 or weight & (weight - 1):
        raise ConfigurationError(f"Weight of flag {name!r} must be a power of two: {weight}")
    if weight >= 1 << width:
        raise ConfigurationError(
            f"Weight of flag {name!r} ({weight}) does not fit into a {width}-bit column."
        )
