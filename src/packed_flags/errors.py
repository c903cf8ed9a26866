"""Custom exceptions for packed flag columns."""

from __future__ import annotations

from typing import Literal, Optional, Union


class BitfieldError(Exception):
    """Base exception for packed flag failures."""


class ConfigurationError(BitfieldError):
    """Raised when a field group, bit assignment or option is invalid."""


class UnknownFlagError(BitfieldError, KeyError):
    """Raised when a flag name (or weight) is not part of an assignment."""

    def __init__(
        self,
        flag: Union[str, int],
        column: Optional[str] = None,
        *,
        kind: Literal["name", "weight"] = "name",
    ) -> None:
        self.flag = flag
        self.column = column
        self.kind = kind
        if kind == "weight":
            message = f"No flag declared with weight {flag}"
        else:
            message = f"Unknown flag: {flag!r}"
        if column is not None:
            message = f"{message} (column {column!r})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class InvalidPackedValueError(BitfieldError, ValueError):
    """Raised when a stored packed value is not a non-negative integer."""

    def __init__(self, value: object, column: Optional[str] = None) -> None:
        self.value = value
        self.column = column
        where = f" in column {column!r}" if column is not None else ""
        super().__init__(
            f"Packed value{where} must be a non-negative integer, got {value!r}"
        )


class ConflictingFlagError(BitfieldError):
    """Raised when one flag is requested both true and false in a single call."""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"Flag {flag!r} requested both true and false")


class InvalidFlagValueError(BitfieldError, ValueError):
    """Raised when a value assigned to a flag cannot be read as a boolean."""

    def __init__(self, flag: str, value: object) -> None:
        self.flag = flag
        self.value = value
        super().__init__(f"Invalid value for flag {flag!r}: {value!r}")
