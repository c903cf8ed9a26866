"""Validation of raw field-group declarations."""

from __future__ import annotations

from typing import Any, Iterable, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from packed_flags.bitfields import BitfieldSchema, FieldGroup, FieldGroupOptions
from packed_flags.errors import ConfigurationError
from packed_flags.schema.assignment import BitAssignment


class FieldGroupDeclaration(BaseModel):
    """A packed column declaration as it appears in settings or code.

    ``flags`` is either an explicit ``{weight: name}`` table or a list of names
    numbered 1, 2, 4, ... in order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    column: str = Field(min_length=1)
    flags: Union[dict[int, str], list[str]]
    accessors: bool = True
    scopes: bool = True
    query_mode: Literal["bit_operator", "bit_operator_or", "in_list"] = "bit_operator"
    update_style: Literal["subtract", "and_not"] = "subtract"
    width: Literal[8, 16, 32, 64] = 64

    @model_validator(mode="after")
    def _check_flags(self):
        if not self.flags:
            raise ValueError(f"Field group {self.column!r} declares no flags")
        return self

    def to_group(self) -> FieldGroup:
        return FieldGroup(
            column=self.column,
            assignment=BitAssignment.build(self.flags, width=self.width),
            options=FieldGroupOptions(
                accessors=self.accessors,
                scopes=self.scopes,
                query_mode=self.query_mode,
                update_style=self.update_style,
            ),
        )


def load_group(data: Union[Mapping[str, Any], FieldGroupDeclaration]) -> FieldGroup:
    if isinstance(data, FieldGroupDeclaration):
        return data.to_group()
    try:
        declaration = FieldGroupDeclaration.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid field group declaration: {exc}") from exc
    return declaration.to_group()


def load_schema(
    declarations: Iterable[Union[Mapping[str, Any], FieldGroupDeclaration]],
) -> BitfieldSchema:
    return BitfieldSchema(load_group(item) for item in declarations)
