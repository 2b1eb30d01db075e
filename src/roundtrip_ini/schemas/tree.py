"""INI tree nodes with formatting metadata."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class StringValue(BaseModel):
    """A string value, stored unescaped."""

    kind: Literal["string"] = "string"
    text: str


class NumberValue(BaseModel):
    """A non-negative finite number."""

    kind: Literal["number"] = "number"
    number: float = Field(..., ge=0, allow_inf_nan=False)


# Closed union: every consumer matches both variants exhaustively.
Value = Annotated[Union[StringValue, NumberValue], Field(discriminator="kind")]


class Property(BaseModel):
    """A key/value pair.

    Attributes:
        key: Property name. Not unique; lookups act on the first match.
        value: The property value.
        comments: Comment lines (with their ``#``/``;`` marker) that precede
            the property.
        blank_lines: One newline marker per empty line following the property.
    """

    model_config = ConfigDict(validate_assignment=True)

    key: str
    value: Value
    comments: list[str] = Field(default_factory=list)
    blank_lines: list[str] = Field(default_factory=list)


class Section(BaseModel):
    """A named group of properties introduced by a ``[name]`` header."""

    name: str
    comments: list[str] = Field(default_factory=list)
    blank_lines: list[str] = Field(default_factory=list)
    properties: list[Property] = Field(default_factory=list)
