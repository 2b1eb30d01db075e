"""Root of a parsed INI file."""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, Field

from roundtrip_ini import editor, encoder
from roundtrip_ini.schemas import NumberValue, Property, Section, StringValue


class Document(BaseModel):
    """Root of a parsed INI file.

    ``blank_lines`` records the empty lines before any content. They are kept
    for inspection but never rendered.
    """

    blank_lines: list[str] = Field(default_factory=list)
    properties: list[Property] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)

    def lookup(self, path: str) -> Property | None:
        """Return the property at ``path`` ("key" or "section/key"), or None."""
        return editor.lookup(self, path)

    def lookup_section(self, name: str) -> Section | None:
        """Return the first section called ``name``, or None."""
        return editor.lookup_section(self, name)

    def add(self, path: str, value: StringValue | NumberValue) -> Property:
        """Set the value at ``path``, creating the property or section if needed."""
        return editor.add(self, path, value)

    def remove(self, path: str) -> None:
        """Delete the property at ``path``. Does nothing if it is absent."""
        editor.remove(self, path)

    def remove_section(self, name: str) -> None:
        """Delete the first section called ``name``. Does nothing if absent."""
        editor.remove_section(self, name)

    def iter_properties(self) -> Iterator[tuple[str, Property]]:
        """Yield ``(path, property)`` pairs in file order."""
        return editor.iter_properties(self)

    def render(self) -> str:
        """Encode the document to canonical INI text."""
        return encoder.render_document(self)

    def __str__(self) -> str:
        return self.render()
