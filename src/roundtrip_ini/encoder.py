"""Encode a Document tree to canonical INI text.

Normalization rules: leading blank lines of the document are dropped, every
node ends with a newline, headers render as ``[name]`` and properties as
``key = value``. Comments are emitted verbatim before their node and blank
lines as empty lines after it.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Final, assert_never

from roundtrip_ini.schemas import NumberValue, Property, Section, StringValue

if TYPE_CHECKING:
    from roundtrip_ini.document import Document

_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote(text: str) -> str:
    """Return ``text`` as a double-quoted literal with escapes applied."""
    parts = ['"']
    for char in text:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif char.isprintable():
            parts.append(char)
        else:
            code = ord(char)
            if code <= 0xFF:
                parts.append(f"\\x{code:02x}")
            elif code <= 0xFFFF:
                parts.append(f"\\u{code:04x}")
            else:
                parts.append(f"\\U{code:08x}")
    parts.append('"')
    return "".join(parts)


def format_number(number: float) -> str:
    """Shortest plain decimal that reads back as ``number`` (no exponent)."""
    if number == 0:
        return "0"
    return format(Decimal(repr(number)).normalize(), "f")


def render_value(value: StringValue | NumberValue) -> str:
    if isinstance(value, StringValue):
        return quote(value.text)
    if isinstance(value, NumberValue):
        return format_number(value.number)
    assert_never(value)


def render_property(prop: Property) -> str:
    lines = list(prop.comments)
    lines.append(f"{prop.key} = {render_value(prop.value)}")
    lines.extend("" for _ in prop.blank_lines)
    return "\n".join(lines) + "\n"


def render_section(section: Section) -> str:
    lines = list(section.comments)
    lines.append(f"[{section.name}]")
    lines.extend("" for _ in section.blank_lines)
    header = "\n".join(lines) + "\n"
    return header + "".join(render_property(prop) for prop in section.properties)


def render_document(document: Document) -> str:
    """Encode ``document``. An empty document encodes to the empty string."""
    parts = [render_property(prop) for prop in document.properties]
    parts.extend(render_section(section) for section in document.sections)
    return "".join(parts)


def dumps(document: Document) -> str:
    """Alias of render_document, named after ``json.dumps``."""
    return render_document(document)
