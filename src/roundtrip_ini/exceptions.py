"""Custom exceptions for roundtrip_ini."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roundtrip_ini.tokenizer import Position


class RoundtripIniError(Exception):
    """Base exception for roundtrip_ini operations."""


class GrammarDefinitionError(RoundtripIniError):
    """The lexer rules or grammar productions are internally inconsistent.

    Raised once, while the tokenizer and parser modules are imported. It does
    not depend on any input and is never raised by ``parse()``.
    """


class ParseError(RoundtripIniError):
    """Input text does not match the INI grammar.

    Attributes:
        message: Human readable description of the failure.
        position: Where in the source the failure was detected.
        expected: Names of the constructs the grammar would have accepted.
    """

    def __init__(
        self,
        message: str,
        position: Position,
        expected: tuple[str, ...] = (),
    ) -> None:
        self.message = message
        self.position = position
        self.expected = expected
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"{self.position}: {self.message}"
        if self.expected:
            text += f" (expected {' or '.join(self.expected)})"
        return text


class LexError(ParseError):
    """No lexer rule matches the remaining input."""
