"""Recursive-descent parser building a Document from INI text.

Grammar::

    Document := NEWLINE* Property* Section*
    Property := (COMMENT NEWLINE)* IDENT '=' Value NEWLINE? NEWLINE*
    Section  := (COMMENT NEWLINE)* '[' IDENT ']' NEWLINE? NEWLINE* Property*
    Value    := STRING | NUMBER

A run of comment lines is attached to the node that follows it, and blank
lines to the node they follow. Since a comment run looks the same in front of
a property and a section header, the parser scans past it to the first
discriminating token before picking a production.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Final, Iterable, Sequence

from roundtrip_ini.config import ROUNDTRIP_INI_MAX_COMMENT_RUN, ROUNDTRIP_INI_SOURCE_LABEL
from roundtrip_ini.document import Document
from roundtrip_ini.exceptions import GrammarDefinitionError, ParseError
from roundtrip_ini.schemas import NumberValue, Property, Section, StringValue
from roundtrip_ini.tokenizer import DISCARDED_KINDS, LEXER_RULES, Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

# Marker recorded for every empty line, whatever the source line ending.
BLANK_LINE: Final[str] = "\n"

# First token of each production after its leading comment run.
PROPERTY_START: Final[TokenKind] = TokenKind.IDENT
SECTION_START: Final[TokenKind] = TokenKind.LBRACKET

# Every token kind a production consumes.
GRAMMAR_KINDS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.IDENT,
        TokenKind.STRING,
        TokenKind.NUMBER,
        TokenKind.LBRACKET,
        TokenKind.RBRACKET,
        TokenKind.EQUALS,
        TokenKind.COMMENT,
        TokenKind.NEWLINE,
    }
)

# Kinds described in error messages without their source text.
_BARE_KINDS: Final[frozenset[TokenKind]] = frozenset(
    {TokenKind.EOF, TokenKind.NEWLINE, TokenKind.LBRACKET, TokenKind.RBRACKET, TokenKind.EQUALS}
)

_ESCAPE_RE = re.compile(
    r"\\(x[0-9A-Fa-f]{2}|u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|[0-7]{3}|.)", re.DOTALL
)
_SIMPLE_ESCAPES: Final[dict[str, str]] = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def check_grammar() -> None:
    """Verify that the grammar productions agree with the lexer rules.

    Raises:
        GrammarDefinitionError: If a production depends on a token kind the
            lexer never emits, or the property and section productions cannot
            be told apart by their first token.
    """
    emitted = {TokenKind[name] for name, _ in LEXER_RULES} - DISCARDED_KINDS
    unreachable = GRAMMAR_KINDS - emitted
    if unreachable:
        names = ", ".join(sorted(kind.name for kind in unreachable))
        raise GrammarDefinitionError(f"grammar uses token kinds with no lexer rule: {names}")
    if PROPERTY_START is SECTION_START:
        raise GrammarDefinitionError("property and section productions start with the same token")
    if {PROPERTY_START, SECTION_START} & {TokenKind.COMMENT, TokenKind.NEWLINE}:
        raise GrammarDefinitionError("a production may not start with a comment or newline token")


check_grammar()


def unquote(literal: str) -> str:
    """Strip the quotes from a string literal and resolve backslash escapes.

    Raises:
        ValueError: If the literal contains an unknown or invalid escape.
    """

    def _replace(match: re.Match[str]) -> str:
        escape = match.group(1)
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        if escape[0] in "xuU" and len(escape) > 1:
            return chr(int(escape[1:], 16))
        if len(escape) == 3 and escape.isdigit():
            code = int(escape, 8)
            if code > 0xFF:
                raise ValueError(f"octal escape out of range: \\{escape}")
            return chr(code)
        raise ValueError(f"unknown escape sequence: \\{escape}")

    return _ESCAPE_RE.sub(_replace, literal[1:-1])


def skip_comment_run(tokens: Sequence[Token], start: int, max_comment_run: int = 0) -> int:
    """Return the index of the first token after the comment run at ``start``.

    A comment run is any number of COMMENT NEWLINE pairs. The token at the
    returned index tells a property (IDENT) from a section header ('[').
    ``tokens`` must end with an EOF token.

    Raises:
        ParseError: If ``max_comment_run`` is positive and the run is longer.
    """
    index = start
    lines = 0
    last = len(tokens) - 1
    while (
        index < last
        and tokens[index].kind is TokenKind.COMMENT
        and tokens[index + 1].kind is TokenKind.NEWLINE
    ):
        lines += 1
        if max_comment_run and lines > max_comment_run:
            raise ParseError(
                f"comment block longer than {max_comment_run} lines", tokens[index].position
            )
        index += 2
    return index


class _Parser:
    def __init__(self, tokens: Iterable[Token], max_comment_run: int) -> None:
        self._tokens = list(tokens)
        self._index = 0
        self._max_comment_run = max_comment_run

    # Token helpers

    def _peek(self, offset: int = 0) -> Token:
        index = min(self._index + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind is not TokenKind.EOF:
            self._index += 1
        return token

    def _accept(self, kind: TokenKind) -> Token | None:
        if self._peek().kind is kind:
            return self._advance()
        return None

    def _expect(self, kind: TokenKind, construct: str) -> Token:
        token = self._peek()
        if token.kind is not kind:
            raise self._unexpected(token, construct)
        return self._advance()

    def _unexpected(self, token: Token, *expected: str) -> ParseError:
        return ParseError(f"unexpected {_describe(token)}", token.position, expected)

    def _peek_past_comments(self) -> Token:
        return self._tokens[skip_comment_run(self._tokens, self._index, self._max_comment_run)]

    def _starts(self, kind: TokenKind) -> bool:
        return self._peek_past_comments().kind is kind

    # Productions

    def document(self) -> Document:
        blank_lines = self._blank_lines()
        properties = self._properties()
        sections: list[Section] = []
        while self._starts(SECTION_START):
            sections.append(self._section())

        if self._peek().kind is not TokenKind.EOF:
            token = self._peek_past_comments()
            if token.kind in (TokenKind.EOF, TokenKind.COMMENT):
                # Comment lines with nothing after them.
                raise ParseError(
                    "comment is not followed by a property or section",
                    self._peek().position,
                    ("property", "section"),
                )
            raise self._unexpected(token, "property", "section", "end of input")

        return Document(blank_lines=blank_lines, properties=properties, sections=sections)

    def _property(self) -> Property:
        comments = self._comments()
        key = self._expect(TokenKind.IDENT, "property key").value
        self._expect(TokenKind.EQUALS, "'='")
        value = self._value()
        self._accept(TokenKind.NEWLINE)
        return Property(key=key, value=value, comments=comments, blank_lines=self._blank_lines())

    def _properties(self) -> list[Property]:
        properties: list[Property] = []
        while self._starts(PROPERTY_START):
            properties.append(self._property())
        return properties

    def _section(self) -> Section:
        comments = self._comments()
        self._expect(TokenKind.LBRACKET, "'['")
        name = self._expect(TokenKind.IDENT, "section name").value
        self._expect(TokenKind.RBRACKET, "']'")
        self._accept(TokenKind.NEWLINE)
        blank_lines = self._blank_lines()
        return Section(
            name=name,
            comments=comments,
            blank_lines=blank_lines,
            properties=self._properties(),
        )

    def _value(self) -> StringValue | NumberValue:
        token = self._peek()
        if token.kind is TokenKind.STRING:
            self._advance()
            try:
                return StringValue(text=unquote(token.value))
            except ValueError as exc:
                raise ParseError(str(exc), token.position, ("string",)) from exc
        if token.kind is TokenKind.NUMBER:
            self._advance()
            number = float(token.value)
            if math.isinf(number):
                raise ParseError("number literal out of range", token.position, ("number",))
            return NumberValue(number=number)
        raise self._unexpected(token, "string", "number")

    def _comments(self) -> list[str]:
        comments: list[str] = []
        while self._peek().kind is TokenKind.COMMENT and self._peek(1).kind is TokenKind.NEWLINE:
            comments.append(self._advance().value)
            self._advance()
        return comments

    def _blank_lines(self) -> list[str]:
        blank_lines: list[str] = []
        while self._accept(TokenKind.NEWLINE) is not None:
            blank_lines.append(BLANK_LINE)
        return blank_lines


def _describe(token: Token) -> str:
    if token.kind in _BARE_KINDS:
        return token.kind.value
    return f"{token.kind.value} {token.value!r}"


def parse(source_label: str, text: str) -> Document:
    """Parse INI text into a Document.

    Args:
        source_label: Name of the source (e.g. a file name), used only in
            error messages.
        text: The INI text.

    Returns:
        The parsed document.

    Raises:
        LexError: If the text contains characters no token rule accepts.
        ParseError: If the tokens do not match the grammar.
    """
    parser = _Parser(tokenize(text, source_label), ROUNDTRIP_INI_MAX_COMMENT_RUN)
    document = parser.document()
    logger.debug(
        "Parsed %s: %d global properties, %d sections",
        source_label,
        len(document.properties),
        len(document.sections),
    )
    return document


def loads(text: str, *, source_label: str | None = None) -> Document:
    """Parse INI text, labelling errors with the configured default label."""
    return parse(source_label if source_label is not None else ROUNDTRIP_INI_SOURCE_LABEL, text)
