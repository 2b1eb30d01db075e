"""Split INI source text into classified tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator

from roundtrip_ini.config import ROUNDTRIP_INI_SOURCE_LABEL
from roundtrip_ini.exceptions import GrammarDefinitionError, LexError


class TokenKind(Enum):
    IDENT = "identifier"
    STRING = "string"
    NUMBER = "number"
    LBRACKET = "'['"
    RBRACKET = "']'"
    EQUALS = "'='"
    COMMENT = "comment"
    NEWLINE = "newline"
    WHITESPACE = "whitespace"
    EOF = "end of input"


# Order matters: the first rule that matches at the current offset wins.
LEXER_RULES: Final[tuple[tuple[str, str], ...]] = (
    ("IDENT", r"[A-Za-z][A-Za-z0-9_]*"),
    ("STRING", r'"(?:\\.|[^"\\])*"'),
    ("NUMBER", r"[0-9]+(?:\.[0-9]+)?"),
    ("LBRACKET", r"\["),
    ("RBRACKET", r"\]"),
    ("EQUALS", r"="),
    ("COMMENT", r"[#;][^\r\n]*"),
    ("NEWLINE", r"\r?\n"),
    ("WHITESPACE", r"[\t \r]+"),
)

# Kinds never handed to the parser.
DISCARDED_KINDS: Final[frozenset[TokenKind]] = frozenset({TokenKind.WHITESPACE})

# Characters that may not directly follow a number literal.
_NUMBER_TAIL_RE = re.compile(r"[.A-Za-z0-9_]")


@dataclass(frozen=True)
class Position:
    """A location in the source text. Line and column are 1-based."""

    source_label: str
    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.source_label}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    position: Position


def compile_rules(rules: tuple[tuple[str, str], ...]) -> re.Pattern[str]:
    """Build the combined lexer pattern from a rule table.

    Every rule name must name a TokenKind, appear once, compile, and be
    unable to match the empty string. Every TokenKind except EOF must have
    a rule.

    Raises:
        GrammarDefinitionError: If the rule table is inconsistent.
    """
    seen: set[str] = set()
    for name, pattern in rules:
        if name in seen:
            raise GrammarDefinitionError(f"duplicate lexer rule {name!r}")
        seen.add(name)
        if name not in TokenKind.__members__ or name == TokenKind.EOF.name:
            raise GrammarDefinitionError(f"lexer rule {name!r} does not name a token kind")
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise GrammarDefinitionError(f"lexer rule {name!r} does not compile: {exc}") from exc
        if compiled.fullmatch(""):
            raise GrammarDefinitionError(f"lexer rule {name!r} matches the empty string")

    missing = {kind.name for kind in TokenKind if kind is not TokenKind.EOF} - seen
    if missing:
        raise GrammarDefinitionError(f"no lexer rule for {', '.join(sorted(missing))}")

    return re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in rules), re.DOTALL)


_MASTER_RE = compile_rules(LEXER_RULES)


def tokenize(text: str, source_label: str | None = None) -> Iterator[Token]:
    """Yield the tokens of ``text``, ending with a single EOF token.

    Whitespace is consumed but never yielded.

    Raises:
        LexError: If no rule matches at some offset, a string literal is not
            closed, or a number literal runs into other characters.
    """
    label = source_label if source_label is not None else ROUNDTRIP_INI_SOURCE_LABEL
    offset = 0
    line = 1
    column = 1
    length = len(text)

    while offset < length:
        position = Position(label, offset, line, column)
        match = _MASTER_RE.match(text, offset)
        if match is None:
            if text[offset] == '"':
                raise LexError("unterminated string literal", position)
            raise LexError(f"unexpected character {text[offset]!r}", position)

        kind = TokenKind[match.lastgroup]
        value = match.group()
        end = match.end()

        if kind is TokenKind.NUMBER and end < length and _NUMBER_TAIL_RE.match(text, end):
            raise LexError(f"malformed number literal starting {value!r}", position)

        if kind not in DISCARDED_KINDS:
            yield Token(kind, value, position)

        newlines = value.count("\n")
        if newlines:
            line += newlines
            column = len(value) - value.rfind("\n")
        else:
            column += len(value)
        offset = end

    yield Token(TokenKind.EOF, "", Position(label, offset, line, column))


class Tokenizer:
    """Restartable token sequence over a fixed text.

    Each iteration tokenizes from the beginning, so the same Tokenizer can be
    walked any number of times.
    """

    def __init__(self, text: str, source_label: str | None = None) -> None:
        self.text = text
        self.source_label = source_label

    def __iter__(self) -> Iterator[Token]:
        return tokenize(self.text, self.source_label)
