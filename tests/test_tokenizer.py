"""Tests for the tokenizer module."""

from __future__ import annotations

import pytest

from roundtrip_ini.exceptions import GrammarDefinitionError, LexError, ParseError
from roundtrip_ini.tokenizer import (
    LEXER_RULES,
    Position,
    Tokenizer,
    TokenKind,
    compile_rules,
    tokenize,
)


def kinds(text: str) -> list[TokenKind]:
    return [token.kind for token in tokenize(text)]


class TestTokenClasses:
    """Tests for token classification."""

    @pytest.mark.parametrize(
        ("text", "kind"),
        [
            ("name", TokenKind.IDENT),
            ("a_1", TokenKind.IDENT),
            ('"hello"', TokenKind.STRING),
            ('"say \\"hi\\""', TokenKind.STRING),
            ("42", TokenKind.NUMBER),
            ("1.25", TokenKind.NUMBER),
            ("[", TokenKind.LBRACKET),
            ("]", TokenKind.RBRACKET),
            ("=", TokenKind.EQUALS),
            ("# note", TokenKind.COMMENT),
            ("; note", TokenKind.COMMENT),
            ("\n", TokenKind.NEWLINE),
        ],
    )
    def test_single_token(self, text: str, kind: TokenKind) -> None:
        """Each token class is recognized on its own."""
        tokens = list(tokenize(text))

        assert [token.kind for token in tokens] == [kind, TokenKind.EOF]
        assert tokens[0].value == text

    def test_whitespace_is_discarded(self) -> None:
        """Horizontal whitespace never reaches the parser."""
        assert kinds(" \t key \t=  1 ") == [
            TokenKind.IDENT,
            TokenKind.EQUALS,
            TokenKind.NUMBER,
            TokenKind.EOF,
        ]

    def test_comment_excludes_newline(self) -> None:
        """A comment runs to the end of the line, newline not included."""
        tokens = list(tokenize("# a = 1 [x]\nb = 2"))

        assert tokens[0].kind is TokenKind.COMMENT
        assert tokens[0].value == "# a = 1 [x]"
        assert tokens[1].kind is TokenKind.NEWLINE

    def test_crlf_is_one_newline(self) -> None:
        """Windows line endings produce a single newline token."""
        assert kinds("a = 1\r\nb = 2\r\n") == [
            TokenKind.IDENT,
            TokenKind.EQUALS,
            TokenKind.NUMBER,
            TokenKind.NEWLINE,
            TokenKind.IDENT,
            TokenKind.EQUALS,
            TokenKind.NUMBER,
            TokenKind.NEWLINE,
            TokenKind.EOF,
        ]

    def test_empty_input_yields_only_eof(self) -> None:
        """Empty text tokenizes to a lone EOF."""
        assert kinds("") == [TokenKind.EOF]


class TestPositions:
    """Tests for token source positions."""

    def test_line_and_column(self) -> None:
        """Positions are 1-based and track newlines."""
        tokens = list(tokenize("a = 1\n  [s]", "conf.ini"))

        assert tokens[0].position == Position("conf.ini", 0, 1, 1)
        assert tokens[2].position == Position("conf.ini", 4, 1, 5)
        assert tokens[4].position == Position("conf.ini", 8, 2, 3)

    def test_multiline_string_advances_line(self) -> None:
        """A string spanning lines moves the following tokens down."""
        tokens = list(tokenize('a = "x\ny" b'))

        assert tokens[3].kind is TokenKind.IDENT
        assert tokens[3].position.line == 2
        assert tokens[3].position.column == 4

    def test_position_str(self) -> None:
        """Positions format as label:line:column."""
        assert str(Position("conf.ini", 10, 3, 7)) == "conf.ini:3:7"


class TestLexErrors:
    """Tests for lexer failures."""

    def test_unexpected_character(self) -> None:
        """Characters outside every rule raise LexError with a position."""
        with pytest.raises(LexError, match="unexpected character '@'") as excinfo:
            list(tokenize("a = 1\nb = @", "conf.ini"))

        assert excinfo.value.position.line == 2
        assert excinfo.value.position.column == 5
        assert str(excinfo.value).startswith("conf.ini:2:5: ")

    def test_unterminated_string(self) -> None:
        """A string without its closing quote is reported as such."""
        with pytest.raises(LexError, match="unterminated string literal"):
            list(tokenize('a = "open'))

    @pytest.mark.parametrize("text", ["a = 1.", "a = 1.2.3", "a = 12ab", "a = 3_0"])
    def test_malformed_number(self, text: str) -> None:
        """Numbers running into other characters are rejected."""
        with pytest.raises(LexError, match="malformed number literal"):
            list(tokenize(text))

    def test_signed_number_is_rejected(self) -> None:
        """Numbers carry no sign."""
        with pytest.raises(LexError, match="unexpected character '-'"):
            list(tokenize("a = -1"))

    def test_lex_error_is_a_parse_error(self) -> None:
        """Callers can catch every per-input failure as ParseError."""
        assert issubclass(LexError, ParseError)

    def test_tokens_before_error_are_yielded(self) -> None:
        """Tokenization is lazy; the error surfaces at the bad offset."""
        stream = tokenize("a = @")

        assert next(stream).kind is TokenKind.IDENT
        assert next(stream).kind is TokenKind.EQUALS
        with pytest.raises(LexError):
            next(stream)


class TestTokenizer:
    """Tests for the restartable Tokenizer."""

    def test_iterates_more_than_once(self) -> None:
        """Every iteration starts over from the beginning."""
        tokenizer = Tokenizer("[s]\nk = 1\n", "conf.ini")

        first = list(tokenizer)
        second = list(tokenizer)

        assert first == second
        assert first[0].position.source_label == "conf.ini"


class TestCompileRules:
    """Tests for lexer rule validation."""

    def test_shipped_rules_are_valid(self) -> None:
        """The rule table used at import time compiles cleanly."""
        assert compile_rules(LEXER_RULES).pattern

    def test_rejects_duplicate_rule(self) -> None:
        """Rule names must be unique."""
        with pytest.raises(GrammarDefinitionError, match="duplicate lexer rule"):
            compile_rules(LEXER_RULES + (("IDENT", "[a-z]+"),))

    def test_rejects_unknown_kind(self) -> None:
        """Rule names must name a token kind."""
        with pytest.raises(GrammarDefinitionError, match="does not name a token kind"):
            compile_rules(LEXER_RULES + (("COLON", ":"),))

    def test_rejects_empty_match(self) -> None:
        """A rule matching the empty string would loop forever."""
        rules = tuple((name, "x*" if name == "EQUALS" else pattern) for name, pattern in LEXER_RULES)

        with pytest.raises(GrammarDefinitionError, match="matches the empty string"):
            compile_rules(rules)

    def test_rejects_bad_pattern(self) -> None:
        """Rule patterns must compile."""
        rules = tuple((name, "[" if name == "EQUALS" else pattern) for name, pattern in LEXER_RULES)

        with pytest.raises(GrammarDefinitionError, match="does not compile"):
            compile_rules(rules)

    def test_rejects_missing_kind(self) -> None:
        """Every token kind needs a rule."""
        rules = tuple(rule for rule in LEXER_RULES if rule[0] != "COMMENT")

        with pytest.raises(GrammarDefinitionError, match="no lexer rule for COMMENT"):
            compile_rules(rules)
