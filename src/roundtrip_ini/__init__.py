"""roundtrip_ini: edit INI files without losing comments or blank lines."""

from roundtrip_ini.document import Document
from roundtrip_ini.encoder import dumps, render_document
from roundtrip_ini.exceptions import (
    GrammarDefinitionError,
    LexError,
    ParseError,
    RoundtripIniError,
)
from roundtrip_ini.parser import loads, parse
from roundtrip_ini.schemas import NumberValue, Property, Section, StringValue, Value
from roundtrip_ini.tokenizer import Position, Token, Tokenizer, TokenKind, tokenize

__all__ = [
    "Document",
    "GrammarDefinitionError",
    "LexError",
    "NumberValue",
    "ParseError",
    "Position",
    "Property",
    "RoundtripIniError",
    "Section",
    "StringValue",
    "Token",
    "TokenKind",
    "Tokenizer",
    "Value",
    "dumps",
    "loads",
    "parse",
    "render_document",
    "tokenize",
]
