"""Parser and emitter for a string-only, comment-preserving YAML dialect."""

from .nodes import Node, YamlObject, YamlValue
from .convert import to_node, to_python
from .lexer import Lexer, LexerConfig, Token, TokenType, tokenize
from .parser import (
    ExpectedColonAfterKey,
    ParseError,
    Parser,
    ParserConfig,
    UnexpectedEndOfInput,
    UnexpectedToken,
    UnterminatedString,
    parse,
)
from .emitter import Emitter, EmitterConfig, emit

__all__ = [
    "parse",
    "emit",
    "tokenize",
    "Node",
    "YamlObject",
    "YamlValue",
    "to_node",
    "to_python",
    "Lexer",
    "Parser",
    "Emitter",
    "Token",
    "TokenType",
    "ParseError",
    "UnexpectedEndOfInput",
    "UnexpectedToken",
    "ExpectedColonAfterKey",
    "UnterminatedString",
    "LexerConfig",
    "ParserConfig",
    "EmitterConfig",
]
