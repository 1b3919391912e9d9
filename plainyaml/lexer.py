"""Indentation-sensitive lexer for the plainyaml dialect."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import NotRequired, Optional, TypedDict

from plainyaml.logger import Logger
from plainyaml.utils import resolve_config


class TokenType(Enum):
    IDENTIFIER = auto()
    STRING = auto()
    COLON = auto()
    HYPHEN = auto()
    COMMENT = auto()
    NEWLINE = auto()
    WHITESPACE = auto()
    INDENT = auto()
    DEDENT = auto()
    PIPE = auto()
    GREATER_THAN = auto()


LAYOUT_TOKENS = frozenset({TokenType.WHITESPACE, TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT})


@dataclass(frozen=True, slots=True)
class Token:
    type: TokenType
    text: str
    line: int
    column: int


class LexerConfig(TypedDict):
    tab_width: NotRequired[int]
    enable_logger: NotRequired[bool]


class LexerConfigRequired(TypedDict):
    tab_width: int
    enable_logger: bool


DEFAULT_CONFIG: LexerConfigRequired = {
    "tab_width": 4,
    "enable_logger": False,
}

INLINE_SPACE = {" ", "\t"}
LINE_BREAKS = {"\n", "\r"}
SCALAR_TERMINATORS = {":", "#", "\n", "\r"}


class Lexer:
    def __init__(self, input: str, config: Optional[LexerConfig] = None):
        self.input = input
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "plainyaml.lexer", "is_enabled": self.config["enable_logger"]}).logger
        self.tokens: list[Token] = []
        self._indent_stack = [0]
        self._at_line_start = True
        self._start = 0
        self.position = 0
        self.line = 1
        self.column = 1

    @property
    def has_more_chars(self) -> bool:
        return self.position < len(self.input)

    @property
    def char(self) -> str:
        return self.input[self.position] if self.has_more_chars else "\0"

    @property
    def current_value(self) -> str:
        return self.input[self._start : self.position]

    def _advance(self, steps: int = 1) -> None:
        for _ in range(steps):
            if not self.has_more_chars:
                return
            if self.char == "\n":
                self.line += 1
                self.column = 1
            elif self.char == "\t":
                self.column += self.config["tab_width"]
            else:
                self.column += 1
            self.position += 1

    def _consume_while(self, condition) -> None:
        while self.has_more_chars and condition(self.char):
            self._advance()

    def _peek(self, steps: int = 1) -> str:
        if self.position + steps < len(self.input):
            return self.input[self.position + steps]
        return "\0"

    def _add_token(self, token_type: TokenType, text: str, line: int, column: int) -> None:
        self.logger.debug(f"Adding token {token_type.name} with text {text!r} at line {line}, column {column}")
        self.tokens.append(Token(token_type, text, line, column))

    def _is_separator(self, char: str) -> bool:
        return char in INLINE_SPACE or char in LINE_BREAKS or char == "\0"

    def tokenize(self) -> list[Token]:
        self.logger.info("Starting tokenization")
        while self.has_more_chars:
            if self._at_line_start:
                self._handle_indentation()
                continue
            char = self.char
            if char == "\n":
                self._handle_newline()
            elif char == "\r":
                # CRLF counts as a single newline; a lone CR is dropped
                self._advance()
            elif char in INLINE_SPACE:
                self._handle_whitespace()
            elif char == "#":
                self._handle_comment()
            elif char == ":":
                self._add_token(TokenType.COLON, ":", self.line, self.column)
                self._advance()
            elif char == "|":
                self._add_token(TokenType.PIPE, "|", self.line, self.column)
                self._advance()
            elif char == ">":
                self._add_token(TokenType.GREATER_THAN, ">", self.line, self.column)
                self._advance()
            elif char == "-" and self._is_separator(self._peek()):
                self._add_token(TokenType.HYPHEN, "-", self.line, self.column)
                self._advance()
            elif char == "-" and self.input.startswith("---", self.position) and self._is_separator(self._peek(3)):
                self._add_token(TokenType.IDENTIFIER, "---", self.line, self.column)
                self._advance(3)
            elif char in ('"', "'"):
                self._handle_string()
            elif char.isprintable():
                self._handle_scalar()
            else:
                self.logger.debug(f"Skipping unrecognized character {char!r} at line {self.line}, column {self.column}")
                self._advance()
        while len(self._indent_stack) > 1:
            self._indent_stack.pop()
            self._add_token(TokenType.DEDENT, "", self.line, self.column)
        self.logger.info(f"Tokenization complete, {len(self.tokens)} tokens")
        return self.tokens

    def _handle_indentation(self) -> None:
        self._at_line_start = False
        self._start = self.position
        line = self.line
        width = 0
        while self.has_more_chars and self.char in INLINE_SPACE:
            width += self.config["tab_width"] if self.char == "\t" else 1
            self._advance()
        # blank lines do not take part in indentation
        if not self.has_more_chars or self.char in LINE_BREAKS:
            return
        if width > self._indent_stack[-1]:
            self._indent_stack.append(width)
            self._add_token(TokenType.INDENT, self.current_value, line, 1)
            return
        while width < self._indent_stack[-1]:
            self._indent_stack.pop()
            self._add_token(TokenType.DEDENT, "", line, 1)

    def _handle_newline(self) -> None:
        self._add_token(TokenType.NEWLINE, "\n", self.line, self.column)
        self._advance()
        self._at_line_start = True

    def _handle_whitespace(self) -> None:
        self._start = self.position
        line, column = self.line, self.column
        self._consume_while(lambda c: c in INLINE_SPACE)
        self._add_token(TokenType.WHITESPACE, self.current_value, line, column)

    def _handle_comment(self) -> None:
        self._start = self.position
        line, column = self.line, self.column
        self._consume_while(lambda c: c not in LINE_BREAKS)
        self._add_token(TokenType.COMMENT, self.current_value, line, column)

    def _handle_string(self) -> None:
        self._start = self.position
        line, column = self.line, self.column
        quote = self.char
        self._advance()
        while self.has_more_chars and self.char not in LINE_BREAKS:
            char = self.char
            if char == "\\" and quote == '"':
                self._advance()
                if self.has_more_chars and self.char not in LINE_BREAKS:
                    self._advance()
                continue
            self._advance()
            if char == quote:
                if quote == "'" and self.char == "'":
                    self._advance()
                    continue
                break
        self._add_token(TokenType.STRING, self.current_value, line, column)

    def _handle_scalar(self) -> None:
        self._start = self.position
        line, column = self.line, self.column
        while self.has_more_chars:
            char = self.char
            if char in SCALAR_TERMINATORS:
                break
            if char in INLINE_SPACE and self._whitespace_ends_scalar():
                break
            self._advance()
        self._add_token(TokenType.IDENTIFIER, self.current_value.rstrip(" \t"), line, column)

    def _whitespace_ends_scalar(self) -> bool:
        index = self.position
        while index < len(self.input) and self.input[index] in INLINE_SPACE:
            index += 1
        return index >= len(self.input) or self.input[index] in SCALAR_TERMINATORS


def tokenize(source: str, config: Optional[LexerConfig] = None) -> list[Token]:
    return Lexer(source, config=config).tokenize()


__all__ = ["Lexer", "LexerConfig", "Token", "TokenType", "LAYOUT_TOKENS", "tokenize"]
