"""Recursive-descent parser producing plainyaml document trees.

The parser walks a flat token list with a single cursor. Nesting is decided
by token columns: every nested block must start to the right of the key (or
dash) that owns it, which is threaded through the recursive calls as
``min_indent``.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import List, NotRequired, Optional, TypedDict

from plainyaml.lexer import LAYOUT_TOKENS, LexerConfig, Token, TokenType, tokenize
from plainyaml.logger import Logger
from plainyaml.nodes import Node, YamlObject, YamlValue
from plainyaml.utils import resolve_config


class ParseError(Exception):
    def __init__(self, message: str, token: Optional[Token] = None):
        self.message = message
        self.token = token
        if token:
            message = f"{message} at line {token.line}, column {token.column}"
        super().__init__(message)


class UnexpectedEndOfInput(ParseError):
    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"Unexpected end of input, expected {expected}")


class UnexpectedToken(ParseError):
    def __init__(self, token: Token):
        self.kind = token.type
        super().__init__(f"Unexpected token {token.type.name} ({token.text!r})", token)


class ExpectedColonAfterKey(ParseError):
    def __init__(self, key: Token, found: Token):
        self.found = found
        super().__init__(f"Expected ':' after key {key.text!r}, got {found.type.name}", found)


class UnterminatedString(ParseError):
    def __init__(self, token: Token):
        super().__init__(f"Unterminated quoted string {token.text!r}", token)


class ChompMode(Enum):
    STRIP = auto()
    CLIP = auto()
    KEEP = auto()


CHOMP_INDICATORS = {"-": ChompMode.STRIP, "+": ChompMode.KEEP}

ESCAPES = {"n": "\n", "r": "\r", "t": "\t", '"': '"', "\\": "\\", "0": "\0", "/": "/"}

SCALAR_TOKENS = frozenset({TokenType.IDENTIFIER, TokenType.STRING})
BLOCK_SCALAR_TOKENS = frozenset({TokenType.PIPE, TokenType.GREATER_THAN})
LINE_LAYOUT_TOKENS = frozenset({TokenType.WHITESPACE, TokenType.INDENT, TokenType.DEDENT})
LINE_END_TOKENS = frozenset({TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT})


class ParserConfig(TypedDict):
    strip_comments: NotRequired[bool]
    enable_logger: NotRequired[bool]
    lexer_config: NotRequired[LexerConfig]


class ParserConfigRequired(TypedDict):
    strip_comments: bool
    enable_logger: bool
    lexer_config: LexerConfig


DEFAULT_CONFIG: ParserConfigRequired = {"strip_comments": False, "enable_logger": False, "lexer_config": {}}


class Parser:
    def __init__(self, tokens: List[Token], config: Optional[ParserConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "plainyaml.parser", "is_enabled": self.config["enable_logger"]}).logger
        self.tokens = list(tokens)
        self.position = 0
        # comment look-back never crosses the end of the last block scalar
        self._floor = 0

    @property
    def current_token(self) -> Optional[Token]:
        return self.lookahead(0)

    def lookahead(self, distance: int = 1) -> Optional[Token]:
        if 0 <= self.position + distance < len(self.tokens):
            return self.tokens[self.position + distance]
        return None

    def advance(self, steps: int = 1) -> None:
        self.position = min(self.position + steps, len(self.tokens))

    def _is_type(self, token_type: TokenType | frozenset) -> bool:
        token = self.current_token
        if token is None:
            return False
        if isinstance(token_type, frozenset):
            return token.type in token_type
        return token.type is token_type

    def _skip(self, token_types: frozenset) -> None:
        while self._is_type(token_types):
            self.advance()

    def _skip_whitespace(self) -> None:
        self._skip(frozenset({TokenType.WHITESPACE}))

    def _skip_layout(self) -> None:
        self._skip(LAYOUT_TOKENS)

    def _peek_content(self) -> Optional[Token]:
        """First token at or after the cursor that is neither layout nor a comment."""
        for index in range(self.position, len(self.tokens)):
            token = self.tokens[index]
            if token.type not in LAYOUT_TOKENS and token.type is not TokenType.COMMENT:
                return token
        return None

    def _is_key(self) -> bool:
        index = self.position + 1
        while index < len(self.tokens) and self.tokens[index].type is TokenType.WHITESPACE:
            index += 1
        return index < len(self.tokens) and self.tokens[index].type is TokenType.COLON

    def _owns_line(self, index: int) -> bool:
        index -= 1
        while index >= 0 and self.tokens[index].type in LINE_LAYOUT_TOKENS:
            index -= 1
        return index < 0 or self.tokens[index].type is TokenType.NEWLINE

    @staticmethod
    def _comment_text(token: Token) -> str:
        text = token.text[1:]
        return text[1:] if text.startswith(" ") else text

    def _unquote(self, token: Token) -> str:
        text = token.text
        quote = text[0]
        chars: list[str] = []
        index = 1
        while index < len(text):
            char = text[index]
            if quote == '"' and char == "\\" and index + 1 < len(text):
                escaped = text[index + 1]
                chars.append(ESCAPES.get(escaped, "\\" + escaped))
                index += 2
                continue
            if char == quote:
                if quote == "'" and text[index + 1 : index + 2] == "'":
                    chars.append("'")
                    index += 2
                    continue
                return "".join(chars)
            chars.append(char)
            index += 1
        raise UnterminatedString(token)

    def _scalar_value(self, token: Token) -> YamlValue:
        if token.type is TokenType.STRING:
            return self._unquote(token)
        if token.text == "[]":
            return []
        if token.text == "{}":
            return YamlObject()
        return token.text

    def parse(self) -> Node:
        self.logger.info("Parsing started")
        self.position = 0
        self._floor = 0
        self._skip_document_marker()
        if self._peek_content() is None:
            root = Node(value=YamlObject())
        else:
            root = self.parse_value(0)
        trailing = self._collect_trailing_comments()
        if trailing is not None:
            root.inline_comment = trailing if root.inline_comment is None else f"{root.inline_comment}\n{trailing}"
        self._skip_layout()
        if self.current_token is not None:
            raise UnexpectedToken(self.current_token)
        if self.config["strip_comments"]:
            self._strip_comments(root)
        self.logger.info("Parsing complete")
        return root

    def _skip_document_marker(self) -> None:
        self._skip_layout()
        token = self.current_token
        if token is not None and token.type is TokenType.IDENTIFIER and token.text == "---":
            self.logger.debug("Skipping document start marker")
            self.advance()

    def _collect_trailing_comments(self) -> Optional[str]:
        comments = []
        while self.current_token is not None:
            token = self.current_token
            if token.type is TokenType.COMMENT:
                comments.append(self._comment_text(token))
            elif token.type not in LAYOUT_TOKENS:
                break
            self.advance()
        return "\n".join(comments) if comments else None

    def _strip_comments(self, node: Node) -> None:
        node.leading_comment = None
        node.inline_comment = None
        if isinstance(node.value, list):
            for item in node.value:
                self._strip_comments(item)
        elif isinstance(node.value, YamlObject):
            for child in node.value.values():
                self._strip_comments(child)

    def collect_consecutive_comments(self) -> Optional[str]:
        """Collect the comment block that belongs to the node at the cursor.

        Comments already behind the cursor are recovered first, then the
        cursor moves forward over layout and comments. A blank line between
        comments and the node drops everything gathered before it.
        """
        comments, newlines = self._look_back_comments()
        while self.current_token is not None:
            token = self.current_token
            if token.type is TokenType.NEWLINE:
                newlines += 1
                if newlines > 1 and comments:
                    self.logger.debug(f"Blank line at line {token.line} detaches {len(comments)} comment line(s)")
                    comments = []
            elif token.type is TokenType.COMMENT:
                comments.append(self._comment_text(token))
                newlines = 0
            elif token.type not in LAYOUT_TOKENS:
                break
            self.advance()
        return "\n".join(comments) if comments else None

    def _look_back_comments(self) -> tuple[list[str], int]:
        comments: list[str] = []
        newlines = 0
        trailing_newlines = 0
        index = self.position - 1
        while index >= self._floor:
            token = self.tokens[index]
            if token.type is TokenType.NEWLINE:
                newlines += 1
                if newlines > 1:
                    break
            elif token.type is TokenType.COMMENT:
                if not self._owns_line(index):
                    break
                if not comments:
                    trailing_newlines = newlines
                comments.insert(0, self._comment_text(token))
                newlines = 0
            elif token.type not in LINE_LAYOUT_TOKENS:
                break
            index -= 1
        return comments, trailing_newlines

    def _collect_inline_comment(self) -> Optional[str]:
        self._skip_whitespace()
        token = self.current_token
        if token is None or token.type is not TokenType.COMMENT:
            return None
        self.advance()
        return self._comment_text(token)

    def parse_value(self, min_indent: int) -> Node:
        self._skip_layout()
        leading_comment = self.collect_consecutive_comments()
        token = self.current_token
        if token is None:
            raise UnexpectedEndOfInput("a value")
        if token.type is TokenType.HYPHEN:
            return Node(value=self.parse_array(min_indent, leading_comment))
        if token.type in SCALAR_TOKENS:
            if self._is_key():
                return self.parse_object(min_indent, leading_comment)
            self.advance()
            value = self._scalar_value(token)
            self.logger.debug(f"Parsed scalar {value!r} at line {token.line}, column {token.column}")
            return Node(value=value, leading_comment=leading_comment, inline_comment=self._collect_inline_comment())
        raise UnexpectedToken(token)

    def parse_object(self, min_indent: int, leading_comment: Optional[str] = None) -> Node:
        obj = YamlObject()
        first_column: Optional[int] = None
        while True:
            mark = self.position
            comment = self.collect_consecutive_comments()
            if first_column is None and comment is None:
                comment = leading_comment
            key_token = self.current_token
            if not self._starts_key(key_token, min_indent, first_column):
                self.position = mark
                break
            assert key_token is not None
            if first_column is None:
                first_column = key_token.column
            key = self._unquote(key_token) if key_token.type is TokenType.STRING else key_token.text
            self.advance()
            self._skip_whitespace()
            colon = self.current_token
            if colon is None:
                raise UnexpectedEndOfInput(f"':' after key {key!r}")
            if colon.type is not TokenType.COLON:
                raise ExpectedColonAfterKey(key_token, colon)
            self.advance()
            value = self._parse_mapping_value(key_token)
            if comment is not None:
                value.leading_comment = comment
            self.logger.debug(f"Parsed key {key!r} at line {key_token.line}, column {key_token.column}")
            obj.insert(key, value)
        return Node(value=obj)

    def _starts_key(self, token: Optional[Token], min_indent: int, first_column: Optional[int]) -> bool:
        if token is None or token.type not in SCALAR_TOKENS:
            return False
        if min_indent > 0 and token.column <= min_indent:
            return False
        return first_column is None or token.column == first_column

    def _parse_mapping_value(self, key_token: Token) -> Node:
        self._skip_whitespace()
        token = self.current_token
        if token is None:
            return Node(value="")
        if token.type in BLOCK_SCALAR_TOKENS:
            self.advance()
            return self.parse_multiline_string(key_token.column, token.type is TokenType.PIPE)
        if token.type in LINE_END_TOKENS or token.type is TokenType.COMMENT:
            return self._parse_nested_value(key_token.column, compact_sequence=True)
        return self.parse_inline_value()

    def _parse_nested_value(self, column: int, compact_sequence: bool) -> Node:
        inline_comment = self._collect_inline_comment()
        if self._has_nested_content(column, compact_sequence):
            node = self.parse_value(column)
        else:
            node = Node(value="")
        if inline_comment is not None:
            node.inline_comment = inline_comment
        return node

    def _has_nested_content(self, column: int, compact_sequence: bool) -> bool:
        token = self._peek_content()
        if token is None:
            return False
        if token.column > column:
            return True
        return compact_sequence and token.type is TokenType.HYPHEN and token.column == column

    def parse_inline_value(self) -> Node:
        first = self.current_token
        if first is not None and first.type is TokenType.STRING:
            self.advance()
            return Node(value=self._unquote(first), inline_comment=self._collect_inline_comment())

        parts: list[str] = []
        while self.current_token is not None:
            token = self.current_token
            if token.type is TokenType.COMMENT or token.type in LINE_END_TOKENS:
                break
            parts.append(" " if token.type is TokenType.WHITESPACE else token.text)
            self.advance()
        while parts and parts[-1] == " ":
            parts.pop()

        if len(parts) == 1 and first is not None and first.type is TokenType.IDENTIFIER:
            value = self._scalar_value(first)
        else:
            value = "".join(parts)
        return Node(value=value, inline_comment=self._collect_inline_comment())

    def parse_array(self, min_indent: int, leading_comment: Optional[str] = None) -> List[Node]:
        items: List[Node] = []
        column: Optional[int] = None
        while True:
            mark = self.position
            comment = leading_comment if column is None else self.collect_consecutive_comments()
            hyphen = self.current_token
            if (
                hyphen is None
                or hyphen.type is not TokenType.HYPHEN
                or hyphen.column < min_indent
                or (column is not None and hyphen.column != column)
            ):
                self.position = mark
                break
            column = hyphen.column
            self.advance()
            item = self._parse_sequence_item(hyphen)
            if comment is not None:
                item.leading_comment = comment
            self.logger.debug(f"Parsed sequence item {len(items)} at line {hyphen.line}")
            items.append(item)
        return items

    def _parse_sequence_item(self, hyphen: Token) -> Node:
        self._skip_whitespace()
        token = self.current_token
        if token is None:
            return Node(value="")
        if token.type in BLOCK_SCALAR_TOKENS:
            self.advance()
            return self.parse_multiline_string(hyphen.column, token.type is TokenType.PIPE)
        if token.type in LINE_END_TOKENS or token.type is TokenType.COMMENT:
            return self._parse_nested_value(hyphen.column, compact_sequence=False)
        return self.parse_value(hyphen.column)

    def parse_multiline_string(self, base_indent: int, is_literal: bool) -> Node:
        self._skip_whitespace()
        chomp_mode = ChompMode.CLIP
        token = self.current_token
        if token is not None and token.type in (TokenType.HYPHEN, TokenType.IDENTIFIER) and token.text in CHOMP_INDICATORS:
            chomp_mode = CHOMP_INDICATORS[token.text]
            self.advance()
        inline_comment = self._collect_inline_comment()
        while self.current_token is not None and self.current_token.type is not TokenType.NEWLINE:
            self.logger.debug(f"Ignoring {self.current_token.text!r} after block scalar indicator")
            self.advance()
        self.advance()

        lines: list[str] = []
        content_column: Optional[int] = None
        while True:
            line_start = self.position
            self._skip(LINE_LAYOUT_TOKENS)
            token = self.current_token
            if token is None:
                break
            if token.type is TokenType.NEWLINE:
                lines.append("")
                self.advance()
                continue
            if token.column <= base_indent:
                self.position = line_start
                break
            if content_column is None:
                content_column = token.column
            parts = [" " * max(token.column - content_column, 0)]
            while self.current_token is not None and self.current_token.type not in LINE_END_TOKENS:
                parts.append(self.current_token.text)
                self.advance()
            lines.append("".join(parts))
            if self._is_type(TokenType.NEWLINE):
                self.advance()
        self._floor = self.position

        if content_column is None:
            text = ""
        elif is_literal:
            text = self._chomp_literal("\n".join(lines), chomp_mode)
        else:
            text = self._chomp_folded(self._fold(lines), chomp_mode)
        self.logger.debug(f"Parsed {'literal' if is_literal else 'folded'} block scalar with {len(lines)} line(s)")
        return Node(value=text, inline_comment=inline_comment)

    @staticmethod
    def _fold(lines: list[str]) -> str:
        result = ""
        prev_empty = False
        for index, line in enumerate(lines):
            if not line:
                if not prev_empty and index > 0:
                    result += "\n"
                prev_empty = True
                continue
            if index > 0 and not prev_empty:
                result += " "
            result += line.lstrip()
            prev_empty = False
        return result

    @staticmethod
    def _chomp_literal(text: str, chomp_mode: ChompMode) -> str:
        match chomp_mode:
            case ChompMode.STRIP:
                return text.rstrip("\n")
            case ChompMode.CLIP:
                while text.endswith("\n\n"):
                    text = text[:-1]
                if text and not text.endswith("\n"):
                    text += "\n"
                return text
            case ChompMode.KEEP:
                if text and not text.endswith("\n"):
                    text += "\n"
                return text

    @staticmethod
    def _chomp_folded(text: str, chomp_mode: ChompMode) -> str:
        match chomp_mode:
            case ChompMode.STRIP:
                return text.rstrip("\n ")
            case ChompMode.CLIP:
                text = text.rstrip("\n ")
                return text + "\n" if text else text
            case ChompMode.KEEP:
                if text and not text.endswith("\n"):
                    text += "\n"
                return text


def parse(text: str, config: Optional[ParserConfig] = None) -> Node:
    """Parse ``text`` into a :class:`Node`; every scalar comes back as ``str``."""
    resolved = resolve_config(config or {}, DEFAULT_CONFIG)
    tokens = tokenize(text, config=resolved["lexer_config"])
    return Parser(tokens, config=resolved).parse()


__all__ = [
    "ParseError",
    "UnexpectedEndOfInput",
    "UnexpectedToken",
    "ExpectedColonAfterKey",
    "UnterminatedString",
    "Parser",
    "ParserConfig",
    "parse",
]
