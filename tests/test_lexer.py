"""Tokenizer behaviour: token kinds, positions and indentation tracking."""

from __future__ import annotations

import pytest

from plainyaml import Lexer, TokenType, tokenize


def kinds(source: str, **config) -> list[TokenType]:
    return [token.type for token in tokenize(source, config=config or None)]


def texts(source: str) -> list[str]:
    return [token.text for token in tokenize(source)]


def test_simple_pair_positions():
    tokens = tokenize("key: value")
    assert [(t.type, t.text, t.line, t.column) for t in tokens] == [
        (TokenType.IDENTIFIER, "key", 1, 1),
        (TokenType.COLON, ":", 1, 4),
        (TokenType.WHITESPACE, " ", 1, 5),
        (TokenType.IDENTIFIER, "value", 1, 6),
    ]


def test_indent_and_dedent_are_balanced():
    tokens = tokenize("a:\n  b: c\n")
    assert [t.type for t in tokens] == [
        TokenType.IDENTIFIER,
        TokenType.COLON,
        TokenType.NEWLINE,
        TokenType.INDENT,
        TokenType.IDENTIFIER,
        TokenType.COLON,
        TokenType.WHITESPACE,
        TokenType.IDENTIFIER,
        TokenType.NEWLINE,
        TokenType.DEDENT,
    ]
    assert tokens[3].text == "  "
    assert tokens[4].column == 3


def test_blank_lines_do_not_change_indentation():
    token_types = kinds("a:\n  b: c\n\n  d: e")
    assert token_types.count(TokenType.INDENT) == 1
    assert token_types.count(TokenType.DEDENT) == 1
    assert token_types[-1] is TokenType.DEDENT


def test_hyphen_needs_a_separator():
    assert kinds("- item") == [TokenType.HYPHEN, TokenType.WHITESPACE, TokenType.IDENTIFIER]
    assert texts("-5") == ["-5"]
    assert kinds("-") == [TokenType.HYPHEN]


def test_document_marker_is_an_identifier():
    tokens = tokenize("---\na: b")
    assert tokens[0].type is TokenType.IDENTIFIER
    assert tokens[0].text == "---"


def test_scalar_keeps_inner_spaces_and_stops_before_comment():
    tokens = tokenize("key: hello world # note")
    assert [(t.type, t.text) for t in tokens[3:]] == [
        (TokenType.IDENTIFIER, "hello world"),
        (TokenType.WHITESPACE, " "),
        (TokenType.COMMENT, "# note"),
    ]


def test_colon_splits_scalar_runs():
    assert texts("url: http://example.com")[3:] == ["http", ":", "//example.com"]


@pytest.mark.parametrize(
    "source, expected",
    [
        ('"a\\"b" rest', '"a\\"b"'),
        ("'it''s' rest", "'it''s'"),
        ('"unterminated\nnext', '"unterminated'),
    ],
)
def test_quoted_strings_keep_raw_text(source, expected):
    token = tokenize(source)[0]
    assert token.type is TokenType.STRING
    assert token.text == expected


def test_block_scalar_indicators():
    assert kinds("key: |-")[3:] == [TokenType.PIPE, TokenType.HYPHEN]
    assert kinds("key: >+")[3:] == [TokenType.GREATER_THAN, TokenType.IDENTIFIER]


def test_crlf_line_endings():
    tokens = tokenize("a: b\r\nc: d")
    assert all("\r" not in t.text for t in tokens)
    key = [t for t in tokens if t.text == "c"][0]
    assert (key.line, key.column) == (2, 1)


def test_tab_width_drives_columns():
    tokens = Lexer("a:\n\tb: c", config={"tab_width": 8}).tokenize()
    key = [t for t in tokens if t.text == "b"][0]
    assert key.column == 9


def test_unclosed_indentation_is_closed_at_end_of_input():
    tokens = tokenize("a:\n  b:\n    c: d")
    assert [t.type for t in tokens].count(TokenType.INDENT) == 2
    assert [t.type for t in tokens[-2:]] == [TokenType.DEDENT, TokenType.DEDENT]
