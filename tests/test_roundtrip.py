"""Parse -> emit -> parse keeps values, order and comments."""

from __future__ import annotations

from textwrap import dedent

import pytest

from plainyaml import emit, parse, to_node, to_python

SAMPLES = {
    "config": dedent(
        """\
        # Application config
        name: demo app
        version: 1.0
        enabled: true
        # Servers in rotation
        servers:
          - host: a.example.com
            port: 80
          - host: b.example.com # backup
            port: 8080
        script: |
          echo one
            echo two
        notes: |-
          first

          second
        empty:
        tags: []
        meta: {}
        # trailing
        """
    ),
    "sequence": dedent(
        """\
        # first
        - alpha
        - - nested
          - list
        -
          # inner
          key: value
        - "quoted: value"
        """
    ),
    "comments": dedent(
        """\
        # detached

        # attached
        database: # inline
          # host comment
          host: localhost
          settings:
            # deep
            timeout: 30s
        """
    ),
    "footguns": dedent(
        """\
        octal: 0755
        version: 3.10
        norway: NO
        time: 12:34:56
        tilde: ~
        path: ~/.ssh/config
        url: http://example.com:8080/path
        dash: "-x"
        hash: "a # b"
        """
    ),
    "folded": "text: >\n  one\n  two\n\n  three\nafter: x\n",
}


@pytest.mark.parametrize("name", sorted(SAMPLES))
def test_round_trip_preserves_tree(name):
    first = parse(SAMPLES[name])
    second = parse(emit(first))
    assert second.value == first.value
    assert second.inline_comment == first.inline_comment


@pytest.mark.parametrize("name", sorted(SAMPLES))
def test_emit_is_a_fixed_point_after_one_pass(name):
    once = emit(parse(SAMPLES[name]))
    assert emit(parse(once)) == once


def test_order_preserved_for_many_keys():
    keys = [f"key_{index:02d}" for index in range(30, 0, -1)]
    doc = to_node({key: key.upper() for key in keys})
    assert parse(emit(doc)).as_object().keys() == keys


@pytest.mark.parametrize(
    "value",
    ["0755", "01234", "true", "null", "1e10", "-", "- x", "[]", "{}", "#", "a: b", "", " ", "---", "|", ">", "'", '"', "\\", "x\ty"],
)
def test_quoting_footguns_survive(value):
    doc = to_node({"value": value, "list": [value]})
    assert to_python(parse(emit(doc))) == {"value": value, "list": [value]}


@pytest.mark.parametrize(
    "value",
    ["A\nB", "A\nB\n", "A\n\nB\n", "A\n  indented\nB", "trailing  \nspaces", "A\n\n", "\nleading", "x\r\ny"],
)
def test_multiline_values_survive(value):
    doc = to_node({"text": value, "items": [value, "after"]})
    assert to_python(parse(emit(doc))) == {"text": value, "items": [value, "after"]}


def test_comments_survive():
    source = SAMPLES["comments"]
    doc = parse(emit(parse(source)))
    database = doc.get("database")
    assert database.leading_comment == "attached"
    assert database.inline_comment == "inline"
    assert database.get("host").leading_comment == "host comment"
    assert database.get("settings").get("timeout").leading_comment == "deep"
