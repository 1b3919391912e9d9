"""Emitter turning plainyaml document trees back into text."""

from __future__ import annotations

from typing import NotRequired, Optional, TypedDict

from plainyaml.logger import Logger
from plainyaml.nodes import Node, YamlObject
from plainyaml.utils import resolve_config

QUOTE_TRIGGERS = frozenset(":#[]{},&*!|>'\"%@`~")
RESERVED_WORDS = frozenset({"true", "false", "null"})
ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}


def needs_quoting(value: str) -> bool:
    """Whether ``value`` must be double-quoted to read back as the same string."""
    if not value or value in RESERVED_WORDS:
        return True
    if any(char in QUOTE_TRIGGERS for char in value):
        return True
    if value[0] == " " or value[-1] == " " or value[0] == "-":
        return True
    try:
        float(value)
        return True
    except ValueError:
        pass
    if len(value) > 1 and value[0] == "0" and value[1].isdigit():
        return True
    return any(not char.isprintable() for char in value)


def quote(value: str) -> str:
    return '"' + "".join(ESCAPES.get(char, char) for char in value) + '"'


class EmitterConfig(TypedDict):
    indent_size: NotRequired[int]
    enable_logger: NotRequired[bool]


class EmitterConfigRequired(TypedDict):
    indent_size: int
    enable_logger: bool


DEFAULT_CONFIG: EmitterConfigRequired = {"indent_size": 2, "enable_logger": False}


class Emitter:
    def __init__(self, config: Optional[EmitterConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "plainyaml.emitter", "is_enabled": self.config["enable_logger"]}).logger
        self.indent_size = max(self.config["indent_size"], 1)

    def emit(self, node: Node) -> str:
        self.logger.info("Emitting document")
        lines = self.format_document(node)
        self.logger.info(f"Emitted {len(lines)} line(s)")
        return "\n".join(lines)

    def format_document(self, node: Node) -> list[str]:
        lines = self._comment_lines(node.leading_comment, 0)
        value = node.value
        if isinstance(value, str):
            # only the first comment line fits after a root scalar
            comments = node.inline_comment.split("\n") if node.inline_comment is not None else []
            lines.append(self.format_scalar(value) + self._inline(node.inline_comment))
            if len(comments) > 1:
                lines.extend(self._comment_lines("\n".join(comments[1:]), 0))
            return lines
        if isinstance(value, YamlObject):
            lines.extend(self.format_mapping(value, 0))
        elif value:
            lines.extend(self.format_sequence(value, 0))
        else:
            lines.append("[]")
        lines.extend(self._comment_lines(node.inline_comment, 0))
        return lines

    def format_mapping(self, obj: YamlObject, indent: int) -> list[str]:
        pad = " " * indent
        lines: list[str] = []
        for key, child in obj.items():
            self.logger.debug(f"Emitting key {key!r} at indent {indent}")
            lines.extend(self._comment_lines(child.leading_comment, indent))
            prefix = f"{pad}{self.format_key(key)}:"
            inline = self._inline(child.inline_comment)
            value = child.value
            if isinstance(value, str):
                if self._should_use_multiline(value):
                    lines.append(f"{prefix} {self._block_header(value)}{inline}")
                    lines.extend(self._block_lines(value, indent + self.indent_size))
                else:
                    lines.append(f"{prefix} {self.format_scalar(value)}{inline}")
            elif not value:
                lines.append(f"{prefix} {self._empty_marker(value)}{inline}")
            elif isinstance(value, list):
                lines.append(f"{prefix}{inline}")
                lines.extend(self.format_sequence(value, indent + self.indent_size))
            else:
                lines.append(f"{prefix}{inline}")
                lines.extend(self.format_mapping(value, indent + self.indent_size))
        return lines

    def format_sequence(self, items: list[Node], indent: int) -> list[str]:
        pad = " " * indent
        lines: list[str] = []
        for item in items:
            lines.extend(self._comment_lines(item.leading_comment, indent))
            inline = self._inline(item.inline_comment)
            value = item.value
            if isinstance(value, str):
                if self._should_use_multiline(value):
                    lines.append(f"{pad}- {self._block_header(value)}{inline}")
                    lines.extend(self._block_lines(value, indent + self.indent_size))
                else:
                    lines.append(f"{pad}- {self.format_scalar(value)}{inline}")
            elif not value:
                lines.append(f"{pad}- {self._empty_marker(value)}{inline}")
            elif isinstance(value, list):
                lines.append(f"{pad}-{inline}")
                lines.extend(self.format_sequence(value, indent + self.indent_size))
            else:
                # mapping keys line up two columns right of the dash
                nested = self.format_mapping(value, indent + 2)
                first_child = value.values()[0]
                if item.inline_comment is None and first_child.leading_comment is None:
                    nested[0] = f"{pad}- {nested[0][indent + 2 :]}"
                else:
                    lines.append(f"{pad}-{inline}")
                lines.extend(nested)
        return lines

    def format_key(self, key: str) -> str:
        return quote(key) if needs_quoting(key) else key

    def format_scalar(self, value: str) -> str:
        return quote(value) if needs_quoting(value) else value

    @staticmethod
    def _empty_marker(value) -> str:
        return "[]" if isinstance(value, list) else "{}"

    def _comment_lines(self, comment: Optional[str], indent: int) -> list[str]:
        if comment is None:
            return []
        pad = " " * indent
        return [f"{pad}# {line}" if line else f"{pad}#" for line in comment.split("\n")]

    @staticmethod
    def _inline(comment: Optional[str]) -> str:
        if comment is None:
            return ""
        first = comment.split("\n", 1)[0]
        return f" # {first}" if first else " #"

    @staticmethod
    def _should_use_multiline(value: str) -> bool:
        if "\n" not in value or "\r" in value:
            return False
        body = value[:-1] if value.endswith("\n") else value
        if not body or body.endswith("\n") or body[0] in " \t\n":
            return False
        for line in body.split("\n"):
            if line and not line.strip():
                return False
            if line.startswith("\t"):
                return False
            if any(not (char.isprintable() or char == "\t") for char in line):
                return False
        return True

    @staticmethod
    def _block_header(value: str) -> str:
        return "|" if value.endswith("\n") else "|-"

    def _block_lines(self, value: str, indent: int) -> list[str]:
        body = value[:-1] if value.endswith("\n") else value
        pad = " " * indent
        return [f"{pad}{line}" if line else "" for line in body.split("\n")]


def emit(node: Node, config: Optional[EmitterConfig] = None) -> str:
    return Emitter(config=config).emit(node)


__all__ = ["Emitter", "EmitterConfig", "emit", "needs_quoting"]
