"""Conversions between plain Python data and plainyaml document trees."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from plainyaml.nodes import Node, YamlObject


def to_node(value: Any) -> Node:
    """Build a :class:`Node` from plain Python data.

    Numbers and booleans are stringified the way they read in YAML
    (``True`` -> ``"true"``) and ``None`` becomes ``"null"``. Mappings keep
    their iteration order.
    """
    if isinstance(value, Node):
        return value
    if isinstance(value, YamlObject):
        return Node(value=value)
    if isinstance(value, str):
        return Node(value=value)
    if isinstance(value, bool):
        return Node(value="true" if value else "false")
    if isinstance(value, (int, float)):
        return Node(value=str(value))
    if value is None:
        return Node(value="null")
    if isinstance(value, Mapping):
        return Node(value=_convert_mapping(value))
    if isinstance(value, (list, tuple)):
        return Node(value=[to_node(item) for item in value])
    raise TypeError(f"Cannot convert {type(value).__name__} to a YAML node")


def _convert_mapping(mapping: Mapping) -> YamlObject:
    obj = YamlObject()
    for key, child in mapping.items():
        obj.insert(str(key), to_node(child))
    return obj


def to_python(node: Node) -> str | list | dict:
    """Strip comments and return the tree as ``str``/``list``/``dict``."""
    value = node.value
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return [to_python(item) for item in value]
    return {key: to_python(child) for key, child in value.items()}


__all__ = ["to_node", "to_python"]
