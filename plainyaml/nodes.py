"""Document tree for the plainyaml intermediate representation.

Every scalar is a plain ``str``. Sequences are lists of :class:`Node` and
mappings are :class:`YamlObject` instances, an ordered association list
whose key order is part of the value.
"""

from __future__ import annotations

from typing import Iterator, Union

from pydantic import BaseModel, ConfigDict, Field


class YamlObject(BaseModel):
    pairs: list[tuple[str, "Node"]] = Field(default_factory=list)

    @classmethod
    def from_pairs(cls, pairs) -> "YamlObject":
        obj = cls()
        for key, value in pairs:
            obj.insert(key, value)
        return obj

    def insert(self, key: str, value: "Node") -> "Node | None":
        """Insert ``value`` under ``key``.

        An existing key keeps its position and the replaced node is returned.
        """
        for index, (existing, previous) in enumerate(self.pairs):
            if existing == key:
                self.pairs[index] = (key, value)
                return previous
        self.pairs.append((key, value))
        return None

    def with_entry(self, key: str, value) -> "YamlObject":
        from plainyaml.convert import to_node

        self.insert(key, to_node(value))
        return self

    def get(self, key: str) -> "Node | None":
        for existing, value in self.pairs:
            if existing == key:
                return value
        return None

    def remove(self, key: str) -> "Node | None":
        for index, (existing, value) in enumerate(self.pairs):
            if existing == key:
                del self.pairs[index]
                return value
        return None

    def contains_key(self, key: str) -> bool:
        return any(existing == key for existing, _ in self.pairs)

    def keys(self) -> list[str]:
        return [key for key, _ in self.pairs]

    def values(self) -> list["Node"]:
        return [value for _, value in self.pairs]

    def items(self) -> Iterator[tuple[str, "Node"]]:
        return iter(list(self.pairs))

    def is_empty(self) -> bool:
        return not self.pairs

    def __getitem__(self, key: str) -> "Node":
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    def __len__(self) -> int:
        return len(self.pairs)


YamlValue = Union[str, list["Node"], YamlObject]


class Node(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    value: YamlValue
    leading_comment: str | None = None
    inline_comment: str | None = None

    @classmethod
    def from_value(cls, value: YamlValue) -> "Node":
        return cls(value=value)

    def with_leading_comment(self, comment: str) -> "Node":
        self.leading_comment = comment
        return self

    def with_inline_comment(self, comment: str) -> "Node":
        self.inline_comment = comment
        return self

    def as_str(self) -> str | None:
        return self.value if isinstance(self.value, str) else None

    def as_array(self) -> list["Node"] | None:
        return self.value if isinstance(self.value, list) else None

    def as_object(self) -> YamlObject | None:
        return self.value if isinstance(self.value, YamlObject) else None

    def get(self, key: str) -> "Node | None":
        if isinstance(self.value, YamlObject):
            return self.value.get(key)
        return None

    def is_string(self) -> bool:
        return isinstance(self.value, str)

    def is_array(self) -> bool:
        return isinstance(self.value, list)

    def is_object(self) -> bool:
        return isinstance(self.value, YamlObject)


YamlObject.model_rebuild()
Node.model_rebuild()


__all__ = ["Node", "YamlObject", "YamlValue"]
