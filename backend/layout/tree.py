"""
Layout tree: ordered nested groups of named boxes for one document template.

The process-wide default is frozen; requests call clone() and mutate the copy.
"""
from __future__ import annotations

from typing import Any, Iterator, Sequence, Union

from models import Box

Node = Union["LayoutTree", Box]


class LayoutFrozenError(RuntimeError):
    """Raised on an attempt to mutate a frozen (shared default) layout."""


class LayoutTree:
    def __init__(self, children: dict[str, Node] | None = None, *, frozen: bool = False) -> None:
        self._children: dict[str, Node] = dict(children or {})
        self._frozen = frozen

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, frozen: bool = False) -> "LayoutTree":
        """Build a tree from nested dicts; a dict with a 'w' key is a box."""
        children: dict[str, Node] = {}
        for key, value in data.items():
            if isinstance(value, Box):
                children[key] = value
            elif isinstance(value, dict) and "w" in value:
                children[key] = Box.model_validate(value)
            elif isinstance(value, dict):
                children[key] = cls.from_dict(value, frozen=frozen)
            else:
                raise TypeError(f"Layout node {key!r} must be a dict or Box, got {type(value).__name__}")
        return cls(children, frozen=frozen)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def clone(self) -> "LayoutTree":
        """Deep, mutable copy. Boxes are immutable so they are shared."""
        children: dict[str, Node] = {}
        for key, node in self._children.items():
            children[key] = node.clone() if isinstance(node, LayoutTree) else node
        return LayoutTree(children, frozen=False)

    def keys(self) -> list[str]:
        return list(self._children.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._children

    def __len__(self) -> int:
        return len(self._children)

    def child(self, key: str) -> Node | None:
        return self._children.get(key)

    def get(self, path: Sequence[str]) -> Node | None:
        node: Node | None = self
        for segment in path:
            if not isinstance(node, LayoutTree):
                return None
            node = node.child(segment)
            if node is None:
                return None
        return node

    def box(self, path: Sequence[str]) -> Box | None:
        node = self.get(path)
        return node if isinstance(node, Box) else None

    def _check_mutable(self) -> None:
        if self._frozen:
            raise LayoutFrozenError("Default layout is read-only; clone() it first")

    def ensure_group(self, key: str) -> "LayoutTree":
        """Return child group `key`, creating it if absent. Raises TypeError on a box."""
        self._check_mutable()
        node = self._children.get(key)
        if node is None:
            node = LayoutTree()
            self._children[key] = node
        if not isinstance(node, LayoutTree):
            raise TypeError(f"{key!r} is a box, not a group")
        return node

    def set_box(self, key: str, box: Box) -> None:
        self._check_mutable()
        if isinstance(self._children.get(key), LayoutTree):
            raise TypeError(f"{key!r} is a group, not a box")
        self._children[key] = box

    def iter_boxes(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Box]]:
        for key, node in self._children.items():
            path = prefix + (key,)
            if isinstance(node, LayoutTree):
                yield from node.iter_boxes(path)
            else:
                yield path, node

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, node in self._children.items():
            out[key] = node.to_dict() if isinstance(node, LayoutTree) else node.model_dump(mode="json")
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayoutTree):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"LayoutTree(keys={self.keys()!r}, frozen={self._frozen})"
