"""
DOM - Document Object Model for the archiver

Every parsed outline document is a tree of Nodes. The node type is a closed
tag; all variants share the same fields:

- root      level 0, no text, owns one content holder then top-level sections
- section   heading line text, level = heading depth, owns one content holder
            then nested sections
- content   structural holder for the blocks between a heading and the next
- list_item bullet/numbered line (indentation stripped), may nest list items
- text      any other line

Key invariant: a node is owned by exactly one parent. `parent` is a back-pointer
only; ownership is the parent's `children` list.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal

NodeType = Literal["root", "section", "content", "list_item", "text"]

LEAF_TYPES = ("list_item", "text")


@dataclass(eq=False)
class Node:
    """A node in the outline tree."""
    type: NodeType
    level: int = 0
    text: str | None = None
    children: list[Node] = field(default_factory=list)
    parent: Node | None = field(default=None, repr=False)

    @property
    def is_leaf(self) -> bool:
        return self.type in LEAF_TYPES

    @property
    def content(self) -> Node:
        """The content holder of a root or section."""
        if self.type not in ("root", "section"):
            raise TypeError(f"{self.type} node has no content holder")
        return self.children[0]

    @property
    def sections(self) -> list[Node]:
        """Nested sections of a root or section, in document order."""
        return [child for child in self.children if child.type == "section"]

    def depth_first(self) -> Iterator[Node]:
        """Traverse tree depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.depth_first()

    def append(self, child: Node) -> Node:
        """Append a child as the last one and return it for chaining."""
        child.parent = self
        self.children.append(child)
        return child

    def append_first(self, child: Node) -> Node:
        child.parent = self
        self.children.insert(0, child)
        return child

    def remove(self, child: Node) -> Node:
        """Detach a child, clearing its back-pointer."""
        self.children.remove(child)
        child.parent = None
        return child

    def shift_level(self, delta: int) -> None:
        """Shift the level of this node and every descendant by delta."""
        for node in self.depth_first():
            node.level += delta


def make_root() -> Node:
    root = Node(type="root", level=0)
    root.append(make_content())
    return root


def make_section(text: str, level: int) -> Node:
    section = Node(type="section", level=level, text=text)
    section.append(make_content())
    return section


def make_content() -> Node:
    return Node(type="content", level=0)


def make_list_item(text: str, level: int) -> Node:
    return Node(type="list_item", level=level, text=text)


def make_text(text: str, level: int = 1) -> Node:
    return Node(type="text", level=level, text=text)
