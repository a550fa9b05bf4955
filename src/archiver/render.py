"""
Serializer: outline tree back to lines.

Stored text is emitted unchanged. Indentation is rebuilt from each node's
level, the inverse of BlockParser.level_of.
"""

from __future__ import annotations

from .config import IndentationConfig
from .dom import Node
from .parser import LIST_BASE_LEVEL


def build_indentation(settings: IndentationConfig) -> str:
    """One indentation unit as configured."""
    if settings.use_tab:
        return "\t"
    return " " * settings.tab_size


def stringify(node: Node, indentation: str = "  ") -> list[str]:
    """Walk the tree depth-first and return its lines in document order."""
    lines: list[str] = []
    _emit(node, indentation, lines)
    return lines


def _emit(node: Node, indentation: str, lines: list[str]) -> None:
    if node.type == "section":
        lines.append(node.text or "")
    elif node.is_leaf:
        units = max(node.level - LIST_BASE_LEVEL, 0)
        lines.append(indentation * units + (node.text or ""))

    for child in node.children:
        _emit(child, indentation, lines)
