"""
Task extraction.

Collects matching list items from a section tree, skipping whole sections the
section filter rejects. Matching items are detached from their parents and
carry their nested children with them.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from .dom import Node

BlockFilter = Callable[[Node], bool]
SectionFilter = Callable[[Node], bool]
# Called with (block, section it was found in) before the block is detached
ExtractHook = Callable[[Node, Node], None]

COMPLETED_TASK_PATTERN = re.compile(r"^(?:[-*]|\d+\.) \[x\]")
CHECKED_TASK_PATTERN = re.compile(r"^(?:[-*]|\d+\.) \[[^ ]\]")


def build_completed_task_pattern(archive_all_checked_task_types: bool = False) -> re.Pattern[str]:
    """Pattern for a list item text that counts as done."""
    if archive_all_checked_task_types:
        return CHECKED_TASK_PATTERN
    return COMPLETED_TASK_PATTERN


def is_completed_task(node: Node, pattern: re.Pattern[str] = COMPLETED_TASK_PATTERN) -> bool:
    return node.type == "list_item" and pattern.match(node.text or "") is not None


def extract_blocks_recursively(
    section: Node,
    block_filter: BlockFilter,
    section_filter: SectionFilter,
    on_extract: ExtractHook | None = None,
) -> list[Node]:
    """
    Detach every block matching block_filter, in document order.

    The root is always visited. Nested sections are visited only when
    section_filter accepts them; a rejected section's subtree is left alone.
    on_extract, when given, sees every matching block with the section (or
    root) it was found in.
    """
    if section.type == "section" and not section_filter(section):
        return []

    extracted = _extract_blocks(section.content, block_filter)
    if on_extract is not None:
        for block in extracted:
            on_extract(block, section)
    for child in section.sections:
        extracted.extend(extract_blocks_recursively(child, block_filter, section_filter, on_extract))
    return extracted


def _extract_blocks(node: Node, block_filter: BlockFilter) -> list[Node]:
    extracted: list[Node] = []
    # Copy: children are detached while iterating
    for child in list(node.children):
        if block_filter(child):
            extracted.append(node.remove(child))
        else:
            extracted.extend(_extract_blocks(child, block_filter))
    return extracted
