"""
Date tree merge.

Finds or creates a chain of containers (headings, then list items) below the
archive section and appends archived blocks under the last one. Containers
are matched by their exact resolved text, so running the same chain again on
the same day reuses the existing containers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from .config import NEWEST_FIRST, NEWEST_LAST, TASK_SORT_ORDERS
from .dom import Node, make_list_item, make_section, make_text
from .exceptions import ConfigError
from .parser import LIST_BASE_LEVEL
from .placeholders import PlaceholderResolver

logger = logging.getLogger(__name__)

ContainerKind = Literal["heading", "list_item"]

LIST_MARKER = "- "

MAX_HEADING_DEPTH = 6


@dataclass
class ContainerTemplate:
    """
    One level of the destination hierarchy.

    depth is the nesting index below the archive section (0 = first level).
    Heading containers take their depth from the section they are created in,
    so they always nest one level below it.
    """
    kind: ContainerKind
    text: str
    depth: int
    date_format: str = ""

    def render(
        self,
        placeholders: PlaceholderResolver,
        heading_depth: int = 1,
        source_path: str | None = None,
    ) -> str:
        resolved = placeholders.resolve(self.text, date_format=self.date_format, source_path=source_path)
        if self.kind == "heading":
            return f"{'#' * heading_depth} {resolved}"
        return f"{LIST_MARKER}{resolved}"


def add_newlines_to_section_if_needed(section: Node) -> None:
    """Pad with one blank line when the last block above a new heading is not blank."""
    last_section = section.sections[-1] if section.sections else section
    blocks = last_section.content.children
    if blocks and (blocks[-1].text or "").strip():
        last_section.content.append(make_text(""))


def place_block(parent: Node, block: Node) -> Node:
    """Append block under parent, re-leveling it and its descendants."""
    target_level = LIST_BASE_LEVEL if parent.type == "content" else parent.level + 1
    block.shift_level(target_level - block.level)
    return parent.append(block)


class DateTreeResolver:
    """Merges archived blocks into a date-keyed container hierarchy."""

    def __init__(
        self,
        templates: list[ContainerTemplate] | None = None,
        placeholders: PlaceholderResolver | None = None,
        task_sort_order: str = NEWEST_LAST,
        sort_alphabetically: bool = False,
        add_newlines_around_headings: bool = False,
    ):
        if task_sort_order not in TASK_SORT_ORDERS:
            raise ConfigError(f"Unknown task sort order: {task_sort_order!r}")
        self.templates = templates or []
        self.placeholders = placeholders or PlaceholderResolver()
        self.task_sort_order = task_sort_order
        self.sort_alphabetically = sort_alphabetically
        self.add_newlines_around_headings = add_newlines_around_headings
        _check_chain(self.templates)

    def merge_new_blocks_with_date_tree(
        self,
        destination: Node,
        blocks: list[Node],
        source_path: str | None = None,
    ) -> Node:
        """
        Resolve the container chain under destination and append blocks there.

        destination is a section (or root) or a content holder. Returns the
        container the blocks were appended to. source_path feeds the
        {{sourceFileName}} and {{sourceFilePath}} placeholders of templates.
        """
        container = destination
        for template in self.templates:
            container = self._find_or_create(container, template, source_path)

        if container.type in ("root", "section"):
            container = container.content

        for block in self._ordered(blocks):
            place_block(container, block)
        return container

    def _ordered(self, blocks: list[Node]) -> list[Node]:
        ordered = list(blocks)
        if self.task_sort_order == NEWEST_FIRST:
            ordered.reverse()
        if self.sort_alphabetically:
            ordered.sort(key=lambda block: block.text or "")
        return ordered

    def _find_or_create(self, container: Node, template: ContainerTemplate, source_path: str | None) -> Node:
        if template.kind == "heading":
            if container.type not in ("root", "section"):
                raise ConfigError("Heading templates must come before list item templates")
            depth = container.level + 1
            if depth > MAX_HEADING_DEPTH:
                raise ConfigError(
                    f"Heading container below {container.text!r} would need depth {depth}, deeper than 6"
                )
            text = template.render(self.placeholders, depth, source_path)
            for section in container.sections:
                if section.level == depth and section.text == text:
                    return section
            if self.add_newlines_around_headings:
                add_newlines_to_section_if_needed(container)
            logger.debug("Creating heading container %r", text)
            return container.append(make_section(text, depth))

        text = template.render(self.placeholders, source_path=source_path)
        if container.type in ("root", "section"):
            container = container.content
        for child in container.children:
            if child.type == "list_item" and child.text == text:
                return child
        logger.debug("Creating list container %r", text)
        return place_block(container, make_list_item(text, LIST_BASE_LEVEL))


def _check_chain(templates: list[ContainerTemplate]) -> None:
    seen_list_item = False
    for template in templates:
        if template.kind == "list_item":
            seen_list_item = True
        elif seen_list_item:
            raise ConfigError("Heading templates must come before list item templates")
