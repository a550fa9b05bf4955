"""
Outline parser.

Two passes over a document's lines:

- SectionParser groups lines by ATX heading depth (H1 > H2 > H3 > ...), each
  section owning the lines up to the next heading of the same or lower depth.
- BlockParser turns the lines of one section into a tree of list items and
  text lines, recovering nesting from indentation alone.

Every line is accepted. Anything that is neither a heading, a list item nor an
indented continuation line is a top-level text line.
"""

from __future__ import annotations

import logging
import math
import re

from .config import IndentationConfig
from .dom import Node, make_content, make_list_item, make_root, make_section, make_text
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# ATX heading: # to ###### followed by whitespace
HEADING_PATTERN = re.compile(r"^(?P<token>#{1,6})\s")

# Bullet or numbered marker after pairs of spaces or tabs
LIST_ITEM_PATTERN = re.compile(r"^(?P<indentation>(?: {2}|\t)*)(?:[-*]|\d+\.)\s")

# Indented line that does not start a bullet
INDENTED_LINE_PATTERN = re.compile(r"^(?P<indentation>(?: {2}|\t)+)[^-]")

# Lowest level a list item can have: root/holder is 0, top-level text is 1
LIST_BASE_LEVEL = 2


class BlockParser:
    """Builds the block tree of one section's content."""

    def __init__(self, indentation: IndentationConfig | None = None):
        self.indentation = indentation or IndentationConfig()
        if self.indentation.tab_size < 1:
            raise ConfigError(f"Tab size must be at least 1, got {self.indentation.tab_size}")

    def parse(self, lines: list[str]) -> Node:
        """Parse lines into a content holder owning the block tree."""
        holder = make_content()
        self.build_tree(holder, self.classify(lines))
        return holder

    def classify(self, lines: list[str]) -> list[Node]:
        """Map each line to a detached leaf node tagged with its level."""
        blocks: list[Node] = []
        for line in lines:
            list_match = LIST_ITEM_PATTERN.match(line)
            if list_match:
                indentation = list_match.group("indentation")
                blocks.append(make_list_item(line[len(indentation):], self.level_of(indentation)))
                continue

            indented_match = INDENTED_LINE_PATTERN.match(line)
            if indented_match:
                indentation = indented_match.group("indentation")
                blocks.append(make_text(line[len(indentation):], self.level_of(indentation)))
                continue

            blocks.append(make_text(line, 1))
        return blocks

    def level_of(self, indentation: str) -> int:
        """Level of a line from its indentation prefix."""
        if self.indentation.use_tab:
            units = len(indentation)
        else:
            units = math.ceil(len(indentation) / self.indentation.tab_size)
        return units + LIST_BASE_LEVEL

    @staticmethod
    def build_tree(holder: Node, blocks: list[Node]) -> None:
        """Attach flat blocks under holder, nesting list items by level."""
        context = holder

        for block in blocks:
            if block.type == "list_item":
                # Climb until the context is shallower than the item, not a
                # fixed number of steps: after an indentation jump (levels
                # 2, 4, then 3) the level-3 item lands under the level-2 one.
                # Never climbs above the holder.
                while context is not holder and context.level >= block.level:
                    context = context.parent
                context.append(block)
                context = block
            elif block.level == 1:
                context = holder
                context.append(block)
            else:
                context.append(block)


class SectionParser:
    """Groups a document into nested heading sections."""

    def __init__(self, block_parser: BlockParser | None = None):
        self.block_parser = block_parser or BlockParser()

    def parse(self, lines: list[str]) -> Node:
        """
        Parse a whole document.

        Structure:
        - root (content holder, then H1.. sections)
          - content: blocks before the first heading
          - section "# A"
            - content: blocks under "# A"
            - section "## B"
              ...
        """
        root = make_root()

        # Stack of open sections; root is the virtual depth-0 section
        section_stack: list[Node] = [root]
        pending: list[str] = []

        def flush_content():
            """Parse accumulated lines into the innermost open section."""
            nonlocal pending
            if pending:
                section = section_stack[-1]
                section.remove(section.content)
                section.append_first(self.block_parser.parse(pending))
                pending = []

        for line in lines:
            heading_match = HEADING_PATTERN.match(line)
            if not heading_match:
                pending.append(line)
                continue

            flush_content()
            depth = len(heading_match.group("token"))

            # Pop stack until we find a shallower section
            while len(section_stack) > 1 and section_stack[-1].level >= depth:
                section_stack.pop()

            section = make_section(line, depth)
            section_stack[-1].append(section)
            section_stack.append(section)

        flush_content()

        logger.debug("Parsed %d lines into %d top-level sections", len(lines), len(root.sections))
        return root
