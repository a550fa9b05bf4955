"""
Archiver: moves completed tasks of the active document under its archive heading.

One run reads the active document, detaches every completed task outside the
archive section, merges the tasks into the date tree of the archive section
(in the same document or in a separate archive document) and writes the
affected documents back, destination first.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import PurePosixPath

from .config import Config, get_config
from .dom import Node, make_section
from .exceptions import ConfigError, TargetPathConflictError
from .extract import build_completed_task_pattern, extract_blocks_recursively, is_completed_task
from .merge import MAX_HEADING_DEPTH, ContainerTemplate, DateTreeResolver, add_newlines_to_section_if_needed
from .parser import HEADING_PATTERN, BlockParser, SectionParser
from .placeholders import PlaceholderResolver
from .render import build_indentation, stringify
from .storage import MARKDOWN_SUFFIX, Vault

logger = logging.getLogger(__name__)


def build_archive_heading_pattern(archive_heading: str) -> re.Pattern[str]:
    return re.compile(rf"^#{{1,6}}\s+{re.escape(archive_heading)}")


def build_templates(config: Config) -> list[ContainerTemplate]:
    """Container chain from settings: headings first, then list items."""
    templates: list[ContainerTemplate] = []
    if config.archive.archive_under_headings:
        for index, heading in enumerate(config.headings):
            templates.append(ContainerTemplate("heading", heading.text, index, heading.date_format))
    if config.archive.archive_under_list_items:
        for index, item in enumerate(config.list_items):
            templates.append(ContainerTemplate("list_item", item.text, index, item.date_format))
    return templates


def heading_title(section: Node) -> str | None:
    """Heading text of a section without its # token, None for the root."""
    if section.type != "section" or section.text is None:
        return None
    return HEADING_PATTERN.sub("", section.text, count=1).strip()


class Archiver:
    """Archives completed tasks in the vault's active document."""

    def __init__(self, vault: Vault, config: Config | None = None, now: datetime | None = None):
        self.vault = vault
        self.config = config or get_config()
        settings = self.config.archive

        if not 1 <= settings.heading_depth <= MAX_HEADING_DEPTH:
            raise ConfigError(f"Archive heading depth must be between 1 and 6, got {settings.heading_depth}")
        heading_levels = len(self.config.headings) if settings.archive_under_headings else 0
        if settings.heading_depth + heading_levels > MAX_HEADING_DEPTH:
            raise ConfigError(
                f"{heading_levels} heading levels below an archive heading of depth "
                f"{settings.heading_depth} go deeper than 6"
            )

        self.parser = SectionParser(BlockParser(self.config.indentation))
        self.indentation = build_indentation(self.config.indentation)
        self.archive_heading_pattern = build_archive_heading_pattern(settings.heading)
        self.task_pattern = build_completed_task_pattern(settings.archive_all_checked_task_types)
        self.placeholders = PlaceholderResolver(now, settings.date_format)
        self.replacement_pattern = self._compile_replacement()
        self.date_tree_resolver = DateTreeResolver(
            build_templates(self.config),
            self.placeholders,
            task_sort_order=settings.task_sort_order,
            sort_alphabetically=settings.sort_alphabetically,
            add_newlines_around_headings=settings.add_newlines_around_headings,
        )

    def _compile_replacement(self) -> re.Pattern[str] | None:
        replacement = self.config.text_replacement
        if not replacement.apply:
            return None
        try:
            return re.compile(replacement.regex)
        except re.error as e:
            raise ConfigError(f"Invalid text replacement regex {replacement.regex!r}: {e}") from e

    async def archive_tasks_in_active_file(self) -> str:
        """Run one archive pass and return a status message."""
        active = self.vault.active_document
        active_tree = await self.parse_file(active)
        headings: dict[Node, str | None] = {}
        tasks = self.extract_newly_completed_tasks(active_tree, headings)

        if not tasks:
            return "No tasks to archive"

        self.prepare_tasks(tasks, active, headings)

        if self.config.archive.to_separate_file:
            archive_file = await self.get_archive_file_for(active)
            archive_tree = await self.parse_file(archive_file)
            self.archive_to_root(tasks, archive_tree, active)
            await self.write_tree_to_file(archive_file, archive_tree)
        else:
            self.archive_to_root(tasks, active_tree, active)

        await self.write_tree_to_file(active, active_tree)
        logger.info("Archived %d tasks from %s", len(tasks), active)
        return f"Archived {len(tasks)} tasks"

    async def parse_file(self, path: str | None) -> Node:
        lines = await self.vault.read(path)
        return self.parser.parse(lines)

    async def write_tree_to_file(self, path: str, tree: Node) -> None:
        await self.vault.write(path, stringify(tree, self.indentation))

    def extract_newly_completed_tasks(
        self, tree: Node, headings: dict[Node, str | None] | None = None
    ) -> list[Node]:
        """
        Detach completed tasks outside the archive section.

        When headings is given, it is filled with the title of the section
        each task was found in (None for tasks above the first heading).
        """
        on_extract = None
        if headings is not None:
            def on_extract(task: Node, section: Node) -> None:
                headings[task] = heading_title(section)

        tasks = extract_blocks_recursively(
            tree,
            block_filter=lambda block: is_completed_task(block, self.task_pattern),
            section_filter=lambda section: not self.archive_heading_pattern.match(section.text or ""),
            on_extract=on_extract,
        )
        logger.debug("Extracted %d completed tasks", len(tasks))
        return tasks

    def prepare_tasks(
        self,
        tasks: list[Node],
        source_path: str | None,
        headings: dict[Node, str | None] | None = None,
    ) -> None:
        """
        Apply the text replacement and metadata settings to extracted tasks.

        {{heading}} in the metadata text becomes the task's section title from
        headings, or the source file name for tasks outside any section.
        """
        if self.replacement_pattern is not None:
            replacement = self.config.text_replacement.replacement
            for task in tasks:
                for node in task.depth_first():
                    if node.type == "list_item" and node.text is not None:
                        node.text = self.replacement_pattern.sub(replacement, node.text)

        metadata = self.config.metadata
        if metadata.add:
            headings = headings or {}
            fallback = PurePosixPath(source_path).stem if source_path else None
            for task in tasks:
                suffix = self.placeholders.resolve(
                    metadata.text,
                    date_format=metadata.date_format,
                    source_path=source_path,
                    heading=headings.get(task) or fallback,
                )
                task.text = f"{task.text} {suffix}"

    def archive_to_root(self, tasks: list[Node], root: Node, source_path: str | None = None) -> None:
        archive_section = self.get_archive_section_from_root(root)
        self.date_tree_resolver.merge_new_blocks_with_date_tree(archive_section, tasks, source_path)

    def get_archive_section_from_root(self, root: Node) -> Node:
        """Find the archive section among top-level sections, creating it last if missing."""
        for section in root.sections:
            if self.archive_heading_pattern.match(section.text or ""):
                return section

        if self.config.archive.add_newlines_around_headings:
            add_newlines_to_section_if_needed(root)
        depth = self.config.archive.heading_depth
        logger.debug("Creating archive heading at depth %d", depth)
        return root.append(make_section(f"{'#' * depth} {self.config.archive.heading}", depth))

    async def get_archive_file_for(self, active: str) -> str:
        """Path of the separate archive document, created empty when missing."""
        stem = PurePosixPath(active).stem
        name = self.config.archive.file_name.replace("%", stem)
        archive_file = self.placeholders.resolve(name, source_path=active) + MARKDOWN_SUFFIX

        existing = self.vault.locate(archive_file)
        if existing is None:
            await self.vault.create(archive_file)
        elif not existing.is_file():
            raise TargetPathConflictError(f"{archive_file} is not a valid markdown file")
        return archive_file
