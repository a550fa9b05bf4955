"""
Vault: markdown documents under a root directory.

Documents are addressed by paths relative to the vault root. Reads and writes
run in a worker thread so callers can await them.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .exceptions import UnsupportedDocumentError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


class Vault:
    """File-backed document store."""

    def __init__(self, root: Path | str, active: str | None = None):
        self.root = Path(root)
        self._active = active

    @property
    def active_document(self) -> str | None:
        """Identifier of the document the current run operates on."""
        return self._active

    def resolve(self, path: str) -> Path:
        return self.root / path

    def locate(self, path: str) -> Path | None:
        """Return the filesystem path if anything exists there, else None."""
        target = self.resolve(path)
        return target if target.exists() else None

    async def read(self, path: str) -> list[str]:
        target = self._document(path)
        text = await asyncio.to_thread(target.read_text, encoding="utf-8")
        return text.split("\n")

    async def write(self, path: str, lines: list[str]) -> None:
        target = self._document(path)
        await asyncio.to_thread(target.write_text, "\n".join(lines), encoding="utf-8")
        logger.debug("Wrote %d lines to %s", len(lines), target)

    async def create(self, path: str) -> Path:
        """Create an empty document, including missing parent directories."""
        target = self.resolve(path)
        if target.suffix != MARKDOWN_SUFFIX:
            raise UnsupportedDocumentError(f"{path} is not a markdown (.md) file")

        def _create() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("", encoding="utf-8")

        await asyncio.to_thread(_create)
        logger.info("Created %s", target)
        return target

    def _document(self, path: str | None) -> Path:
        if path is None:
            raise UnsupportedDocumentError("No active document")
        target = self.resolve(path)
        if target.suffix != MARKDOWN_SUFFIX or not target.is_file():
            raise UnsupportedDocumentError(
                f"The archiver works only in markdown (.md) files, got {path}"
            )
        return target
