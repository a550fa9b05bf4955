"""Placeholder substitution for templates ({{date}}, {{sourceFileName}}, ...)."""

from __future__ import annotations

from datetime import datetime
from pathlib import PurePosixPath

DATE = "{{date}}"
SOURCE_FILE_NAME = "{{sourceFileName}}"
SOURCE_FILE_PATH = "{{sourceFilePath}}"
HEADING = "{{heading}}"


class PlaceholderResolver:
    """Resolves template placeholders against a fixed point in time."""

    def __init__(self, now: datetime | None = None, default_date_format: str = "%Y-%m-%d"):
        self.now = now or datetime.now()
        self.default_date_format = default_date_format

    def resolve(
        self,
        text: str,
        *,
        date_format: str = "",
        source_path: str | None = None,
        heading: str | None = None,
    ) -> str:
        """Replace known placeholders in text. Unknown ones are kept as-is."""
        result = text.replace(DATE, self.now.strftime(date_format or self.default_date_format))
        if source_path is not None:
            result = result.replace(SOURCE_FILE_NAME, PurePosixPath(source_path).stem)
            result = result.replace(SOURCE_FILE_PATH, source_path)
        if heading is not None:
            result = result.replace(HEADING, heading)
        return result
