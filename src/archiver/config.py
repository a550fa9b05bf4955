"""
Configuration for the archiver.

All tunable parameters in one place. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/archiver/config.toml) if exists
3. Environment variables (ARCHIVER_*) override file
4. CLI flags override everything
"""

from __future__ import annotations

import contextlib
import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path

NEWEST_LAST = "newest-last"
NEWEST_FIRST = "newest-first"
TASK_SORT_ORDERS = (NEWEST_LAST, NEWEST_FIRST)


@dataclass
class ArchiveConfig:
    """Where and how completed tasks get archived."""
    heading: str = "Archived"
    heading_depth: int = 1
    add_newlines_around_headings: bool = True
    to_separate_file: bool = False
    file_name: str = "% (archive)"  # % = active document stem
    date_format: str = "%Y-%m-%d"
    task_sort_order: str = NEWEST_LAST
    sort_alphabetically: bool = False
    archive_all_checked_task_types: bool = False
    archive_under_headings: bool = False
    archive_under_list_items: bool = False


@dataclass
class IndentationConfig:
    """Indentation unit used to read and write nested list items."""
    use_tab: bool = False
    tab_size: int = 2


@dataclass
class TemplateConfig:
    """One level of the date tree: template text plus its own date format."""
    text: str = ""
    date_format: str = ""  # empty = archive.date_format


@dataclass
class TextReplacementConfig:
    apply: bool = False
    regex: str = ""
    replacement: str = ""


@dataclass
class MetadataConfig:
    add: bool = False
    text: str = "(completed: {{date}})"
    date_format: str = ""


@dataclass
class Config:
    """Root config with all settings."""
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    indentation: IndentationConfig = field(default_factory=IndentationConfig)
    headings: list[TemplateConfig] = field(default_factory=list)
    list_items: list[TemplateConfig] = field(default_factory=list)
    text_replacement: TextReplacementConfig = field(default_factory=TextReplacementConfig)
    metadata: MetadataConfig = field(default_factory=MetadataConfig)


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "archiver" / "config.toml"
    return Path.home() / ".config" / "archiver" / "config.toml"


def load_config(path: Path | None = None) -> Config:
    """Load config from file if exists, else return defaults."""
    config = Config()
    path = path or get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = _apply_toml(config, data)
        except (OSError, tomllib.TOMLDecodeError, AttributeError, TypeError, ValueError):
            pass  # fall back to defaults on any error

    # env var overrides
    config = _apply_env(config)

    return config


_SCALARS: dict[str, dict[str, type]] = {
    "archive": {
        "heading": str,
        "heading_depth": int,
        "add_newlines_around_headings": bool,
        "to_separate_file": bool,
        "file_name": str,
        "date_format": str,
        "task_sort_order": str,
        "sort_alphabetically": bool,
        "archive_all_checked_task_types": bool,
        "archive_under_headings": bool,
        "archive_under_list_items": bool,
    },
    "indentation": {
        "use_tab": bool,
        "tab_size": int,
    },
    "text_replacement": {
        "apply": bool,
        "regex": str,
        "replacement": str,
    },
    "metadata": {
        "add": bool,
        "text": str,
        "date_format": str,
    },
}


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config."""
    for section, attrs in _SCALARS.items():
        if section not in data:
            continue
        values = data[section]
        target = getattr(config, section)
        for attr, conv in attrs.items():
            if attr in values:
                setattr(target, attr, conv(values[attr]))

    if "headings" in data:
        config.headings = [_template(item) for item in data["headings"]]
    if "list_items" in data:
        config.list_items = [_template(item) for item in data["list_items"]]

    return config


def _template(item: dict) -> TemplateConfig:
    return TemplateConfig(
        text=str(item.get("text", "")),
        date_format=str(item.get("date_format", "")),
    )


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str, type]] = {
        "ARCHIVER_HEADING": ("archive", "heading", str),
        "ARCHIVER_HEADING_DEPTH": ("archive", "heading_depth", int),
        "ARCHIVER_ADD_NEWLINES": ("archive", "add_newlines_around_headings", bool),
        "ARCHIVER_SEPARATE_FILE": ("archive", "to_separate_file", bool),
        "ARCHIVER_FILE_NAME": ("archive", "file_name", str),
        "ARCHIVER_DATE_FORMAT": ("archive", "date_format", str),
        "ARCHIVER_SORT_ORDER": ("archive", "task_sort_order", str),
        "ARCHIVER_SORT_ALPHABETICALLY": ("archive", "sort_alphabetically", bool),
        "ARCHIVER_ALL_CHECKED": ("archive", "archive_all_checked_task_types", bool),
        "ARCHIVER_USE_TAB": ("indentation", "use_tab", bool),
        "ARCHIVER_TAB_SIZE": ("indentation", "tab_size", int),
    }

    for env_key, (section, attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            with contextlib.suppress(ValueError, AttributeError):
                # Bool needs special handling: "true", "1", "yes" -> True
                converted = val.lower() in ("true", "1", "yes") if conv is bool else conv(val)
                setattr(getattr(config, section), attr, converted)

    return config


# Module-level config instance, loaded once on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
