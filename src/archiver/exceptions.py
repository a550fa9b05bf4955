"""Custom exceptions for the archiver."""


class ArchiverError(Exception):
    """Base exception for archiver operations."""


class UnsupportedDocumentError(ArchiverError):
    """Document is missing or is not a markdown file."""


class TargetPathConflictError(ArchiverError):
    """Archive path already exists and is not a markdown file."""


class ConfigError(ArchiverError, ValueError):
    """Settings that cannot be used as given."""
