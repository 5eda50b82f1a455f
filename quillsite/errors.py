"""Exceptions raised while building a site.

Every failure is fatal for the run. Library code raises one of these and
``quillsite.cli.main`` reports it and exits.
"""

from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """Base class for every error that aborts a build."""


class ConfigError(BuildError):
    """Invalid flags, config file or fragments directory."""


class InputError(BuildError):
    """The input directory does not follow the entry layout."""


class ContentError(BuildError):
    """A markdown document carries missing or malformed directives."""


class TemplateError(BuildError):
    """A template references a key that has no value."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Failed to template substitute for key '{key}'")
        self.key = key


class FileOperationError(BuildError):
    """A filesystem operation failed."""

    def __init__(self, action: str, path: Path, error: Exception) -> None:
        detail = getattr(error, "strerror", None) or error
        super().__init__(f"Error {action} '{path}': {detail}")
        self.path = path
        self.error = error
