"""Errors raised by the theme preview pipeline.

Every error is fatal for the run. Nothing here is retried: the CLI catches
ThemePreviewError at the top level and marks the run failed with its message.
"""

from __future__ import annotations


class ThemePreviewError(Exception):
    """Base class for all theme preview errors."""


class MissingContextError(ThemePreviewError):
    """The triggering event carries no pull request data."""


class ManifestReadError(ThemePreviewError):
    """A theme manifest exists but could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not read theme manifest {path}: {reason}")
        self.path = path


class PlatformAPIError(ThemePreviewError):
    """A comment or pull request description call to the platform failed."""


class ChangedFilesError(ThemePreviewError):
    """The list of changed files could not be obtained."""


class ConfigError(ThemePreviewError):
    """A configuration value has the wrong type or an unknown value."""


class InvalidBlueprintError(ThemePreviewError):
    """A user-supplied blueprint is not a JSON object."""
