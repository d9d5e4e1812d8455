"""
fileman - Canonical exception hierarchy.

Per-file failures (unreadable file, failed delete) are never raised out of a
command; they are recorded in the command report. Only the exceptions below
cross module boundaries.
"""


class FilemanError(Exception):
    """Base exception fileman."""


class InvalidDirectoryError(FilemanError):
    """Target path does not exist or is not a directory."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Directory not found: {path}")


class ConfigurationError(FilemanError):
    """Settings file unreadable or settings values invalid."""
