"""Exceptions raised by the benchmark engine."""

from __future__ import annotations


class BenchlabError(Exception):
    """Base class for engine failures that callers are expected to handle."""


class InvalidConfigError(BenchlabError, ValueError):
    """Raised when a benchmark configuration cannot be run at all."""


class TargetUnreachableError(BenchlabError):
    """Raised when the target cannot be addressed by the HTTP client."""


class RunNotFoundError(BenchlabError, KeyError):
    """Raised when a stored run id does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InvalidDocumentError(BenchlabError, ValueError):
    """Raised when an imported run document is malformed."""
