"""Exception hierarchy for deck packaging.

Every error raised by a package build derives from ``WordPackError`` so the
caller can catch the whole family at the request boundary.
"""

from typing import Any, Dict, Optional


class WordPackError(Exception):
    """Base class for all packaging errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class InputError(WordPackError):
    """Caller supplied data that cannot be packaged."""


class SchemaError(WordPackError):
    """Database content violates an internal invariant."""


class PackagingError(WordPackError):
    """The archive could not be assembled."""
