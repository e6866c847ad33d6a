"""
app/domain/errors.py

Exceptions raised by the worker import service and its persistence layer.
"""

from __future__ import annotations


class WorkerImportError(Exception):
    """Base exception for worker import failures."""


class InvalidImportModeError(WorkerImportError, ValueError):
    """Raised when an import is requested with an unknown mode."""

    def __init__(self, mode: str, allowed: tuple[str, ...]) -> None:
        super().__init__(
            f"Invalid import mode {mode!r}. Must be one of: {', '.join(allowed)}."
        )
        self.mode = mode
        self.allowed = allowed


class WorkerPersistenceError(WorkerImportError):
    """Raised when worker rows cannot be read or written."""
