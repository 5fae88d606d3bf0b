"""Exceptions raised by the store and its persistence layer."""

from __future__ import annotations


class LogsApiError(Exception):
    """Base class for service errors."""


class ValidationError(LogsApiError, ValueError):
    """A required field was missing or empty."""


class PersistenceReadError(LogsApiError):
    """A snapshot file could not be read or parsed."""


class PersistenceWriteError(LogsApiError):
    """A snapshot file could not be written."""


__all__ = ["LogsApiError", "PersistenceReadError", "PersistenceWriteError", "ValidationError"]
