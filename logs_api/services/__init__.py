"""Service layer components."""

from fastapi import Request

from .errors import LogsApiError, PersistenceReadError, PersistenceWriteError, ValidationError
from .event_store import EventStore
from .persistence import PersistenceGateway


def get_event_store(request: Request) -> EventStore:
    """Return the store owned by the running application."""
    return request.app.state.event_store


__all__ = [
    "EventStore",
    "LogsApiError",
    "PersistenceGateway",
    "PersistenceReadError",
    "PersistenceWriteError",
    "ValidationError",
    "get_event_store",
]
