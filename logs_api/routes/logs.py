from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status

from ..models import (
    AppointmentLogRequest,
    ErrorLogRequest,
    LogCreatedResponse,
    LogListResponse,
    MessageLogRequest,
)
from ..services import EventStore, ValidationError, get_event_store

router = APIRouter(prefix="/logs", tags=["logs"])


def _created(append: Callable[[], int]) -> LogCreatedResponse:
    try:
        log_id = append()
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return LogCreatedResponse(log_id=log_id)


@router.get("", response_model=LogListResponse)
# Return every log entry, newest first
def list_logs(store: EventStore = Depends(get_event_store)) -> LogListResponse:
    return LogListResponse(data=store.list_logs())


@router.post("/message", response_model=LogCreatedResponse, status_code=status.HTTP_201_CREATED)
def log_message(
    payload: MessageLogRequest,
    store: EventStore = Depends(get_event_store),
) -> LogCreatedResponse:
    return _created(
        lambda: store.append_message(payload.session_id, payload.sender, payload.message, payload.current_flow)
    )


@router.post("/appointment", response_model=LogCreatedResponse, status_code=status.HTTP_201_CREATED)
def log_appointment(
    payload: AppointmentLogRequest,
    store: EventStore = Depends(get_event_store),
) -> LogCreatedResponse:
    return _created(lambda: store.append_appointment(payload.session_id, payload.appointment_data))


@router.post("/error", response_model=LogCreatedResponse, status_code=status.HTTP_201_CREATED)
# Record a failure reported by the chat widget
def log_error(
    payload: ErrorLogRequest,
    store: EventStore = Depends(get_event_store),
) -> LogCreatedResponse:
    return _created(lambda: store.append_error(payload.session_id, payload.message, payload.details))


__all__ = ["router"]
