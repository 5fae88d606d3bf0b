from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..models import CreateSessionRequest, SessionCreatedResponse, SessionListResponse
from ..services import EventStore, ValidationError, get_event_store

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionCreatedResponse, status_code=status.HTTP_201_CREATED)
# Register a chat session opened by the widget
def create_session(
    payload: CreateSessionRequest,
    store: EventStore = Depends(get_event_store),
) -> SessionCreatedResponse:
    try:
        session = store.create_session(payload.session_id, payload.user_agent)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return SessionCreatedResponse(session=session)


@router.get("", response_model=SessionListResponse)
def list_sessions(store: EventStore = Depends(get_event_store)) -> SessionListResponse:
    return SessionListResponse(data=store.list_sessions())


__all__ = ["router"]
