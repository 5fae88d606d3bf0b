from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .records import DailyStats, LogEntry, Session


class _Payload(BaseModel):
    # Required-field checks live in the store so that missing values map to 400, not 422
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateSessionRequest(_Payload):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")


class MessageLogRequest(_Payload):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    sender: Optional[str] = None
    message: Optional[str] = None
    current_flow: Any = Field(default=None, alias="currentFlow")


class AppointmentLogRequest(_Payload):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    appointment_data: Optional[Dict[str, Any]] = Field(default=None, alias="appointmentData")


class ErrorLogRequest(_Payload):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Optional[str] = None
    details: Any = None


class SessionCreatedResponse(BaseModel):
    success: bool = True
    session: Session


class LogCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    log_id: int = Field(alias="logId")


class LogListResponse(BaseModel):
    success: bool = True
    data: List[LogEntry] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    success: bool = True
    data: List[Session] = Field(default_factory=list)


class StatsResponse(BaseModel):
    success: bool = True
    data: DailyStats
