from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

LogType = Literal["event", "message", "appointment", "error"]
SessionStatus = Literal["active"]


class LogEntry(BaseModel):
    """One observed interaction. Entries are never modified once appended."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: int
    session_id: str = Field(alias="sessionId")
    type: LogType
    message: str
    timestamp: str
    details: Any = None


class Session(BaseModel):
    """Per-session metadata plus counters derived from the log."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    start_time: str = Field(alias="startTime")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")
    status: SessionStatus = "active"
    message_count: int = Field(default=0, ge=0, alias="messageCount")
    appointment_count: int = Field(default=0, ge=0, alias="appointmentCount")


class DailyStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sessions_today: int = Field(default=0, alias="totalSessionsToday")
    appointments_today: int = Field(default=0, alias="totalAppointmentsToday")
    messages_today: int = Field(default=0, alias="totalMessagesToday")
    errors_today: int = Field(default=0, alias="totalErrorsToday")


class HealthStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "ok"
    timestamp: str
    log_count: int = Field(alias="logCount")
    session_count: int = Field(alias="sessionCount")


__all__ = ["DailyStats", "HealthStatus", "LogEntry", "LogType", "Session", "SessionStatus"]
