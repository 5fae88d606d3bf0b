from .api import (
    AppointmentLogRequest,
    CreateSessionRequest,
    ErrorLogRequest,
    LogCreatedResponse,
    LogListResponse,
    MessageLogRequest,
    SessionCreatedResponse,
    SessionListResponse,
    StatsResponse,
)
from .records import DailyStats, HealthStatus, LogEntry, LogType, Session

__all__ = [
    "AppointmentLogRequest",
    "CreateSessionRequest",
    "DailyStats",
    "ErrorLogRequest",
    "HealthStatus",
    "LogCreatedResponse",
    "LogEntry",
    "LogListResponse",
    "LogType",
    "MessageLogRequest",
    "Session",
    "SessionCreatedResponse",
    "SessionListResponse",
    "StatsResponse",
]
