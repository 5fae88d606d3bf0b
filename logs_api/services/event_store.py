"""In-memory log and session store, flushed to disk after every mutation."""

from __future__ import annotations

import threading
import time
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..logging_config import logger
from ..models import DailyStats, HealthStatus, LogEntry, LogType, Session
from ..utils.timezones import parse_iso, start_of_day, timestamp_sort_key, to_storage_timestamp, utc_now
from .errors import ValidationError
from .persistence import PersistenceGateway

SUMMARY_LIMIT = 100
ELLIPSIS = "..."
SESSION_STARTED = "Nova sessão iniciada"
MISSING_FIELDS = "Campos obrigatórios faltando"
UNKNOWN_PATIENT = "paciente não informado"


def summarize(text: str, limit: int = SUMMARY_LIMIT) -> str:
    """Cut *text* to *limit* characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def sender_label(sender: str) -> str:
    return "Usuário" if sender == "user" else "Bot"


class EventStore:
    """Authoritative holder of the log sequence and the session map.

    Each mutating call validates, mutates memory and flushes while holding a
    single lock, so the files on disk are always a snapshot of some complete
    in-memory state. Log entries are prepended, which keeps ``list_logs``
    newest-first without sorting.
    """

    def __init__(self, gateway: PersistenceGateway, *, timezone_name: Optional[str] = None):
        self._gateway = gateway
        self._timezone_name = timezone_name
        self._lock = threading.RLock()
        self._logs: List[LogEntry] = []
        self._sessions: Dict[str, Session] = {}
        self._last_id = 0
        self._load()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_session(self, session_id: Optional[str], user_agent: Optional[str] = None) -> Session:
        if not session_id:
            raise ValidationError("sessionId é obrigatório")

        with self._lock:
            now = to_storage_timestamp(utc_now())
            # Re-creating an existing id replaces it and resets the counters
            session = Session(id=session_id, start_time=now, user_agent=user_agent)
            self._sessions[session_id] = session
            self._prepend(session_id, "event", SESSION_STARTED, {"userAgent": user_agent}, timestamp=now)
            self._flush_locked()
            logger.info("session started", extra={"session_id": session_id})
            return session.model_copy()

    def append_message(
        self,
        session_id: Optional[str],
        sender: Optional[str],
        message: Optional[str],
        current_flow: Any = None,
    ) -> int:
        if not session_id or not sender or not message:
            raise ValidationError(MISSING_FIELDS)

        summary = f"{sender_label(sender)}: {summarize(message)}"
        details = {"sender": sender, "fullMessage": message, "currentFlow": current_flow}
        with self._lock:
            entry = self._prepend(session_id, "message", summary, details)
            session = self._sessions.get(session_id)
            if session is not None:
                session.message_count += 1
            self._flush_locked()
            logger.debug("message recorded", extra={"session_id": session_id, "log_id": entry.id})
            return entry.id

    def append_appointment(self, session_id: Optional[str], appointment_data: Optional[Mapping[str, Any]]) -> int:
        if not session_id or appointment_data is None:
            raise ValidationError(MISSING_FIELDS)

        patient = appointment_data.get("patientName") or UNKNOWN_PATIENT
        with self._lock:
            entry = self._prepend(
                session_id, "appointment", f"Agendamento criado para {patient}", dict(appointment_data)
            )
            session = self._sessions.get(session_id)
            if session is not None:
                session.appointment_count += 1
            self._flush_locked()
            logger.info("appointment recorded", extra={"session_id": session_id, "log_id": entry.id})
            return entry.id

    def append_error(self, session_id: Optional[str], message: Optional[str], details: Any = None) -> int:
        if not session_id or not message:
            raise ValidationError(MISSING_FIELDS)

        with self._lock:
            entry = self._prepend(session_id, "error", summarize(message), details)
            self._flush_locked()
            logger.warning("client error reported", extra={"session_id": session_id, "log_id": entry.id})
            return entry.id

    def flush(self) -> bool:
        with self._lock:
            return self._flush_locked()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_logs(self) -> List[LogEntry]:
        with self._lock:
            return list(self._logs)

    def list_sessions(self) -> List[Session]:
        with self._lock:
            sessions = [session.model_copy() for session in self._sessions.values()]
        return sorted(sessions, key=lambda session: timestamp_sort_key(session.start_time), reverse=True)

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy() if session is not None else None

    def compute_stats(self, now: Optional[datetime] = None) -> DailyStats:
        midnight = start_of_day(now or utc_now(), self._timezone_name)

        def is_today(timestamp: str) -> bool:
            parsed = self._parse_or_none(timestamp)
            return parsed is not None and parsed >= midnight

        with self._lock:
            today_logs = [entry for entry in self._logs if is_today(entry.timestamp)]
            sessions_today = sum(1 for session in self._sessions.values() if is_today(session.start_time))

        def count(kind: LogType) -> int:
            return sum(1 for entry in today_logs if entry.type == kind)

        return DailyStats(
            sessions_today=sessions_today,
            appointments_today=count("appointment"),
            messages_today=count("message"),
            errors_today=count("error"),
        )

    def health(self) -> HealthStatus:
        with self._lock:
            log_count, session_count = len(self._logs), len(self._sessions)
        return HealthStatus(
            status="ok",
            timestamp=to_storage_timestamp(utc_now()),
            log_count=log_count,
            session_count=session_count,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _load(self) -> None:
        logs, sessions = self._gateway.load()
        with self._lock:
            self._logs = logs
            self._sessions = sessions
            self._last_id = max((entry.id for entry in logs), default=0)

    def _next_id(self) -> int:
        # Millisecond clock, bumped past the last id so same-tick appends stay unique
        candidate = time.time_ns() // 1_000_000
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def _prepend(
        self,
        session_id: str,
        kind: LogType,
        message: str,
        details: Any,
        *,
        timestamp: Optional[str] = None,
    ) -> LogEntry:
        entry = LogEntry(
            id=self._next_id(),
            session_id=session_id,
            type=kind,
            message=message,
            timestamp=timestamp or to_storage_timestamp(utc_now()),
            details=details,
        )
        self._logs.insert(0, entry)
        return entry

    def _flush_locked(self) -> bool:
        return self._gateway.flush(self._logs, self._sessions)

    @staticmethod
    def _parse_or_none(timestamp: str) -> Optional[datetime]:
        try:
            return parse_iso(timestamp)
        except (ValueError, OverflowError):
            return None


__all__ = ["EventStore", "sender_label", "summarize"]
