"""Snapshot persistence for the event store backed by two JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from pydantic import ValidationError as ModelValidationError

from ..logging_config import logger
from ..models import LogEntry, Session
from ..utils.timezones import timestamp_sort_key
from .errors import PersistenceReadError, PersistenceWriteError

LOGS_FILENAME = "logs.json"
SESSIONS_FILENAME = "sessions.json"


class PersistenceGateway:
    """Load and overwrite full snapshots of the log sequence and session map.

    Every flush rewrites both files completely, so write cost grows with the
    total amount of stored data. That is fine for chatbot telemetry volumes
    and is the known ceiling of this design.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)
        self._logs_path = self._data_dir / LOGS_FILENAME
        self._sessions_path = self._data_dir / SESSIONS_FILENAME

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(self) -> Tuple[List[LogEntry], Dict[str, Session]]:
        """Read both snapshots, substituting empty defaults for anything unusable."""
        try:
            self._ensure_directory()
        except PersistenceWriteError as exc:
            logger.warning("data directory unavailable", extra={"error": str(exc)})

        try:
            raw_logs = self._read_blob(self._logs_path, list)
        except PersistenceReadError as exc:
            logger.info("logs file unavailable; starting with an empty log", extra={"reason": str(exc)})
            raw_logs = []

        try:
            raw_sessions = self._read_blob(self._sessions_path, dict)
        except PersistenceReadError as exc:
            logger.info("sessions file unavailable; starting with no sessions", extra={"reason": str(exc)})
            raw_sessions = {}

        logs = self._parse_logs(raw_logs)
        sessions = self._parse_sessions(raw_sessions)
        logger.info(
            "loaded store snapshot",
            extra={"logs": len(logs), "sessions": len(sessions), "path": str(self._data_dir)},
        )
        return logs, sessions

    def flush(self, logs: Sequence[LogEntry], sessions: Mapping[str, Session]) -> bool:
        """Overwrite both snapshots. Returns False when the write failed."""
        ordered = sorted(logs, key=lambda entry: timestamp_sort_key(entry.timestamp), reverse=True)
        logs_payload = [entry.model_dump(by_alias=True, mode="json") for entry in ordered]
        sessions_payload = {
            key: session.model_dump(by_alias=True, mode="json") for key, session in sessions.items()
        }
        try:
            self._ensure_directory()
            self._write_blob(self._logs_path, logs_payload)
            self._write_blob(self._sessions_path, sessions_payload)
        except PersistenceWriteError as exc:
            logger.error("failed to persist store snapshot", extra={"error": str(exc)})
            return False
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_directory(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceWriteError(f"cannot create {self._data_dir}: {exc}") from exc

    def _read_blob(self, path: Path, expected: type) -> Any:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise PersistenceReadError(f"{path.name} not found") from exc
        except OSError as exc:
            raise PersistenceReadError(f"cannot read {path.name}: {exc}") from exc

        try:
            data = json.loads(text)
        except ValueError as exc:
            raise PersistenceReadError(f"{path.name} is not valid JSON: {exc}") from exc

        if not isinstance(data, expected):
            raise PersistenceReadError(f"{path.name} payload invalid; expected {expected.__name__}")
        return data

    def _write_blob(self, path: Path, payload: Any) -> None:
        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            self._discard(tmp_path)
            raise PersistenceWriteError(f"cannot write {path.name}: {exc}") from exc

    def _discard(self, tmp_path: Path) -> None:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as exc:  # pragma: no cover - defensive
            logger.warning("failed to remove temporary snapshot", extra={"path": str(tmp_path), "error": str(exc)})

    def _parse_logs(self, raw_logs: List[Any]) -> List[LogEntry]:
        logs: List[LogEntry] = []
        for raw in raw_logs:
            try:
                logs.append(LogEntry.model_validate(raw))
            except ModelValidationError as exc:
                logger.warning(
                    "skipping malformed log entry",
                    extra={"path": str(self._logs_path), "error": str(exc)},
                )
        return logs

    def _parse_sessions(self, raw_sessions: Dict[str, Any]) -> Dict[str, Session]:
        sessions: Dict[str, Session] = {}
        for key, raw in raw_sessions.items():
            try:
                sessions[key] = Session.model_validate(raw)
            except ModelValidationError as exc:
                logger.warning(
                    "skipping malformed session",
                    extra={"path": str(self._sessions_path), "session_id": key, "error": str(exc)},
                )
        return sessions


__all__ = ["LOGS_FILENAME", "SESSIONS_FILENAME", "PersistenceGateway"]
