"""Simplified configuration management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from . import __version__

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _load_env_file() -> None:
    """Load .env from root directory if present."""
    env_path = _PROJECT_ROOT / ".env"
    if not env_path.is_file():
        return
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if stripped and not stripped.startswith("#") and "=" in stripped:
                key, value = stripped.split("=", 1)
                key, value = key.strip(), value.strip().strip("'\"")
                if key and value and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        pass


_load_env_file()


DEFAULT_APP_NAME = "Chatbot Logs API"
DEFAULT_PORT = 3001


def _env_float(name: str, fallback: float) -> float:
    try:
        return float(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _get_port() -> int:
    """Get server port, checking the platform's PORT first, then LOGS_API_PORT."""
    port = os.getenv("PORT") or os.getenv("LOGS_API_PORT")
    if port:
        try:
            return int(port)
        except ValueError:
            pass
    return DEFAULT_PORT


def _env_path(name: str, fallback: Path) -> Path:
    value = os.getenv(name)
    return Path(value).expanduser() if value else fallback


class Settings(BaseModel):
    """Application settings with lightweight env fallbacks."""

    # App metadata
    app_name: str = Field(default=DEFAULT_APP_NAME)
    app_version: str = Field(default=__version__)

    # Server runtime
    server_host: str = Field(default_factory=lambda: os.getenv("LOGS_API_HOST", "0.0.0.0"))
    server_port: int = Field(default_factory=_get_port)

    # Storage
    data_dir: Path = Field(default_factory=lambda: _env_path("LOGS_API_DATA_DIR", _PROJECT_ROOT / "data"))
    public_dir: Path = Field(default_factory=lambda: _env_path("LOGS_API_PUBLIC_DIR", _PROJECT_ROOT / "public"))
    shutdown_flush_timeout: float = Field(
        default_factory=lambda: _env_float("LOGS_API_SHUTDOWN_FLUSH_TIMEOUT", 5.0)
    )

    # Daily stats are computed from midnight in this zone; system local time when unset
    timezone: Optional[str] = Field(default_factory=lambda: os.getenv("LOGS_API_TIMEZONE") or None)

    # HTTP behaviour
    cors_allow_origins_raw: str = Field(default_factory=lambda: os.getenv("LOGS_API_CORS_ALLOW_ORIGINS", "*"))
    enable_docs: bool = Field(default_factory=lambda: os.getenv("LOGS_API_ENABLE_DOCS", "1") != "0")
    docs_url: Optional[str] = Field(default_factory=lambda: os.getenv("LOGS_API_DOCS_URL", "/docs"))

    @property
    def cors_allow_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allow_origins_raw.strip() in {"", "*"}:
            return ["*"]
        return [origin.strip() for origin in self.cors_allow_origins_raw.split(",") if origin.strip()]

    @property
    def resolved_docs_url(self) -> Optional[str]:
        """Return documentation URL when docs are enabled."""
        return (self.docs_url or "/docs") if self.enable_docs else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
