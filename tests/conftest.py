"""Shared pytest fixtures for the logs API test suite."""

from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from logs_api.app import create_app
from logs_api.config import Settings
from logs_api.services import EventStore, PersistenceGateway


class FrozenClock:
    """Callable stand-in for ``utc_now`` that returns a settable instant."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def set(self, moment: datetime) -> None:
        self.now = moment


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Storage directory that does not exist yet."""
    return tmp_path / "data"


@pytest.fixture
def gateway(data_dir: Path) -> PersistenceGateway:
    return PersistenceGateway(data_dir)


@pytest.fixture
def store(gateway: PersistenceGateway) -> EventStore:
    return EventStore(gateway, timezone_name="UTC")


@pytest.fixture
def clock() -> Iterator[FrozenClock]:
    """Freeze the store's notion of "now"; tests move it with ``clock.set``."""
    frozen = FrozenClock(datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc))
    with patch("logs_api.services.event_store.utc_now", new=frozen):
        yield frozen


@pytest.fixture
def settings(tmp_path: Path, data_dir: Path) -> Settings:
    return Settings(
        data_dir=data_dir,
        public_dir=tmp_path / "public",
        timezone="UTC",
        shutdown_flush_timeout=2.0,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
