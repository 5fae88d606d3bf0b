"""Integration tests for the HTTP surface.

Tests cover:
- Session creation and listing
- Message, appointment and error logging
- Validation failures (400) with no writes
- Stats, health and static pages
- Final flush on shutdown
"""

import json

from fastapi.testclient import TestClient

from logs_api.app import create_app
from logs_api.services import EventStore, PersistenceGateway
from logs_api.services.persistence import LOGS_FILENAME, SESSIONS_FILENAME


class TestHealth:
    def test_health_reports_counts(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["logCount"] == 0
        assert body["sessionCount"] == 0
        assert body["timestamp"]


class TestSessions:
    def test_create_session(self, client):
        response = client.post("/api/sessions", json={"sessionId": "s1", "userAgent": "UA-1"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["session"]["id"] == "s1"
        assert body["session"]["userAgent"] == "UA-1"
        assert body["session"]["status"] == "active"
        assert body["session"]["messageCount"] == 0
        assert body["session"]["appointmentCount"] == 0

    def test_missing_session_id_is_400(self, client):
        response = client.post("/api/sessions", json={"userAgent": "UA-1"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "sessionId é obrigatório"}

    def test_list_sessions(self, client):
        client.post("/api/sessions", json={"sessionId": "s1"})
        client.post("/api/sessions", json={"sessionId": "s2"})

        response = client.get("/api/sessions")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert {session["id"] for session in body["data"]} == {"s1", "s2"}


class TestLogs:
    def test_message_scenario(self, client):
        client.post("/api/sessions", json={"sessionId": "s1", "userAgent": "UA-1"})
        message = client.post(
            "/api/logs/message",
            json={"sessionId": "s1", "sender": "user", "message": "hello", "currentFlow": "menu"},
        )
        appointment = client.post(
            "/api/logs/appointment",
            json={"sessionId": "s1", "appointmentData": {"patientName": "Jane"}},
        )

        assert message.status_code == 201
        assert appointment.status_code == 201
        assert isinstance(message.json()["logId"], int)
        assert appointment.json()["logId"] != message.json()["logId"]

        logs = client.get("/api/logs").json()["data"]
        assert [entry["type"] for entry in logs] == ["appointment", "message", "event"]
        assert logs[0]["message"] == "Agendamento criado para Jane"
        assert logs[1]["message"] == "Usuário: hello"
        assert logs[1]["details"] == {"sender": "user", "fullMessage": "hello", "currentFlow": "menu"}
        assert logs[1]["sessionId"] == "s1"

        [session] = client.get("/api/sessions").json()["data"]
        assert session["messageCount"] == 1
        assert session["appointmentCount"] == 1

    def test_missing_sender_is_400_without_write(self, client, data_dir):
        response = client.post("/api/logs/message", json={"sessionId": "s1", "message": "hello"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Campos obrigatórios faltando"}
        assert client.get("/api/logs").json()["data"] == []
        assert not (data_dir / LOGS_FILENAME).exists()

    def test_missing_appointment_data_is_400(self, client):
        response = client.post("/api/logs/appointment", json={"sessionId": "s1"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_error_entry_counts_in_stats(self, client):
        response = client.post(
            "/api/logs/error",
            json={"sessionId": "s1", "message": "widget failed", "details": {"step": "booking"}},
        )

        assert response.status_code == 201
        stats = client.get("/api/stats").json()["data"]
        assert stats["totalErrorsToday"] == 1

    def test_malformed_body_is_400(self, client):
        response = client.post(
            "/api/logs/message",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Invalid request"

    def test_wrong_field_type_is_400(self, client):
        response = client.post(
            "/api/logs/appointment",
            json={"sessionId": "s1", "appointmentData": "not an object"},
        )

        assert response.status_code == 400


class TestStats:
    def test_counts_today(self, client):
        client.post("/api/sessions", json={"sessionId": "s1"})
        client.post("/api/sessions", json={"sessionId": "s2"})
        client.post("/api/logs/message", json={"sessionId": "s1", "sender": "user", "message": "oi"})
        client.post("/api/logs/appointment", json={"sessionId": "s2", "appointmentData": {"patientName": "Ana"}})

        response = client.get("/api/stats")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {
                "totalSessionsToday": 2,
                "totalAppointmentsToday": 1,
                "totalMessagesToday": 1,
                "totalErrorsToday": 0,
            },
        }


class TestPersistenceThroughApi:
    def test_data_survives_restart(self, settings):
        with TestClient(create_app(settings)) as first:
            first.post("/api/sessions", json={"sessionId": "s1"})
            first.post("/api/logs/message", json={"sessionId": "s1", "sender": "bot", "message": "Olá"})

        with TestClient(create_app(settings)) as second:
            health = second.get("/api/health").json()
            [session] = second.get("/api/sessions").json()["data"]

        assert health["logCount"] == 2
        assert health["sessionCount"] == 1
        assert session["messageCount"] == 1

    def test_shutdown_flushes_current_state(self, settings, data_dir):
        with TestClient(create_app(settings)) as client:
            client.post("/api/sessions", json={"sessionId": "s1"})
            (data_dir / LOGS_FILENAME).unlink()
            (data_dir / SESSIONS_FILENAME).unlink()

        logs = json.loads((data_dir / LOGS_FILENAME).read_text(encoding="utf-8"))
        sessions = json.loads((data_dir / SESSIONS_FILENAME).read_text(encoding="utf-8"))
        assert [entry["type"] for entry in logs] == ["event"]
        assert list(sessions) == ["s1"]


class TestInjectedStore:
    def test_app_serves_supplied_store(self, settings, tmp_path):
        store = EventStore(PersistenceGateway(tmp_path / "elsewhere"), timezone_name="UTC")
        store.create_session("preloaded", "UA-0")

        with TestClient(create_app(settings, store=store)) as client:
            [session] = client.get("/api/sessions").json()["data"]
            client.post("/api/logs/message", json={"sessionId": "preloaded", "sender": "user", "message": "oi"})

        assert session["id"] == "preloaded"
        assert store.get_session("preloaded").message_count == 1


class TestStaticPages:
    def test_serves_public_directory(self, settings):
        settings.public_dir.mkdir()
        (settings.public_dir / "dashboard.html").write_text("<h1>Dashboard</h1>", encoding="utf-8")

        with TestClient(create_app(settings)) as client:
            page = client.get("/dashboard.html")
            health = client.get("/api/health")

        assert page.status_code == 200
        assert "Dashboard" in page.text
        assert health.status_code == 200

    def test_no_public_directory_means_no_pages(self, client):
        assert client.get("/dashboard.html").status_code == 404
