import pytest
from django.db import DatabaseError
from rest_framework.test import APIClient

from condo_core.health import checks
from condo_core.health.api import views

pytestmark = pytest.mark.django_db


def test_health_is_public():
    res = APIClient().get("/api/v1/health/")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"
    assert body["timestamp"]


def test_detailed_health_checks_database():
    res = APIClient().get("/api/health/detailed/")
    assert res.status_code == 200
    database = res.json()["checks"]["database"]
    assert database["status"] == "ok"
    assert database["latency_ms"] >= 0


def test_detailed_health_reports_failures(monkeypatch):
    monkeypatch.setattr(views, "check_database", lambda: {"status": "error", "error": "connection refused"})

    res = APIClient().get("/api/v1/health/detailed/")
    assert res.status_code == 503
    assert res.json()["status"] == "error"


def test_check_database_catches_driver_errors(monkeypatch):
    class BrokenConnection:
        def cursor(self):
            raise DatabaseError("server closed the connection")

    monkeypatch.setattr(checks, "connection", BrokenConnection())
    assert checks.check_database() == {"status": "error", "error": "server closed the connection"}
