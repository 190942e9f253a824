import pytest
from rest_framework.test import APIClient

from condo_core.common.events import _registry, publish, subscribe

pytestmark = pytest.mark.django_db


def test_not_authenticated_uses_envelope():
    res = APIClient().get("/api/v1/units/")

    assert res.status_code == 401
    body = res.json()
    assert body["error"]["code"] == "not_authenticated"
    assert body["error"]["request_id"]


def test_request_id_is_echoed(syndic_client, headers):
    res = syndic_client.get("/api/v1/units/00000000-0000-0000-0000-000000000000/", HTTP_X_REQUEST_ID="req-123", **headers)

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "not_found"
    assert res.json()["error"]["request_id"] == "req-123"


def test_validation_error_details_are_field_keyed(syndic_client, headers):
    res = syndic_client.post("/api/v1/units/", {"number": "1"}, format="json", **headers)

    assert res.status_code == 400
    body = res.json()["error"]
    assert body["code"] == "validation_error"
    assert "block" in body["details"]


def test_conflict_maps_to_409(syndic_client, headers, unit):
    res = syndic_client.post(
        "/api/v1/units/",
        {"block": "A", "number": "101"},
        format="json",
        **headers,
    )

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "conflict"


def test_events_reach_subscribers(monkeypatch):
    monkeypatch.setitem(_registry, "test.event", [])
    seen = []

    @subscribe("test.event")
    def handler(payload):
        seen.append(payload)

    publish("test.event", {"x": 1})
    publish("unknown.event", {"x": 2})

    assert seen == [{"x": 1}]


def test_failing_subscriber_does_not_break_others(monkeypatch):
    monkeypatch.setitem(_registry, "test.event", [])
    seen = []

    @subscribe("test.event")
    def broken(payload):
        raise RuntimeError("boom")

    @subscribe("test.event")
    def handler(payload):
        seen.append(payload)

    assert publish("test.event", {"x": 1}) == 1

    assert seen == [{"x": 1}]
