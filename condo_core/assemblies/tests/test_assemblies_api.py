from datetime import timedelta

import pytest
from django.utils import timezone

from condo_core.announcements.models import Announcement, AnnouncementType

pytestmark = pytest.mark.django_db


def _create_assembly(client, headers, **overrides):
    payload = {
        "title": "Annual meeting",
        "description": "Budget review",
        "scheduled_at": (timezone.now() + timedelta(days=7)).isoformat(),
    }
    payload.update(overrides)
    res = client.post("/api/v1/assemblies/", payload, format="json", **headers)
    assert res.status_code == 201, res.content
    return res.json()


def _add_item(client, headers, assembly_id, title):
    res = client.post(f"/api/v1/assemblies/{assembly_id}/agenda-items/", {"title": title}, format="json", **headers)
    assert res.status_code == 201, res.content
    return res.json()


def test_create_publishes_announcement(syndic_client, headers, syndic):
    assembly = _create_assembly(syndic_client, headers)
    assert assembly["status"] == "SCHEDULED"

    announcement = Announcement.objects.get(assembly_id=assembly["id"])
    assert announcement.type == AnnouncementType.ASSEMBLY
    assert announcement.title == "Assembly scheduled: Annual meeting"
    assert "Budget review" in announcement.content
    assert announcement.created_by_id == syndic.id


def test_residents_read_but_cannot_write(syndic_client, resident_client, headers):
    assembly = _create_assembly(syndic_client, headers)

    assert resident_client.get(f"/api/v1/assemblies/{assembly['id']}/", **headers).status_code == 200
    assert resident_client.post(f"/api/v1/assemblies/{assembly['id']}/start/", **headers).status_code == 403


def test_lifecycle_transitions(syndic_client, headers):
    assembly = _create_assembly(syndic_client, headers)
    base = f"/api/v1/assemblies/{assembly['id']}"

    assert syndic_client.post(f"{base}/finish/", **headers).status_code == 400

    res = syndic_client.post(f"{base}/start/", **headers)
    assert res.json()["status"] == "IN_PROGRESS"
    assert res.json()["started_at"]
    assert syndic_client.post(f"{base}/start/", **headers).status_code == 400
    assert syndic_client.delete(f"{base}/", **headers).status_code == 400

    res = syndic_client.post(f"{base}/finish/", **headers)
    assert res.json()["status"] == "FINISHED"
    assert syndic_client.post(f"{base}/cancel/", **headers).status_code == 400


def test_agenda_items_only_on_scheduled(syndic_client, headers):
    assembly = _create_assembly(syndic_client, headers)
    first = _add_item(syndic_client, headers, assembly["id"], "Budget")
    second = _add_item(syndic_client, headers, assembly["id"], "Painting")
    assert (first["order_index"], second["order_index"]) == (0, 1)

    syndic_client.post(f"/api/v1/assemblies/{assembly['id']}/start/", **headers)
    res = syndic_client.post(
        f"/api/v1/assemblies/{assembly['id']}/agenda-items/", {"title": "Late"}, format="json", **headers
    )
    assert res.status_code == 400


def test_staff_voting_flow(syndic_client, headers, unit, unit2, resident):
    assembly = _create_assembly(syndic_client, headers)
    aid = assembly["id"]
    budget = _add_item(syndic_client, headers, aid, "Budget")
    painting = _add_item(syndic_client, headers, aid, "Painting")

    owner = syndic_client.post(
        f"/api/v1/assemblies/{aid}/participants/",
        {"unit_id": str(unit.id), "resident_id": str(resident.id), "voting_weight": "2.00"},
        format="json",
        **headers,
    ).json()
    proxy = syndic_client.post(
        f"/api/v1/assemblies/{aid}/participants/",
        {"unit_id": str(unit2.id), "proxy_name": "Paul Proxy"},
        format="json",
        **headers,
    ).json()
    dup = syndic_client.post(
        f"/api/v1/assemblies/{aid}/participants/",
        {"unit_id": str(unit.id), "proxy_name": "Someone"},
        format="json",
        **headers,
    )
    assert dup.status_code == 409

    item_url = f"/api/v1/assemblies/{aid}/agenda-items/{budget['id']}"
    assert syndic_client.post(f"{item_url}/start-voting/", **headers).status_code == 400

    syndic_client.post(f"/api/v1/assemblies/{aid}/start/", **headers)
    res = syndic_client.post(f"{item_url}/start-voting/", **headers)
    assert res.json()["status"] == "VOTING"

    other = syndic_client.post(f"/api/v1/assemblies/{aid}/agenda-items/{painting['id']}/start-voting/", **headers)
    assert other.status_code == 400

    otp = syndic_client.get(f"{item_url}/otp/", **headers).json()
    assert len(otp["otp"]) == 6
    assert 0 < otp["remaining_seconds"] <= 300

    res = syndic_client.post(f"{item_url}/votes/{owner['id']}/", {"choice": "YES"}, format="json", **headers)
    assert res.status_code == 201
    assert res.json()["voting_weight"] == "2.00"
    again = syndic_client.post(f"{item_url}/votes/{owner['id']}/", {"choice": "NO"}, format="json", **headers)
    assert again.status_code == 409
    syndic_client.post(f"{item_url}/votes/{proxy['id']}/", {"choice": "NO"}, format="json", **headers)

    check = syndic_client.get(f"{item_url}/votes/check/{owner['id']}/", **headers).json()
    assert check["has_voted"] is True
    assert check["vote"]["choice"] == "YES"

    summary = syndic_client.get(f"{item_url}/votes/summary/", **headers).json()
    assert (summary["yes"], summary["no"], summary["weighted_total"]) == (1, 1, 3.0)

    res = syndic_client.post(f"{item_url}/close-voting/", **headers)
    assert res.json()["status"] == "CLOSED"
    assert res.json()["result"] == "Approved: 1 (66.7%) | Rejected: 1 (33.3%) | Abstentions: 0 | Total: 2 votes"

    late = syndic_client.post(f"{item_url}/votes/{proxy['id']}/", {"choice": "YES"}, format="json", **headers)
    assert late.status_code == 400

    reopen = syndic_client.patch(f"{item_url}/", {"status": "PENDING"}, format="json", **headers)
    assert reopen.status_code == 400

    stats = syndic_client.get(f"/api/v1/assemblies/{aid}/stats/", **headers).json()
    assert stats == {
        "total_participants": 2,
        "total_agenda_items": 2,
        "voted_items": 1,
        "total_voting_weight": 3.0,
    }


def test_minutes_workflow(syndic_client, headers, unit):
    assembly = _create_assembly(syndic_client, headers)
    aid = assembly["id"]
    _add_item(syndic_client, headers, aid, "Budget")

    minutes_url = f"/api/v1/assemblies/{aid}/minutes/"
    assert syndic_client.get(minutes_url, **headers).status_code == 404
    assert syndic_client.post(f"{minutes_url}generate/", **headers).status_code == 400

    syndic_client.post(f"/api/v1/assemblies/{aid}/start/", **headers)
    syndic_client.post(f"/api/v1/assemblies/{aid}/finish/", **headers)

    res = syndic_client.post(f"{minutes_url}generate/", **headers)
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "DRAFT"
    assert body["content"].startswith("MINUTES OF ANNUAL MEETING")
    assert body["attendance_summary"]["total_units"] == 1
    assert body["vote_summary"]["total_agenda_items"] == 1

    assert syndic_client.post(f"{minutes_url}publish/", **headers).status_code == 400
    assert syndic_client.post(f"{minutes_url}approve/", **headers).json()["status"] == "APPROVED"
    assert syndic_client.post(f"{minutes_url}publish/", **headers).json()["status"] == "PUBLISHED"

    res = syndic_client.patch(minutes_url, {"summary": "edited"}, format="json", **headers)
    assert res.status_code == 400


def _register(client, headers, assembly_id, unit, resident=None, **extra):
    payload = {"unit_id": str(unit.id), **extra}
    if resident is not None:
        payload["resident_id"] = str(resident.id)
    return client.post(f"/api/v1/assemblies/{assembly_id}/participants/", payload, format="json", **headers)


def test_open_vote_blocks_finish_and_item_delete(syndic_client, headers, unit, resident):
    assembly = _create_assembly(syndic_client, headers)
    aid = assembly["id"]
    item = _add_item(syndic_client, headers, aid, "Budget")
    owner = _register(syndic_client, headers, aid, unit, resident).json()

    syndic_client.post(f"/api/v1/assemblies/{aid}/start/", **headers)
    item_url = f"/api/v1/assemblies/{aid}/agenda-items/{item['id']}"
    syndic_client.post(f"{item_url}/start-voting/", **headers)

    res = syndic_client.post(f"/api/v1/assemblies/{aid}/finish/", **headers)
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Close all open votes before finishing the assembly."

    assert syndic_client.delete(f"{item_url}/", **headers).status_code == 400

    syndic_client.post(f"{item_url}/votes/{owner['id']}/", {"choice": "YES"}, format="json", **headers)
    syndic_client.post(f"{item_url}/close-voting/", **headers)
    # closed items stay as the record of the vote
    assert syndic_client.delete(f"{item_url}/", **headers).status_code == 400

    assert syndic_client.post(f"/api/v1/assemblies/{aid}/finish/", **headers).json()["status"] == "FINISHED"


def test_participant_who_voted_cannot_be_removed(syndic_client, headers, unit, unit2, resident):
    assembly = _create_assembly(syndic_client, headers)
    aid = assembly["id"]
    item = _add_item(syndic_client, headers, aid, "Budget")
    voter = _register(syndic_client, headers, aid, unit, resident).json()
    idle = _register(syndic_client, headers, aid, unit2, proxy_name="Paul Proxy").json()

    syndic_client.post(f"/api/v1/assemblies/{aid}/start/", **headers)
    item_url = f"/api/v1/assemblies/{aid}/agenda-items/{item['id']}"
    syndic_client.post(f"{item_url}/start-voting/", **headers)
    syndic_client.post(f"{item_url}/votes/{voter['id']}/", {"choice": "NO"}, format="json", **headers)

    res = syndic_client.delete(f"/api/v1/assemblies/{aid}/participants/{voter['id']}/", **headers)
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "A participant who has already voted cannot be removed."

    assert syndic_client.delete(f"/api/v1/assemblies/{aid}/participants/{idle['id']}/", **headers).status_code == 204


def test_register_refused_on_closed_assemblies(syndic_client, headers, unit, resident):
    cancelled = _create_assembly(syndic_client, headers)
    syndic_client.post(f"/api/v1/assemblies/{cancelled['id']}/cancel/", **headers)
    assert _register(syndic_client, headers, cancelled["id"], unit, resident).status_code == 400

    finished = _create_assembly(syndic_client, headers, title="Ordinary meeting")
    syndic_client.post(f"/api/v1/assemblies/{finished['id']}/start/", **headers)
    syndic_client.post(f"/api/v1/assemblies/{finished['id']}/finish/", **headers)
    res = _register(syndic_client, headers, finished["id"], unit, resident)
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Cannot register participants in a finished or cancelled assembly."


def test_join_requires_assembly_in_progress(syndic_client, doorman_client, headers, unit, resident):
    assembly = _create_assembly(syndic_client, headers)
    aid = assembly["id"]
    participant = _register(syndic_client, headers, aid, unit, resident).json()
    join_url = f"/api/v1/assemblies/{aid}/participants/{participant['id']}/join/"

    assert doorman_client.post(join_url, **headers).status_code == 400

    syndic_client.post(f"/api/v1/assemblies/{aid}/start/", **headers)
    res = doorman_client.post(join_url, **headers)
    assert res.status_code == 200
    assert res.json()["joined_at"]
