import uuid

import pytest

from condo_core.issues.models import Issue, IssueCategory

pytestmark = pytest.mark.django_db


@pytest.fixture
def category(tenant):
    return IssueCategory.objects.create(tenant=tenant, name="Plumbing")


def _open(client, headers, **extra):
    payload = {"title": "Leak in garage", "description": "Water dripping near spot 12"}
    payload.update(extra)
    return client.post("/api/v1/issues/", payload, format="json", **headers)


def test_resident_opens_issue(resident_client, headers, unit, category, resident_user):
    res = _open(resident_client, headers, unit_id=str(unit.id), category_id=str(category.id))
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "OPEN"
    assert body["priority"] == "MEDIUM"
    assert body["unit_identifier"] == "A-101"
    assert body["category_name"] == "Plumbing"
    assert body["created_by_id"] == resident_user.id


def test_unknown_references_are_rejected(resident_client, headers):
    res = _open(resident_client, headers, category_id=str(uuid.uuid4()))
    assert res.status_code == 400
    assert _open(resident_client, headers, unit_id=str(uuid.uuid4())).status_code == 400


def test_residents_see_only_their_issues(resident_client, syndic_client, headers, tenant, other_resident_user):
    mine = _open(resident_client, headers).json()
    theirs = Issue.objects.create(tenant=tenant, title="Noise", description="Loud music", created_by=other_resident_user)

    listed = resident_client.get("/api/v1/issues/", **headers).json()["results"]
    assert [i["id"] for i in listed] == [mine["id"]]
    assert resident_client.get(f"/api/v1/issues/{theirs.id}/", **headers).status_code == 403
    assert syndic_client.get("/api/v1/issues/", **headers).json()["count"] == 2


def test_resident_edits_but_cannot_change_status(resident_client, headers, tenant, other_resident_user):
    mine = _open(resident_client, headers).json()
    url = f"/api/v1/issues/{mine['id']}/"

    res = resident_client.patch(url, {"priority": "HIGH"}, format="json", **headers)
    assert res.json()["priority"] == "HIGH"
    assert resident_client.patch(url, {"status": "RESOLVED"}, format="json", **headers).status_code == 403

    theirs = Issue.objects.create(tenant=tenant, title="Noise", description="Loud music", created_by=other_resident_user)
    res = resident_client.patch(f"/api/v1/issues/{theirs.id}/", {"title": "x"}, format="json", **headers)
    assert res.status_code == 403


def test_resolving_stamps_resolver(resident_client, doorman_client, headers, doorman):
    issue = _open(resident_client, headers).json()
    url = f"/api/v1/issues/{issue['id']}/"

    res = doorman_client.patch(url, {"status": "IN_PROGRESS"}, format="json", **headers)
    assert res.json()["resolved_at"] is None

    res = doorman_client.patch(url, {"status": "RESOLVED", "resolution_note": " Valve replaced "}, format="json", **headers)
    body = res.json()
    assert body["status"] == "RESOLVED"
    assert body["resolved_by_id"] == doorman.id
    assert body["resolved_at"]
    assert body["resolution_note"] == "Valve replaced"


def test_filters(syndic_client, resident_client, headers):
    _open(resident_client, headers, priority="HIGH")
    _open(resident_client, headers, title="Broken lamp", priority="LOW")

    rows = syndic_client.get("/api/v1/issues/", {"priority": "HIGH"}, **headers).json()["results"]
    assert [r["title"] for r in rows] == ["Leak in garage"]
    assert syndic_client.get("/api/v1/issues/", {"status": "RESOLVED"}, **headers).json()["count"] == 0


def test_delete_is_staff_only(resident_client, syndic_client, headers):
    issue = _open(resident_client, headers).json()
    assert resident_client.delete(f"/api/v1/issues/{issue['id']}/", **headers).status_code == 403
    assert syndic_client.delete(f"/api/v1/issues/{issue['id']}/", **headers).status_code == 204


def test_categories(syndic_client, resident_client, headers):
    assert resident_client.post("/api/v1/issue-categories/", {"name": "Electrical"}, format="json", **headers).status_code == 403

    category = syndic_client.post("/api/v1/issue-categories/", {"name": "Electrical"}, format="json", **headers).json()
    syndic_client.patch(f"/api/v1/issue-categories/{category['id']}/", {"active": False}, format="json", **headers)

    assert resident_client.get("/api/v1/issue-categories/", **headers).json() == []
    rows = resident_client.get("/api/v1/issue-categories/", {"include_inactive": "1"}, **headers).json()
    assert [c["name"] for c in rows] == ["Electrical"]


def test_deleting_category_keeps_issues(syndic_client, resident_client, headers, category):
    issue = _open(resident_client, headers, category_id=str(category.id)).json()
    assert syndic_client.delete(f"/api/v1/issue-categories/{category.id}/", **headers).status_code == 204

    body = syndic_client.get(f"/api/v1/issues/{issue['id']}/", **headers).json()
    assert body["category_id"] is None
