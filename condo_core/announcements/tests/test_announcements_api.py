from datetime import datetime

import pytest
from django.utils import timezone

from condo_core.announcements.models import Announcement, AnnouncementType, AnnouncementView
from condo_core.announcements.services import AnnouncementService, assembly_announcement_content

pytestmark = pytest.mark.django_db


@pytest.fixture
def announcement(tenant, syndic):
    return Announcement.objects.create(
        tenant=tenant,
        title="Water shutdown",
        content="<p>Saturday 9am to noon.</p>",
        type=AnnouncementType.MAINTENANCE,
        created_by=syndic,
    )


def test_only_managers_write(syndic_client, doorman_client, headers):
    payload = {"title": "Welcome", "content": "<p>Hello neighbours</p>"}
    assert doorman_client.post("/api/v1/announcements/", payload, format="json", **headers).status_code == 403

    res = syndic_client.post("/api/v1/announcements/", payload, format="json", **headers)
    assert res.status_code == 201
    body = res.json()
    assert body["type"] == "GENERAL"
    assert body["published"] is True
    assert (body["view_count"], body["like_count"], body["liked_by_me"]) == (0, 0, False)


def test_unpublished_are_hidden_from_list(syndic_client, resident_client, headers, announcement):
    syndic_client.patch(f"/api/v1/announcements/{announcement.id}/", {"published": False}, format="json", **headers)
    assert resident_client.get("/api/v1/announcements/", **headers).json()["count"] == 0


def test_views_are_counted_once_per_user(resident_client, doorman_client, headers, announcement):
    url = f"/api/v1/announcements/{announcement.id}/view/"
    assert resident_client.post(url, **headers).status_code == 204
    assert resident_client.post(url, **headers).status_code == 204
    doorman_client.post(url, **headers)

    assert AnnouncementView.objects.filter(announcement=announcement).count() == 2
    body = resident_client.get(f"/api/v1/announcements/{announcement.id}/", **headers).json()
    assert body["view_count"] == 2


def test_like_toggles(resident_client, doorman_client, headers, announcement):
    url = f"/api/v1/announcements/{announcement.id}/like/"
    assert resident_client.post(url, **headers).json() == {"liked": True}
    doorman_client.post(url, **headers)

    rows = resident_client.get("/api/v1/announcements/", **headers).json()["results"]
    assert (rows[0]["like_count"], rows[0]["liked_by_me"]) == (2, True)

    assert resident_client.post(url, **headers).json() == {"liked": False}
    body = resident_client.get(f"/api/v1/announcements/{announcement.id}/", **headers).json()
    assert (body["like_count"], body["liked_by_me"]) == (1, False)


def test_foreign_announcement_is_404(resident_client, headers, other_tenant):
    foreign = Announcement.objects.create(tenant=other_tenant, title="Elsewhere", content="x")
    assert resident_client.get(f"/api/v1/announcements/{foreign.id}/", **headers).status_code == 404
    assert resident_client.post(f"/api/v1/announcements/{foreign.id}/like/", **headers).status_code == 404


def test_deleting_creator_keeps_announcement(announcement, syndic):
    syndic.delete()
    announcement.refresh_from_db()
    assert announcement.created_by_id is None


def test_assembly_announcement_content():
    when = timezone.make_aware(datetime(2026, 11, 5, 19, 30))
    html = assembly_announcement_content(title="Budget", scheduled_at=when, description="Yearly budget")
    assert "<strong>Budget</strong>" in html
    assert "05/11/2026 19:30" in html
    assert "<p>Yearly budget</p>" in html


def test_create_from_assembly_parses_iso_dates(tenant):
    announcement = AnnouncementService.create_from_assembly(
        tenant_id=tenant.id,
        assembly_id=None,
        title="Budget",
        scheduled_at="2026-11-05T19:30:00+00:00",
    )
    assert announcement.type == AnnouncementType.ASSEMBLY
    assert announcement.title == "Assembly scheduled: Budget"
    assert "05/11/2026 19:30" in announcement.content


def test_assembly_survives_announcement_failure(syndic_client, headers, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("announcement store down")

    monkeypatch.setattr(AnnouncementService, "create_from_assembly", boom)

    res = syndic_client.post(
        "/api/v1/assemblies/",
        {"title": "Budget", "scheduled_at": "2026-11-05T19:30:00Z"},
        format="json",
        **headers,
    )
    assert res.status_code == 201
    assert not Announcement.objects.exists()
