from datetime import timedelta

import pytest
from django.utils import timezone

from condo_core.reservations.models import CommonArea, Reservation, ReservationStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def area(tenant):
    return CommonArea.objects.create(tenant=tenant, name="Party room", max_capacity=40)


@pytest.fixture
def tomorrow():
    return timezone.localdate() + timedelta(days=1)


def _reserve(client, headers, area, day):
    return client.post(
        "/api/v1/reservations/",
        {"common_area_id": str(area.id), "reservation_date": day.isoformat(), "notes": "Birthday"},
        format="json",
        **headers,
    )


def test_areas_managed_by_syndic(syndic_client, resident_client, headers):
    res = resident_client.post("/api/v1/common-areas/", {"name": "Gym"}, format="json", **headers)
    assert res.status_code == 403

    res = syndic_client.post("/api/v1/common-areas/", {"name": "Gym", "rules": "No shoes"}, format="json", **headers)
    assert res.status_code == 201
    area_id = res.json()["id"]

    syndic_client.patch(f"/api/v1/common-areas/{area_id}/", {"active": False}, format="json", **headers)
    assert resident_client.get("/api/v1/common-areas/", **headers).json() == []

    listed = resident_client.get("/api/v1/common-areas/", {"include_inactive": "true"}, **headers).json()
    assert [a["name"] for a in listed] == ["Gym"]


def test_create_reservation(resident_client, headers, area, tomorrow, resident_user):
    res = _reserve(resident_client, headers, area, tomorrow)
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "PENDING"
    assert body["common_area_name"] == "Party room"
    assert body["reserved_by_id"] == resident_user.id


def test_same_day_is_conflict_until_released(resident_client, syndic_client, headers, area, tomorrow):
    first = _reserve(resident_client, headers, area, tomorrow).json()
    assert _reserve(syndic_client, headers, area, tomorrow).status_code == 409

    res = resident_client.patch(
        f"/api/v1/reservations/{first['id']}/status/", {"status": "CANCELLED"}, format="json", **headers
    )
    assert res.json()["status"] == "CANCELLED"
    assert _reserve(syndic_client, headers, area, tomorrow).status_code == 201


def test_past_date_and_inactive_area(resident_client, headers, area, tenant, tomorrow):
    yesterday = timezone.localdate() - timedelta(days=1)
    assert _reserve(resident_client, headers, area, yesterday).status_code == 400

    closed = CommonArea.objects.create(tenant=tenant, name="Pool", active=False)
    assert _reserve(resident_client, headers, closed, tomorrow).status_code == 400


def test_unknown_area_is_404(resident_client, headers, other_tenant, tomorrow):
    foreign = CommonArea.objects.create(tenant=other_tenant, name="Elsewhere")
    assert _reserve(resident_client, headers, foreign, tomorrow).status_code == 404


def test_status_changes(resident_client, doorman_client, headers, area, tomorrow, doorman):
    reservation = _reserve(resident_client, headers, area, tomorrow).json()
    url = f"/api/v1/reservations/{reservation['id']}/status/"

    assert resident_client.patch(url, {"status": "APPROVED"}, format="json", **headers).status_code == 403
    assert doorman_client.patch(url, {"status": "REJECTED"}, format="json", **headers).status_code == 400

    res = doorman_client.patch(url, {"status": "APPROVED"}, format="json", **headers)
    body = res.json()
    assert body["status"] == "APPROVED"
    assert body["approved_by_id"] == doorman.id
    assert body["approved_at"]


def test_reject_keeps_reason(syndic_client, resident_client, headers, area, tomorrow):
    reservation = _reserve(resident_client, headers, area, tomorrow).json()
    res = syndic_client.patch(
        f"/api/v1/reservations/{reservation['id']}/status/",
        {"status": "REJECTED", "rejection_reason": "Maintenance scheduled"},
        format="json",
        **headers,
    )
    assert res.json()["rejection_reason"] == "Maintenance scheduled"


def test_residents_only_see_their_own(
    resident_client, syndic_client, headers, area, tomorrow, other_resident_user, tenant
):
    mine = _reserve(resident_client, headers, area, tomorrow).json()
    theirs = Reservation.objects.create(
        tenant=tenant,
        common_area=area,
        reserved_by=other_resident_user,
        reservation_date=tomorrow + timedelta(days=1),
    )

    listed = resident_client.get("/api/v1/reservations/", **headers).json()["results"]
    assert [r["id"] for r in listed] == [mine["id"]]
    assert resident_client.get(f"/api/v1/reservations/{theirs.id}/", **headers).status_code == 404
    assert resident_client.patch(
        f"/api/v1/reservations/{theirs.id}/status/", {"status": "CANCELLED"}, format="json", **headers
    ).status_code == 403

    assert syndic_client.get("/api/v1/reservations/", **headers).json()["count"] == 2


def test_by_area_calendar(resident_client, headers, area, tenant, resident_user, tomorrow):
    Reservation.objects.create(
        tenant=tenant,
        common_area=area,
        reserved_by=resident_user,
        reservation_date=tomorrow,
        status=ReservationStatus.REJECTED,
    )
    active = _reserve(resident_client, headers, area, tomorrow).json()
    next_year = tomorrow.replace(year=tomorrow.year + 1, day=1)
    Reservation.objects.create(tenant=tenant, common_area=area, reserved_by=resident_user, reservation_date=next_year)

    url = f"/api/v1/reservations/area/{area.id}/"
    assert len(resident_client.get(url, **headers).json()) == 2

    month = tomorrow.strftime("%Y-%m")
    rows = resident_client.get(url, {"month": month}, **headers).json()
    assert [r["id"] for r in rows] == [active["id"]]

    assert resident_client.get(url, {"month": "2026/13"}, **headers).status_code == 400


def test_delete_is_staff_only(resident_client, doorman_client, headers, area, tomorrow):
    reservation = _reserve(resident_client, headers, area, tomorrow).json()
    url = f"/api/v1/reservations/{reservation['id']}/"
    assert resident_client.delete(url, **headers).status_code == 403
    assert doorman_client.delete(url, **headers).status_code == 204
