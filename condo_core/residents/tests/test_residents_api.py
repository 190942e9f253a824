import pytest

from condo_core.residents.models import Resident, ResidentType, Vehicle
from condo_core.units.models import Unit

pytestmark = pytest.mark.django_db


@pytest.fixture
def neighbour(tenant, unit2, other_resident_user):
    return Resident.objects.create(
        tenant=tenant,
        unit=unit2,
        user=other_resident_user,
        type=ResidentType.TENANT,
        full_name="Ned Neighbour",
    )


def test_staff_lists_and_searches(doorman_client, headers, resident, neighbour):
    res = doorman_client.get("/api/v1/residents/", **headers)
    assert res.status_code == 200
    assert {r["id"] for r in res.json()["results"]} == {str(resident.id), str(neighbour.id)}

    res = doorman_client.get("/api/v1/residents/", {"search": "ned"}, **headers)
    assert [r["full_name"] for r in res.json()["results"]] == ["Ned Neighbour"]


def test_resident_cannot_list(resident_client, headers, resident):
    assert resident_client.get("/api/v1/residents/", **headers).status_code == 403


def test_resident_sees_only_own_record(resident_client, headers, resident, neighbour):
    assert resident_client.get(f"/api/v1/residents/{resident.id}/", **headers).status_code == 200
    assert resident_client.get(f"/api/v1/residents/{neighbour.id}/", **headers).status_code == 404

    me = resident_client.get("/api/v1/residents/me/", **headers)
    assert me.status_code == 200
    assert me.json()["id"] == str(resident.id)


def test_by_unit(syndic_client, headers, unit, resident):
    res = syndic_client.get(f"/api/v1/residents/unit/{unit.id}/", **headers)
    assert [r["id"] for r in res.json()] == [str(resident.id)]


def test_resident_updates_own_record_only(resident_client, headers, resident, neighbour):
    res = resident_client.patch(f"/api/v1/residents/{resident.id}/", {"phone": "555-0101"}, format="json", **headers)
    assert res.status_code == 200
    assert res.json()["phone"] == "555-0101"

    res = resident_client.patch(f"/api/v1/residents/{neighbour.id}/", {"phone": "555-0101"}, format="json", **headers)
    assert res.status_code == 403


def test_move_to_foreign_unit_is_404(syndic_client, headers, resident, other_tenant):
    foreign = Unit.objects.create(tenant=other_tenant, block="Z", number="9", identifier="Z-9")
    res = syndic_client.patch(f"/api/v1/residents/{resident.id}/", {"unit_id": str(foreign.id)}, format="json", **headers)
    assert res.status_code == 404


def test_sub_records(resident_client, headers, resident):
    url = f"/api/v1/residents/{resident.id}/vehicles/"
    res = resident_client.post(url, {"brand": "Fiat", "model": "Uno", "color": "Red", "plate": "ABC1D23"}, format="json", **headers)
    assert res.status_code == 201
    vehicle_id = res.json()["id"]

    detail = resident_client.get(f"/api/v1/residents/{resident.id}/", **headers).json()
    assert [v["plate"] for v in detail["vehicles"]] == ["ABC1D23"]

    assert resident_client.delete(f"{url}{vehicle_id}/", **headers).status_code == 204
    assert not Vehicle.objects.filter(id=vehicle_id).exists()
    assert resident_client.delete(f"{url}{vehicle_id}/", **headers).status_code == 404


def test_manager_only_lifecycle(syndic_client, resident_client, headers, resident):
    assert resident_client.post(f"/api/v1/residents/{resident.id}/deactivate/", **headers).status_code == 403

    res = syndic_client.post(f"/api/v1/residents/{resident.id}/deactivate/", **headers)
    assert res.json()["status"] == "INACTIVE"

    assert syndic_client.delete(f"/api/v1/residents/{resident.id}/", **headers).status_code == 204
