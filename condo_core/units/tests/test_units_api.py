import pytest

from condo_core.units.models import Unit, UnitStatus

pytestmark = pytest.mark.django_db


def test_create_defaults_identifier(syndic_client, headers, tenant):
    res = syndic_client.post("/api/v1/units/", {"block": "B", "number": "12"}, format="json", **headers)
    assert res.status_code == 201

    body = res.json()
    assert body["identifier"] == "B-12"
    assert body["status"] == "ACTIVE"
    assert body["tenant_id"] == str(tenant.id)


def test_list_filters_and_orders(syndic_client, headers, tenant):
    Unit.objects.create(tenant=tenant, block="B", number="2", identifier="B-2")
    Unit.objects.create(tenant=tenant, block="A", number="2", identifier="A-2")
    Unit.objects.create(tenant=tenant, block="A", number="1", identifier="A-1", status=UnitStatus.INACTIVE)

    res = syndic_client.get("/api/v1/units/", **headers)
    assert res.status_code == 200
    assert [u["identifier"] for u in res.json()["results"]] == ["A-1", "A-2", "B-2"]

    active = syndic_client.get("/api/v1/units/", {"status": "ACTIVE", "block": "a"}, **headers)
    assert [u["identifier"] for u in active.json()["results"]] == ["A-2"]

    search = syndic_client.get("/api/v1/units/", {"search": "b-"}, **headers)
    assert [u["identifier"] for u in search.json()["results"]] == ["B-2"]


def test_bad_status_filter_is_400(syndic_client, headers):
    res = syndic_client.get("/api/v1/units/", {"status": "NOPE"}, **headers)
    assert res.status_code == 400


def test_unit_limit_blocks_creation(syndic_client, headers, tenant):
    tenant.max_units = 1
    tenant.save(update_fields=["max_units"])
    Unit.objects.create(tenant=tenant, block="A", number="1", identifier="A-1")

    res = syndic_client.post("/api/v1/units/", {"block": "A", "number": "2"}, format="json", **headers)
    assert res.status_code == 403
    assert "Limit of 1 units reached" in res.json()["error"]["message"]


def test_update_recomputes_identifier(syndic_client, headers, unit, unit2):
    res = syndic_client.patch(f"/api/v1/units/{unit.id}/", {"number": "201"}, format="json", **headers)
    assert res.status_code == 200
    assert res.json()["identifier"] == "A-201"

    clash = syndic_client.patch(f"/api/v1/units/{unit.id}/", {"identifier": unit2.identifier}, format="json", **headers)
    assert clash.status_code == 409


def test_activate_deactivate_and_count(syndic_client, headers, unit):
    url = f"/api/v1/units/{unit.id}/"
    assert syndic_client.post(f"{url}deactivate/", **headers).json()["status"] == "INACTIVE"
    assert syndic_client.post(f"{url}activate/", **headers).json()["status"] == "ACTIVE"
    assert syndic_client.get("/api/v1/units/count/", **headers).json() == {"count": 1}


def test_units_are_tenant_isolated(syndic_client, other_tenant):
    foreign = Unit.objects.create(tenant=other_tenant, block="Z", number="1", identifier="Z-1")
    res = syndic_client.get(f"/api/v1/units/{foreign.id}/", HTTP_X_TENANT_ID=str(other_tenant.id))
    assert res.status_code == 403


def test_missing_scope_header_is_400(syndic_client):
    res = syndic_client.get("/api/v1/units/")
    assert res.status_code == 400


def test_resident_role_matrix(resident_client, headers, unit):
    assert resident_client.get("/api/v1/units/", **headers).status_code == 403
    assert resident_client.get(f"/api/v1/units/{unit.id}/", **headers).status_code == 200
    assert resident_client.post("/api/v1/units/", {"block": "C", "number": "1"}, format="json", **headers).status_code == 403


def test_delete(syndic_client, headers, unit):
    assert syndic_client.delete(f"/api/v1/units/{unit.id}/", **headers).status_code == 204
    assert syndic_client.get(f"/api/v1/units/{unit.id}/", **headers).status_code == 404
