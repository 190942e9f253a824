import pytest

from condo_core.tenants.models import Tenant

pytestmark = pytest.mark.django_db


def test_admin_creates_tenant_on_starter(admin_client):
    res = admin_client.post("/api/v1/tenants/", {"name": "Sunset Towers", "slug": "sunset-towers"}, format="json")
    assert res.status_code == 201

    body = res.json()
    assert body["slug"] == "sunset-towers"
    assert body["plan"] == "STARTER"
    assert body["max_units"] == 30
    assert body["active"] is True


def test_duplicate_slug_is_conflict(admin_client, tenant):
    res = admin_client.post("/api/v1/tenants/", {"name": "Again", "slug": tenant.slug}, format="json")
    assert res.status_code == 409


@pytest.mark.parametrize("slug", ["Upper", "double--hyphen", "-edge", "spa ce"])
def test_invalid_slug_is_rejected(admin_client, slug):
    res = admin_client.post("/api/v1/tenants/", {"name": "X", "slug": slug}, format="json")
    assert res.status_code == 400


def test_by_slug(admin_client, tenant):
    res = admin_client.get(f"/api/v1/tenants/by-slug/{tenant.slug}/")
    assert res.status_code == 200
    assert res.json()["id"] == str(tenant.id)

    missing = admin_client.get("/api/v1/tenants/by-slug/nope/")
    assert missing.status_code == 404


def test_activate_deactivate_is_idempotent(admin_client, tenant):
    url = f"/api/v1/tenants/{tenant.id}/"
    assert admin_client.post(f"{url}deactivate/").json()["active"] is False
    assert admin_client.post(f"{url}deactivate/").json()["active"] is False
    assert admin_client.post(f"{url}activate/").json()["active"] is True


def test_syndic_reads_and_updates_own_tenant_only(syndic_client, tenant, other_tenant):
    assert syndic_client.get(f"/api/v1/tenants/{tenant.id}/").status_code == 200
    assert syndic_client.get(f"/api/v1/tenants/{other_tenant.id}/").status_code == 403

    res = syndic_client.patch(f"/api/v1/tenants/{tenant.id}/", {"name": "Renamed"}, format="json")
    assert res.status_code == 200
    assert Tenant.objects.get(id=tenant.id).name == "Renamed"

    assert syndic_client.get("/api/v1/tenants/").status_code == 403
    assert syndic_client.delete(f"/api/v1/tenants/{tenant.id}/").status_code == 403


def test_admin_deletes_tenant(admin_client, tenant):
    assert admin_client.delete(f"/api/v1/tenants/{tenant.id}/").status_code == 204
    assert not Tenant.objects.filter(id=tenant.id).exists()
