import pytest
from django.contrib.auth import get_user_model

from condo_core.conftest import client_for
from condo_core.iam.models import UserTenant

pytestmark = pytest.mark.django_db


def test_users_endpoints_are_saas_admin_only(syndic_client):
    res = syndic_client.get("/api/v1/users/")
    assert res.status_code == 403


def test_unregistered_user_is_rejected():
    bare = get_user_model().objects.create_user(username="bare", password="x")
    res = client_for(bare).get("/api/v1/units/", HTTP_X_TENANT_ID="00000000-0000-0000-0000-000000000001")
    assert res.status_code == 403
    assert res.json()["error"]["message"] == "User is not registered."


def test_create_user_with_tenant(admin_client, tenant):
    res = admin_client.post(
        "/api/v1/users/",
        {"email": "New.Syndic@Example.com", "role": "SYNDIC", "tenant_id": str(tenant.id)},
        format="json",
    )
    assert res.status_code == 201

    body = res.json()
    assert body["email"] == "new.syndic@example.com"
    assert body["role"] == "SYNDIC"
    assert body["name"] == "new.syndic"
    assert body["tenant"]["id"] == str(tenant.id)
    assert [m["tenant"]["id"] for m in body["memberships"]] == [str(tenant.id)]


def test_create_is_idempotent_by_email(admin_client):
    first = admin_client.post("/api/v1/users/", {"email": "a@example.com"}, format="json")
    second = admin_client.post("/api/v1/users/", {"email": "A@example.com", "name": "Ann"}, format="json")

    assert first.json()["id"] == second.json()["id"]
    assert second.json()["name"] == "Ann"


def test_add_and_remove_membership(admin_client, resident_user, other_tenant):
    url = f"/api/v1/users/{resident_user.id}/memberships/"
    res = admin_client.post(url, {"tenant_id": str(other_tenant.id)}, format="json")
    assert res.status_code == 200
    assert UserTenant.objects.filter(user=resident_user, tenant=other_tenant).exists()

    res = admin_client.post(f"{url}remove/", {"tenant_id": str(other_tenant.id)}, format="json")
    assert res.status_code == 200
    assert not UserTenant.objects.filter(user=resident_user, tenant=other_tenant).exists()

    again = admin_client.post(f"{url}remove/", {"tenant_id": str(other_tenant.id)}, format="json")
    assert again.status_code == 404


def test_update_role(admin_client, resident_user):
    res = admin_client.patch(f"/api/v1/users/{resident_user.id}/", {"role": "DOORMAN"}, format="json")
    assert res.status_code == 200
    assert res.json()["role"] == "DOORMAN"
