import pytest

pytestmark = pytest.mark.django_db


def test_bootstrap_picks_first_membership(syndic_client, tenant):
    res = syndic_client.get("/api/v1/session/bootstrap/")
    assert res.status_code == 200

    body = res.json()
    assert body["active_tenant"]["id"] == str(tenant.id)
    assert body["active_tenant"]["slug"] == tenant.slug
    assert body["subscription"]["plan"] == "STARTER"
    assert body["subscription"]["max_units"] == 30


def test_bootstrap_without_memberships(admin_client):
    res = admin_client.get("/api/v1/session/bootstrap/")
    assert res.status_code == 200
    body = res.json()
    assert body["memberships"] == []
    assert body["active_tenant"] is None
    assert body["subscription"] is None


def test_bootstrap_rejects_foreign_scope(syndic_client, other_tenant):
    res = syndic_client.get("/api/v1/session/bootstrap/", HTTP_X_TENANT_ID=str(other_tenant.id))
    assert res.status_code == 403
