import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    res = APIClient().get("/api/me/")
    assert res.status_code == 401


def test_login_sets_cookies(syndic, settings):
    syndic.set_password("Pass@12345")
    syndic.save(update_fields=["password"])

    res = APIClient().post("/api/v1/auth/login/", {"username": syndic.username, "password": "Pass@12345"}, format="json")
    assert res.status_code == 200

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies


def test_login_rejects_bad_password(syndic):
    res = APIClient().post("/api/v1/auth/login/", {"username": syndic.username, "password": "nope"}, format="json")
    assert res.status_code in (401, 403)


def test_cookie_token_authenticates_me(syndic, settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(RefreshToken.for_user(syndic).access_token)

    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["user"]["id"] == syndic.id


def test_me_returns_memberships(syndic_client, syndic, tenant):
    res = syndic_client.get("/api/v1/me/")
    assert res.status_code == 200

    body = res.json()
    assert body["user"]["id"] == syndic.id
    assert body["user"]["role"] == "SYNDIC"
    assert [m["tenant_id"] for m in body["memberships"]] == [str(tenant.id)]
    assert body["active_scope"] is None


def test_me_with_scope_header(syndic_client, tenant, headers):
    res = syndic_client.get("/api/v1/me/", **headers)
    assert res.status_code == 200
    assert res.json()["active_scope"] == {"tenant_id": str(tenant.id)}


def test_scope_header_blocks_non_member(syndic, other_tenant):
    """
    Real JWT so CookieOrHeaderJWTAuthentication runs and enforces scope.
    """
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(syndic).access_token}")

    res = client.get("/api/v1/me/", HTTP_X_TENANT_ID=str(other_tenant.id))
    assert res.status_code == 403


def test_switch_tenant(syndic_client, tenant, other_tenant):
    ok = syndic_client.post("/api/v1/me/", {"tenant_id": str(tenant.id)}, format="json")
    assert ok.status_code == 200
    assert ok.json()["active_scope"]["tenant_id"] == str(tenant.id)

    denied = syndic_client.post("/api/v1/me/", {"tenant_id": str(other_tenant.id)}, format="json")
    assert denied.status_code == 403


def test_logout_clears_cookies(syndic_client, settings):
    res = syndic_client.post("/api/v1/auth/logout/")
    assert res.status_code == 200
    assert res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value == ""
