import json
import uuid

import pytest
from django.contrib.auth.models import User
from django.test import RequestFactory

from condo_core.common.middleware import TenantScopeMiddleware


def _process(req):
    mw = TenantScopeMiddleware(get_response=lambda r: None)
    return mw.process_request(req)


@pytest.mark.django_db
def test_missing_scope_returns_error_envelope():
    req = RequestFactory().get("/api/v1/units/")
    req.user = User.objects.create_user(username="u1", password="pass123")

    resp = _process(req)

    assert resp is not None
    assert resp.status_code == 400

    body = json.loads(resp.content.decode("utf-8"))
    assert body["error"]["code"] == "validation_error"
    assert "Missing scope header" in body["error"]["message"]
    assert "request_id" in body["error"]


@pytest.mark.django_db
def test_invalid_scope_returns_error_envelope():
    req = RequestFactory().get("/api/v1/units/", HTTP_X_TENANT_ID="not-a-uuid")
    req.user = User.objects.create_user(username="u2", password="pass123")

    resp = _process(req)

    assert resp.status_code == 400
    body = json.loads(resp.content.decode("utf-8"))
    assert "Invalid scope header" in body["error"]["message"]


@pytest.mark.django_db
def test_non_member_returns_403_envelope(monkeypatch):
    monkeypatch.setattr(
        "condo_core.common.middleware.user_can_access_tenant",
        lambda user, tenant_id: False,
        raising=True,
    )

    req = RequestFactory().get("/api/v1/units/", HTTP_X_TENANT_ID=str(uuid.uuid4()))
    req.user = User.objects.create_user(username="u3", password="pass123")

    resp = _process(req)

    assert resp.status_code == 403
    body = json.loads(resp.content.decode("utf-8"))
    assert body["error"]["code"] == "permission_denied"
    assert "do not have access" in body["error"]["message"].lower()


@pytest.mark.django_db
def test_member_gets_scope_attached(tenant, syndic):
    req = RequestFactory().get("/api/v1/units/", HTTP_X_TENANT_ID=str(tenant.id))
    req.user = syndic

    assert _process(req) is None
    assert req.tenant_id == tenant.id


@pytest.mark.django_db
@pytest.mark.parametrize(
    "path",
    [
        "/api/v1/health/",
        "/api/v1/auth/login/",
        "/api/v1/subscriptions/plans/",
        "/api/v1/assemblies/checkin/",
        "/api/v1/assemblies/session/abc/",
        "/api/v1/invites/validate/abc/",
        "/api/docs/",
    ],
)
def test_public_and_admin_paths_skip_scope(path):
    req = RequestFactory().get(path)
    req.user = User.objects.create_user(username="u4", password="pass123")

    assert _process(req) is None


@pytest.mark.django_db
def test_me_scope_header_is_optional():
    req = RequestFactory().get("/api/v1/me/")
    req.user = User.objects.create_user(username="u5", password="pass123")

    assert _process(req) is None
