from datetime import timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework.test import APIClient

from condo_core.assemblies.models import AgendaItem, Assembly, AssemblyParticipant, AssemblyStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def public():
    return APIClient()


@pytest.fixture
def live_assembly(syndic_client, headers, tenant):
    assembly = Assembly.objects.create(
        tenant=tenant,
        title="Extraordinary meeting",
        scheduled_at=timezone.now() + timedelta(hours=1),
    )
    AgendaItem.objects.create(assembly=assembly, title="Elevator repair", order_index=0)

    base = f"/api/v1/assemblies/{assembly.id}"
    token = syndic_client.post(f"{base}/generate-checkin-token/", **headers).json()["checkin_token"]
    otp = syndic_client.post(f"{base}/otp/generate/", **headers).json()["otp"]
    syndic_client.post(f"{base}/start/", **headers)

    assembly.refresh_from_db()
    return {"assembly": assembly, "token": token, "otp": otp}


def _checkin(public, live, unit_identifier="A-101", **extra):
    payload = {
        "checkin_token": live["token"],
        "otp": live["otp"],
        "unit_identifier": unit_identifier,
    }
    payload.update(extra)
    return public.post("/api/v1/assemblies/checkin/", payload, format="json")


def test_validate_checkin_token(public, live_assembly):
    body = public.get(f"/api/v1/assemblies/validate-checkin/{live_assembly['token']}/").json()
    assert body["valid"] is True
    assert body["requires_otp"] is True
    assert body["assembly"]["tenant_name"] == "Test Condominium"

    unknown = public.get("/api/v1/assemblies/validate-checkin/nope/").json()
    assert unknown == {"valid": False, "requires_otp": False, "assembly": None}


def test_validate_otp(public, live_assembly):
    url = f"/api/v1/assemblies/checkin/validate-otp/{live_assembly['token']}/"
    assert public.post(url, {"otp": live_assembly["otp"]}, format="json").json()["valid"] is True
    # generated codes are always six digits starting at 100000
    assert public.post(url, {"otp": "000000"}, format="json").json() == {"valid": False, "assembly_id": None}


def test_checkin_rejects_bad_otp_and_unknown_unit(public, live_assembly, unit):
    assert _checkin(public, {**live_assembly, "otp": "000000"}).status_code == 401
    assert _checkin(public, live_assembly, unit_identifier="Z-999").status_code == 404


def test_expired_otp_is_rejected(public, live_assembly, unit):
    Assembly.objects.filter(id=live_assembly["assembly"].id).update(otp_expires_at=timezone.now() - timedelta(seconds=1))
    assert _checkin(public, live_assembly).status_code == 401


def test_session_vote_with_voting_otp(public, syndic_client, headers, live_assembly, unit):
    res = _checkin(public, live_assembly)
    assert res.status_code == 201
    body = res.json()
    assert body["approval_status"] == "APPROVED"
    assert body["is_proxy"] is False
    session = body["session_token"]

    assert _checkin(public, live_assembly).status_code == 409

    status = public.get(f"/api/v1/assemblies/session/{session}/status/").json()
    assert status["can_vote"] is True
    assert status["message"] == "You are able to vote."

    aid = live_assembly["assembly"].id
    item = AgendaItem.objects.get(assembly_id=aid)
    syndic_client.post(f"/api/v1/assemblies/{aid}/agenda-items/{item.id}/start-voting/", **headers)
    voting_otp = syndic_client.get(f"/api/v1/assemblies/{aid}/agenda-items/{item.id}/otp/", **headers).json()["otp"]

    vote_url = f"/api/v1/assemblies/session/{session}/agenda/{item.id}/vote/"
    assert public.post(vote_url, {"choice": "YES"}, format="json").status_code == 401

    res = public.post(vote_url, {"choice": "YES", "otp": voting_otp}, format="json")
    assert res.status_code == 201
    assert public.post(vote_url, {"choice": "NO", "otp": voting_otp}, format="json").status_code == 409

    agenda = public.get(f"/api/v1/assemblies/session/{session}/agenda/").json()
    assert agenda[0]["has_voted"] is True

    detail = public.get(f"/api/v1/assemblies/session/{session}/agenda/{item.id}/").json()
    assert detail["can_vote"] is False


def test_proxy_needs_approval(public, syndic_client, headers, live_assembly, unit2):
    res = _checkin(public, live_assembly, unit_identifier="A-102", proxy_name="Paula Proxy", proxy_document="123")
    body = res.json()
    assert body["approval_status"] == "PENDING"
    assert body["is_proxy"] is True
    session = body["session_token"]

    status = public.get(f"/api/v1/assemblies/session/{session}/status/").json()
    assert status["can_vote"] is False
    assert status["message"] == "Waiting for the syndic to approve the proxy."

    aid = live_assembly["assembly"].id
    item = AgendaItem.objects.get(assembly_id=aid)
    vote_url = f"/api/v1/assemblies/session/{session}/agenda/{item.id}/vote/"
    assert public.post(vote_url, {"choice": "YES"}, format="json").status_code == 401

    pending = syndic_client.get(f"/api/v1/assemblies/{aid}/pending-proxies/", **headers).json()
    assert [p["proxy_name"] for p in pending] == ["Paula Proxy"]

    approve_url = f"/api/v1/assemblies/{aid}/participants/{body['participant_id']}/approve/"
    assert syndic_client.post(approve_url, **headers).json()["approval_status"] == "APPROVED"
    assert syndic_client.post(approve_url, **headers).status_code == 400

    assert public.get(f"/api/v1/assemblies/session/{session}/").json()["can_vote"] is True


def test_reject_proxy_requires_reason(syndic_client, headers, public, live_assembly, unit2):
    body = _checkin(public, live_assembly, unit_identifier="A-102", proxy_name="Paula Proxy").json()
    url = f"/api/v1/assemblies/{live_assembly['assembly'].id}/participants/{body['participant_id']}/reject/"

    assert syndic_client.post(url, {"reason": "  "}, format="json", **headers).status_code == 400

    res = syndic_client.post(url, {"reason": "Missing signed proxy"}, format="json", **headers)
    assert res.json()["approval_status"] == "REJECTED"

    status = public.get(f"/api/v1/assemblies/session/{body['session_token']}/status/").json()
    assert status["message"] == "Proxy rejected: Missing signed proxy"


def test_checkout_ends_session_and_allows_reentry(public, syndic_client, headers, live_assembly, unit):
    session = _checkin(public, live_assembly).json()["session_token"]

    res = public.post("/api/v1/assemblies/checkout/", {"session_token": session}, format="json")
    assert res.status_code == 200
    assert res.json()["success"] is True

    assert public.get(f"/api/v1/assemblies/session/{session}/").status_code == 403
    assert public.post("/api/v1/assemblies/checkout/", {"session_token": session}, format="json").status_code == 400

    attendance = syndic_client.get(f"/api/v1/assemblies/{live_assembly['assembly'].id}/attendance/", **headers).json()
    assert (attendance["checked_in"], attendance["checked_out"], attendance["currently_present"]) == (1, 1, 0)

    again = _checkin(public, live_assembly)
    assert again.status_code == 201
    assert again.json()["session_token"] != session


def test_finished_assembly_refuses_checkin(public, live_assembly, unit):
    Assembly.objects.filter(id=live_assembly["assembly"].id).update(status=AssemblyStatus.FINISHED)
    assert _checkin(public, live_assembly).status_code == 400


def test_unknown_session(public):
    assert public.get("/api/v1/assemblies/session/nope/status/").status_code == 404


def test_concurrent_checkin_for_same_unit_is_conflict(public, live_assembly, unit, monkeypatch):
    manager = AssemblyParticipant.objects
    original_create = manager.create

    def racing_create(**kwargs):
        # a second phone inserts the unit after the lookup found nothing
        original_create(**{**kwargs, "session_token": "other-phone"})
        return original_create(**kwargs)

    monkeypatch.setattr(manager, "create", racing_create)

    res = _checkin(public, live_assembly)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "conflict"


# --- proxy documents ---


@pytest.fixture
def media(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


def _document(name="proxy.pdf", content=b"%PDF-1.4 signed proxy", content_type="application/pdf"):
    return SimpleUploadedFile(name, content, content_type=content_type)


def _proxy_checkin(public, live):
    return _checkin(public, live, unit_identifier="A-102", proxy_name="Paula Proxy", proxy_document="123").json()


def test_proxy_document_upload_and_download(public, syndic_client, doorman_client, headers, live_assembly, unit2, media):
    body = _proxy_checkin(public, live_assembly)
    upload_url = f"/api/v1/assemblies/session/{body['session_token']}/proxy/"

    res = public.post(upload_url, {"file": _document()}, format="multipart")
    assert res.status_code == 201
    data = res.json()

    aid = live_assembly["assembly"].id
    download_url = f"/api/v1/assemblies/{aid}/participants/{body['participant_id']}/proxy/"
    assert data["participant_id"] == body["participant_id"]
    assert data["file_name"] == "proxy.pdf"
    assert data["file_url"] == download_url

    participant = AssemblyParticipant.objects.get(id=body["participant_id"])
    assert participant.proxy_file_name == "proxy.pdf"
    assert participant.proxy_file.name.startswith(f"assemblies/{aid}/proxies/")
    assert participant.proxy_file.name.endswith(".pdf")

    pending = syndic_client.get(f"/api/v1/assemblies/{aid}/pending-proxies/", **headers).json()
    assert pending[0]["proxy_file_url"] == download_url

    assert doorman_client.get(download_url, **headers).status_code == 403

    res = syndic_client.get(download_url, **headers)
    assert res.status_code == 200
    assert res["Content-Type"] == "application/pdf"
    assert res["Content-Disposition"] == 'attachment; filename="proxy.pdf"'
    assert b"".join(res.streaming_content) == b"%PDF-1.4 signed proxy"
    res.close()


def test_proxy_document_replaces_previous_upload(public, live_assembly, unit2, media):
    body = _proxy_checkin(public, live_assembly)
    upload_url = f"/api/v1/assemblies/session/{body['session_token']}/proxy/"

    public.post(upload_url, {"file": _document()}, format="multipart")
    first = AssemblyParticipant.objects.get(id=body["participant_id"]).proxy_file.name

    res = public.post(upload_url, {"file": _document("scan.png", b"\x89PNG", "image/png")}, format="multipart")
    assert res.status_code == 201
    assert res.json()["file_name"] == "scan.png"

    assert not (media / first).exists()
    second = AssemblyParticipant.objects.get(id=body["participant_id"]).proxy_file.name
    assert (media / second).exists()


def test_proxy_document_rejections(public, syndic_client, headers, live_assembly, unit, unit2, media, settings):
    proxy = _proxy_checkin(public, live_assembly)
    upload_url = f"/api/v1/assemblies/session/{proxy['session_token']}/proxy/"

    bad_type = public.post(upload_url, {"file": _document("notes.txt", b"hello", "text/plain")}, format="multipart")
    assert bad_type.status_code == 400

    settings.CONDO_PROXY_MAX_BYTES = 10
    too_big = public.post(upload_url, {"file": _document(content=b"x" * 11)}, format="multipart")
    assert too_big.status_code == 400
    settings.CONDO_PROXY_MAX_BYTES = 5 * 1024 * 1024

    assert public.post(upload_url, {}, format="multipart").status_code == 400

    owner = _checkin(public, live_assembly).json()
    not_proxy = public.post(
        f"/api/v1/assemblies/session/{owner['session_token']}/proxy/", {"file": _document()}, format="multipart"
    )
    assert not_proxy.status_code == 400

    unknown = public.post("/api/v1/assemblies/session/nope/proxy/", {"file": _document()}, format="multipart")
    assert unknown.status_code == 404

    # nothing stored yet
    aid = live_assembly["assembly"].id
    res = syndic_client.get(f"/api/v1/assemblies/{aid}/participants/{proxy['participant_id']}/proxy/", **headers)
    assert res.status_code == 404
