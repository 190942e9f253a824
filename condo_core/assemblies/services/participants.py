# condo_core/assemblies/services/participants.py
from __future__ import annotations

import logging
import secrets
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import AuthenticationFailed, NotFound, ValidationError

from condo_core.assemblies.models import (
    ApprovalStatus,
    AssemblyParticipant,
    AssemblyStatus,
)
from condo_core.assemblies.selectors import (
    find_assembly_by_checkin_token,
    find_participant_by_session,
    get_assembly,
    get_participant,
    list_participants,
)
from condo_core.assemblies.services.otp import OtpService
from condo_core.common.api.exceptions import ConflictError
from condo_core.residents.models import Resident
from condo_core.units.models import Unit

logger = logging.getLogger(__name__)

INVALID_CHECKIN_TOKEN_MSG = "Invalid check-in token."
INVALID_OTP_MSG = "Invalid or expired OTP."

PROXY_CONTENT_TYPES = ("application/pdf", "image/jpeg", "image/png")


def new_session_token() -> str:
    return secrets.token_hex(32)


def new_checkin_token() -> str:
    return secrets.token_hex(32)


def _weight(value) -> Decimal:
    return Decimal(str(value or 0))


class ParticipantService:
    @staticmethod
    @transaction.atomic
    def register(
        *,
        tenant_id: UUID,
        assembly_id: UUID,
        unit_id: UUID,
        resident_id: Optional[UUID] = None,
        proxy_name: Optional[str] = None,
        proxy_document: Optional[str] = None,
        voting_weight=None,
    ) -> AssemblyParticipant:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.is_closed:
            raise ValidationError("Cannot register participants in a finished or cancelled assembly.")

        if not Unit.objects.filter(id=unit_id, tenant_id=tenant_id).exists():
            raise NotFound("Unit not found in this tenant.")
        if resident_id and not Resident.objects.filter(id=resident_id, tenant_id=tenant_id).exists():
            raise NotFound("Resident not found in this tenant.")

        if AssemblyParticipant.objects.filter(assembly=assembly, unit_id=unit_id).exists():
            raise ConflictError("This unit already has a representative registered in this assembly.")

        if not resident_id and not proxy_name:
            raise ValidationError("Provide the resident or the proxy details.")

        participant = AssemblyParticipant.objects.create(
            assembly=assembly,
            unit_id=unit_id,
            resident_id=resident_id,
            proxy_name=proxy_name,
            proxy_document=proxy_document,
            voting_weight=voting_weight if voting_weight is not None else Decimal("1.00"),
        )
        logger.info("Participant registered: %s assembly=%s unit=%s", participant.id, assembly.id, unit_id)
        return get_participant(assembly_id=assembly.id, participant_id=participant.id)

    @staticmethod
    @transaction.atomic
    def update(
        *,
        tenant_id: UUID,
        assembly_id: UUID,
        participant_id: UUID,
        **fields: Any,
    ) -> AssemblyParticipant:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        participant = get_participant(assembly_id=assembly.id, participant_id=participant_id)
        if assembly.status == AssemblyStatus.FINISHED:
            raise ValidationError("Participants of a finished assembly cannot be changed.")

        for name in ("proxy_name", "proxy_document", "voting_weight"):
            if name in fields:
                setattr(participant, name, fields[name])
        participant.save()
        return participant

    @staticmethod
    @transaction.atomic
    def remove(*, tenant_id: UUID, assembly_id: UUID, participant_id: UUID) -> None:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        participant = get_participant(assembly_id=assembly.id, participant_id=participant_id)
        if assembly.status == AssemblyStatus.FINISHED:
            raise ValidationError("Participants of a finished assembly cannot be removed.")
        if participant.votes.exists():
            raise ValidationError("A participant who has already voted cannot be removed.")
        participant.delete()

    @staticmethod
    @transaction.atomic
    def join(*, tenant_id: UUID, assembly_id: UUID, participant_id: UUID) -> AssemblyParticipant:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        participant = get_participant(assembly_id=assembly.id, participant_id=participant_id)
        if assembly.status != AssemblyStatus.IN_PROGRESS:
            raise ValidationError("The assembly must be in progress.")
        participant.joined_at = timezone.now()
        participant.left_at = None
        participant.save(update_fields=["joined_at", "left_at"])
        return participant

    @staticmethod
    @transaction.atomic
    def leave(*, tenant_id: UUID, assembly_id: UUID, participant_id: UUID) -> AssemblyParticipant:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        participant = get_participant(assembly_id=assembly_id, participant_id=participant_id)
        participant.left_at = timezone.now()
        participant.save(update_fields=["left_at"])
        return participant

    @staticmethod
    def attendance_stats(*, tenant_id: UUID, assembly_id: UUID) -> dict[str, Any]:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        stats = {"registered": 0, "joined": 0, "left": 0, "present": 0}
        total_weight = Decimal("0")
        present_weight = Decimal("0")

        for p in list_participants(assembly_id=assembly_id):
            stats["registered"] += 1
            total_weight += _weight(p.voting_weight)
            if p.joined_at:
                stats["joined"] += 1
                if p.left_at:
                    stats["left"] += 1
                else:
                    stats["present"] += 1
                    present_weight += _weight(p.voting_weight)

        stats["total_weight"] = float(total_weight)
        stats["present_weight"] = float(present_weight)
        return stats


class AttendanceService:
    """
    QR-code check-in flow. The check-in token identifies the assembly; the
    OTP proves physical presence; the returned session token is what the
    participant's device uses afterwards.
    """

    @staticmethod
    @transaction.atomic
    def generate_checkin_token(*, tenant_id: UUID, assembly_id: UUID) -> dict[str, Any]:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        assembly.checkin_token = new_checkin_token()
        assembly.save(update_fields=["checkin_token", "updated_at"])
        logger.info("Check-in token generated for assembly %s", assembly.id)
        return {
            "checkin_token": assembly.checkin_token,
            "checkin_url": f"{settings.CONDO_WEB_URL.rstrip('/')}/assemblies/checkin/{assembly.checkin_token}",
            "assembly_id": assembly.id,
            "assembly_title": assembly.title,
        }

    @staticmethod
    @transaction.atomic
    def checkin(
        *,
        checkin_token: str,
        otp: str,
        unit_identifier: str,
        resident_id: Optional[UUID] = None,
        proxy_name: Optional[str] = None,
        proxy_document: Optional[str] = None,
    ) -> dict[str, Any]:
        assembly = find_assembly_by_checkin_token(token=checkin_token)
        if assembly is None:
            raise NotFound(INVALID_CHECKIN_TOKEN_MSG)

        if not OtpService.check_assembly_otp(assembly, otp):
            raise AuthenticationFailed(INVALID_OTP_MSG)

        if assembly.status == AssemblyStatus.FINISHED:
            raise ValidationError("This assembly has already finished.")
        if assembly.status == AssemblyStatus.CANCELLED:
            raise ValidationError("This assembly was cancelled.")

        unit = Unit.objects.filter(tenant_id=assembly.tenant_id, identifier=unit_identifier).first()
        if unit is None:
            raise NotFound(f'Unit "{unit_identifier}" not found in this condominium.')

        if resident_id and not Resident.objects.filter(id=resident_id, tenant_id=assembly.tenant_id).exists():
            raise NotFound("Resident not found in this condominium.")

        is_proxy = bool(proxy_name)
        now = timezone.now()

        participant = (
            AssemblyParticipant.objects.select_for_update()
            .filter(assembly=assembly, unit=unit)
            .first()
        )
        if participant is not None:
            if participant.is_present:
                raise ConflictError("This unit has already checked in and is still present.")
            # re-entry
            participant.joined_at = now
            participant.left_at = None
            participant.session_token = new_session_token()
            if is_proxy:
                participant.proxy_name = proxy_name
                participant.proxy_document = proxy_document or None
                participant.approval_status = ApprovalStatus.PENDING
            participant.save()
        else:
            # another device may insert the same unit between the lookup and here
            try:
                with transaction.atomic():
                    participant = AssemblyParticipant.objects.create(
                        assembly=assembly,
                        unit=unit,
                        resident_id=resident_id or None,
                        proxy_name=proxy_name or None,
                        proxy_document=proxy_document or None,
                        joined_at=now,
                        voting_weight=Decimal("1.00"),
                        session_token=new_session_token(),
                        approval_status=ApprovalStatus.PENDING if is_proxy else ApprovalStatus.APPROVED,
                    )
            except IntegrityError:
                raise ConflictError("This unit has already checked in and is still present.")

        logger.info("Check-in: assembly=%s unit=%s proxy=%s", assembly.id, unit.identifier, is_proxy)
        return {
            "success": True,
            "participant_id": participant.id,
            "assembly_id": assembly.id,
            "assembly_title": assembly.title,
            "unit_identifier": unit.identifier,
            "checkin_time": participant.joined_at,
            "session_token": participant.session_token,
            "approval_status": participant.approval_status,
            "is_proxy": is_proxy,
            "message": (
                "Check-in complete. Waiting for the syndic to approve the proxy."
                if is_proxy
                else "Check-in complete."
            ),
        }

    @staticmethod
    @transaction.atomic
    def checkout(*, session_token: str) -> dict[str, Any]:
        participant = find_participant_by_session(session_token=session_token)
        if participant is None:
            raise NotFound("Invalid or expired session.")
        if not participant.joined_at:
            raise ValidationError("Participant has not checked in.")
        if participant.left_at:
            raise ValidationError("Participant has already checked out.")

        participant.left_at = timezone.now()
        participant.save(update_fields=["left_at"])
        logger.info("Check-out: participant=%s assembly=%s", participant.id, participant.assembly_id)
        return {"success": True, "checkout_time": participant.left_at}

    @staticmethod
    def validate_checkin_token(*, token: str) -> dict[str, Any]:
        assembly = find_assembly_by_checkin_token(token=token)
        if assembly is None:
            return {"valid": False, "requires_otp": False, "assembly": None}

        has_live_otp = bool(
            assembly.current_otp and assembly.otp_expires_at and timezone.now() < assembly.otp_expires_at
        )
        return {
            "valid": True,
            "requires_otp": has_live_otp,
            "assembly": {
                "id": assembly.id,
                "title": assembly.title,
                "status": assembly.status,
                "scheduled_at": assembly.scheduled_at,
                "tenant_name": assembly.tenant.name if assembly.tenant_id else "",
            },
        }

    @staticmethod
    def attendance_status(*, tenant_id: UUID, assembly_id: UUID) -> dict[str, Any]:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        total_units = Unit.objects.filter(tenant_id=tenant_id).count()

        checked_in = checked_out = present = registered = 0
        total_weight = Decimal("0")
        present_weight = Decimal("0")
        for p in AssemblyParticipant.objects.filter(assembly=assembly):
            registered += 1
            total_weight += _weight(p.voting_weight)
            if p.joined_at:
                checked_in += 1
                if p.left_at:
                    checked_out += 1
                else:
                    present += 1
                    present_weight += _weight(p.voting_weight)

        quorum = (present / total_units * 100) if total_units > 0 else 0
        return {
            "assembly_id": assembly.id,
            "assembly_title": assembly.title,
            "status": assembly.status,
            "total_units": total_units,
            "registered_participants": registered,
            "checked_in": checked_in,
            "checked_out": checked_out,
            "currently_present": present,
            "quorum_percentage": round(quorum, 2),
            "total_voting_weight": float(total_weight),
            "present_voting_weight": float(present_weight),
        }

    @staticmethod
    def participants(*, tenant_id: UUID, assembly_id: UUID):
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        return list_participants(assembly_id=assembly_id).order_by("joined_at")


class ProxyService:
    @staticmethod
    def pending(*, tenant_id: UUID, assembly_id: UUID) -> list[AssemblyParticipant]:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        qs = (
            list_participants(assembly_id=assembly_id)
            .filter(approval_status=ApprovalStatus.PENDING)
            .exclude(proxy_name__isnull=True)
            .exclude(proxy_name="")
            .order_by("joined_at")
        )
        return list(qs)

    @staticmethod
    def _proxy_participant(*, tenant_id: UUID, assembly_id: UUID, participant_id: UUID) -> AssemblyParticipant:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        participant = get_participant(assembly_id=assembly_id, participant_id=participant_id)
        if not participant.is_proxy:
            raise ValidationError("This participant is not a proxy.")
        return participant

    @staticmethod
    @transaction.atomic
    def approve(*, tenant_id: UUID, assembly_id: UUID, participant_id: UUID, user) -> AssemblyParticipant:
        participant = ProxyService._proxy_participant(
            tenant_id=tenant_id, assembly_id=assembly_id, participant_id=participant_id
        )
        if participant.approval_status == ApprovalStatus.APPROVED:
            raise ValidationError("This proxy has already been approved.")

        participant.approval_status = ApprovalStatus.APPROVED
        participant.approved_by = user
        participant.approved_at = timezone.now()
        participant.rejection_reason = None
        participant.save()
        logger.info("Proxy approved: participant=%s by user=%s", participant.id, user.id)
        return participant

    @staticmethod
    @transaction.atomic
    def reject(
        *,
        tenant_id: UUID,
        assembly_id: UUID,
        participant_id: UUID,
        user,
        reason: str,
    ) -> AssemblyParticipant:
        if not (reason or "").strip():
            raise ValidationError({"reason": ["A rejection reason is required."]})

        participant = ProxyService._proxy_participant(
            tenant_id=tenant_id, assembly_id=assembly_id, participant_id=participant_id
        )
        if participant.approval_status == ApprovalStatus.REJECTED:
            raise ValidationError("This proxy has already been rejected.")

        participant.approval_status = ApprovalStatus.REJECTED
        participant.approved_by = user
        participant.approved_at = timezone.now()
        participant.rejection_reason = reason.strip()
        participant.save()
        logger.info("Proxy rejected: participant=%s by user=%s", participant.id, user.id)
        return participant

    @staticmethod
    def upload_document(*, session_token: str, upload) -> AssemblyParticipant:
        """
        Stores the signed proxy document for the participant holding the session.
        Replaces any earlier upload.
        """
        participant = find_participant_by_session(session_token=session_token)
        if participant is None:
            raise NotFound("Participant not found.")
        if not participant.is_proxy:
            raise ValidationError("This participant is not a proxy.")

        content_type = (getattr(upload, "content_type", "") or "").split(";")[0].strip().lower()
        if content_type not in PROXY_CONTENT_TYPES:
            raise ValidationError({"file": ["Only PDF, JPG and PNG files are accepted."]})
        if upload.size > settings.CONDO_PROXY_MAX_BYTES:
            raise ValidationError({"file": [f"File exceeds {settings.CONDO_PROXY_MAX_BYTES // (1024 * 1024)} MB."]})

        with transaction.atomic():
            p = AssemblyParticipant.objects.select_for_update().get(id=participant.id)
            old_name = p.proxy_file.name if p.proxy_file else None

            p.proxy_file.save(upload.name, upload, save=False)
            p.proxy_file_name = upload.name
            p.save(update_fields=["proxy_file", "proxy_file_name"])

        if old_name:
            p.proxy_file.storage.delete(old_name)

        logger.info("Proxy document uploaded: participant=%s file=%s", p.id, p.proxy_file.name)
        return p

    @staticmethod
    def document(*, tenant_id: UUID, assembly_id: UUID, participant_id: UUID) -> AssemblyParticipant:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        participant = get_participant(assembly_id=assembly_id, participant_id=participant_id)
        if not participant.proxy_file:
            raise NotFound("No proxy document uploaded for this participant.")
        if not participant.proxy_file.storage.exists(participant.proxy_file.name):
            logger.error("Proxy document missing from storage: %s", participant.proxy_file.name)
            raise NotFound("Proxy document file not found.")
        return participant
