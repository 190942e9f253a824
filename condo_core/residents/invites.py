# condo_core/residents/invites.py
from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Any, Optional
from uuid import UUID

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from condo_core.common.api.exceptions import ConflictError
from condo_core.common.email import send_notification_email
from condo_core.iam.models import UserRole
from condo_core.iam.services.users import UserService
from condo_core.residents.models import InviteStatus, Resident, ResidentInvite
from condo_core.residents.selectors import find_invite_by_token, get_invite
from condo_core.residents.services import ResidentService
from condo_core.units.models import Unit

logger = logging.getLogger(__name__)

REASON_NOT_FOUND = "Invite not found."
REASON_ALREADY_USED = "This invite has already been used."
REASON_EXPIRED = "This invite has expired."


def new_invite_token() -> str:
    # 32 random bytes -> 64 hex chars
    return secrets.token_hex(32)


def invite_expiry():
    return timezone.now() + timedelta(days=settings.CONDO_INVITE_EXPIRY_DAYS)


def invite_link(token: str) -> str:
    return f"{settings.CONDO_WEB_URL.rstrip('/')}/invite/{token}"


def _send_invite_email(invite: ResidentInvite) -> bool:
    body = (
        f"Hello {invite.name},\n\n"
        f"You have been invited to join {invite.tenant.name} (unit {invite.unit.identifier}).\n"
        f"Complete your registration here: {invite_link(invite.token)}\n\n"
        f"This invite expires in {settings.CONDO_INVITE_EXPIRY_DAYS} days."
    )
    return send_notification_email(
        to=invite.email,
        subject=f"Your invite to {invite.tenant.name}",
        body=body,
    )


class InviteService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        unit_id: UUID,
        name: str,
        email: str,
        phone: Optional[str] = None,
    ) -> ResidentInvite:
        if not Unit.objects.filter(id=unit_id, tenant_id=tenant_id).exists():
            raise NotFound("Unit not found in this tenant.")

        pending = ResidentInvite.objects.filter(unit_id=unit_id, email=email, status=InviteStatus.PENDING).exists()
        if pending:
            raise ConflictError("A pending invite already exists for this email in this unit.")

        invite = ResidentInvite.objects.create(
            tenant_id=tenant_id,
            unit_id=unit_id,
            name=name,
            email=email,
            phone=phone,
            token=new_invite_token(),
            expires_at=invite_expiry(),
        )
        invite = get_invite(tenant_id=tenant_id, invite_id=invite.id)

        logger.info("Invite created: %s unit=%s tenant=%s", invite.id, unit_id, tenant_id)
        transaction.on_commit(lambda: _send_invite_email(invite))
        return invite

    @staticmethod
    @transaction.atomic
    def validate(*, token: str) -> dict[str, Any]:
        """
        Returns {"valid": bool, "reason": str | None, "invite": ResidentInvite | None}.
        Marks the invite EXPIRED when it is past its expiry.
        """
        invite = find_invite_by_token(token=token)

        if invite is None:
            return {"valid": False, "reason": REASON_NOT_FOUND, "invite": None}

        if invite.status == InviteStatus.ACCEPTED:
            return {"valid": False, "reason": REASON_ALREADY_USED, "invite": invite}

        if invite.status == InviteStatus.EXPIRED or invite.expires_at < timezone.now():
            if invite.status != InviteStatus.EXPIRED:
                invite.status = InviteStatus.EXPIRED
                invite.save(update_fields=["status", "updated_at"])
            return {"valid": False, "reason": REASON_EXPIRED, "invite": invite}

        return {"valid": True, "reason": None, "invite": invite}

    @staticmethod
    def complete_registration(
        *,
        token: str,
        password: str,
        full_name: str,
        type: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        data_consent: bool = False,
        sub_records: Optional[dict[str, list[dict]]] = None,
        **resident_fields,
    ) -> Resident:
        result = InviteService.validate(token=token)
        if not result["valid"]:
            raise ValidationError(result["reason"] or "Invalid invite.")

        return InviteService._complete(
            invite=result["invite"],
            password=password,
            full_name=full_name,
            type=type,
            email=email,
            phone=phone,
            data_consent=data_consent,
            sub_records=sub_records,
            **resident_fields,
        )

    @staticmethod
    @transaction.atomic
    def _complete(
        *,
        invite: ResidentInvite,
        password: str,
        full_name: str,
        type: str,
        email: Optional[str],
        phone: Optional[str],
        data_consent: bool,
        sub_records: Optional[dict[str, list[dict]]],
        **resident_fields,
    ) -> Resident:
        invite = ResidentInvite.objects.select_for_update().get(id=invite.id)
        if invite.status != InviteStatus.PENDING:
            raise ValidationError(REASON_ALREADY_USED)

        final_email = (email or invite.email).strip().lower()
        final_phone = phone or invite.phone

        if get_user_model().objects.filter(email__iexact=final_email).exists():
            raise ConflictError("A user with this email already exists.")

        user = UserService.create_or_update(
            email=final_email,
            name=full_name,
            role=UserRole.RESIDENT,
            tenant_id=invite.tenant_id,
            password=password,
        )

        resident = ResidentService.create_for_user(
            user_id=user.id,
            tenant_id=invite.tenant_id,
            unit_id=invite.unit_id,
            type=type,
            full_name=full_name,
            email=final_email,
            phone=final_phone,
            data_consent=data_consent,
            sub_records=sub_records,
            **resident_fields,
        )

        invite.status = InviteStatus.ACCEPTED
        invite.accepted_at = timezone.now()
        invite.save(update_fields=["status", "accepted_at", "updated_at"])

        logger.info("Invite %s accepted; resident %s created", invite.id, resident.id)
        return resident

    @staticmethod
    @transaction.atomic
    def resend(*, tenant_id: UUID, invite_id: UUID) -> ResidentInvite:
        invite = get_invite(tenant_id=tenant_id, invite_id=invite_id)
        if invite.status == InviteStatus.ACCEPTED:
            raise ValidationError("This invite has already been accepted.")

        invite.token = new_invite_token()
        invite.expires_at = invite_expiry()
        invite.status = InviteStatus.PENDING
        invite.save(update_fields=["token", "expires_at", "status", "updated_at"])

        logger.info("Invite resent: %s tenant=%s", invite.id, tenant_id)
        transaction.on_commit(lambda: _send_invite_email(invite))
        return invite

    @staticmethod
    @transaction.atomic
    def cancel(*, tenant_id: UUID, invite_id: UUID) -> None:
        invite = get_invite(tenant_id=tenant_id, invite_id=invite_id)
        if invite.status == InviteStatus.ACCEPTED:
            raise ValidationError("An accepted invite cannot be cancelled.")
        invite.delete()
        logger.info("Invite cancelled: %s tenant=%s", invite_id, tenant_id)
