# condo_core/assemblies/services/otp.py
from __future__ import annotations

import logging
import math
import secrets
from datetime import timedelta
from typing import Any, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.crypto import constant_time_compare
from rest_framework.exceptions import ValidationError

from condo_core.assemblies.models import AgendaItem, AgendaItemStatus, Assembly
from condo_core.assemblies.selectors import find_assembly_by_checkin_token, get_agenda_item, get_assembly

logger = logging.getLogger(__name__)


def new_otp_code() -> str:
    # 100000..999999
    return str(100000 + secrets.randbelow(900000))


def _otp_payload(code: str, generated_at, expires_at) -> dict[str, Any]:
    remaining = (expires_at - timezone.now()).total_seconds()
    return {
        "otp": code,
        "generated_at": generated_at,
        "expires_at": expires_at,
        "remaining_seconds": max(0, math.ceil(remaining)),
    }


def _current(code: Optional[str], generated_at, expires_at) -> Optional[dict[str, Any]]:
    if not code or not expires_at or expires_at <= timezone.now():
        return None
    return _otp_payload(code, generated_at, expires_at)


def _matches(code: Optional[str], expires_at, otp: Optional[str]) -> bool:
    if not code or not expires_at or not otp:
        return False
    if timezone.now() > expires_at:
        return False
    return constant_time_compare(code, str(otp).strip())


class OtpService:
    # check-in OTP (per assembly)

    @staticmethod
    @transaction.atomic
    def generate_assembly_otp(*, tenant_id: UUID, assembly_id: UUID) -> dict[str, Any]:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.is_closed:
            raise ValidationError("Cannot generate an OTP for a finished or cancelled assembly.")

        now = timezone.now()
        assembly.current_otp = new_otp_code()
        assembly.otp_generated_at = now
        assembly.otp_expires_at = now + timedelta(minutes=settings.CONDO_ASSEMBLY_OTP_EXPIRY_MINUTES)
        assembly.save(update_fields=["current_otp", "otp_generated_at", "otp_expires_at", "updated_at"])

        logger.info("Check-in OTP generated for assembly %s", assembly.id)
        return _otp_payload(assembly.current_otp, assembly.otp_generated_at, assembly.otp_expires_at)

    @staticmethod
    def get_assembly_otp(*, tenant_id: UUID, assembly_id: UUID) -> Optional[dict[str, Any]]:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        return _current(assembly.current_otp, assembly.otp_generated_at, assembly.otp_expires_at)

    @staticmethod
    def check_assembly_otp(assembly: Assembly, otp: Optional[str]) -> bool:
        return _matches(assembly.current_otp, assembly.otp_expires_at, otp)

    @staticmethod
    def validate_assembly_otp_by_token(*, checkin_token: str, otp: str) -> dict[str, Any]:
        assembly = find_assembly_by_checkin_token(token=checkin_token)
        if assembly is None or not OtpService.check_assembly_otp(assembly, otp):
            return {"valid": False, "assembly_id": None}
        return {"valid": True, "assembly_id": assembly.id}

    # voting OTP (per agenda item)

    @staticmethod
    @transaction.atomic
    def generate_voting_otp(*, assembly_id: UUID, item_id: UUID) -> dict[str, Any]:
        item = get_agenda_item(assembly_id=assembly_id, item_id=item_id)
        if item.status != AgendaItemStatus.VOTING:
            raise ValidationError("This agenda item is not open for voting.")

        now = timezone.now()
        item.voting_otp = new_otp_code()
        item.voting_otp_generated_at = now
        item.voting_otp_expires_at = now + timedelta(minutes=settings.CONDO_VOTING_OTP_EXPIRY_MINUTES)
        item.save(update_fields=["voting_otp", "voting_otp_generated_at", "voting_otp_expires_at", "updated_at"])

        logger.info("Voting OTP generated for agenda item %s", item.id)
        return _otp_payload(item.voting_otp, item.voting_otp_generated_at, item.voting_otp_expires_at)

    @staticmethod
    def get_voting_otp(*, assembly_id: UUID, item_id: UUID) -> Optional[dict[str, Any]]:
        item = get_agenda_item(assembly_id=assembly_id, item_id=item_id)
        return _current(item.voting_otp, item.voting_otp_generated_at, item.voting_otp_expires_at)

    @staticmethod
    def check_voting_otp(item: AgendaItem, otp: Optional[str]) -> bool:
        if item.status != AgendaItemStatus.VOTING:
            return False
        return _matches(item.voting_otp, item.voting_otp_expires_at, otp)
