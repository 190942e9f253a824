# condo_core/assemblies/selectors.py
from __future__ import annotations

from typing import Optional

from django.db.models import QuerySet
from django.utils import timezone
from rest_framework.exceptions import NotFound

from condo_core.assemblies.models import (
    AgendaItem,
    Assembly,
    AssemblyMinutes,
    AssemblyParticipant,
    AssemblyStatus,
    Vote,
)


def list_assemblies(*, tenant_id) -> QuerySet[Assembly]:
    return Assembly.objects.filter(tenant_id=tenant_id).order_by("-scheduled_at")


def list_upcoming(*, tenant_id) -> QuerySet[Assembly]:
    return Assembly.objects.filter(
        tenant_id=tenant_id,
        status__in=[AssemblyStatus.SCHEDULED, AssemblyStatus.IN_PROGRESS],
        scheduled_at__gte=timezone.now(),
    ).order_by("scheduled_at")


def get_assembly(*, tenant_id, assembly_id) -> Assembly:
    obj = Assembly.objects.filter(tenant_id=tenant_id, id=assembly_id).first()
    if obj is None:
        raise NotFound(f"Assembly {assembly_id} not found.")
    return obj


def find_assembly_by_checkin_token(*, token: str) -> Optional[Assembly]:
    if not token:
        return None
    return Assembly.objects.select_related("tenant").filter(checkin_token=token).first()


def list_agenda_items(*, assembly_id) -> QuerySet[AgendaItem]:
    return AgendaItem.objects.filter(assembly_id=assembly_id).order_by("order_index")


def get_agenda_item(*, assembly_id, item_id) -> AgendaItem:
    obj = AgendaItem.objects.select_related("assembly").filter(assembly_id=assembly_id, id=item_id).first()
    if obj is None:
        raise NotFound(f"Agenda item {item_id} not found.")
    return obj


def participant_qs() -> QuerySet[AssemblyParticipant]:
    return AssemblyParticipant.objects.select_related("unit", "resident", "assembly")


def list_participants(*, assembly_id) -> QuerySet[AssemblyParticipant]:
    return participant_qs().filter(assembly_id=assembly_id).order_by("created_at")


def get_participant(*, assembly_id, participant_id) -> AssemblyParticipant:
    obj = participant_qs().filter(assembly_id=assembly_id, id=participant_id).first()
    if obj is None:
        raise NotFound(f"Participant {participant_id} not found.")
    return obj


def find_participant_by_session(*, session_token: str) -> Optional[AssemblyParticipant]:
    if not session_token:
        return None
    return participant_qs().filter(session_token=session_token).first()


def list_votes(*, item_id) -> QuerySet[Vote]:
    return Vote.objects.select_related("participant", "participant__unit").filter(agenda_item_id=item_id)


def vote_for(*, item_id, participant_id) -> Optional[Vote]:
    return Vote.objects.filter(agenda_item_id=item_id, participant_id=participant_id).first()


def has_voted(*, item_id, participant_id) -> bool:
    return Vote.objects.filter(agenda_item_id=item_id, participant_id=participant_id).exists()


def get_minutes_or_none(*, assembly_id) -> Optional[AssemblyMinutes]:
    return AssemblyMinutes.objects.filter(assembly_id=assembly_id).first()


def get_minutes(*, assembly_id) -> AssemblyMinutes:
    minutes = get_minutes_or_none(assembly_id=assembly_id)
    if minutes is None:
        raise NotFound("No minutes found for this assembly.")
    return minutes
