# condo_core/assemblies/services/assemblies.py
from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Max, Sum
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from condo_core.assemblies.models import (
    AgendaItem,
    AgendaItemStatus,
    Assembly,
    AssemblyParticipant,
    AssemblyStatus,
    QuorumType,
    Vote,
    VoteChoice,
)
from condo_core.assemblies.selectors import get_agenda_item, get_assembly, list_votes
from condo_core.assemblies.services.otp import OtpService
from condo_core.assemblies.tally import VoteSummary, format_result, tally_votes
from condo_core.common.api.exceptions import ConflictError
from condo_core.common.events import ASSEMBLY_CREATED, publish

logger = logging.getLogger(__name__)

ASSEMBLY_UPDATABLE_FIELDS = ("title", "description", "scheduled_at", "meeting_url")


def _locked_assembly(*, tenant_id: UUID, assembly_id: UUID) -> Assembly:
    get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
    return Assembly.objects.select_for_update().get(id=assembly_id, tenant_id=tenant_id)


class AssemblyService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        title: str,
        scheduled_at,
        description: Optional[str] = None,
        meeting_url: Optional[str] = None,
        created_by_id=None,
    ) -> Assembly:
        assembly = Assembly.objects.create(
            tenant_id=tenant_id,
            title=title,
            description=description,
            scheduled_at=scheduled_at,
            meeting_url=meeting_url,
            status=AssemblyStatus.SCHEDULED,
        )
        logger.info("Assembly created: %s tenant=%s", assembly.id, tenant_id)

        payload = {
            "tenant_id": str(tenant_id),
            "assembly_id": str(assembly.id),
            "title": assembly.title,
            "description": assembly.description,
            "scheduled_at": assembly.scheduled_at.isoformat(),
            "created_by_id": created_by_id,
        }
        publish(ASSEMBLY_CREATED, payload)
        return assembly

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, assembly_id: UUID, **fields: Any) -> Assembly:
        assembly = _locked_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        changed = []
        for name in ASSEMBLY_UPDATABLE_FIELDS:
            if name in fields:
                setattr(assembly, name, fields[name])
                changed.append(name)
        if changed:
            assembly.save(update_fields=[*changed, "updated_at"])
        return assembly

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, assembly_id: UUID) -> None:
        assembly = _locked_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.status == AssemblyStatus.IN_PROGRESS:
            raise ValidationError("Cannot delete an assembly that is in progress.")
        logger.info("Assembly deleted: %s tenant=%s", assembly.id, tenant_id)
        assembly.delete()

    @staticmethod
    @transaction.atomic
    def start(*, tenant_id: UUID, assembly_id: UUID) -> Assembly:
        assembly = _locked_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.status != AssemblyStatus.SCHEDULED:
            raise ValidationError("Only scheduled assemblies can be started.")
        assembly.status = AssemblyStatus.IN_PROGRESS
        assembly.started_at = timezone.now()
        assembly.save(update_fields=["status", "started_at", "updated_at"])
        logger.info("Assembly started: %s", assembly.id)
        return assembly

    @staticmethod
    @transaction.atomic
    def finish(*, tenant_id: UUID, assembly_id: UUID) -> Assembly:
        assembly = _locked_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.status != AssemblyStatus.IN_PROGRESS:
            raise ValidationError("Only assemblies in progress can be finished.")
        if assembly.agenda_items.filter(status=AgendaItemStatus.VOTING).exists():
            raise ValidationError("Close all open votes before finishing the assembly.")
        assembly.status = AssemblyStatus.FINISHED
        assembly.finished_at = timezone.now()
        assembly.save(update_fields=["status", "finished_at", "updated_at"])
        logger.info("Assembly finished: %s", assembly.id)
        return assembly

    @staticmethod
    @transaction.atomic
    def cancel(*, tenant_id: UUID, assembly_id: UUID) -> Assembly:
        assembly = _locked_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.status == AssemblyStatus.FINISHED:
            raise ValidationError("A finished assembly cannot be cancelled.")
        assembly.status = AssemblyStatus.CANCELLED
        assembly.save(update_fields=["status", "updated_at"])
        logger.info("Assembly cancelled: %s", assembly.id)
        return assembly

    @staticmethod
    def stats(*, tenant_id: UUID, assembly_id: UUID) -> dict[str, Any]:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        participants = AssemblyParticipant.objects.filter(assembly=assembly)
        items = AgendaItem.objects.filter(assembly=assembly)
        weight = participants.aggregate(total=Sum("voting_weight"))["total"] or 0
        return {
            "total_participants": participants.count(),
            "total_agenda_items": items.count(),
            "voted_items": items.filter(status=AgendaItemStatus.CLOSED).count(),
            "total_voting_weight": float(weight),
        }


class AgendaItemService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        assembly_id: UUID,
        title: str,
        description: Optional[str] = None,
        order_index: Optional[int] = None,
        requires_quorum: bool = True,
        quorum_type: str = QuorumType.SIMPLE,
    ) -> AgendaItem:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.status != AssemblyStatus.SCHEDULED:
            raise ValidationError("Agenda items can only be added to scheduled assemblies.")

        if order_index is None:
            current_max = assembly.agenda_items.aggregate(m=Max("order_index"))["m"]
            order_index = 0 if current_max is None else current_max + 1

        return AgendaItem.objects.create(
            assembly=assembly,
            title=title,
            description=description,
            order_index=order_index,
            requires_quorum=requires_quorum,
            quorum_type=quorum_type,
            status=AgendaItemStatus.PENDING,
        )

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, assembly_id: UUID, item_id: UUID, **fields: Any) -> AgendaItem:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        item = get_agenda_item(assembly_id=assembly_id, item_id=item_id)

        new_status = fields.get("status")
        if item.status == AgendaItemStatus.CLOSED and new_status and new_status != AgendaItemStatus.CLOSED:
            raise ValidationError("A closed agenda item cannot be reopened.")

        for name in ("title", "description", "order_index", "requires_quorum", "quorum_type", "status", "result"):
            if name in fields:
                setattr(item, name, fields[name])
        item.save()
        return item

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, assembly_id: UUID, item_id: UUID) -> None:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        item = get_agenda_item(assembly_id=assembly_id, item_id=item_id)
        if item.status != AgendaItemStatus.PENDING:
            raise ValidationError("Only pending agenda items can be deleted.")
        item.delete()

    @staticmethod
    @transaction.atomic
    def start_voting(*, tenant_id: UUID, assembly_id: UUID, item_id: UUID) -> AgendaItem:
        assembly = _locked_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        item = get_agenda_item(assembly_id=assembly_id, item_id=item_id)

        if item.status != AgendaItemStatus.PENDING:
            raise ValidationError("Voting can only start on a pending agenda item.")
        if assembly.status != AssemblyStatus.IN_PROGRESS:
            raise ValidationError("The assembly must be in progress to start voting.")
        if assembly.agenda_items.filter(status=AgendaItemStatus.VOTING).exists():
            raise ValidationError("Another agenda item is already being voted in this assembly.")

        item.status = AgendaItemStatus.VOTING
        item.voting_started_at = timezone.now()
        item.save(update_fields=["status", "voting_started_at", "updated_at"])

        OtpService.generate_voting_otp(assembly_id=assembly_id, item_id=item.id)
        item.refresh_from_db()
        logger.info("Voting started: item=%s assembly=%s", item.id, assembly_id)
        return item

    @staticmethod
    @transaction.atomic
    def close_voting(*, tenant_id: UUID, assembly_id: UUID, item_id: UUID) -> AgendaItem:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        item = get_agenda_item(assembly_id=assembly_id, item_id=item_id)
        if item.status != AgendaItemStatus.VOTING:
            raise ValidationError("Only agenda items being voted can be closed.")

        summary = VoteService.summary(item_id=item.id)

        item.status = AgendaItemStatus.CLOSED
        item.voting_ended_at = timezone.now()
        item.result = format_result(summary)
        item.voting_otp = None
        item.voting_otp_generated_at = None
        item.voting_otp_expires_at = None
        item.save()
        logger.info("Voting closed: item=%s result=%r", item.id, item.result)
        return item

    @staticmethod
    def result(*, tenant_id: UUID, assembly_id: UUID, item_id: UUID) -> dict[str, Any]:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        item = get_agenda_item(assembly_id=assembly_id, item_id=item_id)
        return {"item": item, "summary": VoteService.summary(item_id=item.id).as_dict()}


class VoteService:
    @staticmethod
    def summary(*, item_id: UUID) -> VoteSummary:
        return tally_votes(Vote.objects.filter(agenda_item_id=item_id).values_list("choice", "voting_weight"))

    @staticmethod
    @transaction.atomic
    def cast(*, item_id: UUID, participant_id: UUID, choice: str) -> Vote:
        item = AgendaItem.objects.select_for_update().filter(id=item_id).first()
        if item is None:
            raise NotFound(f"Agenda item {item_id} not found.")
        if item.status != AgendaItemStatus.VOTING:
            raise ValidationError("This agenda item is not open for voting.")

        participant = AssemblyParticipant.objects.filter(id=participant_id).first()
        if participant is None:
            raise NotFound(f"Participant {participant_id} not found.")
        if participant.assembly_id != item.assembly_id:
            raise ValidationError("Participant does not belong to this assembly.")

        if choice not in VoteChoice.values:
            raise ValidationError(f"Invalid vote choice: {choice}.")

        if Vote.objects.filter(agenda_item=item, participant=participant).exists():
            raise ConflictError("This participant has already voted on this agenda item.")

        vote = Vote.objects.create(
            agenda_item=item,
            participant=participant,
            choice=choice,
            voting_weight=participant.voting_weight,
        )
        logger.info("Vote cast: item=%s participant=%s", item.id, participant.id)
        return vote

    @staticmethod
    def votes(*, tenant_id: UUID, assembly_id: UUID, item_id: UUID):
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        get_agenda_item(assembly_id=assembly_id, item_id=item_id)
        return list_votes(item_id=item_id)
