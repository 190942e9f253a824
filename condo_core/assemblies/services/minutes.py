# condo_core/assemblies/services/minutes.py
from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from condo_core.assemblies.models import (
    AssemblyMinutes,
    AssemblyParticipant,
    AssemblyStatus,
    MinutesStatus,
    Vote,
)
from condo_core.assemblies.selectors import get_assembly, get_minutes, list_agenda_items
from condo_core.assemblies.tally import tally_votes
from condo_core.units.models import Unit

logger = logging.getLogger(__name__)


def _fmt_date(dt) -> str:
    return timezone.localtime(dt).strftime("%Y-%m-%d") if dt else "N/A"


def _fmt_time(dt) -> str:
    return timezone.localtime(dt).strftime("%H:%M") if dt else "N/A"


def build_vote_summary(assembly) -> dict[str, Any]:
    items = []
    for item in list_agenda_items(assembly_id=assembly.id):
        summary = tally_votes(Vote.objects.filter(agenda_item=item).values_list("choice", "voting_weight"))
        items.append(
            {
                "title": item.title,
                "order": item.order_index,
                "yes": summary.yes,
                "no": summary.no,
                "abstention": summary.abstention,
                "total": summary.total,
                "result": item.result or ("Approved" if summary.approved else "Rejected"),
                "approved": summary.approved,
            }
        )
    return {
        "total_agenda_items": len(items),
        "voted_items": sum(1 for i in items if i["total"] > 0),
        "items": items,
    }


def build_attendance_summary(assembly) -> dict[str, Any]:
    total_units = Unit.objects.filter(tenant_id=assembly.tenant_id).count()
    participants = AssemblyParticipant.objects.filter(assembly=assembly).select_related("unit", "resident")

    total_weight = 0.0
    present_weight = 0.0
    present_units = 0
    rows = []
    for p in participants:
        weight = float(p.voting_weight)
        total_weight += weight
        if p.joined_at:
            present_units += 1
            present_weight += weight
        rows.append(
            {
                "unit_identifier": p.unit.identifier if p.unit_id else "N/A",
                "represented_by": p.proxy_name or (p.resident.full_name if p.resident_id else "N/A"),
                "is_proxy": p.is_proxy,
                "joined_at": p.joined_at.isoformat() if p.joined_at else None,
                "left_at": p.left_at.isoformat() if p.left_at else None,
            }
        )

    quorum = (present_units / total_units * 100) if total_units > 0 else 0
    return {
        "total_units": total_units,
        "present_units": present_units,
        "quorum_percentage": round(quorum, 2),
        "total_voting_weight": total_weight,
        "present_voting_weight": present_weight,
        "participants": rows,
    }


def render_minutes(assembly, votes: dict[str, Any], attendance: dict[str, Any]) -> str:
    lines = [
        f"MINUTES OF {assembly.title.upper()}",
        "",
        f"Date: {_fmt_date(assembly.scheduled_at)}",
        f"Started at: {_fmt_time(assembly.started_at)}",
        f"Finished at: {_fmt_time(assembly.finished_at)}",
        "",
        "ATTENDANCE:",
        f"- Total units: {attendance['total_units']}",
        f"- Units present: {attendance['present_units']}",
        f"- Quorum: {attendance['quorum_percentage']}%",
        "",
        "PARTICIPANTS:",
    ]
    for p in attendance["participants"]:
        suffix = " (proxy)" if p["is_proxy"] else ""
        lines.append(f"- {p['unit_identifier']}: {p['represented_by']}{suffix}")

    lines += ["", "RESOLUTIONS:", ""]
    for item in votes["items"]:
        lines.append(f"{item['order'] + 1}. {item['title']}")
        lines.append(f"   Votes: YES: {item['yes']} | NO: {item['no']} | ABSTENTION: {item['abstention']}")
        lines.append(f"   Result: {item['result']}")
        lines.append("")

    lines.append("CLOSING:")
    lines.append("There being no further business, the assembly was closed and these minutes were drawn up.")
    return "\n".join(lines)


def render_summary(assembly, votes: dict[str, Any], attendance: dict[str, Any]) -> str:
    approved = sum(1 for i in votes["items"] if i["approved"])
    rejected = sum(1 for i in votes["items"] if not i["approved"] and i["total"] > 0)
    return (
        f'Assembly "{assembly.title}" held on {_fmt_date(assembly.scheduled_at)} '
        f"with a quorum of {attendance['quorum_percentage']}% "
        f"({attendance['present_units']}/{attendance['total_units']} units). "
        f"{votes['voted_items']} agenda items were voted: {approved} approved and {rejected} rejected."
    )


class MinutesService:
    @staticmethod
    def get(*, tenant_id: UUID, assembly_id: UUID) -> AssemblyMinutes:
        get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        return get_minutes(assembly_id=assembly_id)

    @staticmethod
    @transaction.atomic
    def generate(*, tenant_id: UUID, assembly_id: UUID) -> AssemblyMinutes:
        assembly = get_assembly(tenant_id=tenant_id, assembly_id=assembly_id)
        if assembly.status != AssemblyStatus.FINISHED:
            raise ValidationError("Minutes can only be generated after the assembly has finished.")

        votes = build_vote_summary(assembly)
        attendance = build_attendance_summary(assembly)

        minutes, created = AssemblyMinutes.objects.update_or_create(
            assembly=assembly,
            defaults={
                "content": render_minutes(assembly, votes, attendance),
                "summary": render_summary(assembly, votes, attendance),
                "vote_summary": votes,
                "attendance_summary": attendance,
                "status": MinutesStatus.DRAFT,
            },
        )
        logger.info("Minutes %s for assembly %s", "generated" if created else "regenerated", assembly.id)
        return minutes

    @staticmethod
    @transaction.atomic
    def update(
        *,
        tenant_id: UUID,
        assembly_id: UUID,
        content: Optional[str] = None,
        summary: Optional[str] = None,
        status: Optional[str] = None,
    ) -> AssemblyMinutes:
        minutes = MinutesService.get(tenant_id=tenant_id, assembly_id=assembly_id)
        if minutes.status == MinutesStatus.PUBLISHED:
            raise ValidationError("Published minutes cannot be changed.")

        if content is not None:
            minutes.content = content
        if summary is not None:
            minutes.summary = summary
        if status is not None:
            minutes.status = status
        minutes.save()
        return minutes

    @staticmethod
    @transaction.atomic
    def approve(*, tenant_id: UUID, assembly_id: UUID, user) -> AssemblyMinutes:
        minutes = MinutesService.get(tenant_id=tenant_id, assembly_id=assembly_id)
        if minutes.status == MinutesStatus.PUBLISHED:
            raise ValidationError("Minutes are already published.")

        minutes.status = MinutesStatus.APPROVED
        minutes.approved_by = user
        minutes.approved_at = timezone.now()
        minutes.save()
        return minutes

    @staticmethod
    @transaction.atomic
    def publish(*, tenant_id: UUID, assembly_id: UUID) -> AssemblyMinutes:
        minutes = MinutesService.get(tenant_id=tenant_id, assembly_id=assembly_id)
        if minutes.status != MinutesStatus.APPROVED:
            raise ValidationError("Minutes must be approved before publishing.")

        minutes.status = MinutesStatus.PUBLISHED
        minutes.save()
        logger.info("Minutes published for assembly %s", assembly_id)
        return minutes
