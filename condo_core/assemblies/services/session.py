# condo_core/assemblies/services/session.py
from __future__ import annotations

from typing import Any, Optional

from rest_framework.exceptions import AuthenticationFailed, NotFound, PermissionDenied

from condo_core.assemblies.models import (
    AgendaItem,
    AgendaItemStatus,
    ApprovalStatus,
    AssemblyParticipant,
    AssemblyStatus,
    Vote,
)
from condo_core.assemblies.selectors import find_participant_by_session, list_agenda_items
from condo_core.assemblies.services.assemblies import VoteService
from condo_core.assemblies.services.otp import OtpService

MSG_PENDING = "Waiting for the syndic to approve the proxy."
MSG_ABLE_TO_VOTE = "You are able to vote."
MSG_WAITING_START = "Waiting for the assembly to start."
MSG_CLOSED = "The assembly is closed."
NOT_ALLOWED_TO_VOTE_MSG = "You are not allowed to vote."
INVALID_VOTING_OTP_MSG = "Invalid or expired voting OTP."


def _can_vote(participant: AssemblyParticipant) -> bool:
    return (
        participant.approval_status == ApprovalStatus.APPROVED
        and participant.assembly.status == AssemblyStatus.IN_PROGRESS
    )


def _item_view(item: AgendaItem, voted_ids: set) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description,
        "order_index": item.order_index,
        "status": item.status,
        "has_voted": item.id in voted_ids,
        "voting_otp_required": item.status == AgendaItemStatus.VOTING and bool(item.voting_otp),
    }


class ParticipantSessionService:
    """
    Everything a checked-in participant's device can do with its session token.
    """

    @staticmethod
    def resolve(*, session_token: str) -> AssemblyParticipant:
        participant = find_participant_by_session(session_token=session_token)
        if participant is None:
            raise NotFound("Invalid or expired session.")
        if not participant.joined_at:
            raise PermissionDenied("Participant has not checked in.")
        if participant.left_at:
            raise PermissionDenied("Participant has already left the assembly.")
        return participant

    @staticmethod
    def session_data(*, session_token: str) -> dict[str, Any]:
        p = ParticipantSessionService.resolve(session_token=session_token)
        return {
            "participant_id": p.id,
            "assembly_id": p.assembly_id,
            "assembly_title": p.assembly.title,
            "assembly_status": p.assembly.status,
            "unit_identifier": p.unit.identifier if p.unit_id else "N/A",
            "proxy_name": p.proxy_name,
            "approval_status": p.approval_status,
            "rejection_reason": p.rejection_reason,
            "checkin_time": p.joined_at,
            "can_vote": _can_vote(p),
        }

    @staticmethod
    def status(*, session_token: str) -> dict[str, Any]:
        p = ParticipantSessionService.resolve(session_token=session_token)

        can_vote = False
        if p.approval_status == ApprovalStatus.PENDING:
            message = MSG_PENDING
        elif p.approval_status == ApprovalStatus.REJECTED:
            message = f"Proxy rejected: {p.rejection_reason or 'no reason given'}"
        elif p.assembly.status == AssemblyStatus.IN_PROGRESS:
            message = MSG_ABLE_TO_VOTE
            can_vote = True
        elif p.assembly.status == AssemblyStatus.SCHEDULED:
            message = MSG_WAITING_START
        else:
            message = MSG_CLOSED

        return {
            "is_present": True,
            "approval_status": p.approval_status,
            "can_vote": can_vote,
            "message": message,
        }

    @staticmethod
    def agenda(*, session_token: str) -> list[dict[str, Any]]:
        p = ParticipantSessionService.resolve(session_token=session_token)
        voted_ids = set(Vote.objects.filter(participant=p).values_list("agenda_item_id", flat=True))
        return [_item_view(item, voted_ids) for item in list_agenda_items(assembly_id=p.assembly_id)]

    @staticmethod
    def _item(p: AssemblyParticipant, item_id) -> AgendaItem:
        item = AgendaItem.objects.filter(assembly_id=p.assembly_id, id=item_id).first()
        if item is None:
            raise NotFound("Agenda item not found.")
        return item

    @staticmethod
    def item_detail(*, session_token: str, item_id) -> dict[str, Any]:
        p = ParticipantSessionService.resolve(session_token=session_token)
        item = ParticipantSessionService._item(p, item_id)
        voted = Vote.objects.filter(participant=p, agenda_item=item).exists()
        voted_ids = {item.id} if voted else set()
        return {
            "item": _item_view(item, voted_ids),
            "can_vote": _can_vote(p) and item.status == AgendaItemStatus.VOTING and not voted,
            "has_voted": voted,
            "voting_otp_required": bool(item.voting_otp),
        }

    @staticmethod
    def vote(*, session_token: str, item_id, choice: str, otp: Optional[str] = None) -> Vote:
        p = ParticipantSessionService.resolve(session_token=session_token)
        if not _can_vote(p):
            raise AuthenticationFailed(NOT_ALLOWED_TO_VOTE_MSG)

        item = ParticipantSessionService._item(p, item_id)
        if item.voting_otp and not OtpService.check_voting_otp(item, otp):
            raise AuthenticationFailed(INVALID_VOTING_OTP_MSG)

        return VoteService.cast(item_id=item.id, participant_id=p.id, choice=choice)
