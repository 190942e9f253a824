# condo_core/announcements/services.py
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils.dateparse import parse_datetime

from condo_core.announcements.models import Announcement, AnnouncementLike, AnnouncementType, AnnouncementView
from condo_core.announcements.selectors import get_announcement

logger = logging.getLogger(__name__)


def assembly_announcement_content(*, title: str, scheduled_at, description: Optional[str] = None) -> str:
    when = scheduled_at.strftime("%d/%m/%Y %H:%M")
    parts = [
        f"<p>A new assembly has been scheduled: <strong>{title}</strong></p>",
        f"<p><strong>Date:</strong> {when}</p>",
    ]
    if description:
        parts.append(f"<p>{description}</p>")
    parts.append("<p>Stay tuned and take part!</p>")
    return "\n".join(parts)


class AnnouncementService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        user,
        title: str,
        content: str,
        type: str = AnnouncementType.GENERAL,
        published: bool = True,
    ) -> Announcement:
        announcement = Announcement.objects.create(
            tenant_id=tenant_id,
            title=title,
            content=content,
            type=type,
            published=published,
            created_by=user,
        )
        logger.info("Announcement created: %s tenant=%s", announcement.id, tenant_id)
        return get_announcement(tenant_id=tenant_id, announcement_id=announcement.id, user_id=user.id)

    @staticmethod
    @transaction.atomic
    def create_from_assembly(
        *,
        tenant_id,
        assembly_id,
        title: str,
        scheduled_at,
        description: Optional[str] = None,
        created_by_id=None,
    ) -> Announcement:
        if isinstance(scheduled_at, str):
            scheduled_at = parse_datetime(scheduled_at)

        return Announcement.objects.create(
            tenant_id=tenant_id,
            title=f"Assembly scheduled: {title}",
            content=assembly_announcement_content(title=title, scheduled_at=scheduled_at, description=description),
            type=AnnouncementType.ASSEMBLY,
            assembly_id=assembly_id,
            created_by_id=created_by_id,
        )

    @staticmethod
    @transaction.atomic
    def update(
        *,
        tenant_id: UUID,
        announcement_id: UUID,
        user,
        title: Optional[str] = None,
        content: Optional[str] = None,
        type: Optional[str] = None,
        published: Optional[bool] = None,
    ) -> Announcement:
        announcement = get_announcement(tenant_id=tenant_id, announcement_id=announcement_id)
        if title is not None:
            announcement.title = title
        if content is not None:
            announcement.content = content
        if type is not None:
            announcement.type = type
        if published is not None:
            announcement.published = published
        announcement.save()
        return get_announcement(tenant_id=tenant_id, announcement_id=announcement.id, user_id=user.id)

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, announcement_id: UUID) -> None:
        get_announcement(tenant_id=tenant_id, announcement_id=announcement_id).delete()


class EngagementService:
    @staticmethod
    @transaction.atomic
    def record_view(*, tenant_id: UUID, announcement_id: UUID, user) -> None:
        announcement = get_announcement(tenant_id=tenant_id, announcement_id=announcement_id)
        AnnouncementView.objects.get_or_create(announcement=announcement, user=user)

    @staticmethod
    @transaction.atomic
    def toggle_like(*, tenant_id: UUID, announcement_id: UUID, user) -> bool:
        """Returns True when the announcement is liked after the call."""
        announcement = get_announcement(tenant_id=tenant_id, announcement_id=announcement_id)
        deleted, _ = AnnouncementLike.objects.filter(announcement=announcement, user=user).delete()
        if deleted:
            return False
        AnnouncementLike.objects.create(announcement=announcement, user=user)
        return True
