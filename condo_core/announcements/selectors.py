# condo_core/announcements/selectors.py
from __future__ import annotations

from django.db.models import Count, Exists, OuterRef, QuerySet
from rest_framework.exceptions import NotFound

from condo_core.announcements.models import Announcement, AnnouncementLike


def with_engagement(qs: QuerySet[Announcement], *, user_id) -> QuerySet[Announcement]:
    """Annotates view_count, like_count and liked_by_me."""
    return qs.annotate(
        view_count=Count("views", distinct=True),
        like_count=Count("likes", distinct=True),
        liked_by_me=Exists(AnnouncementLike.objects.filter(announcement_id=OuterRef("pk"), user_id=user_id)),
    )


def list_published(*, tenant_id, user_id) -> QuerySet[Announcement]:
    qs = Announcement.objects.filter(tenant_id=tenant_id, published=True).select_related("created_by")
    return with_engagement(qs, user_id=user_id).order_by("-created_at")


def get_announcement(*, tenant_id, announcement_id, user_id=None) -> Announcement:
    qs = Announcement.objects.filter(tenant_id=tenant_id, id=announcement_id).select_related("created_by")
    if user_id is not None:
        qs = with_engagement(qs, user_id=user_id)
    obj = qs.first()
    if obj is None:
        raise NotFound(f"Announcement {announcement_id} not found.")
    return obj
