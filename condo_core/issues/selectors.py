# condo_core/issues/selectors.py
from __future__ import annotations

from typing import Optional

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from condo_core.issues.models import Issue, IssueCategory


def list_categories(*, tenant_id, include_inactive: bool = False) -> QuerySet[IssueCategory]:
    qs = IssueCategory.objects.filter(tenant_id=tenant_id)
    if not include_inactive:
        qs = qs.filter(active=True)
    return qs.order_by("name")


def get_category(*, tenant_id, category_id) -> IssueCategory:
    obj = IssueCategory.objects.filter(tenant_id=tenant_id, id=category_id).first()
    if obj is None:
        raise NotFound(f"Issue category {category_id} not found.")
    return obj


def issue_qs(*, tenant_id) -> QuerySet[Issue]:
    return Issue.objects.filter(tenant_id=tenant_id).select_related("unit", "category", "created_by", "resolved_by")


def list_issues(
    *,
    tenant_id,
    created_by_id=None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
) -> QuerySet[Issue]:
    qs = issue_qs(tenant_id=tenant_id)
    if created_by_id is not None:
        qs = qs.filter(created_by_id=created_by_id)
    if status:
        qs = qs.filter(status=status)
    if priority:
        qs = qs.filter(priority=priority)
    return qs.order_by("-created_at")


def get_issue(*, tenant_id, issue_id) -> Issue:
    obj = issue_qs(tenant_id=tenant_id).filter(id=issue_id).first()
    if obj is None:
        raise NotFound(f"Issue {issue_id} not found.")
    return obj
