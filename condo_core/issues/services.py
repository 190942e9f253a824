# condo_core/issues/services.py
from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from condo_core.issues.models import Issue, IssueCategory, IssuePriority, IssueStatus
from condo_core.issues.selectors import get_category, get_issue
from condo_core.units.models import Unit

logger = logging.getLogger(__name__)


def _resolve_unit(tenant_id, unit_id) -> Optional[Unit]:
    if unit_id is None:
        return None
    unit = Unit.objects.filter(tenant_id=tenant_id, id=unit_id).first()
    if unit is None:
        raise ValidationError({"unit_id": ["Unit not found in this tenant."]})
    return unit


def _resolve_category(tenant_id, category_id) -> Optional[IssueCategory]:
    if category_id is None:
        return None
    category = IssueCategory.objects.filter(tenant_id=tenant_id, id=category_id).first()
    if category is None:
        raise ValidationError({"category_id": ["Issue category not found in this tenant."]})
    return category


class IssueCategoryService:
    @staticmethod
    @transaction.atomic
    def create(*, tenant_id: UUID, name: str) -> IssueCategory:
        return IssueCategory.objects.create(tenant_id=tenant_id, name=name.strip())

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, category_id: UUID, name: Optional[str] = None, active: Optional[bool] = None) -> IssueCategory:
        category = get_category(tenant_id=tenant_id, category_id=category_id)
        if name is not None:
            category.name = name.strip()
        if active is not None:
            category.active = active
        category.save()
        return category

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, category_id: UUID) -> None:
        get_category(tenant_id=tenant_id, category_id=category_id).delete()


class IssueService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        user,
        title: str,
        description: str,
        unit_id: Optional[UUID] = None,
        category_id: Optional[UUID] = None,
        priority: str = IssuePriority.MEDIUM,
    ) -> Issue:
        issue = Issue.objects.create(
            tenant_id=tenant_id,
            unit=_resolve_unit(tenant_id, unit_id),
            category=_resolve_category(tenant_id, category_id),
            title=title,
            description=description,
            priority=priority,
            created_by=user,
        )
        logger.info("Issue created: %s tenant=%s by user=%s", issue.id, tenant_id, user.id)
        return get_issue(tenant_id=tenant_id, issue_id=issue.id)

    @staticmethod
    @transaction.atomic
    def update(
        *,
        tenant_id: UUID,
        issue_id: UUID,
        user,
        restrict_to_user_id=None,
        **fields: Any,
    ) -> Issue:
        """
        Residents (restrict_to_user_id set) may only edit issues they opened
        and never the status. Moving to RESOLVED stamps the resolver.
        """
        issue = get_issue(tenant_id=tenant_id, issue_id=issue_id)

        if restrict_to_user_id is not None:
            if issue.created_by_id != restrict_to_user_id:
                raise PermissionDenied("You can only edit issues you opened.")
            if fields.get("status"):
                raise PermissionDenied("Only condominium staff can change the issue status.")

        for name in ("title", "description", "priority"):
            if fields.get(name) is not None:
                setattr(issue, name, fields[name])

        if "category_id" in fields:
            issue.category = _resolve_category(tenant_id, fields["category_id"])

        new_status = fields.get("status")
        if new_status and new_status != issue.status:
            issue.status = new_status
            if new_status == IssueStatus.RESOLVED:
                issue.resolved_by = user
                issue.resolved_at = timezone.now()
                issue.resolution_note = (fields.get("resolution_note") or "").strip() or None
            logger.info("Issue %s -> %s by user=%s", issue.id, new_status, user.id)

        issue.save()
        return issue

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, issue_id: UUID) -> None:
        issue = get_issue(tenant_id=tenant_id, issue_id=issue_id)
        logger.info("Issue deleted: %s tenant=%s", issue.id, tenant_id)
        issue.delete()
