# condo_core/iam/services/users.py
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from condo_core.iam.models import UserProfile, UserRole, UserTenant
from condo_core.tenants.selectors import get_tenant

logger = logging.getLogger(__name__)


def _default_name(email: str) -> str:
    return email.split("@", 1)[0]


def _normalize_role(role: Optional[str]) -> Optional[str]:
    if role is None:
        return None
    if role not in UserRole.values:
        raise ValidationError({"role": f"Invalid role '{role}'."})
    return role


def get_user(*, user_id: int):
    User = get_user_model()
    u = User.objects.select_related("profile", "profile__tenant").filter(id=user_id).first()
    if u is None:
        raise NotFound(f"User {user_id} not found.")
    return u


def ensure_profile(user) -> UserProfile:
    profile = UserProfile.objects.filter(user=user).first()
    if profile is None:
        profile = UserProfile.objects.create(user=user, name=_default_name(user.email or user.get_username()))
    return profile


class UserService:
    """
    Users, profiles and tenant memberships.
    """

    @staticmethod
    @transaction.atomic
    def create_or_update(
        *,
        email: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
        tenant_id: Optional[UUID] = None,
        external_id: Optional[str] = None,
        password: Optional[str] = None,
    ):
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError({"email": "This field is required."})
        role = _normalize_role(role)

        User = get_user_model()
        user = User.objects.filter(email__iexact=email).first()
        created = user is None
        if created:
            user = User.objects.create_user(username=email, email=email, password=password)

        profile = UserProfile.objects.select_for_update().filter(user=user).first()
        if profile is None:
            profile = UserProfile(user=user, name=name or _default_name(email))
        elif name:
            profile.name = name

        if role is not None:
            profile.role = role
        if external_id is not None:
            profile.external_id = external_id
        if tenant_id is not None:
            profile.tenant = get_tenant(tenant_id=tenant_id)
        profile.save()

        if tenant_id is not None:
            UserTenant.objects.get_or_create(user=user, tenant_id=tenant_id)

        logger.info("User %s %s (role=%s)", user.id, "created" if created else "updated", profile.role)
        return user

    @staticmethod
    @transaction.atomic
    def update(
        *,
        user_id: int,
        name: Optional[str] = None,
        role: Optional[str] = None,
        tenant_id=None,
        clear_tenant: bool = False,
    ):
        user = get_user(user_id=user_id)
        profile = ensure_profile(user)

        if name is not None:
            profile.name = name.strip()
        if role is not None:
            profile.role = _normalize_role(role)
        profile.save()

        if tenant_id is not None:
            UserService.assign_to_tenant(user_id=user_id, tenant_id=tenant_id)
        elif clear_tenant:
            profile.tenant = None
            profile.save(update_fields=["tenant", "updated_at"])

        return get_user(user_id=user_id)

    @staticmethod
    @transaction.atomic
    def update_role(*, user_id: int, role: str):
        role = _normalize_role(role)
        user = get_user(user_id=user_id)
        profile = ensure_profile(user)

        if profile.role != role:
            old = profile.role
            profile.role = role
            profile.save(update_fields=["role", "updated_at"])
            logger.info("User %s role changed %s -> %s", user.id, old, role)
        return user

    @staticmethod
    @transaction.atomic
    def assign_to_tenant(*, user_id: int, tenant_id: UUID):
        """
        Sets the legacy profile tenant and makes sure the membership row exists.
        """
        user = get_user(user_id=user_id)
        tenant = get_tenant(tenant_id=tenant_id)
        profile = ensure_profile(user)

        profile.tenant = tenant
        profile.save(update_fields=["tenant", "updated_at"])
        UserTenant.objects.get_or_create(user=user, tenant=tenant)
        return user

    @staticmethod
    @transaction.atomic
    def add_membership(*, user_id: int, tenant_id: UUID) -> UserTenant:
        user = get_user(user_id=user_id)
        tenant = get_tenant(tenant_id=tenant_id)
        m, created = UserTenant.objects.get_or_create(user=user, tenant=tenant)
        if created:
            logger.info("Membership added: user=%s tenant=%s", user.id, tenant.id)
        return m

    @staticmethod
    @transaction.atomic
    def remove_membership(*, user_id: int, tenant_id: UUID) -> None:
        get_user(user_id=user_id)
        deleted, _ = UserTenant.objects.filter(user_id=user_id, tenant_id=tenant_id).delete()
        if not deleted:
            raise NotFound("Membership not found.")

        # legacy column follows the membership
        UserProfile.objects.filter(user_id=user_id, tenant_id=tenant_id).update(tenant=None)
        logger.info("Membership removed: user=%s tenant=%s", user_id, tenant_id)
