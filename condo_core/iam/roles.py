# condo_core/iam/roles.py
from __future__ import annotations

from typing import Set

from django.core.exceptions import ObjectDoesNotExist

from condo_core.iam.models import UserRole

ROLE_SAAS_ADMIN = UserRole.SAAS_ADMIN.value
ROLE_SYNDIC = UserRole.SYNDIC.value
ROLE_DOORMAN = UserRole.DOORMAN.value
ROLE_RESIDENT = UserRole.RESIDENT.value

ALL_ROLES = frozenset({ROLE_SAAS_ADMIN, ROLE_SYNDIC, ROLE_DOORMAN, ROLE_RESIDENT})
STAFF_ROLES = frozenset({ROLE_SAAS_ADMIN, ROLE_SYNDIC, ROLE_DOORMAN})
MANAGER_ROLES = frozenset({ROLE_SAAS_ADMIN, ROLE_SYNDIC})


def user_roles(user) -> Set[str]:
    """
    Resolve roles from:
    1) superuser flag (treated as SAAS_ADMIN)
    2) Django groups named after a role
    3) user.profile.role

    Returns an empty set for users that were never registered.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_SAAS_ADMIN)
        return roles

    if hasattr(user, "groups"):
        roles.update(n for n in user.groups.values_list("name", flat=True) if n in ALL_ROLES)

    try:
        profile = user.profile
    except ObjectDoesNotExist:
        profile = None
    except AttributeError:
        profile = None

    if profile is not None and profile.role:
        roles.add(str(profile.role))

    return roles


def is_saas_admin(user) -> bool:
    return ROLE_SAAS_ADMIN in user_roles(user)


def is_staff_member(user) -> bool:
    return bool(user_roles(user) & STAFF_ROLES)


def is_manager(user) -> bool:
    return bool(user_roles(user) & MANAGER_ROLES)


def own_only_user_id(user):
    """
    RESIDENT users (without any staff role) only see their own records.
    Returns the user id to restrict to, or None for staff.
    """
    if is_staff_member(user):
        return None
    return user.id
