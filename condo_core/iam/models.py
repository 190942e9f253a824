# condo_core/iam/models.py
import uuid

from django.conf import settings
from django.db import models

from condo_core.tenants.models import Tenant


class UserRole(models.TextChoices):
    SAAS_ADMIN = "SAAS_ADMIN", "SaaS admin"
    SYNDIC = "SYNDIC", "Syndic"
    DOORMAN = "DOORMAN", "Doorman"
    RESIDENT = "RESIDENT", "Resident"


class UserProfile(models.Model):
    """
    Condo user profile anchored to Django's AUTH_USER_MODEL.

    `tenant` is the legacy single-tenant link. Membership is owned by
    UserTenant; the legacy column is kept in sync by UserService.assign_to_tenant.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")

    name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.RESIDENT)

    # identity-provider subject
    external_id = models.CharField(max_length=255, unique=True, null=True, blank=True)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="user_profiles",
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["role"]),
        ]

    def __str__(self) -> str:
        return f"{self.user.email or self.user.get_username()} ({self.role})"


class UserTenant(models.Model):
    """
    User <-> Tenant membership. One row per (user, tenant).
    The single source of truth for scope checks.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tenant_memberships")
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="user_memberships")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "user_tenants"
        constraints = [
            models.UniqueConstraint(fields=["user", "tenant"], name="uq_user_tenant"),
        ]
        indexes = [
            models.Index(fields=["user"]),
            models.Index(fields=["tenant"]),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.tenant_id}"
