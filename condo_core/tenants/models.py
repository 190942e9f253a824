# condo_core/tenants/models.py
import uuid

from django.core.validators import RegexValidator
from django.db import models

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

slug_validator = RegexValidator(
    regex=SLUG_PATTERN,
    message="Slug must contain only lowercase letters, digits and single hyphens.",
)


class TenantPlan(models.TextChoices):
    STARTER = "STARTER", "Starter"
    BASIC = "BASIC", "Basic"
    PROFESSIONAL = "PROFESSIONAL", "Professional"
    ENTERPRISE = "ENTERPRISE", "Enterprise"


class SubscriptionStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    TRIALING = "TRIALING", "Trialing"
    PAST_DUE = "PAST_DUE", "Past due"
    CANCELED = "CANCELED", "Canceled"
    UNPAID = "UNPAID", "Unpaid"


class Tenant(models.Model):
    """
    A condominium.
    Root of all scoping in the system.
    NOT a TenantScopedModel (it *is* the tenant).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    slug = models.CharField(max_length=100, unique=True, validators=[slug_validator])

    active = models.BooleanField(default=True, db_index=True)

    # subscription
    plan = models.CharField(
        max_length=16,
        choices=TenantPlan.choices,
        default=TenantPlan.STARTER,
    )
    subscription_status = models.CharField(
        max_length=16,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.ACTIVE,
    )
    billing_customer_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    billing_subscription_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    max_units = models.PositiveIntegerField(default=30)
    trial_ends_at = models.DateTimeField(null=True, blank=True)
    current_period_end = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tenants"
        indexes = [
            models.Index(fields=["slug"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"
