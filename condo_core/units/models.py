# condo_core/units/models.py
from django.db import models

from condo_core.common.models import TenantScopedModel


class UnitStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"


class Unit(TenantScopedModel):
    """
    An apartment or house inside a condominium.
    `identifier` is unique per tenant (defaults to "{block}-{number}").
    """

    block = models.CharField(max_length=50)
    number = models.CharField(max_length=50)
    identifier = models.CharField(max_length=100, db_index=True)

    status = models.CharField(max_length=16, choices=UnitStatus.choices, default=UnitStatus.ACTIVE)

    class Meta:
        db_table = "units"
        constraints = [
            models.UniqueConstraint(fields=["tenant", "identifier"], name="uq_units_tenant_identifier"),
        ]
        indexes = [
            models.Index(fields=["tenant", "status"]),
            models.Index(fields=["tenant", "block", "number"]),
        ]

    def __str__(self) -> str:
        return self.identifier
