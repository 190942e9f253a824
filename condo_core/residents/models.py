# condo_core/residents/models.py
from django.conf import settings
from django.db import models

from condo_core.common.models import TenantScopedModel, UUIDModel


class ResidentType(models.TextChoices):
    OWNER = "OWNER", "Owner"
    TENANT = "TENANT", "Tenant"


class ResidentStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"


class RelationshipType(models.TextChoices):
    SPOUSE = "SPOUSE", "Spouse"
    CHILD = "CHILD", "Child"
    PARENT = "PARENT", "Parent"
    SIBLING = "SIBLING", "Sibling"
    OTHER = "OTHER", "Other"


class PetType(models.TextChoices):
    DOG = "DOG", "Dog"
    CAT = "CAT", "Cat"
    BIRD = "BIRD", "Bird"
    FISH = "FISH", "Fish"
    OTHER = "OTHER", "Other"


class InviteStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    ACCEPTED = "ACCEPTED", "Accepted"
    EXPIRED = "EXPIRED", "Expired"


class Resident(TenantScopedModel):
    unit = models.ForeignKey("units.Unit", on_delete=models.CASCADE, related_name="residents")
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="resident",
    )

    type = models.CharField(max_length=16, choices=ResidentType.choices, default=ResidentType.OWNER)

    full_name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    rg = models.CharField(max_length=20, blank=True, null=True)
    cpf = models.CharField(max_length=14, blank=True, null=True)
    move_in_date = models.DateField(null=True, blank=True)

    # only meaningful for ResidentType.TENANT
    landlord_name = models.CharField(max_length=255, blank=True, null=True)
    landlord_phone = models.CharField(max_length=20, blank=True, null=True)
    landlord_email = models.EmailField(max_length=255, blank=True, null=True)

    contract_file_url = models.CharField(max_length=500, blank=True, null=True)

    data_consent = models.BooleanField(default=False)
    data_consent_at = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=16, choices=ResidentStatus.choices, default=ResidentStatus.ACTIVE)

    class Meta:
        db_table = "residents"
        indexes = [
            models.Index(fields=["tenant", "full_name"]),
            models.Index(fields=["tenant", "unit"]),
            models.Index(fields=["tenant", "status"]),
        ]

    def __str__(self) -> str:
        return self.full_name


class ResidentSubRecord(UUIDModel):

    class Meta:
        abstract = True


class ResidentContact(ResidentSubRecord):
    resident = models.ForeignKey(Resident, on_delete=models.CASCADE, related_name="emergency_contacts")
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20)
    is_whatsapp = models.BooleanField(default=False)

    class Meta:
        db_table = "resident_contacts"


class HouseholdMember(ResidentSubRecord):
    resident = models.ForeignKey(Resident, on_delete=models.CASCADE, related_name="household_members")
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, blank=True, null=True)
    document = models.CharField(max_length=20, blank=True, null=True)
    relationship = models.CharField(max_length=16, choices=RelationshipType.choices)

    class Meta:
        db_table = "household_members"


class UnitEmployee(ResidentSubRecord):
    resident = models.ForeignKey(Resident, on_delete=models.CASCADE, related_name="employees")
    name = models.CharField(max_length=255)
    document = models.CharField(max_length=20, blank=True, null=True)

    class Meta:
        db_table = "unit_employees"


class Vehicle(ResidentSubRecord):
    resident = models.ForeignKey(Resident, on_delete=models.CASCADE, related_name="vehicles")
    brand = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    color = models.CharField(max_length=50)
    plate = models.CharField(max_length=10, db_index=True)

    class Meta:
        db_table = "vehicles"


class Pet(ResidentSubRecord):
    resident = models.ForeignKey(Resident, on_delete=models.CASCADE, related_name="pets")
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=16, choices=PetType.choices)
    breed = models.CharField(max_length=100, blank=True, null=True)
    color = models.CharField(max_length=50, blank=True, null=True)

    class Meta:
        db_table = "pets"


class ResidentInvite(TenantScopedModel):
    unit = models.ForeignKey("units.Unit", on_delete=models.CASCADE, related_name="invites")

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255)
    phone = models.CharField(max_length=20, blank=True, null=True)

    token = models.CharField(max_length=64, unique=True)
    status = models.CharField(max_length=16, choices=InviteStatus.choices, default=InviteStatus.PENDING)

    expires_at = models.DateTimeField()
    accepted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "resident_invites"
        indexes = [
            models.Index(fields=["tenant", "created_at"]),
            models.Index(fields=["unit", "email", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.email} ({self.status})"
