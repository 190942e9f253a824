# condo_core/assemblies/models.py
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from condo_core.common.models import TenantScopedModel, UUIDModel


class AssemblyStatus(models.TextChoices):
    SCHEDULED = "SCHEDULED", "Scheduled"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    FINISHED = "FINISHED", "Finished"
    CANCELLED = "CANCELLED", "Cancelled"


CLOSED_ASSEMBLY_STATUSES = (AssemblyStatus.FINISHED, AssemblyStatus.CANCELLED)


class AgendaItemStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    VOTING = "VOTING", "Voting"
    CLOSED = "CLOSED", "Closed"


class QuorumType(models.TextChoices):
    SIMPLE = "simple", "Simple majority"
    QUALIFIED = "qualified", "Qualified (2/3)"
    UNANIMOUS = "unanimous", "Unanimous"


class VoteChoice(models.TextChoices):
    YES = "YES", "Yes"
    NO = "NO", "No"
    ABSTENTION = "ABSTENTION", "Abstention"


class ApprovalStatus(models.TextChoices):
    APPROVED = "APPROVED", "Approved"
    PENDING = "PENDING", "Pending"
    REJECTED = "REJECTED", "Rejected"


class MinutesStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    PENDING_REVIEW = "PENDING_REVIEW", "Pending review"
    APPROVED = "APPROVED", "Approved"
    PUBLISHED = "PUBLISHED", "Published"


class Assembly(TenantScopedModel):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)

    scheduled_at = models.DateTimeField()
    started_at = models.DateTimeField(null=True, blank=True)
    finished_at = models.DateTimeField(null=True, blank=True)

    meeting_url = models.CharField(max_length=500, blank=True, null=True)
    status = models.CharField(max_length=16, choices=AssemblyStatus.choices, default=AssemblyStatus.SCHEDULED)

    # QR code check-in
    checkin_token = models.CharField(max_length=64, unique=True, null=True, blank=True)

    # check-in OTP shown by the syndic
    current_otp = models.CharField(max_length=6, null=True, blank=True)
    otp_generated_at = models.DateTimeField(null=True, blank=True)
    otp_expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "assemblies"
        indexes = [
            models.Index(fields=["tenant", "status"]),
            models.Index(fields=["tenant", "scheduled_at"]),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_ASSEMBLY_STATUSES


class AgendaItem(UUIDModel):
    assembly = models.ForeignKey(Assembly, on_delete=models.CASCADE, related_name="agenda_items")

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    order_index = models.IntegerField(default=0)

    status = models.CharField(max_length=16, choices=AgendaItemStatus.choices, default=AgendaItemStatus.PENDING)
    requires_quorum = models.BooleanField(default=True)
    quorum_type = models.CharField(max_length=50, choices=QuorumType.choices, default=QuorumType.SIMPLE)

    voting_started_at = models.DateTimeField(null=True, blank=True)
    voting_ended_at = models.DateTimeField(null=True, blank=True)
    result = models.TextField(blank=True, null=True)

    voting_otp = models.CharField(max_length=6, null=True, blank=True)
    voting_otp_generated_at = models.DateTimeField(null=True, blank=True)
    voting_otp_expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "agenda_items"
        ordering = ["order_index"]
        indexes = [
            models.Index(fields=["assembly", "status"]),
        ]

    def __str__(self) -> str:
        return self.title


def proxy_file_upload_to(instance, filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    return f"assemblies/{instance.assembly_id}/proxies/{uuid.uuid4().hex}.{ext}"


class AssemblyParticipant(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    assembly = models.ForeignKey(Assembly, on_delete=models.CASCADE, related_name="participants")
    unit = models.ForeignKey("units.Unit", on_delete=models.CASCADE, related_name="assembly_participations")
    resident = models.ForeignKey(
        "residents.Resident",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assembly_participations",
    )

    proxy_name = models.CharField(max_length=255, blank=True, null=True)
    proxy_document = models.CharField(max_length=20, blank=True, null=True)
    proxy_file = models.FileField(upload_to=proxy_file_upload_to, max_length=500, blank=True, null=True)
    proxy_file_name = models.CharField(max_length=255, blank=True, null=True)

    approval_status = models.CharField(max_length=16, choices=ApprovalStatus.choices, default=ApprovalStatus.APPROVED)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, null=True)

    session_token = models.CharField(max_length=64, unique=True, null=True, blank=True)
    joined_at = models.DateTimeField(null=True, blank=True)
    left_at = models.DateTimeField(null=True, blank=True)

    voting_weight = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("1.00"))

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "assembly_participants"
        constraints = [
            models.UniqueConstraint(fields=["assembly", "unit"], name="uq_assembly_participant_unit"),
        ]

    def __str__(self) -> str:
        return f"{self.assembly_id}:{self.unit_id}"

    @property
    def is_proxy(self) -> bool:
        return bool(self.proxy_name)

    @property
    def proxy_file_url(self):
        if not self.proxy_file:
            return None
        return f"/api/v1/assemblies/{self.assembly_id}/participants/{self.id}/proxy/"

    @property
    def is_present(self) -> bool:
        return self.joined_at is not None and self.left_at is None


class Vote(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    agenda_item = models.ForeignKey(AgendaItem, on_delete=models.CASCADE, related_name="votes")
    participant = models.ForeignKey(AssemblyParticipant, on_delete=models.CASCADE, related_name="votes")

    choice = models.CharField(max_length=16, choices=VoteChoice.choices)
    # snapshot of the participant's weight when the vote was cast
    voting_weight = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("1.00"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "votes"
        constraints = [
            models.UniqueConstraint(fields=["agenda_item", "participant"], name="uq_vote_item_participant"),
        ]


class AssemblyMinutes(UUIDModel):
    assembly = models.OneToOneField(Assembly, on_delete=models.CASCADE, related_name="minutes")

    content = models.TextField(blank=True, null=True)
    summary = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=16, choices=MinutesStatus.choices, default=MinutesStatus.DRAFT)

    vote_summary = models.JSONField(null=True, blank=True)
    attendance_summary = models.JSONField(null=True, blank=True)

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "assembly_minutes"
