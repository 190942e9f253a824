# condo_core/assemblies/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.assemblies.models import (
    AgendaItem,
    AgendaItemStatus,
    ApprovalStatus,
    Assembly,
    AssemblyMinutes,
    AssemblyParticipant,
    AssemblyStatus,
    MinutesStatus,
    QuorumType,
    Vote,
    VoteChoice,
)


# ---------------------------
# Assemblies
# ---------------------------
class AssemblySerializer(serializers.ModelSerializer):
    class Meta:
        model = Assembly
        fields = [
            "id",
            "tenant_id",
            "title",
            "description",
            "scheduled_at",
            "started_at",
            "finished_at",
            "meeting_url",
            "status",
            "checkin_token",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AssemblyCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    scheduled_at = serializers.DateTimeField()
    meeting_url = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class AssemblyUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    scheduled_at = serializers.DateTimeField(required=False)
    meeting_url = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class AssemblyStatsSerializer(serializers.Serializer):
    total_participants = serializers.IntegerField()
    total_agenda_items = serializers.IntegerField()
    voted_items = serializers.IntegerField()
    total_voting_weight = serializers.FloatField()


# ---------------------------
# Agenda items + votes
# ---------------------------
class AgendaItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = AgendaItem
        fields = [
            "id",
            "assembly_id",
            "title",
            "description",
            "order_index",
            "status",
            "requires_quorum",
            "quorum_type",
            "voting_started_at",
            "voting_ended_at",
            "result",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AgendaItemCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    order_index = serializers.IntegerField(required=False, min_value=0)
    requires_quorum = serializers.BooleanField(required=False, default=True)
    quorum_type = serializers.ChoiceField(choices=QuorumType.choices, required=False, default=QuorumType.SIMPLE)


class AgendaItemUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    order_index = serializers.IntegerField(required=False, min_value=0)
    requires_quorum = serializers.BooleanField(required=False)
    quorum_type = serializers.ChoiceField(choices=QuorumType.choices, required=False)
    status = serializers.ChoiceField(choices=AgendaItemStatus.choices, required=False)
    result = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VoteSummarySerializer(serializers.Serializer):
    yes = serializers.IntegerField()
    no = serializers.IntegerField()
    abstention = serializers.IntegerField()
    total = serializers.IntegerField()
    weighted_yes = serializers.FloatField()
    weighted_no = serializers.FloatField()
    weighted_abstention = serializers.FloatField()
    weighted_total = serializers.FloatField()
    yes_percentage = serializers.FloatField()
    no_percentage = serializers.FloatField()
    abstention_percentage = serializers.FloatField()


class AgendaItemResultSerializer(serializers.Serializer):
    item = AgendaItemSerializer()
    summary = VoteSummarySerializer()


class VoteSerializer(serializers.ModelSerializer):
    unit_identifier = serializers.CharField(source="participant.unit.identifier", read_only=True)

    class Meta:
        model = Vote
        fields = ["id", "agenda_item_id", "participant_id", "unit_identifier", "choice", "voting_weight", "created_at"]
        read_only_fields = fields


class CastVoteSerializer(serializers.Serializer):
    choice = serializers.ChoiceField(choices=VoteChoice.choices)


class SessionVoteSerializer(CastVoteSerializer):
    otp = serializers.CharField(max_length=6, required=False, allow_blank=True)


class HasVotedSerializer(serializers.Serializer):
    has_voted = serializers.BooleanField()
    vote = VoteSerializer(allow_null=True)


# ---------------------------
# Participants
# ---------------------------
class ParticipantSerializer(serializers.ModelSerializer):
    unit_identifier = serializers.CharField(source="unit.identifier", read_only=True)
    resident_name = serializers.SerializerMethodField()
    is_proxy = serializers.BooleanField(read_only=True)
    proxy_file_url = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = AssemblyParticipant
        fields = [
            "id",
            "assembly_id",
            "unit_id",
            "unit_identifier",
            "resident_id",
            "resident_name",
            "is_proxy",
            "proxy_name",
            "proxy_document",
            "proxy_file_url",
            "proxy_file_name",
            "approval_status",
            "approved_by_id",
            "approved_at",
            "rejection_reason",
            "joined_at",
            "left_at",
            "voting_weight",
            "created_at",
        ]
        read_only_fields = fields

    def get_resident_name(self, obj) -> str | None:
        return obj.resident.full_name if obj.resident_id else None


class ParticipantRegisterSerializer(serializers.Serializer):
    unit_id = serializers.UUIDField()
    resident_id = serializers.UUIDField(required=False, allow_null=True)
    proxy_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    proxy_document = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    voting_weight = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, min_value=0)


class ParticipantUpdateSerializer(serializers.Serializer):
    proxy_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    proxy_document = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    voting_weight = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, min_value=0)


class AttendanceStatsSerializer(serializers.Serializer):
    registered = serializers.IntegerField()
    joined = serializers.IntegerField()
    left = serializers.IntegerField()
    present = serializers.IntegerField()
    total_weight = serializers.FloatField()
    present_weight = serializers.FloatField()


class ProxyRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


# ---------------------------
# Attendance (QR check-in)
# ---------------------------
class CheckinTokenSerializer(serializers.Serializer):
    checkin_token = serializers.CharField()
    checkin_url = serializers.CharField()
    assembly_id = serializers.UUIDField()
    assembly_title = serializers.CharField()


class CheckinRequestSerializer(serializers.Serializer):
    checkin_token = serializers.CharField(max_length=64)
    otp = serializers.CharField(max_length=6)
    unit_identifier = serializers.CharField(max_length=100)
    resident_id = serializers.UUIDField(required=False, allow_null=True)
    proxy_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    proxy_document = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)


class CheckinResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    participant_id = serializers.UUIDField()
    assembly_id = serializers.UUIDField()
    assembly_title = serializers.CharField()
    unit_identifier = serializers.CharField()
    checkin_time = serializers.DateTimeField()
    session_token = serializers.CharField()
    approval_status = serializers.ChoiceField(choices=ApprovalStatus.choices)
    is_proxy = serializers.BooleanField()
    message = serializers.CharField()


class CheckoutRequestSerializer(serializers.Serializer):
    session_token = serializers.CharField(max_length=64)


class CheckoutResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    checkout_time = serializers.DateTimeField()


class CheckinAssemblySummarySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()
    status = serializers.ChoiceField(choices=AssemblyStatus.choices)
    scheduled_at = serializers.DateTimeField()
    tenant_name = serializers.CharField()


class CheckinTokenValidationSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    requires_otp = serializers.BooleanField()
    assembly = CheckinAssemblySummarySerializer(allow_null=True)


class OtpValidateRequestSerializer(serializers.Serializer):
    otp = serializers.CharField(max_length=6)


class OtpValidationSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    assembly_id = serializers.UUIDField(allow_null=True)


class AttendanceStatusSerializer(serializers.Serializer):
    assembly_id = serializers.UUIDField()
    assembly_title = serializers.CharField()
    status = serializers.ChoiceField(choices=AssemblyStatus.choices)
    total_units = serializers.IntegerField()
    registered_participants = serializers.IntegerField()
    checked_in = serializers.IntegerField()
    checked_out = serializers.IntegerField()
    currently_present = serializers.IntegerField()
    quorum_percentage = serializers.FloatField()
    total_voting_weight = serializers.FloatField()
    present_voting_weight = serializers.FloatField()


class OtpSerializer(serializers.Serializer):
    otp = serializers.CharField()
    generated_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    remaining_seconds = serializers.IntegerField()


# ---------------------------
# Participant session (public)
# ---------------------------
class SessionDataSerializer(serializers.Serializer):
    participant_id = serializers.UUIDField()
    assembly_id = serializers.UUIDField()
    assembly_title = serializers.CharField()
    assembly_status = serializers.ChoiceField(choices=AssemblyStatus.choices)
    unit_identifier = serializers.CharField()
    proxy_name = serializers.CharField(allow_null=True)
    approval_status = serializers.ChoiceField(choices=ApprovalStatus.choices)
    rejection_reason = serializers.CharField(allow_null=True)
    checkin_time = serializers.DateTimeField()
    can_vote = serializers.BooleanField()


class SessionStatusSerializer(serializers.Serializer):
    is_present = serializers.BooleanField()
    approval_status = serializers.ChoiceField(choices=ApprovalStatus.choices)
    can_vote = serializers.BooleanField()
    message = serializers.CharField()


class SessionAgendaItemSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    order_index = serializers.IntegerField()
    status = serializers.ChoiceField(choices=AgendaItemStatus.choices)
    has_voted = serializers.BooleanField()
    voting_otp_required = serializers.BooleanField()


class SessionAgendaItemDetailSerializer(serializers.Serializer):
    item = SessionAgendaItemSerializer()
    can_vote = serializers.BooleanField()
    has_voted = serializers.BooleanField()
    voting_otp_required = serializers.BooleanField()


# ---------------------------
# Minutes
# ---------------------------
class MinutesSerializer(serializers.ModelSerializer):
    class Meta:
        model = AssemblyMinutes
        fields = [
            "id",
            "assembly_id",
            "content",
            "summary",
            "status",
            "vote_summary",
            "attendance_summary",
            "approved_by_id",
            "approved_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MinutesUpdateSerializer(serializers.Serializer):
    content = serializers.CharField(required=False, allow_blank=True)
    summary = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=MinutesStatus.choices, required=False)


class ProxyUploadSerializer(serializers.Serializer):
    file = serializers.FileField()


class ProxyUploadResponseSerializer(serializers.Serializer):
    participant_id = serializers.UUIDField()
    file_name = serializers.CharField()
    file_url = serializers.CharField()
    uploaded_at = serializers.DateTimeField()
