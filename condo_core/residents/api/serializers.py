# condo_core/residents/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.residents.models import (
    HouseholdMember,
    InviteStatus,
    Pet,
    PetType,
    RelationshipType,
    Resident,
    ResidentContact,
    ResidentInvite,
    ResidentStatus,
    ResidentType,
    UnitEmployee,
    Vehicle,
)


# ---------------------------
# Sub-records (output)
# ---------------------------
class ResidentContactSerializer(serializers.ModelSerializer):
    class Meta:
        model = ResidentContact
        fields = ["id", "name", "phone", "is_whatsapp", "created_at"]
        read_only_fields = fields


class HouseholdMemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = HouseholdMember
        fields = ["id", "name", "email", "document", "relationship", "created_at"]
        read_only_fields = fields


class UnitEmployeeSerializer(serializers.ModelSerializer):
    class Meta:
        model = UnitEmployee
        fields = ["id", "name", "document", "created_at"]
        read_only_fields = fields


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = ["id", "brand", "model", "color", "plate", "created_at"]
        read_only_fields = fields


class PetSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pet
        fields = ["id", "name", "type", "breed", "color", "created_at"]
        read_only_fields = fields


# ---------------------------
# Sub-records (input)
# ---------------------------
class ResidentContactInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=20)
    is_whatsapp = serializers.BooleanField(required=False, default=False)


class HouseholdMemberInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_null=True)
    document = serializers.CharField(max_length=20, required=False, allow_null=True)
    relationship = serializers.ChoiceField(choices=RelationshipType.choices)


class UnitEmployeeInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    document = serializers.CharField(max_length=20, required=False, allow_null=True)


class VehicleInputSerializer(serializers.Serializer):
    brand = serializers.CharField(max_length=100)
    model = serializers.CharField(max_length=100)
    color = serializers.CharField(max_length=50)
    plate = serializers.CharField(max_length=10)


class PetInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    type = serializers.ChoiceField(choices=PetType.choices)
    breed = serializers.CharField(max_length=100, required=False, allow_null=True)
    color = serializers.CharField(max_length=50, required=False, allow_null=True)


# kind -> (input serializer, output serializer)
SUB_RECORD_SERIALIZERS = {
    "contacts": (ResidentContactInputSerializer, ResidentContactSerializer),
    "members": (HouseholdMemberInputSerializer, HouseholdMemberSerializer),
    "employees": (UnitEmployeeInputSerializer, UnitEmployeeSerializer),
    "vehicles": (VehicleInputSerializer, VehicleSerializer),
    "pets": (PetInputSerializer, PetSerializer),
}


# ---------------------------
# Resident
# ---------------------------
class ResidentSerializer(serializers.ModelSerializer):
    unit_identifier = serializers.CharField(source="unit.identifier", read_only=True)
    emergency_contacts = ResidentContactSerializer(many=True, read_only=True)
    household_members = HouseholdMemberSerializer(many=True, read_only=True)
    employees = UnitEmployeeSerializer(many=True, read_only=True)
    vehicles = VehicleSerializer(many=True, read_only=True)
    pets = PetSerializer(many=True, read_only=True)

    class Meta:
        model = Resident
        fields = [
            "id",
            "tenant_id",
            "unit_id",
            "unit_identifier",
            "user_id",
            "type",
            "full_name",
            "email",
            "phone",
            "rg",
            "cpf",
            "move_in_date",
            "landlord_name",
            "landlord_phone",
            "landlord_email",
            "contract_file_url",
            "data_consent",
            "data_consent_at",
            "status",
            "emergency_contacts",
            "household_members",
            "employees",
            "vehicles",
            "pets",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ResidentUpdateSerializer(serializers.Serializer):
    unit_id = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=ResidentType.choices, required=False)
    full_name = serializers.CharField(max_length=255, required=False)
    email = serializers.EmailField(required=False, allow_null=True)
    phone = serializers.CharField(max_length=20, required=False, allow_null=True)
    rg = serializers.CharField(max_length=20, required=False, allow_null=True)
    cpf = serializers.CharField(max_length=14, required=False, allow_null=True)
    move_in_date = serializers.DateField(required=False, allow_null=True)
    landlord_name = serializers.CharField(max_length=255, required=False, allow_null=True)
    landlord_phone = serializers.CharField(max_length=20, required=False, allow_null=True)
    landlord_email = serializers.EmailField(required=False, allow_null=True)
    contract_file_url = serializers.CharField(max_length=500, required=False, allow_null=True)
    status = serializers.ChoiceField(choices=ResidentStatus.choices, required=False)


# ---------------------------
# Invites
# ---------------------------
class ResidentInviteSerializer(serializers.ModelSerializer):
    unit_identifier = serializers.CharField(source="unit.identifier", read_only=True)

    class Meta:
        model = ResidentInvite
        fields = [
            "id",
            "tenant_id",
            "unit_id",
            "unit_identifier",
            "name",
            "email",
            "phone",
            "status",
            "expires_at",
            "accepted_at",
            "created_at",
        ]
        read_only_fields = fields


class InviteCreateSerializer(serializers.Serializer):
    unit_id = serializers.UUIDField()
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, required=False, allow_null=True)


class InviteSummarySerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField(allow_null=True)
    unit_identifier = serializers.CharField(source="unit.identifier")
    tenant_name = serializers.CharField(source="tenant.name")
    expires_at = serializers.DateTimeField()


class InviteValidationSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    invite = InviteSummarySerializer(allow_null=True)


class CompleteRegistrationSerializer(serializers.Serializer):
    invite_token = serializers.CharField(max_length=64)
    password = serializers.CharField(min_length=8, write_only=True)
    full_name = serializers.CharField(max_length=255)
    type = serializers.ChoiceField(choices=ResidentType.choices)
    email = serializers.EmailField(required=False, allow_null=True)
    phone = serializers.CharField(max_length=20, required=False, allow_null=True)
    rg = serializers.CharField(max_length=20, required=False, allow_null=True)
    cpf = serializers.CharField(max_length=14, required=False, allow_null=True)
    move_in_date = serializers.DateField(required=False, allow_null=True)
    landlord_name = serializers.CharField(max_length=255, required=False, allow_null=True)
    landlord_phone = serializers.CharField(max_length=20, required=False, allow_null=True)
    landlord_email = serializers.EmailField(required=False, allow_null=True)
    data_consent = serializers.BooleanField()

    emergency_contacts = ResidentContactInputSerializer(many=True, required=False)
    household_members = HouseholdMemberInputSerializer(many=True, required=False)
    employees = UnitEmployeeInputSerializer(many=True, required=False)
    vehicles = VehicleInputSerializer(many=True, required=False)
    pets = PetInputSerializer(many=True, required=False)

    def validate_data_consent(self, value):
        if not value:
            raise serializers.ValidationError("Data consent is required to register.")
        return value
