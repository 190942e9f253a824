# condo_core/residents/admin.py
from django.contrib import admin

from condo_core.residents.models import (
    HouseholdMember,
    Pet,
    Resident,
    ResidentContact,
    ResidentInvite,
    UnitEmployee,
    Vehicle,
)


class ResidentContactInline(admin.TabularInline):
    model = ResidentContact
    extra = 0


class HouseholdMemberInline(admin.TabularInline):
    model = HouseholdMember
    extra = 0


class UnitEmployeeInline(admin.TabularInline):
    model = UnitEmployee
    extra = 0


class VehicleInline(admin.TabularInline):
    model = Vehicle
    extra = 0


class PetInline(admin.TabularInline):
    model = Pet
    extra = 0


@admin.register(Resident)
class ResidentAdmin(admin.ModelAdmin):
    list_display = ("full_name", "unit", "type", "status", "tenant", "created_at")
    list_filter = ("type", "status", "tenant")
    search_fields = ("full_name", "email", "cpf")
    inlines = [ResidentContactInline, HouseholdMemberInline, UnitEmployeeInline, VehicleInline, PetInline]


@admin.register(ResidentInvite)
class ResidentInviteAdmin(admin.ModelAdmin):
    list_display = ("email", "name", "unit", "status", "expires_at", "accepted_at", "tenant")
    list_filter = ("status", "tenant")
    search_fields = ("email", "name")
    readonly_fields = ("token",)
