# condo_core/assemblies/admin.py
from django.contrib import admin

from condo_core.assemblies.models import AgendaItem, Assembly, AssemblyMinutes, AssemblyParticipant, Vote


class AgendaItemInline(admin.TabularInline):
    model = AgendaItem
    extra = 0
    fields = ("order_index", "title", "status", "quorum_type", "result")
    readonly_fields = ("result",)


@admin.register(Assembly)
class AssemblyAdmin(admin.ModelAdmin):
    list_display = ("title", "tenant", "status", "scheduled_at", "started_at", "finished_at")
    list_filter = ("status", "tenant")
    search_fields = ("title",)
    readonly_fields = ("checkin_token", "current_otp", "otp_generated_at", "otp_expires_at", "created_at", "updated_at")
    inlines = [AgendaItemInline]


@admin.register(AssemblyParticipant)
class AssemblyParticipantAdmin(admin.ModelAdmin):
    list_display = ("assembly", "unit", "resident", "proxy_name", "approval_status", "joined_at", "left_at", "voting_weight")
    list_filter = ("approval_status",)
    search_fields = ("proxy_name", "unit__identifier")


@admin.register(Vote)
class VoteAdmin(admin.ModelAdmin):
    list_display = ("agenda_item", "participant", "choice", "voting_weight", "created_at")
    list_filter = ("choice",)


@admin.register(AssemblyMinutes)
class AssemblyMinutesAdmin(admin.ModelAdmin):
    list_display = ("assembly", "status", "approved_at", "updated_at")
    list_filter = ("status",)
