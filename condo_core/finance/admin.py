# condo_core/finance/admin.py
from django.contrib import admin

from condo_core.finance.models import Budget, FinancialTransaction, RecurringEntry


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    list_display = ("date", "tenant", "type", "category", "description", "amount")
    list_filter = ("type", "category", "tenant")
    search_fields = ("description", "reference")
    date_hierarchy = "date"


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    list_display = ("tenant", "category", "year", "month", "amount")
    list_filter = ("year", "category", "tenant")


@admin.register(RecurringEntry)
class RecurringEntryAdmin(admin.ModelAdmin):
    list_display = ("description", "tenant", "type", "frequency", "amount", "active")
    list_filter = ("active", "frequency", "tenant")
