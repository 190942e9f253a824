# condo_core/finance/models.py
from django.conf import settings
from django.db import models

from condo_core.common.models import TenantScopedModel


class TransactionType(models.TextChoices):
    INCOME = "INCOME", "Income"
    EXPENSE = "EXPENSE", "Expense"


class TransactionCategory(models.TextChoices):
    COMMON_FEES = "COMMON_FEES", "Common fees"
    MAINTENANCE = "MAINTENANCE", "Maintenance"
    UTILITIES = "UTILITIES", "Utilities"
    SALARY = "SALARY", "Salary"
    INSURANCE = "INSURANCE", "Insurance"
    RESERVE_FUND = "RESERVE_FUND", "Reserve fund"
    OTHER = "OTHER", "Other"


class RecurringFrequency(models.TextChoices):
    MONTHLY = "MONTHLY", "Monthly"
    BIMONTHLY = "BIMONTHLY", "Every two months"
    QUARTERLY = "QUARTERLY", "Quarterly"
    SEMIANNUAL = "SEMIANNUAL", "Every six months"
    ANNUAL = "ANNUAL", "Annual"


FREQUENCY_MONTHS = {
    RecurringFrequency.MONTHLY: 1,
    RecurringFrequency.BIMONTHLY: 2,
    RecurringFrequency.QUARTERLY: 3,
    RecurringFrequency.SEMIANNUAL: 6,
    RecurringFrequency.ANNUAL: 12,
}


class FinancialTransaction(TenantScopedModel):
    type = models.CharField(max_length=8, choices=TransactionType.choices)
    category = models.CharField(max_length=16, choices=TransactionCategory.choices, default=TransactionCategory.OTHER)
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateField(db_index=True)
    reference = models.CharField(max_length=100, blank=True, null=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="financial_transactions",
    )

    class Meta:
        db_table = "financial_transactions"
        indexes = [
            models.Index(fields=["tenant", "date"]),
        ]

    def __str__(self) -> str:
        return f"{self.date} {self.type} {self.amount}"


class Budget(TenantScopedModel):
    """Planned spend for one expense category in one month."""

    category = models.CharField(max_length=16, choices=TransactionCategory.choices)
    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    notes = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        db_table = "finance_budgets"
        constraints = [
            models.UniqueConstraint(fields=["tenant", "category", "year", "month"], name="uq_budget_category_month"),
        ]

    def __str__(self) -> str:
        return f"{self.category} {self.month:02d}/{self.year}"


class RecurringEntry(TenantScopedModel):
    """Template for a transaction that repeats (condo fee, payroll, insurance...)."""

    type = models.CharField(max_length=8, choices=TransactionType.choices)
    category = models.CharField(max_length=16, choices=TransactionCategory.choices, default=TransactionCategory.OTHER)
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    frequency = models.CharField(max_length=16, choices=RecurringFrequency.choices, default=RecurringFrequency.MONTHLY)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    reference = models.CharField(max_length=100, blank=True, null=True)
    active = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="recurring_entries",
    )

    class Meta:
        db_table = "finance_recurring"
        verbose_name_plural = "recurring entries"

    def __str__(self) -> str:
        return self.description
