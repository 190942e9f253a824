# condo_core/finance/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from condo_core.finance.models import (
    Budget,
    FinancialTransaction,
    RecurringEntry,
    RecurringFrequency,
    TransactionCategory,
    TransactionType,
)
from condo_core.finance.services import next_due_date

MIN_AMOUNT = Decimal("0.01")


def _money(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=2, **kwargs)


def _report_money():
    return serializers.DecimalField(max_digits=14, decimal_places=2)


def _display_name(user):
    if user is None:
        return None
    return user.get_full_name() or user.email or user.get_username()


# ---------------------------
# Transactions
# ---------------------------
class TransactionSerializer(serializers.ModelSerializer):
    category_label = serializers.CharField(source="get_category_display", read_only=True)
    created_by_id = serializers.IntegerField(read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = FinancialTransaction
        fields = [
            "id",
            "tenant_id",
            "type",
            "category",
            "category_label",
            "description",
            "amount",
            "date",
            "reference",
            "created_by_id",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return _display_name(obj.created_by)


class TransactionCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TransactionType.choices)
    category = serializers.ChoiceField(choices=TransactionCategory.choices, required=False, default=TransactionCategory.OTHER)
    description = serializers.CharField(max_length=255)
    amount = _money(min_value=MIN_AMOUNT)
    date = serializers.DateField()
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class TransactionUpdateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    category = serializers.ChoiceField(choices=TransactionCategory.choices, required=False)
    description = serializers.CharField(max_length=255, required=False)
    amount = _money(min_value=MIN_AMOUNT, required=False)
    date = serializers.DateField(required=False)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class PeriodQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)


class FinanceSummarySerializer(serializers.Serializer):
    total_income = _report_money()
    total_expenses = _report_money()
    balance = _report_money()
    transaction_count = serializers.IntegerField()


class CashflowMonthSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    label = serializers.CharField()
    income = _report_money()
    expenses = _report_money()
    balance = _report_money()


class CategoryBreakdownSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=TransactionCategory.choices)
    label = serializers.CharField()
    total = _report_money()
    count = serializers.IntegerField()
    percentage = serializers.FloatField()


class FinanceOverviewSerializer(FinanceSummarySerializer):
    cashflow = CashflowMonthSerializer(many=True)
    expenses_by_category = CategoryBreakdownSerializer(many=True)
    income_by_category = CategoryBreakdownSerializer(many=True)


# ---------------------------
# Budgets
# ---------------------------
class BudgetSerializer(serializers.ModelSerializer):
    class Meta:
        model = Budget
        fields = ["id", "tenant_id", "category", "year", "month", "amount", "notes", "created_at", "updated_at"]
        read_only_fields = fields


class BudgetWithSpentSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    tenant_id = serializers.UUIDField()
    category = serializers.ChoiceField(choices=TransactionCategory.choices)
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    amount = _report_money()
    notes = serializers.CharField(allow_null=True)
    spent = _report_money()
    remaining = _report_money()
    percentage_used = serializers.FloatField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class BudgetQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2020, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)


class BudgetCreateSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=TransactionCategory.choices)
    year = serializers.IntegerField(min_value=2020, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)
    amount = _money(min_value=MIN_AMOUNT)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class BudgetUpdateSerializer(serializers.Serializer):
    amount = _money(min_value=MIN_AMOUNT, required=False)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


# ---------------------------
# Recurring entries
# ---------------------------
class RecurringEntrySerializer(serializers.ModelSerializer):
    created_by_id = serializers.IntegerField(read_only=True)
    next_due_date = serializers.SerializerMethodField()

    class Meta:
        model = RecurringEntry
        fields = [
            "id",
            "tenant_id",
            "type",
            "category",
            "description",
            "amount",
            "frequency",
            "start_date",
            "end_date",
            "reference",
            "active",
            "next_due_date",
            "created_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_next_due_date(self, obj):
        due = next_due_date(obj)
        return due.isoformat() if due else None


class RecurringCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TransactionType.choices)
    category = serializers.ChoiceField(choices=TransactionCategory.choices, required=False, default=TransactionCategory.OTHER)
    description = serializers.CharField(max_length=255)
    amount = _money(min_value=MIN_AMOUNT)
    frequency = serializers.ChoiceField(choices=RecurringFrequency.choices)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        end = attrs.get("end_date")
        if end and end < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": ["End date must not be before the start date."]})
        return attrs


class RecurringUpdateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    category = serializers.ChoiceField(choices=TransactionCategory.choices, required=False)
    description = serializers.CharField(max_length=255, required=False)
    amount = _money(min_value=MIN_AMOUNT, required=False)
    frequency = serializers.ChoiceField(choices=RecurringFrequency.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False, allow_null=True)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class ApplyRecurringSerializer(serializers.Serializer):
    date = serializers.DateField()
