# condo_core/finance/selectors.py
from __future__ import annotations

from typing import Any, Optional

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound, ValidationError

from condo_core.finance.filters import TransactionFilter
from condo_core.finance.models import Budget, FinancialTransaction, RecurringEntry


def transaction_qs(*, tenant_id) -> QuerySet[FinancialTransaction]:
    return FinancialTransaction.objects.filter(tenant_id=tenant_id).select_related("created_by")


def list_transactions(*, tenant_id, params: Any = None) -> QuerySet[FinancialTransaction]:
    """
    Query params: type, category, year, month (with year).
    Newest first.
    """
    qs = transaction_qs(tenant_id=tenant_id).order_by("-date", "-created_at")
    if not params:
        return qs

    f = TransactionFilter(params, queryset=qs)
    if not f.is_valid():
        raise ValidationError(f.errors)
    return f.qs


def transactions_in_period(*, tenant_id, year: Optional[int] = None, month: Optional[int] = None):
    qs = transaction_qs(tenant_id=tenant_id)
    if year:
        qs = qs.filter(date__year=year)
        if month:
            qs = qs.filter(date__month=month)
    return qs.order_by("-date", "-created_at")


def get_transaction(*, tenant_id, transaction_id) -> FinancialTransaction:
    obj = transaction_qs(tenant_id=tenant_id).filter(id=transaction_id).first()
    if obj is None:
        raise NotFound(f"Transaction {transaction_id} not found.")
    return obj


def list_budgets(*, tenant_id, year: int, month: Optional[int] = None) -> QuerySet[Budget]:
    qs = Budget.objects.filter(tenant_id=tenant_id, year=year)
    if month:
        qs = qs.filter(month=month)
    return qs.order_by("month", "category")


def get_budget(*, tenant_id, budget_id) -> Budget:
    obj = Budget.objects.filter(tenant_id=tenant_id, id=budget_id).first()
    if obj is None:
        raise NotFound(f"Budget {budget_id} not found.")
    return obj


def list_recurring(*, tenant_id, active_only: bool = False) -> QuerySet[RecurringEntry]:
    qs = RecurringEntry.objects.filter(tenant_id=tenant_id).select_related("created_by")
    if active_only:
        qs = qs.filter(active=True)
    return qs.order_by("-created_at")


def get_recurring(*, tenant_id, recurring_id) -> RecurringEntry:
    obj = RecurringEntry.objects.filter(tenant_id=tenant_id, id=recurring_id).first()
    if obj is None:
        raise NotFound(f"Recurring entry {recurring_id} not found.")
    return obj
