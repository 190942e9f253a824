# condo_core/finance/services.py
from __future__ import annotations

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from condo_core.common.api.exceptions import ConflictError
from condo_core.finance.models import (
    FREQUENCY_MONTHS,
    Budget,
    FinancialTransaction,
    RecurringEntry,
    TransactionCategory,
)
from condo_core.finance.selectors import get_budget, get_recurring, get_transaction

logger = logging.getLogger(__name__)

_UNSET = object()


def add_months(start: date, months: int) -> date:
    """Same day N months later, clamped to the month's last day (Jan 31 + 1 -> Feb 28/29)."""
    total = start.month - 1 + months
    year, month = start.year + total // 12, total % 12 + 1
    return date(year, month, min(start.day, calendar.monthrange(year, month)[1]))


def next_due_date(entry: RecurringEntry, *, today: Optional[date] = None) -> Optional[date]:
    """
    First occurrence on or after today, counted from start_date.
    None when the entry is paused or its end_date has passed.
    """
    today = today or timezone.localdate()
    if not entry.active:
        return None
    if entry.end_date and entry.end_date < today:
        return None

    step = FREQUENCY_MONTHS.get(entry.frequency, 1)
    n = 0
    current = entry.start_date
    while current < today:
        n += 1
        current = add_months(entry.start_date, n * step)

    if entry.end_date and current > entry.end_date:
        return None
    return current


def _clean_reference(value) -> Optional[str]:
    return (value or "").strip() or None


class TransactionService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        user,
        type: str,
        description: str,
        amount: Decimal,
        date: date,
        category: str = TransactionCategory.OTHER,
        reference: Optional[str] = None,
    ) -> FinancialTransaction:
        tx = FinancialTransaction.objects.create(
            tenant_id=tenant_id,
            type=type,
            category=category or TransactionCategory.OTHER,
            description=description.strip(),
            amount=amount,
            date=date,
            reference=_clean_reference(reference),
            created_by=user,
        )
        logger.info("Transaction recorded: %s %s %s tenant=%s", tx.id, tx.type, tx.amount, tenant_id)
        return get_transaction(tenant_id=tenant_id, transaction_id=tx.id)

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, transaction_id: UUID, **fields) -> FinancialTransaction:
        tx = get_transaction(tenant_id=tenant_id, transaction_id=transaction_id)
        for name in ("type", "category", "amount", "date"):
            if fields.get(name) is not None:
                setattr(tx, name, fields[name])
        if fields.get("description") is not None:
            tx.description = fields["description"].strip()
        if "reference" in fields:
            tx.reference = _clean_reference(fields["reference"])
        tx.save()
        return tx

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, transaction_id: UUID) -> None:
        get_transaction(tenant_id=tenant_id, transaction_id=transaction_id).delete()


class BudgetService:
    @staticmethod
    def create(
        *,
        tenant_id: UUID,
        category: str,
        year: int,
        month: int,
        amount: Decimal,
        notes: Optional[str] = None,
    ) -> Budget:
        label = TransactionCategory(category).label
        if Budget.objects.filter(tenant_id=tenant_id, category=category, year=year, month=month).exists():
            raise ConflictError(f"A budget for {label} in {month:02d}/{year} already exists.")
        try:
            with transaction.atomic():
                return Budget.objects.create(
                    tenant_id=tenant_id,
                    category=category,
                    year=year,
                    month=month,
                    amount=amount,
                    notes=(notes or "").strip() or None,
                )
        except IntegrityError:
            raise ConflictError(f"A budget for {label} in {month:02d}/{year} already exists.")

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, budget_id: UUID, amount: Optional[Decimal] = None, notes=_UNSET) -> Budget:
        budget = get_budget(tenant_id=tenant_id, budget_id=budget_id)
        if amount is not None:
            budget.amount = amount
        if notes is not _UNSET:
            budget.notes = (notes or "").strip() or None
        budget.save()
        return budget

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, budget_id: UUID) -> None:
        get_budget(tenant_id=tenant_id, budget_id=budget_id).delete()


class RecurringService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        user,
        type: str,
        description: str,
        amount: Decimal,
        frequency: str,
        start_date: date,
        end_date: Optional[date] = None,
        category: str = TransactionCategory.OTHER,
        reference: Optional[str] = None,
    ) -> RecurringEntry:
        entry = RecurringEntry.objects.create(
            tenant_id=tenant_id,
            type=type,
            category=category or TransactionCategory.OTHER,
            description=description.strip(),
            amount=amount,
            frequency=frequency,
            start_date=start_date,
            end_date=end_date,
            reference=_clean_reference(reference),
            active=True,
            created_by=user,
        )
        logger.info("Recurring entry created: %s (%s) tenant=%s", entry.id, entry.frequency, tenant_id)
        return entry

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, recurring_id: UUID, **fields) -> RecurringEntry:
        entry = get_recurring(tenant_id=tenant_id, recurring_id=recurring_id)
        for name in ("type", "category", "amount", "frequency", "start_date"):
            if fields.get(name) is not None:
                setattr(entry, name, fields[name])
        if fields.get("description") is not None:
            entry.description = fields["description"].strip()
        if "end_date" in fields:
            entry.end_date = fields["end_date"]
        if "reference" in fields:
            entry.reference = _clean_reference(fields["reference"])

        if entry.end_date and entry.end_date < entry.start_date:
            raise ValidationError({"end_date": ["End date must not be before the start date."]})
        entry.save()
        return entry

    @staticmethod
    @transaction.atomic
    def toggle(*, tenant_id: UUID, recurring_id: UUID) -> RecurringEntry:
        entry = get_recurring(tenant_id=tenant_id, recurring_id=recurring_id)
        entry.active = not entry.active
        entry.save(update_fields=["active", "updated_at"])
        logger.info("Recurring entry %s %s", entry.id, "resumed" if entry.active else "paused")
        return entry

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, recurring_id: UUID) -> None:
        get_recurring(tenant_id=tenant_id, recurring_id=recurring_id).delete()

    @staticmethod
    @transaction.atomic
    def apply(*, tenant_id: UUID, recurring_id: UUID, user, on: date) -> FinancialTransaction:
        """Books one occurrence of an active entry as a transaction dated `on`."""
        entry = get_recurring(tenant_id=tenant_id, recurring_id=recurring_id)
        if not entry.active:
            raise NotFound(f"Recurring entry {recurring_id} not found or inactive.")

        return TransactionService.create(
            tenant_id=tenant_id,
            user=user,
            type=entry.type,
            category=entry.category,
            description=entry.description,
            amount=entry.amount,
            date=on,
            reference=entry.reference,
        )
