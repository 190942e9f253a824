# condo_core/finance/reports.py
"""
Read-side aggregates for the finance dashboard: period summary, yearly
cashflow with category breakdowns, budgets against actual spend and the
CSV export.
"""
from __future__ import annotations

import calendar
import csv
import io
from collections import defaultdict
from decimal import Decimal
from typing import Any, Optional

from django.db.models import Count, Q, Sum
from django.db.models.functions import ExtractMonth

from condo_core.finance.models import TransactionCategory, TransactionType
from condo_core.finance.selectors import list_budgets, transactions_in_period

ZERO = Decimal("0.00")

CSV_HEADER = ["Date", "Type", "Category", "Description", "Amount", "Reference", "Recorded by"]


def _percentage(part: Decimal, whole: Decimal) -> float:
    if not whole:
        return 0.0
    return round(float(part) / float(whole) * 100, 1)


def _totals(qs) -> dict[str, Any]:
    agg = qs.aggregate(
        income=Sum("amount", filter=Q(type=TransactionType.INCOME)),
        expenses=Sum("amount", filter=Q(type=TransactionType.EXPENSE)),
        count=Count("id"),
    )
    income = agg["income"] or ZERO
    expenses = agg["expenses"] or ZERO
    return {
        "total_income": income,
        "total_expenses": expenses,
        "balance": income - expenses,
        "transaction_count": agg["count"],
    }


def summary(*, tenant_id, year: Optional[int] = None, month: Optional[int] = None) -> dict[str, Any]:
    return _totals(transactions_in_period(tenant_id=tenant_id, year=year, month=month).order_by())


def _breakdown(rows, total: Decimal) -> list[dict[str, Any]]:
    out = [
        {
            "category": r["category"],
            "label": TransactionCategory(r["category"]).label,
            "total": r["total"],
            "count": r["count"],
            "percentage": _percentage(r["total"], total),
        }
        for r in rows
    ]
    return sorted(out, key=lambda r: r["total"], reverse=True)


def overview(*, tenant_id, year: int) -> dict[str, Any]:
    qs = transactions_in_period(tenant_id=tenant_id, year=year).order_by()
    data = _totals(qs)

    per_month: dict[int, dict[str, Decimal]] = defaultdict(lambda: {"income": ZERO, "expenses": ZERO})
    rows = qs.annotate(m=ExtractMonth("date")).values("m", "type").annotate(total=Sum("amount"))
    for r in rows:
        key = "income" if r["type"] == TransactionType.INCOME else "expenses"
        per_month[r["m"]][key] = r["total"]

    data["cashflow"] = [
        {
            "year": year,
            "month": m,
            "label": calendar.month_abbr[m],
            "income": per_month[m]["income"],
            "expenses": per_month[m]["expenses"],
            "balance": per_month[m]["income"] - per_month[m]["expenses"],
        }
        for m in range(1, 13)
    ]

    by_category = list(qs.values("type", "category").annotate(total=Sum("amount"), count=Count("id")))
    data["expenses_by_category"] = _breakdown(
        [r for r in by_category if r["type"] == TransactionType.EXPENSE], data["total_expenses"]
    )
    data["income_by_category"] = _breakdown(
        [r for r in by_category if r["type"] == TransactionType.INCOME], data["total_income"]
    )
    return data


def budgets_with_spent(*, tenant_id, year: int, month: Optional[int] = None) -> list[dict[str, Any]]:
    """Each budget next to the expenses booked in its category and month."""
    budgets = list(list_budgets(tenant_id=tenant_id, year=year, month=month))

    expenses = (
        transactions_in_period(tenant_id=tenant_id, year=year, month=month)
        .filter(type=TransactionType.EXPENSE)
        .order_by()
        .annotate(m=ExtractMonth("date"))
        .values("m", "category")
        .annotate(total=Sum("amount"))
    )
    spent_by_key = {(r["m"], r["category"]): r["total"] for r in expenses}

    out = []
    for b in budgets:
        spent = spent_by_key.get((b.month, b.category), ZERO)
        out.append(
            {
                "id": b.id,
                "tenant_id": b.tenant_id,
                "category": b.category,
                "year": b.year,
                "month": b.month,
                "amount": b.amount,
                "notes": b.notes,
                "spent": spent,
                "remaining": b.amount - spent,
                "percentage_used": _percentage(spent, b.amount),
                "created_at": b.created_at,
                "updated_at": b.updated_at,
            }
        )
    return out


def _recorded_by(user) -> str:
    if user is None:
        return ""
    return user.get_full_name() or user.email or user.get_username()


def export_csv(*, tenant_id, year: Optional[int] = None, month: Optional[int] = None) -> str:
    """
    Semicolon separated with decimal commas, the layout spreadsheet tools
    expect under a pt-BR locale.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=";", lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for tx in transactions_in_period(tenant_id=tenant_id, year=year, month=month):
        writer.writerow(
            [
                tx.date.isoformat(),
                TransactionType(tx.type).label,
                TransactionCategory(tx.category).label,
                tx.description,
                f"{tx.amount:.2f}".replace(".", ","),
                tx.reference or "",
                _recorded_by(tx.created_by),
            ]
        )
    return buf.getvalue()
