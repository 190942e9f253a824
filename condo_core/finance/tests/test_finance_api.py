from datetime import date
from decimal import Decimal

import pytest

from condo_core.finance.models import FinancialTransaction, TransactionCategory, TransactionType

pytestmark = pytest.mark.django_db

BASE = "/api/v1/finance"


@pytest.fixture
def ledger(tenant, syndic):
    """Three entries in 2026 plus one in December 2025."""

    def add(day, type_, category, description, amount, reference=None):
        return FinancialTransaction.objects.create(
            tenant=tenant,
            type=type_,
            category=category,
            description=description,
            amount=Decimal(amount),
            date=day,
            reference=reference,
            created_by=syndic,
        )

    return [
        add(date(2026, 2, 5), TransactionType.INCOME, TransactionCategory.COMMON_FEES, "February fees", "1500.00"),
        add(date(2026, 2, 10), TransactionType.EXPENSE, TransactionCategory.MAINTENANCE, "Gate; motor", "300.50", "NF-1"),
        add(date(2026, 3, 1), TransactionType.EXPENSE, TransactionCategory.UTILITIES, "Water bill", "200.00"),
        add(date(2025, 12, 20), TransactionType.INCOME, TransactionCategory.OTHER, "Hall rental", "99.00"),
    ]


def test_only_managers_reach_finance(resident_client, doorman_client, headers):
    assert resident_client.get(f"{BASE}/transactions/", **headers).status_code == 403
    assert doorman_client.get(f"{BASE}/summary/", **headers).status_code == 403


def test_transaction_crud(syndic_client, headers, syndic):
    res = syndic_client.post(
        f"{BASE}/transactions/",
        {"type": "INCOME", "category": "COMMON_FEES", "description": "January fees", "amount": "1500.00", "date": "2026-01-05"},
        format="json",
        **headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["amount"] == "1500.00"
    assert body["category_label"] == "Common fees"
    assert body["reference"] is None
    assert body["created_by_id"] == syndic.id

    url = f"{BASE}/transactions/{body['id']}/"
    res = syndic_client.patch(url, {"amount": "1450.00", "reference": "REC-7"}, format="json", **headers)
    assert (res.json()["amount"], res.json()["reference"]) == ("1450.00", "REC-7")

    bad = syndic_client.post(
        f"{BASE}/transactions/",
        {"type": "INCOME", "description": "Zero", "amount": "0", "date": "2026-01-05"},
        format="json",
        **headers,
    )
    assert bad.status_code == 400

    assert syndic_client.delete(url, **headers).status_code == 204
    assert syndic_client.get(url, **headers).status_code == 404


def test_transaction_filters(syndic_client, headers, ledger):
    rows = syndic_client.get(f"{BASE}/transactions/", {"year": 2026, "month": 2}, **headers).json()["results"]
    assert [r["description"] for r in rows] == ["Gate; motor", "February fees"]

    rows = syndic_client.get(f"{BASE}/transactions/", {"type": "EXPENSE"}, **headers).json()["results"]
    assert {r["category"] for r in rows} == {"MAINTENANCE", "UTILITIES"}

    # month alone does not narrow the list
    rows = syndic_client.get(f"{BASE}/transactions/", {"month": 2}, **headers).json()["results"]
    assert len(rows) == 4


def test_summary(syndic_client, headers, ledger):
    month = syndic_client.get(f"{BASE}/summary/", {"year": 2026, "month": 2}, **headers).json()
    assert month == {"total_income": "1500.00", "total_expenses": "300.50", "balance": "1199.50", "transaction_count": 2}

    everything = syndic_client.get(f"{BASE}/summary/", **headers).json()
    assert everything == {"total_income": "1599.00", "total_expenses": "500.50", "balance": "1098.50", "transaction_count": 4}

    assert syndic_client.get(f"{BASE}/summary/", {"month": 13}, **headers).status_code == 400


def test_yearly_overview(syndic_client, headers, ledger):
    body = syndic_client.get(f"{BASE}/overview/", {"year": 2026}, **headers).json()

    assert (body["total_income"], body["total_expenses"], body["transaction_count"]) == ("1500.00", "500.50", 3)
    assert len(body["cashflow"]) == 12
    assert body["cashflow"][0] == {"year": 2026, "month": 1, "label": "Jan", "income": "0.00", "expenses": "0.00", "balance": "0.00"}
    assert body["cashflow"][1] == {"year": 2026, "month": 2, "label": "Feb", "income": "1500.00", "expenses": "300.50", "balance": "1199.50"}
    assert body["cashflow"][2]["balance"] == "-200.00"

    assert [(c["category"], c["total"], c["percentage"]) for c in body["expenses_by_category"]] == [
        ("MAINTENANCE", "300.50", 60.0),
        ("UTILITIES", "200.00", 40.0),
    ]
    assert body["income_by_category"] == [
        {"category": "COMMON_FEES", "label": "Common fees", "total": "1500.00", "count": 1, "percentage": 100.0}
    ]


def test_csv_export(syndic_client, headers, ledger):
    res = syndic_client.get(f"{BASE}/export/csv/", {"year": 2026, "month": 2}, **headers)
    assert res.status_code == 200
    assert res["Content-Type"] == "text/csv; charset=utf-8"
    assert res["Content-Disposition"] == 'attachment; filename="finance-2026-2.csv"'

    text = res.content.decode("utf-8")
    assert text.startswith("\ufeff")
    lines = text.lstrip("\ufeff").splitlines()
    assert lines == [
        "Date;Type;Category;Description;Amount;Reference;Recorded by",
        '2026-02-10;Expense;Maintenance;"Gate; motor";300,50;NF-1;syndic@example.com',
        "2026-02-05;Income;Common fees;February fees;1500,00;;syndic@example.com",
    ]

    everything = syndic_client.get(f"{BASE}/export/csv/", **headers)
    assert everything["Content-Disposition"] == 'attachment; filename="finance-all-all.csv"'
    assert len(everything.content.decode("utf-8").splitlines()) == 5


def test_budgets_with_spent(syndic_client, headers, ledger):
    url = f"{BASE}/budgets/"
    res = syndic_client.post(url, {"category": "MAINTENANCE", "year": 2026, "month": 2, "amount": "1200.00"}, format="json", **headers)
    assert res.status_code == 201
    budget_id = res.json()["id"]

    dup = syndic_client.post(url, {"category": "MAINTENANCE", "year": 2026, "month": 2, "amount": "10.00"}, format="json", **headers)
    assert dup.status_code == 409

    syndic_client.post(url, {"category": "UTILITIES", "year": 2026, "month": 3, "amount": "500.00"}, format="json", **headers)

    february = syndic_client.get(url, {"year": 2026, "month": 2}, **headers).json()
    assert len(february) == 1
    assert (february[0]["spent"], february[0]["remaining"], february[0]["percentage_used"]) == ("300.50", "899.50", 25.0)

    year = syndic_client.get(url, {"year": 2026}, **headers).json()
    assert [(b["category"], b["spent"], b["remaining"]) for b in year] == [
        ("MAINTENANCE", "300.50", "899.50"),
        ("UTILITIES", "200.00", "300.00"),
    ]

    assert syndic_client.get(url, **headers).status_code == 400

    res = syndic_client.patch(f"{url}{budget_id}/", {"amount": "1500.00", "notes": "New pump"}, format="json", **headers)
    assert (res.json()["amount"], res.json()["notes"]) == ("1500.00", "New pump")
    assert syndic_client.delete(f"{url}{budget_id}/", **headers).status_code == 204


def test_recurring_entries(syndic_client, headers):
    url = f"{BASE}/recurring/"
    payload = {
        "type": "EXPENSE",
        "category": "SALARY",
        "description": "Doorman payroll",
        "amount": "2500.00",
        "frequency": "MONTHLY",
        "start_date": "2026-01-31",
    }
    assert syndic_client.post(url, {**payload, "end_date": "2025-12-31"}, format="json", **headers).status_code == 400

    res = syndic_client.post(url, payload, format="json", **headers)
    assert res.status_code == 201
    entry = res.json()
    assert entry["active"] is True
    assert entry["next_due_date"] is not None

    toggled = syndic_client.patch(f"{url}{entry['id']}/toggle/", **headers).json()
    assert toggled["active"] is False
    assert toggled["next_due_date"] is None
    assert [e["id"] for e in syndic_client.get(url, {"active_only": "true"}, **headers).json()] == []

    apply_url = f"{url}{entry['id']}/apply/"
    assert syndic_client.post(apply_url, {"date": "2026-04-30"}, format="json", **headers).status_code == 404

    syndic_client.post(f"{url}{entry['id']}/toggle/", **headers)
    res = syndic_client.post(apply_url, {"date": "2026-04-30"}, format="json", **headers)
    assert res.status_code == 201
    tx = res.json()
    assert (tx["type"], tx["category"], tx["amount"], tx["date"]) == ("EXPENSE", "SALARY", "2500.00", "2026-04-30")
    assert tx["description"] == "Doorman payroll"

    assert syndic_client.post(apply_url, {}, format="json", **headers).status_code == 400

    res = syndic_client.patch(f"{url}{entry['id']}/", {"frequency": "QUARTERLY", "end_date": None}, format="json", **headers)
    assert res.json()["frequency"] == "QUARTERLY"
    assert syndic_client.delete(f"{url}{entry['id']}/", **headers).status_code == 204
