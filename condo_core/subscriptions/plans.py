# condo_core/subscriptions/plans.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field

from rest_framework.exceptions import ValidationError

from condo_core.tenants.models import TenantPlan


@dataclass(frozen=True)
class PlanConfig:
    key: str
    name: str
    max_units: int
    price_monthly: int  # cents
    features: tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict:
        d = asdict(self)
        d["features"] = list(self.features)
        return d


PLANS: tuple[PlanConfig, ...] = (
    PlanConfig(
        key=TenantPlan.STARTER,
        name="Starter",
        max_units=30,
        price_monthly=0,
        features=("Up to 30 units", "Announcements", "Issues", "Reservations", "Assemblies (1/month)"),
    ),
    PlanConfig(
        key=TenantPlan.BASIC,
        name="Basic",
        max_units=60,
        price_monthly=9900,
        features=(
            "Up to 60 units",
            "Unlimited announcements",
            "Issues",
            "Reservations",
            "Assemblies (3/month)",
            "Full reports",
        ),
    ),
    PlanConfig(
        key=TenantPlan.PROFESSIONAL,
        name="Professional",
        max_units=150,
        price_monthly=19900,
        features=(
            "Up to 150 units",
            "Unlimited announcements",
            "Issues",
            "Reservations",
            "Unlimited assemblies",
            "Full reports",
            "Priority support",
        ),
    ),
    PlanConfig(
        key=TenantPlan.ENTERPRISE,
        name="Enterprise",
        max_units=500,
        price_monthly=39900,
        features=(
            "Up to 500 units",
            "Unlimited announcements",
            "Issues",
            "Reservations",
            "Unlimited assemblies",
            "Full reports",
            "Dedicated support",
        ),
    ),
)


def get_plans() -> tuple[PlanConfig, ...]:
    return PLANS


def get_plan_config(plan: str) -> PlanConfig:
    for p in PLANS:
        if p.key == plan:
            return p
    raise ValidationError(f"Invalid plan '{plan}'.")
