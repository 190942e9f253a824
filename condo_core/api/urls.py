# condo_core/api/urls.py
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from condo_core.announcements.api.views import AnnouncementViewSet
from condo_core.assemblies.api.views import AssemblyViewSet
from condo_core.finance.api.views import BudgetViewSet, FinanceReportViewSet, RecurringEntryViewSet, TransactionViewSet
from condo_core.health.api.views import DetailedHealthView, HealthView
from condo_core.iam.api.auth import LoginView, LogoutView, RefreshView
from condo_core.iam.api.me import MeView
from condo_core.iam.api.session import SessionBootstrapView
from condo_core.iam.api.users import UsersViewSet
from condo_core.issues.api.views import IssueCategoryViewSet, IssueViewSet
from condo_core.reservations.api.views import CommonAreaViewSet, ReservationViewSet
from condo_core.residents.api.views import InviteCompleteView, InviteValidateView, InviteViewSet, ResidentViewSet
from condo_core.subscriptions.api.views import (
    BillingWebhookView,
    ChangePlanView,
    CheckoutView,
    CurrentSubscriptionView,
    PlanListView,
    PortalView,
    SubscriptionOverviewView,
)
from condo_core.tenants.api.views import TenantViewSet
from condo_core.units.api.views import UnitViewSet

router = DefaultRouter()

# Admin-level (no tenant scope)
router.register(r"tenants", TenantViewSet, basename="tenants")
router.register(r"users", UsersViewSet, basename="users")

# Tenant-scoped modules
router.register(r"units", UnitViewSet, basename="units")
router.register(r"residents", ResidentViewSet, basename="residents")
router.register(r"invites", InviteViewSet, basename="invites")
router.register(r"assemblies", AssemblyViewSet, basename="assemblies")
router.register(r"common-areas", CommonAreaViewSet, basename="common-areas")
router.register(r"reservations", ReservationViewSet, basename="reservations")
router.register(r"issues", IssueViewSet, basename="issues")
router.register(r"issue-categories", IssueCategoryViewSet, basename="issue-categories")
router.register(r"announcements", AnnouncementViewSet, basename="announcements")
router.register(r"finance/transactions", TransactionViewSet, basename="finance-transactions")
router.register(r"finance/budgets", BudgetViewSet, basename="finance-budgets")
router.register(r"finance/recurring", RecurringEntryViewSet, basename="finance-recurring")
router.register(r"finance", FinanceReportViewSet, basename="finance")

urlpatterns = [
    # Auth + /me + session bootstrap
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
    path("session/bootstrap/", SessionBootstrapView.as_view(), name="session-bootstrap"),

    path("health/", HealthView.as_view(), name="health"),
    path("health/detailed/", DetailedHealthView.as_view(), name="health-detailed"),

    # Subscriptions
    path("subscriptions/plans/", PlanListView.as_view(), name="subscription-plans"),
    path("subscriptions/current/", CurrentSubscriptionView.as_view(), name="subscription-current"),
    path("subscriptions/overview/", SubscriptionOverviewView.as_view(), name="subscription-overview"),
    path("subscriptions/change-plan/", ChangePlanView.as_view(), name="subscription-change-plan"),
    path("subscriptions/checkout/", CheckoutView.as_view(), name="subscription-checkout"),
    path("subscriptions/portal/", PortalView.as_view(), name="subscription-portal"),
    path("subscriptions/webhook/", BillingWebhookView.as_view(), name="subscription-webhook"),

    # Public invite flow
    path("invites/validate/<str:token>/", InviteValidateView.as_view(), name="invite-validate"),
    path("invites/complete/", InviteCompleteView.as_view(), name="invite-complete"),

    # Assembly nested + public routes (namespaced so tests can reverse("assemblies:..."))
    path("", include(("condo_core.assemblies.api.urls", "assemblies"), namespace="assemblies")),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
