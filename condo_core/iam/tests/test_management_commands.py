from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management import call_command

from condo_core.conftest import create_user
from condo_core.iam.models import UserRole, UserTenant
from condo_core.tenants.models import Tenant
from condo_core.units.models import Unit

pytestmark = pytest.mark.django_db


def test_ensure_roles_is_idempotent():
    call_command("ensure_roles", stdout=StringIO())
    assert set(Group.objects.values_list("name", flat=True)) == set(UserRole.values)

    out = StringIO()
    call_command("ensure_roles", stdout=out)
    assert "already present" in out.getvalue()
    assert Group.objects.count() == len(UserRole.values)


def test_backfill_creates_missing_memberships(tenant):
    user = create_user("legacy", role=UserRole.SYNDIC, tenant=tenant)
    UserTenant.objects.filter(user=user).delete()

    out = StringIO()
    call_command("backfill_user_tenants", "--dry-run", stdout=out)
    assert "Would create memberships: 1" in out.getvalue()
    assert not UserTenant.objects.filter(user=user).exists()

    call_command("backfill_user_tenants", stdout=StringIO())
    call_command("backfill_user_tenants", stdout=StringIO())
    assert UserTenant.objects.filter(user=user, tenant=tenant).count() == 1


def test_seed_demo_is_idempotent():
    out = StringIO()
    call_command("seed_demo", stdout=out)
    assert "Seeded demo condominium condominio-dev" in out.getvalue()

    tenant = Tenant.objects.get(slug="condominio-dev")
    assert Unit.objects.filter(tenant=tenant).count() == 3
    syndic = get_user_model().objects.get(email="syndic@condo.local")
    assert syndic.profile.role == UserRole.SYNDIC
    assert syndic.check_password("demo12345")
    assert UserTenant.objects.filter(user=syndic, tenant=tenant).exists()
    admin = get_user_model().objects.get(email="admin@condo.local")
    assert not UserTenant.objects.filter(user=admin).exists()

    out = StringIO()
    call_command("seed_demo", stdout=out)
    assert "already present" in out.getvalue()
    assert Tenant.objects.filter(slug="condominio-dev").count() == 1
    assert Unit.objects.filter(tenant=tenant).count() == 3
    assert get_user_model().objects.filter(email__endswith="@condo.local").count() == 4
    assert UserTenant.objects.filter(tenant=tenant).count() == 3
