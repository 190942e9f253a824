# condo_core/conftest.py
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from condo_core.iam.models import UserProfile, UserRole, UserTenant
from condo_core.residents.models import Resident, ResidentType
from condo_core.tenants.models import Tenant
from condo_core.units.models import Unit


def scope_headers(tenant):
    """
    Standard scope header used by the scope resolver.
    DRF test client requires HTTP_ prefix.
    """
    return {"HTTP_X_TENANT_ID": str(tenant.id)}


def create_user(username, *, role, tenant=None, password="pass12345", email=None):
    """
    auth_user -> UserProfile(role) -> UserTenant membership (when a tenant is given).
    """
    User = get_user_model()
    user = User.objects.create_user(
        username=username,
        email=email or f"{username}@example.com",
        password=password,
        is_active=True,
    )
    UserProfile.objects.create(user=user, name=username.title(), role=role, tenant=tenant)
    if tenant is not None:
        UserTenant.objects.create(user=user, tenant=tenant)
    return user


def client_for(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(name="Test Condominium", slug="test-condo")


@pytest.fixture
def other_tenant(db):
    return Tenant.objects.create(name="Other Condominium", slug="other-condo")


@pytest.fixture
def headers(tenant):
    return scope_headers(tenant)


@pytest.fixture
def saas_admin(db):
    return create_user("admin", role=UserRole.SAAS_ADMIN)


@pytest.fixture
def syndic(tenant):
    return create_user("syndic", role=UserRole.SYNDIC, tenant=tenant)


@pytest.fixture
def doorman(tenant):
    return create_user("doorman", role=UserRole.DOORMAN, tenant=tenant)


@pytest.fixture
def resident_user(tenant):
    return create_user("resident", role=UserRole.RESIDENT, tenant=tenant)


@pytest.fixture
def other_resident_user(tenant):
    return create_user("neighbour", role=UserRole.RESIDENT, tenant=tenant)


@pytest.fixture
def admin_client(saas_admin):
    return client_for(saas_admin)


@pytest.fixture
def syndic_client(syndic):
    return client_for(syndic)


@pytest.fixture
def doorman_client(doorman):
    return client_for(doorman)


@pytest.fixture
def resident_client(resident_user):
    return client_for(resident_user)


@pytest.fixture
def unit(tenant):
    return Unit.objects.create(tenant=tenant, block="A", number="101", identifier="A-101")


@pytest.fixture
def unit2(tenant):
    return Unit.objects.create(tenant=tenant, block="A", number="102", identifier="A-102")


@pytest.fixture
def resident(tenant, unit, resident_user):
    return Resident.objects.create(
        tenant=tenant,
        unit=unit,
        user=resident_user,
        type=ResidentType.OWNER,
        full_name="Rita Resident",
        email=resident_user.email,
    )
