import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser, Group

from condo_core.iam.roles import is_manager, is_saas_admin, is_staff_member, own_only_user_id, user_roles

pytestmark = pytest.mark.django_db


def test_profile_role_is_resolved(syndic, doorman, resident_user):
    assert user_roles(syndic) == {"SYNDIC"}
    assert is_manager(syndic) and is_staff_member(syndic)

    assert is_staff_member(doorman) and not is_manager(doorman)
    assert not is_staff_member(resident_user)


def test_superuser_is_saas_admin():
    u = get_user_model().objects.create_superuser(username="root", email="root@example.com", password="x")
    assert is_saas_admin(u)


def test_group_named_after_role_counts(resident_user):
    resident_user.groups.add(Group.objects.create(name="DOORMAN"))
    assert user_roles(resident_user) == {"RESIDENT", "DOORMAN"}
    assert own_only_user_id(resident_user) is None


def test_unregistered_and_anonymous_users_have_no_roles():
    bare = get_user_model().objects.create_user(username="bare", password="x")
    assert user_roles(bare) == set()
    assert user_roles(AnonymousUser()) == set()


def test_own_only_restricts_residents(resident_user, syndic):
    assert own_only_user_id(resident_user) == resident_user.id
    assert own_only_user_id(syndic) is None
