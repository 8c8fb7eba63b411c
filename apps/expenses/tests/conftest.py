import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.expenses.services import create_expense


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def alice(db):
    """Group owner, has an avatar."""
    return User.objects.create_user(
        email='alice@example.com',
        password='TestPass123!',
        display_name='Alice',
        avatar_url='https://example.com/avatars/alice.png',
    )


@pytest.fixture
def bob(db):
    return User.objects.create_user(
        email='bob@example.com',
        password='TestPass123!',
        display_name='Bob',
    )


@pytest.fixture
def carol(db):
    return User.objects.create_user(
        email='carol@example.com',
        password='TestPass123!',
        display_name='Carol',
    )


@pytest.fixture
def outsider(db):
    """Create and return a user not in the group."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider',
    )


@pytest.fixture
def trip_group(db, alice, bob, carol):
    """Group with Alice (owner), Bob and Carol, joined in that order."""
    group = Group.objects.create(
        name='Beach Trip',
        description='Weekend at the coast',
        owner=alice,
    )
    GroupMembership.objects.create(user=alice, group=group, role=GroupRole.OWNER)
    GroupMembership.objects.create(user=bob, group=group, role=GroupRole.MEMBER)
    GroupMembership.objects.create(user=carol, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def pair_group(db, alice, bob):
    """Group with just Alice and Bob."""
    group = Group.objects.create(name='Flat', owner=alice)
    GroupMembership.objects.create(user=alice, group=group, role=GroupRole.OWNER)
    GroupMembership.objects.create(user=bob, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def dinner_expense(trip_group, alice, bob, carol):
    """Alice paid 90.00 for dinner, split equally between all three."""
    return create_expense(
        group_id=trip_group.id,
        paid_by_id=alice.id,
        amount=Decimal('90.00'),
        description='Dinner',
        participants=[
            {'user_id': alice.id},
            {'user_id': bob.id},
            {'user_id': carol.id},
        ],
        created_by=alice,
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def alice_client(alice):
    """Return API client authenticated as Alice."""
    return _client_for(alice)


@pytest.fixture
def bob_client(bob):
    return _client_for(bob)


@pytest.fixture
def outsider_client(outsider):
    """Return API client authenticated as a non-member."""
    return _client_for(outsider)
