import pytest
from decimal import Decimal
from uuid import uuid4
from django.urls import reverse
from rest_framework import status

from apps.expenses.models import Expense, Settlement


# =============================================================================
# Group Balances Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupBalances:
    """Tests for GET /api/groups/{id}/balances/"""

    def test_response_shape(self, alice_client, trip_group, dinner_expense, alice):
        url = reverse('expenses:group-balances', args=[trip_group.id])
        response = alice_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert set(response.data) == {'balances', 'debts', 'totalSpent'}

        first = response.data['balances'][0]
        assert first['userId'] == str(alice.id)
        assert first['userName'] == 'Alice'
        assert first['avatarUrl'] == 'https://example.com/avatars/alice.png'
        assert Decimal(str(first['amount'])) == Decimal('60.00')

        debt = response.data['debts'][0]
        assert set(debt) == {'from', 'to', 'amount'}
        assert set(debt['from']) == {'id', 'name', 'avatarUrl'}
        assert debt['to']['name'] == 'Alice'
        assert Decimal(str(response.data['totalSpent'])) == Decimal('90.00')

    def test_amounts_rendered_as_numbers(self, alice_client, trip_group, dinner_expense):
        url = reverse('expenses:group-balances', args=[trip_group.id])
        response = alice_client.get(url)

        body = response.json()
        assert isinstance(body['totalSpent'], (int, float))
        assert isinstance(body['debts'][0]['amount'], (int, float))
        assert body['balances'][1]['avatarUrl'] is None

    def test_empty_group_ledger(self, bob_client, trip_group):
        url = reverse('expenses:group-balances', args=[trip_group.id])
        response = bob_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['debts'] == []
        assert len(response.data['balances']) == 3
        assert all(Decimal(str(b['amount'])) == 0 for b in response.data['balances'])

    def test_unauthenticated(self, api_client, trip_group):
        url = reverse('expenses:group-balances', args=[trip_group.id])
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_non_member_forbidden(self, outsider_client, trip_group):
        url = reverse('expenses:group-balances', args=[trip_group.id])
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_group(self, alice_client):
        url = reverse('expenses:group-balances', args=[uuid4()])
        response = alice_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Group Expenses Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupExpenses:
    """Tests for GET/POST /api/groups/{id}/expenses/"""

    def test_list_expenses(self, bob_client, trip_group, dinner_expense):
        url = reverse('expenses:group-expenses', args=[trip_group.id])
        response = bob_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['description'] == 'Dinner'
        assert len(response.data[0]['splits']) == 3

    def test_create_equal_expense(self, alice_client, trip_group, alice, bob, carol):
        url = reverse('expenses:group-expenses', args=[trip_group.id])
        response = alice_client.post(url, {
            'description': 'Groceries',
            'amount': '100.00',
            'paid_by_id': str(bob.id),
            'category': 'FOOD',
            'splits': [
                {'user_id': str(alice.id)},
                {'user_id': str(bob.id)},
                {'user_id': str(carol.id)},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        expense = Expense.objects.get(id=response.data['id'])
        assert expense.paid_by == bob
        assert expense.created_by == alice
        assert expense.get_split_total() == Decimal('100.00')

    def test_create_exact_expense_requires_amounts(self, alice_client, trip_group, alice, bob):
        url = reverse('expenses:group-expenses', args=[trip_group.id])
        response = alice_client.post(url, {
            'description': 'Tickets',
            'amount': '40.00',
            'paid_by_id': str(alice.id),
            'split_type': 'EXACT',
            'splits': [
                {'user_id': str(alice.id), 'amount': '40.00'},
                {'user_id': str(bob.id)},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'splits' in response.data

    def test_split_not_adding_up(self, alice_client, trip_group, alice, bob):
        url = reverse('expenses:group-expenses', args=[trip_group.id])
        response = alice_client.post(url, {
            'description': 'Tickets',
            'amount': '40.00',
            'paid_by_id': str(alice.id),
            'split_type': 'EXACT',
            'splits': [
                {'user_id': str(alice.id), 'amount': '10.00'},
                {'user_id': str(bob.id), 'amount': '10.00'},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_non_member_participant(self, alice_client, trip_group, alice, outsider):
        url = reverse('expenses:group-expenses', args=[trip_group.id])
        response = alice_client.post(url, {
            'description': 'Snacks',
            'amount': '10.00',
            'paid_by_id': str(alice.id),
            'splits': [{'user_id': str(outsider.id)}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Expense.objects.exists()

    def test_empty_splits_rejected(self, alice_client, trip_group, alice):
        url = reverse('expenses:group-expenses', args=[trip_group.id])
        response = alice_client.post(url, {
            'description': 'Snacks',
            'amount': '10.00',
            'paid_by_id': str(alice.id),
            'splits': [],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_member_cannot_create(self, outsider_client, trip_group, alice):
        url = reverse('expenses:group-expenses', args=[trip_group.id])
        response = outsider_client.post(url, {
            'description': 'Snacks',
            'amount': '10.00',
            'paid_by_id': str(alice.id),
            'splits': [{'user_id': str(alice.id)}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Group Settlements Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupSettlements:
    """Tests for GET/POST /api/groups/{id}/settlements/"""

    def test_record_settlement_clears_debt(self, bob_client, pair_group, alice, bob):
        expenses_url = reverse('expenses:group-expenses', args=[pair_group.id])
        bob_client.post(expenses_url, {
            'description': 'Rent',
            'amount': '100.00',
            'paid_by_id': str(alice.id),
            'splits': [{'user_id': str(alice.id)}, {'user_id': str(bob.id)}],
        }, format='json')

        url = reverse('expenses:group-settlements', args=[pair_group.id])
        response = bob_client.post(url, {
            'from_user_id': str(bob.id),
            'to_user_id': str(alice.id),
            'amount': '50.00',
            'payment_method': 'CASH',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['from_user']['id'] == str(bob.id)

        balances = bob_client.get(reverse('expenses:group-balances', args=[pair_group.id]))
        assert balances.data['debts'] == []

    def test_list_settlements(self, alice_client, pair_group, alice, bob):
        Settlement.objects.create(
            group=pair_group,
            from_user=bob,
            to_user=alice,
            amount=Decimal('12.00'),
        )

        url = reverse('expenses:group-settlements', args=[pair_group.id])
        response = alice_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['payment_method'] == 'PIX'

    def test_self_settlement_rejected(self, alice_client, pair_group, alice):
        url = reverse('expenses:group-settlements', args=[pair_group.id])
        response = alice_client.post(url, {
            'from_user_id': str(alice.id),
            'to_user_id': str(alice.id),
            'amount': '5.00',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_member_party(self, alice_client, pair_group, alice, outsider):
        url = reverse('expenses:group-settlements', args=[pair_group.id])
        response = alice_client.post(url, {
            'from_user_id': str(outsider.id),
            'to_user_id': str(alice.id),
            'amount': '5.00',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Activity Feed Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestActivities:
    """Tests for GET /api/activities/ and GET /api/groups/{id}/activities/"""

    def test_feed_shape(self, bob_client, trip_group, dinner_expense, alice):
        response = bob_client.get(reverse('expenses:activities'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        entry = response.data[0]
        assert entry['type'] == 'EXPENSE_ADDED'
        assert entry['description'] == 'Added expense "Dinner" of 90.00'
        assert entry['metadata'] == {'expense_id': str(dinner_expense.id)}
        assert entry['group'] == {'id': str(trip_group.id), 'name': 'Beach Trip', 'emoji': '👥'}
        assert entry['user'] == {
            'id': str(alice.id),
            'name': 'Alice',
            'avatarUrl': 'https://example.com/avatars/alice.png',
        }

    def test_posting_expense_adds_entry(self, bob_client, pair_group, alice, bob):
        bob_client.post(reverse('expenses:group-expenses', args=[pair_group.id]), {
            'description': 'Pizza',
            'amount': '24.00',
            'paid_by_id': str(bob.id),
            'splits': [{'user_id': str(alice.id)}, {'user_id': str(bob.id)}],
        }, format='json')

        response = bob_client.get(reverse('expenses:activities'))

        assert response.data[0]['user']['id'] == str(bob.id)
        assert response.data[0]['description'] == 'Added expense "Pizza" of 24.00'

    def test_feed_hides_other_groups(self, outsider_client, dinner_expense):
        response = outsider_client.get(reverse('expenses:activities'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_feed_unauthenticated(self, api_client):
        response = api_client.get(reverse('expenses:activities'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_group_feed(self, alice_client, trip_group, dinner_expense):
        url = reverse('expenses:group-activities', args=[trip_group.id])
        response = alice_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [entry['type'] for entry in response.data] == ['EXPENSE_ADDED']

    def test_group_feed_non_member_forbidden(self, outsider_client, trip_group, dinner_expense):
        url = reverse('expenses:group-activities', args=[trip_group.id])
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_group_feed_unknown_group(self, alice_client):
        url = reverse('expenses:group-activities', args=[uuid4()])
        response = alice_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
