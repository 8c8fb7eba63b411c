from decimal import Decimal

from rest_framework import serializers

from apps.accounts.models import User
from apps.groups.models import Group
from .models import (
    Activity,
    Expense,
    ExpenseCategory,
    ExpenseSplit,
    PaymentMethod,
    Settlement,
    SplitType,
)


# =============================================================================
# Input Serializers
# =============================================================================

class SplitInputSerializer(serializers.Serializer):
    """
    One participant of an expense split.

    Fields:
        user_id (UUID): Participant
        amount (Decimal): Owed amount (EXACT splits)
        percentage (Decimal): Percentage of the total (PERCENTAGE splits)
        shares (int): Share count (SHARES splits)
    """

    user_id = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.00'), required=False
    )
    percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0.00'),
        max_value=Decimal('100.00'), required=False
    )
    shares = serializers.IntegerField(min_value=1, required=False)


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Validate input for creating an expense.

    Fields:
        description (str): What the expense was for
        amount (Decimal): Total paid
        paid_by_id (UUID): Member who paid
        category (str): Expense category
        split_type (str): EQUAL, EXACT, PERCENTAGE or SHARES
        splits (list): Participants, see SplitInputSerializer
        date (datetime): Optional, defaults to now
    """

    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01')
    )
    paid_by_id = serializers.UUIDField()
    category = serializers.ChoiceField(
        choices=ExpenseCategory.choices, default=ExpenseCategory.OTHER
    )
    split_type = serializers.ChoiceField(
        choices=SplitType.choices, default=SplitType.EQUAL
    )
    splits = SplitInputSerializer(many=True, allow_empty=False)
    date = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        """Check each participant carries the input its split type needs."""
        required_field = {
            SplitType.EXACT: 'amount',
            SplitType.PERCENTAGE: 'percentage',
            SplitType.SHARES: 'shares',
        }.get(attrs['split_type'])

        if required_field:
            missing = [
                str(split['user_id'])
                for split in attrs['splits']
                if split.get(required_field) is None
            ]
            if missing:
                raise serializers.ValidationError({
                    'splits': f"'{required_field}' is required for every participant "
                              f"of a {attrs['split_type']} split"
                })

        return attrs


class SettlementCreateSerializer(serializers.Serializer):
    """
    Validate input for recording a settlement.

    Fields:
        from_user_id (UUID): Member who paid
        to_user_id (UUID): Member who received
        amount (Decimal): Amount paid
        payment_method (str): How it was paid
        note (str): Optional note
    """

    from_user_id = serializers.UUIDField()
    to_user_id = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01')
    )
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, default=PaymentMethod.PIX
    )
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['from_user_id'] == attrs['to_user_id']:
            raise serializers.ValidationError({
                'to_user_id': 'Payer and receiver must be different members'
            })
        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class MemberSerializer(serializers.ModelSerializer):
    """Member identity as shown next to amounts."""

    name = serializers.SerializerMethodField()
    avatarUrl = serializers.CharField(source='avatar_url', read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'avatarUrl']
        read_only_fields = fields

    def get_name(self, obj):
        return obj.get_display_name()


class ExpenseSplitSerializer(serializers.ModelSerializer):
    """Serializer for expense splits."""

    user = MemberSerializer(read_only=True)

    class Meta:
        model = ExpenseSplit
        fields = ['user', 'amount', 'percentage', 'shares']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    """Expense with payer and splits."""

    paid_by = MemberSerializer(read_only=True)
    splits = ExpenseSplitSerializer(many=True, read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'group',
            'description',
            'amount',
            'category',
            'split_type',
            'date',
            'paid_by',
            'splits',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SettlementSerializer(serializers.ModelSerializer):
    """Recorded settlement with both parties."""

    from_user = MemberSerializer(read_only=True)
    to_user = MemberSerializer(read_only=True)

    class Meta:
        model = Settlement
        fields = [
            'id',
            'group',
            'from_user',
            'to_user',
            'amount',
            'payment_method',
            'note',
            'settled_at',
            'created_at',
        ]
        read_only_fields = fields


class ActivityGroupSerializer(serializers.ModelSerializer):
    """Group summary shown on a feed entry."""

    class Meta:
        model = Group
        fields = ['id', 'name', 'emoji']
        read_only_fields = fields


class ActivitySerializer(serializers.ModelSerializer):
    """Feed entry with its group and acting member."""

    group = ActivityGroupSerializer(read_only=True)
    user = MemberSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Activity
        fields = ['id', 'type', 'description', 'metadata', 'group', 'user', 'created_at']
        read_only_fields = fields


class MemberIdentitySerializer(serializers.Serializer):
    """Computed member identity (from/to of a suggested payment)."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    avatarUrl = serializers.CharField(allow_null=True)


class MemberBalanceSerializer(serializers.Serializer):
    userId = serializers.UUIDField()
    userName = serializers.CharField()
    avatarUrl = serializers.CharField(allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class SimplifiedDebtSerializer(serializers.Serializer):
    # 'from' is a Python keyword, so that field is added in get_fields()
    to = MemberIdentitySerializer()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)

    def get_fields(self):
        fields = super().get_fields()
        fields['from'] = MemberIdentitySerializer()
        return fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {'from': data['from'], 'to': data['to'], 'amount': data['amount']}


class GroupBalancesSerializer(serializers.Serializer):
    """Response of the group balances endpoint."""

    balances = MemberBalanceSerializer(many=True)
    debts = SimplifiedDebtSerializer(many=True)
    totalSpent = serializers.DecimalField(max_digits=14, decimal_places=2)
