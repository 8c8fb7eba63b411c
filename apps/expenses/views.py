from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.groups.permissions import IsGroupMember
from apps.groups.services import GroupNotFoundError, NotMemberError
from .exceptions import (
    EmptyGroupError,
    InvalidSettlementError,
    InvalidSplitError,
    NoParticipantsError,
)
from .serializers import (
    ActivitySerializer,
    ExpenseCreateSerializer,
    ExpenseSerializer,
    GroupBalancesSerializer,
    SettlementCreateSerializer,
    SettlementSerializer,
)
from .services import (
    build_group_balances,
    create_expense,
    list_group_activities,
    list_user_activities,
    list_group_expenses,
    list_group_settlements,
    record_settlement,
)


@extend_schema(
    responses={200: GroupBalancesSerializer},
    description=(
        "Get every member's net balance, the suggested payments that would "
        "settle the group, and the group's total spending."
    ),
    tags=['balances'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsGroupMember])
def group_balances(request, group_id):
    """Get balances and simplified debts for a group - thin HTTP handler."""
    try:
        data = build_group_balances(group_id)
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except EmptyGroupError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(GroupBalancesSerializer(data).data)


@extend_schema(
    methods=['GET'],
    responses={200: ExpenseSerializer(many=True)},
    description="List the group's expenses, newest first.",
    tags=['expenses'],
)
@extend_schema(
    methods=['POST'],
    request=ExpenseCreateSerializer,
    responses={201: ExpenseSerializer},
    description="Record an expense and split it among members.",
    tags=['expenses'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGroupMember])
def group_expenses(request, group_id):
    """List or create group expenses - thin HTTP handler."""
    if request.method == 'GET':
        try:
            expenses = list_group_expenses(group_id=group_id)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ExpenseSerializer(expenses, many=True).data)

    serializer = ExpenseCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data

    try:
        expense = create_expense(
            group_id=group_id,
            paid_by_id=params['paid_by_id'],
            amount=params['amount'],
            description=params['description'],
            participants=params['splits'],
            split_type=params['split_type'],
            category=params['category'],
            date=params.get('date'),
            created_by=request.user,
        )
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotMemberError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except (NoParticipantsError, InvalidSplitError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['GET'],
    responses={200: SettlementSerializer(many=True)},
    description="List the group's recorded settlements, most recent first.",
    tags=['settlements'],
)
@extend_schema(
    methods=['POST'],
    request=SettlementCreateSerializer,
    responses={201: SettlementSerializer},
    description="Record a payment from one member to another.",
    tags=['settlements'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGroupMember])
def group_settlements(request, group_id):
    """List or record settlements - thin HTTP handler."""
    if request.method == 'GET':
        try:
            settlements = list_group_settlements(group_id=group_id)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(SettlementSerializer(settlements, many=True).data)

    serializer = SettlementCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data

    try:
        settlement = record_settlement(
            group_id=group_id,
            from_user_id=params['from_user_id'],
            to_user_id=params['to_user_id'],
            amount=params['amount'],
            payment_method=params['payment_method'],
            note=params.get('note', ''),
            created_by=request.user,
        )
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotMemberError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except InvalidSettlementError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(SettlementSerializer(settlement).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: ActivitySerializer(many=True)},
    description=(
        "Get the 100 most recent activities across every group the "
        "current user belongs to."
    ),
    tags=['activities'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def activities(request):
    """Get the current user's activity feed - thin HTTP handler."""
    feed = list_user_activities(user=request.user)
    return Response(ActivitySerializer(feed, many=True).data)


@extend_schema(
    responses={200: ActivitySerializer(many=True)},
    description="Get the 100 most recent activities of one group.",
    tags=['activities'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsGroupMember])
def group_activities(request, group_id):
    """Get a group's activity feed - thin HTTP handler."""
    try:
        feed = list_group_activities(group_id=group_id)
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(ActivitySerializer(feed, many=True).data)
