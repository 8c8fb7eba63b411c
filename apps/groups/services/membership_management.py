"""
Membership lookup service.

Read-only helpers the expense and balance services use to resolve a
group and its current members.
"""

from typing import Iterable, List
from uuid import UUID

from django.db.models import QuerySet

from apps.groups.models import Group, GroupMembership

from .exceptions import GroupNotFoundError, NotMemberError


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by its ID.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return Group.objects.select_related('owner').get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def get_group_members(*, group_id: UUID) -> QuerySet[GroupMembership]:
    """
    Get all memberships of a group in join order.

    Args:
        group_id: UUID of the group

    Returns:
        QuerySet of GroupMembership with users preloaded

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('joined_at', 'id')
    )


def ensure_members(*, group_id: UUID, user_ids: Iterable[UUID]) -> List[UUID]:
    """
    Verify every given user belongs to the group.

    Returns:
        The distinct user ids, in the order given

    Raises:
        NotMemberError: If any user is not a member
    """
    wanted = list(dict.fromkeys(UUID(str(user_id)) for user_id in user_ids))
    found = set(
        GroupMembership.objects
        .filter(group_id=group_id, user_id__in=wanted)
        .values_list('user_id', flat=True)
    )
    missing = [user_id for user_id in wanted if user_id not in found]
    if missing:
        raise NotMemberError(
            f"Users {', '.join(str(m) for m in missing)} are not members of this group"
        )
    return wanted
