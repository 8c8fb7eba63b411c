"""
Activity log service.

Every expense and settlement leaves one Activity row in its group. Rows
are written by the management services inside their own transaction, so
a rolled-back write never leaves a feed entry behind.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.models import Activity
from apps.groups.models import Group, GroupMembership
from apps.groups.services import get_group_by_id

logger = logging.getLogger(__name__)

FEED_LIMIT = 100


def log_activity(
    *,
    group: Group,
    type: str,
    description: str,
    user: Optional[User] = None,
    metadata: Optional[dict] = None,
) -> Activity:
    """
    Write one feed entry for a group.

    Args:
        group: Group the action happened in
        type: ActivityType value
        description: Human-readable summary
        user: Member who performed the action, if known
        metadata: Ids of the records involved

    Returns:
        Created Activity
    """
    activity = Activity.objects.create(
        group=group,
        user=user,
        type=type,
        description=description,
        metadata=metadata or {},
    )
    logger.debug("Activity %s logged in group %s: %s", activity.type, group.id, description)
    return activity


def list_user_activities(*, user: User, limit: int = FEED_LIMIT) -> QuerySet[Activity]:
    """
    Get the newest activities across every group the user belongs to.

    Args:
        user: Member whose feed to build
        limit: Maximum number of entries

    Returns:
        QuerySet of Activity, newest first, with group and user preloaded
    """
    group_ids = GroupMembership.objects.filter(user=user).values('group_id')
    return (
        Activity.objects
        .filter(group_id__in=group_ids)
        .select_related('group', 'user')
        .order_by('-created_at')[:limit]
    )


def list_group_activities(*, group_id: UUID, limit: int = FEED_LIMIT) -> QuerySet[Activity]:
    """
    Get the newest activities of one group.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    group = get_group_by_id(group_id=group_id)
    return (
        Activity.objects
        .filter(group=group)
        .select_related('group', 'user')
        .order_by('-created_at')[:limit]
    )
