"""
Groups app services layer.

Group and membership CRUD belongs to the client-facing group screens;
this layer only exposes the lookups the expenses app relies on.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    NotMemberError,
)

from .membership_management import (
    get_group_by_id,
    get_group_members,
    ensure_members,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'NotMemberError',

    # Membership lookups
    'get_group_by_id',
    'get_group_members',
    'ensure_members',
]
