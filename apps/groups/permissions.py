"""
Custom permission classes for group-scoped endpoints.

Permission Classes:
    IsGroupMember - Requires membership of the group in the URL

Usage:
    from apps.groups.permissions import IsGroupMember

    @api_view(['GET'])
    @permission_classes([IsAuthenticated, IsGroupMember])
    def group_balances(request, group_id):
        ...
"""

from rest_framework.exceptions import NotFound
from rest_framework.permissions import BasePermission

from apps.groups.models import Group


class IsGroupMember(BasePermission):
    """
    Permission: User must be a member of the group.

    Works both as a view-level check (group taken from the ``group_id``
    URL kwarg) and as an object-level check on Group instances.

    Unknown groups raise NotFound so the client gets a 404 rather than
    a misleading 403.
    """

    message = 'You are not a member of this group.'

    def has_permission(self, request, view):
        group_id = view.kwargs.get('group_id')
        if not group_id:
            return True

        try:
            group = Group.objects.get(id=group_id)
        except Group.DoesNotExist:
            raise NotFound('Group not found.')
        return group.has_member(request.user)

    def has_object_permission(self, request, view, obj):
        # obj is a Group instance
        return obj.has_member(request.user)

