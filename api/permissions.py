"""
Role-based permissions
"""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """
    Admits authenticated users whose role is admin or super_admin.
    """
    message = 'Not authorized to access this route'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'is_admin', False))
