# core/permissions.py
from rest_framework.permissions import BasePermission


class IsBackOfficeAdmin(BasePermission):
    """API counterpart of admin_required: admin role or superuser."""

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)
