from rest_framework.permissions import BasePermission


class IsCompanyAdmin(BasePermission):
    """Staff users or users with the admin role"""
    message = 'Admin access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)


def is_agent_or_admin(user):
    return user.is_admin_role or user.role == 'agent'
