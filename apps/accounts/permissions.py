from rest_framework.permissions import BasePermission


class IsAdmin(BasePermission):
    message = 'Forbidden - Admin access required'

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            getattr(request.user, 'is_admin', False)
        )


class IsStaffMember(BasePermission):
    message = 'Forbidden - Staff access required'

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated and
            getattr(request.user, 'is_staff_member', False)
        )


class IsStaffOrReadOnly(BasePermission):
    """Clients may read; only staff may write."""

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        if request.method in ('GET', 'HEAD', 'OPTIONS'):
            return True
        return getattr(request.user, 'is_staff_member', False)
