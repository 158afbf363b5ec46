from rest_framework.permissions import BasePermission


def _is_authenticated(user) -> bool:
    return bool(user and getattr(user, "is_authenticated", False))


class IsOrganizer(BasePermission):
    """Allow access only to users holding the organizer role (or staff)."""

    message = "Only organizers can perform this action"

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        if not _is_authenticated(u):
            return False
        return bool(getattr(u, "is_staff", False) or getattr(u, "is_organizer", False))


class IsEmailVerified(BasePermission):
    message = "Please verify your email address first"

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        return _is_authenticated(u) and bool(getattr(u, "is_email_verified", False))
