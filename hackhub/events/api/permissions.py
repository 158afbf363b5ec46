from rest_framework.permissions import BasePermission


class IsEventOrganizer(BasePermission):
    """Object-level: only the event's own organizer (or staff) may change it."""

    message = "Not authorized to update this event"

    def has_object_permission(self, request, view, obj):
        u = getattr(request, "user", None)
        if not (u and getattr(u, "is_authenticated", False)):
            return False
        return bool(getattr(u, "is_staff", False) or obj.organizer_id == u.pk)
