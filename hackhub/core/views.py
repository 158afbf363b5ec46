from django.http import Http404
from rest_framework.exceptions import NotFound


class NotFoundMessageMixin:
    """Replace DRF's generic 404 text with a resource-specific message."""

    not_found_message = "Not found."

    def get_object(self):
        try:
            return super().get_object()
        except Http404 as exc:
            raise NotFound(self.not_found_message) from exc
