"""API exceptions shared by the hackhub apps.

All of them render through DRF's default handler as ``{"detail": "..."}``.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException


class Conflict(APIException):
    """The request clashes with current state (duplicate, full, in use)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = _("The request conflicts with the current state.")
    default_code = "conflict"


class MembershipError(APIException):
    """A membership precondition does not hold for the caller."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Membership precondition failed.")
    default_code = "membership_error"


class UpstreamServiceError(APIException):
    """An external collaborator (mail, storage) failed on a primary action."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = _("Upstream service unavailable.")
    default_code = "upstream_error"
