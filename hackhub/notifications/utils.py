from __future__ import annotations

from typing import TYPE_CHECKING

from .models import Notification

if TYPE_CHECKING:  # import for type checking only
    from django.db import models


def notify(
    recipient,
    *,
    notification_type: str,
    title: str,
    message: str,
    related: models.Model | None = None,
) -> Notification:
    """Create a notification; ``related`` fills the entity reference + kind."""

    related_model = ""
    if related is not None:
        related_model = related._meta.object_name  # noqa: SLF001
    return Notification.objects.create(
        recipient=recipient,
        notification_type=notification_type,
        title=title,
        message=message,
        related_object_id=getattr(related, "pk", None),
        related_model=related_model,
    )
