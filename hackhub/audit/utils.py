from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import models

from .models import AuditLog

logger = logging.getLogger(__name__)


def log_action(
    action: str,
    *,
    actor: object | None = None,
    message: str = "",
    target: models.Model | None = None,
    before: dict | list | None = None,
    after: dict | list | None = None,
) -> None:
    """Record a domain action; ``target`` fills model_name/record_id."""

    user_model = get_user_model()
    actor_user = actor if isinstance(actor, user_model) else None
    model_name = target._meta.label if target is not None else ""  # noqa: SLF001
    record_id = getattr(target, "pk", None)
    AuditLog.objects.create(
        action=action,
        actor=actor_user,
        message=message,
        model_name=model_name,
        record_id=record_id,
        before=before,
        after=after,
    )
    logger.info(
        "audit action=%s actor=%s target=%s:%s",
        action,
        getattr(actor_user, "pk", None),
        model_name,
        record_id,
    )
