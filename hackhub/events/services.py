from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.db import transaction

from hackhub.audit.utils import log_action
from hackhub.core.exceptions import Conflict
from hackhub.core.exceptions import MembershipError
from hackhub.integrations.storage import upload_image
from hackhub.notifications.models import Notification
from hackhub.notifications.utils import notify

from .models import Event

logger = logging.getLogger(__name__)


def _store_image(payload: Any) -> str | None:
    result = upload_image(payload, settings.EVENT_IMAGE_FOLDER)
    if not result.success:
        logger.warning("Event image not stored: %s", result.error)
        return None
    return result.url


def create_event(*, organizer, data: dict[str, Any]) -> Event:
    """Create an event; an image that fails to upload is skipped."""

    data = dict(data)
    image = data.pop("image", None)
    event = Event(organizer=organizer, **data)
    if image:
        event.image = _store_image(image) or ""
    with transaction.atomic():
        event.save()
        log_action(
            "event_created",
            actor=organizer,
            target=event,
            after={"title": event.title, "status": event.status},
        )
    return event


def update_event(event: Event, *, actor, data: dict[str, Any]) -> Event:
    """Apply changes and notify every current participant."""

    data = dict(data)
    image = data.pop("image", None)
    before = {"title": event.title, "status": event.status}
    if image and image != event.image:
        url = _store_image(image)
        if url:
            event.image = url
    for field, value in data.items():
        setattr(event, field, value)

    with transaction.atomic():
        event.save()
        participants = list(event.participants.all())
        for participant in participants:
            notify(
                participant,
                notification_type=Notification.Type.EVENT_UPDATE,
                title="Event Updated",
                message=f'The event "{event.title}" has been updated',
                related=event,
            )
        log_action(
            "event_updated",
            actor=actor,
            target=event,
            before=before,
            after={"title": event.title, "status": event.status},
            message=f"notified={len(participants)}",
        )
    return event


def delete_event(event: Event, *, actor) -> None:
    with transaction.atomic():
        log_action(
            "event_deleted",
            actor=actor,
            target=event,
            before={
                "title": event.title,
                "teams": list(event.teams.values_list("id", flat=True)),
            },
        )
        event.delete()


def register_participant(event: Event, user) -> Event:
    with transaction.atomic():
        event = Event.objects.select_for_update().get(pk=event.pk)
        if event.participants.filter(pk=user.pk).exists():
            msg = "Already registered for this event"
            raise Conflict(msg)
        event.participants.add(user)
        notify(
            user,
            notification_type=Notification.Type.REGISTRATION,
            title="Registration Successful",
            message=f"You have successfully registered for {event.title}",
            related=event,
        )
    return event


def unregister_participant(event: Event, user) -> Event:
    with transaction.atomic():
        event = Event.objects.select_for_update().get(pk=event.pk)
        if not event.participants.filter(pk=user.pk).exists():
            msg = "Not registered for this event"
            raise MembershipError(msg)
        event.participants.remove(user)
    return event
