from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from hackhub.realtime.gateway import NEW_NOTIFICATION
from hackhub.realtime.socketio import gateway

if TYPE_CHECKING:  # import for type checking only
    from hackhub.notifications.models import Notification

logger = logging.getLogger(__name__)


def build_notification_payload(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.notification_type,
        "relatedId": notification.related_object_id,
        "relatedModel": notification.related_model,
        "isRead": notification.is_read,
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


def publish_notification_created(notification: Notification) -> bool:
    """Push a newly created Notification to its recipient, if online."""

    payload = build_notification_payload(notification)
    try:
        return gateway.send_to_user(
            notification.recipient_id, NEW_NOTIFICATION, payload
        )
    except Exception:
        logger.exception("Realtime push failed for notification %s", notification.id)
        return False
