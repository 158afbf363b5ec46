from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from hackhub.realtime.gateway import NEW_MESSAGE
from hackhub.realtime.gateway import room_for_team
from hackhub.realtime.socketio import gateway

if TYPE_CHECKING:  # import for type checking only
    from hackhub.chat.models import Message

logger = logging.getLogger(__name__)


def build_message_payload(message: Message) -> dict[str, Any]:
    sender = message.sender
    return {
        "id": message.id,
        "chatId": message.team_id,
        "content": message.content,
        "sender": {
            "id": sender.id,
            "name": sender.name,
            "profilePicture": sender.profile_picture,
        },
        "isRead": message.is_read,
        "createdAt": message.created_at.isoformat() if message.created_at else None,
    }


def publish_message_created(message: Message) -> None:
    """Broadcast a stored chat message to everyone in the team room."""

    payload = build_message_payload(message)
    try:
        gateway.send_to_room(room_for_team(message.team_id), NEW_MESSAGE, payload)
    except Exception:
        logger.exception("Realtime broadcast failed for message %s", message.id)
