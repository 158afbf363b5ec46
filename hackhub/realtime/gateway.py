"""Routing on top of the Socket.IO server and the presence registry.

Two delivery modes:

- direct: to the one connection currently registered for a user id
  (notifications, typing indicators, direct chat pushes);
- room: to every connection that joined a named room (team chat).

Delivery is best effort and at most once. A recipient with no live
connection is the normal "offline" case: the event is dropped, nothing is
queued and the sender is not told.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from asgiref.sync import async_to_sync

from .presence import PresenceRegistry

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

NEW_MESSAGE = "newMessage"
NEW_NOTIFICATION = "newNotification"
USER_TYPING = "userTyping"


class RealtimeServer(Protocol):
    """The slice of ``socketio.AsyncServer`` the gateway relies on."""

    def enter_room(self, sid: str, room: str) -> Awaitable[None]: ...

    def emit(
        self,
        event: str,
        data: Any = None,
        *,
        to: str | None = None,
        **kwargs: Any,
    ) -> Awaitable[None]: ...


def room_for_user(user_id: int) -> str:
    return f"user_{int(user_id)}"


def room_for_team(team_id: int) -> str:
    return f"team_{int(team_id)}"


class RealtimeGateway:
    def __init__(
        self,
        server: RealtimeServer,
        registry: PresenceRegistry | None = None,
    ) -> None:
        self.server = server
        self.registry = registry if registry is not None else PresenceRegistry()

    async def register(self, user_id: int, sid: str) -> None:
        """Bind ``user_id`` to ``sid`` and subscribe it to the personal room."""

        replaced = self.registry.bind(user_id, sid)
        if replaced is not None:
            logger.info(
                "User %s re-registered: %s replaces %s", user_id, sid, replaced
            )
        await self.server.enter_room(sid, room_for_user(user_id))
        logger.info("User %s joined with socket %s", user_id, sid)

    async def join_room(self, sid: str, room: str) -> None:
        # Subscription is not checked against team membership.
        await self.server.enter_room(sid, room)
        logger.info("Socket %s joined room %s", sid, room)

    async def route_direct(
        self,
        user_id: int,
        event: str,
        payload: Any,
    ) -> bool:
        """Deliver to the user's current connection; False when offline."""

        sid = self.registry.lookup(user_id)
        if sid is None:
            logger.debug("Dropping %s for offline user %s", event, user_id)
            return False
        await self.server.emit(event, payload, to=sid)
        return True

    async def route_room(self, room: str, event: str, payload: Any) -> None:
        await self.server.emit(event, payload, to=room)

    async def unregister(self, sid: str) -> int | None:
        user_id = self.registry.release(sid)
        if user_id is not None:
            logger.info("User %s disconnected", user_id)
        return user_id

    async def relay_typing(
        self,
        from_user_id: int | None,
        to_user_id: int,
        *,
        is_typing: bool,
    ) -> bool:
        payload = {"userId": from_user_id, "isTyping": bool(is_typing)}
        return await self.route_direct(to_user_id, USER_TYPING, payload)

    # Sync entry points for Django code (views, signals, tasks).

    def send_to_user(self, user_id: int, event: str, payload: Any) -> bool:
        return async_to_sync(self.route_direct)(user_id, event, payload)

    def send_to_room(self, room: str, event: str, payload: Any) -> None:
        async_to_sync(self.route_room)(room, event, payload)
