"""Global Socket.IO server for the frontend.

One server instance carries every realtime feature: team chat, notification
pushes and typing indicators. ``config.asgi`` mounts it at
``settings.SOCKETIO_PATH``.

Connection contract:
- Auth: `query.token` or `auth.token` (JWT access token). The connection is
  registered for the token's user as soon as it is accepted.
- `join` (re)binds the connection to its authenticated user.
- `joinRoom` subscribes to a named room such as `team_<id>`.
- `sendMessage` / `sendNotification` / `typing` relay client payloads; the
  server forwards them as `newMessage` / `newNotification` / `userTyping`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import socketio
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from socketio import exceptions as sio_exceptions

from .gateway import NEW_MESSAGE
from .gateway import NEW_NOTIFICATION
from .gateway import RealtimeGateway

logger = logging.getLogger(__name__)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.SOCKETIO_CORS_ALLOWED_ORIGINS,
    logger=False,
    engineio_logger=False,
)

gateway = RealtimeGateway(sio)


@dataclass(frozen=True)
class UserRealtimeContext:
    user_id: int
    name: str


@database_sync_to_async
def _get_user_context_from_access_token(token: str) -> UserRealtimeContext:
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return UserRealtimeContext(user_id=int(user.id), name=user.name)


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    # Allow `auth: { token }` as fallback.
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


def _coerce_user_id(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


async def _session_user_id(sid: str) -> int | None:
    session = await sio.get_session(sid)
    return session.get("user_id") if isinstance(session, dict) else None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if not token:
        msg = "unauthorized"
        raise sio_exceptions.ConnectionRefusedError(msg)

    try:
        ctx = await _get_user_context_from_access_token(token)
    except TokenError as exc:
        message = str(exc)
        logger.warning("Socket.IO token rejected for %s: %s", sid, message)
        if "expired" in message.lower():
            msg = "jwt_expired"
            raise sio_exceptions.ConnectionRefusedError(msg) from exc
        msg = "unauthorized"
        raise sio_exceptions.ConnectionRefusedError(msg) from exc
    except AuthenticationFailed as exc:  # user not found / inactive, etc.
        logger.warning("Socket.IO authentication failed for %s", sid)
        msg = "unauthorized"
        raise sio_exceptions.ConnectionRefusedError(msg) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise sio_exceptions.ConnectionRefusedError(msg) from exc

    await sio.save_session(sid, {"user_id": ctx.user_id, "name": ctx.name})
    await gateway.register(ctx.user_id, sid)


@sio.event
async def join(sid: str, data: Any = None):
    """Re-bind this connection to its user.

    Clients send their own user id; it must match the authenticated one.
    """

    user_id = await _session_user_id(sid)
    claimed = _coerce_user_id(data.get("userId") if isinstance(data, dict) else data)
    if user_id is None or (claimed is not None and claimed != user_id):
        await sio.emit("error", {"message": "Cannot join as another user"}, to=sid)
        return
    await gateway.register(user_id, sid)


@sio.on("joinRoom")
async def join_room(sid: str, room: Any):
    if not isinstance(room, str) or not room.strip():
        await sio.emit("error", {"message": "Room name required"}, to=sid)
        return
    await gateway.join_room(sid, room.strip())


@sio.on("sendMessage")
async def send_message(sid: str, data: Any):
    """Relay a chat payload that was already stored through the REST API.

    Delivery is direct to ``receiverId`` only. Stored team messages reach
    ``team_<id>`` from the chat app once they commit.
    """

    if not isinstance(data, dict):
        await sio.emit("error", {"message": "Error sending message"}, to=sid)
        return
    receiver_id = _coerce_user_id(data.get("receiverId"))
    if receiver_id is None:
        await sio.emit("error", {"message": "Error sending message"}, to=sid)
        return
    await gateway.route_direct(receiver_id, NEW_MESSAGE, data)


@sio.on("sendNotification")
async def send_notification(sid: str, data: Any):
    if not isinstance(data, dict):
        return
    user_id = _coerce_user_id(data.get("userId"))
    if user_id is None:
        return
    await gateway.route_direct(user_id, NEW_NOTIFICATION, data.get("notification"))


@sio.event
async def typing(sid: str, data: Any):
    if not isinstance(data, dict):
        return
    receiver_id = _coerce_user_id(data.get("receiverId"))
    if receiver_id is None:
        return
    from_user_id = await _session_user_id(sid)
    await gateway.relay_typing(
        from_user_id,
        receiver_id,
        is_typing=bool(data.get("isTyping")),
    )


@sio.event
async def disconnect(sid: str, *args: Any):
    await gateway.unregister(sid)
