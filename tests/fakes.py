from __future__ import annotations

from collections import defaultdict
from typing import Any


class RecordingServer:
    """In-memory stand-in for ``socketio.AsyncServer``.

    Records every emit and room subscription, and keeps per-sid sessions so
    the Socket.IO handlers can run without a live server.
    """

    def __init__(self) -> None:
        self.emitted: list[tuple[str, Any, str | None]] = []
        self.rooms: dict[str, set[str]] = defaultdict(set)
        self.sessions: dict[str, dict[str, Any]] = {}

    async def enter_room(self, sid: str, room: str, namespace: str | None = None):
        self.rooms[room].add(sid)

    async def emit(self, event: str, data: Any = None, *, to=None, **kwargs: Any):
        self.emitted.append((event, data, to))

    async def get_session(self, sid: str, namespace: str | None = None):
        return self.sessions.get(sid, {})

    async def save_session(self, sid: str, session: dict, namespace=None):
        self.sessions[sid] = session

    def events(self, name: str) -> list[tuple[str, Any, str | None]]:
        return [e for e in self.emitted if e[0] == name]
