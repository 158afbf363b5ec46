"""Process-local presence registry.

Maps a user id to the Socket.IO session id (``sid``) of their current live
connection. Only one connection per user is tracked: a later registration
replaces the earlier one. Nothing here is persisted; entries are lost when the
process restarts.

The registry is touched from the Socket.IO event loop and from Django's sync
threads (REST views publishing through ``async_to_sync``), so every accessor
holds the lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from dataclasses import field


@dataclass
class PresenceRegistry:
    _by_user: dict[int, str] = field(default_factory=dict)
    _by_sid: dict[str, int] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def bind(self, user_id: int, sid: str) -> str | None:
        """Bind ``user_id`` to ``sid``; return the sid it replaced, if any."""

        user_id = int(user_id)
        with self._lock:
            previous_user = self._by_sid.get(sid)
            if previous_user is not None and previous_user != user_id:
                # The connection re-identified as somebody else.
                if self._by_user.get(previous_user) == sid:
                    del self._by_user[previous_user]
            replaced = self._by_user.get(user_id)
            self._by_user[user_id] = sid
            self._by_sid[sid] = user_id
        return replaced if replaced != sid else None

    def release(self, sid: str) -> int | None:
        """Forget ``sid``.

        The user's presence entry is dropped only when ``sid`` is still their
        current binding. Returns the user id whose entry was removed.
        """

        with self._lock:
            user_id = self._by_sid.pop(sid, None)
            if user_id is None:
                return None
            if self._by_user.get(user_id) != sid:
                return None
            del self._by_user[user_id]
            return user_id

    def lookup(self, user_id: int) -> str | None:
        with self._lock:
            return self._by_user.get(int(user_id))

    def user_for(self, sid: str) -> int | None:
        with self._lock:
            return self._by_sid.get(sid)

    def online_users(self) -> set[int]:
        with self._lock:
            return set(self._by_user)

    def clear(self) -> None:
        with self._lock:
            self._by_user.clear()
            self._by_sid.clear()

    def __contains__(self, user_id: object) -> bool:
        if not isinstance(user_id, int):
            return False
        with self._lock:
            return user_id in self._by_user

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_user)
