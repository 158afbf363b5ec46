import pytest
from asgiref.sync import async_to_sync
from rest_framework_simplejwt.tokens import AccessToken
from socketio.exceptions import ConnectionRefusedError as SioConnectionRefusedError

from hackhub.realtime import socketio as handlers
from hackhub.realtime.gateway import NEW_MESSAGE
from hackhub.realtime.gateway import NEW_NOTIFICATION
from hackhub.realtime.gateway import USER_TYPING
from hackhub.realtime.socketio import gateway
from tests.factories import create_user


@pytest.fixture
def sio(monkeypatch, realtime_server):
    monkeypatch.setattr(handlers, "sio", realtime_server)
    return realtime_server


def _connected(sio, sid: str, user_id: int) -> None:
    sio.sessions[sid] = {"user_id": user_id, "name": f"user{user_id}"}
    async_to_sync(gateway.register)(user_id, sid)


class TestExtractToken:
    def test_from_asgi_query_string(self):
        environ = {"asgi.scope": {"query_string": b"token=abc&x=1"}}
        assert handlers._extract_token(environ, None) == "abc"  # noqa: SLF001

    def test_from_wsgi_query_string(self):
        environ = {"QUERY_STRING": "token=xyz"}
        assert handlers._extract_token(environ, None) == "xyz"  # noqa: SLF001

    def test_from_auth_payload(self):
        assert handlers._extract_token({}, {"token": "t0k"}) == "t0k"  # noqa: SLF001

    def test_missing(self):
        assert handlers._extract_token({}, None) is None  # noqa: SLF001


class TestConnect:
    def test_rejects_missing_token(self, sio):
        with pytest.raises(SioConnectionRefusedError):
            async_to_sync(handlers.connect)("sid-1", {}, None)
        assert len(gateway.registry) == 0

    def test_rejects_invalid_token(self, sio):
        environ = {"asgi.scope": {"query_string": b"token=not-a-jwt"}}
        with pytest.raises(SioConnectionRefusedError):
            async_to_sync(handlers.connect)("sid-1", environ, None)
        assert len(gateway.registry) == 0

    @pytest.mark.django_db(transaction=True)
    def test_valid_token_registers_user(self, sio):
        user = create_user("Socket")
        token = str(AccessToken.for_user(user))

        async_to_sync(handlers.connect)("sid-1", {}, {"token": token})

        assert sio.sessions["sid-1"]["user_id"] == user.pk
        assert gateway.registry.lookup(user.pk) == "sid-1"
        assert "sid-1" in sio.rooms[f"user_{user.pk}"]


class TestClientEvents:
    def test_join_rebinds_authenticated_user(self, sio):
        sio.sessions["sid-2"] = {"user_id": 7}
        async_to_sync(handlers.join)("sid-2", {"userId": 7})
        assert gateway.registry.lookup(7) == "sid-2"

    def test_join_as_another_user_is_refused(self, sio):
        sio.sessions["sid-2"] = {"user_id": 7}
        async_to_sync(handlers.join)("sid-2", "8")
        assert gateway.registry.lookup(8) is None
        assert sio.events("error")[0][2] == "sid-2"

    def test_join_room(self, sio):
        async_to_sync(handlers.join_room)("sid-3", "team_4")
        assert "sid-3" in sio.rooms["team_4"]

    def test_join_room_requires_a_name(self, sio):
        async_to_sync(handlers.join_room)("sid-3", None)
        assert sio.events("error") == [
            ("error", {"message": "Room name required"}, "sid-3"),
        ]

    def test_send_message_never_reaches_team_room(self, sio):
        sio.sessions["sid-1"] = {"user_id": 1}
        async_to_sync(handlers.join_room)("sid-7", "team_4")
        payload = {"chatId": 4, "content": "hello", "sender": {"id": 3}}

        async_to_sync(handlers.send_message)("sid-1", payload)

        assert sio.events(NEW_MESSAGE) == []
        assert sio.events("error") == [
            ("error", {"message": "Error sending message"}, "sid-1"),
        ]

    def test_send_message_direct(self, sio):
        _connected(sio, "sid-9", 9)
        payload = {"receiverId": 9, "content": "psst"}
        async_to_sync(handlers.send_message)("sid-1", payload)
        assert sio.events(NEW_MESSAGE) == [(NEW_MESSAGE, payload, "sid-9")]

    def test_send_message_direct_to_offline_user(self, sio):
        async_to_sync(handlers.send_message)("sid-1", {"receiverId": 9})
        assert sio.emitted == []

    def test_send_message_without_target_reports_error(self, sio):
        async_to_sync(handlers.send_message)("sid-1", {"content": "lost"})
        assert sio.events("error")[0][2] == "sid-1"

    def test_send_notification(self, sio):
        _connected(sio, "sid-9", 9)
        note = {"title": "Hi"}
        async_to_sync(handlers.send_notification)(
            "sid-1", {"userId": 9, "notification": note}
        )
        assert sio.events(NEW_NOTIFICATION) == [(NEW_NOTIFICATION, note, "sid-9")]

    def test_typing(self, sio):
        sio.sessions["sid-1"] = {"user_id": 1}
        _connected(sio, "sid-2", 2)
        async_to_sync(handlers.typing)("sid-1", {"receiverId": 2, "isTyping": True})
        assert sio.events(USER_TYPING) == [
            (USER_TYPING, {"userId": 1, "isTyping": True}, "sid-2"),
        ]

    def test_disconnect_unregisters(self, sio):
        _connected(sio, "sid-5", 5)
        async_to_sync(handlers.disconnect)("sid-5")
        assert gateway.registry.lookup(5) is None
