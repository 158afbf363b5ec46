from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework import status

from hackhub.chat.models import Message
from hackhub.realtime.gateway import NEW_MESSAGE
from tests.factories import create_event
from tests.factories import create_team
from tests.factories import create_user

pytestmark = pytest.mark.django_db

BASE = "/api/v1/messages/"


def _say(team, sender, content, *, minutes_ago=0):
    message = Message.objects.create(team=team, sender=sender, content=content)
    if minutes_ago:
        stamp = timezone.now() - timedelta(minutes=minutes_ago)
        Message.objects.filter(pk=message.pk).update(created_at=stamp)
        message.refresh_from_db()
    return message


class TestSend:
    def test_member_sends_and_room_receives(
        self, api_client, user, realtime_server, django_capture_on_commit_callbacks
    ):
        team = create_team(leader=user)
        api_client.force_authenticate(user)

        with django_capture_on_commit_callbacks(execute=True):
            r = api_client.post(
                BASE, {"chatId": team.id, "content": "  hello team  "}, format="json"
            )

        assert r.status_code == status.HTTP_201_CREATED, r.content
        assert r.data["content"] == "hello team"
        assert r.data["chat_id"] == team.id
        assert r.data["sender"]["id"] == user.id

        broadcast = realtime_server.events(NEW_MESSAGE)
        assert len(broadcast) == 1
        _, payload, room = broadcast[0]
        assert room == f"team_{team.id}"
        assert payload["id"] == r.data["id"]
        assert payload["sender"]["name"] == user.name

    def test_team_alias(self, api_client, user):
        team = create_team(leader=user)
        api_client.force_authenticate(user)

        r = api_client.post(BASE, {"team": team.id, "content": "hi"}, format="json")

        assert r.status_code == status.HTTP_201_CREATED

    def test_non_member_is_rejected(self, api_client, user):
        team = create_team()
        api_client.force_authenticate(user)

        r = api_client.post(BASE, {"chatId": team.id, "content": "hi"}, format="json")

        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert r.data["detail"] == "You are not a member of this team"
        assert not Message.objects.exists()

    def test_unknown_team(self, api_client, user):
        api_client.force_authenticate(user)

        r = api_client.post(BASE, {"chatId": 999999, "content": "hi"}, format="json")

        assert r.status_code == status.HTTP_404_NOT_FOUND

    def test_missing_chat_id(self, api_client, user):
        api_client.force_authenticate(user)

        r = api_client.post(BASE, {"content": "hi"}, format="json")

        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert "chatId" in r.data

    def test_requires_authentication(self, api_client):
        r = api_client.post(BASE, {"chatId": 1, "content": "hi"}, format="json")
        assert r.status_code == status.HTTP_401_UNAUTHORIZED


class TestHistory:
    def test_oldest_first(self, api_client, user):
        team = create_team(leader=user)
        other = create_user()
        team.members.add(other)
        newer = _say(team, other, "second", minutes_ago=1)
        older = _say(team, user, "first", minutes_ago=5)
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}{team.id}/")

        assert r.status_code == status.HTTP_200_OK
        assert [m["id"] for m in r.data] == [older.id, newer.id]

    def test_non_member_cannot_read_history(self, api_client, user):
        team = create_team()
        _say(team, team.leader, "secret")
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}{team.id}/")

        assert r.status_code == status.HTTP_400_BAD_REQUEST


class TestEventHistory:
    def test_merges_own_teams_in_the_event_oldest_first(self, api_client, user):
        event = create_event()
        mine = create_team(event=event, leader=user)
        joined = create_team(event=event)
        joined.members.add(user)
        foreign = create_team(event=event)
        elsewhere = create_team(leader=user)
        late = _say(joined, joined.leader, "late", minutes_ago=1)
        early = _say(mine, user, "early", minutes_ago=9)
        _say(foreign, foreign.leader, "not for you")
        _say(elsewhere, user, "other event")
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}event/{event.id}/")

        assert r.status_code == status.HTTP_200_OK
        assert [m["id"] for m in r.data] == [early.id, late.id]
        assert {m["chat_id"] for m in r.data} == {mine.id, joined.id}

    def test_no_team_in_event(self, api_client, user):
        event = create_event()
        team = create_team(event=event)
        _say(team, team.leader, "hi")
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}event/{event.id}/")

        assert r.status_code == status.HTTP_200_OK
        assert r.data == []

    def test_unknown_event(self, api_client, user):
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}event/999999/")

        assert r.status_code == status.HTTP_404_NOT_FOUND
        assert r.data["detail"] == "Event not found"


class TestConversations:
    def test_most_recent_first_with_unread_counts(self, api_client, user):
        quiet = create_team(leader=user, name="Quiet")
        busy = create_team(name="Busy")
        busy.members.add(user)
        _say(quiet, user, "anyone?", minutes_ago=30)
        _say(busy, busy.leader, "standup", minutes_ago=10)
        latest = _say(busy, busy.leader, "ship it", minutes_ago=2)
        _say(busy, user, "on it", minutes_ago=20)
        create_team(name="Not mine")
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}conversations/")

        assert r.status_code == status.HTTP_200_OK
        assert [c["name"] for c in r.data] == ["Busy", "Quiet"]
        assert r.data[0]["chat_id"] == busy.id
        assert r.data[0]["last_message"]["id"] == latest.id
        assert r.data[0]["unread_count"] == 2
        assert r.data[1]["unread_count"] == 0
        assert r.data[1]["event"]["id"] == quiet.event_id

    def test_team_without_messages(self, api_client, user):
        create_team(leader=user)
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}conversations/")

        assert r.data[0]["last_message"] is None
        assert r.data[0]["unread_count"] == 0


class TestRead:
    def test_member_marks_read(self, api_client, user):
        team = create_team(leader=user)
        message = _say(team, team.leader, "hi")
        api_client.force_authenticate(user)

        r = api_client.put(f"{BASE}{message.id}/read/")

        assert r.status_code == status.HTTP_200_OK
        assert r.data["is_read"] is True
        message.refresh_from_db()
        assert message.is_read is True

    def test_unknown_message(self, api_client, user):
        api_client.force_authenticate(user)

        r = api_client.put(f"{BASE}999999/read/")

        assert r.status_code == status.HTTP_404_NOT_FOUND
        assert r.data["detail"] == "Message not found"

    def test_outsider_cannot_mark_read(self, api_client, user):
        team = create_team()
        message = _say(team, team.leader, "hi")
        api_client.force_authenticate(user)

        r = api_client.put(f"{BASE}{message.id}/read/")

        assert r.status_code == status.HTTP_400_BAD_REQUEST
        message.refresh_from_db()
        assert message.is_read is False
