from unittest import mock

import pytest
from django.core import mail
from rest_framework import status

from hackhub.notifications.models import Notification
from hackhub.teams.models import Team
from tests.factories import create_event
from tests.factories import create_team
from tests.factories import create_user

pytestmark = pytest.mark.django_db

BASE = "/api/v1/teams/"


def _member_ids(team: Team) -> set[int]:
    return set(team.members.values_list("id", flat=True))


class TestCreate:
    def test_leader_becomes_first_member(self, api_client, user):
        event = create_event(max_team_size=3)
        api_client.force_authenticate(user)

        r = api_client.post(BASE, {"name": "Byte Me", "event": event.id}, format="json")

        assert r.status_code == status.HTTP_201_CREATED, r.content
        assert r.data["leader"]["id"] == user.id
        assert [m["id"] for m in r.data["members"]] == [user.id]
        assert r.data["max_members"] == 3
        assert r.data["member_count"] == 1
        assert r.data["state"] == Team.State.OPEN
        assert r.data["event"]["id"] == event.id

    def test_explicit_capacity(self, api_client, user):
        event = create_event()
        api_client.force_authenticate(user)

        r = api_client.post(
            BASE,
            {"name": "Duo", "event": event.id, "max_members": 2},
            format="json",
        )

        assert r.data["max_members"] == 2

    def test_unknown_event(self, api_client, user):
        api_client.force_authenticate(user)

        r = api_client.post(BASE, {"name": "Lost", "event": 999999}, format="json")

        assert r.status_code == status.HTTP_404_NOT_FOUND
        assert r.data["detail"] == "Event not found"

    def test_unverified_user_cannot_create(self, api_client):
        unverified = create_user("Fresh", verified=False)
        event = create_event()
        api_client.force_authenticate(unverified)

        r = api_client.post(BASE, {"name": "Nope", "event": event.id}, format="json")

        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.data["detail"] == "Please verify your email address first"

    def test_name_is_required(self, api_client, user):
        event = create_event()
        api_client.force_authenticate(user)

        r = api_client.post(BASE, {"event": event.id}, format="json")

        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert "name" in r.data


class TestBrowse:
    def test_list_filtered_by_event(self, api_client):
        event = create_event()
        mine = create_team(event=event)
        create_team()

        r = api_client.get(BASE, {"event": event.id})

        assert r.status_code == status.HTTP_200_OK
        assert [t["id"] for t in r.data] == [mine.id]

    def test_retrieve_unknown_team(self, api_client):
        r = api_client.get(f"{BASE}999999/")
        assert r.status_code == status.HTTP_404_NOT_FOUND
        assert r.data["detail"] == "Team not found"


class TestMembershipLifecycle:
    def test_join_fill_leave_and_delete(self, api_client):
        alice = create_user("Alice")
        bob = create_user("Bob")
        carol = create_user("Carol")
        event = create_event(max_team_size=2)
        team = create_team(event=event, leader=alice, name="Pair")
        url = f"{BASE}{team.id}/"

        api_client.force_authenticate(bob)
        r = api_client.post(f"{url}join/")
        assert r.status_code == status.HTTP_200_OK
        assert r.data["state"] == Team.State.FULL
        assert _member_ids(team) == {alice.id, bob.id}
        joined = Notification.objects.get(
            recipient=alice, notification_type=Notification.Type.TEAM_JOIN
        )
        assert joined.message == "Bob joined your team Pair"
        assert joined.related_object_id == team.id

        r = api_client.post(f"{url}join/")
        assert r.status_code == status.HTTP_409_CONFLICT
        assert r.data["detail"] == "You are already a member of this team"

        api_client.force_authenticate(carol)
        r = api_client.post(f"{url}join/")
        assert r.status_code == status.HTTP_409_CONFLICT
        assert r.data["detail"] == "Team is full"
        assert team.members.count() == 2

        api_client.force_authenticate(alice)
        r = api_client.post(f"{url}leave/")
        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert r.data["detail"].startswith("Team leader cannot leave")

        api_client.force_authenticate(bob)
        r = api_client.post(f"{url}leave/")
        assert r.status_code == status.HTTP_200_OK
        assert r.data == {"detail": "Left team successfully"}
        assert _member_ids(team) == {alice.id}

        r = api_client.delete(url)
        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.data["detail"] == "Only team leader can delete the team"

        api_client.force_authenticate(alice)
        r = api_client.delete(url)
        assert r.status_code == status.HTTP_204_NO_CONTENT
        assert not Team.objects.filter(pk=team.pk).exists()
        assert event.teams.count() == 0
        assert alice.teams.count() == 0

    def test_leave_when_not_a_member(self, api_client, user):
        team = create_team()
        api_client.force_authenticate(user)

        r = api_client.post(f"{BASE}{team.id}/leave/")

        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert r.data["detail"] == "You are not a member of this team"

    def test_join_unknown_team(self, api_client, user):
        api_client.force_authenticate(user)
        r = api_client.post(f"{BASE}999999/join/")
        assert r.status_code == status.HTTP_404_NOT_FOUND
        assert r.data["detail"] == "Team not found"

    def test_join_requires_authentication(self, api_client):
        team = create_team()
        r = api_client.post(f"{BASE}{team.id}/join/")
        assert r.status_code == status.HTTP_401_UNAUTHORIZED


class TestUpdate:
    def test_leader_renames_and_resizes(self, api_client, user):
        team = create_team(leader=user, max_members=4)
        api_client.force_authenticate(user)

        r = api_client.patch(
            f"{BASE}{team.id}/", {"name": "Renamed", "max_members": 5}, format="json"
        )

        assert r.status_code == status.HTTP_200_OK
        assert r.data["name"] == "Renamed"
        assert r.data["max_members"] == 5

    def test_resize_below_member_count_is_rejected(self, api_client, user):
        team = create_team(leader=user, max_members=3)
        team.members.add(create_user())
        api_client.force_authenticate(user)

        r = api_client.patch(f"{BASE}{team.id}/", {"max_members": 1}, format="json")

        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert "max_members" in r.data
        team.refresh_from_db()
        assert team.max_members == 3

    def test_non_leader_cannot_update(self, api_client, user):
        team = create_team()
        team.members.add(user)
        api_client.force_authenticate(user)

        r = api_client.put(f"{BASE}{team.id}/", {"name": "Mine now"}, format="json")

        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.data["detail"] == "Only team leader can update the team"


class TestInvite:
    def test_invite_notifies_and_emails(
        self, api_client, user, django_capture_on_commit_callbacks
    ):
        team = create_team(leader=user, name="Rockets")
        invitee = create_user("Dana")
        api_client.force_authenticate(user)

        with django_capture_on_commit_callbacks(execute=True):
            r = api_client.post(
                f"{BASE}{team.id}/invite/", {"email": invitee.email}, format="json"
            )

        assert r.status_code == status.HTTP_200_OK
        assert r.data == {"detail": "Invitation sent successfully"}
        note = Notification.objects.get(recipient=invitee)
        assert note.notification_type == Notification.Type.TEAM_INVITE
        assert note.related_object_id == team.id
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == [invitee.email]
        assert mail.outbox[0].subject == "Team Invitation - Rockets"
        # Invitations do not add members.
        assert not team.members.filter(pk=invitee.pk).exists()

    def test_unknown_email(self, api_client, user):
        team = create_team(leader=user)
        api_client.force_authenticate(user)

        r = api_client.post(
            f"{BASE}{team.id}/invite/", {"email": "ghost@example.com"}, format="json"
        )

        assert r.status_code == status.HTTP_404_NOT_FOUND
        assert r.data["detail"] == "User not found with this email"

    def test_existing_member(self, api_client, user):
        team = create_team(leader=user)
        member = create_user()
        team.members.add(member)
        api_client.force_authenticate(user)

        r = api_client.post(
            f"{BASE}{team.id}/invite/", {"email": member.email}, format="json"
        )

        assert r.status_code == status.HTTP_409_CONFLICT
        assert r.data["detail"] == "User is already a member of this team"

    def test_only_leader_invites(self, api_client, user):
        team = create_team()
        team.members.add(user)
        api_client.force_authenticate(user)

        r = api_client.post(
            f"{BASE}{team.id}/invite/", {"email": create_user().email}, format="json"
        )

        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.data["detail"] == "Only team leader can invite members"

    def test_broker_failure_keeps_notification(
        self, api_client, user, django_capture_on_commit_callbacks
    ):
        team = create_team(leader=user)
        invitee = create_user()
        api_client.force_authenticate(user)

        with (
            mock.patch("hackhub.teams.services.send_team_invite_email") as task,
            django_capture_on_commit_callbacks(execute=True),
        ):
            task.delay.side_effect = ConnectionError("broker down")
            r = api_client.post(
                f"{BASE}{team.id}/invite/", {"email": invitee.email}, format="json"
            )

        assert r.status_code == status.HTTP_200_OK
        task.delay.assert_called_once()
        assert Notification.objects.filter(recipient=invitee).exists()
        assert mail.outbox == []
