import io
from unittest import mock

import pytest
from allauth.account.models import EmailAddress
from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework import status

from hackhub.integrations.storage import UploadResult
from tests.factories import create_event
from tests.factories import create_team
from tests.factories import create_user

pytestmark = pytest.mark.django_db

BASE = "/api/v1/users/"


def _png_upload(name="avatar.png") -> SimpleUploadedFile:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color="blue").save(buf, format="PNG")
    return SimpleUploadedFile(name, buf.getvalue(), content_type="image/png")


class TestProfile:
    def test_requires_authentication(self, api_client):
        r = api_client.get(f"{BASE}profile/")
        assert r.status_code == status.HTTP_401_UNAUTHORIZED

    def test_profile_includes_events_and_teams(self, api_client, user):
        event = create_event(title="Hack the Planet")
        event.participants.add(user)
        team = create_team(event=event, leader=user, name="Zero Cool")
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}profile/")

        assert r.status_code == status.HTTP_200_OK
        assert r.data["email"] == user.email
        assert "password" not in r.data
        assert [e["title"] for e in r.data["participated_events"]] == [
            "Hack the Planet"
        ]
        assert r.data["teams"] == [
            {
                "id": team.id,
                "name": "Zero Cool",
                "event": {"id": event.id, "title": "Hack the Planet"},
            }
        ]

    def test_update_profile_fields(self, api_client, user):
        api_client.force_authenticate(user)

        r = api_client.patch(
            f"{BASE}profile/",
            {
                "name": "Renamed",
                "bio": "Backend tinkerer",
                "skills": ["python", "django"],
                "github_link": "https://github.com/renamed",
            },
            format="json",
        )

        assert r.status_code == status.HTTP_200_OK
        assert r.data["name"] == "Renamed"
        assert r.data["skills"] == ["python", "django"]
        user.refresh_from_db()
        assert user.bio == "Backend tinkerer"

    def test_email_in_use_keeps_original(self, api_client, user):
        other = create_user("Other")
        original = user.email
        api_client.force_authenticate(user)

        r = api_client.put(f"{BASE}profile/", {"email": other.email}, format="json")

        assert r.status_code == status.HTTP_409_CONFLICT
        assert r.data["detail"] == "Email already in use"
        user.refresh_from_db()
        assert user.email == original

    def test_email_change_requires_reverification(
        self, api_client, user, django_capture_on_commit_callbacks
    ):
        api_client.force_authenticate(user)

        with django_capture_on_commit_callbacks(execute=True):
            r = api_client.patch(
                f"{BASE}profile/", {"email": "New.Address@Example.com"}, format="json"
            )

        assert r.status_code == status.HTTP_200_OK
        assert r.data["email"] == "new.address@example.com"
        assert r.data["is_email_verified"] is False
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["new.address@example.com"]
        assert list(
            EmailAddress.objects.filter(user=user).values_list("email", "verified")
        ) == [("new.address@example.com", False)]


class TestAvatar:
    def test_upload(self, api_client, user):
        api_client.force_authenticate(user)

        r = api_client.post(
            f"{BASE}upload-avatar/", {"image": _png_upload()}, format="multipart"
        )

        assert r.status_code == status.HTTP_200_OK, r.content
        assert "/avatars/" in r.data["profile_picture"]
        user.refresh_from_db()
        assert user.profile_picture == r.data["profile_picture"]

    def test_not_an_image(self, api_client, user):
        api_client.force_authenticate(user)
        bogus = SimpleUploadedFile("a.png", b"plain text", content_type="image/png")

        r = api_client.post(f"{BASE}upload-avatar/", {"image": bogus}, format="multipart")

        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert "image" in r.data

    def test_storage_failure(self, api_client, user):
        api_client.force_authenticate(user)

        with mock.patch(
            "hackhub.users.services.upload_image",
            return_value=UploadResult(success=False, error="bucket unavailable"),
        ):
            r = api_client.post(
                f"{BASE}upload-avatar/", {"image": _png_upload()}, format="multipart"
            )

        assert r.status_code == status.HTTP_502_BAD_GATEWAY
        assert r.data["detail"] == "Error uploading avatar"
        user.refresh_from_db()
        assert user.profile_picture == ""


class TestPersonalLists:
    def test_my_events(self, api_client, user):
        mine = create_event(title="Mine")
        mine.participants.add(user)
        create_event(title="Not mine")
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}my-events/")

        assert r.status_code == status.HTTP_200_OK
        assert [e["title"] for e in r.data] == ["Mine"]
        assert r.data[0]["participant_count"] == 1

    def test_my_teams(self, api_client, user):
        led = create_team(leader=user, name="Led")
        joined = create_team(name="Joined")
        joined.members.add(user)
        create_team(name="Stranger")
        api_client.force_authenticate(user)

        r = api_client.get(f"{BASE}my-teams/")

        assert r.status_code == status.HTTP_200_OK
        assert {t["id"] for t in r.data} == {led.id, joined.id}
