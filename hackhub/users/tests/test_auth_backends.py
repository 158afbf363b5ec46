import pytest

from hackhub.users.auth_backends import EmailBackend
from tests.factories import TEST_PASSWORD
from tests.factories import create_user

pytestmark = pytest.mark.django_db


class TestEmailBackend:
    def setup_method(self):
        self.backend = EmailBackend()
        self.user = create_user("Ada", email="ada@example.com")

    def test_authenticate_with_email(self):
        user = self.backend.authenticate(
            None, username="ada@example.com", password=TEST_PASSWORD
        )
        assert user == self.user

    def test_email_is_case_insensitive(self):
        user = self.backend.authenticate(
            None, email="  ADA@Example.com ", password=TEST_PASSWORD
        )
        assert user == self.user

    def test_wrong_password(self):
        user = self.backend.authenticate(
            None, username="ada@example.com", password="wrong"  # noqa: S106
        )
        assert user is None

    def test_unknown_email(self):
        user = self.backend.authenticate(
            None, username="nobody@example.com", password=TEST_PASSWORD
        )
        assert user is None

    def test_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        user = self.backend.authenticate(
            None, username="ada@example.com", password=TEST_PASSWORD
        )
        assert user is None
