from io import StringIO

import pytest
from django.core.management import CommandError
from django.core.management import call_command

from hackhub.audit.models import AuditLog
from hackhub.users.models import User
from tests.factories import create_user

pytestmark = pytest.mark.django_db


def test_promote_organizer():
    user = create_user("Lin", email="lin@example.com")
    out = StringIO()

    call_command("promote_organizer", "LIN@example.com", stdout=out)

    user.refresh_from_db()
    assert user.role == User.Role.ORGANIZER
    assert "lin@example.com is now organizer" in out.getvalue()
    assert AuditLog.objects.filter(
        action="user_role_changed", record_id=user.pk
    ).exists()


def test_promote_is_idempotent():
    create_user("Lin", email="lin@example.com", role="organizer")
    out = StringIO()

    call_command("promote_organizer", "lin@example.com", stdout=out)

    assert "already organizer" in out.getvalue()


def test_demote():
    user = create_user("Lin", email="lin@example.com", role="organizer")

    call_command("promote_organizer", "lin@example.com", "--demote", stdout=StringIO())

    user.refresh_from_db()
    assert user.role == User.Role.PARTICIPANT


def test_unknown_user():
    with pytest.raises(CommandError):
        call_command("promote_organizer", "ghost@example.com")
