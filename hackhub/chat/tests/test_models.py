import pytest
from django.core.exceptions import ValidationError

from hackhub.chat.models import Message
from tests.factories import create_team

pytestmark = pytest.mark.django_db


def test_only_read_flag_can_change(user):
    team = create_team(leader=user)
    message = Message.objects.create(team=team, sender=user, content="original")

    message.content = "rewritten"
    with pytest.raises(ValidationError):
        message.save()

    message.refresh_from_db()
    assert message.content == "original"

    message.is_read = True
    message.save()
    message.refresh_from_db()
    assert message.is_read is True
    assert message.content == "original"


def test_read_flag_update_ignores_other_dirty_fields(user):
    team = create_team(leader=user)
    message = Message.objects.create(team=team, sender=user, content="original")

    message.content = "rewritten"
    message.is_read = True
    message.save(update_fields=["is_read"])

    message.refresh_from_db()
    assert message.is_read is True
    assert message.content == "original"
