import pytest
from asgiref.sync import async_to_sync
from django.core.exceptions import ValidationError

from hackhub.notifications.models import Notification
from hackhub.notifications.utils import notify
from hackhub.realtime.gateway import NEW_NOTIFICATION
from hackhub.realtime.socketio import gateway
from tests.factories import create_event

pytestmark = pytest.mark.django_db


def test_notify_records_related_entity(user):
    event = create_event()
    note = notify(
        user,
        notification_type=Notification.Type.OTHER,
        title="Hi",
        message="There",
        related=event,
    )
    assert note.related_object_id == event.pk
    assert note.related_model == Notification.RelatedModel.EVENT


def test_only_read_flag_can_change(user):
    note = notify(
        user, notification_type=Notification.Type.OTHER, title="T", message="M"
    )
    note.title = "Changed"
    with pytest.raises(ValidationError):
        note.save()

    note.refresh_from_db()
    note.is_read = True
    note.save()
    note.refresh_from_db()
    assert note.is_read is True
    assert note.title == "T"


def test_new_notification_is_pushed_after_commit(
    user, realtime_server, django_capture_on_commit_callbacks
):
    async_to_sync(gateway.register)(user.pk, "sid-user")

    with django_capture_on_commit_callbacks(execute=True):
        note = notify(
            user,
            notification_type=Notification.Type.OTHER,
            title="Ping",
            message="Pong",
        )

    pushed = realtime_server.events(NEW_NOTIFICATION)
    assert len(pushed) == 1
    _, payload, to = pushed[0]
    assert to == "sid-user"
    assert payload["id"] == note.id
    assert payload["title"] == "Ping"
    assert payload["isRead"] is False


def test_offline_recipient_gets_no_push(
    user, realtime_server, django_capture_on_commit_callbacks
):
    with django_capture_on_commit_callbacks(execute=True):
        notify(
            user, notification_type=Notification.Type.OTHER, title="T", message="M"
        )

    assert realtime_server.emitted == []
    assert Notification.objects.filter(recipient=user).count() == 1
