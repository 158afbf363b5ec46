from django.db.models.signals import post_save
from django.db.transaction import on_commit
from django.dispatch import receiver

from hackhub.realtime.events.notifications import publish_notification_created

from .models import Notification


@receiver(post_save, sender=Notification)
def push_new_notification(sender, instance, created, raw=False, **kwargs):
    # Fixture loads (raw) are not pushed.
    if not created or raw:
        return
    on_commit(lambda: publish_notification_created(instance))
