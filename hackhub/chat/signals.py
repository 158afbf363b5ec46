from django.db.models.signals import post_save
from django.db.transaction import on_commit
from django.dispatch import receiver

from hackhub.realtime.events.messages import publish_message_created

from .models import Message


@receiver(post_save, sender=Message)
def broadcast_new_message(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return
    on_commit(lambda: publish_message_created(instance))
