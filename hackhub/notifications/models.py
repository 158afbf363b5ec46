from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

# Everything except the read flag is fixed once the row exists.
IMMUTABLE_FIELDS = (
    "recipient_id",
    "notification_type",
    "title",
    "message",
    "related_object_id",
    "related_model",
)


class Notification(models.Model):
    class Type(models.TextChoices):
        TEAM_JOIN = "team_join", _("Team Join")
        TEAM_INVITE = "team_invite", _("Team Invite")
        REGISTRATION = "registration", _("Registration")
        EVENT_UPDATE = "event_update", _("Event Update")
        MESSAGE = "message", _("Message")
        OTHER = "other", _("Other")

    class RelatedModel(models.TextChoices):
        NONE = "", _("None")
        EVENT = "Event", _("Event")
        TEAM = "Team", _("Team")
        MESSAGE = "Message", _("Message")

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications"
    )
    notification_type = models.CharField(
        max_length=50, choices=Type.choices, default=Type.OTHER
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    related_object_id = models.BigIntegerField(null=True, blank=True)
    related_model = models.CharField(
        max_length=20, choices=RelatedModel.choices, blank=True, default=""
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="notif_recipient_read_idx"),
        ]

    def __str__(self):
        return f"{self.title} - {self.recipient}"

    def save(self, *args, **kwargs):
        if not self._state.adding and self.pk is not None:
            update_fields = kwargs.get("update_fields")
            if update_fields is None or set(update_fields) - {"is_read"}:
                stored = (
                    type(self)
                    .objects.filter(pk=self.pk)
                    .values(*IMMUTABLE_FIELDS)
                    .first()
                )
                if stored is not None:
                    changed = [
                        name
                        for name in IMMUTABLE_FIELDS
                        if stored[name] != getattr(self, name)
                    ]
                    if changed:
                        msg = f"Notifications are immutable: {', '.join(changed)}"
                        raise ValidationError(msg)
                kwargs["update_fields"] = ["is_read"]
        super().save(*args, **kwargs)
