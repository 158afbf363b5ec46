from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

# Messages are append-only; the read flag is the one mutable column.
IMMUTABLE_FIELDS = ("sender_id", "team_id", "content")


class Message(models.Model):
    """A chat message posted to a team channel. Only ``is_read`` ever changes."""

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    team = models.ForeignKey(
        "teams.Team",
        on_delete=models.CASCADE,
        related_name="messages",
    )
    content = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["team", "created_at"], name="message_team_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.sender} @ {self.team_id}: {self.content[:40]}"

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
                        msg = f"Messages are append-only: {', '.join(changed)}"
                        raise ValidationError(msg)
                kwargs["update_fields"] = ["is_read"]
        super().save(*args, **kwargs)
