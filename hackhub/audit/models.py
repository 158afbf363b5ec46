from django.conf import settings
from django.db import models


class AuditLog(models.Model):
    """One domain action: who did it, to which record, and what changed."""

    action = models.CharField(max_length=100)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_entries",
    )
    message = models.TextField(blank=True)
    # ``app_label.ModelName`` of the target, e.g. ``teams.Team``
    model_name = models.CharField(max_length=150, blank=True)
    record_id = models.BigIntegerField(null=True, blank=True)
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["model_name", "record_id"], name="audit_target_idx"),
        ]

    def __str__(self) -> str:
        who = self.actor_id or "system"
        target = f" {self.model_name}#{self.record_id}" if self.model_name else ""
        return f"[{self.created_at:%Y-%m-%d %H:%M:%S}] {who}: {self.action}{target}"
