from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Team(models.Model):
    class State(models.TextChoices):
        OPEN = "open", _("Open")
        FULL = "full", _("Full")

    name = models.CharField(max_length=100)
    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="led_teams",
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="teams",
        blank=True,
    )
    # Deleting an event deletes its teams.
    event = models.ForeignKey(
        "events.Event",
        on_delete=models.CASCADE,
        related_name="teams",
    )
    max_members = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        if self.max_members is None and self.event_id:
            self.max_members = self.event.max_team_size
        super().save(*args, **kwargs)
        # The leader is always a member, however the team was built.
        self.members.add(self.leader_id)

    @property
    def member_count(self) -> int:
        return self.members.count()

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.max_members

    @property
    def state(self) -> str:
        return self.State.FULL if self.is_full else self.State.OPEN

    def is_member(self, user) -> bool:
        if not getattr(user, "is_authenticated", False):
            return False
        return self.members.filter(pk=user.pk).exists()

    def is_leader(self, user) -> bool:
        return bool(getattr(user, "pk", None)) and self.leader_id == user.pk
