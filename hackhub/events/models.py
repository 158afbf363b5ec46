from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Event(models.Model):
    class Status(models.TextChoices):
        UPCOMING = "upcoming", _("Upcoming")
        ONGOING = "ongoing", _("Ongoing")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    title = models.CharField(max_length=200)
    description = models.TextField()
    image = models.CharField(max_length=500, blank=True, default="")
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    registration_deadline = models.DateTimeField(null=True, blank=True)
    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organized_events",
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="participated_events",
        blank=True,
    )
    max_team_size = models.PositiveIntegerField(
        default=4, validators=[MinValueValidator(1)]
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.UPCOMING
    )
    venue = models.CharField(max_length=255, default="Online")
    prizes = models.TextField(blank=True, default="")
    rules = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date", "-id"]
        indexes = [
            models.Index(fields=["status", "start_date"], name="event_status_start_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def clean(self):
        super().clean()
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": _("End date cannot be before start date")})
        if (
            self.registration_deadline
            and self.end_date
            and self.registration_deadline > self.end_date
        ):
            raise ValidationError(
                {
                    "registration_deadline": _(
                        "Registration deadline cannot be after the end date"
                    )
                }
            )

    def is_participant(self, user) -> bool:
        if not getattr(user, "is_authenticated", False):
            return False
        return self.participants.filter(pk=user.pk).exists()
