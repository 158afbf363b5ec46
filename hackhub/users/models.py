from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _

from .managers import UserManager


class User(AbstractUser):
    """
    Default custom user model for hackhub.
    Email is the login identifier; there is no username.
    """

    class Role(models.TextChoices):
        PARTICIPANT = "participant", _("Participant")
        ORGANIZER = "organizer", _("Organizer")

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Name of User"), max_length=255)
    email = EmailField(_("email address"), unique=True)
    username = None  # type: ignore[assignment]
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]

    role = CharField(max_length=20, choices=Role.choices, default=Role.PARTICIPANT)
    is_email_verified = models.BooleanField(default=True)

    # Public profile
    profile_picture = models.CharField(max_length=500, blank=True, default="")
    bio = models.TextField(blank=True, default="")
    skills = models.JSONField(default=list, blank=True)
    github_link = models.CharField(max_length=255, blank=True, default="")
    linkedin_link = models.CharField(max_length=255, blank=True, default="")

    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return self.name or self.email

    def save(self, *args, **kwargs):
        # Emails are case-insensitive identifiers
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def is_organizer(self) -> bool:
        return self.role == self.Role.ORGANIZER
