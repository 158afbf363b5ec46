from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class TeamsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hackhub.teams"
    verbose_name = _("Teams")

    def ready(self):
        import hackhub.teams.signals  # noqa: F401, PLC0415
