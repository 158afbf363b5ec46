from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ChatConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hackhub.chat"
    verbose_name = _("Chat")

    def ready(self):
        import hackhub.chat.signals  # noqa: F401, PLC0415
