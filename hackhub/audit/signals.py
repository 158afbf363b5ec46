import logging

from django.contrib.auth.signals import user_logged_in
from django.contrib.auth.signals import user_login_failed
from django.dispatch import receiver

from .utils import log_action

logger = logging.getLogger(__name__)


def _client(request) -> str:
    if request is None:
        return "ip=- ua=-"
    ip = request.META.get("REMOTE_ADDR", "-")
    ua = request.META.get("HTTP_USER_AGENT", "-")
    return f"ip={ip} ua={ua}"


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    log_action("login", actor=user, message=_client(request))


@receiver(user_login_failed)
def on_user_login_failed(sender, credentials, request=None, **kwargs):
    # The failed request is rolled back, so this goes to the log only.
    email = credentials.get("email") or credentials.get("username") or "-"
    logger.warning("Login failed for %s %s", email, _client(request))
