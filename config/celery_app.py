"""Celery application for hackhub background jobs (transactional email)."""

import os

from celery import Celery
from celery.signals import setup_logging

# pytest and manage.py set DJANGO_SETTINGS_MODULE themselves.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

app = Celery("hackhub")

# Every ``CELERY_*`` Django setting configures the app.
app.config_from_object("django.conf:settings", namespace="CELERY")


@setup_logging.connect
def config_loggers(*args, **kwargs):
    from logging.config import dictConfig  # noqa: PLC0415

    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)


# Picks up ``tasks.py`` in every installed hackhub app.
app.autodiscover_tasks()
