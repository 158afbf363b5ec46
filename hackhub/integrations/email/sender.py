from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)

TEMPLATE_DIR = "emails"


def send_templated_email(
    to: str | list[str],
    template: str,
    context: dict[str, Any],
    subject: str,
    reply_to: str | None = None,
) -> bool:
    """Render ``emails/<template>.{txt,html}`` and send it.

    Returns False (and logs) on any failure to render or deliver.
    """

    recipients = [to] if isinstance(to, str) else list(to)
    if not recipients:
        return False

    ctx = {"frontend_url": settings.FRONTEND_URL, **context}
    try:
        text_body = render_to_string(f"{TEMPLATE_DIR}/{template}.txt", ctx)
        html_body = render_to_string(f"{TEMPLATE_DIR}/{template}.html", ctx)
        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=recipients,
            reply_to=[reply_to] if reply_to else None,
        )
        message.attach_alternative(html_body, "text/html")
        message.send(fail_silently=False)
    except Exception:
        logger.exception("Email %r to %s failed", template, recipients)
        return False

    logger.info("Email %r sent to %s", template, recipients)
    return True
