from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.db import transaction

if TYPE_CHECKING:  # import for type checking only
    from celery import Task

logger = logging.getLogger(__name__)


def enqueue_on_commit(task: Task, *args: Any, **kwargs: Any) -> None:
    """Queue ``task`` once the surrounding transaction commits.

    A broker outage is logged; the committed data is left as is.
    """

    def _send():
        try:
            task.delay(*args, **kwargs)
        except Exception:
            logger.exception("Could not enqueue task %s", task.name)

    transaction.on_commit(_send)
