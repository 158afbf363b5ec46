"""
WSGI entry point for hackhub.

Serves the REST API and admin only. The Socket.IO gateway needs the ASGI
application in ``config.asgi``.
"""

import os
import sys
from pathlib import Path

from django.core.wsgi import get_wsgi_application

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "hackhub"))

if "DJANGO_SETTINGS_MODULE" not in os.environ:
    build_env = os.environ.get("BUILD_ENV", "production").lower()
    os.environ["DJANGO_SETTINGS_MODULE"] = (
        "config.settings.local" if build_env == "local" else "config.settings.production"
    )

application = get_wsgi_application()
