"""Image uploads through Django's storage API.

Accepts an uploaded file, a ``data:image/...;base64,`` URL or an already
hosted http(s) URL. The result carries the public URL of the stored file.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from PIL import Image
from PIL import UnidentifiedImageError

logger = logging.getLogger(__name__)

DATA_URL_RE = re.compile(r"^data:image/(?P<ext>[a-zA-Z0-9.+-]+);base64,(?P<data>.+)$", re.S)
ALLOWED_FORMATS = {"jpeg", "png", "gif", "webp"}


@dataclass(frozen=True)
class UploadResult:
    success: bool
    url: str = ""
    error: str = ""


def _read_payload(payload: Any) -> bytes:
    if isinstance(payload, str):
        match = DATA_URL_RE.match(payload.strip())
        if match is None:
            msg = "Unsupported image payload"
            raise ValueError(msg)
        try:
            return base64.b64decode(match.group("data"), validate=True)
        except binascii.Error as exc:
            msg = "Invalid base64 image data"
            raise ValueError(msg) from exc
    if hasattr(payload, "read"):
        if hasattr(payload, "seek"):
            payload.seek(0)
        return payload.read()
    msg = "Unsupported image payload"
    raise ValueError(msg)


def _image_format(raw: bytes) -> str:
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()
            fmt = (img.format or "").lower()
    except (UnidentifiedImageError, OSError) as exc:
        msg = "Upload a valid image"
        raise ValueError(msg) from exc
    if fmt not in ALLOWED_FORMATS:
        msg = f"Unsupported image format: {fmt or 'unknown'}"
        raise ValueError(msg)
    return fmt


def upload_image(payload: Any, folder: str) -> UploadResult:
    """Store ``payload`` under ``folder`` and return its public URL.

    Never raises; failures come back as ``UploadResult(success=False)``.
    """

    if isinstance(payload, str) and payload.startswith(("http://", "https://")):
        return UploadResult(success=True, url=payload)

    try:
        raw = _read_payload(payload)
        fmt = _image_format(raw)
        ext = "jpg" if fmt == "jpeg" else fmt
        name = f"{folder.strip('/')}/{uuid.uuid4().hex}.{ext}"
        saved = default_storage.save(name, ContentFile(raw))
        url = default_storage.url(saved)
    except Exception as exc:  # noqa: BLE001 - reported through the result
        logger.warning("Image upload to %s failed: %s", folder, exc)
        return UploadResult(success=False, error=str(exc))

    return UploadResult(success=True, url=url)
