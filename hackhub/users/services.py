from __future__ import annotations

import logging
from typing import Any

from allauth.account.models import EmailAddress
from allauth.account.models import EmailConfirmationHMAC
from django.conf import settings
from django.db import transaction

from hackhub.audit.utils import log_action
from hackhub.core.exceptions import Conflict
from hackhub.core.tasks import enqueue_on_commit
from hackhub.integrations.storage import UploadResult
from hackhub.integrations.storage import upload_image

from .models import User
from .tasks import send_verification_email

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "Email already in use"


def _email_taken(email: str, *, exclude_pk: int | None = None) -> bool:
    qs = User.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


def _reset_email_address(user: User, *, verified: bool) -> EmailAddress:
    """Make ``user.email`` the only allauth address on the account."""

    EmailAddress.objects.filter(user=user).exclude(email__iexact=user.email).delete()
    address, _ = EmailAddress.objects.update_or_create(
        user=user,
        email=user.email,
        defaults={"primary": True, "verified": verified},
    )
    return address


def signup(*, name: str, email: str, password: str, role: str) -> User:
    if _email_taken(email):
        raise Conflict(EMAIL_IN_USE)

    verification_required = settings.ACCOUNT_EMAIL_VERIFICATION_REQUIRED
    with transaction.atomic():
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=role,
            is_email_verified=not verification_required,
        )
        _reset_email_address(user, verified=not verification_required)
        log_action("user_signed_up", actor=user, target=user)
        if verification_required:
            enqueue_on_commit(send_verification_email, user.pk)
    return user


def update_profile(user: User, data: dict[str, Any]) -> User:
    """Apply profile changes.

    A new email must be unused; it resets the verified flag and triggers a
    fresh verification email.
    """

    data = dict(data)
    email = data.pop("email", None)
    email_changed = False
    if email and email != user.email:
        if _email_taken(email, exclude_pk=user.pk):
            raise Conflict(EMAIL_IN_USE)
        old_email = user.email
        user.email = email
        user.is_email_verified = False
        email_changed = True

    for field, value in data.items():
        setattr(user, field, value)

    with transaction.atomic():
        user.save()
        if email_changed:
            _reset_email_address(user, verified=False)
            log_action(
                "user_email_changed",
                actor=user,
                target=user,
                before={"email": old_email},
                after={"email": user.email},
            )
            enqueue_on_commit(send_verification_email, user.pk)
    return user


def confirm_email(key: str, request) -> User | None:
    """Confirm the address behind an allauth confirmation key.

    Returns None for unknown, expired or superseded keys. A key only counts
    while its address is still the account email.
    """

    confirmation = EmailConfirmationHMAC.from_key(key)
    if confirmation is None:
        return None
    address = confirmation.email_address
    user = User.objects.get(pk=address.user_id)
    if address.email.lower() != user.email.lower():
        return None

    confirmation.confirm(request)
    if not EmailAddress.objects.filter(pk=address.pk, verified=True).exists():
        return None
    if not user.is_email_verified:
        user.is_email_verified = True
        user.save(update_fields=["is_email_verified", "updated_at"])
        log_action("user_email_verified", actor=user, target=user)
    return user


def update_avatar(user: User, image) -> UploadResult:
    result = upload_image(image, settings.AVATAR_FOLDER)
    if result.success:
        user.profile_picture = result.url
        user.save(update_fields=["profile_picture", "updated_at"])
    return result
