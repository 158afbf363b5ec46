from allauth.account.models import EmailAddress
from allauth.account.models import EmailConfirmationHMAC
from celery import shared_task
from django.conf import settings

from hackhub.integrations.email import send_templated_email
from hackhub.users.models import User


@shared_task(name="users.send_verification_email")
def send_verification_email(user_id: int) -> bool:
    """Email a verification link to the user's current address."""

    user = User.objects.filter(pk=user_id).first()
    if user is None or user.is_email_verified:
        return False
    address, _ = EmailAddress.objects.get_or_create(
        user=user, email=user.email, defaults={"primary": True}
    )
    key = EmailConfirmationHMAC(address).key
    return send_templated_email(
        user.email,
        "verify_email",
        {
            "name": user.name,
            "verification_url": f"{settings.FRONTEND_URL}/verify-email/{key}",
            "expires_hours": settings.ACCOUNT_EMAIL_CONFIRMATION_EXPIRE_DAYS * 24,
        },
        subject="Verify Your Email - HackHub",
    )
