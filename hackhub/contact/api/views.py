import logging

from django.conf import settings
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import inline_serializer
from rest_framework import serializers
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from hackhub.core.exceptions import UpstreamServiceError
from hackhub.integrations.email import send_templated_email

from .serializers import ContactSerializer

logger = logging.getLogger(__name__)


class ContactView(APIView):
    """Forward a contact-form submission to the site's inbox."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(
        request=ContactSerializer,
        responses=inline_serializer("ContactSent", {"detail": serializers.CharField()}),
    )
    def post(self, request):
        serializer = ContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        sent = send_templated_email(
            settings.CONTACT_EMAIL,
            "contact_message",
            data,
            subject=f"Contact Form: Message from {data['name']}",
            reply_to=data["email"],
        )
        if not sent:
            msg = "Error sending message"
            raise UpstreamServiceError(msg)
        logger.info("Contact message forwarded for %s", data["email"])
        return Response({"detail": "Message sent successfully"})
