from allauth.account.utils import user_pk_to_url_str
from dj_rest_auth.serializers import PasswordResetSerializer as BasePasswordResetSerializer
from django.conf import settings
from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from hackhub.events.models import Event
from hackhub.teams.models import Team
from hackhub.users.models import User


class UserSummarySerializer(serializers.ModelSerializer[User]):
    """Public projection of a user embedded in other resources."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "profile_picture"]
        read_only_fields = fields


class _EventBriefSerializer(serializers.ModelSerializer[Event]):
    class Meta:
        model = Event
        fields = ["id", "title", "start_date", "end_date", "image", "status"]
        read_only_fields = fields


class _TeamBriefSerializer(serializers.ModelSerializer[Team]):
    event = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = ["id", "name", "event"]
        read_only_fields = fields

    def get_event(self, obj: Team) -> dict:
        return {"id": obj.event_id, "title": obj.event.title}


class UserSerializer(serializers.ModelSerializer[User]):
    participated_events = _EventBriefSerializer(many=True, read_only=True)
    teams = _TeamBriefSerializer(many=True, read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "is_email_verified",
            "profile_picture",
            "bio",
            "skills",
            "github_link",
            "linkedin_link",
            "participated_events",
            "teams",
            "created_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    email = serializers.EmailField(required=False)
    bio = serializers.CharField(required=False, allow_blank=True)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    github_link = serializers.CharField(
        max_length=255, required=False, allow_blank=True
    )
    linkedin_link = serializers.CharField(
        max_length=255, required=False, allow_blank=True
    )

    def validate_email(self, value: str) -> str:
        return value.strip().lower()


class SignupSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    role = serializers.ChoiceField(
        choices=User.Role.choices, required=False, default=User.Role.PARTICIPANT
    )

    def validate_email(self, value: str) -> str:
        return value.strip().lower()

    def validate(self, attrs):
        candidate = User(name=attrs["name"], email=attrs["email"])
        try:
            password_validation.validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)}) from exc
        return attrs


class VerifyEmailSerializer(serializers.Serializer):
    token = serializers.CharField()


class AvatarUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()


def frontend_password_reset_url(request, user, temp_key) -> str:
    uid = user_pk_to_url_str(user)
    return f"{settings.FRONTEND_URL}/reset-password/{uid}/{temp_key}"


class PasswordResetSerializer(BasePasswordResetSerializer):
    """Reset links open the SPA, which posts ``uid`` and ``token`` back."""

    def get_email_options(self):
        return {"url_generator": frontend_password_reset_url}
