from __future__ import annotations

from typing import Any

from rest_framework import serializers

from hackhub.events.models import Event
from hackhub.teams.models import Team
from hackhub.users.api.serializers import UserSummarySerializer


class ImagePayloadField(serializers.Field):
    """An uploaded file, a base64 data URL or an http(s) URL."""

    default_error_messages = {
        "invalid": "Provide an image file, a data URL or an image URL.",
    }

    def to_internal_value(self, data: Any) -> Any:
        if isinstance(data, str):
            return data.strip()
        if hasattr(data, "read"):
            return data
        self.fail("invalid")
        return None

    def to_representation(self, value: Any) -> str:
        return value or ""


class EventTeamSerializer(serializers.ModelSerializer[Team]):
    leader = UserSummarySerializer(read_only=True)
    members = UserSummarySerializer(many=True, read_only=True)

    class Meta:
        model = Team
        fields = ["id", "name", "leader", "members", "max_members"]
        read_only_fields = fields


class EventListSerializer(serializers.ModelSerializer[Event]):
    organizer = UserSummarySerializer(read_only=True)
    participant_count = serializers.SerializerMethodField()
    team_count = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "description",
            "image",
            "start_date",
            "end_date",
            "registration_deadline",
            "organizer",
            "max_team_size",
            "status",
            "venue",
            "participant_count",
            "team_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_participant_count(self, obj: Event) -> int:
        return len(obj.participants.all())

    def get_team_count(self, obj: Event) -> int:
        return len(obj.teams.all())


class EventDetailSerializer(serializers.ModelSerializer[Event]):
    organizer = UserSummarySerializer(read_only=True)
    participants = UserSummarySerializer(many=True, read_only=True)
    teams = EventTeamSerializer(many=True, read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "description",
            "image",
            "start_date",
            "end_date",
            "registration_deadline",
            "organizer",
            "participants",
            "teams",
            "max_team_size",
            "status",
            "venue",
            "prizes",
            "rules",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class EventWriteSerializer(serializers.ModelSerializer[Event]):
    image = ImagePayloadField(required=False, allow_null=True)

    class Meta:
        model = Event
        fields = [
            "title",
            "description",
            "image",
            "start_date",
            "end_date",
            "registration_deadline",
            "max_team_size",
            "status",
            "venue",
            "prizes",
            "rules",
        ]

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        instance = self.instance
        start = attrs.get("start_date", getattr(instance, "start_date", None))
        end = attrs.get("end_date", getattr(instance, "end_date", None))
        deadline = attrs.get(
            "registration_deadline", getattr(instance, "registration_deadline", None)
        )
        if start and end and end < start:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before start date"}
            )
        if deadline and end and deadline > end:
            raise serializers.ValidationError(
                {
                    "registration_deadline": (
                        "Registration deadline cannot be after the end date"
                    )
                }
            )
        return attrs
