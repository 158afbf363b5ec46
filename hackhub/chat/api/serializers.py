from rest_framework import serializers

from hackhub.chat.models import Message
from hackhub.users.api.serializers import UserSummarySerializer


class MessageSerializer(serializers.ModelSerializer[Message]):
    sender = UserSummarySerializer(read_only=True)
    chat_id = serializers.IntegerField(source="team_id", read_only=True)

    class Meta:
        model = Message
        fields = ["id", "chat_id", "sender", "content", "is_read", "created_at"]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """``chatId`` is the team id; ``team`` is accepted as an alias."""

    chatId = serializers.IntegerField(min_value=1, required=False)  # noqa: N815
    team = serializers.IntegerField(min_value=1, required=False)
    content = serializers.CharField(max_length=5000, trim_whitespace=True)

    def validate(self, attrs):
        team_id = attrs.get("chatId") or attrs.get("team")
        if team_id is None:
            raise serializers.ValidationError({"chatId": ["This field is required."]})
        return {"team_id": team_id, "content": attrs["content"]}


class ConversationSerializer(serializers.Serializer):
    chat_id = serializers.IntegerField()
    name = serializers.CharField()
    event = serializers.DictField()
    last_message = MessageSerializer(allow_null=True)
    unread_count = serializers.IntegerField()
