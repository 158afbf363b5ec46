from rest_framework import serializers

from hackhub.events.models import Event
from hackhub.teams.models import Team
from hackhub.users.api.serializers import UserSummarySerializer


class TeamEventSerializer(serializers.ModelSerializer[Event]):
    class Meta:
        model = Event
        fields = ["id", "title", "start_date", "end_date"]
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer[Team]):
    leader = UserSummarySerializer(read_only=True)
    members = UserSummarySerializer(many=True, read_only=True)
    event = TeamEventSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    state = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = [
            "id",
            "name",
            "leader",
            "members",
            "event",
            "max_members",
            "member_count",
            "state",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_member_count(self, obj: Team) -> int:
        return len(obj.members.all())

    def get_state(self, obj: Team) -> str:
        full = len(obj.members.all()) >= obj.max_members
        return Team.State.FULL if full else Team.State.OPEN


class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    event = serializers.IntegerField(min_value=1)
    max_members = serializers.IntegerField(min_value=1, required=False)


class TeamUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    max_members = serializers.IntegerField(min_value=1, required=False)


class TeamInviteSerializer(serializers.Serializer):
    email = serializers.EmailField()


class DetailSerializer(serializers.Serializer):
    detail = serializers.CharField()
