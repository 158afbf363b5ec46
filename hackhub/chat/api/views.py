"""Team chat over REST.

Routes (team id doubles as the chat id):
- POST /messages/                 store + broadcast to ``team_<id>``
- GET  /messages/conversations/   the caller's team channels
- GET  /messages/<chatId>/        channel history, oldest first
- GET  /messages/event/<eventId>/ history of the caller's teams in an event
- PUT  /messages/<id>/read/       mark one message read
"""

from django.db.models import Count
from django.db.models import Q
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from hackhub.chat.models import Message
from hackhub.core.exceptions import MembershipError
from hackhub.events.models import Event
from hackhub.teams.models import Team

from .serializers import ConversationSerializer
from .serializers import MessageCreateSerializer
from .serializers import MessageSerializer

NOT_A_MEMBER = "You are not a member of this team"


def _last_activity(row):
    last = row["last_message"]
    return last.created_at if last is not None else row["created_at"]


def _member_team(user, team_id) -> Team:
    team = Team.objects.filter(pk=team_id).first()
    if team is None:
        msg = "Team not found"
        raise NotFound(msg)
    if not team.members.filter(pk=user.pk).exists():
        raise MembershipError(NOT_A_MEMBER)
    return team


class MessageViewSet(GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = MessageSerializer
    pagination_class = None

    def get_queryset(self):
        return Message.objects.select_related("sender")

    @extend_schema(request=MessageCreateSerializer, responses={201: MessageSerializer})
    def create(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = _member_team(request.user, serializer.validated_data["team_id"])
        message = Message.objects.create(
            sender=request.user,
            team=team,
            content=serializer.validated_data["content"],
        )
        return Response(
            MessageSerializer(message, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses=MessageSerializer(many=True))
    def retrieve(self, request, pk=None):
        """History of the channel ``pk`` (a team id), oldest first."""

        team = _member_team(request.user, pk)
        messages = self.get_queryset().filter(team=team).order_by("created_at", "id")
        return Response(
            MessageSerializer(messages, many=True, context={"request": request}).data
        )

    @extend_schema(responses=MessageSerializer(many=True))
    @action(detail=False, methods=["get"], url_path=r"event/(?P<event_id>\d+)")
    def event_history(self, request, event_id=None):
        if not Event.objects.filter(pk=event_id).exists():
            msg = "Event not found"
            raise NotFound(msg)
        messages = (
            self.get_queryset()
            .filter(team__event_id=event_id, team__members=request.user)
            .order_by("created_at", "id")
        )
        return Response(
            MessageSerializer(messages, many=True, context={"request": request}).data
        )

    @extend_schema(responses=ConversationSerializer(many=True))
    @action(detail=False, methods=["get"])
    def conversations(self, request):
        user = request.user
        teams = (
            Team.objects.filter(members=user)
            .select_related("event")
            .annotate(
                unread_count=Count(
                    "messages",
                    filter=Q(messages__is_read=False) & ~Q(messages__sender=user),
                )
            )
        )
        rows = []
        for team in teams:
            last = (
                Message.objects.filter(team=team)
                .select_related("sender")
                .order_by("-created_at", "-id")
                .first()
            )
            rows.append(
                {
                    "chat_id": team.pk,
                    "name": team.name,
                    "event": {"id": team.event_id, "title": team.event.title},
                    "last_message": last,
                    "unread_count": team.unread_count,
                    "created_at": team.created_at,
                }
            )
        # Most recent activity first; silent channels rank by creation time.
        rows.sort(key=_last_activity, reverse=True)
        return Response(
            ConversationSerializer(rows, many=True, context={"request": request}).data
        )

    @extend_schema(request=None, responses=MessageSerializer)
    @action(detail=True, methods=["put"], url_path="read")
    def read(self, request, pk=None):
        message = self.get_queryset().filter(pk=pk).first()
        if message is None:
            msg = "Message not found"
            raise NotFound(msg)
        _member_team(request.user, message.team_id)
        if not message.is_read:
            message.is_read = True
            message.save(update_fields=["is_read"])
        return Response(MessageSerializer(message, context={"request": request}).data)
