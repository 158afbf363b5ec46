from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from hackhub.core.views import NotFoundMessageMixin
from hackhub.teams import services
from hackhub.teams.models import Team
from hackhub.users.api.permissions import IsEmailVerified

from .serializers import DetailSerializer
from .serializers import TeamCreateSerializer
from .serializers import TeamInviteSerializer
from .serializers import TeamSerializer
from .serializers import TeamUpdateSerializer


class TeamViewSet(
    NotFoundMessageMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    """Teams and their membership transitions.

    Leader-only actions (update, delete, invite) are checked in
    ``hackhub.teams.services`` so the rules hold for every caller.
    """

    serializer_class = TeamSerializer
    not_found_message = "Team not found"
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["event"]

    def get_queryset(self):
        return Team.objects.select_related("leader", "event").prefetch_related(
            "members"
        )

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        if self.action in ("create", "join"):
            return [IsAuthenticated(), IsEmailVerified()]
        return [IsAuthenticated()]

    def _render(self, team: Team, status_code=status.HTTP_200_OK):
        team = self.get_queryset().get(pk=team.pk)
        data = TeamSerializer(team, context=self.get_serializer_context()).data
        return Response(data, status=status_code)

    @extend_schema(request=TeamCreateSerializer, responses={201: TeamSerializer})
    def create(self, request, *args, **kwargs):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        team = services.create_team(
            leader=request.user,
            event_id=data["event"],
            name=data["name"],
            max_members=data.get("max_members"),
        )
        return self._render(team, status.HTTP_201_CREATED)

    @extend_schema(request=TeamUpdateSerializer, responses=TeamSerializer)
    def update(self, request, *args, **kwargs):
        team = self.get_object()
        serializer = TeamUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        team = services.update_team(team, request.user, **serializer.validated_data)
        return self._render(team)

    @extend_schema(request=TeamUpdateSerializer, responses=TeamSerializer)
    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        services.delete_team(self.get_object(), request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses=TeamSerializer)
    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        team = services.join_team(self.get_object(), request.user)
        return self._render(team)

    @extend_schema(request=None, responses=DetailSerializer)
    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        services.leave_team(self.get_object(), request.user)
        return Response({"detail": "Left team successfully"})

    @extend_schema(request=TeamInviteSerializer, responses=DetailSerializer)
    @action(detail=True, methods=["post"])
    def invite(self, request, pk=None):
        team = self.get_object()
        serializer = TeamInviteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.invite_to_team(team, request.user, serializer.validated_data["email"])
        return Response({"detail": "Invitation sent successfully"})
