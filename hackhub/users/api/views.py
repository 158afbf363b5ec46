from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import inline_serializer
from rest_framework import serializers
from rest_framework.decorators import action
from rest_framework.parsers import FormParser
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from hackhub.core.exceptions import UpstreamServiceError
from hackhub.events.api.serializers import EventListSerializer
from hackhub.events.models import Event
from hackhub.teams.api.serializers import TeamSerializer
from hackhub.teams.models import Team
from hackhub.users import services
from hackhub.users.models import User

from .serializers import AvatarUploadSerializer
from .serializers import ProfileUpdateSerializer
from .serializers import UserSerializer


def _profile_queryset():
    return User.objects.prefetch_related("participated_events", "teams__event")


class UserViewSet(GenericViewSet):
    """The authenticated user's own profile and personal lists."""

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return _profile_queryset().filter(pk=self.request.user.pk)

    def _profile(self, request):
        user = _profile_queryset().get(pk=request.user.pk)
        return Response(UserSerializer(user, context={"request": request}).data)

    @extend_schema(
        methods=["PUT", "PATCH"],
        request=ProfileUpdateSerializer,
        responses=UserSerializer,
    )
    @action(detail=False, methods=["get", "put", "patch"])
    def profile(self, request):
        if request.method == "GET":
            return self._profile(request)

        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        services.update_profile(request.user, serializer.validated_data)
        return self._profile(request)

    @extend_schema(
        request={"multipart/form-data": AvatarUploadSerializer},
        responses=inline_serializer(
            "AvatarUploaded", {"profile_picture": serializers.CharField()}
        ),
    )
    @action(
        detail=False,
        methods=["post"],
        url_path="upload-avatar",
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload_avatar(self, request):
        serializer = AvatarUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.update_avatar(request.user, serializer.validated_data["image"])
        if not result.success:
            msg = "Error uploading avatar"
            raise UpstreamServiceError(msg)
        return Response({"profile_picture": result.url})

    @extend_schema(responses=EventListSerializer(many=True))
    @action(detail=False, methods=["get"], url_path="my-events")
    def my_events(self, request):
        events = (
            Event.objects.filter(participants=request.user)
            .select_related("organizer")
            .prefetch_related("participants", "teams")
        )
        data = EventListSerializer(events, many=True, context={"request": request}).data
        return Response(data)

    @extend_schema(responses=TeamSerializer(many=True))
    @action(detail=False, methods=["get"], url_path="my-teams")
    def my_teams(self, request):
        teams = (
            Team.objects.filter(members=request.user)
            .select_related("leader", "event")
            .prefetch_related("members")
        )
        data = TeamSerializer(teams, many=True, context={"request": request}).data
        return Response(data)

