"""Events API: public browsing, organizer CRUD and participant registration."""

from django.db.models import Prefetch
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from hackhub.core.views import NotFoundMessageMixin
from hackhub.events import services
from hackhub.events.models import Event
from hackhub.teams.models import Team
from hackhub.users.api.permissions import IsOrganizer
from hackhub.users.api.serializers import UserSummarySerializer

from .filters import EventFilter
from .permissions import IsEventOrganizer
from .serializers import EventDetailSerializer
from .serializers import EventListSerializer
from .serializers import EventWriteSerializer


def _detail_queryset():
    teams = Team.objects.select_related("leader").prefetch_related("members")
    return Event.objects.select_related("organizer").prefetch_related(
        "participants", Prefetch("teams", queryset=teams)
    )


class EventViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    not_found_message = "Event not found"
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = EventFilter
    search_fields = ["title", "description"]

    def get_queryset(self):
        if self.action == "retrieve":
            return _detail_queryset()
        qs = Event.objects.select_related("organizer")
        if self.action == "participants":
            return qs.prefetch_related("participants")
        return qs.prefetch_related("participants", "teams")

    def get_serializer_class(self):
        if self.action in ("create", "update", "partial_update"):
            return EventWriteSerializer
        if self.action == "retrieve":
            return EventDetailSerializer
        return EventListSerializer

    def get_permissions(self):
        if self.action in ("list", "retrieve", "participants"):
            return [AllowAny()]
        if self.action == "create":
            return [IsAuthenticated(), IsOrganizer()]
        if self.action in ("update", "partial_update", "destroy"):
            return [IsAuthenticated(), IsEventOrganizer()]
        return [IsAuthenticated()]

    def _detail(self, event):
        event = _detail_queryset().get(pk=event.pk)
        return EventDetailSerializer(event, context=self.get_serializer_context()).data

    @extend_schema(request=EventWriteSerializer, responses={201: EventDetailSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = services.create_event(
            organizer=request.user, data=serializer.validated_data
        )
        return Response(self._detail(event), status=status.HTTP_201_CREATED)

    @extend_schema(request=EventWriteSerializer, responses=EventDetailSerializer)
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        event = self.get_object()
        serializer = self.get_serializer(event, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        event = services.update_event(
            event, actor=request.user, data=serializer.validated_data
        )
        return Response(self._detail(event))

    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        services.delete_event(event, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: EventDetailSerializer})
    @action(detail=True, methods=["post"])
    def register(self, request, pk=None):
        event = services.register_participant(self.get_object(), request.user)
        return Response(self._detail(event))

    @extend_schema(request=None, responses={200: EventDetailSerializer})
    @action(detail=True, methods=["post"])
    def unregister(self, request, pk=None):
        event = services.unregister_participant(self.get_object(), request.user)
        return Response(self._detail(event))

    @extend_schema(responses=UserSummarySerializer(many=True))
    @action(detail=True, methods=["get"])
    def participants(self, request, pk=None):
        event = self.get_object()
        data = UserSummarySerializer(
            event.participants.all(), many=True, context={"request": request}
        ).data
        return Response(data)
