from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from hackhub.chat.api.views import MessageViewSet
from hackhub.contact.api.views import ContactView
from hackhub.events.api.views import EventViewSet
from hackhub.notifications.api.views import NotificationViewSet
from hackhub.teams.api.views import TeamViewSet
from hackhub.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet, basename="user")
router.register("events", EventViewSet, basename="event")
router.register("teams", TeamViewSet, basename="team")
router.register("messages", MessageViewSet, basename="message")
router.register("notifications", NotificationViewSet, basename="notifications")


app_name = "api"
urlpatterns = [
    path("auth/", include("hackhub.users.api.auth_urls")),
    path("contact/", ContactView.as_view(), name="contact"),
    *router.urls,
]
