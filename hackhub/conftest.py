import pytest
from rest_framework.test import APIClient

from hackhub.realtime.socketio import gateway
from tests.factories import create_organizer
from tests.factories import create_user
from tests.fakes import RecordingServer


@pytest.fixture(autouse=True)
def _media_storage(settings, tmpdir) -> None:
    settings.MEDIA_ROOT = tmpdir.strpath


@pytest.fixture(autouse=True)
def realtime_server(monkeypatch):
    """Route every gateway emit into an in-memory recorder."""

    server = RecordingServer()
    monkeypatch.setattr(gateway, "server", server)
    gateway.registry.clear()
    yield server
    gateway.registry.clear()


@pytest.fixture
def user(db):
    return create_user("Participant")


@pytest.fixture
def organizer(db):
    return create_organizer("Organizer")


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()
