import os

# Settings are read once at import time
os.environ.setdefault("TEST_MODE", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from cago.dependencies import get_meeting_repository
from cago.main import app
from cago.services.completion import CannedCompletionClient, get_completion_client
from cago.services.meeting_repository import InMemoryMeetingRepository
from cago.utils import metrics


@pytest.fixture
def canned_client():
    return CannedCompletionClient()


@pytest.fixture
def repository():
    return InMemoryMeetingRepository(max_meetings=10)


@pytest.fixture
def client(canned_client, repository):
    app.dependency_overrides[get_completion_client] = lambda: canned_client
    app.dependency_overrides[get_meeting_repository] = lambda: repository
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def direction_payload():
    return {
        "direction": "data-insights",
        "directionLabel": "Working with data & insights",
        "background": "Three years in retail operations, building weekly inventory reports in Excel.",
        "confidence": "drawn",
    }
