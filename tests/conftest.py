"""
Pytest configuration and fixtures.
"""
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from tymout.api.dependencies import get_feedback_repository, get_service_client
from tymout.clients.service_client import ServiceClient
from tymout.config import ServiceRegistry
from tymout.main import app
from tymout.repositories.memory import InMemoryFeedbackRepository

SERVICE_URLS = {
    "user": "http://user.test/api",
    "event": "http://event.test/api",
    "request": "http://request.test/api",
    "notification": "http://notification.test/api",
}


class FakeDownstream:
    """
    Canned responses for sibling services, keyed by (service, path).
    Paths are relative to the service base URL, e.g. ("event", "/events/city").
    """

    def __init__(self) -> None:
        self._routes: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        service: str,
        path: str,
        body: Any = None,
        status: int = 200,
        error: Optional[type] = None,
    ) -> None:
        self._routes[(service, path)] = {"body": body, "status": status, "error": error}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        service = request.url.host.split(".")[0]
        path = request.url.path[len("/api"):]

        route = self._routes.get((service, path))
        if route is None:
            return httpx.Response(404, json={"success": False, "error": "no route"})
        if route["error"] is not None:
            raise route["error"]("simulated failure", request=request)
        return httpx.Response(route["status"], json=route["body"])

    def calls(self, service: str, path: str) -> List[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.url.host.startswith(f"{service}.")
            and request.url.path == f"/api{path}"
        ]


@pytest.fixture
def downstream():
    """Fixture for stubbed sibling services."""
    return FakeDownstream()


@pytest.fixture
def service_client(downstream):
    """ServiceClient whose HTTP traffic goes to `downstream`."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(downstream.handler))
    return ServiceClient(
        registry=ServiceRegistry(SERVICE_URLS),
        timeout_sec=30.0,
        http_client=http_client,
    )


@pytest.fixture
def feedback_repo():
    """Fixture for an empty in-memory feedback repository."""
    return InMemoryFeedbackRepository()


@pytest.fixture
def test_client(service_client, feedback_repo):
    """
    TestClient fixture with dependency overrides.
    Uses stubbed downstream services and in-memory storage for isolation.
    """
    app.dependency_overrides[get_service_client] = lambda: service_client
    app.dependency_overrides[get_feedback_repository] = lambda: feedback_repo

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_event():
    """Fixture for a standard event document."""
    return {
        "_id": "e1",
        "title": "Sunset Jazz",
        "category": "music",
        "tags": ["jazz", "outdoor"],
        "interests": ["music", "outdoors"],
        "createdAt": "2025-06-01T12:00:00Z",
        "stats": {"views": 100, "likes": 10, "comments": 5, "shares": 2, "memberCount": 0},
    }


@pytest.fixture
def sample_circle():
    """Fixture for a standard circle document."""
    return {
        "_id": "c1",
        "title": "Weekend Hikers",
        "category": "outdoors",
        "tags": ["hiking"],
        "interests": ["outdoors"],
        "createdAt": "2025-06-01T12:00:00Z",
        "stats": {"views": 40, "likes": 4, "memberCount": 12},
    }
