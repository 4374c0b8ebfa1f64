"""
Pytest configuration and shared fixtures.

Fixtures available to all tests:
  - store        temporary JSON-backed LocalStore
  - session      empty SessionState over ``store``
  - fake_api     scripted REST server behind httpx.MockTransport
  - client       ApiClient talking to ``fake_api``
  - service      DataService wired to ``fake_api`` and ``store``
"""

from __future__ import annotations

import os
import sys
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

# Ensure the project root is on the path so all package imports resolve.
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from database.json_repository import LocalRepository, LocalStore  # noqa: E402
from database.models import AdminUserModel  # noqa: E402
from integrations.api_client import ApiClient  # noqa: E402
from integrations.remote_repository import RemoteRepository  # noqa: E402
from integrations.session import SessionState  # noqa: E402
from services.auth_service import AuthService  # noqa: E402
from services.community_cache import CommunityCache  # noqa: E402
from services.data_service import DataService  # noqa: E402


API_ROOT = "http://api.test/api"

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Fake REST server
# ---------------------------------------------------------------------------

class FakeApi:
    """Scripted responses keyed by (method, path below the API root).

    Unscripted routes answer 404. Setting ``offline`` makes every request
    fail before a response is produced.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Union[Handler, Tuple[int, Any]]] = {}
        self.requests: List[httpx.Request] = []
        self.offline = False

    def add(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[(method, f"/api{path}")] = (status, json)

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, f"/api{path}")] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        if callable(route):
            return route(request)

        status, payload = route
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def paths(self, method: str = None) -> List[str]:
        return [
            r.url.path for r in self.requests
            if method is None or r.method == method
        ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path / "local_storage.json")


@pytest.fixture
def session(store) -> SessionState:
    return SessionState(store)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def client(session, fake_api) -> ApiClient:
    return ApiClient(API_ROOT, session, transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def auth(client, session) -> AuthService:
    return AuthService(client, session)


@pytest.fixture
def service(client, store, auth) -> DataService:
    return DataService(
        remote=RemoteRepository(client),
        local=LocalRepository(store),
        cache=CommunityCache(maxsize=16),
        auth=auth,
    )


@pytest.fixture
def admin_user() -> AdminUserModel:
    return AdminUserModel(id="1", email="admin@example.com", role="admin")


@pytest.fixture
def super_admin_user() -> AdminUserModel:
    return AdminUserModel(id="2", email="root@example.com", role="super_admin")


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------

def make_listing(listing_id: str = "listing-1", price: float = 485000, **overrides) -> dict:
    data = {
        "id": listing_id,
        "title": f"Home {listing_id}",
        "address": "123 Main St",
        "price": price,
        "bedrooms": 4,
        "bathrooms": 3,
        "sqft": 2500,
        "type": "HOUSE",
        "status": "AVAILABLE",
        "communityId": "riverstone",
    }
    data.update(overrides)
    return data


def make_community(community_id: str = "riverstone", **overrides) -> dict:
    data = {
        "id": community_id,
        "name": community_id.title(),
        "location": "Sugar Land, TX",
        "priceRange": "$400K - $800K",
        "builders": [
            {"name": "Lennar", "contact": "(281) 555-0123"},
            {"name": "KB Home", "contact": "(281) 555-0124"},
        ],
        "homes": [
            {"name": "The Madison", "sqft": 2500, "bedrooms": 4, "bathrooms": 3, "price": 450000},
            {"name": "The Oakwood", "sqft": 3200, "bedrooms": 5, "bathrooms": 4, "price": 650000},
        ],
    }
    data.update(overrides)
    return data
