"""Shared fixtures for Profile Dashboard tests.

Provides:
- platform: patches requests.post with an in-memory fake of the sign-in
  and GraphQL endpoints
- client / logged_in_client: sync TestClient wired to the FastAPI app
- sample data factories for users, transactions, results, progress rows
"""

import json
import os
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

# Set env vars before any profile_dashboard imports
os.environ.setdefault("PLATFORM_BASE_URL", "https://platform.test/api")
os.environ.setdefault("COOKIE_SECURE", "0")

from profile_dashboard.config import GRAPHQL_URL, SIGNIN_URL, TOKEN_COOKIE_NAME  # noqa: E402
from profile_dashboard.queries import (  # noqa: E402
    AUDIT_RESULTS_QUERY,
    OBJECT_NAMES_QUERY,
    PROGRESS_QUERY,
    USER_QUERY,
    XP_TRANSACTIONS_QUERY,
)

USER_ID = 42
TOKEN = "test-token"


# ---------------------------------------------------------------------------
# In-memory fake platform
# ---------------------------------------------------------------------------

class FakeResponse:
    """Just enough of requests.Response for the client and auth code."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakePlatform:
    """Serves the sign-in and GraphQL endpoints from in-memory rows."""

    def __init__(self):
        self.credentials = {("alice", "s3cret")}
        self.token = TOKEN
        self.token_valid = True
        self.user = {"id": USER_ID, "login": "alice"}
        self.transactions = []
        self.results = []
        self.progress = []
        self.objects = []
        # query text -> FakeResponse served instead of the real rows
        self.overrides = {}
        self.signin_calls = []
        self.graphql_calls = []

    def post(self, url, headers=None, json=None, auth=None, timeout=None, **kwargs):
        if url == SIGNIN_URL:
            return self._signin(auth)
        if url == GRAPHQL_URL:
            return self._graphql(headers or {}, json or {})
        return FakeResponse(404, text="not found")

    def _signin(self, auth):
        self.signin_calls.append(auth)
        if tuple(auth or ()) not in self.credentials:
            return FakeResponse(401, {"error": "invalid credentials"})
        return FakeResponse(200, text=f'"{self.token}"')

    def _graphql(self, headers, payload):
        query = payload.get("query", "")
        variables = payload.get("variables") or {}
        self.graphql_calls.append((query, variables))

        if query in self.overrides:
            return self.overrides[query]
        if not self.token_valid or headers.get("Authorization") != f"Bearer {self.token}":
            return FakeResponse(401, {"errors": [{"message": "Could not verify JWT"}]})

        if query == USER_QUERY:
            data = {"user": [self.user] if self.user else []}
        elif query == XP_TRANSACTIONS_QUERY:
            data = {"transaction": self.transactions}
        elif query == AUDIT_RESULTS_QUERY:
            data = {"result": self.results}
        elif query == PROGRESS_QUERY:
            data = {"progress": self.progress}
        elif query == OBJECT_NAMES_QUERY:
            ids = set(variables.get("ids") or [])
            data = {"object": [o for o in self.objects if o["id"] in ids]}
        else:
            return FakeResponse(200, {"errors": [{"message": "unknown query"}]})
        return FakeResponse(200, {"data": data})

    def queries_sent(self):
        return [q for q, _ in self.graphql_calls]


@pytest.fixture
def platform():
    """Clean fake platform; requests.post is patched for client and auth alike."""
    fake = FakePlatform()
    with patch("profile_dashboard.graphql_client.requests.post", side_effect=fake.post):
        with patch("profile_dashboard.services.auth.requests.post", side_effect=fake.post):
            yield fake


@pytest.fixture
def seeded_platform(platform):
    seed_profile(platform)
    return platform


@pytest.fixture
def client(platform):
    """Sync test client for the FastAPI app with the platform faked."""
    from fastapi.testclient import TestClient

    from profile_dashboard.app import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def logged_in_client(client, platform):
    client.cookies.set(TOKEN_COOKIE_NAME, platform.token)
    return client


# ---------------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------------

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _stamp(days):
    return (BASE_TIME + timedelta(days=days)).isoformat().replace("+00:00", "Z")


def make_object(**overrides):
    defaults = {"id": 1000, "name": "go-reloaded", "type": "project"}
    defaults.update(overrides)
    return defaults


def make_transaction(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "type": "xp",
        "amount": 100,
        "objectId": 1000,
        "userId": USER_ID,
        "createdAt": _stamp(0),
        "path": "/kisumu/module/go-reloaded",
        "object": None,
    }
    defaults.update(overrides)
    return defaults


def make_result(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "grade": 1,
        "type": "audit",
        "objectId": 1000,
        "userId": USER_ID,
        "createdAt": _stamp(0),
        "path": "/kisumu/module/go-reloaded",
        "object": None,
    }
    defaults.update(overrides)
    return defaults


def make_progress(**overrides):
    defaults = {
        "id": str(uuid.uuid4()),
        "grade": 1,
        "path": "/kisumu/module/go-reloaded",
        "createdAt": _stamp(0),
    }
    defaults.update(overrides)
    return defaults


def seed_profile(platform):
    """1,250 XP over three projects, 4 passed audits and 1 failed."""
    platform.transactions = [
        make_transaction(amount=500, objectId=1001, createdAt=_stamp(0),
                         path="/kisumu/module/go-reloaded",
                         object=make_object(id=1001, name="go-reloaded")),
        make_transaction(amount=400, objectId=1002, createdAt=_stamp(3),
                         path="/kisumu/module/ascii-art",
                         object=make_object(id=1002, name="ascii-art")),
        make_transaction(amount=350, objectId=1003, createdAt=_stamp(7),
                         path="/kisumu/module/forum",
                         object=make_object(id=1003, name="forum")),
    ]
    platform.results = [make_result(grade=1) for _ in range(4)] + [make_result(grade=0)]
    platform.progress = [
        make_progress(path="/kisumu/module/go-reloaded", grade=1),
        make_progress(path="/kisumu/module/forum", grade=1),
        make_progress(path="/kisumu/module/piscine-js/quest-01", grade=0.5),
        make_progress(path="/kisumu/module/make-your-game-html", grade=1.2),
    ]
    return platform
