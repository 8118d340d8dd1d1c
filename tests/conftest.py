"""Shared fakes for the identity and storage collaborators."""

from __future__ import annotations

import json
from typing import Any

import pytest

from storyfeed.errors import NameNotFoundError
from storyfeed.integrations import (
    ContentFetcher,
    HandleResolver,
    IdentityLookup,
    ResourceResponse,
)

APP_ORIGIN = "https://app.example.com"
BUCKET_URL = "https://gaia.example.org/hub/1AliceAddress/"


class FakeLookup(IdentityLookup):
    """In-memory identity lookup."""

    def __init__(self, profiles: dict[str, dict[str, Any]], error: Exception | None = None):
        self.profiles = profiles
        self.error = error
        self.calls: list[str] = []

    def lookup(self, handle: str) -> dict[str, Any]:
        self.calls.append(handle)
        if self.error is not None:
            raise self.error
        if handle not in self.profiles:
            raise NameNotFoundError(handle)
        return self.profiles[handle]


class FakeFetcher(ContentFetcher):
    """Serves canned (status, payload) pairs per resource name."""

    def __init__(self, responses: dict[str, tuple[int | None, Any]] | None = None):
        super().__init__(timeout=1)
        self.responses = responses or {}
        self.urls: list[str] = []

    def fetch_resource(self, bucket_url: str, resource: str) -> ResourceResponse:
        self.urls.append(f"{bucket_url}{resource}")
        status, payload = self.responses.get(resource, (404, None))
        if isinstance(payload, bytes):
            body = payload
        elif payload is None:
            body = b""
        else:
            body = json.dumps(payload).encode("utf-8")
        return ResourceResponse(resource=resource, status=status, body=body)


@pytest.fixture
def profiles() -> dict[str, dict[str, Any]]:
    return {
        "alice": {"name": "Alice", "apps": {APP_ORIGIN: BUCKET_URL}},
        "bob": {"name": "Bob", "apps": {"https://other.example.com": "https://gaia.example.org/hub/1Bob/"}},
    }


@pytest.fixture
def lookup(profiles: dict[str, dict[str, Any]]) -> FakeLookup:
    return FakeLookup(profiles)


@pytest.fixture
def resolver(lookup: FakeLookup) -> HandleResolver:
    return HandleResolver(lookup)


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def app_origin() -> str:
    return APP_ORIGIN


@pytest.fixture
def bucket_url() -> str:
    return BUCKET_URL
