"""Identity lookup: resolve a public handle to a profile and bucket URL.

The naming network is an external collaborator. ``IdentityLookup`` is the
capability the pipeline needs from it; ``CoreNodeClient`` implements it
against a Blockstack-style core node over plain HTTP.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from storyfeed.errors import NameNotFoundError, NotFoundError, ProfileLookupError

logger = logging.getLogger(__name__)


class IdentityLookup(ABC):
    """Capability: look up the profile registered for a handle."""

    @abstractmethod
    def lookup(self, handle: str) -> dict[str, Any]:
        """Return the profile for ``handle``.

        Raises:
            NameNotFoundError: If the naming system has no such name.
        """


class CoreNodeClient(IdentityLookup):
    """Client for the ``/v1/users/{name}`` endpoint of a core node.

    The endpoint answers ``{name: {"profile": {...}}}`` for registered
    names and ``{name: {"error": "Name not found"}}`` (or a 404) otherwise.
    """

    def __init__(self, api_url: str, timeout: int = 15) -> None:
        self.base_url = api_url.rstrip("/")
        self.timeout = timeout

    def _request(self, path: str) -> Any:
        """GET a JSON document from the core node."""
        req = urllib.request.Request(
            f"{self.base_url}{path}",
            method="GET",
            headers={"Accept": "application/json"},
        )
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))

    def lookup(self, handle: str) -> dict[str, Any]:
        path = f"/v1/users/{urllib.parse.quote(handle, safe='')}"
        try:
            result = self._request(path)
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                raise NameNotFoundError(handle) from exc
            raise

        entry = result.get(handle) if isinstance(result, dict) else None
        if entry is None:
            raise NameNotFoundError(handle)
        if not isinstance(entry, dict):
            raise ValueError(f"Malformed lookup response for {handle}")

        error = entry.get("error")
        if error:
            if "not found" in str(error).lower():
                raise NameNotFoundError(handle)
            raise ValueError(str(error))

        profile = entry.get("profile")
        if not isinstance(profile, dict):
            raise ValueError(f"Malformed profile for {handle}")
        return profile


class ResolvedHandle(BaseModel):
    """A handle resolved to its profile and this app's bucket."""

    handle: str
    profile: dict[str, Any]
    bucket_url: str


class HandleResolver:
    """Resolves handles to the bucket the user registered for an app origin."""

    def __init__(self, lookup: IdentityLookup) -> None:
        self.lookup = lookup

    def resolve(self, handle: str, app_origin: str) -> ResolvedHandle:
        """Resolve ``handle`` for the application served at ``app_origin``.

        Raises:
            NotFoundError: Unknown handle, or handle never used this app.
            ProfileLookupError: Any other lookup failure.
        """
        try:
            profile = self.lookup.lookup(handle)
        except NameNotFoundError as exc:
            raise NotFoundError(f"{handle} not found") from exc
        except Exception as exc:
            logger.error("Identity lookup for %s failed: %s", handle, exc, exc_info=True)
            raise ProfileLookupError(f"Identity lookup returned error: {exc}") from exc

        apps = profile.get("apps")
        bucket_url = apps.get(app_origin) if isinstance(apps, dict) else None
        if not bucket_url or not isinstance(bucket_url, str):
            raise NotFoundError(f"{handle} is not using the app")

        if not bucket_url.endswith("/"):
            bucket_url += "/"
        return ResolvedHandle(handle=handle, profile=profile, bucket_url=bucket_url)
