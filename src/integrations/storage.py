"""Bucket reads: fetch a user's public story and settings files.

Buckets are public, so reads are plain unauthenticated GETs. A 404 is a
normal state (the user has not written the file yet) and comes back as
``ABSENT``; any other non-200 answer is a ``FetchError``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from storyfeed.content.models import ABSENT
from storyfeed.errors import FetchError

logger = logging.getLogger(__name__)

STORIES_RESOURCE = "publicStories.json"
SETTINGS_RESOURCE = "settings.json"

RESOURCE_LABELS = {
    STORIES_RESOURCE: "public stories",
    SETTINGS_RESOURCE: "settings",
}


@dataclass(frozen=True)
class ResourceResponse:
    """Raw outcome of one bucket GET."""

    resource: str
    status: int | None
    body: bytes = b""
    reason: str = ""


@dataclass(frozen=True)
class FetchedContent:
    """Both bucket payloads, each parsed JSON or ``ABSENT``."""

    stories_raw: Any
    settings_raw: Any


class ContentFetcher:
    """Reads the well-known JSON resources from a bucket."""

    def __init__(self, timeout: int = 15) -> None:
        self.timeout = timeout

    def fetch_resource(self, bucket_url: str, resource: str) -> ResourceResponse:
        """GET one resource. Never raises for HTTP or network failures."""
        req = urllib.request.Request(f"{bucket_url}{resource}", method="GET")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return ResourceResponse(resource=resource, status=resp.status, body=resp.read())
        except urllib.error.HTTPError as exc:
            return ResourceResponse(resource=resource, status=exc.code, reason=str(exc.reason))
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            return ResourceResponse(resource=resource, status=None, reason=str(reason))

    async def fetch_all(self, bucket_url: str, *, handle: str = "") -> FetchedContent:
        """Fetch stories and settings concurrently.

        Both requests complete before either outcome is inspected; the
        stories outcome is checked first.

        Raises:
            FetchError: If either resource answered anything but 200/404.
        """
        stories, settings = await asyncio.gather(
            asyncio.to_thread(self.fetch_resource, bucket_url, STORIES_RESOURCE),
            asyncio.to_thread(self.fetch_resource, bucket_url, SETTINGS_RESOURCE),
        )
        return FetchedContent(
            stories_raw=_payload(stories, handle),
            settings_raw=_payload(settings, handle),
        )


def _payload(response: ResourceResponse, handle: str) -> Any:
    label = RESOURCE_LABELS.get(response.resource, response.resource)
    who = handle or "bucket"

    if response.status == 404:
        logger.debug("%s has no %s yet", who, response.resource)
        return ABSENT
    if response.status == 200:
        try:
            return json.loads(response.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise FetchError(
                f"{who} failed to parse {label}: {exc}",
                resource=response.resource,
                status=200,
            ) from exc
    if response.status is None:
        raise FetchError(
            f"{who} failed to fetch {label}: {response.reason}",
            resource=response.resource,
            status=None,
        )
    raise FetchError(
        f"{who} failed to fetch {label} with code {response.status}",
        resource=response.resource,
        status=response.status,
    )
