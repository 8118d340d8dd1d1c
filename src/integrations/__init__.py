"""External collaborators: identity lookup and bucket storage."""

from storyfeed.integrations.identity import (
    CoreNodeClient,
    HandleResolver,
    IdentityLookup,
    ResolvedHandle,
)
from storyfeed.integrations.storage import (
    SETTINGS_RESOURCE,
    STORIES_RESOURCE,
    ContentFetcher,
    FetchedContent,
    ResourceResponse,
)

__all__ = [
    "ContentFetcher",
    "CoreNodeClient",
    "FetchedContent",
    "HandleResolver",
    "IdentityLookup",
    "ResolvedHandle",
    "ResourceResponse",
    "SETTINGS_RESOURCE",
    "STORIES_RESOURCE",
]
