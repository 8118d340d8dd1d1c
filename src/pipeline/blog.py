"""Blog loading: handle → profile → bucket → migrated story and settings files.

Shared first half of every pipeline. Each call re-runs the whole chain;
nothing is cached between requests.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from storyfeed.content import SettingsFile, StoryFile, migrate_settings, migrate_stories
from storyfeed.errors import FetchError
from storyfeed.integrations import ContentFetcher, HandleResolver, ResolvedHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedBlog:
    """A resolved handle with its migrated bucket files."""

    resolved: ResolvedHandle
    stories: StoryFile
    settings: SettingsFile

    @property
    def handle(self) -> str:
        return self.resolved.handle


async def load_blog(
    resolver: HandleResolver,
    fetcher: ContentFetcher,
    handle: str,
    app_origin: str,
) -> LoadedBlog:
    """Resolve a handle and load its blog files.

    Raises:
        NotFoundError: Unknown handle, or handle not using this app.
        ProfileLookupError: The identity lookup failed.
        FetchError: A bucket resource failed with a non-404 status.
    """
    # 1. Resolve the handle to this app's bucket (blocking lookup)
    resolved = await asyncio.to_thread(resolver.resolve, handle, app_origin)

    # 2. Fetch both resources concurrently
    try:
        content = await fetcher.fetch_all(resolved.bucket_url, handle=handle)
    except FetchError as exc:
        logger.error("%s (bucket %s)", exc.message, resolved.bucket_url)
        raise

    # 3. Migrate to the current schema; cannot fail
    return LoadedBlog(
        resolved=resolved,
        stories=migrate_stories(content.stories_raw),
        settings=migrate_settings(content.settings_raw),
    )
