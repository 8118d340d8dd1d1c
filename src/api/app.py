"""FastAPI application exposing the public feed and story endpoints."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from storyfeed import __version__
from storyfeed.config import StoryfeedConfig, load_config
from storyfeed.document import Sanitizer
from storyfeed.errors import StoryfeedError
from storyfeed.integrations import ContentFetcher, CoreNodeClient, HandleResolver
from storyfeed.pipeline import FeedPipeline, StoryPage, StoryPipeline

logger = logging.getLogger(__name__)

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"


def request_origin(request: Request, default: str) -> str:
    """Origin the app is served at, honouring reverse-proxy headers."""
    proto = request.headers.get("x-forwarded-proto")
    host = request.headers.get("x-forwarded-host")
    if proto and host:
        return f"{proto}://{host}"
    return default.rstrip("/")


def create_app(
    config: StoryfeedConfig | None = None,
    *,
    resolver: HandleResolver | None = None,
    fetcher: ContentFetcher | None = None,
    sanitizer: Sanitizer | None = None,
) -> FastAPI:
    """Create the API application.

    Collaborators default to live implementations built from ``config``.
    """
    config = config or load_config()
    resolver = resolver or HandleResolver(
        CoreNodeClient(config.identity.api_url, timeout=config.identity.timeout)
    )
    fetcher = fetcher or ContentFetcher(timeout=config.storage.timeout)
    # One sanitizer per process, handed to the pipeline explicitly
    sanitizer = sanitizer or Sanitizer()

    feeds = FeedPipeline(resolver, fetcher)
    stories = StoryPipeline(resolver, fetcher, sanitizer, site_name=config.app.site_name)

    app = FastAPI(
        title="storyfeed API",
        version=__version__,
        description="Public RSS feeds and story pages for decentralized-storage blogs.",
    )

    @app.exception_handler(StoryfeedError)
    async def _pipeline_error(_: Request, exc: StoryfeedError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/feed/{handle}", tags=["feed"], response_class=Response)
    async def feed(handle: str, request: Request) -> Response:
        origin = request_origin(request, config.app.url)
        result = await feeds.build(handle, origin)
        logger.info("feed.built handle=%s items=%d", handle, len(result.items))
        return Response(content=result.to_rss2(), media_type=RSS_MEDIA_TYPE)

    @app.get("/api/stories/{handle}/{story_id}", tags=["stories"], response_model=StoryPage)
    async def story(handle: str, story_id: str, request: Request) -> StoryPage:
        origin = request_origin(request, config.app.url)
        return await stories.render(handle, story_id, origin)

    return app
