"""Story pipeline: a single public story as a sanitized HTML page."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from storyfeed.document import Sanitizer, render_document
from storyfeed.errors import NotFoundError
from storyfeed.integrations import ContentFetcher, HandleResolver
from storyfeed.pipeline.blog import load_blog


class StoryPage(BaseModel):
    """Everything the public story page shows, with the body already safe."""

    id: str
    handle: str
    author_name: str
    title: str
    html: str
    created_at: datetime | None = None
    cover_image_url: str | None = None
    seo_title: str
    seo_description: str
    seo_url: str


class StoryPipeline:
    """Handle + story id → rendered story page."""

    def __init__(
        self,
        resolver: HandleResolver,
        fetcher: ContentFetcher,
        sanitizer: Sanitizer,
        *,
        site_name: str = "Sigle",
    ) -> None:
        self.resolver = resolver
        self.fetcher = fetcher
        self.sanitizer = sanitizer
        self.site_name = site_name

    async def render(self, handle: str, story_id: str, app_origin: str) -> StoryPage:
        """Load the blog for ``handle`` and render one of its stories.

        Raises:
            NotFoundError: If the handle or the story does not exist.
        """
        blog = await load_blog(self.resolver, self.fetcher, handle, app_origin)
        story = blog.stories.get(story_id)
        if story is None:
            raise NotFoundError(f"{story_id} not found for {handle}")

        name = blog.resolved.profile.get("name")
        author_name = name if isinstance(name, str) and name else handle
        return StoryPage(
            id=story.id,
            handle=handle,
            author_name=author_name,
            title=story.title,
            html=render_document(story.content, self.sanitizer, story_id=story.id),
            created_at=story.created_at,
            cover_image_url=story.cover_image_url,
            seo_title=f"{story.meta_title or story.title} | {author_name} | {self.site_name}",
            seo_description=story.meta_description or story.excerpt,
            seo_url=f"{app_origin}/{handle}/{story.id}",
        )
