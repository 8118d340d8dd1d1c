"""Feed pipeline: a user's public stories as an RSS 2.0 document.

Feed items carry the stored story content untouched; feed readers
sanitize on their side.
"""

from __future__ import annotations

import mimetypes
import xml.etree.ElementTree as ET
from datetime import UTC, datetime
from email.utils import format_datetime

from pydantic import BaseModel, Field

from storyfeed.content import SettingsFile, StoryFile
from storyfeed.integrations import ContentFetcher, HandleResolver
from storyfeed.pipeline.blog import load_blog

RSS_DOCS_URL = "https://validator.w3.org/feed/docs/rss2.html"
GENERATOR = "storyfeed"
DC_NS = "http://purl.org/dc/elements/1.1/"

ET.register_namespace("dc", DC_NS)


class FeedItem(BaseModel):
    """One story in the feed."""

    title: str
    id: str
    link: str
    description: str
    date: datetime | None = None
    image: str | None = None


class Feed(BaseModel):
    """A blog feed, ready to render."""

    title: str
    description: str = ""
    id: str
    link: str
    favicon: str = ""
    copyright: str = ""
    author_name: str = ""
    updated: datetime
    items: list[FeedItem] = Field(default_factory=list)

    def to_rss2(self) -> str:
        """Render as an RSS 2.0 XML document."""
        rss = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(rss, "channel")
        _text(channel, "title", self.title)
        _text(channel, "link", self.link)
        _text(channel, "description", self.description)
        _text(channel, "lastBuildDate", format_datetime(self.updated))
        _text(channel, "docs", RSS_DOCS_URL)
        _text(channel, "generator", GENERATOR)
        if self.favicon:
            image = ET.SubElement(channel, "image")
            _text(image, "title", self.title)
            _text(image, "url", self.favicon)
            _text(image, "link", self.link)
        if self.copyright:
            _text(channel, "copyright", self.copyright)
        if self.author_name:
            _text(channel, f"{{{DC_NS}}}creator", self.author_name)

        for item in self.items:
            node = ET.SubElement(channel, "item")
            _text(node, "title", item.title)
            _text(node, "link", item.link)
            _text(node, "guid", item.id)
            if item.date is not None:
                _text(node, "pubDate", format_datetime(item.date))
            _text(node, "description", item.description)
            if item.image:
                ET.SubElement(
                    node,
                    "enclosure",
                    {"url": item.image, "length": "0", "type": _image_type(item.image)},
                )

        ET.indent(rss, space="    ")
        return '<?xml version="1.0" encoding="utf-8"?>\n' + ET.tostring(rss, encoding="unicode")


def _text(parent: ET.Element, tag: str, value: str) -> ET.Element:
    child = ET.SubElement(parent, tag)
    child.text = value
    return child


def _image_type(url: str) -> str:
    guessed, _ = mimetypes.guess_type(url.split("?", 1)[0])
    if guessed and guessed.startswith("image/"):
        return guessed
    return "image/jpeg"


def assemble_feed(
    handle: str,
    app_origin: str,
    stories: StoryFile,
    settings: SettingsFile,
    *,
    now: datetime | None = None,
) -> Feed:
    """Build the feed for a blog from its migrated files.

    Items follow stored story order. The build date is the newest story
    date, or ``now`` for a blog without dated stories.
    """
    now = now or datetime.now(tz=UTC)
    blog_link = f"{app_origin}/{handle}"

    items = [
        FeedItem(
            title=story.title,
            id=f"{blog_link}/{story.id}",
            link=f"{blog_link}/{story.id}",
            description=story.content,
            date=story.created_at,
            image=story.cover_image_url,
        )
        for story in stories.stories
    ]
    dates = [item.date for item in items if item.date is not None]

    return Feed(
        title=settings.site_name or handle,
        description=settings.site_description or "",
        id=blog_link,
        link=blog_link,
        favicon=f"{app_origin}/favicon/apple-touch-icon.png",
        copyright=f"All rights reserved {now.year}, {handle}",
        author_name=handle,
        updated=max(dates) if dates else now,
        items=items,
    )


class FeedPipeline:
    """Handle → RSS feed."""

    def __init__(self, resolver: HandleResolver, fetcher: ContentFetcher) -> None:
        self.resolver = resolver
        self.fetcher = fetcher

    async def build(self, handle: str, app_origin: str, *, now: datetime | None = None) -> Feed:
        """Resolve, fetch, migrate and assemble the feed for ``handle``."""
        blog = await load_blog(self.resolver, self.fetcher, handle, app_origin)
        # 4. Assemble one item per story
        return assemble_feed(handle, app_origin, blog.stories, blog.settings, now=now)
