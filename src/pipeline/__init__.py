"""Pipeline modules: orchestration layer for storyfeed.

Each sub-module handles one output of the pipeline:
  blog   handle → profile → bucket → migrated files (shared first half)
  feed   migrated files → RSS 2.0 feed
  story  migrated files → one sanitized story page

Pipeline modules import domain logic via public APIs:
  - ``from storyfeed.content import ...``
  - ``from storyfeed.document import ...``
  - ``from storyfeed.integrations import ...``
"""

from storyfeed.pipeline.blog import LoadedBlog, load_blog
from storyfeed.pipeline.feed import Feed, FeedItem, FeedPipeline, assemble_feed
from storyfeed.pipeline.story import StoryPage, StoryPipeline

__all__ = [
    "Feed",
    "FeedItem",
    "FeedPipeline",
    "LoadedBlog",
    "StoryPage",
    "StoryPipeline",
    "assemble_feed",
    "load_blog",
]
