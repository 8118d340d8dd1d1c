"""Tests for the story page pipeline."""

import asyncio
import json

import pytest

from storyfeed.document import Sanitizer
from storyfeed.errors import NotFoundError
from storyfeed.integrations import STORIES_RESOURCE
from storyfeed.pipeline import StoryPipeline

CONTENT = json.dumps(
    {
        "object": "value",
        "document": {
            "object": "document",
            "nodes": [
                {
                    "object": "block",
                    "type": "paragraph",
                    "nodes": [
                        {"object": "text", "leaves": [{"text": "Hello ", "marks": []}]},
                        {
                            "object": "inline",
                            "type": "link",
                            "data": {"href": "javascript:steal()"},
                            "nodes": [{"object": "text", "leaves": [{"text": "click", "marks": []}]}],
                        },
                    ],
                }
            ],
        },
    }
)

STORIES = {
    "version": 2,
    "stories": [
        {
            "id": "s1",
            "title": "Title",
            "content": CONTENT,
            "excerpt": "Short",
            "metaTitle": "Meta title",
            "coverImageUrl": "https://img.example/c.png",
            "createdAt": "2019-01-01T00:00:00Z",
        },
        {"id": "broken", "title": "Broken", "content": "{not json", "metaDescription": "Desc"},
    ],
}


def _render(resolver, fetcher, story_id, handle="alice"):
    pipeline = StoryPipeline(resolver, fetcher, Sanitizer())
    return asyncio.run(pipeline.render(handle, story_id, "https://app.example.com"))


class TestStoryPipeline:
    def test_renders_sanitized_html(self, resolver, make_fetcher):
        page = _render(resolver, make_fetcher({STORIES_RESOURCE: (200, STORIES)}), "s1")
        assert page.html == "<p>Hello <a>click</a></p>"
        assert page.cover_image_url == "https://img.example/c.png"

    def test_seo_fields(self, resolver, make_fetcher):
        page = _render(resolver, make_fetcher({STORIES_RESOURCE: (200, STORIES)}), "s1")
        assert page.seo_title == "Meta title | Alice | Sigle"
        assert page.seo_description == "Short"
        assert page.seo_url == "https://app.example.com/alice/s1"
        assert page.author_name == "Alice"

    def test_meta_description_preferred(self, resolver, make_fetcher):
        page = _render(resolver, make_fetcher({STORIES_RESOURCE: (200, STORIES)}), "broken")
        assert page.seo_description == "Desc"
        assert page.seo_title == "Broken | Alice | Sigle"

    def test_unparsable_content_renders_empty(self, resolver, make_fetcher):
        page = _render(resolver, make_fetcher({STORIES_RESOURCE: (200, STORIES)}), "broken")
        assert page.html == ""

    def test_unknown_story(self, resolver, make_fetcher):
        with pytest.raises(NotFoundError) as excinfo:
            _render(resolver, make_fetcher({STORIES_RESOURCE: (200, STORIES)}), "nope")
        assert excinfo.value.status_code == 404

    def test_no_stories_file(self, resolver, make_fetcher):
        with pytest.raises(NotFoundError):
            _render(resolver, make_fetcher(), "s1")
