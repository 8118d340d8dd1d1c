"""Tests for the HTTP endpoints."""

import feedparser
import pytest
from fastapi.testclient import TestClient

from storyfeed.api import create_app
from storyfeed.config import AppConfig, StoryfeedConfig
from storyfeed.integrations import SETTINGS_RESOURCE, STORIES_RESOURCE, HandleResolver

STORIES = [{"id": "s1", "title": "Hello", "content": "", "createdAt": 1546300800000}]


@pytest.fixture
def config(app_origin) -> StoryfeedConfig:
    return StoryfeedConfig(app=AppConfig(url=app_origin))


def _client(config, resolver, fetcher) -> TestClient:
    return TestClient(create_app(config, resolver=resolver, fetcher=fetcher))


class TestFeedEndpoint:
    def test_feed(self, config, resolver, make_fetcher):
        fetcher = make_fetcher(
            {STORIES_RESOURCE: (200, STORIES), SETTINGS_RESOURCE: (200, {"siteName": "Alice's Blog"})}
        )
        response = _client(config, resolver, fetcher).get("/api/feed/alice")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/rss+xml")
        parsed = feedparser.parse(response.text)
        assert parsed.feed.title == "Alice's Blog"
        assert parsed.entries[0].link == "https://app.example.com/alice/s1"

    def test_empty_bucket(self, config, resolver, make_fetcher):
        response = _client(config, resolver, make_fetcher()).get("/api/feed/alice")
        assert response.status_code == 200
        parsed = feedparser.parse(response.text)
        assert parsed.feed.title == "alice"
        assert parsed.entries == []

    def test_forwarded_origin(self, config, lookup, profiles, make_fetcher):
        profiles["alice"]["apps"]["https://blog.proxy.example"] = "https://gaia.example.org/hub/1P/"
        response = _client(config, HandleResolver(lookup), make_fetcher()).get(
            "/api/feed/alice",
            headers={"x-forwarded-proto": "https", "x-forwarded-host": "blog.proxy.example"},
        )
        assert response.status_code == 200
        assert feedparser.parse(response.text).feed.link == "https://blog.proxy.example/alice"

    def test_unknown_handle(self, config, resolver, make_fetcher):
        response = _client(config, resolver, make_fetcher()).get("/api/feed/ghost")
        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/plain")
        assert "ghost" in response.text

    def test_not_using_app(self, config, resolver, make_fetcher):
        response = _client(config, resolver, make_fetcher()).get("/api/feed/bob")
        assert response.status_code == 404
        assert response.text == "bob is not using the app"

    def test_fetch_failure(self, config, resolver, make_fetcher):
        fetcher = make_fetcher({STORIES_RESOURCE: (503, None)})
        response = _client(config, resolver, fetcher).get("/api/feed/alice")
        assert response.status_code == 500
        assert response.text == "alice failed to fetch public stories with code 503"

    def test_lookup_failure(self, config, lookup, make_fetcher):
        lookup.error = TimeoutError("timed out")
        response = _client(config, HandleResolver(lookup), make_fetcher()).get("/api/feed/alice")
        assert response.status_code == 500
        assert response.text.startswith("Identity lookup returned error")


class TestStoryEndpoint:
    def test_story(self, config, resolver, make_fetcher):
        fetcher = make_fetcher({STORIES_RESOURCE: (200, STORIES)})
        response = _client(config, resolver, fetcher).get("/api/stories/alice/s1")
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Hello"
        assert body["html"] == ""
        assert body["seo_url"] == "https://app.example.com/alice/s1"

    def test_unknown_story(self, config, resolver, make_fetcher):
        response = _client(config, resolver, make_fetcher()).get("/api/stories/alice/nope")
        assert response.status_code == 404


def test_healthz(config, resolver, make_fetcher):
    response = _client(config, resolver, make_fetcher()).get("/healthz")
    assert response.json() == {"status": "ok"}
