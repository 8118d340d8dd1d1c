"""Stored content models: the canonical shape of a user's bucket files.

Field names are snake_case in Python and camelCase on the wire, which is
how the editor writes them. Unknown fields are ignored on validation so a
file written by a newer editor still loads.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

STORIES_VERSION = 2
SETTINGS_VERSION = 1


class _Absent:
    """Marker for a bucket resource that does not exist (HTTP 404)."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


class StoryRecord(BaseModel):
    """A single published story."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    id: str
    title: str = ""
    content: str = ""
    excerpt: str = ""
    cover_image_url: str | None = Field(default=None, alias="coverImageUrl")
    meta_title: str | None = Field(default=None, alias="metaTitle")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    slug: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("title", "excerpt", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("content", mode="before")
    @classmethod
    def _content_as_json_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value

    @field_validator("created_at", mode="after")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class StoryFile(BaseModel):
    """The ``publicStories.json`` collection, newest schema version."""

    version: int = STORIES_VERSION
    stories: list[StoryRecord] = Field(default_factory=list)

    def get(self, story_id: str) -> StoryRecord | None:
        """Return the story with this id, or None."""
        for story in self.stories:
            if story.id == story_id:
                return story
        return None


class SettingsFile(BaseModel):
    """The ``settings.json`` blog settings, newest schema version."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    version: int = SETTINGS_VERSION
    site_name: str | None = Field(default=None, alias="siteName")
    site_description: str | None = Field(default=None, alias="siteDescription")
    site_color: str | None = Field(default=None, alias="siteColor")
    site_logo: str | None = Field(default=None, alias="siteLogo")
