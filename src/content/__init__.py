"""Content domain: stored bucket file models and their schema migrations."""

from storyfeed.content.migrations import (
    SETTINGS_MIGRATIONS,
    STORY_MIGRATIONS,
    Migration,
    migrate_settings,
    migrate_stories,
    run_migrations,
)
from storyfeed.content.models import (
    ABSENT,
    SETTINGS_VERSION,
    STORIES_VERSION,
    SettingsFile,
    StoryFile,
    StoryRecord,
)

__all__ = [
    "ABSENT",
    "Migration",
    "SETTINGS_MIGRATIONS",
    "SETTINGS_VERSION",
    "STORIES_VERSION",
    "STORY_MIGRATIONS",
    "SettingsFile",
    "StoryFile",
    "StoryRecord",
    "migrate_settings",
    "migrate_stories",
    "run_migrations",
]
