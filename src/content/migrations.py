"""Schema migrations for stored bucket files.

Each file type has an ordered table of ``Migration`` steps. A step
declares which payloads it applies to and how to transform them; steps
run until the payload matches the canonical predicate. Steps only add or
rename fields, never drop stories or touch story content.

Migration never fails: a missing file yields the empty canonical value,
an unrecognised one yields whatever fields could be salvaged.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from storyfeed.content.models import (
    SETTINGS_VERSION,
    STORIES_VERSION,
    SettingsFile,
    StoryFile,
    StoryRecord,
    _Absent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """One step in a migration table."""

    name: str
    applies: Callable[[Any], bool]
    transform: Callable[[Any], Any]


def run_migrations(
    raw: Any,
    table: list[Migration],
    is_canonical: Callable[[Any], bool],
) -> tuple[Any, list[str]]:
    """Apply the first applicable step until the payload is canonical.

    Returns:
        The migrated payload and the names of the steps that ran.
    """
    applied: list[str] = []
    # A complete chain runs each step at most once
    for _ in range(len(table)):
        if is_canonical(raw):
            break
        step = next((m for m in table if m.applies(raw)), None)
        if step is None:
            break
        raw = step.transform(raw)
        applied.append(step.name)
    return raw, applied


def _version(raw: Any) -> Any:
    return raw.get("version") if isinstance(raw, dict) else None


def _rename(record: dict[str, Any], old: str, new: str) -> None:
    if old in record:
        value = record.pop(old)
        record.setdefault(new, value)


# ── Stories ──────────────────────────────────────────────────────────


def _rename_record_fields(record: Any) -> None:
    if isinstance(record, dict):
        _rename(record, "_id", "id")
        _rename(record, "coverImage", "coverImageUrl")


def _wrap_bare_list(raw: list[Any]) -> dict[str, Any]:
    return {"version": 0, "stories": raw}


def _stories_v0_to_v1(raw: dict[str, Any]) -> dict[str, Any]:
    stories = raw.get("stories")
    if not isinstance(stories, list):
        logger.warning("Stories file has no story list, treating it as empty")
        stories = []
    for record in stories:
        _rename_record_fields(record)
    return {**raw, "version": 1, "stories": stories}


def _stories_v1_to_v2(raw: dict[str, Any]) -> dict[str, Any]:
    for record in raw["stories"]:
        if isinstance(record, dict) and record.get("excerpt") is None:
            record["excerpt"] = ""
    return {**raw, "version": 2}


STORY_MIGRATIONS: list[Migration] = [
    Migration(
        name="wrap-bare-list",
        applies=lambda raw: isinstance(raw, list),
        transform=_wrap_bare_list,
    ),
    Migration(
        name="v0-to-v1",
        applies=lambda raw: isinstance(raw, dict) and _version(raw) in (None, 0),
        transform=_stories_v0_to_v1,
    ),
    Migration(
        name="v1-to-v2",
        applies=lambda raw: (
            isinstance(raw, dict)
            and _version(raw) == 1
            and isinstance(raw.get("stories"), list)
        ),
        transform=_stories_v1_to_v2,
    ),
]


def is_canonical_stories(raw: Any) -> bool:
    return (
        isinstance(raw, dict)
        and _version(raw) == STORIES_VERSION
        and isinstance(raw.get("stories"), list)
    )


def migrate_stories(raw: Any = None) -> StoryFile:
    """Migrate a raw ``publicStories.json`` payload to a StoryFile.

    Args:
        raw: Parsed JSON, an existing StoryFile, or None/ABSENT when the
            file does not exist.

    Returns:
        The canonical StoryFile. Records that are not objects or lack an
        id are skipped and logged; invalid fields on other records fall
        back to their defaults. Stored order is kept.
    """
    if raw is None or isinstance(raw, _Absent):
        return StoryFile()
    if isinstance(raw, StoryFile):
        raw = raw.model_dump(mode="json", by_alias=True)
    else:
        raw = copy.deepcopy(raw)

    data, applied = run_migrations(raw, STORY_MIGRATIONS, is_canonical_stories)
    if applied:
        logger.debug("Migrated stories file via %s", ", ".join(applied))
    if not is_canonical_stories(data):
        logger.warning(
            "Unrecognised stories file (version %r), salvaging what validates",
            _version(data),
        )
        if isinstance(data, dict) and isinstance(data.get("stories"), list):
            for record in data["stories"]:
                _rename_record_fields(record)

    records = data.get("stories") if isinstance(data, dict) else None
    stories: list[StoryRecord] = []
    for index, record in enumerate(records if isinstance(records, list) else []):
        story = _validate_story(index, record)
        if story is not None:
            stories.append(story)
    return StoryFile(version=STORIES_VERSION, stories=stories)


def _invalid_keys(model: type[BaseModel], exc: ValidationError) -> set[str]:
    """Wire keys named by ``exc``, under both field name and alias."""
    bad = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
    for name, field in model.model_fields.items():
        if name in bad and field.alias:
            bad.add(field.alias)
        if field.alias in bad:
            bad.add(name)
    return bad


def _validate_story(index: int, record: Any) -> StoryRecord | None:
    """Validate one record, resetting invalid optional fields to defaults.

    Returns None for records that are not objects or have no usable id.
    """
    if not isinstance(record, dict):
        logger.warning("Skipping story #%d: not an object", index)
        return None
    try:
        return StoryRecord.model_validate(record)
    except ValidationError as exc:
        bad = _invalid_keys(StoryRecord, exc)

    if "id" in bad:
        logger.warning("Skipping story #%d: missing or invalid id", index)
        return None
    logger.warning("Story #%d has invalid fields %s, using defaults", index, sorted(bad))
    return StoryRecord.model_validate(
        {key: value for key, value in record.items() if key not in bad}
    )


# ── Settings ─────────────────────────────────────────────────────────


def _settings_v0_to_v1(raw: dict[str, Any]) -> dict[str, Any]:
    data = dict(raw)
    _rename(data, "name", "siteName")
    _rename(data, "description", "siteDescription")
    data["version"] = 1
    return data


SETTINGS_MIGRATIONS: list[Migration] = [
    Migration(
        name="v0-to-v1",
        applies=lambda raw: isinstance(raw, dict) and _version(raw) in (None, 0),
        transform=_settings_v0_to_v1,
    ),
]


def is_canonical_settings(raw: Any) -> bool:
    return isinstance(raw, dict) and _version(raw) == SETTINGS_VERSION


def migrate_settings(raw: Any = None) -> SettingsFile:
    """Migrate a raw ``settings.json`` payload to a SettingsFile.

    Fields that fail validation fall back to their defaults.
    """
    if raw is None or isinstance(raw, _Absent):
        return SettingsFile()
    if isinstance(raw, SettingsFile):
        raw = raw.model_dump(mode="json", by_alias=True)
    if not isinstance(raw, dict):
        logger.warning("Unrecognised settings file (%s), using defaults", type(raw).__name__)
        return SettingsFile()

    data, _ = run_migrations(copy.deepcopy(raw), SETTINGS_MIGRATIONS, is_canonical_settings)
    data["version"] = SETTINGS_VERSION
    try:
        return SettingsFile.model_validate(data)
    except ValidationError as exc:
        bad = _invalid_keys(SettingsFile, exc)
        logger.warning("Dropping invalid settings fields: %s", sorted(bad))
        return SettingsFile.model_validate(
            {key: value for key, value in data.items() if key not in bad}
        )
