"""Tests for the stored content models."""

from datetime import UTC, datetime

from storyfeed.content import ABSENT, SettingsFile, StoryFile, StoryRecord


class TestStoryRecord:
    def test_camel_case_aliases(self):
        record = StoryRecord.model_validate(
            {
                "id": "s1",
                "title": "T",
                "coverImageUrl": "https://img.example/c.png",
                "metaTitle": "M",
                "metaDescription": "D",
            }
        )
        assert record.cover_image_url == "https://img.example/c.png"
        assert record.meta_title == "M"
        assert record.meta_description == "D"

    def test_created_at_from_epoch_milliseconds(self):
        record = StoryRecord.model_validate({"id": "s1", "createdAt": 1546300800000})
        assert record.created_at == datetime(2019, 1, 1, tzinfo=UTC)

    def test_naive_iso_date_assumed_utc(self):
        record = StoryRecord.model_validate({"id": "s1", "createdAt": "2019-01-01T12:00:00"})
        assert record.created_at == datetime(2019, 1, 1, 12, tzinfo=UTC)

    def test_numeric_id_becomes_string(self):
        assert StoryRecord.model_validate({"id": 7}).id == "7"

    def test_none_text_fields_default_empty(self):
        record = StoryRecord.model_validate({"id": "s1", "title": None, "excerpt": None, "content": None})
        assert (record.title, record.excerpt, record.content) == ("", "", "")

    def test_structured_content_kept_as_json_text(self):
        record = StoryRecord.model_validate({"id": "s1", "content": {"document": {"nodes": []}}})
        assert record.content == '{"document": {"nodes": []}}'

    def test_extra_fields_ignored(self):
        record = StoryRecord.model_validate({"id": "s1", "unknownField": 1})
        assert not hasattr(record, "unknownField")

    def test_dump_by_alias(self):
        dumped = StoryRecord(id="s1", cover_image_url="c").model_dump(by_alias=True)
        assert dumped["coverImageUrl"] == "c"


class TestStoryFile:
    def test_defaults(self):
        assert StoryFile().stories == []
        assert StoryFile().version == 2

    def test_get(self):
        file = StoryFile(stories=[StoryRecord(id="a"), StoryRecord(id="b")])
        assert file.get("b").id == "b"
        assert file.get("zzz") is None


class TestSettingsFile:
    def test_aliases(self):
        settings = SettingsFile.model_validate({"siteName": "N", "siteDescription": "D"})
        assert settings.site_name == "N"
        assert settings.site_description == "D"


class TestAbsent:
    def test_singleton_and_falsy(self):
        assert ABSENT is type(ABSENT)()
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"
