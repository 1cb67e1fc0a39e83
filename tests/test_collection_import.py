"""
Tests for import file parsing.

These tests verify the import trust boundary:
- Unparseable or wrongly shaped files are rejected with a reason
- Items are cleaned field by field, never rejected for bad field types
- Entirely blank items are dropped
- Only a READY plan carries records or an API key
"""

import json
from datetime import UTC, datetime

import pytest

from booker.parsers.collection_import import (
    ImportedRecord,
    ImportStatus,
    clean_items,
    decode_json,
    extract_api_key,
    extract_items,
    parse_import_text,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
NOW_ISO = "2024-05-01T12:00:00.000Z"


class TestRejections:
    def test_invalid_json(self) -> None:
        plan = parse_import_text("{not json")

        assert plan.status == ImportStatus.INVALID_JSON
        assert not plan.ok
        assert plan.records == ()
        assert plan.api_key is None
        assert plan.message == "That file wasn't valid JSON."

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_json_constants_are_invalid(self, literal: str) -> None:
        plan = parse_import_text(f'{{"items": [{{"title": "A", "number": {literal}}}]}}')

        assert plan.status == ImportStatus.INVALID_JSON
        assert plan.records == ()

    def test_deep_nesting_is_invalid(self) -> None:
        depth = 100_000

        plan = parse_import_text("[" * depth + "]" * depth)

        assert plan.status == ImportStatus.INVALID_JSON
        assert plan.message == "That file wasn't valid JSON."

    def test_unclosed_deep_nesting_is_invalid(self) -> None:
        assert parse_import_text("[" * 100_000).status == ImportStatus.INVALID_JSON

    @pytest.mark.parametrize(
        "text",
        [
            "{}",
            '{"items": "nope"}',
            '{"items": {"title": "A"}}',
            '"just a string"',
            "42",
            "null",
        ],
    )
    def test_missing_items_array(self, text: str) -> None:
        plan = parse_import_text(text)

        assert plan.status == ImportStatus.MISSING_ITEMS
        assert plan.message == "JSON didn't contain a valid 'items' array."

    def test_missing_items_ignores_api_key(self) -> None:
        plan = parse_import_text('{"apiKey": "booker_abc"}')

        assert plan.status == ImportStatus.MISSING_ITEMS
        assert plan.api_key is None

    @pytest.mark.parametrize(
        "text",
        [
            "[]",
            '{"items": []}',
            '{"items": [1, "two", null, []]}',
            '{"items": [{}, {"title": "   "}, {"number": "abc"}]}',
        ],
    )
    def test_no_usable_items(self, text: str) -> None:
        plan = parse_import_text(text)

        assert plan.status == ImportStatus.NO_USABLE_ITEMS
        assert plan.message == "No usable items found in that JSON."
        assert plan.records == ()


class TestCleaning:
    def test_cleans_and_filters(self) -> None:
        text = '{"items":[{"title":" Foo "},{"number":"abc"},{}]}'

        plan = parse_import_text(text, now=NOW)

        assert plan.ok
        assert plan.count == 1
        assert plan.records[0].title == "Foo"
        assert plan.dropped == 2

    def test_bare_array_is_accepted(self) -> None:
        plan = parse_import_text('[{"title": "Dune"}]')

        assert plan.ok
        assert [r.title for r in plan.records] == ["Dune"]

    def test_non_object_elements_are_dropped(self) -> None:
        plan = parse_import_text('[1, "x", null, {"title": "Dune"}]')

        assert plan.count == 1
        assert plan.dropped == 3

    def test_numbers_are_coerced(self) -> None:
        plan = parse_import_text(
            '[{"title": "A", "number": "7", "year": 1965.0},'
            ' {"title": "B", "number": "x", "year": "Infinity"}]'
        )

        first, second = plan.records
        assert first.number == 7
        assert first.year == 1965
        assert isinstance(first.year, int)
        assert second.number is None
        assert second.year is None

    def test_null_numbers_stay_absent(self) -> None:
        plan = parse_import_text('[{"title": "A", "number": null, "year": null}]')

        assert plan.records[0].number is None
        assert plan.records[0].year is None

    def test_text_fields_are_trimmed_and_coerced(self) -> None:
        plan = parse_import_text('[{"title": 1984, "notes": "  great  "}]')

        record = plan.records[0]
        assert record.title == "1984"
        assert record.notes == "great"

    def test_number_alone_keeps_record(self) -> None:
        plan = parse_import_text('[{"number": 5}]')

        assert plan.count == 1
        assert plan.records[0].title == ""
        assert plan.records[0].number == 5

    def test_zero_number_keeps_record(self) -> None:
        plan = parse_import_text('[{"year": 0}]')

        assert plan.count == 1
        assert plan.records[0].year == 0

    def test_existing_id_and_timestamp_are_preserved(self) -> None:
        plan = parse_import_text(
            '[{"id": "keep-me", "title": "A", "createdAt": "2020-02-02T00:00:00.000Z"}]',
            now=NOW,
        )

        record = plan.records[0]
        assert record.id == "keep-me"
        assert record.created_at == "2020-02-02T00:00:00.000Z"

    def test_missing_id_and_timestamp_are_filled(self) -> None:
        plan = parse_import_text('[{"title": "A"}, {"title": "B", "id": ""}]', now=NOW)

        first, second = plan.records
        assert first.id
        assert second.id
        assert first.id != second.id
        assert first.created_at == NOW_ISO

    def test_unknown_fields_are_dropped(self) -> None:
        plan = parse_import_text('[{"title": "A", "rating": 5, "author": "X"}]')

        assert set(plan.records[0].to_dict()) == {
            "id",
            "number",
            "title",
            "year",
            "notes",
            "createdAt",
        }

    def test_snake_case_timestamp_key_is_dropped(self) -> None:
        plan = parse_import_text(
            '[{"title": "A", "created_at": "1999-01-01T00:00:00.000Z"}]',
            now=NOW,
        )

        assert plan.records[0].created_at == NOW_ISO


class TestApiKey:
    def test_envelope_api_key_is_carried(self) -> None:
        plan = parse_import_text('{"items": [{"title": "A"}], "apiKey": "booker_xyz"}')

        assert plan.api_key == "booker_xyz"

    @pytest.mark.parametrize("api_key", ["", 123, None, ["booker_xyz"]])
    def test_unusable_api_key_is_ignored(self, api_key) -> None:
        text = json.dumps({"items": [{"title": "A"}], "apiKey": api_key})

        assert parse_import_text(text).api_key is None

    def test_bare_array_has_no_api_key(self) -> None:
        assert parse_import_text('[{"title": "A"}]').api_key is None


class TestPlan:
    def test_ready_message_is_confirmation_prompt(self) -> None:
        plan = parse_import_text('[{"title": "A"}, {"title": "B"}]')

        assert plan.status == ImportStatus.READY
        assert plan.message.startswith("Import 2 item(s)?")
        assert "replaces your current list" in plan.message


class TestHelpers:
    def test_extract_items(self) -> None:
        assert extract_items([1]) == [1]
        assert extract_items({"items": [2]}) == [2]
        assert extract_items({"items": None}) is None
        assert extract_items("x") is None

    def test_extract_api_key(self) -> None:
        assert extract_api_key({"apiKey": "k"}) == "k"
        assert extract_api_key(["apiKey"]) is None

    def test_clean_items_skips_blank(self) -> None:
        records = clean_items([{"title": ""}, {"notes": "x"}], now=NOW)

        assert len(records) == 1
        assert records[0].notes == "x"

    def test_imported_record_accepts_alias(self) -> None:
        item = ImportedRecord.model_validate({"createdAt": "2020", "id": 0})

        assert item.created_at == "2020"
        assert item.id == ""

    def test_decode_json_rejects_constants(self) -> None:
        assert decode_json('{"a": 1.5}') == {"a": 1.5}
        with pytest.raises(ValueError):
            decode_json("[NaN]")
