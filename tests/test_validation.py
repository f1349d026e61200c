"""Tests for record validation and the error types."""

from datetime import date, datetime

import pytest

from conftest import NOW, daily_entries, make_entry

from habitlens.consistency import analyze_consistency
from habitlens.exceptions import HabitAnalysisError, MalformedInputError
from habitlens.schemas import Entry
from habitlens.validation import (
    parse_entries,
    parse_habits,
    validate_habit,
    validate_habit_description,
    validate_habit_name,
)


def test_parse_entries_non_list_yields_empty():
    assert parse_entries(None) == []
    assert parse_entries("entries") == []
    assert parse_entries({"id": "1"}) == []


def test_parse_entries_strict_rejects_non_list():
    with pytest.raises(MalformedInputError) as exc_info:
        parse_entries(None, strict=True)
    assert exc_info.value.field == "entries"


def test_parse_entries_skips_unusable_records():
    records = [
        {"id": 1, "habitId": 7, "createdAt": "2024-01-07T08:00:00"},
        {"id": "no-time", "habitId": "h1"},
        "not a record",
        {"id": "bad-time", "createdAt": "yesterday"},
    ]
    parsed = parse_entries(records)
    assert len(parsed) == 1
    assert parsed[0].id == "1"
    assert parsed[0].habit_id == "7"


def test_parse_entries_strict_reports_index():
    with pytest.raises(MalformedInputError) as exc_info:
        parse_entries([{"createdAt": "2024-01-07"}, {"id": "x"}], strict=True)
    assert exc_info.value.field == "entries[1]"
    assert exc_info.value.to_dict()["error_code"] == "MALFORMED_INPUT"


def test_entry_instant_falls_back_through_fields():
    assert Entry.model_validate({"timestamp": "2024-01-07T09:15:00"}).instant == \
        datetime(2024, 1, 7, 9, 15)
    assert Entry.model_validate({"date": "2024-01-07"}).instant == datetime(2024, 1, 7)


def test_entry_legacy_day_uses_stored_date():
    entry = Entry.model_validate({"date": "2024-01-06", "createdAt": "2024-01-07T00:30:00"})
    assert entry.day == date(2024, 1, 7)
    assert entry.legacy_day == date(2024, 1, 6)


def test_entry_reads_ai_data_aliases():
    entry = Entry.model_validate({
        "createdAt": "2024-01-07T08:00:00",
        "aiData": {"category": "food", "categoryName": "Food & Nutrition",
                   "confidence": 0.85, "tags": ["food & nutrition"]},
    })
    assert entry.ai_data.category_name == "Food & Nutrition"


def test_entry_tolerates_opaque_photo_and_loose_ai_data():
    entry = Entry.model_validate({
        "createdAt": "2024-01-07T08:00:00",
        "photo": {"uri": "file://photos/1.jpg", "width": 1080},
        "note": 42,
        "aiData": {"category": None, "confidence": None, "tags": None},
    })
    assert entry.photo == {"uri": "file://photos/1.jpg", "width": 1080}
    assert entry.note is None
    assert entry.ai_data.confidence == 0.0
    assert entry.ai_data.tags == []


def test_unreadable_ai_data_is_discarded():
    entry = Entry.model_validate({"createdAt": "2024-01-07T08:00:00", "aiData": "fitness"})
    assert entry.ai_data is None


def test_metadata_shapes_never_drop_entries():
    entries = [
        {**record, "photo": {"uri": "file://x"}}
        for record in daily_entries(datetime(2024, 1, 1, 8), 7)
    ]
    entries.append(make_entry(datetime(2024, 1, 7, 12), aiData={"confidence": None, "tags": None}))

    assert len(parse_entries(entries)) == 8
    result = analyze_consistency(entries, now=NOW)
    assert result.metrics.days_with_entries == 7


def test_parse_habits_drops_records_without_id():
    habits = parse_habits([{"id": "h1", "name": "Read"}, {"name": "No id"}, {"id": ""}])
    assert [h.id for h in habits] == ["h1"]


def test_habit_name_rules():
    assert validate_habit_name("") == "Habit name is required"
    assert validate_habit_name("   ") == "Habit name is required"
    assert validate_habit_name("a") == "Habit name must be at least 2 characters"
    assert validate_habit_name("x" * 51) == "Habit name must be less than 50 characters"
    assert validate_habit_name("Read") is None


def test_habit_description_rule():
    assert validate_habit_description(None) is None
    assert validate_habit_description("x" * 201) == "Description must be less than 200 characters"


def test_validate_habit_strips_name():
    habit = validate_habit({"id": "h1", "name": "  Read  "})
    assert habit.name == "Read"


def test_validate_habit_raises_with_field():
    with pytest.raises(MalformedInputError) as exc_info:
        validate_habit({"id": "h1", "name": "a"})
    assert exc_info.value.field == "name"

    with pytest.raises(MalformedInputError) as exc_info:
        validate_habit({"name": "Read"})
    assert exc_info.value.field == "id"


def test_habit_analysis_error_payload():
    error = HabitAnalysisError("h1", ValueError("boom"))
    payload = error.to_dict()
    assert payload["success"] is False
    assert payload["error_code"] == "HABIT_ANALYSIS_FAILED"
    assert payload["details"] == {"habit_id": "h1", "cause": "ValueError"}
