"""Tests for the keyword classifier and the habit suggestion catalogue."""

from datetime import datetime

import pytest

from conftest import NOW, make_entry

from habitlens.classifier import (
    build_ai_data,
    classify_habit_name,
    dominant_category,
    generate_tags,
)
from habitlens.habit_suggestions import POPULAR_HABITS, get_habit_suggestions


# ============================================================================
# CLASSIFIER
# ============================================================================

def test_classify_counts_keyword_matches():
    result = classify_habit_name("Morning workout at the gym")
    assert result.category == "fitness"
    assert result.category_name == "Fitness"
    assert result.confidence == pytest.approx(0.9)


def test_classify_first_matching_category_wins():
    result = classify_habit_name("Read a book")
    assert result.category == "reading"
    assert result.confidence == pytest.approx(0.85)


@pytest.mark.parametrize("name", ["Meditation", "", None, 42])
def test_classify_falls_back_to_other(name):
    result = classify_habit_name(name)
    assert result.category == "other"
    assert result.confidence == pytest.approx(0.6)


def test_classify_reports_every_category_deterministically():
    result = classify_habit_name("Cook dinner")
    scores = {c.id: c.confidence for c in result.all_categories}
    assert list(scores) == ["fitness", "food", "workspace", "reading", "outdoor", "other"]
    assert scores["food"] == pytest.approx(0.85)
    assert all(v == 0.0 for k, v in scores.items() if k != "food")


def test_generate_tags():
    assert generate_tags("food", datetime(2024, 1, 7, 8)) == ["food & nutrition", "morning", "sunday"]
    assert generate_tags("unknown", datetime(2024, 1, 8, 22)) == ["night", "monday"]


def test_build_ai_data():
    ai_data = build_ai_data("Morning running", datetime(2024, 1, 7, 8))
    assert ai_data.category == "fitness"
    assert ai_data.tags == ["fitness", "morning", "sunday"]
    assert ai_data.model_dump(by_alias=True)["categoryName"] == "Fitness"


def test_dominant_category_respects_confidence_floor():
    at = datetime(2024, 1, 7, 8)
    entries = [
        make_entry(at, entry_id="1", aiData={"category": "food", "confidence": 0.9}),
        make_entry(at, entry_id="2", aiData={"category": "food", "confidence": 0.9}),
        make_entry(at, entry_id="3", aiData={"category": "fitness", "confidence": 0.9}),
    ] + [
        make_entry(at, entry_id=f"low-{i}", aiData={"category": "reading", "confidence": 0.1})
        for i in range(3)
    ]
    assert dominant_category(entries) == "food"
    assert dominant_category([make_entry(at)]) is None


# ============================================================================
# HABIT SUGGESTIONS
# ============================================================================

def test_suggestions_without_habits_are_popular():
    suggestions = get_habit_suggestions([])
    assert len(suggestions) == 12
    assert [s.name for s in suggestions] == [h.name for h in POPULAR_HABITS[:12]]
    assert {s.reason for s in suggestions} == {"Popular"}


def test_suggestions_skip_existing_and_add_related():
    existing = [{"id": "1", "name": "Morning Exercise"}]
    names = [s.name for s in get_habit_suggestions(existing, limit=50)]

    assert "Morning Exercise" not in names
    assert "Yoga Session" in names
    assert "Strength Training" in names
    assert "Post-Workout Protein" in names
    assert len(names) == len({n.lower() for n in names})


def test_suggestions_prefer_attached_category():
    existing = [{"id": "1", "name": "Morning Exercise"}]
    entries = [
        make_entry(NOW, habit_id="1", aiData={"category": "reading", "confidence": 0.9}),
    ]
    names = [s.name for s in get_habit_suggestions(existing, entries=entries, limit=50)]
    assert "Audio Books" in names
    assert "Yoga Session" not in names


def test_suggestions_respect_limit():
    assert len(get_habit_suggestions([{"id": "1", "name": "Meditation"}], limit=5)) == 5
