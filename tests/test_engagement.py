"""Tests for achievements, motivation and per-habit suggestions."""

from datetime import datetime

import pytest

from conftest import NOW, daily_entries, make_entry

from habitlens.achievements import recognize_achievements
from habitlens.motivation import generate_motivation
from habitlens.ontology import AchievementType, InsightType, Rarity
from habitlens.suggestions import generate_suggestions


# ============================================================================
# ACHIEVEMENTS
# ============================================================================

def test_achievements_empty():
    result = recognize_achievements([], now=NOW)
    assert result.achievements == []
    assert result.upcoming_milestones == []
    assert result.total_achievements == 0


def test_achievements_perfect_week(daily_week):
    result = recognize_achievements(daily_week, now=NOW)
    earned = {(a.type, a.milestone) for a in result.achievements}

    assert result.current_streak == 7
    assert earned == {
        (AchievementType.DAYS, 1),
        (AchievementType.DAYS, 3),
        (AchievementType.DAYS, 7),
        (AchievementType.STREAK, 3),
        (AchievementType.STREAK, 7),
        (AchievementType.CONSISTENCY, "perfect_week"),
    }
    assert result.total_achievements == 6
    assert result.upcoming_milestones == []

    week = next(a for a in result.achievements if a.milestone == 7 and a.type is AchievementType.DAYS)
    assert week.title == "One Week Complete! ⭐"
    assert week.icon == "star"
    assert week.rarity is Rarity.COMMON


def test_achievements_upcoming_milestones():
    result = recognize_achievements(daily_entries(datetime(2024, 1, 3, 8), 5), now=NOW)
    upcoming = {(m.type, m.milestone): m for m in result.upcoming_milestones}

    days = upcoming[(AchievementType.DAYS, 7)]
    assert days.days_remaining == 2
    assert days.description == "Just 2 more days to reach 7 days!"

    streak = upcoming[(AchievementType.STREAK, 7)]
    assert streak.description == "Maintain your streak for 2 more days!"


def test_achievements_streak_broken_by_two_day_gap():
    entries = [
        make_entry(datetime(2024, 1, 1, 8)),
        make_entry(datetime(2024, 1, 2, 8)),
        make_entry(datetime(2024, 1, 3, 8)),
        make_entry(datetime(2024, 1, 6, 8)),
        make_entry(datetime(2024, 1, 7, 8)),
    ]
    result = recognize_achievements(entries, now=NOW)
    assert result.current_streak == 2
    assert AchievementType.STREAK not in {a.type for a in result.achievements}


def test_achievements_early_bird():
    entries = daily_entries(datetime(2023, 12, 29, 6, 30), 10)
    result = recognize_achievements(entries, now=NOW)
    assert "early_bird" in [a.milestone for a in result.achievements]
    assert "night_owl" not in [a.milestone for a in result.achievements]


def test_achievements_serialize_enum_values(daily_week):
    payload = recognize_achievements(daily_week, now=NOW).to_dict()
    assert payload["total_achievements"] == 6
    assert payload["achievements"][0]["type"] == "days"
    assert payload["achievements"][0]["rarity"] == "common"


def _day_milestones(result):
    return {a.milestone for a in result.achievements if a.type is AchievementType.DAYS}


@pytest.mark.parametrize("extra", [
    datetime(2024, 1, 7, 8),    # a new day
    datetime(2024, 1, 6, 19),   # a second photo on a tracked day
    datetime(2023, 11, 2, 8),   # a backfilled old day
])
def test_adding_an_entry_keeps_day_milestones(extra):
    entries = daily_entries(datetime(2024, 1, 1, 8), 6)
    before = recognize_achievements(entries, now=NOW)
    after = recognize_achievements(entries + [make_entry(extra)], now=NOW)
    assert _day_milestones(after) >= _day_milestones(before)


def test_adding_a_new_day_keeps_every_earned_milestone():
    entries = daily_entries(datetime(2024, 1, 1, 8), 6)
    before = recognize_achievements(entries, now=NOW)
    after = recognize_achievements(entries + [make_entry(datetime(2024, 1, 7, 8))], now=NOW)

    earned_before = {(a.type, a.milestone) for a in before.achievements}
    earned_after = {(a.type, a.milestone) for a in after.achievements}
    assert earned_after >= earned_before
    assert (AchievementType.DAYS, 7) in earned_after - earned_before


# ============================================================================
# MOTIVATION
# ============================================================================

def test_motivation_empty():
    result = generate_motivation([], now=NOW)
    assert result.primary.message == "Every journey begins with a single step. Start tracking today!"
    assert result.primary.icon == "rocket"
    assert result.secondary == []
    assert result.quotes == []


def test_motivation_perfect_week(daily_week):
    result = generate_motivation(daily_week, now=NOW)
    assert result.primary.message == "One week complete! Keep this momentum going! 💪"
    assert result.primary.type is InsightType.ENCOURAGEMENT
    assert [m.type for m in result.secondary] == [InsightType.SUCCESS, InsightType.CELEBRATION]
    assert result.secondary[1].message == "7-day streak! Your dedication is inspiring!"
    assert result.quotes[0].author == "Unknown"


def test_motivation_first_entry_today():
    result = generate_motivation([make_entry(datetime(2024, 1, 7, 8))], now=NOW)
    assert result.primary.icon == "sparkles"
    assert result.quotes[0].author == "Mark Twain"


def test_motivation_building_momentum():
    entries = daily_entries(datetime(2023, 12, 20, 8), 4, step_days=2)
    result = generate_motivation(entries, now=NOW)
    assert result.primary.icon == "leaf"
    assert [m.icon for m in result.secondary] == ["trending-up"]


# ============================================================================
# SUGGESTIONS
# ============================================================================

def test_suggestions_non_list_entries():
    assert generate_suggestions({"id": "h1", "name": "Read"}, None, now=NOW) == []


def test_suggestions_reminder_between_one_and_two_days():
    entries = [make_entry(datetime(2024, 1, 6, 14))]
    suggestions = generate_suggestions({"id": "h1", "name": "Read"}, entries, now=NOW)
    assert [s.kind for s in suggestions] == ["reminder"]
    assert '"Read"' in suggestions[0].message
    assert suggestions[0].action == "Capture now"


def test_suggestions_excellent_habit(daily_week):
    suggestions = generate_suggestions({"id": "h1", "name": "Read"}, daily_week, now=NOW)
    assert [s.kind for s in suggestions] == ["milestone"]


def test_suggestions_inconsistent_habit(stale_pair):
    suggestions = generate_suggestions({"id": "h2", "name": "Run"}, stale_pair, now=NOW)
    assert [s.kind for s in suggestions] == ["consistency"]
    assert suggestions[0].title == "Improve Consistency"
