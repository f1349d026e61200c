"""Tests for the per-habit consistency, progress, pattern and strength analyzers, and their purity."""

from datetime import datetime

import pytest

from conftest import NOW, daily_entries, make_entry

from habitlens.consistency import analyze_consistency
from habitlens.ontology import ConsistencyRating, InsightType, StrengthLevel, TimeSlot
from habitlens.patterns import analyze_patterns
from habitlens.predictive import analyze_predictions
from habitlens.progress import analyze_progress
from habitlens.strength import analyze_strength
from habitlens.trend_engine import analyze_trends


# ============================================================================
# CONSISTENCY
# ============================================================================

def test_consistency_perfect_week(daily_week):
    """Seven daily entries ending today score a full 1.0."""
    result = analyze_consistency(daily_week, now=NOW)
    assert result.score == pytest.approx(1.0)
    assert result.rating is ConsistencyRating.EXCELLENT
    assert result.metrics.days_with_entries == 7
    assert result.metrics.days_since_last_entry == 0
    assert result.insights == []


def test_consistency_sentinel_for_short_history():
    result = analyze_consistency([make_entry(datetime(2023, 6, 1, 8))], now=NOW)
    assert result.score == 1.0
    assert result.rating is ConsistencyRating.EXCELLENT
    assert result.message == "Keep going!"


def test_consistency_stale_history(stale_pair):
    result = analyze_consistency(stale_pair, now=NOW)
    assert result.score == pytest.approx(2 / 7 * 0.6)
    assert result.rating is ConsistencyRating.NEEDS_IMPROVEMENT
    assert result.metrics.days_since_last_entry == 10
    assert len(result.insights) == 2


def test_consistency_ignores_malformed_input():
    assert analyze_consistency("garbage", now=NOW).message == "Keep going!"


# ============================================================================
# PROGRESS
# ============================================================================

def test_progress_empty():
    result = analyze_progress([], now=NOW)
    assert result.has_progress is False
    assert result.metrics is None


def test_progress_single_entry():
    result = analyze_progress([make_entry(datetime(2024, 1, 7, 8))], now=NOW)
    assert result.has_progress is True
    assert result.metrics.total_days == 1
    assert result.metrics.days_active == 1
    assert result.metrics.consistency_rate == 1.0
    assert result.insights[0].message == "Excellent consistency rate of 100%!"


def test_progress_three_weeks_daily():
    """21 daily entries reach the habit-formation milestone."""
    entries = daily_entries(datetime(2023, 12, 18, 8), 21)
    result = analyze_progress(entries, now=NOW)
    assert result.metrics.days_active == 21
    # equal counts in the last two weeks: no improvement call-out
    assert [i.type for i in result.insights] == [InsightType.MILESTONE, InsightType.SUCCESS]


def test_progress_sparse_tracking_gets_suggestion():
    entries = daily_entries(datetime(2023, 12, 20, 8), 7, step_days=3)
    result = analyze_progress(entries, now=NOW)
    assert result.metrics.days_active == 19
    assert [i.type for i in result.insights] == [InsightType.SUGGESTION]


def test_progress_improvement_when_last_week_busier():
    entries = daily_entries(datetime(2023, 12, 18, 8), 4, step_days=3)
    entries += daily_entries(datetime(2024, 1, 1, 8), 7)
    entries += daily_entries(datetime(2024, 1, 1, 19), 3)
    result = analyze_progress(entries, now=NOW)
    assert InsightType.IMPROVEMENT in [i.type for i in result.insights]


# ============================================================================
# PATTERNS
# ============================================================================

def test_patterns_need_three_entries():
    result = analyze_patterns(daily_entries(datetime(2024, 1, 6, 8), 2), now=NOW)
    assert result.has_patterns is False


def test_patterns_every_other_day(every_other_day):
    """Evenly spaced entries are perfectly regular."""
    result = analyze_patterns(every_other_day, now=NOW)
    patterns = result.patterns

    assert patterns.tracking_frequency.average_interval == pytest.approx(48.0)
    assert patterns.tracking_frequency.regularity == pytest.approx(1.0)
    assert patterns.tracking_frequency.is_regular is True
    assert patterns.time_of_day.most_frequent is TimeSlot.MORNING
    assert patterns.time_of_day.confidence == 1.0
    assert patterns.day_of_week.top_days == ["sunday", "wednesday", "friday"]
    assert patterns.consistency_patterns.last_7_days_count == 4
    assert patterns.consistency_patterns.is_consistent is False

    messages = [i.message for i in result.insights]
    assert "You typically track in the morning (100% of the time)" in messages
    assert "Your most active tracking day is Sunday" in messages
    assert "Great regularity! You track approximately every 2 days" in messages
    assert [r.kind for r in result.recommendations] == ["routine"]


def test_patterns_time_of_day_tie_goes_to_later_bucket():
    entries = [
        make_entry(datetime(2024, 1, 5, 9)),
        make_entry(datetime(2024, 1, 6, 18)),
        make_entry(datetime(2024, 1, 7, 10)),
        make_entry(datetime(2024, 1, 7, 19)),
    ]
    result = analyze_patterns(entries, now=NOW)
    assert result.patterns.time_of_day.most_frequent is TimeSlot.EVENING


def test_patterns_identical_timestamps_have_zero_regularity():
    entries = [make_entry(datetime(2024, 1, 7, 8), entry_id=str(i)) for i in range(3)]
    frequency = analyze_patterns(entries, now=NOW).patterns.tracking_frequency
    assert frequency.regularity == 0.0
    assert frequency.is_regular is False


# ============================================================================
# STRENGTH
# ============================================================================

def test_strength_empty():
    result = analyze_strength([], now=NOW)
    assert result.score == 0.0
    assert result.level is StrengthLevel.WEAK
    assert result.description == "Start tracking to build habit strength"


def test_strength_perfect_week(daily_week):
    result = analyze_strength(daily_week, now=NOW)
    expected = 0.25 + 0.20 * (6.5 / 90) + 0.30 + 0.15 + 0.10
    assert result.score == pytest.approx(expected)
    assert result.level is StrengthLevel.VERY_STRONG
    assert result.factors.stability == pytest.approx(1.0)
    assert result.insights[0].message == "Habit Strength: Very Strong (81%)"


def test_strength_stale_habit_is_weak(stale_pair):
    result = analyze_strength(stale_pair, now=NOW)
    assert result.level is StrengthLevel.WEAK
    assert result.factors.stability == 0.5
    assert "Track more recently to maintain habit strength" in [i.message for i in result.insights]


@pytest.mark.parametrize("fixture_name", ["daily_week", "stale_pair", "every_other_day"])
def test_scores_stay_in_unit_interval(request, fixture_name):
    entries = request.getfixturevalue(fixture_name)
    assert 0.0 <= analyze_consistency(entries, now=NOW).score <= 1.0
    strength = analyze_strength(entries, now=NOW)
    assert 0.0 <= strength.score <= 1.0
    for value in strength.factors.to_dict().values():
        assert 0.0 <= value <= 1.0


@pytest.mark.parametrize("analyzer", [
    analyze_consistency,
    analyze_progress,
    analyze_patterns,
    analyze_predictions,
    analyze_trends,
    analyze_strength,
])
@pytest.mark.parametrize("fixture_name", ["daily_week", "stale_pair", "every_other_day"])
def test_analyzers_are_repeatable(request, analyzer, fixture_name):
    entries = request.getfixturevalue(fixture_name)
    snapshot = [dict(e) for e in entries]

    first = analyzer(entries, now=NOW)
    second = analyzer(entries, now=NOW)

    assert first == second
    assert first.to_dict() == second.to_dict()
    assert entries == snapshot
