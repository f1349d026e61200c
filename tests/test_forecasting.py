"""Tests for the predictive and trend analyzers."""

from datetime import datetime

import pytest

from conftest import NOW, daily_entries, make_entry

from habitlens.ontology import AlertType, InsightType, MomentumLevel, RiskLevel, TrendDirection
from habitlens.predictive import analyze_predictions
from habitlens.trend_engine import analyze_trends


# ============================================================================
# PREDICTIONS
# ============================================================================

def test_predictions_empty():
    result = analyze_predictions([], now=NOW)
    assert result.has_predictions is False
    assert result.alerts == []


def test_predictions_perfect_week(daily_week):
    result = analyze_predictions(daily_week, now=NOW)
    predictions = result.predictions

    assert predictions.streak_risk.level is RiskLevel.LOW
    assert predictions.streak_risk.average_interval_hours == pytest.approx(24.0)

    optimal = predictions.optimal_next_time
    assert optimal.hour == 8
    assert optimal.at == datetime(2024, 1, 8, 8, 0)
    assert optimal.confidence == 1.0

    success = predictions.success_probability
    assert success.probability == pytest.approx(0.5 + (6.5 / 30) * 0.3 + 0.2)
    assert success.message == "On track for success!"
    assert success.factors.trend is TrendDirection.IMPROVING

    assert predictions.potential_break_points == []
    assert result.alerts == []
    assert [s.kind for s in result.suggestions] == ["optimal_time"]
    assert "8:00 AM" in result.suggestions[0].message


def test_predictions_high_risk_alert_names_habit():
    entries = daily_entries(datetime(2024, 1, 2, 8), 3)
    result = analyze_predictions(entries, habit={"id": "h1", "name": "Read"}, now=NOW)

    assert result.predictions.streak_risk.level is RiskLevel.HIGH
    urgent = result.alerts[0]
    assert urgent.type is AlertType.URGENT
    assert urgent.title == "Streak at Risk"
    assert urgent.habit_name == "Read"
    assert "prevent_break" in [s.kind for s in result.suggestions]


def test_predictions_report_break_points():
    entries = [
        make_entry(datetime(2023, 12, 31, 8)),
        make_entry(datetime(2024, 1, 1, 8)),
        make_entry(datetime(2024, 1, 7, 8)),
    ]
    breaks = analyze_predictions(entries, now=NOW).predictions.potential_break_points
    assert len(breaks) == 1
    assert breaks[0].days == 6
    assert breaks[0].date == datetime(2024, 1, 1, 8)
    assert breaks[0].message == "There was a 6-day gap in tracking"


def test_predictions_single_entry_has_no_optimal_time():
    result = analyze_predictions([make_entry(datetime(2024, 1, 7, 8))], now=NOW)
    assert result.predictions.optimal_next_time is None
    assert result.predictions.success_probability.message == "Need more data"


# ============================================================================
# TRENDS
# ============================================================================

def test_trends_need_four_entries():
    assert analyze_trends(daily_entries(datetime(2024, 1, 5, 8), 3), now=NOW).has_trends is False


def test_trends_perfect_week(daily_week):
    result = analyze_trends(daily_week, now=NOW)
    trends = result.trends

    # evenly spaced halves have the same per-day rate
    assert trends.overall.direction is TrendDirection.STABLE
    assert trends.overall.first_half_rate == pytest.approx(1.0)
    assert trends.overall.second_half_rate == pytest.approx(1.0)
    assert trends.overall.description == "stable"

    # trailing windows end at midnight today, so today's entry is outside them
    assert [w.count for w in trends.weekly.weeks] == [0, 0, 0, 6]
    assert trends.weekly.average_per_week == 1.5

    assert [m.month for m in trends.monthly.months] == ["Nov 2023", "Dec 2023", "Jan 2024"]
    assert [m.count for m in trends.monthly.months] == [0, 0, 7]

    assert trends.momentum.level is MomentumLevel.NEUTRAL
    assert trends.comparison.this_week == 1
    assert trends.comparison.last_week == 6
    assert trends.comparison.is_better is False

    messages = [i.message for i in result.insights]
    assert "Overall trend: stable" in messages
    assert "This week: 1 entries (-5 vs last week)" in messages
    assert result.forecasts[0].type is InsightType.PROJECTION
    assert result.forecasts[0].message == \
        "Based on your trend, you're on track for ~2 entries next week"


def test_trends_detect_rate_increase():
    """Second half tracked daily after a sparse first half reads as improving."""
    entries = daily_entries(datetime(2023, 12, 1, 8), 4, step_days=3)
    entries += daily_entries(datetime(2024, 1, 4, 8), 4)
    overall = analyze_trends(entries, now=NOW).trends.overall

    assert overall.first_half_rate == pytest.approx(0.4)
    assert overall.second_half_rate == pytest.approx(1.0)
    assert overall.direction is TrendDirection.IMPROVING
    assert overall.description == "strongly improving"


def test_trends_overall_needs_seven_entries():
    overall = analyze_trends(daily_entries(datetime(2024, 1, 2, 8), 5), now=NOW).trends.overall
    assert overall.direction is TrendDirection.NEUTRAL
    assert overall.description == "Need more data"


def test_trends_momentum_over_two_weeks():
    entries = daily_entries(datetime(2023, 12, 25, 8), 14)
    entries += daily_entries(datetime(2024, 1, 4, 19), 2)
    momentum = analyze_trends(entries, now=NOW).trends.momentum

    # 9 entries in the last 7 days vs 7 in the week before
    assert momentum.change == 2
    assert momentum.score == pytest.approx(0.5 + (2 / 7) / 2)
    assert momentum.level is MomentumLevel.POSITIVE
