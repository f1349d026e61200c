"""
HabitLens — Predictive Analyzer  (habitlens/predictive.py)
==========================================================
Looks forward from the entry history:

  - Streak risk        time since the last entry vs the usual interval
  - Optimal next time  next occurrence of the modal tracking hour
  - Success odds       recent consistency, habit age and weekly trend
  - Break points       historic gaps longer than two days

and turns those into alerts (urgent / warning / info) and nudges.

Public API:
  analyze_predictions(entries, habit=None, now=None) -> PredictionResult
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from habitlens.ontology import (
    Alert,
    AlertType,
    Recommendation,
    RiskLevel,
    Serializable,
    TrendDirection,
)
from habitlens.temporal import (
    clamp,
    days_ago,
    days_between,
    entries_between_days_ago,
    entries_within_days,
    hours_between,
    resolve_now,
    sort_entries,
    unique_day_keys,
)
from habitlens.validation import parse_entries, parse_habit

RISK_GAP_WINDOW = 7
OPTIMAL_HOUR_SAMPLE = 14
BREAK_POINT_WINDOW = 14
DEFAULT_INTERVAL_HOURS = 24.0


# ──────────────────────────────────────────────
# DATA STRUCTURES
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class StreakRisk(Serializable):
    level:                  RiskLevel
    score:                  float
    message:                str
    hours_since_last_entry: float
    days_since_last_entry:  int
    average_interval_hours: float


@dataclass(frozen=True)
class OptimalNextTime(Serializable):
    hour:       int
    at:         datetime
    confidence: float


@dataclass(frozen=True)
class SuccessFactors(Serializable):
    recent_consistency: float
    duration:           float           # days since the first entry
    trend:              TrendDirection


@dataclass(frozen=True)
class SuccessProbability(Serializable):
    probability: float
    confidence:  float
    message:     str
    factors:     Optional[SuccessFactors] = None


@dataclass(frozen=True)
class BreakPoint(Serializable):
    days:    int
    date:    datetime
    message: str


@dataclass(frozen=True)
class PredictionSet(Serializable):
    streak_risk:            StreakRisk
    optimal_next_time:      Optional[OptimalNextTime]
    success_probability:    SuccessProbability
    potential_break_points: list[BreakPoint]


@dataclass(frozen=True)
class PredictionResult(Serializable):
    has_predictions: bool
    predictions:     Optional[PredictionSet] = None
    alerts:          list[Alert] = field(default_factory=list)
    suggestions:     list[Recommendation] = field(default_factory=list)


# ──────────────────────────────────────────────
# PREDICTORS  (all take entries newest-first)
# ──────────────────────────────────────────────

def _streak_risk(newest_first, now: datetime) -> StreakRisk:
    last = newest_first[0].instant
    hours_since = hours_between(last, now)
    days_since = days_between(last, now)

    average_interval = DEFAULT_INTERVAL_HOURS
    gaps = [
        hours_between(newest_first[i + 1].instant, newest_first[i].instant)
        for i in range(min(RISK_GAP_WINDOW, len(newest_first) - 1))
    ]
    if gaps:
        average_interval = sum(gaps) / len(gaps)

    if days_since >= 2:
        level, score = RiskLevel.HIGH, 0.9
        message = "Streak is at high risk - track now to maintain it!"
    elif hours_since > average_interval * 1.5:
        level, score = RiskLevel.MEDIUM, 0.6
        message = "You're past your usual tracking time - consider tracking soon"
    elif hours_since > 36:
        level, score = RiskLevel.MEDIUM, 0.5
        message = "Reminder: It's been over 36 hours since your last entry"
    else:
        level, score = RiskLevel.LOW, 0.2
        message = "Streak is safe"

    return StreakRisk(
        level=level,
        score=score,
        message=message,
        hours_since_last_entry=hours_since,
        days_since_last_entry=days_since,
        average_interval_hours=average_interval,
    )


def _optimal_next_time(newest_first, now: datetime) -> Optional[OptimalNextTime]:
    if len(newest_first) < 2:
        return None

    hours = [e.instant.hour for e in newest_first[:OPTIMAL_HOUR_SAMPLE]]
    # ties go to the later hour
    hour, count = max(Counter(hours).items(), key=lambda kv: (kv[1], kv[0]))

    at = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if at <= now:
        at += timedelta(days=1)

    return OptimalNextTime(hour=hour, at=at, confidence=count / len(hours))


def _success_probability(newest_first, now: datetime) -> SuccessProbability:
    if len(newest_first) < 3:
        return SuccessProbability(probability=0.5, confidence=0.3, message="Need more data")

    last_week = entries_within_days(newest_first, 7, now)
    recent_consistency = min(len(unique_day_keys(last_week)) / 7, 1.0)

    days_since_first = days_ago(newest_first[-1].instant, now)
    duration_factor = clamp(days_since_first / 30)

    previous_week = entries_between_days_ago(newest_first, 7, 14, now)
    improving = len(last_week) >= len(previous_week)
    trend_factor = 1.0 if improving else 0.7

    probability = recent_consistency * 0.5 + duration_factor * 0.3 + trend_factor * 0.2

    if probability < 0.4:
        message = "Need to improve consistency to succeed"
    elif probability < 0.7:
        message = "Good progress, keep it up!"
    else:
        message = "On track for success!"

    return SuccessProbability(
        probability=probability,
        confidence=min(len(newest_first) / 20, 1.0),
        message=message,
        factors=SuccessFactors(
            recent_consistency=recent_consistency,
            duration=days_since_first,
            trend=TrendDirection.IMPROVING if improving else TrendDirection.DECLINING,
        ),
    )


def _break_points(newest_first) -> list[BreakPoint]:
    warnings = []
    for i in range(min(len(newest_first) - 1, BREAK_POINT_WINDOW)):
        newer, older = newest_first[i].instant, newest_first[i + 1].instant
        gap = days_between(newer, older)
        if gap > 2:
            warnings.append(BreakPoint(
                days=gap,
                date=older,
                message=f"There was a {gap}-day gap in tracking",
            ))
    return warnings


# ──────────────────────────────────────────────
# OUTPUT
# ──────────────────────────────────────────────

def _format_hour(at: datetime) -> str:
    """'8:00 AM' style clock label."""
    hour12 = at.hour % 12 or 12
    suffix = "AM" if at.hour < 12 else "PM"
    return f"{hour12}:{at.minute:02d} {suffix}"


def _alerts(predictions: PredictionSet, entry_count: int,
            habit_name: Optional[str]) -> list[Alert]:
    alerts = []
    risk = predictions.streak_risk

    if risk.level is RiskLevel.HIGH:
        alerts.append(Alert(type=AlertType.URGENT, icon="warning", title="Streak at Risk",
                            message=risk.message, action="Track now", habit_name=habit_name))
    elif risk.level is RiskLevel.MEDIUM:
        alerts.append(Alert(type=AlertType.WARNING, icon="alert-circle", title="Reminder",
                            message=risk.message, action="Track soon", habit_name=habit_name))

    success = predictions.success_probability
    if success.probability < 0.4 and entry_count >= 7:
        alerts.append(Alert(type=AlertType.INFO, icon="information-circle",
                            title="Consistency Needed", message=success.message,
                            action="View tips", habit_name=habit_name))

    return alerts


def _suggestions(predictions: PredictionSet) -> list[Recommendation]:
    suggestions = []
    optimal = predictions.optimal_next_time

    if optimal and optimal.confidence > 0.3:
        suggestions.append(Recommendation(
            kind="optimal_time",
            icon="time",
            title="Best Time to Track",
            message=(
                f"Based on your patterns, try tracking around {_format_hour(optimal.at)} "
                "for better consistency"
            ),
        ))

    if predictions.streak_risk.level in (RiskLevel.MEDIUM, RiskLevel.HIGH):
        suggestions.append(Recommendation(
            kind="prevent_break",
            icon="shield-checkmark",
            title="Protect Your Streak",
            message="Track now to prevent breaking your streak and maintain momentum",
        ))

    return suggestions


def analyze_predictions(entries, habit=None, now: Optional[datetime] = None) -> PredictionResult:
    entries = parse_entries(entries)
    if not entries:
        return PredictionResult(has_predictions=False)

    now = resolve_now(now)
    newest_first = sort_entries(entries, newest_first=True)
    predictions = PredictionSet(
        streak_risk=_streak_risk(newest_first, now),
        optimal_next_time=_optimal_next_time(newest_first, now),
        success_probability=_success_probability(newest_first, now),
        potential_break_points=_break_points(newest_first),
    )

    parsed_habit = parse_habit(habit)
    habit_name = parsed_habit.name if parsed_habit else None

    return PredictionResult(
        has_predictions=True,
        predictions=predictions,
        alerts=_alerts(predictions, len(entries), habit_name),
        suggestions=_suggestions(predictions),
    )
