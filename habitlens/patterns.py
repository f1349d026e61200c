"""
HabitLens — Pattern Analyzer  (habitlens/patterns.py)
=====================================================
Detects when a habit is usually tracked and how evenly.

Detected patterns:
  - Preferred time of day (5 buckets) and its share of all entries
  - Day-of-week distribution with the three busiest days
  - Interval regularity:  1 - variance / mean²  over gaps in hours
  - Recent consistency:   distinct days tracked in the last 7 days

Needs at least 3 entries.

Public API:
  analyze_patterns(entries, now=None) -> PatternResult
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from habitlens.ontology import (
    Insight,
    InsightType,
    Recommendation,
    Serializable,
    TimeSlot,
)
from habitlens.temporal import (
    DAY_NAMES,
    day_of_week_name,
    entries_within_days,
    interval_hours,
    mean_and_variance,
    resolve_now,
    round_half_up,
    sort_entries,
    time_of_day_bucket,
    unique_day_keys,
)
from habitlens.validation import parse_entries

MIN_ENTRIES = 3
REGULARITY_THRESHOLD = 0.6
CONSISTENT_DAYS = 5

_SLOT_LABELS = {
    TimeSlot.EARLY_MORNING: "early morning",
    TimeSlot.MORNING:       "morning",
    TimeSlot.AFTERNOON:     "afternoon",
    TimeSlot.EVENING:       "evening",
    TimeSlot.NIGHT:         "night",
}

_SLOT_RANGES = {
    TimeSlot.EARLY_MORNING: "Early Morning (5-8 AM)",
    TimeSlot.MORNING:       "Morning (8 AM-12 PM)",
    TimeSlot.AFTERNOON:     "Afternoon (12-5 PM)",
    TimeSlot.EVENING:       "Evening (5-9 PM)",
    TimeSlot.NIGHT:         "Night (9 PM-5 AM)",
}


# ──────────────────────────────────────────────
# DATA STRUCTURES
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class TimeOfDayPattern(Serializable):
    distribution:  dict[TimeSlot, int]
    most_frequent: TimeSlot
    confidence:    float


@dataclass(frozen=True)
class DayOfWeekPattern(Serializable):
    distribution:    dict[str, int]     # sunday-first
    top_days:        list[str]
    average_per_day: float


@dataclass(frozen=True)
class TrackingFrequency(Serializable):
    average_interval: float             # hours
    regularity:       float
    is_regular:       bool


@dataclass(frozen=True)
class OptimalTime(Serializable):
    time_slot:  TimeSlot
    message:    str
    confidence: float


@dataclass(frozen=True)
class RecentConsistency(Serializable):
    last_7_days_count: int
    consistency:       float
    is_consistent:     bool


@dataclass(frozen=True)
class PatternSet(Serializable):
    time_of_day:          TimeOfDayPattern
    day_of_week:          DayOfWeekPattern
    tracking_frequency:   TrackingFrequency
    optimal_times:        list[OptimalTime]
    consistency_patterns: RecentConsistency


@dataclass(frozen=True)
class PatternResult(Serializable):
    has_patterns:    bool
    patterns:        Optional[PatternSet] = None
    insights:        list[Insight] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)


# ──────────────────────────────────────────────
# DETECTORS
# ──────────────────────────────────────────────

def _time_of_day(entries) -> TimeOfDayPattern:
    distribution = {slot: 0 for slot in TimeSlot}
    for entry in entries:
        distribution[time_of_day_bucket(entry.instant)] += 1

    # ties go to the later bucket
    most_frequent = TimeSlot.EARLY_MORNING
    for slot, count in distribution.items():
        if count >= distribution[most_frequent]:
            most_frequent = slot

    return TimeOfDayPattern(
        distribution=distribution,
        most_frequent=most_frequent,
        confidence=distribution[most_frequent] / len(entries),
    )


def _day_of_week(entries) -> DayOfWeekPattern:
    distribution = {name: 0 for name in DAY_NAMES}
    for entry in entries:
        distribution[day_of_week_name(entry.instant)] += 1

    ranked = sorted(distribution.items(), key=lambda kv: -kv[1])
    return DayOfWeekPattern(
        distribution=distribution,
        top_days=[day for day, _ in ranked[:3]],
        average_per_day=len(entries) / 7,
    )


def _tracking_frequency(entries) -> TrackingFrequency:
    intervals = interval_hours(sort_entries(entries))
    mean, variance = mean_and_variance(intervals)
    regularity = max(0.0, 1 - variance / (mean * mean)) if mean > 0 else 0.0
    return TrackingFrequency(
        average_interval=mean,
        regularity=regularity,
        is_regular=regularity > REGULARITY_THRESHOLD,
    )


def _optimal_times(time_of_day: TimeOfDayPattern) -> list[OptimalTime]:
    if time_of_day.confidence <= 0.5:
        return []
    return [OptimalTime(
        time_slot=time_of_day.most_frequent,
        message=(
            "You're most consistent when tracking in the "
            f"{_SLOT_RANGES[time_of_day.most_frequent]}"
        ),
        confidence=time_of_day.confidence,
    )]


def _recent_consistency(entries, now: datetime) -> RecentConsistency:
    unique_days = len(unique_day_keys(entries_within_days(entries, 7, now)))
    return RecentConsistency(
        last_7_days_count=unique_days,
        consistency=min(unique_days / 7, 1.0),
        is_consistent=unique_days >= CONSISTENT_DAYS,
    )


# ──────────────────────────────────────────────
# OUTPUT
# ──────────────────────────────────────────────

def _insights(patterns: PatternSet) -> list[Insight]:
    insights = []
    tod = patterns.time_of_day

    if tod.confidence > 0.4:
        insights.append(Insight(
            type=InsightType.PATTERN,
            icon="time",
            message=(
                f"You typically track in the {_SLOT_LABELS[tod.most_frequent]} "
                f"({round_half_up(tod.confidence * 100)}% of the time)"
            ),
        ))

    if patterns.day_of_week.top_days:
        top_day = patterns.day_of_week.top_days[0]
        insights.append(Insight(
            type=InsightType.PATTERN,
            icon="calendar",
            message=f"Your most active tracking day is {top_day.capitalize()}",
        ))

    if patterns.tracking_frequency.is_regular:
        every = round_half_up(patterns.tracking_frequency.average_interval / 24)
        insights.append(Insight(
            type=InsightType.SUCCESS,
            icon="checkmark-circle",
            message=f"Great regularity! You track approximately every {every} days",
        ))

    if patterns.consistency_patterns.is_consistent:
        insights.append(Insight(
            type=InsightType.SUCCESS,
            icon="flame",
            message=(
                "Strong recent consistency: "
                f"{patterns.consistency_patterns.last_7_days_count} days tracked in the last week!"
            ),
        ))

    return insights


def _recommendations(patterns: PatternSet) -> list[Recommendation]:
    recommendations = []
    tod = patterns.time_of_day
    frequency = patterns.tracking_frequency

    if not patterns.consistency_patterns.is_consistent and tod.confidence > 0.3:
        recommendations.append(Recommendation(
            kind="routine",
            title="Establish a Routine",
            message=(
                "Try tracking at the same time each day. You've had success in the "
                f"{_SLOT_LABELS[tod.most_frequent]}."
            ),
            icon="alarm",
        ))

    if not frequency.is_regular and frequency.average_interval > 0:
        recommendations.append(Recommendation(
            kind="consistency",
            title="Improve Regularity",
            message=(
                "Try to maintain a more regular tracking schedule. "
                "Consistency helps build habits faster."
            ),
            icon="repeat",
        ))

    return recommendations


def analyze_patterns(entries, now: Optional[datetime] = None) -> PatternResult:
    entries = parse_entries(entries)
    if len(entries) < MIN_ENTRIES:
        return PatternResult(has_patterns=False)

    now = resolve_now(now)
    time_of_day = _time_of_day(entries)
    patterns = PatternSet(
        time_of_day=time_of_day,
        day_of_week=_day_of_week(entries),
        tracking_frequency=_tracking_frequency(entries),
        optimal_times=_optimal_times(time_of_day),
        consistency_patterns=_recent_consistency(entries, now),
    )

    return PatternResult(
        has_patterns=True,
        patterns=patterns,
        insights=_insights(patterns),
        recommendations=_recommendations(patterns),
    )
