"""
HabitLens — Progress Analyzer  (habitlens/progress.py)
======================================================
Long-horizon participation: how many entries over how many calendar days,
plus milestone and improvement call-outs.

The improvement insight is one-directional: a busier last week is
celebrated, a quieter one produces nothing.

Public API:
  analyze_progress(entries, now=None) -> ProgressResult
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from habitlens import config
from habitlens.ontology import Insight, InsightType, Serializable
from habitlens.temporal import (
    entries_between_days_ago,
    entries_within_days,
    resolve_now,
    round_half_up,
    sort_entries,
    span_days,
)
from habitlens.validation import parse_entries


@dataclass(frozen=True)
class ProgressMetrics(Serializable):
    total_days:       int
    days_active:      int
    consistency_rate: float


@dataclass(frozen=True)
class ProgressResult(Serializable):
    has_progress: bool
    metrics:      Optional[ProgressMetrics] = None
    insights:     list[Insight] = field(default_factory=list)


def _improvement_insight(entries, now: datetime) -> Optional[Insight]:
    recent = len(entries_within_days(entries, config.WEEK_DAYS, now))
    previous = len(entries_between_days_ago(entries, config.WEEK_DAYS,
                                            config.WEEK_DAYS * 2, now))
    if recent > previous:
        return Insight(
            type=InsightType.IMPROVEMENT,
            message="Great improvement! You're tracking more frequently than before.",
            icon="trending-up",
        )
    return None


def analyze_progress(entries, now: Optional[datetime] = None) -> ProgressResult:
    entries = parse_entries(entries)
    if not entries:
        return ProgressResult(has_progress=False)

    now = resolve_now(now)
    chron = sort_entries(entries)
    total_days = len(chron)
    days_active = span_days(chron[0].instant, chron[-1].instant)
    metrics = ProgressMetrics(
        total_days=total_days,
        days_active=days_active,
        consistency_rate=total_days / max(days_active, 1),
    )

    insights: list[Insight] = []
    if total_days >= config.HABIT_FORMATION_DAYS:
        insights.append(Insight(
            type=InsightType.MILESTONE,
            message=(
                f"You've been tracking for {total_days} days! Research shows it takes "
                f"{config.HABIT_FORMATION_DAYS} days to form a habit - you're well on your way!"
            ),
            icon="trophy",
        ))

    if metrics.consistency_rate >= 0.8:
        insights.append(Insight(
            type=InsightType.SUCCESS,
            message=f"Excellent consistency rate of {round_half_up(metrics.consistency_rate * 100)}%!",
            icon="star",
        ))
    elif total_days >= 7 and metrics.consistency_rate < config.MIN_CONSISTENCY_RATE:
        insights.append(Insight(
            type=InsightType.SUGGESTION,
            message="Try to track more consistently. Setting a daily reminder can help!",
            icon="bulb",
        ))

    if total_days >= config.MIN_ENTRIES_FOR_TREND:
        improvement = _improvement_insight(chron, now)
        if improvement:
            insights.append(improvement)

    return ProgressResult(has_progress=True, metrics=metrics, insights=insights)
