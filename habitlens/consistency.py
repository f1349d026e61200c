"""
HabitLens — Consistency Analyzer  (habitlens/consistency.py)
============================================================
Scores how regularly a habit has been tracked lately.

  score = frequency(last 7 entries / 7) * 0.6
        + recency(days since last entry, 7-day penalty) * 0.4

Fewer than two entries is treated optimistically: the result is the
"excellent / 1.0 / Keep going!" sentinel, not a low score.

Public API:
  analyze_consistency(entries, now=None) -> ConsistencyResult
  rate_consistency(score) -> ConsistencyRating
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from habitlens import config
from habitlens.ontology import ConsistencyRating, Serializable
from habitlens.temporal import (
    days_between,
    frequency_score,
    recency_score,
    recent_entries,
    resolve_now,
)
from habitlens.validation import parse_entries

RATING_MESSAGES = {
    ConsistencyRating.EXCELLENT: "Excellent consistency! You're building a strong habit.",
    ConsistencyRating.GOOD: "Good progress! Keep maintaining your streak.",
    ConsistencyRating.FAIR: "You're making progress. Try to be more consistent.",
    ConsistencyRating.NEEDS_IMPROVEMENT:
        "Try to be more consistent. Small daily actions lead to big results.",
}


@dataclass(frozen=True)
class ConsistencyMetrics(Serializable):
    days_with_entries:    int = 0
    days_since_last_entry: int = 0


@dataclass(frozen=True)
class ConsistencyResult(Serializable):
    score:    float
    rating:   ConsistencyRating
    message:  str
    insights: list[str] = field(default_factory=list)
    metrics:  ConsistencyMetrics = field(default_factory=ConsistencyMetrics)


def rate_consistency(score: float) -> ConsistencyRating:
    if score >= config.CONSISTENCY_EXCELLENT:
        return ConsistencyRating.EXCELLENT
    if score >= config.CONSISTENCY_GOOD:
        return ConsistencyRating.GOOD
    if score >= config.CONSISTENCY_FAIR:
        return ConsistencyRating.FAIR
    return ConsistencyRating.NEEDS_IMPROVEMENT


def _default_result() -> ConsistencyResult:
    return ConsistencyResult(score=1.0, rating=ConsistencyRating.EXCELLENT,
                             message="Keep going!")


def _insights(metrics: ConsistencyMetrics) -> list[str]:
    insights = []
    if metrics.days_since_last_entry > 2:
        insights.append(
            f"Last entry was {metrics.days_since_last_entry} days ago. "
            "Try to maintain daily consistency."
        )
    if metrics.days_with_entries < 4:
        insights.append(
            f"You've tracked {metrics.days_with_entries} days this week. "
            "Aim for daily tracking."
        )
    return insights


def analyze_consistency(entries, now: Optional[datetime] = None) -> ConsistencyResult:
    entries = parse_entries(entries)
    if len(entries) < 2:
        return _default_result()

    now = resolve_now(now)
    recent = recent_entries(entries, config.RECENT_ENTRIES_WINDOW)
    metrics = ConsistencyMetrics(
        days_with_entries=len(recent),
        days_since_last_entry=days_between(recent[0].instant, now),
    )

    score = (
        frequency_score(metrics.days_with_entries, config.WEEK_DAYS)
        * config.CONSISTENCY_FREQUENCY_WEIGHT
        + recency_score(metrics.days_since_last_entry, config.RECENCY_PENALTY_DAYS)
        * config.CONSISTENCY_RECENCY_WEIGHT
    )
    rating = rate_consistency(score)

    return ConsistencyResult(
        score=score,
        rating=rating,
        message=RATING_MESSAGES[rating],
        insights=_insights(metrics),
        metrics=metrics,
    )
