"""
HabitLens — Habit Strength Analyzer  (habitlens/strength.py)
============================================================
Composite 0..1 score of how ingrained a habit is, blended from five
factors (weights in config.STRENGTH_WEIGHTS):

  consistency  consistency analyzer score
  duration     days since the first entry, saturating at 90
  recency      tiered by hours since the last entry
  frequency    entries per day across the tracked span
  stability    interval variance over the 14 most recent entries

Public API:
  analyze_strength(entries, now=None) -> StrengthResult
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from habitlens import config
from habitlens.consistency import analyze_consistency
from habitlens.ontology import Insight, InsightType, Serializable, StrengthLevel
from habitlens.temporal import (
    clamp,
    days_ago,
    hours_ago,
    interval_hours,
    mean_and_variance,
    recent_entries,
    resolve_now,
    round_half_up,
    sort_entries,
)
from habitlens.validation import parse_entries

STABILITY_MIN_ENTRIES = 7
STABILITY_WINDOW = 14

_DESCRIPTIONS = {
    StrengthLevel.VERY_STRONG: "This habit is deeply ingrained and part of your routine!",
    StrengthLevel.STRONG:      "Great habit strength! You're maintaining it well.",
    StrengthLevel.MODERATE:    "Good progress! The habit is developing nicely.",
    StrengthLevel.DEVELOPING:  "The habit is forming. Keep up the consistency!",
    StrengthLevel.WEAK:        "Early stages. Focus on consistency to strengthen this habit.",
}

_ICONS = {
    StrengthLevel.VERY_STRONG: "diamond",
    StrengthLevel.STRONG:      "trophy",
    StrengthLevel.MODERATE:    "star",
    StrengthLevel.DEVELOPING:  "leaf",
    StrengthLevel.WEAK:        "seed",
}

_LABELS = {
    StrengthLevel.VERY_STRONG: "Very Strong",
    StrengthLevel.STRONG:      "Strong",
    StrengthLevel.MODERATE:    "Moderate",
    StrengthLevel.DEVELOPING:  "Developing",
    StrengthLevel.WEAK:        "Weak",
}


@dataclass(frozen=True)
class StrengthFactors(Serializable):
    consistency: float = 0.0
    duration:    float = 0.0
    recency:     float = 0.0
    frequency:   float = 0.0
    stability:   float = 0.0


@dataclass(frozen=True)
class StrengthResult(Serializable):
    score:       float
    level:       StrengthLevel
    factors:     StrengthFactors
    description: str
    insights:    list[Insight] = field(default_factory=list)


# ──────────────────────────────────────────────
# FACTORS  (chron = oldest first)
# ──────────────────────────────────────────────

def _duration(chron, now: datetime) -> float:
    return clamp(days_ago(chron[0].instant, now) / 90)


def _recency(chron, now: datetime) -> float:
    hours = hours_ago(chron[-1].instant, now)
    if hours <= 24:
        return 1.0
    if hours <= 48:
        return 0.75
    if hours <= 72:
        return 0.5
    if hours <= 168:
        return 0.25
    return max(0.0, 1 - hours / 336)


def _frequency(chron) -> float:
    if len(chron) < 2:
        return 0.3
    span = (chron[-1].instant - chron[0].instant).total_seconds() / 86400
    return min(len(chron) / max(1.0, span), 1.0)


def _stability(chron) -> float:
    if len(chron) < STABILITY_MIN_ENTRIES:
        return 0.5
    window = sort_entries(recent_entries(chron, STABILITY_WINDOW))
    mean, variance = mean_and_variance(interval_hours(window))
    # all entries at one instant: no interval signal either way
    if mean == 0:
        return 0.5
    return max(0.0, 1 - variance / (mean * mean * 2))


def strength_level(score: float) -> StrengthLevel:
    if score >= config.STRENGTH_VERY_STRONG:
        return StrengthLevel.VERY_STRONG
    if score >= config.STRENGTH_STRONG:
        return StrengthLevel.STRONG
    if score >= config.STRENGTH_MODERATE:
        return StrengthLevel.MODERATE
    if score >= config.STRENGTH_DEVELOPING:
        return StrengthLevel.DEVELOPING
    return StrengthLevel.WEAK


def _insights(factors: StrengthFactors, score: float, level: StrengthLevel) -> list[Insight]:
    insights = [Insight(
        type=InsightType.STRENGTH,
        icon=_ICONS[level],
        message=f"Habit Strength: {_LABELS[level]} ({round_half_up(score * 100)}%)",
    )]

    if factors.recency < 0.5:
        insights.append(Insight(type=InsightType.WARNING, icon="time",
                                message="Track more recently to maintain habit strength"))
    if factors.duration < 0.3 and score > 0.5:
        insights.append(Insight(type=InsightType.INFO, icon="calendar",
                                message="With more time, this habit will become even stronger"))
    if factors.stability < 0.5 and factors.frequency > 0.7:
        insights.append(Insight(type=InsightType.SUGGESTION, icon="repeat",
                                message="Try tracking at consistent times for better stability"))

    return insights


def analyze_strength(entries, now: Optional[datetime] = None) -> StrengthResult:
    entries = parse_entries(entries)
    if not entries:
        return StrengthResult(
            score=0.0,
            level=StrengthLevel.WEAK,
            factors=StrengthFactors(),
            description="Start tracking to build habit strength",
        )

    now = resolve_now(now)
    chron = sort_entries(entries)
    factors = StrengthFactors(
        consistency=analyze_consistency(entries, now=now).score,
        duration=_duration(chron, now),
        recency=_recency(chron, now),
        frequency=_frequency(chron),
        stability=_stability(chron),
    )

    weights = config.STRENGTH_WEIGHTS
    score = clamp(
        factors.consistency * weights["consistency"]
        + factors.duration * weights["duration"]
        + factors.recency * weights["recency"]
        + factors.frequency * weights["frequency"]
        + factors.stability * weights["stability"]
    )
    level = strength_level(score)

    return StrengthResult(
        score=score,
        level=level,
        factors=factors,
        description=_DESCRIPTIONS[level],
        insights=_insights(factors, score, level),
    )
