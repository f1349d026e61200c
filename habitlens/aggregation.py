"""
HabitLens — Cross-Habit Aggregation  (habitlens/aggregation.py)
===============================================================
Rolls per-habit insight bundles up into the dashboard view.

Pipeline:
    HabitInsight per habit (built by service.InsightService)
    → consistency / strength / trend / achievement / alert rollups
    → top performing + needing attention selections
    → overall motivation
    → DashboardInsights

Every function here is pure and takes the list of valid HabitInsight
bundles.  build_dashboard returns the empty dashboard for an empty list.

Public API:
  build_dashboard(insights) -> DashboardInsights
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from habitlens import config
from habitlens.achievements import Achievement, AchievementResult, UpcomingMilestone
from habitlens.consistency import ConsistencyResult, rate_consistency
from habitlens.motivation import MotivationMessage
from habitlens.ontology import (
    Alert,
    AlertType,
    ConsistencyRating,
    InsightType,
    Serializable,
    TrendDirection,
)
from habitlens.predictive import PredictionResult
from habitlens.schemas import Habit
from habitlens.strength import StrengthResult
from habitlens.temporal import round_half_up
from habitlens.trend_engine import TrendResult


# ══════════════════════════════════════════════
# DATA STRUCTURES
# ══════════════════════════════════════════════

@dataclass(frozen=True)
class HabitInsight(Serializable):
    """Everything the dashboard needs to know about one habit."""
    habit:        Habit
    consistency:  ConsistencyResult
    strength:     StrengthResult
    trends:       TrendResult
    achievements: AchievementResult
    predictions:  PredictionResult
    entry_count:  int


@dataclass(frozen=True)
class ConsistencyRollup(Serializable):
    average_score:   float
    rating:          ConsistencyRating
    excellent_count: int
    good_count:      int
    total_habits:    int
    message:         str


@dataclass(frozen=True)
class StrengthRollup(Serializable):
    average_strength:    float
    strong_habits_count: int
    total_habits:        int
    percentage:          int


@dataclass(frozen=True)
class TrendRollup(Serializable):
    improving_count:   int
    declining_count:   int
    stable_count:      int
    total_habits:      int
    overall_direction: TrendDirection


@dataclass(frozen=True)
class AchievementRollup(Serializable):
    total:    int
    recent:   list[Achievement] = field(default_factory=list)
    upcoming: list[UpcomingMilestone] = field(default_factory=list)


@dataclass(frozen=True)
class AlertRollup(Serializable):
    urgent:   list[Alert] = field(default_factory=list)
    warnings: list[Alert] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.urgent) + len(self.warnings)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "total": self.total}


@dataclass(frozen=True)
class RankedHabit(Serializable):
    habit:       Habit
    score:       float
    strength:    float
    consistency: float


@dataclass(frozen=True)
class AttentionHabit(Serializable):
    habit:            Habit
    consistency:      float
    strength:         float
    has_urgent_alert: bool


@dataclass(frozen=True)
class DashboardInsights(Serializable):
    overall_consistency:      Optional[ConsistencyRollup] = None
    overall_strength:         Optional[StrengthRollup] = None
    overall_trends:           Optional[TrendRollup] = None
    total_achievements:       Optional[AchievementRollup] = None
    risk_alerts:              Optional[AlertRollup] = None
    motivational_insight:     Optional[MotivationMessage] = None
    top_performing_habits:    list[RankedHabit] = field(default_factory=list)
    habits_needing_attention: list[AttentionHabit] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "DashboardInsights":
        return cls()


# ══════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════

def average(scores: list[float]) -> float:
    return sum(scores) / len(scores) if scores else 0.0


def count_in_range(scores: list[float], low: float, high: float = float("inf")) -> int:
    return sum(1 for s in scores if low <= s < high)


def _habits_phrase(count: int, verb_plural: str, verb_single: str) -> str:
    return f"{count} habit{'s ' + verb_plural if count > 1 else ' ' + verb_single}"


def consistency_message(rating: ConsistencyRating, excellent: int, good: int) -> str:
    if rating is ConsistencyRating.EXCELLENT:
        return f"Excellent! {_habits_phrase(excellent, 'are', 'is')} performing exceptionally well!"
    if rating is ConsistencyRating.GOOD:
        return f"Good consistency! {_habits_phrase(good + excellent, 'are', 'is')} on track."
    if rating is ConsistencyRating.FAIR:
        return "You're making progress. Focus on consistency to improve your habits."
    return "Focus on daily tracking to build stronger habits!"


def performance_score(insight: HabitInsight) -> float:
    return (insight.strength.score * config.PERFORMANCE_STRENGTH_WEIGHT
            + insight.consistency.score * config.PERFORMANCE_CONSISTENCY_WEIGHT)


def _has_alert(insight: HabitInsight, *types: AlertType) -> bool:
    return any(alert.type in types for alert in insight.predictions.alerts)


# ══════════════════════════════════════════════
# ROLLUPS
# ══════════════════════════════════════════════

def aggregate_consistency(insights: list[HabitInsight]) -> ConsistencyRollup:
    scores = [i.consistency.score for i in insights]
    average_score = average(scores)
    rating = rate_consistency(average_score)
    excellent = count_in_range(scores, config.CONSISTENCY_EXCELLENT)
    good = count_in_range(scores, config.CONSISTENCY_GOOD, config.CONSISTENCY_EXCELLENT)

    return ConsistencyRollup(
        average_score=average_score,
        rating=rating,
        excellent_count=excellent,
        good_count=good,
        total_habits=len(insights),
        message=consistency_message(rating, excellent, good),
    )


def aggregate_strength(insights: list[HabitInsight]) -> StrengthRollup:
    scores = [i.strength.score for i in insights]
    strong = count_in_range(scores, config.STRENGTH_STRONG)
    return StrengthRollup(
        average_strength=average(scores),
        strong_habits_count=strong,
        total_habits=len(insights),
        percentage=round_half_up(strong / len(insights) * 100) if insights else 0,
    )


def _is_improving(insight: HabitInsight) -> bool:
    trends = insight.trends.trends
    if trends is None:
        return False
    return trends.overall.direction is TrendDirection.IMPROVING or trends.comparison.is_better


def _is_declining(insight: HabitInsight) -> bool:
    trends = insight.trends.trends
    return trends is not None and trends.overall.direction is TrendDirection.DECLINING


def aggregate_trends(insights: list[HabitInsight]) -> TrendRollup:
    improving = sum(1 for i in insights if _is_improving(i))
    declining = sum(1 for i in insights if _is_declining(i))

    if improving > declining:
        direction = TrendDirection.IMPROVING
    elif declining > improving:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    return TrendRollup(
        improving_count=improving,
        declining_count=declining,
        # improving and declining can overlap
        stable_count=max(0, len(insights) - improving - declining),
        total_habits=len(insights),
        overall_direction=direction,
    )


def _milestone_value(achievement: Achievement) -> int:
    return achievement.milestone if isinstance(achievement.milestone, int) else 0


def aggregate_achievements(insights: list[HabitInsight]) -> AchievementRollup:
    achievements = [a for i in insights for a in i.achievements.achievements]
    ranked = sorted(achievements, key=_milestone_value, reverse=True)
    return AchievementRollup(
        total=len(achievements),
        recent=ranked[:config.RECENT_ACHIEVEMENTS_LIMIT],
        upcoming=[m for i in insights for m in i.achievements.upcoming_milestones],
    )


def aggregate_alerts(insights: list[HabitInsight]) -> AlertRollup:
    tagged = [
        replace(alert, habit_name=insight.habit.name)
        for insight in insights
        for alert in insight.predictions.alerts
    ]
    return AlertRollup(
        urgent=[a for a in tagged if a.type is AlertType.URGENT],
        warnings=[a for a in tagged if a.type is AlertType.WARNING],
    )


# ══════════════════════════════════════════════
# SELECTIONS
# ══════════════════════════════════════════════

def top_performing_habits(insights: list[HabitInsight],
                          limit: int = config.TOP_PERFORMING_LIMIT) -> list[RankedHabit]:
    ranked = sorted(
        (RankedHabit(
            habit=i.habit,
            score=performance_score(i),
            strength=i.strength.score,
            consistency=i.consistency.score,
        ) for i in insights),
        key=lambda r: r.score,
        reverse=True,
    )
    return ranked[:limit]


def needs_attention(insight: HabitInsight) -> bool:
    return (
        _has_alert(insight, AlertType.URGENT, AlertType.WARNING)
        or insight.consistency.score < config.ATTENTION_LOW_CONSISTENCY
        or insight.strength.score < config.ATTENTION_LOW_STRENGTH
    )


def habits_needing_attention(insights: list[HabitInsight],
                             limit: int = config.NEEDING_ATTENTION_LIMIT) -> list[AttentionHabit]:
    flagged = [
        AttentionHabit(
            habit=i.habit,
            consistency=i.consistency.score,
            strength=i.strength.score,
            has_urgent_alert=_has_alert(i, AlertType.URGENT),
        )
        for i in insights
        if needs_attention(i)
    ]
    flagged.sort(key=lambda a: (not a.has_urgent_alert, a.consistency))
    return flagged[:limit]


def overall_motivation(insights: list[HabitInsight]) -> MotivationMessage:
    total_achievements = sum(i.achievements.total_achievements for i in insights)
    average_strength = average([i.strength.score for i in insights])
    excellent = sum(1 for i in insights
                    if i.consistency.score >= config.MOTIVATION_EXCELLENT_CONSISTENCY)

    if average_strength >= config.MOTIVATION_CELEBRATION_STRENGTH and total_achievements > 0:
        return MotivationMessage(
            message="You're doing amazing! Your habits are strong and consistent! 🎉",
            type=InsightType.CELEBRATION, icon="trophy",
        )
    if average_strength >= config.MOTIVATION_ENCOURAGEMENT_STRENGTH and excellent > 0:
        return MotivationMessage(
            message="Great progress! Keep building on your momentum! 💪",
            type=InsightType.ENCOURAGEMENT, icon="flame",
        )
    if average_strength >= config.MOTIVATION_ENCOURAGEMENT_STRENGTH:
        return MotivationMessage(
            message="Good work! Focus on consistency to make your habits even stronger! ⭐",
            type=InsightType.ENCOURAGEMENT, icon="star",
        )
    return MotivationMessage(
        message="Keep going! Consistency is the key to building strong habits! 🌱",
        type=InsightType.MOTIVATION, icon="leaf",
    )


def build_dashboard(insights: list[HabitInsight]) -> DashboardInsights:
    if not insights:
        return DashboardInsights.empty()

    return DashboardInsights(
        overall_consistency=aggregate_consistency(insights),
        overall_strength=aggregate_strength(insights),
        overall_trends=aggregate_trends(insights),
        total_achievements=aggregate_achievements(insights),
        risk_alerts=aggregate_alerts(insights),
        motivational_insight=overall_motivation(insights),
        top_performing_habits=top_performing_habits(insights),
        habits_needing_attention=habits_needing_attention(insights),
    )
