"""
HabitLens — Trend Engine  (habitlens/trend_engine.py)
=====================================================
Week-over-week and month-over-month view of one habit's entry history.

Detected trends:
  - Overall direction: entries per day in the older half of the history
    vs the newer half (each half over its own calendar span)
  - Weekly: four trailing 7-day windows, oldest first
  - Monthly: the last three calendar months
  - Momentum: last 7 days vs the 7 days before, normalized to 0..1
  - Period comparison: this calendar week (Sunday start) vs last week

Needs at least 4 entries; the overall direction needs 7 and momentum 14.

Public API:
  analyze_trends(entries, now=None) -> TrendResult
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from habitlens.ontology import (
    Insight,
    InsightType,
    MomentumLevel,
    Serializable,
    TrendDirection,
)
from habitlens.temporal import (
    MONTH_ABBREVIATIONS,
    clamp,
    day_of_week_index,
    entries_between_days_ago,
    entries_within_days,
    resolve_now,
    round_half_up,
    sort_entries,
    span_days,
    start_of_day,
    unique_day_keys,
)
from habitlens.validation import parse_entries

MIN_ENTRIES = 4
MIN_ENTRIES_OVERALL = 7
MIN_ENTRIES_MOMENTUM = 14
DIRECTION_THRESHOLD = 0.1
WEEKS_TRACKED = 4
MONTHS_TRACKED = 3


# ──────────────────────────────────────────────
# DATA STRUCTURES
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class OverallTrend(Serializable):
    direction:        TrendDirection
    strength:         float
    description:      str
    first_half_rate:  Optional[float] = None
    second_half_rate: Optional[float] = None


@dataclass(frozen=True)
class WeekBucket(Serializable):
    week:        int                # 1 = most recent window
    start:       datetime
    count:       int
    unique_days: int


@dataclass(frozen=True)
class WeeklyTrend(Serializable):
    weeks:            list[WeekBucket]
    trend:            int
    trend_percent:    float
    is_improving:     bool
    average_per_week: float


@dataclass(frozen=True)
class MonthBucket(Serializable):
    month:       str                # "Jan 2024"
    count:       int
    unique_days: int


@dataclass(frozen=True)
class MonthlyTrend(Serializable):
    months:            list[MonthBucket]
    average_per_month: float


@dataclass(frozen=True)
class Momentum(Serializable):
    score:       float
    level:       MomentumLevel
    description: str = "Momentum is neutral"
    change:      int = 0


@dataclass(frozen=True)
class PeriodComparison(Serializable):
    this_week:      int
    last_week:      int
    change:         int
    change_percent: float
    is_better:      bool


@dataclass(frozen=True)
class TrendSet(Serializable):
    overall:    OverallTrend
    weekly:     WeeklyTrend
    monthly:    MonthlyTrend
    momentum:   Momentum
    comparison: PeriodComparison


@dataclass(frozen=True)
class TrendResult(Serializable):
    has_trends: bool
    trends:     Optional[TrendSet] = None
    insights:   list[Insight] = field(default_factory=list)
    forecasts:  list[Insight] = field(default_factory=list)


# ──────────────────────────────────────────────
# HELPERS
# ──────────────────────────────────────────────

def _rate(half) -> float:
    """Entries per calendar day across one half of the history."""
    return len(half) / span_days(half[0].instant, half[-1].instant)


def _describe(direction: TrendDirection, strength: float) -> str:
    if direction is TrendDirection.STABLE:
        return "stable"
    if strength > 0.3:
        label = "strongly"
    elif strength > 0.15:
        label = ""
    else:
        label = "slightly"
    return f"{label} {direction.value}".strip()


def _month_start(now: datetime, months_back: int) -> datetime:
    index = now.year * 12 + (now.month - 1) - months_back
    return datetime(index // 12, index % 12 + 1, 1)


def _in_window(entries, start: datetime, end: Optional[datetime] = None):
    return [e for e in entries if e.instant >= start and (end is None or e.instant < end)]


# ──────────────────────────────────────────────
# CORE ANALYSIS
# ──────────────────────────────────────────────

def _overall(chron) -> OverallTrend:
    if len(chron) < MIN_ENTRIES_OVERALL:
        return OverallTrend(direction=TrendDirection.NEUTRAL, strength=0.0,
                            description="Need more data")

    midpoint = len(chron) // 2
    first_rate = _rate(chron[:midpoint])
    second_rate = _rate(chron[midpoint:])
    difference = second_rate - first_rate

    if difference > DIRECTION_THRESHOLD:
        direction = TrendDirection.IMPROVING
    elif difference < -DIRECTION_THRESHOLD:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE
    strength = abs(difference)

    return OverallTrend(
        direction=direction,
        strength=strength,
        description=_describe(direction, strength),
        first_half_rate=first_rate,
        second_half_rate=second_rate,
    )


def _weekly(chron, now: datetime) -> WeeklyTrend:
    weeks: list[WeekBucket] = []
    for i in range(WEEKS_TRACKED):
        start = start_of_day(now - timedelta(days=7 * (i + 1)))
        window = _in_window(chron, start, start + timedelta(days=7))
        weeks.insert(0, WeekBucket(
            week=i + 1,
            start=start,
            count=len(window),
            unique_days=len(unique_day_keys(window)),
        ))

    previous, latest = weeks[-2], weeks[-1]
    trend = latest.count - previous.count
    return WeeklyTrend(
        weeks=weeks,
        trend=trend,
        trend_percent=(trend / previous.count) * 100 if previous.count > 0 else 0.0,
        is_improving=trend > 0,
        average_per_week=sum(w.count for w in weeks) / len(weeks),
    )


def _monthly(chron, now: datetime) -> MonthlyTrend:
    months: list[MonthBucket] = []
    for i in range(MONTHS_TRACKED):
        start = _month_start(now, i)
        window = _in_window(chron, start, _month_start(now, i - 1))
        months.insert(0, MonthBucket(
            month=f"{MONTH_ABBREVIATIONS[start.month - 1]} {start.year}",
            count=len(window),
            unique_days=len(unique_day_keys(window)),
        ))

    return MonthlyTrend(
        months=months,
        average_per_month=sum(m.count for m in months) / len(months),
    )


def _momentum(chron, now: datetime) -> Momentum:
    if len(chron) < MIN_ENTRIES_MOMENTUM:
        return Momentum(score=0.5, level=MomentumLevel.NEUTRAL)

    this_week = len(entries_within_days(chron, 7, now))
    last_week = len(entries_between_days_ago(chron, 7, 14, now))
    change = this_week - last_week
    score = clamp(0.5 + (change / 7) / 2)

    if score > 0.7:
        level = MomentumLevel.STRONG
    elif score > 0.6:
        level = MomentumLevel.POSITIVE
    elif score < 0.3:
        level = MomentumLevel.WEAK
    elif score < 0.4:
        level = MomentumLevel.NEGATIVE
    else:
        level = MomentumLevel.NEUTRAL

    return Momentum(score=score, level=level,
                    description=f"Momentum is {level.value}", change=change)


def _compare_periods(chron, now: datetime) -> PeriodComparison:
    this_week_start = start_of_day(now - timedelta(days=day_of_week_index(now)))
    last_week_start = this_week_start - timedelta(days=7)

    this_week = len(_in_window(chron, this_week_start))
    last_week = len(_in_window(chron, last_week_start, this_week_start))
    change = this_week - last_week

    return PeriodComparison(
        this_week=this_week,
        last_week=last_week,
        change=change,
        change_percent=(change / last_week) * 100 if last_week > 0 else 0.0,
        is_better=change > 0,
    )


# ──────────────────────────────────────────────
# OUTPUT
# ──────────────────────────────────────────────

def _insights(trends: TrendSet) -> list[Insight]:
    insights = []
    overall = trends.overall

    if overall.direction is not TrendDirection.NEUTRAL:
        if overall.direction is TrendDirection.IMPROVING:
            kind, icon = InsightType.SUCCESS, "trending-up"
        elif overall.direction is TrendDirection.DECLINING:
            kind, icon = InsightType.WARNING, "trending-down"
        else:
            kind, icon = InsightType.INFO, "remove"
        insights.append(Insight(type=kind, icon=icon,
                                message=f"Overall trend: {overall.description}"))

    comparison = trends.comparison
    if comparison.this_week > 0 or comparison.last_week > 0:
        if comparison.is_better:
            insights.append(Insight(
                type=InsightType.SUCCESS,
                icon="arrow-up",
                message=f"This week: {comparison.this_week} entries (+{comparison.change} vs last week)",
            ))
        elif comparison.change < 0:
            insights.append(Insight(
                type=InsightType.INFO,
                icon="arrow-down",
                message=f"This week: {comparison.this_week} entries ({comparison.change} vs last week)",
            ))

    momentum = trends.momentum
    if momentum.level is not MomentumLevel.NEUTRAL:
        insights.append(Insight(
            type=InsightType.SUCCESS if momentum.score > 0.5 else InsightType.WARNING,
            icon="speedometer",
            message=momentum.description,
        ))

    return insights


def _forecasts(trends: TrendSet) -> list[Insight]:
    average = trends.weekly.average_per_week
    if average <= 0:
        return []
    return [Insight(
        type=InsightType.PROJECTION,
        icon="calendar",
        message=(
            f"Based on your trend, you're on track for ~{round_half_up(average)} "
            "entries next week"
        ),
    )]


def analyze_trends(entries, now: Optional[datetime] = None) -> TrendResult:
    """
    Run the full trend pipeline on one habit's entries.

    Returns TrendResult(has_trends=False) for fewer than 4 entries.
    """
    entries = parse_entries(entries)
    if len(entries) < MIN_ENTRIES:
        return TrendResult(has_trends=False)

    now = resolve_now(now)
    chron = sort_entries(entries)
    trends = TrendSet(
        overall=_overall(chron),
        weekly=_weekly(chron, now),
        monthly=_monthly(chron, now),
        momentum=_momentum(chron, now),
        comparison=_compare_periods(chron, now),
    )

    return TrendResult(
        has_trends=True,
        trends=trends,
        insights=_insights(trends),
        forecasts=_forecasts(trends),
    )
