"""
Plain dashboard statistics for HabitLens.

Chart and counter data computed straight from the stored records,
without the insight analyzers.  Entries are grouped by their stored
`date` key (Entry.legacy_day) and streaks are strict: a single missed
day ends them.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from habitlens.ontology import Serializable
from habitlens.schemas import Entry, Habit
from habitlens.temporal import (
    DAY_ABBREVIATIONS,
    day_of_week_index,
    resolve_now,
    round_half_up,
    streak_for_entries,
)
from habitlens.validation import parse_entries, parse_habits

logger = logging.getLogger(__name__)

COMPLETION_WINDOW_DAYS = 30


@dataclass(frozen=True)
class OverallStats(Serializable):
    total_habits:    int
    total_entries:   int
    total_streaks:   int
    average_streak:  int
    completion_rate: int


@dataclass(frozen=True)
class DailyCount(Serializable):
    date:  date
    day:   str
    count: int


@dataclass(frozen=True)
class HabitShare(Serializable):
    id:         str
    name:       str
    count:      int
    color:      Optional[str]
    percentage: int


@dataclass(frozen=True)
class WeekdayCount(Serializable):
    day:   str
    count: int


@dataclass(frozen=True)
class HabitRanking(Serializable):
    habit:         Habit
    streak:        int
    total_entries: int
    latest_entry:  Optional[Entry] = None


@dataclass(frozen=True)
class StreakStats(Serializable):
    current: int = 0
    longest: int = 0
    average: int = 0
    total:   int = 0


def _group_by_habit(entries: list[Entry]) -> dict[Optional[str], list[Entry]]:
    grouped = defaultdict(list)
    for entry in entries:
        grouped[entry.habit_id].append(entry)
    return grouped


def _legacy_streaks(habits: list[Habit], entries: list[Entry], now: datetime) -> list[int]:
    grouped = _group_by_habit(entries)
    return [
        streak_for_entries(grouped.get(habit.id, []), now, gap_tolerance=0, legacy_dates=True)
        for habit in habits
    ]


def _legacy_midnight(entry: Entry) -> datetime:
    return datetime.combine(entry.legacy_day, datetime.min.time())


def overall_stats(habits, entries, now: Optional[datetime] = None) -> OverallStats:
    """Headline counters across all habits.

    Args:
        habits: Habit records
        entries: Entry records for every habit
        now: Analysis clock (default: current time)

    Returns:
        OverallStats with the 30-day completion rate capped at 100
    """
    habits = parse_habits(habits)
    entries = parse_entries(entries)
    now = resolve_now(now)

    total_streaks = sum(_legacy_streaks(habits, entries, now))
    cutoff = now - timedelta(days=COMPLETION_WINDOW_DAYS)
    recent = [e for e in entries if _legacy_midnight(e) >= cutoff]

    if habits:
        average_streak = round_half_up(total_streaks / len(habits))
        completion_rate = round_half_up(len(recent) / (len(habits) * COMPLETION_WINDOW_DAYS) * 100)
    else:
        average_streak = completion_rate = 0

    return OverallStats(
        total_habits=len(habits),
        total_entries=len(entries),
        total_streaks=total_streaks,
        average_streak=average_streak,
        completion_rate=min(completion_rate, 100),
    )


def entries_over_time(entries, days: int = 30, now: Optional[datetime] = None) -> list[DailyCount]:
    """Per-day entry counts for the last `days` days, oldest first, today last."""
    entries = parse_entries(entries)
    today = resolve_now(now).date()
    counts = defaultdict(int)
    for entry in entries:
        counts[entry.legacy_day] += 1

    series = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        series.append(DailyCount(
            date=day,
            day=DAY_ABBREVIATIONS[day_of_week_index(day)],
            count=counts[day],
        ))
    return series


def habit_distribution(habits, entries) -> list[HabitShare]:
    """Entries per habit with their share of the total, largest first."""
    habits = parse_habits(habits)
    grouped = _group_by_habit(parse_entries(entries))
    counts = [(habit, len(grouped.get(habit.id, []))) for habit in habits]
    total = sum(count for _, count in counts)

    shares = [
        HabitShare(
            id=habit.id,
            name=habit.name,
            count=count,
            color=habit.color,
            percentage=round_half_up(count / total * 100) if total else 0,
        )
        for habit, count in counts
    ]
    return sorted(shares, key=lambda s: s.count, reverse=True)


def weekly_pattern(entries) -> list[WeekdayCount]:
    """Entry counts per weekday, Sunday first."""
    counts = [0] * 7
    for entry in parse_entries(entries):
        counts[day_of_week_index(entry.legacy_day)] += 1
    return [WeekdayCount(day=day, count=count) for day, count in zip(DAY_ABBREVIATIONS, counts)]


def top_habits(habits, entries, limit: int = 5, now: Optional[datetime] = None) -> list[HabitRanking]:
    """Habits ranked by current streak, then by total entries."""
    habits = parse_habits(habits)
    grouped = _group_by_habit(parse_entries(entries))
    now = resolve_now(now)

    rankings = []
    for habit in habits:
        habit_entries = grouped.get(habit.id, [])
        latest = max(habit_entries, key=lambda e: e.legacy_day, default=None)
        rankings.append(HabitRanking(
            habit=habit,
            streak=streak_for_entries(habit_entries, now, gap_tolerance=0, legacy_dates=True),
            total_entries=len(habit_entries),
            latest_entry=latest,
        ))

    rankings.sort(key=lambda r: (-r.streak, -r.total_entries))
    return rankings[:limit]


def streak_stats(habits, entries, now: Optional[datetime] = None) -> StreakStats:
    """Summary over habits with a live streak; all zeros when none has one."""
    habits = parse_habits(habits)
    streaks = [s for s in _legacy_streaks(habits, parse_entries(entries), resolve_now(now)) if s > 0]
    if not streaks:
        return StreakStats()

    return StreakStats(
        current=sum(streaks),
        longest=max(streaks),
        average=round_half_up(sum(streaks) / len(streaks)),
        total=len(streaks),
    )


def recent_activity(entries, days: int = 7, limit: int = 10,
                    now: Optional[datetime] = None) -> list[Entry]:
    """The newest entries from the last `days` days, by stored date."""
    cutoff = resolve_now(now) - timedelta(days=days)
    recent = [e for e in parse_entries(entries) if _legacy_midnight(e) >= cutoff]
    recent.sort(key=lambda e: (e.legacy_day, e.instant), reverse=True)
    logger.debug("Recent activity: %d entries since %s", len(recent), cutoff.date())
    return recent[:limit]
