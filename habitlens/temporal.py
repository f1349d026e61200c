"""
HabitLens — Temporal Utilities  (habitlens/temporal.py)
========================================================
Date/time primitives shared by every analyzer.  All instants are local,
timezone-naive datetimes: aware values are converted to local time and
epoch values are read in local time, so calendar-day grouping matches what
the user saw on their phone.

Public API:
  to_datetime(value) -> datetime | None
  days_between(a, b) -> int            # floor of the absolute difference
  hours_between(a, b) -> float
  unique_day_keys(entries) -> set[date]
  time_of_day_bucket(dt) -> TimeSlot
  day_of_week_name(dt) -> str          # "sunday" .. "saturday"
  recency_score(days_since_last, penalty_threshold_days) -> float
  frequency_score(count, period_days) -> float
  current_streak(days, today, gap_tolerance=1, start_tolerance=1) -> int
  streak_for_entries(entries, now, gap_tolerance=1, legacy_dates=False) -> int
"""
from __future__ import annotations

import math
import statistics
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Iterable, Optional

from habitlens.ontology import TimeSlot

if TYPE_CHECKING:
    from habitlens.schemas import Entry


DAY_NAMES = ["sunday", "monday", "tuesday", "wednesday",
             "thursday", "friday", "saturday"]
DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_ABBREVIATIONS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                       "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_SECONDS_PER_DAY = 86400
_SECONDS_PER_HOUR = 3600


# ──────────────────────────────────────────────
# PARSING
# ──────────────────────────────────────────────

def _localize(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def to_datetime(value) -> Optional[datetime]:
    """
    Coerce an ISO-8601 string, `YYYY-MM-DD` string, epoch milliseconds,
    date or datetime into a local naive datetime.  Returns None when the
    value cannot be read.

    A bare `YYYY-MM-DD` string is a calendar day and reads as local
    midnight, not UTC midnight, so the stored `date` key never shifts to
    the previous day west of UTC.  Strings with an offset or a `Z` suffix
    are converted to local time.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _localize(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        try:
            return _localize(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """The analysis clock: `now` if given (localized), else the current time."""
    if now is None:
        return datetime.now()
    return to_datetime(now) or datetime.now()


# ──────────────────────────────────────────────
# DIFFERENCES
# ──────────────────────────────────────────────

def days_between(a: datetime, b: datetime) -> int:
    return math.floor(abs((b - a).total_seconds()) / _SECONDS_PER_DAY)


def hours_between(a: datetime, b: datetime) -> float:
    return abs((b - a).total_seconds()) / _SECONDS_PER_HOUR


def days_ago(dt: datetime, now: datetime) -> float:
    """Signed fractional days from `dt` to `now` (negative for future instants)."""
    return (now - dt).total_seconds() / _SECONDS_PER_DAY


def hours_ago(dt: datetime, now: datetime) -> float:
    return (now - dt).total_seconds() / _SECONDS_PER_HOUR


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min)


def span_days(first: datetime, last: datetime) -> int:
    """Inclusive whole-day span between two instants (1 for the same instant)."""
    return math.floor((last - first).total_seconds() / _SECONDS_PER_DAY) + 1


# ──────────────────────────────────────────────
# BUCKETING
# ──────────────────────────────────────────────

def time_of_day_bucket(dt: datetime) -> TimeSlot:
    hour = dt.hour
    if 5 <= hour < 8:
        return TimeSlot.EARLY_MORNING
    if 8 <= hour < 12:
        return TimeSlot.MORNING
    if 12 <= hour < 17:
        return TimeSlot.AFTERNOON
    if 17 <= hour < 21:
        return TimeSlot.EVENING
    return TimeSlot.NIGHT


def day_of_week_index(dt) -> int:
    """Sunday-first index (0 = Sunday .. 6 = Saturday)."""
    return (dt.weekday() + 1) % 7


def day_of_week_name(dt) -> str:
    return DAY_NAMES[day_of_week_index(dt)]


# ──────────────────────────────────────────────
# SCORES
# ──────────────────────────────────────────────

def recency_score(days_since_last: float, penalty_threshold_days: float) -> float:
    return max(0.0, 1 - days_since_last / penalty_threshold_days)


def frequency_score(count: int, period_days: float) -> float:
    return min(count / period_days, 1.0)


def mean_and_variance(values: list[float]) -> tuple[float, float]:
    """Mean and population variance; (0, 0) for an empty series."""
    if not values:
        return 0.0, 0.0
    return statistics.fmean(values), statistics.pvariance(values)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# ──────────────────────────────────────────────
# ENTRY HELPERS
# ──────────────────────────────────────────────

def sort_entries(entries: Iterable[Entry], newest_first: bool = False) -> list[Entry]:
    return sorted(entries, key=lambda e: e.instant, reverse=newest_first)


def recent_entries(entries: Iterable[Entry], count: int) -> list[Entry]:
    """The `count` most recent entries, newest first."""
    return sort_entries(entries, newest_first=True)[:count]


def unique_day_keys(entries: Iterable[Entry]) -> set[date]:
    return {e.day for e in entries}


def entries_within_days(entries: Iterable[Entry], days: float, now: datetime) -> list[Entry]:
    """Entries at most `days` days before `now` (future entries included)."""
    return [e for e in entries if days_ago(e.instant, now) <= days]


def entries_between_days_ago(entries: Iterable[Entry], newer: float, older: float,
                             now: datetime) -> list[Entry]:
    """Entries with newer < days-ago <= older."""
    return [e for e in entries if newer < days_ago(e.instant, now) <= older]


def interval_hours(chronological: list[Entry]) -> list[float]:
    return [
        hours_between(prev.instant, curr.instant)
        for prev, curr in zip(chronological, chronological[1:])
    ]


# ──────────────────────────────────────────────
# STREAKS
# ──────────────────────────────────────────────

def current_streak(days: Iterable[date], today: date,
                   gap_tolerance: int = 1, start_tolerance: int = 1) -> int:
    """
    Count consecutive active calendar days ending at or near `today`.

    The newest day may lie up to `start_tolerance` days before today; every
    following day may leave up to `gap_tolerance` missing days behind it.
    Days after `today` are ignored.

      gap_tolerance=1  insight streak (achievements, motivation)
      gap_tolerance=0  strict dashboard streak
    """
    ordered = sorted({d for d in days if d <= today}, reverse=True)
    streak = 0
    cursor = today
    allowed = start_tolerance
    for day in ordered:
        if (cursor - day).days > allowed:
            break
        streak += 1
        cursor = day - timedelta(days=1)
        allowed = gap_tolerance
    return streak


def streak_for_entries(entries: Iterable[Entry], now: datetime,
                       gap_tolerance: int = 1, legacy_dates: bool = False) -> int:
    """
    Streak over an entry list.  `legacy_dates` groups by the stored `date`
    key instead of the entry instant, as the plain dashboard statistics do.
    """
    days = {e.legacy_day if legacy_dates else e.day for e in entries}
    return current_streak(days, now.date(), gap_tolerance=gap_tolerance)
