"""
HabitLens — Motivational Insights  (habitlens/motivation.py)
============================================================
Picks encouragement copy from how long a habit has been tracked, how
recently, and how consistently this week.

Public API:
  generate_motivation(entries, habit=None, now=None) -> MotivationResult
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from habitlens.ontology import InsightType, Serializable
from habitlens.temporal import (
    entries_within_days,
    hours_ago,
    resolve_now,
    sort_entries,
    streak_for_entries,
    unique_day_keys,
)
from habitlens.validation import parse_entries


@dataclass(frozen=True)
class MotivationMessage(Serializable):
    message: str
    type:    InsightType
    icon:    str
    emoji:   Optional[str] = None


@dataclass(frozen=True)
class Quote(Serializable):
    text:   str
    author: str


@dataclass(frozen=True)
class MotivationResult(Serializable):
    primary:   MotivationMessage
    secondary: list[MotivationMessage] = field(default_factory=list)
    quotes:    list[Quote] = field(default_factory=list)


# (threshold, message, type, icon, emoji), checked top-down
_MILESTONE_MESSAGES = [
    (365, "A full year of dedication! You're a true habit master! 🎊",
     InsightType.CELEBRATION, "trophy", "🎊"),
    (100, "100 days! You've transformed this into a lifestyle! 💯",
     InsightType.CELEBRATION, "diamond", "💯"),
    (30, "One month strong! You're building something amazing! 🏆",
     InsightType.SUCCESS, "trophy", "🏆"),
    (21, "Habit formed! Research shows you've crossed the 21-day threshold! 🔥",
     InsightType.SUCCESS, "flame", "🔥"),
    (14, "Two weeks down! You're making this a real habit! ⭐",
     InsightType.ENCOURAGEMENT, "star", "⭐"),
    (7, "One week complete! Keep this momentum going! 💪",
     InsightType.ENCOURAGEMENT, "checkmark-circle", "💪"),
]

QUOTES = {
    "established": Quote("We are what we repeatedly do. Excellence, then, is not an act, "
                         "but a habit.", "Aristotle"),
    "developing":  Quote("Small steps every day lead to big changes over time.", "Unknown"),
    "new":         Quote("The secret of getting ahead is getting started.", "Mark Twain"),
}

_EMPTY_PRIMARY = MotivationMessage(
    message="Every journey begins with a single step. Start tracking today!",
    type=InsightType.ENCOURAGEMENT,
    icon="rocket",
)


def _primary(chron, unique_days: int, now: datetime) -> MotivationMessage:
    for threshold, message, kind, icon, emoji in _MILESTONE_MESSAGES:
        if unique_days >= threshold:
            return MotivationMessage(message=message, type=kind, icon=icon, emoji=emoji)

    if hours_ago(chron[-1].instant, now) < 24:
        return MotivationMessage(
            message="Great job tracking today! Consistency is key to success! ✨",
            type=InsightType.ENCOURAGEMENT, icon="sparkles", emoji="✨",
        )
    return MotivationMessage(
        message="You're on the right track! Every entry counts toward your goal! 🌱",
        type=InsightType.ENCOURAGEMENT, icon="leaf", emoji="🌱",
    )


def _secondary(chron, unique_days: int, now: datetime) -> list[MotivationMessage]:
    messages = []

    if len(unique_day_keys(entries_within_days(chron, 7, now))) >= 6:
        messages.append(MotivationMessage(
            message="Amazing consistency this week! You're unstoppable!",
            type=InsightType.SUCCESS, icon="flame",
        ))

    if 3 <= unique_days < 7:
        messages.append(MotivationMessage(
            message="You're building momentum! Keep going and you'll form a strong habit!",
            type=InsightType.ENCOURAGEMENT, icon="trending-up",
        ))

    streak = streak_for_entries(chron, now)
    if streak >= 7:
        messages.append(MotivationMessage(
            message=f"{streak}-day streak! Your dedication is inspiring!",
            type=InsightType.CELEBRATION, icon="flame",
        ))

    return messages


def _quote(unique_days: int) -> Quote:
    if unique_days >= 21:
        return QUOTES["established"]
    if unique_days >= 7:
        return QUOTES["developing"]
    return QUOTES["new"]


def generate_motivation(entries, habit=None, now: Optional[datetime] = None) -> MotivationResult:
    """`habit` is accepted for call-site symmetry with the other per-habit analyzers."""
    entries = parse_entries(entries)
    if not entries:
        return MotivationResult(primary=_EMPTY_PRIMARY)

    now = resolve_now(now)
    chron = sort_entries(entries)
    unique_days = len(unique_day_keys(chron))

    return MotivationResult(
        primary=_primary(chron, unique_days, now),
        secondary=_secondary(chron, unique_days, now),
        quotes=[_quote(unique_days)],
    )
