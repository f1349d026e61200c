"""
HabitLens — Achievement Recognizer  (habitlens/achievements.py)
===============================================================
Badges earned from an entry history, plus the milestones that are
within reach.

  days         distinct tracked days reach 1, 3, 7, 14, 21, 30, 50, 100, 365
  streak       current streak (1-day grace) reaches 3, 7, 14, 21, 30, 60, 100
  consistency  perfect week, monthly champion
  special      early bird, night owl (10+ entries in the time window)

Public API:
  recognize_achievements(entries, now=None) -> AchievementResult
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from habitlens.ontology import AchievementType, Rarity, Serializable
from habitlens.temporal import (
    resolve_now,
    sort_entries,
    streak_for_entries,
    unique_day_keys,
)
from habitlens.validation import parse_entries

DAY_MILESTONES = [1, 3, 7, 14, 21, 30, 50, 100, 365]
STREAK_MILESTONES = [3, 7, 14, 21, 30, 60, 100]
UPCOMING_DAY_MILESTONES = [7, 14, 21, 30, 50, 100]
UPCOMING_STREAK_MILESTONES = [7, 14, 21, 30]
UPCOMING_DAY_LOOKAHEAD = 3
UPCOMING_STREAK_LOOKAHEAD = 2
SPECIAL_BADGE_COUNT = 10

_DAY_TITLES = {
    1:   "Getting Started! 🌱",
    3:   "Three Days Strong! 💪",
    7:   "One Week Complete! ⭐",
    14:  "Two Weeks! 🎉",
    21:  "Habit Formed! 🔥",
    30:  "One Month! 🏆",
    50:  "50 Days! 🌟",
    100: "100 Days! 💯",
    365: "One Year! 🎊",
}

_DAY_DESCRIPTIONS = {
    21:  "Research shows 21 days to form a habit - you've done it!",
    100: "100 days of tracking - you're a habit master!",
    365: "A full year of tracking - incredible dedication!",
}


@dataclass(frozen=True)
class Achievement(Serializable):
    type:        AchievementType
    milestone:   Union[int, str]
    title:       str
    description: str
    icon:        str
    rarity:      Rarity


@dataclass(frozen=True)
class UpcomingMilestone(Serializable):
    type:           AchievementType
    milestone:      int
    days_remaining: int
    title:          str
    description:    str


@dataclass(frozen=True)
class AchievementResult(Serializable):
    achievements:        list[Achievement] = field(default_factory=list)
    upcoming_milestones: list[UpcomingMilestone] = field(default_factory=list)
    current_streak:      int = 0

    @property
    def total_achievements(self) -> int:
        return len(self.achievements)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "total_achievements": self.total_achievements}


# ──────────────────────────────────────────────
# HELPERS
# ──────────────────────────────────────────────

def _day_rarity(days: int) -> Rarity:
    if days >= 100:
        return Rarity.LEGENDARY
    if days >= 30:
        return Rarity.EPIC
    if days >= 14:
        return Rarity.RARE
    return Rarity.COMMON


def _day_icon(days: int) -> str:
    if days >= 100:
        return "diamond"
    if days >= 30:
        return "trophy"
    if days >= 21:
        return "flame"
    if days >= 7:
        return "star"
    return "checkmark-circle"


def _streak_rarity(streak: int) -> Rarity:
    if streak >= 30:
        return Rarity.EPIC
    if streak >= 14:
        return Rarity.RARE
    return Rarity.COMMON


def _plural_days(count: int) -> str:
    return f"{count} more day{'s' if count > 1 else ''}"


# ──────────────────────────────────────────────
# CHECKS
# ──────────────────────────────────────────────

def _day_milestones(unique_days: int) -> list[Achievement]:
    return [
        Achievement(
            type=AchievementType.DAYS,
            milestone=days,
            title=_DAY_TITLES.get(days, f"{days} Days! 🎉"),
            description=_DAY_DESCRIPTIONS.get(days, f"You've tracked for {days} days!"),
            icon=_day_icon(days),
            rarity=_day_rarity(days),
        )
        for days in DAY_MILESTONES
        if unique_days >= days
    ]


def _streak_milestones(streak: int) -> list[Achievement]:
    return [
        Achievement(
            type=AchievementType.STREAK,
            milestone=length,
            title=f"{length}-Day Streak! 🔥",
            description=f"You've maintained a {length}-day streak!",
            icon="flame",
            rarity=_streak_rarity(length),
        )
        for length in STREAK_MILESTONES
        if streak >= length
    ]


def _consistency_milestones(chron) -> list[Achievement]:
    achievements = []

    if len(chron) >= 7 and len(unique_day_keys(chron[-7:])) == 7:
        achievements.append(Achievement(
            type=AchievementType.CONSISTENCY,
            milestone="perfect_week",
            title="Perfect Week! ⭐",
            description="You tracked every day for 7 days in a row!",
            icon="star",
            rarity=Rarity.RARE,
        ))

    if len(chron) >= 30 and len(unique_day_keys(chron[-30:])) >= 25:
        achievements.append(Achievement(
            type=AchievementType.CONSISTENCY,
            milestone="month_consistency",
            title="Monthly Champion! 🏆",
            description="You tracked at least 25 days in the last month!",
            icon="trophy",
            rarity=Rarity.EPIC,
        ))

    return achievements


def _special_achievements(chron) -> list[Achievement]:
    achievements = []

    early = [e for e in chron if 5 <= e.instant.hour < 8]
    if len(early) >= SPECIAL_BADGE_COUNT:
        achievements.append(Achievement(
            type=AchievementType.SPECIAL,
            milestone="early_bird",
            title="Early Bird! 🌅",
            description="You've tracked 10+ times in the early morning!",
            icon="sunny",
            rarity=Rarity.RARE,
        ))

    late = [e for e in chron if e.instant.hour >= 21 or e.instant.hour < 5]
    if len(late) >= SPECIAL_BADGE_COUNT:
        achievements.append(Achievement(
            type=AchievementType.SPECIAL,
            milestone="night_owl",
            title="Night Owl! 🦉",
            description="You've tracked 10+ times late at night!",
            icon="moon",
            rarity=Rarity.RARE,
        ))

    return achievements


def _upcoming(unique_days: int, streak: int) -> list[UpcomingMilestone]:
    upcoming = []

    for milestone in UPCOMING_DAY_MILESTONES:
        if milestone - UPCOMING_DAY_LOOKAHEAD <= unique_days < milestone:
            remaining = milestone - unique_days
            upcoming.append(UpcomingMilestone(
                type=AchievementType.DAYS,
                milestone=milestone,
                days_remaining=remaining,
                title=f"{milestone} Days",
                description=f"Just {_plural_days(remaining)} to reach {milestone} days!",
            ))

    for milestone in UPCOMING_STREAK_MILESTONES:
        if milestone - UPCOMING_STREAK_LOOKAHEAD <= streak < milestone:
            remaining = milestone - streak
            upcoming.append(UpcomingMilestone(
                type=AchievementType.STREAK,
                milestone=milestone,
                days_remaining=remaining,
                title=f"{milestone}-Day Streak",
                description=f"Maintain your streak for {_plural_days(remaining)}!",
            ))

    return upcoming


def recognize_achievements(entries, now: Optional[datetime] = None) -> AchievementResult:
    entries = parse_entries(entries)
    if not entries:
        return AchievementResult()

    now = resolve_now(now)
    chron = sort_entries(entries)
    unique_days = len(unique_day_keys(chron))
    streak = streak_for_entries(chron, now)

    achievements = [
        *_day_milestones(unique_days),
        *_streak_milestones(streak),
        *_consistency_milestones(chron),
        *_special_achievements(chron),
    ]

    return AchievementResult(
        achievements=achievements,
        upcoming_milestones=_upcoming(unique_days, streak),
        current_streak=streak,
    )
