"""
Smart per-habit suggestions: consistency nudges, a same-day tracking
reminder and an exploration prompt once a habit is going well.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from habitlens import config
from habitlens.consistency import analyze_consistency
from habitlens.ontology import Recommendation
from habitlens.temporal import hours_ago, resolve_now, sort_entries
from habitlens.validation import parse_entries, parse_habit

MILESTONE_MIN_ENTRIES = 7


def _consistency_suggestions(score: float) -> list[Recommendation]:
    if score >= config.CONSISTENCY_GOOD:
        return []
    return [Recommendation(
        kind="consistency",
        title="Improve Consistency",
        message="Try to track your habit at the same time every day. Consistency is key!",
        action="Set a daily reminder",
        icon="time",
    )]


def _timing_suggestions(habit_name: str, entries, now: datetime) -> list[Recommendation]:
    if not entries:
        return []
    hours = hours_ago(sort_entries(entries, newest_first=True)[0].instant, now)
    if not config.HOURS_FOR_REMINDER < hours < config.MAX_REMINDER_HOURS:
        return []
    return [Recommendation(
        kind="reminder",
        title="Time to Track!",
        message=f'You haven\'t tracked "{habit_name}" today. '
                "Capture a photo to keep your streak going!",
        action="Capture now",
        icon="camera",
    )]


def _milestone_suggestions(entry_count: int, score: float) -> list[Recommendation]:
    if entry_count < MILESTONE_MIN_ENTRIES or score < config.CONSISTENCY_EXCELLENT:
        return []
    return [Recommendation(
        kind="milestone",
        title="You're Doing Great!",
        message="You've maintained excellent consistency. "
                "Consider adding a related habit to build on this success!",
        action="Explore habits",
        icon="sparkles",
    )]


def generate_suggestions(habit, entries, now: Optional[datetime] = None) -> list[Recommendation]:
    if not isinstance(entries, (list, tuple)):
        return []

    entries = parse_entries(entries)
    now = resolve_now(now)
    parsed = parse_habit(habit)
    habit_name = parsed.name if parsed else ""
    score = analyze_consistency(entries, now=now).score

    return [
        *_consistency_suggestions(score),
        *_timing_suggestions(habit_name, entries, now),
        *_milestone_suggestions(len(entries), score),
    ]
