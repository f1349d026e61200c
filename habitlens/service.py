"""
HabitLens — Insight Service  (habitlens/service.py)
===================================================
Async facade over the analyzers and the dashboard rollup.

The analyzers are synchronous pure functions; the async wrappers keep one
awaitable surface for callers that mix them with storage I/O.  The
dashboard fans out one task per habit, each gathering five analyses, and
drops any habit whose analysis fails.

Usage:
    from habitlens import insight_service
    dashboard = await insight_service.get_overall_insights(habits, entries)
    payload = dashboard.to_dict()
"""
from __future__ import annotations

import asyncio
import time
from collections import defaultdict
from datetime import datetime
from typing import Optional

from habitlens.achievements import AchievementResult, recognize_achievements
from habitlens.aggregation import DashboardInsights, HabitInsight, build_dashboard
from habitlens.consistency import ConsistencyResult, analyze_consistency
from habitlens.exceptions import HabitAnalysisError
from habitlens.motivation import MotivationResult, generate_motivation
from habitlens.ontology import Recommendation
from habitlens.patterns import PatternResult, analyze_patterns
from habitlens.predictive import PredictionResult, analyze_predictions
from habitlens.progress import ProgressResult, analyze_progress
from habitlens.schemas import Entry, Habit
from habitlens.strength import StrengthResult, analyze_strength
from habitlens.structured_logging import logger
from habitlens.suggestions import generate_suggestions
from habitlens.temporal import resolve_now
from habitlens.trend_engine import TrendResult, analyze_trends
from habitlens.validation import parse_entries, parse_habits


class InsightService:
    """Awaitable entry point for per-habit insights and the dashboard."""

    # ──────────────────────────────────────────
    # PER-HABIT ANALYZERS
    # ──────────────────────────────────────────

    async def analyze_consistency(self, entries, now: Optional[datetime] = None) -> ConsistencyResult:
        return analyze_consistency(entries, now=now)

    async def analyze_progress(self, entries, now: Optional[datetime] = None) -> ProgressResult:
        return analyze_progress(entries, now=now)

    async def analyze_patterns(self, entries, now: Optional[datetime] = None) -> PatternResult:
        return analyze_patterns(entries, now=now)

    async def analyze_predictions(self, entries, habit=None,
                                  now: Optional[datetime] = None) -> PredictionResult:
        return analyze_predictions(entries, habit=habit, now=now)

    async def analyze_trends(self, entries, now: Optional[datetime] = None) -> TrendResult:
        return analyze_trends(entries, now=now)

    async def analyze_strength(self, entries, now: Optional[datetime] = None) -> StrengthResult:
        return analyze_strength(entries, now=now)

    async def recognize_achievements(self, entries, now: Optional[datetime] = None) -> AchievementResult:
        return recognize_achievements(entries, now=now)

    async def generate_motivation(self, entries, habit=None,
                                  now: Optional[datetime] = None) -> MotivationResult:
        return generate_motivation(entries, habit=habit, now=now)

    async def generate_suggestions(self, habit, entries,
                                   now: Optional[datetime] = None) -> list[Recommendation]:
        return generate_suggestions(habit, entries, now=now)

    # ──────────────────────────────────────────
    # DASHBOARD
    # ──────────────────────────────────────────

    async def load_habit_insights(self, habit: Habit, entries: list[Entry],
                                  now: datetime) -> Optional[HabitInsight]:
        """
        Run the five dashboard analyses for one habit.

        Returns None when the habit has no entries or any analysis raises;
        the failure is logged and does not affect other habits.
        """
        if not entries:
            return None

        try:
            consistency, strength, trends, achievements, predictions = await asyncio.gather(
                self.analyze_consistency(list(entries), now=now),
                self.analyze_strength(list(entries), now=now),
                self.analyze_trends(list(entries), now=now),
                self.recognize_achievements(list(entries), now=now),
                self.analyze_predictions(list(entries), habit=habit, now=now),
            )
        except Exception as e:
            error = HabitAnalysisError(habit.id, e)
            logger.log_habit_failure(error.habit_id, error.cause)
            return None

        return HabitInsight(
            habit=habit,
            consistency=consistency,
            strength=strength,
            trends=trends,
            achievements=achievements,
            predictions=predictions,
            entry_count=len(entries),
        )

    async def load_all_habit_insights(self, habits: list[Habit], entries: list[Entry],
                                      now: datetime) -> list[HabitInsight]:
        by_habit = _group_by_habit(entries)
        results = await asyncio.gather(*(
            self.load_habit_insights(habit, by_habit.get(habit.id, []), now)
            for habit in habits
        ))
        return [insight for insight in results if insight is not None]

    async def get_overall_insights(self, habits, entries,
                                   now: Optional[datetime] = None) -> DashboardInsights:
        """
        Dashboard rollup across every habit.

        Returns DashboardInsights.empty() when there are no habits, no
        entries, or no habit produced a valid insight bundle.  Habits with
        no entries are skipped; only habits whose analysis raised count as
        dropped in the run log.
        """
        habits = parse_habits(habits)
        entries = parse_entries(entries)
        if not habits or not entries:
            return DashboardInsights.empty()

        now = resolve_now(now)
        by_habit = _group_by_habit(entries)
        tracked = [habit for habit in habits if by_habit.get(habit.id)]

        started = time.perf_counter()
        logger.log_analysis_started(len(habits), len(entries))
        try:
            valid = await self.load_all_habit_insights(tracked, entries, now)
            dashboard = build_dashboard(valid)
            logger.log_analysis_completed(
                valid_count=len(valid),
                dropped_count=len(tracked) - len(valid),
                duration_ms=(time.perf_counter() - started) * 1000,
                untracked_count=len(habits) - len(tracked),
            )
            return dashboard
        finally:
            logger.clear_context()


def _group_by_habit(entries: list[Entry]) -> dict[Optional[str], list[Entry]]:
    by_habit = defaultdict(list)
    for entry in entries:
        by_habit[entry.habit_id].append(entry)
    return by_habit


# Global service instance
insight_service = InsightService()
