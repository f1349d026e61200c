"""
HabitLens — insight analytics for photo-based habit tracking.

Every analyzer is a pure function over a habit's entry records; the
dashboard rollup lives behind `insight_service`.
"""
from habitlens.achievements import recognize_achievements
from habitlens.classifier import build_ai_data, classify_habit_name
from habitlens.consistency import analyze_consistency
from habitlens.habit_suggestions import get_habit_suggestions
from habitlens.motivation import generate_motivation
from habitlens.patterns import analyze_patterns
from habitlens.predictive import analyze_predictions
from habitlens.progress import analyze_progress
from habitlens.service import InsightService, insight_service
from habitlens.strength import analyze_strength
from habitlens.suggestions import generate_suggestions
from habitlens.trend_engine import analyze_trends

__all__ = [
    "InsightService",
    "analyze_consistency",
    "analyze_patterns",
    "analyze_predictions",
    "analyze_progress",
    "analyze_strength",
    "analyze_trends",
    "build_ai_data",
    "classify_habit_name",
    "generate_motivation",
    "generate_suggestions",
    "get_habit_suggestions",
    "insight_service",
    "recognize_achievements",
]
