"""
HabitLens — Habit Suggestion Catalogue  (habitlens/habit_suggestions.py)
========================================================================
New habits to offer a user, drawn from three pools:

  popular    a fixed list of common habits the user does not have yet
  category   more habits in the categories the user already tracks
  paired     habits that complement a specific existing habit

Results are de-duplicated by name (case-insensitive), never repeat an
existing habit, and are capped at config.HABIT_SUGGESTION_LIMIT.

Public API:
  get_habit_suggestions(existing_habits, entries=None, limit=12) -> list[HabitSuggestion]
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from habitlens import config
from habitlens.classifier import detect_category, dominant_category
from habitlens.ontology import Serializable
from habitlens.validation import parse_entries, parse_habits

HABIT_COLORS = ["#6366f1", "#8b5cf6", "#ec4899", "#f59e0b", "#10b981", "#3b82f6"]


@dataclass(frozen=True)
class HabitSuggestion(Serializable):
    name:        str
    description: str
    category:    str
    icon:        str
    color:       str
    reason:      str


def _color(index: int) -> str:
    return HABIT_COLORS[index] if index < len(HABIT_COLORS) else HABIT_COLORS[0]


# ──────────────────────────────────────────────
# CATALOGUE
# ──────────────────────────────────────────────

POPULAR_HABITS = [
    HabitSuggestion("Morning Exercise", "Start your day with physical activity",
                    "fitness", "sunny", _color(0), "Popular"),
    HabitSuggestion("Daily Reading", "Read for 30 minutes every day",
                    "reading", "book", _color(2), "Popular"),
    HabitSuggestion("Healthy Breakfast", "Eat a nutritious breakfast daily",
                    "food", "restaurant", _color(1), "Popular"),
    HabitSuggestion("Meditation", "Practice mindfulness and relaxation",
                    "other", "leaf", _color(3), "Popular"),
    HabitSuggestion("Drink Water", "Stay hydrated throughout the day",
                    "food", "water-outline", _color(4), "Popular"),
    HabitSuggestion("Evening Walk", "Take a walk after dinner",
                    "outdoor", "walk-outline", _color(5), "Popular"),
    HabitSuggestion("No Phone Before Bed", "Avoid screens 1 hour before sleep",
                    "other", "phone-portrait-outline", _color(6), "Popular"),
    HabitSuggestion("Journaling", "Write down your thoughts daily",
                    "other", "document-text", _color(7), "Popular"),
    HabitSuggestion("Practice Gratitude", "Write down 3 things you're grateful for",
                    "other", "heart", _color(0), "Popular"),
    HabitSuggestion("Deep Work Session", "Focused work without distractions",
                    "workspace", "bulb", _color(1), "Popular"),
    HabitSuggestion("Stretching", "Daily flexibility exercises",
                    "fitness", "fitness", _color(2), "Popular"),
    HabitSuggestion("Meal Prep", "Prepare healthy meals in advance",
                    "food", "nutrition-outline", _color(3), "Popular"),
    HabitSuggestion("Learning Time", "Learn something new every day",
                    "reading", "school", _color(4), "Popular"),
    HabitSuggestion("Outdoor Time", "Spend time in nature",
                    "outdoor", "sunny", _color(5), "Popular"),
    HabitSuggestion("Declutter", "Organize and declutter your space",
                    "workspace", "cube-outline", _color(6), "Popular"),
]

CATEGORY_SUGGESTIONS = {
    "fitness": [
        HabitSuggestion("Yoga Session", "Practice yoga for flexibility and mindfulness",
                        "fitness", "body-outline", _color(0), "Similar to your fitness habits"),
        HabitSuggestion("Strength Training", "Build muscle and strength",
                        "fitness", "barbell-outline", _color(1), "Complements your fitness routine"),
    ],
    "food": [
        HabitSuggestion("Cook at Home", "Prepare meals at home",
                        "food", "restaurant", _color(2), "Similar to your food habits"),
        HabitSuggestion("Track Macros", "Monitor your nutrition intake",
                        "food", "nutrition-outline", _color(3), "Complements healthy eating"),
    ],
    "workspace": [
        HabitSuggestion("Pomodoro Sessions", "Use time-blocking for productivity",
                        "workspace", "timer-outline", _color(4), "Similar to your workspace habits"),
    ],
    "reading": [
        HabitSuggestion("Audio Books", "Listen to audiobooks during commutes",
                        "reading", "headset-outline", _color(5), "Alternative to reading"),
    ],
}

# existing-name fragment -> complementary habit
HABIT_PAIRS = {
    "morning exercise": HabitSuggestion(
        "Post-Workout Protein", "Refuel after your workout",
        "food", "fitness", _color(1), "Pairs well with exercise"),
    "healthy breakfast": HabitSuggestion(
        "Morning Vitamins", "Take your daily vitamins",
        "food", "medical-outline", _color(2), "Complements healthy eating"),
    "daily reading": HabitSuggestion(
        "Reading Notes", "Take notes while reading",
        "reading", "document-text", _color(3), "Enhances your reading habit"),
    "meditation": HabitSuggestion(
        "Morning Affirmations", "Start your day with positive thoughts",
        "other", "sunny", _color(0), "Complements mindfulness practice"),
    "drink water": HabitSuggestion(
        "Track Hydration", "Monitor daily water intake",
        "food", "water-outline", _color(4), "Related to hydration"),
}


# ──────────────────────────────────────────────
# POOLS
# ──────────────────────────────────────────────

def _infer_categories(habits, entries) -> list[str]:
    """Category per habit: confident attached aiData first, else name keywords."""
    by_habit = defaultdict(list)
    for entry in entries:
        by_habit[entry.habit_id].append(entry)

    categories = []
    for habit in habits:
        category = dominant_category(by_habit.get(habit.id, []))
        if category is None:
            category = detect_category(habit.name).id
        if category not in categories:
            categories.append(category)
    return categories


def _category_suggestions(categories: list[str]) -> list[HabitSuggestion]:
    return [s for category in categories for s in CATEGORY_SUGGESTIONS.get(category, [])]


def _paired_suggestions(existing_names: list[str]) -> list[HabitSuggestion]:
    return [
        suggestion
        for name in existing_names
        for fragment, suggestion in HABIT_PAIRS.items()
        if fragment in name
    ]


def get_habit_suggestions(existing_habits=None, entries=None,
                          limit: int = config.HABIT_SUGGESTION_LIMIT) -> list[HabitSuggestion]:
    habits = parse_habits(existing_habits or [])
    existing_names = [h.name.lower().strip() for h in habits]

    candidates = list(POPULAR_HABITS)
    if habits:
        categories = _infer_categories(habits, parse_entries(entries or []))
        candidates += _category_suggestions(categories)
        candidates += _paired_suggestions(existing_names)

    seen = set(existing_names)
    unique = []
    for suggestion in candidates:
        key = suggestion.name.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(suggestion)

    return unique[:limit]
