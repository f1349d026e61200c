"""
Keyword classifier for habit entries.

Maps a habit name onto one of a fixed set of categories by keyword
containment and derives the tags and `aiData` record stored with a new
entry.  Categories are checked in declaration order; the first hit wins.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from habitlens import config
from habitlens.ontology import Serializable
from habitlens.schemas import AIData
from habitlens.temporal import day_of_week_name, resolve_now
from habitlens.validation import parse_entries

logger = logging.getLogger(__name__)

KEYWORD_BONUS = 0.05
MAX_KEYWORD_BONUS = 0.1


@dataclass(frozen=True)
class HabitCategory(Serializable):
    id:       str
    name:     str
    icon:     str
    color:    str
    keywords: tuple[str, ...] = ()

    def matches(self, lowered_name: str) -> int:
        """Number of distinct keywords contained in the name."""
        return sum(1 for keyword in set(self.keywords) if keyword in lowered_name)


@dataclass(frozen=True)
class CategoryScore(Serializable):
    id:         str
    name:       str
    confidence: float


@dataclass(frozen=True)
class Classification(Serializable):
    category:       str
    category_name:  str
    confidence:     float
    all_categories: list[CategoryScore] = field(default_factory=list)


HABIT_CATEGORIES = [
    HabitCategory("fitness", "Fitness", "fitness", "#f59e0b",
                  ("gym", "workout", "exercise", "running", "yoga", "fitness",
                   "weights", "dumbbell")),
    HabitCategory("food", "Food & Nutrition", "restaurant", "#ec4899",
                  ("food", "meal", "breakfast", "lunch", "dinner", "cooking",
                   "kitchen", "plate")),
    HabitCategory("workspace", "Workspace", "briefcase", "#6366f1",
                  ("desk", "workspace", "office", "computer", "laptop", "study")),
    HabitCategory("reading", "Reading", "book", "#8b5cf6",
                  ("book", "reading", "library", "study", "text", "page", "novel")),
    HabitCategory("outdoor", "Outdoor", "sunny", "#10b981",
                  ("outdoor", "nature", "park", "hiking", "landscape", "tree")),
    HabitCategory("other", "Other", "ellipse", "#6b7280"),
]

OTHER = HABIT_CATEGORIES[-1]
_BY_ID = {category.id: category for category in HABIT_CATEGORIES}


def get_category(category_id: Optional[str]) -> HabitCategory:
    return _BY_ID.get(category_id or "", OTHER)


def detect_category(habit_name) -> HabitCategory:
    if not isinstance(habit_name, str) or not habit_name:
        return OTHER
    lowered = habit_name.lower()
    for category in HABIT_CATEGORIES:
        if category.matches(lowered):
            return category
    return OTHER


def _confidence(category: HabitCategory, habit_name: str) -> float:
    if category is OTHER:
        return config.CONFIDENCE_MEDIUM
    bonus = min(category.matches(habit_name.lower()) * KEYWORD_BONUS, MAX_KEYWORD_BONUS)
    return min(config.CONFIDENCE_HIGH + bonus, 1.0)


def classify_habit_name(habit_name) -> Classification:
    """
    Classify a habit by its name.

    Categories other than the detected one are reported at 0.0 confidence.
    """
    category = detect_category(habit_name)
    confidence = _confidence(category, habit_name or "")
    return Classification(
        category=category.id,
        category_name=category.name,
        confidence=confidence,
        all_categories=[
            CategoryScore(
                id=c.id,
                name=c.name,
                confidence=confidence if c is category else 0.0,
            )
            for c in HABIT_CATEGORIES
        ],
    )


def time_tag(when: datetime) -> str:
    hour = when.hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def generate_tags(category_id: Optional[str], when: Optional[datetime] = None) -> list[str]:
    """Category, time-of-day and weekday tags for an entry captured at `when`."""
    when = resolve_now(when)
    tags = []
    if category_id in _BY_ID:
        tags.append(_BY_ID[category_id].name.lower())
    tags.append(time_tag(when))
    tags.append(day_of_week_name(when))
    return tags


def build_ai_data(habit_name, when: Optional[datetime] = None) -> AIData:
    """The `aiData` record attached to an entry created for `habit_name`."""
    classification = classify_habit_name(habit_name)
    logger.debug("Classified habit %r as %s (%.2f)",
                 habit_name, classification.category, classification.confidence)
    return AIData(
        category=classification.category,
        category_name=classification.category_name,
        confidence=classification.confidence,
        tags=generate_tags(classification.category, when),
    )


def dominant_category(entries, min_confidence: float = config.CONFIDENCE_MINIMUM) -> Optional[str]:
    """Most frequent attached category at or above `min_confidence`, if any."""
    counts = Counter(
        e.ai_data.category
        for e in parse_entries(entries)
        if e.ai_data and e.ai_data.category and e.ai_data.confidence >= min_confidence
    )
    if not counts:
        return None
    return counts.most_common(1)[0][0]
