"""
HabitLens — Insight Ontology  (habitlens/ontology.py)
======================================================
Typed vocabulary that replaces raw strings throughout the analyzers.

Instead of:
    "needs-improvement"  →  string compare
    "urgent"             →  string compare

You get:
    rating      : ConsistencyRating.NEEDS_IMPROVEMENT
    alert.type  : AlertType.URGENT

Every analyzer result is a dataclass mixing in `Serializable`, whose
`to_dict()` turns enums, datetimes, nested results and pydantic records
into plain JSON-ready values.

All modules import from here.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


# ══════════════════════════════════════════════
# CONSISTENCY RATING
# ══════════════════════════════════════════════
class ConsistencyRating(Enum):
    EXCELLENT         = "excellent"
    GOOD              = "good"
    FAIR              = "fair"
    NEEDS_IMPROVEMENT = "needs-improvement"


# ══════════════════════════════════════════════
# HABIT STRENGTH
# ══════════════════════════════════════════════
class StrengthLevel(Enum):
    VERY_STRONG = "very_strong"
    STRONG      = "strong"
    MODERATE    = "moderate"
    DEVELOPING  = "developing"
    WEAK        = "weak"


# ══════════════════════════════════════════════
# STREAK RISK
# ══════════════════════════════════════════════
class RiskLevel(Enum):
    LOW    = "low"
    MEDIUM = "medium"
    HIGH   = "high"


# ══════════════════════════════════════════════
# TREND DIRECTION  (NEUTRAL = not enough history)
# ══════════════════════════════════════════════
class TrendDirection(Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE    = "stable"
    NEUTRAL   = "neutral"


class MomentumLevel(Enum):
    STRONG   = "strong"
    POSITIVE = "positive"
    NEUTRAL  = "neutral"
    NEGATIVE = "negative"
    WEAK     = "weak"


# ══════════════════════════════════════════════
# ACHIEVEMENTS
# ══════════════════════════════════════════════
class AchievementType(Enum):
    DAYS        = "days"
    STREAK      = "streak"
    CONSISTENCY = "consistency"
    SPECIAL     = "special"


class Rarity(Enum):
    COMMON    = "common"
    RARE      = "rare"
    EPIC      = "epic"
    LEGENDARY = "legendary"


# ══════════════════════════════════════════════
# ALERTS & INSIGHT KINDS
# ══════════════════════════════════════════════
class AlertType(Enum):
    URGENT  = "urgent"
    WARNING = "warning"
    INFO    = "info"


class InsightType(Enum):
    MILESTONE     = "milestone"
    SUCCESS       = "success"
    SUGGESTION    = "suggestion"
    IMPROVEMENT   = "improvement"
    PATTERN       = "pattern"
    WARNING       = "warning"
    INFO          = "info"
    STRENGTH      = "strength"
    PROJECTION    = "projection"
    CELEBRATION   = "celebration"
    ENCOURAGEMENT = "encouragement"
    MOTIVATION    = "motivation"


# ══════════════════════════════════════════════
# TIME OF DAY  (hour buckets, see temporal.time_of_day_bucket)
# ══════════════════════════════════════════════
class TimeSlot(Enum):
    EARLY_MORNING = "early_morning"   # [5, 8)
    MORNING       = "morning"         # [8, 12)
    AFTERNOON     = "afternoon"       # [12, 17)
    EVENING       = "evening"         # [17, 21)
    NIGHT         = "night"           # [21, 5)


# ══════════════════════════════════════════════
# SERIALIZATION
# ══════════════════════════════════════════════

def to_plain(value: Any) -> Any:
    """Recursively convert a result value into JSON-ready data."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Serializable):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(to_plain(k)): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_plain(v) for v in value]
    return value


class Serializable:
    """Mixin for result dataclasses."""

    def to_dict(self) -> dict:
        return {f.name: to_plain(getattr(self, f.name)) for f in fields(self)}


# ══════════════════════════════════════════════
# SHARED RECORDS
# ══════════════════════════════════════════════

@dataclass(frozen=True)
class Insight(Serializable):
    """One human-readable observation surfaced by an analyzer."""
    type:    InsightType
    message: str
    icon:    str


@dataclass(frozen=True)
class Recommendation(Serializable):
    """An actionable nudge.  `kind` is free-form (routine, reminder, ...)."""
    kind:    str
    title:   str
    message: str
    icon:    str
    action:  Optional[str] = None


@dataclass(frozen=True)
class Alert(Serializable):
    type:       AlertType
    title:      str
    message:    str
    action:     str
    icon:       str
    habit_name: Optional[str] = None
