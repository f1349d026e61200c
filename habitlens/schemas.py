"""
Input record models for HabitLens with validation.

Records arrive in the storage layer's camelCase shape; both the aliases
(`habitId`, `createdAt`, `aiData`) and the snake_case field names are
accepted.
"""

from datetime import date as calendar_date, datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from habitlens.temporal import to_datetime


def _coerce_id(value):
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise ValueError("identifier must be a string or number")
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError("identifier must be a string or number")


# ══════════════════════════════════════════════
# ENTRY
# ══════════════════════════════════════════════

class AIData(BaseModel):
    """Classification attached to an entry when it was captured."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    category: Optional[str] = None
    category_name: Optional[str] = Field(None, alias="categoryName")
    confidence: float = 0.0
    tags: list[str] = Field(default_factory=list)

    @field_validator("category", "category_name", mode="before")
    @classmethod
    def text_or_none(cls, v):
        return v if isinstance(v, str) else None

    @field_validator("confidence", mode="before")
    @classmethod
    def default_confidence(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0.0
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def string_tags(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        return [tag for tag in v if isinstance(tag, str)]


class Entry(BaseModel):
    """One photographed observation of a habit.

    The instant used by every analyzer is resolved once from the
    best-available field: `createdAt`, then `timestamp`, then `date`.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    habit_id: Optional[str] = Field(None, alias="habitId")
    date: Optional[str] = None
    created_at: Any = Field(None, alias="createdAt")
    timestamp: Any = None
    photo: Any = None
    note: Optional[str] = None
    ai_data: Optional[AIData] = Field(None, alias="aiData")

    _instant: datetime = PrivateAttr()

    @field_validator("id", "habit_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v):
        return _coerce_id(v)

    @field_validator("date", mode="before")
    @classmethod
    def date_key(cls, v):
        if isinstance(v, (datetime, calendar_date)):
            return v.isoformat()
        return v if isinstance(v, str) else None

    @field_validator("note", mode="before")
    @classmethod
    def note_text(cls, v):
        return v if isinstance(v, str) else None

    @field_validator("ai_data", mode="before")
    @classmethod
    def drop_unusable_ai_data(cls, v):
        """Unreadable aiData becomes None; the entry itself is kept."""
        if isinstance(v, AIData):
            return v
        if not isinstance(v, dict):
            return None
        try:
            return AIData.model_validate(v)
        except ValidationError:
            return None

    @model_validator(mode="after")
    def resolve_instant(self):
        for candidate in (self.created_at, self.timestamp, self.date):
            instant = to_datetime(candidate)
            if instant is not None:
                self._instant = instant
                return self
        raise ValueError("entry has no usable createdAt, timestamp or date")

    @property
    def instant(self) -> datetime:
        return self._instant

    @property
    def day(self) -> calendar_date:
        return self._instant.date()

    @property
    def legacy_day(self) -> calendar_date:
        """Calendar day from the stored `date` key, falling back to the instant."""
        parsed = to_datetime(self.date)
        return parsed.date() if parsed else self._instant.date()


# ══════════════════════════════════════════════
# HABIT
# ══════════════════════════════════════════════

class Habit(BaseModel):
    """A tracked behavior.  Name rules are enforced by validation.validate_habit."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: Any = Field(None, alias="createdAt")
    updated_at: Any = Field(None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identifier(cls, v):
        v = _coerce_id(v)
        if not v:
            raise ValueError("habit id is required")
        return v

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v):
        return "" if v is None else v
