"""
HabitLens — Input Validation  (habitlens/validation.py)
=======================================================
Boundary between the storage layer's loosely typed records and the
analyzers:

    raw records (dicts / models / anything)
    → parse_entries / parse_habits   tolerant: bad records are skipped and logged
    → list[Entry] / list[Habit]
    → analyzers

The strict variants (`parse_entries(strict=True)`, `validate_habit`) raise
MalformedInputError instead, for callers that create records.

Usage:
    from habitlens.validation import parse_entries
    entries = parse_entries(raw_list)
"""
from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from habitlens.exceptions import MalformedInputError
from habitlens.schemas import Entry, Habit
from habitlens.structured_logging import logger

HABIT_NAME_MIN = 2
HABIT_NAME_MAX = 50
HABIT_DESCRIPTION_MAX = 200


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "record"
    return f"{location}: {first.get('msg', 'invalid')}"


def _is_sequence(raw) -> bool:
    return isinstance(raw, (list, tuple))


# ══════════════════════════════════════════════
# ENTRIES
# ══════════════════════════════════════════════

def parse_entries(raw, strict: bool = False) -> list[Entry]:
    """
    Validate a list of entry records.

    Non-list input yields []; records that are not dicts or Entry models, or
    that carry no usable timestamp, are skipped.  With strict=True either
    case raises MalformedInputError.
    """
    if not _is_sequence(raw):
        if strict:
            raise MalformedInputError("entries must be a list", field="entries")
        return []

    parsed: list[Entry] = []
    for index, item in enumerate(raw):
        if isinstance(item, Entry):
            parsed.append(item)
            continue
        if isinstance(item, dict):
            try:
                parsed.append(Entry.model_validate(item))
                continue
            except ValidationError as exc:
                reason = _describe(exc)
        else:
            reason = f"unsupported record type {type(item).__name__}"

        if strict:
            raise MalformedInputError(f"invalid entry at index {index}: {reason}",
                                      field=f"entries[{index}]")
        logger.log_skipped_record("entry", index, reason)
    return parsed


# ══════════════════════════════════════════════
# HABITS
# ══════════════════════════════════════════════

def parse_habit(raw) -> Optional[Habit]:
    """Habit model from a record, or None when it has no usable id."""
    if isinstance(raw, Habit):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return Habit.model_validate(raw)
    except ValidationError:
        return None


def parse_habits(raw) -> list[Habit]:
    if not _is_sequence(raw):
        return []
    habits: list[Habit] = []
    for index, item in enumerate(raw):
        habit = parse_habit(item)
        if habit is None:
            logger.log_skipped_record("habit", index, "missing or invalid habit id")
            continue
        habits.append(habit)
    return habits


def validate_habit_name(name) -> Optional[str]:
    """Error message for an unacceptable habit name, else None."""
    if not isinstance(name, str) or not name.strip():
        return "Habit name is required"
    if len(name.strip()) < HABIT_NAME_MIN:
        return f"Habit name must be at least {HABIT_NAME_MIN} characters"
    if len(name.strip()) > HABIT_NAME_MAX:
        return f"Habit name must be less than {HABIT_NAME_MAX} characters"
    return None


def validate_habit_description(description) -> Optional[str]:
    if description and len(description) > HABIT_DESCRIPTION_MAX:
        return f"Description must be less than {HABIT_DESCRIPTION_MAX} characters"
    return None


def validate_habit(raw) -> Habit:
    """Strictly validate a habit record about to be created or updated."""
    habit = parse_habit(raw)
    if habit is None:
        raise MalformedInputError("habit record must carry an id", field="id")

    error = validate_habit_name(habit.name)
    if error:
        raise MalformedInputError(error, field="name")
    error = validate_habit_description(habit.description)
    if error:
        raise MalformedInputError(error, field="description")

    return habit.model_copy(update={"name": habit.name.strip()})
