"""
HabitLens — Configuration  (habitlens/config.py)
=================================================
Thresholds, weights and analysis windows shared by every analyzer, plus
the handful of runtime settings read from the environment (or a .env
file next to the process).

Environment:
  HABITLENS_LOG_LEVEL   root log level for setup_json_logging (default INFO)
  HABITLENS_LOG_FILE    optional path for a JSON log file
  HABITLENS_JSON_LOGS   "0"/"false" to keep the plain stdlib formatter
"""
import os

from dotenv import load_dotenv

load_dotenv()


# ══════════════════════════════════════════════
# RUNTIME SETTINGS
# ══════════════════════════════════════════════

LOG_LEVEL = os.environ.get("HABITLENS_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.environ.get("HABITLENS_LOG_FILE") or None
JSON_LOGS = os.environ.get("HABITLENS_JSON_LOGS", "1").lower() not in ("0", "false", "no")


# ══════════════════════════════════════════════
# CLASSIFICATION
# ══════════════════════════════════════════════

CONFIDENCE_HIGH = 0.8
CONFIDENCE_MEDIUM = 0.6
CONFIDENCE_LOW = 0.4
CONFIDENCE_MINIMUM = 0.3


# ══════════════════════════════════════════════
# CONSISTENCY
# ══════════════════════════════════════════════

CONSISTENCY_FREQUENCY_WEIGHT = 0.6
CONSISTENCY_RECENCY_WEIGHT = 0.4

CONSISTENCY_EXCELLENT = 0.8
CONSISTENCY_GOOD = 0.6
CONSISTENCY_FAIR = 0.4

RECENT_ENTRIES_WINDOW = 7
WEEK_DAYS = 7
RECENCY_PENALTY_DAYS = 7


# ══════════════════════════════════════════════
# PROGRESS
# ══════════════════════════════════════════════

HABIT_FORMATION_DAYS = 21
MIN_CONSISTENCY_RATE = 0.5
MIN_ENTRIES_FOR_TREND = 14


# ══════════════════════════════════════════════
# REMINDERS
# ══════════════════════════════════════════════

HOURS_FOR_REMINDER = 24
MAX_REMINDER_HOURS = 48


# ══════════════════════════════════════════════
# STRENGTH
# ══════════════════════════════════════════════

STRENGTH_WEIGHTS = {
    "consistency": 0.25,
    "duration":    0.20,
    "recency":     0.30,
    "frequency":   0.15,
    "stability":   0.10,
}

STRENGTH_VERY_STRONG = 0.8
STRENGTH_STRONG = 0.65
STRENGTH_MODERATE = 0.5
STRENGTH_DEVELOPING = 0.35


# ══════════════════════════════════════════════
# DASHBOARD AGGREGATION
# ══════════════════════════════════════════════

PERFORMANCE_STRENGTH_WEIGHT = 0.6
PERFORMANCE_CONSISTENCY_WEIGHT = 0.4

ATTENTION_LOW_CONSISTENCY = 0.4
ATTENTION_LOW_STRENGTH = 0.35

MOTIVATION_CELEBRATION_STRENGTH = 0.7
MOTIVATION_ENCOURAGEMENT_STRENGTH = 0.5
MOTIVATION_EXCELLENT_CONSISTENCY = 0.8

TOP_PERFORMING_LIMIT = 3
NEEDING_ATTENTION_LIMIT = 3
RECENT_ACHIEVEMENTS_LIMIT = 5

HABIT_SUGGESTION_LIMIT = 12
