"""
Structured JSON logging for HabitLens.
Provides analysis-run tracing and per-habit failure reporting.
"""

import os
import json
import logging
import uuid
from contextvars import ContextVar
from typing import Dict, Any, Optional
from datetime import datetime
from pythonjsonlogger import jsonlogger

from habitlens import config

# One context per asyncio task tree.
_analysis_context: ContextVar[Dict[str, Any]] = ContextVar("analysis_context", default={})


class StructuredLogger:
    """Structured JSON logger with analysis-run context."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    @property
    def analysis_context(self) -> Dict[str, Any]:
        return _analysis_context.get()

    def set_analysis_context(self, run_id: str, habit_count: Optional[int] = None,
                             entry_count: Optional[int] = None):
        """Set context for the current analysis run.

        Args:
            run_id: Unique identifier for one dashboard computation
            habit_count: Number of habits handed to the run
            entry_count: Number of valid entries handed to the run
        """
        _analysis_context.set({
            "run_id": run_id,
            "habit_count": habit_count,
            "entry_count": entry_count,
            "timestamp": datetime.now().isoformat(),
        })

    def clear_context(self):
        """Clear analysis context."""
        _analysis_context.set({})

    def log(self, level: str, message: str, **kwargs):
        """Log message with structured context.

        Args:
            level: Log level ('debug', 'info', 'warning', 'error', 'critical')
            message: Log message
            **kwargs: Additional fields to include in JSON
        """
        log_data = {
            "message": message,
            **self.analysis_context,
            **kwargs,
        }

        getattr(self.logger, level)(json.dumps(log_data, default=str))

    def debug(self, message: str, **kwargs):
        self.log("debug", message, **kwargs)

    def info(self, message: str, **kwargs):
        self.log("info", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log("warning", message, **kwargs)

    def error(self, message: str, exc_info: Optional[str] = None, **kwargs):
        self.log("error", message, exc_info=exc_info, **kwargs)

    def critical(self, message: str, **kwargs):
        self.log("critical", message, **kwargs)

    def log_analysis_started(self, habit_count: int, entry_count: int) -> str:
        """Open an analysis run and return its id."""
        run_id = str(uuid.uuid4())
        self.set_analysis_context(run_id, habit_count, entry_count)
        self.info("Dashboard analysis started")
        return run_id

    def log_analysis_completed(self, valid_count: int, dropped_count: int, duration_ms: float,
                               untracked_count: int = 0):
        """Log the end of an analysis run.

        Args:
            valid_count: Habits that produced an insight bundle
            dropped_count: Habits whose analysis raised
            duration_ms: Wall-clock run time
            untracked_count: Habits skipped because they have no entries
        """
        self.info(
            f"Dashboard analysis completed for {valid_count} habits",
            valid_habits=valid_count,
            dropped_habits=dropped_count,
            untracked_habits=untracked_count,
            duration_ms=round(duration_ms, 2),
        )

    def log_habit_failure(self, habit_id: str, error: Exception):
        """Log a habit whose insight bundle could not be built."""
        self.error(
            f"Insight analysis failed for habit {habit_id}",
            exc_info=repr(error),
            habit_id=habit_id,
            error_type=type(error).__name__,
        )

    def log_skipped_record(self, kind: str, index: int, reason: str):
        """Log an input record dropped during validation."""
        self.debug(
            f"Skipped malformed {kind} record at index {index}",
            record_kind=kind,
            index=index,
            reason=reason,
        )


def setup_json_logging(log_file: Optional[str] = None, level: Optional[str] = None):
    """Setup JSON logging to file and console.

    Safe to call more than once: handlers installed by a previous call are
    replaced, not duplicated.

    Args:
        log_file: Optional file path for JSON logs (defaults to HABITLENS_LOG_FILE)
        level: Root log level name (defaults to HABITLENS_LOG_LEVEL)
    """
    log_file = log_file or config.LOG_FILE
    root_logger = logging.getLogger()
    root_logger.setLevel(level or config.LOG_LEVEL)

    for handler in list(root_logger.handlers):
        if getattr(handler, "_habitlens", False):
            root_logger.removeHandler(handler)
            handler.close()

    if config.JSON_LOGS:
        formatter = jsonlogger.JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler._habitlens = True
    root_logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler._habitlens = True
        root_logger.addHandler(file_handler)

        root_logger.info(f"JSON logging initialized to {log_file}")


# Global structured logger instance
logger = StructuredLogger("habitlens")
