"""Structured logging for planner events."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

RAW_TEXT_LOG_LIMIT = 2000


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure the package logger (stderr, plain format)."""
    logger = logging.getLogger("mandalart")
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    return logger


class MandalartLogger:
    """Structured JSON logger for controller and generation events."""

    def __init__(self, name: str = "mandalart.events"):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, event: str, **kwargs):
        """Log a structured event."""
        data = {
            "event": event,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **kwargs
        }
        self.logger.log(level, json.dumps(data, ensure_ascii=False))

    def step_transition(self, session_id: str, from_step: str, to_step: str):
        """Log a controller step change."""
        self._log(
            logging.INFO,
            "step_transition",
            session_id=session_id,
            from_step=from_step,
            to_step=to_step
        )

    def generation_started(self, kind: str, provider: str, model: str):
        self._log(logging.INFO, "generation_started", kind=kind, provider=provider, model=model)

    def generation_complete(self, kind: str, duration_seconds: float):
        self._log(
            logging.INFO,
            "generation_complete",
            kind=kind,
            duration_seconds=round(duration_seconds, 2)
        )

    def generation_failed(self, kind: str, error_type: str, message: str, raw_text: Optional[str] = None):
        """Log a failed generation. Raw model output is kept for diagnosis only."""
        kwargs = {}
        if raw_text is not None:
            kwargs["raw_text"] = raw_text[:RAW_TEXT_LOG_LIMIT]
        self._log(
            logging.ERROR,
            "generation_failed",
            kind=kind,
            error_type=error_type,
            message=message,
            **kwargs
        )

    def persistence_failed(self, operation: str, history_id: Optional[str], message: str):
        self._log(
            logging.ERROR,
            "persistence_failed",
            operation=operation,
            history_id=history_id,
            message=message
        )

    def checklist_toggled(self, history_id: Optional[str], item_id: str, checked: bool, task_completed: bool):
        self._log(
            logging.INFO,
            "checklist_toggled",
            history_id=history_id,
            item_id=item_id,
            checked=checked,
            task_completed=task_completed
        )

    def export_complete(self, path: str):
        self._log(logging.INFO, "export_complete", path=path)

    def export_failed(self, message: str):
        self._log(logging.WARNING, "export_failed", message=message)
