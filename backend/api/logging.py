"""Structured logging infrastructure for the API layer.

Provides JSON-formatted logging for production and human-readable
logging for development, plus a PipelineLogger helper for narrative and
illustration pipeline events.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# Extra fields copied from log records into the JSON payload
STRUCTURED_FIELDS = ("narrative_id", "page_number", "stage", "duration", "attempt", "error_type")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


class PipelineLogger:
    """Logger for narrative and illustration pipeline events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("storybook_pipeline")

    def narrative_created(self, narrative_id: str, is_fallback: bool, duration: float) -> None:
        self.logger.info(
            "Narrative created" + (" from fallback story" if is_fallback else ""),
            extra={"narrative_id": narrative_id, "stage": "narrative", "duration": round(duration, 2)},
        )

    def illustrations_enqueued(self, narrative_id: str) -> None:
        self.logger.info(
            "Illustration generation enqueued",
            extra={"narrative_id": narrative_id, "stage": "enqueued"},
        )

    def illustrations_skipped(self, narrative_id: str, reason: str) -> None:
        self.logger.info(
            f"Illustration generation skipped: {reason}",
            extra={"narrative_id": narrative_id, "stage": "skipped"},
        )

    def illustrations_started(self, narrative_id: str, page_count: int) -> None:
        self.logger.info(
            f"Illustration generation started for {page_count} pages",
            extra={"narrative_id": narrative_id, "stage": "started"},
        )

    def illustrations_settled(
        self, narrative_id: str, placeholder_count: int, total: int, duration: float
    ) -> None:
        self.logger.info(
            f"Illustrations settled: {total - placeholder_count}/{total} generated",
            extra={"narrative_id": narrative_id, "stage": "settled", "duration": round(duration, 2)},
        )

    def illustrations_failed(self, narrative_id: str, error: Exception, attempt: int = None) -> None:
        extra = {"narrative_id": narrative_id, "stage": "failed", "error_type": type(error).__name__}
        if attempt:
            extra["attempt"] = attempt
        self.logger.error(f"Illustration generation failed: {error}", extra=extra, exc_info=True)


# Global pipeline logger instance
pipeline_logger = PipelineLogger()
