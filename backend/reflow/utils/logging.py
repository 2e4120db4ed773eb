"""Structured logging for reflow attempts."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredReflowLogger:
    """Structured logger for reflow attempts."""

    def log_attempt(
        self,
        trip_id: str,
        base_version: int,
        outcome: str,
        latency_ms: float,
        counts: dict[str, Any] | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one reflow attempt with structured data."""
        log_data: dict[str, Any] = {
            "trip_id": trip_id,
            "base_version": base_version,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if counts:
            log_data.update(counts)

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Reflow {trip_id}@{base_version} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
