"""Reflow orchestration: read base version, apply change set, persist version N+1."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from backend.reflow.config import Settings, get_settings
from backend.reflow.db.repositories import ItineraryStore
from backend.reflow.errors import NotFound, ReflowError
from backend.reflow.models.change_set import ChangeSet, ReflowPreferences
from backend.reflow.models.itinerary import Itinerary
from backend.reflow.models.reflow import ChangeSummary
from backend.reflow.models.violations import Violation
from backend.reflow.orchestration.change_set import ChangeSetProcessor, IdFactory
from backend.reflow.utils.logging import StructuredReflowLogger
from backend.reflow.utils.metrics import PrometheusReflowMetrics

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ReflowResult:
    """Committed reflow result."""

    trip_id: str
    itinerary: Itinerary
    version: int
    summary: ChangeSummary
    warnings: list[Violation] = field(default_factory=list)


class ReflowOrchestrator:
    """Entry point for reflowing a stored itinerary.

    Optimistic concurrency: the caller names the base version it read and the
    store's compare-and-set rejects the write if another reflow committed
    first. Nothing is written unless the whole pipeline succeeds.
    """

    def __init__(
        self,
        store: ItineraryStore,
        *,
        settings: Settings | None = None,
        clock: Clock = utc_now,
        id_factory: IdFactory | None = None,
        metrics: PrometheusReflowMetrics | None = None,
        structured_logger: StructuredReflowLogger | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._processor = ChangeSetProcessor(settings or get_settings(), id_factory)
        self._metrics = metrics or PrometheusReflowMetrics()
        self._log = structured_logger or StructuredReflowLogger()

    def reflow(
        self,
        trip_id: str,
        base_version: int,
        change_set: ChangeSet,
        preferences: ReflowPreferences | None = None,
    ) -> ReflowResult:
        """Apply change_set on top of base_version and persist base_version + 1.

        Args:
            trip_id: Trip identifier
            base_version: Version the caller read
            change_set: Edits to apply
            preferences: Optimization preferences

        Returns:
            ReflowResult for the committed version

        Raises:
            NotFound: If the trip/base version does not exist
            InvalidChangeSet: If the change set is malformed
            BudgetExceeded: If a budget ceiling is exceeded
            VersionConflict: If another reflow committed on top of base_version first
        """
        started = time.perf_counter()

        try:
            base = self._store.get(trip_id, base_version)
            if base is None:
                raise NotFound(trip_id, base_version)

            processed = self._processor.apply(base, change_set, preferences, now=self._clock())

            new_version = base_version + 1
            self._store.put(
                trip_id,
                new_version,
                processed.itinerary,
                locked_activity_ids=change_set.locked_activity_ids,
            )
        except ReflowError as e:
            latency_ms = (time.perf_counter() - started) * 1000
            self._metrics.record_outcome(e.kind, latency_ms)
            self._log.log_attempt(trip_id, base_version, e.kind, latency_ms, error_reason=e.message)
            raise

        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_outcome("success", latency_ms)
        for warning in processed.warnings:
            self._metrics.inc_warning(warning.code)
        self._log.log_attempt(
            trip_id,
            base_version,
            "success",
            latency_ms,
            counts={**processed.summary.model_dump(), "warnings": len(processed.warnings)},
        )

        return ReflowResult(
            trip_id=trip_id,
            itinerary=processed.itinerary,
            version=new_version,
            summary=processed.summary,
            warnings=processed.warnings,
        )
