"""Prometheus metrics for reflow execution."""

from prometheus_client import Counter, Histogram

reflow_latency_ms = Histogram(
    "reflow_latency_ms",
    "Reflow latency in milliseconds",
    ["outcome"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

reflow_outcomes_total = Counter(
    "reflow_outcomes_total",
    "Total reflow attempts by outcome",
    ["outcome"],
)

reflow_warnings_total = Counter(
    "reflow_warnings_total",
    "Total advisory warnings attached to successful reflows",
    ["code"],
)


class PrometheusReflowMetrics:
    """Prometheus-based reflow metrics implementation."""

    def record_outcome(self, outcome: str, latency_ms: float) -> None:
        """Record one reflow attempt."""
        reflow_latency_ms.labels(outcome=outcome).observe(latency_ms)
        reflow_outcomes_total.labels(outcome=outcome).inc()

    def inc_warning(self, code: str) -> None:
        """Increment warning counter."""
        reflow_warnings_total.labels(code=code).inc()
