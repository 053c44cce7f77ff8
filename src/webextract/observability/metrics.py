"""
Defines Prometheus metrics for the extraction pipeline.

No exporter is started; collectors live in the default registry and can be
scraped by whatever process embeds the library.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import generate_latest

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Reloading this module (tests do) must not register a collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race; use the collector that won.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "fetch_requests_total": Counter(
            "webextract_fetch_requests_total",
            "Outbound page fetches by outcome",
            ["outcome"],
        ),
        "fetch_latency_seconds": Histogram(
            "webextract_fetch_latency_seconds",
            "Time from dispatch to a fully read response",
        ),
        "rate_limiter_wait_seconds": Histogram(
            "webextract_rate_limiter_wait_seconds",
            "Delay applied by the dispatch rate limiter before a fetch",
            buckets=(0.0, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
        ),
        "extractions_total": Counter(
            "webextract_extractions_total",
            "Completed extraction calls by outcome",
            ["outcome"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def export_prometheus() -> str:
    """Export metrics in Prometheus text format."""
    return generate_latest(_PROM_REGISTRY).decode("utf-8")
