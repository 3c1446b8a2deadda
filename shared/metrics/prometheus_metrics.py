"""Prometheus metrics definitions and helpers.

Provides HTTP request metrics and cache statistics gauges for the API.
Each application instance owns a registry so several apps (e.g. in tests)
can coexist in one process.
"""

from typing import Any, Dict, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class ApiMetrics:
    """HTTP and cache metrics."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """Initialize API metrics.

        Args:
            registry: Prometheus registry to use (a new one when omitted)
        """
        self.registry = registry or CollectorRegistry()

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=self.registry,
        )

        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry,
        )

        self.http_requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method"],
            registry=self.registry,
        )

        # Cache counters are owned by the caches; mirrored at scrape time
        self.cache_operations = Gauge(
            "cache_operations",
            "Cache operation counts since start or last reset",
            ["cache", "operation"],
            registry=self.registry,
        )

        self.cache_entries = Gauge(
            "cache_entries",
            "Entries currently held by the cache",
            ["cache"],
            registry=self.registry,
        )

    def observe_request(self, method: str, endpoint: str, status: int, duration: float) -> None:
        """Record a completed request."""
        self.http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
        self.http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    def observe_cache(self, statistics: Dict[str, Any]) -> None:
        """Copy a cache's ``get_statistics()`` output into the gauges."""
        name = statistics["name"]
        for operation, value in statistics["metrics"].items():
            if operation == "hit_rate":
                continue
            self.cache_operations.labels(cache=name, operation=operation).set(value)
        self.cache_entries.labels(cache=name).set(statistics["size"])

    def render(self) -> bytes:
        """Prometheus exposition of this registry."""
        return generate_latest(self.registry)
