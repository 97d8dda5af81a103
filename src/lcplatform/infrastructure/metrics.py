"""Prometheus metrics for the DataStore mock engine."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all DataStore engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Statement metrics
        self.statements_total = Counter(
            "datastore_statements_total",
            "Total number of statements executed",
            ["kind", "status"],  # kind: select, insert, ...; status: success, error
            registry=self._registry,
        )

        self.statement_latency_seconds = Histogram(
            "datastore_statement_latency_seconds",
            "Statement latency in seconds",
            ["kind"],
            buckets=(0.00001, 0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
            registry=self._registry,
        )

        # Transaction metrics
        self.transactions_total = Counter(
            "datastore_transactions_total",
            "Total number of transactions",
            ["status"],  # commit, rollback
            registry=self._registry,
        )

        self.transactions_active = Gauge(
            "datastore_transactions_active",
            "Number of open transactions",
            registry=self._registry,
        )

        # Migration metrics
        self.migrations_applied_total = Counter(
            "datastore_migrations_applied_total",
            "Total migrations applied",
            registry=self._registry,
        )

        self.migrations_skipped_total = Counter(
            "datastore_migrations_skipped_total",
            "Total migrations skipped because their version was already applied",
            registry=self._registry,
        )

        # Store metrics
        self.tables = Gauge(
            "datastore_tables",
            "Number of tables in the in-memory store",
            registry=self._registry,
        )

        self.info = Info(
            "datastore_engine",
            "DataStore engine information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from lcplatform import __version__
    _metrics.info.info({
        "version": __version__,
        "backend": "mock",
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
