"""Construction of a configured DataStore backend."""

from __future__ import annotations

from lcplatform.application.mock_datastore_service import MockDataStoreService
from lcplatform.infrastructure.config import Config, get_config
from lcplatform.infrastructure.logging import setup_logging
from lcplatform.infrastructure.metrics import MetricsRegistry, setup_metrics
from lcplatform.infrastructure.tracing import setup_tracing


def create_datastore(
    config: Config | None = None,
    metrics: MetricsRegistry | None = None,
) -> MockDataStoreService:
    """Apply observability settings and build an unconnected mock DataStore.

    Logging is always configured. Tracing is installed when an OTLP
    endpoint is set, and a metrics endpoint is started when a metrics
    port is set and no registry was passed in.

    Args:
        config: Configuration. Defaults to the global config.
        metrics: Metrics registry to use instead of the global one.

    Returns:
        The service; call ``connect()`` before use.
    """
    config = config or get_config()
    obs = config.observability

    setup_logging(level=obs.log_level, log_format=obs.log_format)

    if obs.otel_endpoint:
        setup_tracing(service_name=obs.otel_service_name, otlp_endpoint=obs.otel_endpoint)

    if metrics is None and obs.metrics_port is not None:
        metrics = setup_metrics(port=obs.metrics_port)

    return MockDataStoreService(config=config.datastore, metrics=metrics)
