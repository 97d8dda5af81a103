"""Pytest configuration and fixtures for lcplatform tests."""

from __future__ import annotations

import asyncio

import pytest
from prometheus_client import CollectorRegistry

from lcplatform.application import MockDataStoreService
from lcplatform.infrastructure.config import DataStoreConfig
from lcplatform.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def datastore_config() -> DataStoreConfig:
    """Provide the default engine configuration, independent of the environment."""
    return DataStoreConfig()


@pytest.fixture
def service(
    datastore_config: DataStoreConfig, metrics_registry: MetricsRegistry
) -> MockDataStoreService:
    """Provide a connected mock DataStore."""
    svc = MockDataStoreService(config=datastore_config, metrics=metrics_registry)
    asyncio.run(svc.connect())
    return svc


@pytest.fixture
def metric_value(metrics_registry: MetricsRegistry):
    """Read a sample from the test metrics registry, 0.0 if absent."""

    def read(name: str, labels: dict[str, str] | None = None) -> float:
        value = metrics_registry._registry.get_sample_value(name, labels or {})
        return value or 0.0

    return read


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
