"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from src.app import create_app
from src.config.settings import Settings
from src.infrastructure.store import InsightsStore
from src.services.charts.formatter import make_rng
from src.services.insights.client import InsightsClient
from src.services.notifications.center import NotificationCenter


@pytest.fixture
def settings():
    """Provide settings with no simulated latency."""
    return Settings(
        widget_fetch_delay=0,
        widget_update_delay=0,
        report_generation_delay=0,
        document_fetch_delay=0,
        document_upload_delay=0,
        insights_fetch_delay=0,
        report_action_delay=0,
        config_debounce_seconds=0,
        retry_initial_delay=0,
        random_seed=7,
    )


@pytest.fixture
def rng():
    return make_rng(42)


@pytest.fixture
def store():
    return InsightsStore.seeded()


@pytest.fixture
def insights_client(settings, store, rng):
    return InsightsClient(settings, store, rng)


@pytest.fixture
def notifications():
    return NotificationCenter(default_duration=5.0)


@pytest.fixture
def client(settings):
    """Provide a FastAPI test client with the lifespan running."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client
