"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from visual_dex.delivery.state_store import InMemoryStore, StateRepository  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeVision:
    """Labeler returning a scripted label (or raising)."""

    def __init__(self, label=None, error=None):
        self.label = label
        self.error = error
        self.calls = 0

    async def detect_label(self, image):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.label


class FakeClock:
    """Mutable clock for coordinator tests."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed mid-morning instant."""
    return datetime(2024, 3, 15, 10, 30)


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def repository(memory_store):
    return StateRepository(memory_store)


@pytest.fixture
def fake_vision():
    return FakeVision(label="bottle")


@pytest.fixture
def clock(now):
    return FakeClock(now)
