"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from recipekit.config import Settings
from recipekit.database import get_db
from recipekit.main import app
from recipekit.normalize.aggregation import RawIngredient
from recipekit.rate_limit import RateLimiterRegistry, get_rate_limiters

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )


# =============================================================================
# Clock Fixtures
# =============================================================================


class FakeClock:
    """Manually advanced clock for rate limiter tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    """A clock that only moves when told to."""
    return FakeClock()


# =============================================================================
# Ingredient Fixtures
# =============================================================================


@pytest.fixture
def pancake_ingredients():
    """Ingredients of a pancake recipe serving 4."""
    return [
        RawIngredient(name="Flour", quantity="2 cups"),
        RawIngredient(name="Milk", quantity="1 1/2 cups"),
        RawIngredient(name="Eggs", quantity="2"),
        RawIngredient(name="Sugar", quantity="2 tbsp"),
        RawIngredient(name="Salt", quantity="pinch"),
        RawIngredient(name="Butter", quantity=None),
    ]


@pytest.fixture
def cookie_ingredients():
    """Ingredients of a cookie recipe."""
    return [
        RawIngredient(name="flour", quantity="1 cups"),
        RawIngredient(name="Brown Sugar", quantity="1 cup"),
        RawIngredient(name="butter", quantity="1 cup"),
        RawIngredient(name="Egg", quantity="1"),
        RawIngredient(name="Chocolate chips", quantity="2 cups"),
    ]


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def test_settings():
    """Settings with small rate limits so tests can hit them."""
    return Settings(
        search_rate_limit_requests=3,
        search_rate_limit_window_seconds=60,
        api_read_rate_limit_requests=100,
        api_write_rate_limit_requests=100,
        api_rate_limit_window_seconds=60,
    )


@pytest.fixture
def rate_limiters(test_settings, fake_clock):
    """A fresh limiter registry driven by the fake clock."""
    return RateLimiterRegistry.from_settings(test_settings, clock=fake_clock)


@pytest.fixture
def mock_db_session():
    """Mock async database session."""
    session = MagicMock()
    session.scalar = AsyncMock(return_value=0)
    session.execute = AsyncMock()
    return session


@pytest.fixture
def client(rate_limiters, mock_db_session):
    """Test client with rate limiters and database session overridden."""

    async def override_get_db():
        yield mock_db_session

    app.dependency_overrides[get_rate_limiters] = lambda: rate_limiters
    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()
