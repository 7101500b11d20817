"""Root conftest for pytest configuration and shared fixtures.

Loaded before both testpaths (tests/ and the colocated facetsearch/**/tests/),
so fixtures here are available everywhere.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any facetsearch module import
# Uses setdefault so real env vars are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("FACETSEARCH_ENVIRONMENT", "test")
os.environ.setdefault("FACETSEARCH_LOG_LEVEL", "WARNING")
os.environ.setdefault("FACETSEARCH_API_BASE_URL", "https://api.test")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_api():
    """FakeSearchApiClient that records calls."""
    from facetsearch.adapters.api.fake import FakeSearchApiClient

    return FakeSearchApiClient()


@pytest.fixture
def fake_navigator():
    """FakeNavigator starting at the root location."""
    from facetsearch.adapters.navigation.fake import FakeNavigator

    return FakeNavigator()


@pytest.fixture
def registry():
    """FacetConfigRegistry built from the bundled facets.yml."""
    from facetsearch.domains.facets.registry import FacetConfigRegistry

    registry = FacetConfigRegistry()
    registry.build()
    return registry
