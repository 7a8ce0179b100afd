"""Shared fixtures for integration tests against the live openFDA API."""

import pytest

from fda_insights.data_sources.base_client import CacheConfig, ClientConfig
from fda_insights.data_sources.openfda import OpenFDAClient


@pytest.fixture
async def openfda_client():
    """Create and tear down an OpenFDAClient with caching disabled."""
    c = OpenFDAClient(config=ClientConfig(cache=CacheConfig(enabled=False)))
    yield c
    await c.close()
