"""Pytest configuration for the test suite."""

import pytest

from cypher_transact.config import Neo4jHTTPSettings
from cypher_transact.infrastructure.neo4j_http_client import Neo4jHTTPClient


@pytest.fixture
def http_settings() -> Neo4jHTTPSettings:
    """Settings pointing at a fake local server."""
    return Neo4jHTTPSettings(url="http://localhost:7474")


@pytest.fixture
async def db(http_settings: Neo4jHTTPSettings) -> Neo4jHTTPClient:
    """
    Yields a `Neo4jHTTPClient` for use with the `httpx_mock` fixture.
    """
    async with Neo4jHTTPClient(http_settings) as client:
        yield client
