"""HTTP transport and the Neo4j transactional endpoint client."""

from .api_clients import (
    APIHTTPError,
    APIRequestError,
    AsyncHTTPClient,
    BaseAPIClientError,
)
from .neo4j_http_client import Neo4jHTTPClient

__all__ = [
    "APIHTTPError",
    "APIRequestError",
    "AsyncHTTPClient",
    "BaseAPIClientError",
    "Neo4jHTTPClient",
]
