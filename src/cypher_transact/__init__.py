"""Compose Cypher statements and sequence transactions over Neo4j's HTTP API."""

from .config import Neo4jHTTPSettings, RuntimeSettings, load_runtime_settings
from .domain.models import (
    QueryResponse,
    QueryResult,
    ResponseInfo,
    Statement,
    TransactionHandle,
)
from .domain.services import (
    CypherTransactError,
    InvalidRequestError,
    RequestBuilder,
    ServerError,
    TransportError,
    UnmatchedSubstitutionError,
    apply_substitutions,
    build_request,
    compose_statement,
    normalize_results,
)
from .domain.utils import escape_identifier
from .infrastructure import Neo4jHTTPClient

__version__ = "0.1.0"

__all__ = [
    "CypherTransactError",
    "InvalidRequestError",
    "Neo4jHTTPClient",
    "Neo4jHTTPSettings",
    "QueryResponse",
    "QueryResult",
    "RequestBuilder",
    "ResponseInfo",
    "RuntimeSettings",
    "ServerError",
    "Statement",
    "TransactionHandle",
    "TransportError",
    "UnmatchedSubstitutionError",
    "apply_substitutions",
    "build_request",
    "compose_statement",
    "escape_identifier",
    "load_runtime_settings",
    "normalize_results",
]
