"""Domain service layer."""

from .argument_classifier import (
    RequestBuilder,
    RequestDescriptor,
    build_request,
    classify_arguments,
)
from .exceptions import (
    CypherTransactError,
    InvalidRequestError,
    ServerError,
    TransportError,
    UnmatchedSubstitutionError,
)
from .result_normalizer import normalize_results
from .statement_composer import (
    compose_statement,
    compose_statement_callback,
    compose_statements,
)
from .substitutions import apply_substitutions, try_apply_substitutions

__all__ = [
    "CypherTransactError",
    "InvalidRequestError",
    "RequestBuilder",
    "RequestDescriptor",
    "ServerError",
    "TransportError",
    "UnmatchedSubstitutionError",
    "apply_substitutions",
    "build_request",
    "classify_arguments",
    "compose_statement",
    "compose_statement_callback",
    "compose_statements",
    "normalize_results",
    "try_apply_substitutions",
]
