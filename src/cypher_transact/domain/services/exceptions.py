"""Exceptions raised by the query composition and transaction layers."""

from typing import Any, Optional

from ..models.statements import ResponseInfo


class CypherTransactError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, info: Optional[ResponseInfo] = None) -> None:
        self.info = info
        super().__init__(message)


class InvalidRequestError(CypherTransactError, ValueError):
    """Raised when an operation is called with arguments it cannot use."""


class UnmatchedSubstitutionError(CypherTransactError, ValueError):
    """
    Raised when ``${name}`` placeholders remain after substitution.

    ``placeholders`` lists each unmatched name once, in order of first
    appearance, even if the template repeats it.
    """

    def __init__(self, placeholders: list[str], info: Optional[ResponseInfo] = None) -> None:
        self.placeholders = placeholders
        noun = "placeholders" if len(placeholders) > 1 else "placeholder"
        listed = ", ".join(f"${{{name}}}" for name in placeholders)
        super().__init__(f"Unmatched substitution {noun}: {listed}", info)


class TransportError(CypherTransactError):
    """Raised when the request never produced a usable response body."""

    def __init__(self, original_error: Exception, info: Optional[ResponseInfo] = None) -> None:
        self.original_error = original_error
        super().__init__(str(original_error), info)


class ServerError(CypherTransactError):
    """Raised when the server answers with a non-empty ``errors`` list."""

    def __init__(self, errors: list[dict[str, Any]], info: Optional[ResponseInfo] = None) -> None:
        self.errors = errors
        details = "; ".join(
            f"{err.get('code', 'UnknownError')}: {err.get('message', '')}"
            if isinstance(err, dict)
            else str(err)
            for err in errors
        )
        noun = "errors" if len(errors) > 1 else "error"
        super().__init__(f"Neo4j reported {len(errors)} {noun}: {details}", info)
