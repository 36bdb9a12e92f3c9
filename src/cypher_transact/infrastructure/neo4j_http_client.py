"""
Client for the Neo4j transactional HTTP endpoint.

Each operation takes its arguments in the flexible shapes described in
:mod:`cypher_transact.domain.services.argument_classifier`, for example::

    async with Neo4jHTTPClient(settings) as db:
        response = await db.begin("CREATE (:${label})", {"label": "A"}, {})
        txn = response.transaction_id
        await db.query(txn, "CREATE (:B {name: $name})", {"name": "b"})
        await db.commit(txn)

An operation returns a :class:`QueryResponse` on success and raises a
:class:`CypherTransactError` carrying a :class:`ResponseInfo` on failure. If a
completion handler is passed as the last argument it is called exactly once
as ``handler(error, results, info)`` instead, and the operation returns None.

The client keeps no per-transaction state: the transaction ID handed back by
``begin`` is the only handle, and it is up to the caller to thread it through
later calls and to order concurrent calls against the same transaction.
"""

import inspect
import json
import re
from typing import Any, Mapping, Optional

import httpx
from loguru import logger

from ..config import Neo4jHTTPSettings
from ..domain.models.statements import QueryResponse, QueryResult, ResponseInfo, Statement
from ..domain.services.argument_classifier import RequestDescriptor, build_request
from ..domain.services.exceptions import (
    CypherTransactError,
    InvalidRequestError,
    ServerError,
    TransportError,
    UnmatchedSubstitutionError,
)
from ..domain.services.result_normalizer import normalize_results
from ..domain.services.statement_composer import Template, compose_statement, compose_statements
from .api_clients.base_client import APIHTTPError, APIRequestError, AsyncHTTPClient

COMMIT_URI_PATTERN = re.compile(r"/(\d+)/commit/?$")
LOCATION_PATTERN = re.compile(r"/(\d+)/?$")


def _parse_error_body(content: Any) -> Optional[dict[str, Any]]:
    """Returns the JSON body of an HTTP error response if it carries Neo4j errors."""
    try:
        body = json.loads(content)
    except (TypeError, ValueError):
        return None
    if isinstance(body, dict) and body.get("errors"):
        return body
    return None


def _parse_transaction_id(body: Mapping[str, Any], headers: Mapping[str, str]) -> Optional[int]:
    commit_uri = body.get("commit")
    if isinstance(commit_uri, str):
        match = COMMIT_URI_PATTERN.search(commit_uri)
        if match:
            return int(match.group(1))
    location = headers.get("location")
    if location:
        match = LOCATION_PATTERN.search(location)
        if match:
            return int(match.group(1))
    return None


class Neo4jHTTPClient:
    """Sequences statements and transactions against one Neo4j HTTP server."""

    def __init__(
        self,
        settings: Optional[Neo4jHTTPSettings] = None,
        http_client: Optional[AsyncHTTPClient] = None,
    ):
        self.settings = settings or Neo4jHTTPSettings()
        self.transaction_path = self.settings.transaction_path.strip("/")
        self.http_client = http_client or AsyncHTTPClient(
            base_url=self.settings.url,
            auth=self.settings.auth,
            timeout=self.settings.timeout,
            connect_timeout=self.settings.connect_timeout,
        )
        logger.info(f"Neo4jHTTPClient initialized for {self.settings.url}/{self.transaction_path}")

    async def close(self) -> None:
        await self.http_client.close()

    async def __aenter__(self) -> "Neo4jHTTPClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def build_statement(
        self,
        template: Template,
        substitutions: Optional[Mapping[str, Any]] = None,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> Statement:
        """
        Builds a statement object for use in a list passed to any operation.

        Raises:
            UnmatchedSubstitutionError: If a ``${name}`` placeholder has no substitution.
        """
        return compose_statement(template, substitutions, parameters)

    async def query(self, *args: Any, **fields: Any) -> Optional[QueryResponse]:
        """
        Runs statements, inside an open transaction if a transaction ID leads
        the arguments, otherwise in a transaction committed in the same request.
        """
        descriptor = build_request(*args, **fields)
        if descriptor.transaction_id is None:
            path = f"{self.transaction_path}/commit"
        else:
            path = f"{self.transaction_path}/{descriptor.transaction_id}"
        return await self._execute("POST", path, descriptor)

    async def begin(self, *args: Any, **fields: Any) -> Optional[QueryResponse]:
        """Opens a new transaction, optionally running statements in it."""
        descriptor = build_request(*args, **fields)
        if descriptor.transaction_id is not None:
            logger.warning(f"begin() always opens a new transaction; ignoring ID {descriptor.transaction_id}")
            descriptor.transaction_id = None
        return await self._execute("POST", self.transaction_path, descriptor, opens_transaction=True)

    async def commit(self, *args: Any, **fields: Any) -> Optional[QueryResponse]:
        """Runs any given statements in an open transaction and commits it."""
        descriptor = build_request(*args, **fields)
        transaction_id = self._require_transaction(descriptor, "commit")
        return await self._execute("POST", f"{self.transaction_path}/{transaction_id}/commit", descriptor)

    async def rollback(self, *args: Any, **fields: Any) -> Optional[QueryResponse]:
        """Rolls back an open transaction."""
        descriptor = build_request(*args, **fields)
        transaction_id = self._require_transaction(descriptor, "rollback")
        if descriptor.statements:
            logger.warning("rollback() does not run statements; ignoring them")
            descriptor.clear_statements()
        return await self._execute("DELETE", f"{self.transaction_path}/{transaction_id}", descriptor)

    async def reset_timeout(self, *args: Any, **fields: Any) -> Optional[QueryResponse]:
        """Keeps an open transaction alive by sending it an empty list of statements."""
        descriptor = build_request(*args, **fields)
        transaction_id = self._require_transaction(descriptor, "reset_timeout")
        descriptor.clear_statements()
        return await self._execute("POST", f"{self.transaction_path}/{transaction_id}", descriptor)

    @staticmethod
    def _require_transaction(descriptor: RequestDescriptor, operation: str) -> int:
        if descriptor.transaction_id is None:
            raise InvalidRequestError(f"{operation}() requires a transaction ID")
        return descriptor.transaction_id

    async def _execute(
        self,
        method: str,
        path: str,
        descriptor: RequestDescriptor,
        opens_transaction: bool = False,
    ) -> Optional[QueryResponse]:
        info = ResponseInfo(statements=list(descriptor.statements))

        try:
            statements = compose_statements(descriptor)
        except UnmatchedSubstitutionError as e:
            logger.error(f"Not sending request to {path}: {e}")
            e.info = info
            return await self._complete(descriptor, e, info)
        info.statements = statements

        try:
            body, headers = await self._send(method, path, statements)
        except TransportError as e:
            e.info = info
            return await self._complete(descriptor, e, info)

        info.errors = list(body.get("errors") or [])
        if descriptor.transaction_id is not None:
            info.transaction_id = descriptor.transaction_id
        elif opens_transaction:
            info.transaction_id = _parse_transaction_id(body, headers)
        transaction = body.get("transaction")
        if isinstance(transaction, dict):
            info.timeout = transaction.get("expires")

        if info.errors:
            error = ServerError(info.errors, info)
            logger.error(f"{method} {path} failed: {error}")
            return await self._complete(descriptor, error, info)

        if opens_transaction:
            logger.info(f"Opened transaction {info.transaction_id}, expires {info.timeout}")
        elif method == "DELETE":
            logger.info(f"Rolled back transaction {info.transaction_id}")
        elif path.endswith("/commit") and info.transaction_id is not None:
            logger.info(f"Committed transaction {info.transaction_id}")

        return await self._complete(descriptor, None, info, normalize_results(body.get("results")))

    async def _send(
        self, method: str, path: str, statements: list[Statement]
    ) -> tuple[dict[str, Any], Mapping[str, str]]:
        logger.debug(f"Sending {len(statements)} statement(s) with {method} {path}")
        try:
            if method == "DELETE":
                response = await self.http_client.delete(path)
            else:
                payload = {"statements": [s.to_payload() for s in statements]}
                response = await self.http_client.post(path, json_data=payload)
            body = response.json()
        except APIHTTPError as e:
            # Unknown or expired transactions come back as 404 with Neo4j errors
            error_body = _parse_error_body(e.response_content)
            if error_body is None:
                raise TransportError(e) from e
            return error_body, httpx.Headers()
        except (APIRequestError, ValueError) as e:
            raise TransportError(e) from e

        if not isinstance(body, dict):
            logger.warning(f"Unexpected response body of type {type(body).__name__} from {path}")
            body = {}
        return body, response.headers

    @staticmethod
    async def _complete(
        descriptor: RequestDescriptor,
        error: Optional[CypherTransactError],
        info: ResponseInfo,
        results: Optional[QueryResult] = None,
    ) -> Optional[QueryResponse]:
        results = results if results is not None else []
        if descriptor.callback is not None:
            outcome = descriptor.callback(error, results, info)
            if inspect.isawaitable(outcome):
                await outcome
            return None
        if error is not None:
            raise error
        return QueryResponse(results=results, info=info)
