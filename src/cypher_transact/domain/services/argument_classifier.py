"""
Turns the flexible call shapes accepted by the client into a request descriptor.

Every public client operation accepts its arguments in the following order,
with any of them optional except where the operation says otherwise::

    [transaction_id] [query | query_lines | statements] [substitutions] [parameters] [callback]

The positional arguments are resolved by :func:`classify_arguments`, which
applies these rules in series, each one removing what it matched:

1. A leading ``int`` is the transaction ID.
2. A leading ``str`` is the query text.
3. A trailing callable is the completion handler. Any integers now at the
   end are ignored with a warning; they are never a transaction ID.
4. A trailing mapping is the parameters.
5. A trailing mapping that is still left is the substitutions.
6. A leading list of strings is joined with newlines into the query text.
7. A leading list is taken as pre-built statements; otherwise a single
   statement is synthesized from the query and parameters.

Each rule is implemented by a named :class:`RequestBuilder` method, so callers
who prefer to be explicit can build the same descriptor without relying on
argument positions.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from loguru import logger

from ..models.statements import Statement
from .exceptions import InvalidRequestError


@dataclass
class RequestDescriptor:
    """Canonical form of a client call once its arguments are resolved."""

    transaction_id: Optional[int] = None
    query: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    substitutions: dict[str, Any] = field(default_factory=dict)
    statements: list[Statement] = field(default_factory=list)
    callback: Optional[Callable[..., Any]] = None
    statements_supplied: bool = False
    # Parallel to `statements`: True where the text still needs substitutions applied
    templated: list[bool] = field(default_factory=list)

    def clear_statements(self) -> None:
        self.statements = []
        self.templated = []


def _is_transaction_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_query_lines(value: Any) -> bool:
    return _is_sequence(value) and len(value) > 0 and all(isinstance(v, str) for v in value)


def _coerce_statement(item: Any) -> Statement:
    if isinstance(item, Statement):
        return item
    if isinstance(item, Mapping) and "statement" in item:
        return Statement(
            statement=item["statement"],
            parameters=dict(item.get("parameters") or {}),
        )
    raise InvalidRequestError(f"Cannot use {item!r} as a statement")


class RequestBuilder:
    """Builds a :class:`RequestDescriptor` one named field at a time."""

    def __init__(self) -> None:
        self._descriptor = RequestDescriptor()
        self._query_supplied = False
        self._from_mappings: list[bool] = []

    def transaction(self, transaction_id: int) -> "RequestBuilder":
        if not _is_transaction_id(transaction_id):
            raise InvalidRequestError(f"Transaction ID must be an integer, got {transaction_id!r}")
        self._descriptor.transaction_id = transaction_id
        return self

    def query(self, text: str) -> "RequestBuilder":
        self._descriptor.query = text
        self._query_supplied = True
        return self

    def query_lines(self, lines: Iterable[str]) -> "RequestBuilder":
        return self.query("\n".join(lines))

    def parameters(self, parameters: Mapping[str, Any]) -> "RequestBuilder":
        self._descriptor.parameters = dict(parameters)
        return self

    def substitutions(self, substitutions: Mapping[str, Any]) -> "RequestBuilder":
        self._descriptor.substitutions = dict(substitutions)
        return self

    def statements(self, statements: Sequence[Any]) -> "RequestBuilder":
        self._descriptor.statements = [_coerce_statement(s) for s in statements]
        self._from_mappings = [not isinstance(s, Statement) for s in statements]
        self._descriptor.statements_supplied = True
        return self

    def callback(self, callback: Callable[..., Any]) -> "RequestBuilder":
        if not callable(callback):
            raise InvalidRequestError(f"Completion handler must be callable, got {callback!r}")
        self._descriptor.callback = callback
        return self

    def build(self) -> RequestDescriptor:
        """
        Returns the descriptor, synthesizing a single statement from the query
        and parameters when no pre-built statements were given.

        :class:`Statement` objects are already composed and are sent as they
        are. Statements given as mappings only go through substitution when
        substitutions were supplied; the synthesized query always does.
        """
        descriptor = self._descriptor
        if descriptor.statements_supplied:
            if self._query_supplied:
                logger.warning("Query text ignored in favour of pre-built statements")
            substitute = bool(descriptor.substitutions)
            descriptor.templated = [substitute and m for m in self._from_mappings]
        elif descriptor.query:
            descriptor.statements = [
                Statement(statement=descriptor.query, parameters=descriptor.parameters)
            ]
            descriptor.templated = [True]
        return descriptor


def classify_arguments(*args: Any, builder: Optional[RequestBuilder] = None) -> RequestBuilder:
    """
    Applies the positional rules from the module docstring to ``args``.

    Args:
        *args: The raw positional arguments of a client call.
        builder: An existing builder to record into. A new one is created if omitted.

    Returns:
        The builder holding every field the arguments resolved to. Keyword
        fields may still be added to it before calling ``build()``.
    """
    builder = builder or RequestBuilder()
    remaining = list(args)

    if remaining and _is_transaction_id(remaining[0]):
        builder.transaction(remaining.pop(0))

    if remaining and isinstance(remaining[0], str):
        builder.query(remaining.pop(0))

    if remaining and callable(remaining[-1]):
        builder.callback(remaining.pop())

    # Only a leading int is a transaction ID
    misplaced = []
    while remaining and _is_transaction_id(remaining[-1]):
        misplaced.insert(0, remaining.pop())
    if misplaced:
        logger.warning(
            f"Ignoring trailing integer(s) {misplaced!r}: a transaction ID must be the first argument"
        )

    if remaining and isinstance(remaining[-1], Mapping):
        builder.parameters(remaining.pop())

    if remaining and isinstance(remaining[-1], Mapping):
        builder.substitutions(remaining.pop())

    if remaining and _is_query_lines(remaining[0]):
        builder.query_lines(remaining.pop(0))

    if remaining and _is_sequence(remaining[0]):
        builder.statements(remaining.pop(0))

    if remaining:
        logger.warning(f"Ignoring {len(remaining)} unrecognised argument(s): {remaining!r}")

    return builder


def build_request(*args: Any, **fields: Any) -> RequestDescriptor:
    """
    Resolves positional ``args`` and then keyword ``fields`` into a descriptor.

    Keyword fields are ``transaction_id``, ``query``, ``query_lines``,
    ``parameters``, ``substitutions``, ``statements`` and ``callback``; each is
    applied through the builder method of the same role and overrides what the
    positional arguments produced.
    """
    builder = classify_arguments(*args)
    setters = {
        "transaction_id": builder.transaction,
        "query": builder.query,
        "query_lines": builder.query_lines,
        "parameters": builder.parameters,
        "substitutions": builder.substitutions,
        "statements": builder.statements,
        "callback": builder.callback,
    }
    for name, value in fields.items():
        if name not in setters:
            raise InvalidRequestError(f"Unknown request field: {name}")
        if value is not None:
            setters[name](value)
    return builder.build()
