from typing import Any, Callable, Mapping, Optional, Sequence, Union

from ..models.statements import Statement
from .argument_classifier import RequestDescriptor
from .exceptions import UnmatchedSubstitutionError
from .substitutions import apply_substitutions

Template = Union[str, Sequence[str]]


def compose_statement(
    template: Template,
    substitutions: Optional[Mapping[str, Any]] = None,
    parameters: Optional[Mapping[str, Any]] = None,
) -> Statement:
    """
    Builds a statement from a query template.

    A template given as a list of lines is joined with newlines before the
    client-side substitutions are applied.

    Args:
        template: Query text, or a list of query lines.
        substitutions: Values for ``${name}`` placeholders.
        parameters: Server-side parameters for the statement.

    Returns:
        The composed statement.

    Raises:
        UnmatchedSubstitutionError: If a placeholder has no substitution.
    """
    text = template if isinstance(template, str) else "\n".join(template)
    return Statement(
        statement=apply_substitutions(text, substitutions),
        parameters=dict(parameters or {}),
    )


def compose_statement_callback(
    template: Template,
    substitutions: Optional[Mapping[str, Any]],
    parameters: Optional[Mapping[str, Any]],
    callback: Callable[[Optional[Exception], Optional[Statement]], Any],
) -> Any:
    """Continuation form of :func:`compose_statement`; calls ``callback(error, statement)`` once."""
    try:
        statement = compose_statement(template, substitutions, parameters)
    except UnmatchedSubstitutionError as e:
        return callback(e, None)
    return callback(None, statement)


def compose_statements(descriptor: RequestDescriptor) -> list[Statement]:
    """
    Returns the statements to send for ``descriptor``.

    Only statements still marked as templates get the descriptor's
    substitutions applied; already composed ones are passed through so their
    text is never scanned twice.
    """
    return [
        compose_statement(s.statement, descriptor.substitutions, s.parameters) if templated else s
        for s, templated in zip(descriptor.statements, descriptor.templated)
    ]
