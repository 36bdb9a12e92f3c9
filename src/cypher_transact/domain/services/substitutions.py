"""
Client-side substitutions.

Substitutions replace ``${name}`` placeholders anywhere in a query before it
is sent, unlike server-side parameters which Neo4j binds itself. They give no
performance benefit; they exist so that labels, relationship types and other
non-parameterisable parts of a query can be templated.
"""

import re
from typing import Any, Mapping, Optional, Tuple

from .exceptions import UnmatchedSubstitutionError

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]*?)\}")


def apply_substitutions(template: str, substitutions: Optional[Mapping[str, Any]] = None) -> str:
    """
    Replaces every ``${key}`` in ``template`` with ``substitutions[key]``.

    Replacement happens in a single pass, so inserted values are never scanned
    for further placeholders. Keys that do not occur in the template are ignored.

    Args:
        template: Query text containing zero or more placeholders.
        substitutions: Mapping of placeholder names to replacement text.

    Returns:
        The query text with all placeholders replaced.

    Raises:
        UnmatchedSubstitutionError: If any placeholder has no matching key.
    """
    substitutions = substitutions or {}
    unmatched: list[str] = []

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name in substitutions:
            return str(substitutions[name])
        if name not in unmatched:
            unmatched.append(name)
        return match.group(0)

    text = PLACEHOLDER_PATTERN.sub(_replace, template)
    if unmatched:
        raise UnmatchedSubstitutionError(unmatched)
    return text


def try_apply_substitutions(
    template: str, substitutions: Optional[Mapping[str, Any]] = None
) -> Tuple[Optional[str], Optional[UnmatchedSubstitutionError]]:
    """Non-raising form of :func:`apply_substitutions` returning ``(text, error)``."""
    try:
        return apply_substitutions(template, substitutions), None
    except UnmatchedSubstitutionError as e:
        return None, e
