import pytest

from cypher_transact.domain.utils.identifiers import escape_identifier


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Person", "`Person`"),
        ("my label", "`my label`"),
        ("a`b", "`a``b`"),
        ("", "``"),
        ("``", "``````"),
    ],
)
def test_escape_identifier(name, expected):
    assert escape_identifier(name) == expected


def test_escaping_is_not_idempotent():
    once = escape_identifier("a`b")
    twice = escape_identifier(once)

    assert once == "`a``b`"
    assert twice == "```a````b```"
    assert twice != once
