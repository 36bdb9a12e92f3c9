import pytest

from cypher_transact.domain.models.statements import Statement
from cypher_transact.domain.services.argument_classifier import build_request
from cypher_transact.domain.services.exceptions import UnmatchedSubstitutionError
from cypher_transact.domain.services.statement_composer import (
    compose_statement,
    compose_statement_callback,
    compose_statements,
)


class TestComposeStatement:
    def test_template_substitutions_and_parameters(self):
        statement = compose_statement("MATCH (:${foo} {value: $value})", {"foo": "Baz"}, {"value": "bar"})

        assert statement == Statement(statement="MATCH (:Baz {value: $value})", parameters={"value": "bar"})

    def test_list_template_is_joined(self):
        statement = compose_statement(["MATCH (n:${label})", "RETURN n"], {"label": "A"})

        assert statement.statement == "MATCH (n:A)\nRETURN n"
        assert statement.parameters == {}

    def test_defaults(self):
        assert compose_statement("RETURN 1") == Statement(statement="RETURN 1", parameters={})

    def test_unmatched_placeholder_raises(self):
        with pytest.raises(UnmatchedSubstitutionError, match=r"\$\{foo\}"):
            compose_statement("MATCH (:${foo})")

    def test_statement_is_immutable(self):
        statement = compose_statement("RETURN 1")
        with pytest.raises(Exception):
            statement.statement = "RETURN 2"


class TestComposeStatementCallback:
    def test_success_invokes_callback_once(self):
        calls = []
        compose_statement_callback("${a}", {"a": "RETURN 1"}, None, lambda err, s: calls.append((err, s)))

        assert calls == [(None, Statement(statement="RETURN 1"))]

    def test_failure_passes_error(self):
        calls = []
        compose_statement_callback("${a}", {}, None, lambda err, s: calls.append((err, s)))

        assert len(calls) == 1
        error, statement = calls[0]
        assert isinstance(error, UnmatchedSubstitutionError)
        assert statement is None

    def test_returns_callback_result(self):
        assert compose_statement_callback("RETURN 1", None, None, lambda err, s: "done") == "done"


class TestComposeStatements:
    def test_substitutions_apply_to_every_statement(self):
        request = build_request(
            [{"statement": "CREATE (:${label})"}, {"statement": "MATCH (n:${label}) RETURN n", "parameters": {"p": 1}}],
            {"label": "A"},
            {},
        )

        assert compose_statements(request) == [
            Statement(statement="CREATE (:A)"),
            Statement(statement="MATCH (n:A) RETURN n", parameters={"p": 1}),
        ]

    def test_single_statement_from_query(self):
        request = build_request("RETURN ${x}", {"x": "1"}, {"y": 2})

        assert compose_statements(request) == [Statement(statement="RETURN 1", parameters={"y": 2})]

    def test_empty_request(self):
        assert compose_statements(build_request()) == []

    def test_error_from_any_statement_propagates(self):
        request = build_request(
            [{"statement": "RETURN ${x}"}, {"statement": "RETURN ${missing}"}],
            {"x": "1"},
            {},
        )

        with pytest.raises(UnmatchedSubstitutionError):
            compose_statements(request)

    def test_composed_statements_are_not_substituted_again(self):
        built = compose_statement("RETURN '${v}' AS x", {"v": "${literal}"})
        request = build_request([built, {"statement": "RETURN ${v}"}], {"v": "2"}, {})

        assert compose_statements(request) == [
            Statement(statement="RETURN '${literal}' AS x"),
            Statement(statement="RETURN 2"),
        ]

    def test_statement_mappings_without_substitutions_pass_through(self):
        request = build_request([{"statement": "RETURN '${not_a_placeholder}' AS x"}])

        assert compose_statements(request) == [Statement(statement="RETURN '${not_a_placeholder}' AS x")]
