import pytest
from hypothesis import given, strategies as st

from cypher_transact.domain.services.exceptions import UnmatchedSubstitutionError
from cypher_transact.domain.services.substitutions import (
    apply_substitutions,
    try_apply_substitutions,
)

placeholder_name = st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,15}", fullmatch=True)
plain_text = st.text(max_size=80).filter(lambda s: "${" not in s)


def test_single_substitution():
    assert apply_substitutions("MATCH (:${label})", {"label": "Person"}) == "MATCH (:Person)"


def test_repeated_placeholder_is_replaced_everywhere():
    result = apply_substitutions("${a}-${a}-${b}", {"a": "x", "b": "y"})
    assert result == "x-x-y"


def test_values_are_converted_to_text():
    assert apply_substitutions("LIMIT ${n}", {"n": 10}) == "LIMIT 10"


def test_replacement_values_are_not_rescanned():
    result = apply_substitutions("${a} ${b}", {"a": "${b}", "b": "B"})
    assert result == "${b} B"


def test_no_substitutions_argument():
    assert apply_substitutions("RETURN 1") == "RETURN 1"


def test_unmatched_single_placeholder():
    with pytest.raises(UnmatchedSubstitutionError) as exc_info:
        apply_substitutions("${x}", {})

    assert exc_info.value.placeholders == ["x"]
    assert str(exc_info.value) == "Unmatched substitution placeholder: ${x}"


def test_unmatched_placeholders_are_listed_and_pluralised():
    with pytest.raises(UnmatchedSubstitutionError) as exc_info:
        apply_substitutions("${x} ${y}", {})

    assert exc_info.value.placeholders == ["x", "y"]
    assert str(exc_info.value) == "Unmatched substitution placeholders: ${x}, ${y}"


def test_partially_matched_template_reports_only_missing():
    with pytest.raises(UnmatchedSubstitutionError) as exc_info:
        apply_substitutions("${x} ${y} ${x} ${z}", {"y": "1"})

    assert exc_info.value.placeholders == ["x", "z"]


def test_unmatched_error_is_a_value_error():
    with pytest.raises(ValueError):
        apply_substitutions("${missing}")


def test_try_apply_returns_text_or_error():
    assert try_apply_substitutions("${a}", {"a": "b"}) == ("b", None)

    text, error = try_apply_substitutions("${a}", {})
    assert text is None
    assert isinstance(error, UnmatchedSubstitutionError)


@given(name=placeholder_name, value=plain_text)
def test_lone_placeholder_yields_value(name, value):
    assert apply_substitutions("${" + name + "}", {name: value}) == value


@given(template=plain_text, substitutions=st.dictionaries(placeholder_name, plain_text))
def test_template_without_placeholders_is_unchanged(template, substitutions):
    assert apply_substitutions(template, substitutions) == template


@given(
    name=placeholder_name,
    value=plain_text,
    extra=st.dictionaries(placeholder_name, plain_text),
)
def test_extra_keys_are_ignored(name, value, extra):
    extra.pop(name, None)
    template = "MATCH (n:${" + name + "}) RETURN n"
    assert apply_substitutions(template, {name: value, **extra}) == apply_substitutions(
        template, {name: value}
    )
