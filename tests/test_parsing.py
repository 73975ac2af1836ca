from functools import partial

import pytest

from grammatica.parsing import (
    IncompleteInput,
    ParseError,
    parse_initial_rule_grammar,
    parse_token,
    parse_vec,
    skip_space,
)


def test_parse_token_stops_at_space():
    assert parse_token("abc def", str) == ("abc", " def")


def test_parse_token_stops_at_bracket():
    assert parse_token("x]rest", str) == ("x", "]rest")


def test_parse_token_quoted():
    assert parse_token('"a b" c', str) == ("a b", " c")


def test_parse_token_converts():
    assert parse_token("42,", int) == (42, ",")


def test_parse_token_consumes_to_end():
    assert parse_token("S", str) == ("S", "")


def test_parse_token_empty_is_incomplete():
    with pytest.raises(IncompleteInput):
        parse_token("", str)


def test_parse_token_unterminated_quote_is_incomplete():
    with pytest.raises(IncompleteInput):
        parse_token('"abc', str)


def test_parse_token_leading_space_is_error():
    with pytest.raises(ParseError) as info:
        parse_token(" x", str)
    assert not isinstance(info.value, IncompleteInput)


def test_parse_token_conversion_failure():
    with pytest.raises(ParseError):
        parse_token("a", int)


def test_skip_space_removes_spaces_and_tabs_only():
    assert skip_space("  \tx y") == "x y"
    assert skip_space("\nx") == "\nx"


def test_parse_vec_items():
    item = partial(parse_token, convert=int)
    assert parse_vec("[1, 2,3]tail", item, "[", "]", ",") == ([1, 2, 3], "tail")


def test_parse_vec_empty():
    item = partial(parse_token, convert=str)
    assert parse_vec("[]rest", item, "[", "]", ",") == ([], "rest")
    assert parse_vec("[ ]", item, "[", "]", ",") == ([], "")


def test_parse_vec_other_brackets():
    item = partial(parse_token, convert=str)
    assert parse_vec("(a, b) x", item, "(", ")", ",") == (["a", "b"], " x")


def test_parse_vec_trailing_space_before_close():
    item = partial(parse_token, convert=str)
    assert parse_vec("[a   ]", item, "[", "]", ",") == (["a"], "")


@pytest.mark.parametrize("text", ["[1,", "[1", "[", ""])
def test_parse_vec_incomplete(text):
    item = partial(parse_token, convert=int)
    with pytest.raises(IncompleteInput):
        parse_vec(text, item, "[", "]", ",")


@pytest.mark.parametrize("text", ["[1 2]", "x", "(1)"])
def test_parse_vec_illegal(text):
    item = partial(parse_token, convert=int)
    with pytest.raises(ParseError) as info:
        parse_vec(text, item, "[", "]", ",")
    assert not isinstance(info.value, IncompleteInput)


def test_parse_initial_rule_grammar_collects_initials_and_rules():
    text = "% leading\ninitial: [S] % note\n\nrule one\ninitial: [A]\n% trailing"
    initial, rules = parse_initial_rule_grammar(text, lambda line: line, str)
    assert initial == ["S", "A"]
    assert rules == ["rule one"]


def test_parse_initial_rule_grammar_malformed_initial():
    with pytest.raises(ParseError) as info:
        parse_initial_rule_grammar("initial: [a]", lambda line: line, int)
    assert str(info.value) == "Malformed declaration of initial nonterminals: 'initial: [a]'"


def test_parse_initial_rule_grammar_propagates_rule_errors():
    def reject(line):
        raise ParseError(f"Could not parse '{line}'")

    with pytest.raises(ParseError) as info:
        parse_initial_rule_grammar("initial: [0]\n\nS → [T a]", reject, int)
    assert str(info.value) == "Could not parse 'S → [T a]'"