import pytest

from grammatica.parsing import IncompleteInput, ParseError
from grammatica.pmcfg import (
    PMCFG,
    Composition,
    PMCFGRule,
    T,
    Var,
    parse_pmcfg_rule,
    parse_var_t,
)


def test_pmcfg_from_str_leading_comment():
    grammar_string = "% leading comment\ninitial: [S]\n\nS → [[T a]] ()"
    grammar = PMCFG.from_str(grammar_string, convert_weight=int)
    assert grammar.initial == ["S"]
    assert grammar.rules == [PMCFGRule("S", (), Composition([[T("a")]]))]
    assert grammar.rules[0].weight == 1


def test_pmcfg_from_str_end_of_line_comment():
    grammar_string = (
        "initial: [S] % end-of-line comment 1\n\n"
        "S → [[T a]] () % end-of-line comment 2"
    )
    grammar = PMCFG.from_str(grammar_string, convert_weight=int)
    assert grammar.initial == ["S"]
    assert grammar.rules == [PMCFGRule("S", (), Composition([[T("a")]]))]


def test_pmcfg_from_str_trailing_comment():
    grammar_string = "initial: [S]\n\nS → [[T a]] ()\n% trailing comment"
    grammar = PMCFG.from_str(grammar_string, convert_weight=int)
    assert grammar.initial == ["S"]
    assert len(grammar.rules) == 1
    assert grammar.rules[0].head == "S"


def test_rule_from_str_example():
    composition = Composition([
        [T("a"), Var(0, 0), T("b")],
        [T("c"), Var(0, 1)],
    ])
    rule = PMCFGRule.from_str("A → [[T a, Var 0 0, T b], [T c, Var 0 1]] (A) # 0.4")
    assert rule == PMCFGRule("A", ("A",), composition, 0.4)
    assert rule.weight == 0.4


def test_grammar_from_str_example():
    rules = [
        PMCFGRule.from_str("S → [[Var 0 0, Var 0 1]] (A)"),
        PMCFGRule.from_str("A → [[T a, Var 0 0, T b], [T c, Var 0 1]] (A) # 0.4"),
        PMCFGRule.from_str("A → [[], []] () # 0.6"),
    ]
    grammar = PMCFG.from_str(
        "initial: [S]\n"
        "S → [[Var 0 0, Var 0 1]] (A)\n"
        "A → [[T a, Var 0 0, T b], [T c, Var 0 1]] (A) # 0.4\n"
        "A → [[], []] () # 0.6"
    )
    assert grammar == PMCFG(["S"], rules)
    assert [rule.weight for rule in grammar.rules] == [1.0, 0.4, 0.6]


@pytest.mark.parametrize("arrow", ["→", "->", "=>"])
def test_all_arrows_are_accepted(arrow):
    rule = PMCFGRule.from_str(f"S {arrow} [[T a]] () # 2", convert_weight=int)
    assert rule == PMCFGRule("S", (), Composition([[T("a")]]))
    assert rule.weight == 2


def test_weight_without_space_after_hash():
    rule = PMCFGRule.from_str("S -> [[T a]] () #3 %comment", convert_weight=int)
    assert rule.weight == 3


def test_trailing_input_is_consumed():
    rule, rest = parse_pmcfg_rule("S → [[T a]] () # 2 anything", convert_weight=int)
    assert rest == ""
    assert rule.weight == 2


def test_missing_arrow_is_an_error():
    with pytest.raises(ParseError, match=r"Could not parse S \[\[T a\]\] \(\)"):
        PMCFGRule.from_str("S [[T a]] ()")


def test_illegal_weight_is_an_error():
    with pytest.raises(ParseError):
        PMCFGRule.from_str("S → [[T a]] () # a")


@pytest.mark.parametrize("text", ["S →", "S", "S → [[T a]]", "S → [[T a"])
def test_incomplete_rules(text):
    with pytest.raises(IncompleteInput):
        parse_pmcfg_rule(text)


@pytest.mark.parametrize(
    "text, expected, rest",
    [
        ("Var 1 2]", Var(1, 2), "]"),
        ("Var  0   0", Var(0, 0), ""),
        ("T a, x", T("a"), ", x"),
        ('T "a b"]', T("a b"), "]"),
    ],
)
def test_parse_var_t_legal_input(text, expected, rest):
    assert parse_var_t(text) == (expected, rest)


@pytest.mark.parametrize("text", ["X 1", "var 0 0", "Var a 0"])
def test_parse_var_t_illegal_input(text):
    with pytest.raises(ParseError) as info:
        parse_var_t(text)
    assert not isinstance(info.value, IncompleteInput)


@pytest.mark.parametrize("text", ["", "Va", "Var", "Var 0", "T"])
def test_parse_var_t_incomplete_input(text):
    with pytest.raises(IncompleteInput):
        parse_var_t(text)


def test_parse_var_t_converts_terminal():
    assert parse_var_t("T 7", int) == (T(7), "")


def test_map_nonterminals():
    rule = PMCFGRule.from_str("S → [[Var 0 0, Var 1 0]] (A, B) # 0.5")
    mapped = rule.map_nonterminals(str.lower)
    assert mapped.head == "s"
    assert mapped.tail == ("a", "b")
    assert mapped.composition == rule.composition
    assert mapped.weight == 0.5


def test_equality_and_hash_ignore_weight():
    first = PMCFGRule.from_str("S → [[T a]] () # 0.1")
    second = PMCFGRule.from_str("S → [[T a]] () # 0.9")
    assert first == second
    assert len({first, second}) == 1


def test_composition_sequence_behaviour():
    composition = Composition([[T("a"), Var(0, 0)], []])
    assert len(composition) == 2
    assert composition[0] == (T("a"), Var(0, 0))
    assert list(composition) == [(T("a"), Var(0, 0)), ()]


def test_display():
    assert str(Var(0, 1)) == "Var 0 1"
    assert str(T("a")) == 'T "a"'
    rule = PMCFGRule("A", ("A", "B"), Composition([[T("a"), Var(0, 0)], [Var(1, 0)]]), 0.4)
    assert str(rule) == '"A" → [[T "a", Var 0 0], [Var 1 0]] ("A", "B")  # 0.4'
    grammar = PMCFG(["S"], [PMCFGRule("S", (), Composition([[]]), 1)])
    assert str(grammar) == 'initial: ["S"]\n\n"S" → [[]] ()  # 1\n'


def test_malformed_initial_declaration():
    with pytest.raises(ParseError, match="Malformed declaration"):
        PMCFG.from_str("initial: [S\nS → [[T a]] ()")