# grammatica

A pure-Python library for weighted grammars and the structures around them.

- **Context-free grammars** (`grammatica.cfg`): `CFG`, `CFGRule` and
  `CFGComposition`, whose letters are `Label` (nonterminal) and `Value`
  (terminal). `CFG.from_str` reads the text format below; `CFG.from_pmcfg`
  converts a PMCFG whose rules all have exactly one component and only refer to
  the first component of their successors (otherwise it raises `ValueError`).
- **Parallel multiple context-free grammars** (`grammatica.pmcfg`): `PMCFG`,
  `PMCFGRule` and `Composition`, whose symbols are `Var` and `T`.
  `PMCFGRule.map_nonterminals` renames the head and successors of a rule.
- **Derivation trees** (`grammatica.derivation`): a derivation is a mapping from
  Gorn addresses (tuples of child indices, the root being `()`) to rules.
  `to_term` splits it into compositions and heads, `evaluate` / `evaluate_pos`
  expand compositions into terminals (raising `CompositionError` on a bad
  reference), and `separate_terminal_rules` moves every terminal into its own
  child rule.
- **NEGRA export** (`grammatica.negra`): `to_negra` renders a derivation whose
  rules each hold only variables or exactly one terminal as a NEGRA sentence
  block; `meets_negra_criteria` checks that condition and `to_negra_vector`
  returns the lines as `(word, tag, parent)` triples. Violations raise
  `NegraError`.
- **Equivalence relations** (`grammatica.equivalence`): `EquivalenceRelation`
  maps elements to the label of their class, with one default class for
  everything else.
- **Finite-state recognition** (`grammatica.nfa`): `NFA`, `NFATransition` and
  `Configuration`, with `NFA.recognise` returning an `NFARecogniser` that yields
  accepting `(configuration, run)` pairs, highest weight first.
  `TranslationDict` maps runs of NFA transitions back to other transitions.
- **Runs** (`grammatica.runs`): `Run` (printed one transition per line),
  `run_word` and `run_weight`.
- **Parsing helpers** (`grammatica.parsing`): `parse_token`, `parse_vec`,
  `skip_space`, `parse_initial_rule_grammar`, and the exceptions `ParseError`
  and `IncompleteInput`.

The package has no runtime dependencies.

## Installing

```
pip install .
```

## Grammar format

A grammar text declares its initial nonterminals on `initial: [...]` lines and
lists one rule per line. Blank lines and lines starting with `%` are skipped; a
rule may end with a `% comment`. A rule's weight follows `#` and defaults to one.
The arrows `→`, `->` and `=>` are all accepted.

Context-free:

```
initial: [S]

S → [T a, Nt S, T b] # 0.4
S → []               # 0.6
```

Multiple context-free:

```
initial: [S]

S → [[Var 0 0, Var 0 1]] (A)
A → [[T a, Var 0 0, T b], [T c, Var 0 1]] (A) # 0.4
A → [[], []] () # 0.6
```

`Var i j` is the `j`-th component of the `i`-th successor, counted from zero.

The `from_str` class methods take converters for nonterminals, terminals and
weights (by default `str`, `str` and `float`).

## Examples

```python
from grammatica.pmcfg import PMCFG

text = """initial: [S]
S → [[Var 0 0, Var 0 1]] (A)
A → [[T a, Var 0 0, T b], [T c, Var 0 1]] (A) # 0.4
A → [[], []] () # 0.6
"""
grammar = PMCFG.from_str(text, str, str, float)
print(grammar)
```

Equivalence classes are written one per line, with `*` marking the default:

```python
from grammatica.equivalence import EquivalenceRelation

relation = EquivalenceRelation.from_str("0 [0, 1]\n1 [2, 4]\n2 *", int, int)
assert relation.project(2) == 1
assert relation.project(3) == 2
```

A small weighted automaton:

```python
from grammatica.nfa import NFA, NFATransition

step = NFATransition(0, 1, ["a"], 0.5)
automaton = NFA({0: [step]}, initial_states=[0], final_states=[1])
configuration, run = next(automaton.recognise(["a"]))
assert run == (step,)
assert configuration.weight == 0.5
```

## Errors

Text that does not match a format raises `grammatica.parsing.ParseError`. The
low-level `parse_*` functions raise its subclass `IncompleteInput` when the
input ends before a construct is complete; the `from_str` methods report every
failure as `ParseError`.

## What it does not do

There is no command-line tool. The package reads, writes and transforms
grammars, derivation trees and finite automata, but it does not build automata
with a push-down or tree-stack storage from grammars, nor does it parse
sentences with a grammar directly.

## Running the tests

```
pip install .[test]
pytest
```