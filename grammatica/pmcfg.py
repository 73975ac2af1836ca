"""Weighted parallel multiple context-free grammars (PMCFGs) and their text format.

A rule is written as ``A → [[T a, Var 0 0], [Var 0 1]] (B) # 0.4``: the head,
an arrow (``→``, ``->`` or ``=>``), the composition as a list of components,
the successor nonterminals in parentheses and an optional weight after ``#``.
Anything after the weight is ignored, so ``% comments`` may follow.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Union

from .parsing import (
    IncompleteInput,
    ParseError,
    parse_initial_rule_grammar,
    parse_token,
    parse_vec,
    skip_space,
)

__all__ = [
    "Var",
    "T",
    "Composition",
    "PMCFGRule",
    "PMCFG",
    "parse_var_t",
    "parse_pmcfg_rule",
]

_ARROWS = ("→", "->", "=>")
_VAR_TAG = "Var"
_T_TAG = "T"


@dataclass(frozen=True)
class Var:
    """The ``component``-th component of the ``nonterminal``-th successor (both from 0)."""

    nonterminal: int
    component: int

    def __str__(self) -> str:
        return f"Var {self.nonterminal} {self.component}"


@dataclass(frozen=True)
class T:
    """A terminal symbol inside a composition."""

    value: Any

    def __str__(self) -> str:
        return f'T "{self.value}"'


Symbol = Union[Var, T]


@dataclass(frozen=True)
class Composition:
    """The composition function of a rule: a sequence of components."""

    components: tuple[tuple[Symbol, ...], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "components", tuple(tuple(component) for component in self.components)
        )

    def __iter__(self) -> Iterator[tuple[Symbol, ...]]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def __getitem__(self, index: int) -> tuple[Symbol, ...]:
        return self.components[index]

    def __str__(self) -> str:
        inner = ", ".join(
            "[" + ", ".join(str(symbol) for symbol in component) + "]"
            for component in self.components
        )
        return f"[{inner}]"


@dataclass(frozen=True)
class PMCFGRule:
    """A weighted PMCFG rule; equality and hashing ignore the weight."""

    head: Any
    tail: tuple = ()
    composition: Composition = field(default_factory=Composition)
    weight: Any = field(default=1, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tail", tuple(self.tail))
        if not isinstance(self.composition, Composition):
            object.__setattr__(self, "composition", Composition(self.composition))

    @classmethod
    def from_str(
        cls,
        text: str,
        convert_nonterminal: Callable[[str], Any] = str,
        convert_terminal: Callable[[str], Any] = str,
        convert_weight: Callable[[str], Any] = float,
    ) -> PMCFGRule:
        """Parse a single rule."""
        try:
            rule, _ = parse_pmcfg_rule(
                text, convert_nonterminal, convert_terminal, convert_weight
            )
        except ParseError as error:
            raise ParseError(f"Could not parse {text}") from error
        return rule

    def map_nonterminals(self, f: Callable[[Any], Any]) -> PMCFGRule:
        """Return a copy whose head and tail nonterminals are replaced by ``f``."""
        return PMCFGRule(
            head=f(self.head),
            tail=tuple(f(nonterminal) for nonterminal in self.tail),
            composition=self.composition,
            weight=self.weight,
        )

    def __str__(self) -> str:
        tail = ", ".join(f'"{nonterminal}"' for nonterminal in self.tail)
        return f'"{self.head}" → {self.composition} ({tail})  # {self.weight}'


@dataclass
class PMCFG:
    """A weighted PMCFG: initial nonterminals and a list of rules."""

    initial: list = field(default_factory=list)
    rules: list[PMCFGRule] = field(default_factory=list)

    @classmethod
    def from_str(
        cls,
        text: str,
        convert_nonterminal: Callable[[str], Any] = str,
        convert_terminal: Callable[[str], Any] = str,
        convert_weight: Callable[[str], Any] = float,
    ) -> PMCFG:
        """Parse a grammar of ``initial: [...]`` lines and rule lines."""
        rule_parser = partial(
            PMCFGRule.from_str,
            convert_nonterminal=convert_nonterminal,
            convert_terminal=convert_terminal,
            convert_weight=convert_weight,
        )
        initial, rules = parse_initial_rule_grammar(text, rule_parser, convert_nonterminal)
        return cls(initial=initial, rules=rules)

    def __str__(self) -> str:
        initial = ", ".join(f'"{nonterminal}"' for nonterminal in self.initial)
        lines = "".join(f"{rule}\n" for rule in self.rules)
        return f"initial: [{initial}]\n\n{lines}"


def _parse_index(text: str) -> tuple[int, str]:
    end = 0
    for char in text:
        if not char.isdigit():
            break
        end += 1
    if end == 0:
        if not text:
            raise IncompleteInput("Expected a number, found end of input")
        raise ParseError(f"Expected a number at {text!r}")
    return int(text[:end]), text[end:]


def parse_var_t(
    text: str, convert_terminal: Callable[[str], Any] = str
) -> tuple[Symbol, str]:
    """Parse ``Var i j`` or ``T token``."""
    if text.startswith(_VAR_TAG):
        rest = skip_space(text[len(_VAR_TAG):])
        nonterminal, rest = _parse_index(rest)
        rest = skip_space(rest)
        component, rest = _parse_index(rest)
        return Var(nonterminal, component), rest
    if text.startswith(_T_TAG):
        value, rest = parse_token(skip_space(text[len(_T_TAG):]), convert_terminal)
        return T(value), rest
    if _VAR_TAG.startswith(text):
        raise IncompleteInput("Expected 'Var' or 'T', found end of input")
    raise ParseError(f"Expected 'Var' or 'T' at {text!r}")


def _parse_arrow(text: str) -> str:
    for arrow in _ARROWS:
        if text.startswith(arrow):
            return text[len(arrow):]
    if any(arrow.startswith(text) for arrow in _ARROWS):
        raise IncompleteInput("Expected an arrow, found end of input")
    raise ParseError(f"Expected an arrow at {text!r}")


def _parse_projection(
    text: str, convert_terminal: Callable[[str], Any]
) -> tuple[list[Symbol], str]:
    return parse_vec(text, partial(parse_var_t, convert_terminal=convert_terminal), "[", "]", ",")


def _parse_weight(
    text: str, convert_weight: Callable[[str], Any]
) -> tuple[Any, str]:
    """Parse an optional ``# weight``; without a weight the weight is one."""
    one = convert_weight("1")
    if not text.startswith("#"):
        return one, text
    after_hash = skip_space(text[1:])
    raw, _, remainder = after_hash.partition(" ")
    if not raw:
        return one, text
    try:
        weight = convert_weight(raw)
    except (ValueError, TypeError) as error:
        raise ParseError(f"Could not parse weight {raw!r}") from error
    return weight, " " + remainder if remainder or after_hash.endswith(" ") else ""


def parse_pmcfg_rule(
    text: str,
    convert_nonterminal: Callable[[str], Any] = str,
    convert_terminal: Callable[[str], Any] = str,
    convert_weight: Callable[[str], Any] = float,
) -> tuple[PMCFGRule, str]:
    """Parse a rule; whatever follows the weight is consumed and ignored."""
    head, rest = parse_token(text, convert_nonterminal)
    rest = skip_space(_parse_arrow(skip_space(rest)))
    components, rest = parse_vec(
        rest, partial(_parse_projection, convert_terminal=convert_terminal), "[", "]", ","
    )
    rest = skip_space(rest)
    tail, rest = parse_vec(
        rest, partial(parse_token, convert=convert_nonterminal), "(", ")", ","
    )
    rest = skip_space(rest)
    weight, _ = _parse_weight(rest, convert_weight)
    rule = PMCFGRule(
        head=head,
        tail=tuple(tail),
        composition=Composition(components),
        weight=weight,
    )
    return rule, ""