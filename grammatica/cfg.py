"""Weighted context-free grammars (CFGs) and their text format.

A rule is written as ``S → [T a, Nt S, T b] # 0.4``: the head, an arrow
(``→``, ``->`` or ``=>``), the right-hand side as a bracketed list of
nonterminals (``Nt``) and terminals (``T``), and an optional weight after
``#``. A rule may end with a ``% comment``.
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
from .pmcfg import PMCFG, T, Var

__all__ = [
    "Label",
    "Value",
    "CFGComposition",
    "CFGRule",
    "CFG",
    "parse_letter_t",
    "parse_cfg_rule",
]

_ARROWS = ("→", "->", "=>")
_NT_TAG = "Nt"
_T_TAG = "T"


@dataclass(frozen=True)
class Label:
    """A nonterminal symbol on the right-hand side of a rule."""

    symbol: Any

    def __str__(self) -> str:
        return f'Nt "{self.symbol}"'


@dataclass(frozen=True)
class Value:
    """A terminal symbol on the right-hand side of a rule."""

    symbol: Any

    def __str__(self) -> str:
        return f'T "{self.symbol}"'


Letter = Union[Label, Value]


@dataclass(frozen=True)
class CFGComposition:
    """The right-hand side of a rule: a sequence of nonterminals and terminals."""

    letters: tuple[Letter, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "letters", tuple(self.letters))

    def __iter__(self) -> Iterator[Letter]:
        return iter(self.letters)

    def __len__(self) -> int:
        return len(self.letters)

    def __getitem__(self, index: int) -> Letter:
        return self.letters[index]

    def __str__(self) -> str:
        return "[" + ", ".join(str(letter) for letter in self.letters) + "]"


@dataclass(frozen=True)
class CFGRule:
    """A weighted context-free rule; equality and hashing ignore the weight."""

    head: Any
    composition: CFGComposition = field(default_factory=CFGComposition)
    weight: Any = field(default=1, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.composition, CFGComposition):
            object.__setattr__(self, "composition", CFGComposition(self.composition))

    @classmethod
    def from_str(
        cls,
        text: str,
        convert_nonterminal: Callable[[str], Any] = str,
        convert_terminal: Callable[[str], Any] = str,
        convert_weight: Callable[[str], Any] = float,
    ) -> CFGRule:
        """Parse a single rule."""
        try:
            rule, _ = parse_cfg_rule(
                text, convert_nonterminal, convert_terminal, convert_weight
            )
        except ParseError as error:
            raise ParseError(f"Could not parse '{text}'") from error
        return rule

    def __str__(self) -> str:
        return f'"{self.head}" → {self.composition}  # {self.weight}'


@dataclass
class CFG:
    """A weighted CFG: initial nonterminals and a list of rules."""

    initial: list = field(default_factory=list)
    rules: list[CFGRule] = field(default_factory=list)

    @classmethod
    def from_str(
        cls,
        text: str,
        convert_nonterminal: Callable[[str], Any] = str,
        convert_terminal: Callable[[str], Any] = str,
        convert_weight: Callable[[str], Any] = float,
    ) -> CFG:
        """Parse a grammar of ``initial: [...]`` lines and rule lines."""
        rule_parser = partial(
            CFGRule.from_str,
            convert_nonterminal=convert_nonterminal,
            convert_terminal=convert_terminal,
            convert_weight=convert_weight,
        )
        initial, rules = parse_initial_rule_grammar(text, rule_parser, convert_nonterminal)
        return cls(initial=initial, rules=rules)

    @classmethod
    def from_pmcfg(cls, pmcfg: PMCFG) -> CFG:
        """Convert a PMCFG whose rules all have a single component.

        Raises ``ValueError`` if a rule has more than one component or refers
        to a component other than the first one of a successor.
        """
        rules = []
        for rule in pmcfg.rules:
            if len(rule.composition) != 1:
                raise ValueError("[ERROR] Too many clauses in rule.")
            letters: list[Letter] = []
            for symbol in rule.composition[0]:
                if isinstance(symbol, T):
                    letters.append(Value(symbol.value))
                elif isinstance(symbol, Var) and symbol.component == 0:
                    if not 0 <= symbol.nonterminal < len(rule.tail):
                        raise ValueError(
                            f"[ERROR] Access to missing successor {symbol.nonterminal} in rule."
                        )
                    letters.append(Label(rule.tail[symbol.nonterminal]))
                else:
                    raise ValueError("[ERROR] Access to wrong component in rule.")
            rules.append(
                CFGRule(head=rule.head, composition=CFGComposition(letters), weight=rule.weight)
            )
        return cls(initial=list(pmcfg.initial), rules=rules)


def parse_letter_t(
    text: str,
    convert_nonterminal: Callable[[str], Any] = str,
    convert_terminal: Callable[[str], Any] = str,
) -> tuple[Letter, str]:
    """Parse ``Nt token`` or ``T token``."""
    if text.startswith(_NT_TAG):
        symbol, rest = parse_token(skip_space(text[len(_NT_TAG):]), convert_nonterminal)
        return Label(symbol), rest
    if text.startswith(_T_TAG):
        symbol, rest = parse_token(skip_space(text[len(_T_TAG):]), convert_terminal)
        return Value(symbol), rest
    if _NT_TAG.startswith(text):
        raise IncompleteInput("Expected 'Nt' or 'T', found end of input")
    raise ParseError(f"Expected 'Nt' or 'T' at {text!r}")


def _parse_arrow(text: str) -> str:
    for arrow in _ARROWS:
        if text.startswith(arrow):
            return text[len(arrow):]
    if any(arrow.startswith(text) for arrow in _ARROWS):
        raise IncompleteInput("Expected an arrow, found end of input")
    raise ParseError(f"Expected an arrow at {text!r}")


def _parse_weight(text: str, convert_weight: Callable[[str], Any]) -> tuple[Any, str]:
    """Parse an optional ``# weight``; without a weight the weight is one."""
    if not text.startswith("#"):
        return convert_weight("1"), text
    raw, separator, remainder = skip_space(text[1:]).partition(" ")
    if not raw:
        raise ParseError("Expected a weight after '#'")
    try:
        weight = convert_weight(raw)
    except (ValueError, TypeError) as error:
        raise ParseError(f"Could not parse weight {raw!r}") from error
    return weight, separator + remainder


def parse_cfg_rule(
    text: str,
    convert_nonterminal: Callable[[str], Any] = str,
    convert_terminal: Callable[[str], Any] = str,
    convert_weight: Callable[[str], Any] = float,
) -> tuple[CFGRule, str]:
    """Parse a rule; only an optional ``% comment`` may follow the weight."""
    head, rest = parse_token(text, convert_nonterminal)
    rest = skip_space(_parse_arrow(skip_space(rest)))
    letter_parser = partial(
        parse_letter_t,
        convert_nonterminal=convert_nonterminal,
        convert_terminal=convert_terminal,
    )
    letters, rest = parse_vec(rest, letter_parser, "[", "]", ",")
    weight, rest = _parse_weight(skip_space(rest), convert_weight)
    rest = skip_space(rest)
    if rest and not rest.startswith("%"):
        raise ParseError(f"Unexpected trailing input {rest!r}")
    rule = CFGRule(head=head, composition=CFGComposition(letters), weight=weight)
    return rule, ""