"""Conversion of PMCFG derivation trees into the NEGRA export format.

A derivation tree maps Gorn addresses (tuples of child indices, the root
being ``()``) to the rule applied at that node. Only trees whose rules either
consist of successor variables alone or of exactly one terminal symbol can be
written as NEGRA.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Iterator

from .derivation import evaluate, to_term
from .pmcfg import Composition, PMCFGRule, T, Var

__all__ = [
    "TermId",
    "NegraError",
    "identify_terminals",
    "meets_negra_criteria",
    "to_negra_vector",
    "to_negra",
]

Address = tuple[int, ...]

_CRITERIA_MESSAGE = (
    "The given tree does not meet the negra criteria! All rules must either consist "
    "only of nonterminals or of exactly one terminal symbol."
)


class NegraError(ValueError):
    """The derivation tree cannot be expressed in the NEGRA format."""


@dataclass(frozen=True, order=True)
class TermId:
    """Identifies a terminal by the node it occurs at and its position in the composition."""

    address: Address
    compos_var_pos: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", tuple(self.address))

    def __str__(self) -> str:
        return f"({list(self.address)}, {self.compos_var_pos})"


def identify_terminals(
    tree_map: Mapping[Address, Composition],
) -> tuple[dict[Address, Composition], dict[TermId, Any]]:
    """Replace every terminal by a unique :class:`TermId`.

    Returns the rewritten tree and a mapping from each identifier back to the
    terminal it replaced. Positions count symbols across all components of a
    composition.
    """
    identified: dict[Address, Composition] = {}
    terminals: dict[TermId, Any] = {}

    for raw_address in sorted(tree_map):
        address = tuple(raw_address)
        position = count()
        components = []
        for component in tree_map[raw_address]:
            new_component = []
            for symbol in component:
                symbol_position = next(position)
                if isinstance(symbol, T):
                    terminal_id = TermId(address, symbol_position)
                    new_component.append(T(terminal_id))
                    terminals[terminal_id] = symbol.value
                else:
                    new_component.append(symbol)
            components.append(new_component)
        identified[address] = Composition(components)

    return identified, terminals


def _rule_meets_criteria(rule: PMCFGRule) -> bool:
    contains_nonterminal = False
    contains_terminal = False
    for component in rule.composition:
        for symbol in component:
            if isinstance(symbol, Var):
                if contains_terminal:
                    return False
                contains_nonterminal = True
            else:
                if contains_nonterminal or contains_terminal:
                    return False
                contains_terminal = True
    return True


def meets_negra_criteria(tree_map: Mapping[Address, PMCFGRule]) -> bool:
    """Check that every rule holds only variables or exactly one terminal."""
    return all(_rule_meets_criteria(rule) for rule in tree_map.values())


@dataclass
class _RuleNumbering:
    """Hands out NEGRA node numbers in order of first request."""

    numbers: dict[Address, int] = field(default_factory=dict)
    pending: deque = field(default_factory=deque)
    _counter: Iterator[int] = field(default_factory=lambda: count(1))

    def number(self, address: Address) -> int:
        if address in self.numbers:
            return self.numbers[address]
        number = next(self._counter)
        self.numbers[address] = number
        self.pending.append((address, number))
        return number


def to_negra_vector(
    tree_map: Mapping[Address, PMCFGRule],
) -> list[tuple[str, str, int]]:
    """Return the NEGRA lines as ``(word, tag, parent)`` triples.

    Terminals come first, in the order of the derived word; inner nodes
    follow, numbered from 1 in breadth-first order of their first use. The
    root's parent is 0.
    """
    term_map, head_map = to_term(tree_map)
    identified, terminal_map = identify_terminals(term_map)
    evaluated = evaluate(identified)

    numbering = _RuleNumbering()
    vector: list[tuple[str, str, int]] = []

    for component in evaluated:
        for symbol in component:
            if not isinstance(symbol, T):
                raise NegraError(
                    "Nonterminals must not appear in a fully evaluated configuration!"
                )
            terminal_id = symbol.value
            address = terminal_id.address
            if not address:
                raise NegraError(
                    "Terminals must have a nonterminal-only rule as their parent!"
                )
            parent = numbering.number(address[:-1])
            vector.append(
                (str(terminal_map[terminal_id]), str(head_map[address]), parent)
            )

    while numbering.pending:
        address, number = numbering.pending.popleft()
        parent = numbering.number(address[:-1]) if address else 0
        vector.append((f"#{number}", str(head_map[address]), parent))

    return vector


def to_negra(tree_map: Mapping[Address, PMCFGRule], sentence_id: int) -> str:
    """Render a derivation tree as one NEGRA sentence block."""
    if not meets_negra_criteria(tree_map):
        raise NegraError(_CRITERIA_MESSAGE)

    lines = [f"#BOS {sentence_id}"]
    lines.extend(
        f"{word}\t{tag}\t--\t--\t{parent}" for word, tag, parent in to_negra_vector(tree_map)
    )
    lines.append(f"#EOS {sentence_id}")
    return "\n".join(lines)