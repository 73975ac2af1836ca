"""Derivation trees of PMCFG rules, addressed by Gorn addresses.

A derivation tree is a mapping from addresses (tuples of child indices, the
root being ``()``) to the rule or composition applied at that node.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from itertools import count
from typing import Any

from .pmcfg import Composition, PMCFGRule, T, Var

__all__ = [
    "CompositionError",
    "evaluate",
    "evaluate_pos",
    "to_term",
    "separate_terminal_rules",
]

Address = tuple[int, ...]


class CompositionError(ValueError):
    """A composition refers to a successor or component that does not exist."""


def evaluate(term_map: Mapping[Address, Composition]) -> Composition:
    """Expand the whole tree into a composition of terminal symbols only."""
    return evaluate_pos(term_map, ())


def evaluate_pos(
    term_map: Mapping[Address, Composition], address: Sequence[int]
) -> Composition:
    """Expand the subtree rooted at ``address``."""
    address = tuple(address)
    try:
        unexpanded = term_map[address]
    except KeyError:
        raise CompositionError(f"No composition at address {list(address)}") from None

    expanded_children: dict[int, Composition] = {}
    components = []
    for component in unexpanded:
        expanded_component = []
        for symbol in component:
            if isinstance(symbol, Var):
                child_index = symbol.nonterminal
                if child_index not in expanded_children:
                    expanded_children[child_index] = evaluate_pos(
                        term_map, address + (child_index,)
                    )
                child = expanded_children[child_index]
                if not 0 <= symbol.component < len(child):
                    raise CompositionError(
                        f"{unexpanded}: use of {symbol.component}-th component of "
                        f"nonterminal {child_index} that has only {len(child)} components!"
                    )
                expanded_component.extend(child[symbol.component])
            else:
                expanded_component.append(symbol)
        components.append(expanded_component)

    return Composition(components)


def to_term(
    tree_map: Mapping[Address, PMCFGRule],
) -> tuple[dict[Address, Composition], dict[Address, Any]]:
    """Split a tree of rules into a tree of compositions and a tree of heads."""
    term_map: dict[Address, Composition] = {}
    head_map: dict[Address, Any] = {}
    for address in sorted(tree_map):
        rule = tree_map[address]
        term_map[tuple(address)] = rule.composition
        head_map[tuple(address)] = rule.head
    return term_map, head_map


def _separate_rule(
    address: Address,
    rule: PMCFGRule,
    old_heads: set,
    new_tree: dict[Address, PMCFGRule],
) -> PMCFGRule:
    next_child_index = count(len(rule.tail))
    terminal_child_index: dict[Any, int] = {}
    terminal_children: list[Any] = []
    new_composition = []
    first_symbol = True
    only_one_terminal = False

    for component in rule.composition:
        new_component = []
        for symbol in component:
            if isinstance(symbol, T):
                only_one_terminal = first_symbol
                terminal = symbol.value
                if terminal not in terminal_child_index:
                    terminal_child_index[terminal] = next(next_child_index)
                    terminal_children.append(terminal)
                new_component.append(Var(terminal_child_index[terminal], 0))
            else:
                new_component.append(symbol)
            first_symbol = False
        new_composition.append(new_component)

    if only_one_terminal:
        return rule

    unique_heads = []
    for original in terminal_children:
        head = original
        while head in old_heads:
            head = head + original
        unique_heads.append(head)
        new_tree[address + (terminal_child_index[original],)] = PMCFGRule(
            head=head,
            tail=(),
            composition=Composition([[T(original)]]),
            weight=rule.weight,
        )

    return PMCFGRule(
        head=rule.head,
        tail=rule.tail + tuple(unique_heads),
        composition=Composition(new_composition),
        weight=rule.weight,
    )


def separate_terminal_rules(
    tree_map: Mapping[Address, PMCFGRule],
) -> dict[Address, PMCFGRule]:
    """Rewrite a derivation tree so that each rule either holds exactly one
    terminal and no successors, or holds only successor variables.

    Every terminal is moved into a new child rule whose head is the terminal
    itself, repeated until it clashes with no existing head. The derived word
    is unchanged.
    """
    old_heads = {rule.head for rule in tree_map.values()}
    new_tree: dict[Address, PMCFGRule] = {}

    for raw_address in sorted(tree_map):
        address = tuple(raw_address)
        new_tree[address] = _separate_rule(
            address, tree_map[raw_address], old_heads, new_tree
        )

    return dict(sorted(new_tree.items()))