"""Helpers for runs, i.e. sequences of transitions of an automaton.

A transition is any object with a ``word`` (a sequence of terminals) and a
``weight`` that supports multiplication.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from functools import reduce
from operator import mul
from typing import Any

__all__ = ["Run", "run_word", "run_weight"]


@dataclass(frozen=True)
class Run:
    """A run, displayed as one element per line inside brackets."""

    transitions: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "transitions", tuple(self.transitions))

    def __iter__(self) -> Iterator[Any]:
        return iter(self.transitions)

    def __len__(self) -> int:
        return len(self.transitions)

    def __str__(self) -> str:
        return "[" + ",\n ".join(str(transition) for transition in self.transitions) + "]"


def run_word(transitions: Iterable[Any]) -> list[Any]:
    """Return the word read by the run: the concatenation of all transition words."""
    return [symbol for transition in transitions for symbol in transition.word]


def run_weight(transitions: Iterable[Any]) -> Any:
    """Return the product of all transition weights; an empty run weighs one."""
    weights = [transition.weight for transition in transitions]
    if not weights:
        return 1
    return reduce(mul, weights)