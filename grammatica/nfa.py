"""Weighted finite automata without storage, recognised best-first.

States may be any hashable values. Weights need to support ``*`` and
ordering; higher weights are explored first.
"""

from __future__ import annotations

import heapq
from collections.abc import Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from itertools import count
from typing import Any, Iterator

__all__ = [
    "Configuration",
    "NFATransition",
    "NFA",
    "NFARecogniser",
    "TranslationDict",
]


@dataclass(frozen=True)
class Configuration:
    """The remaining word, the current state and the weight accumulated so far."""

    word: tuple
    storage: Hashable
    weight: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "word", tuple(self.word))


@dataclass(frozen=True)
class NFATransition:
    """Reads ``word`` while moving from ``from_state`` to ``to_state``."""

    from_state: Hashable
    to_state: Hashable
    word: tuple
    weight: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "word", tuple(self.word))

    def apply(self, configuration: Configuration) -> list[Configuration]:
        """Return the successor configuration, or an empty list if not applicable."""
        prefix_length = len(self.word)
        if (
            configuration.word[:prefix_length] != self.word
            or configuration.storage != self.from_state
        ):
            return []
        return [
            Configuration(
                word=configuration.word[prefix_length:],
                storage=self.to_state,
                weight=configuration.weight * self.weight,
            )
        ]


class _Descending:
    """Wraps a weight so that the heap pops the largest weight first."""

    __slots__ = ("weight",)

    def __init__(self, weight: Any) -> None:
        self.weight = weight

    def __lt__(self, other: _Descending) -> bool:
        return other.weight < self.weight


class NFARecogniser:
    """Iterates over accepting ``(configuration, run)`` pairs, best weight first."""

    def __init__(
        self,
        agenda: Iterable[tuple[Configuration, tuple[NFATransition, ...]]],
        transitions: Mapping[Hashable, Sequence[NFATransition]],
        accepting: Iterable[Hashable],
    ) -> None:
        self._tie_breaker = count()
        self._agenda: list = []
        self._transitions = transitions
        self._accepting = frozenset(accepting)
        for configuration, run in agenda:
            self._push(configuration, tuple(run))

    def _push(self, configuration: Configuration, run: tuple) -> None:
        heapq.heappush(
            self._agenda,
            (_Descending(configuration.weight), next(self._tie_breaker), configuration, run),
        )

    def accepts(self, configuration: Configuration) -> bool:
        """A configuration accepts when its state is final and its word is consumed."""
        return configuration.storage in self._accepting and not configuration.word

    def __iter__(self) -> NFARecogniser:
        return self

    def __next__(self) -> tuple[Configuration, tuple[NFATransition, ...]]:
        while self._agenda:
            _, _, configuration, run = heapq.heappop(self._agenda)
            for transition in self._transitions.get(configuration.storage, ()):
                for successor in transition.apply(configuration):
                    self._push(successor, run + (transition,))
            if self.accepts(configuration):
                return configuration, run
        raise StopIteration


class NFA:
    """A weighted automaton: transitions grouped by source state, initial and final states."""

    def __init__(
        self,
        transitions: Mapping[Hashable, Iterable[NFATransition]],
        initial_states: Iterable[Hashable],
        final_states: Iterable[Hashable],
        one: Any = 1,
    ) -> None:
        self.transitions: dict[Hashable, tuple[NFATransition, ...]] = {
            state: tuple(state_transitions)
            for state, state_transitions in transitions.items()
        }
        self.initial_states = frozenset(initial_states)
        self.final_states = frozenset(final_states)
        self.one = one

    def recognise(self, word: Iterable[Any]) -> NFARecogniser:
        """Start recognising ``word`` from every initial state with weight one."""
        word = tuple(word)
        agenda = [
            (Configuration(word=word, storage=state, weight=self.one), ())
            for state in self.initial_states
        ]
        return NFARecogniser(agenda, self.transitions, self.final_states)


class TranslationDict:
    """Maps NFA transitions back to the transitions they were built from."""

    def __init__(self, mapping: Mapping[NFATransition, Any]) -> None:
        self.mapping = dict(mapping)

    def translate(self, run: Iterable[NFATransition]) -> list[Any]:
        """Translate every transition of ``run``; an unknown one yields an empty list."""
        translated = []
        for transition in run:
            if transition not in self.mapping:
                return []
            translated.append(self.mapping[transition])
        return translated

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TranslationDict):
            return NotImplemented
        return self.mapping == other.mapping

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TranslationDict({self.mapping!r})"