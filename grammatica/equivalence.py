"""Equivalence classes and the relation that maps elements onto them."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any

from .parsing import IncompleteInput, ParseError, parse_token, parse_vec, skip_space

__all__ = [
    "EquivalenceClass",
    "EquivalenceRelation",
    "parse_class",
    "parse_set",
]


@dataclass(frozen=True)
class EquivalenceClass:
    """A labelled set of elements; ``elements`` is ``None`` for the default class."""

    label: Any
    elements: frozenset | None = None

    def __post_init__(self) -> None:
        if self.elements is not None and not isinstance(self.elements, frozenset):
            object.__setattr__(self, "elements", frozenset(self.elements))

    @property
    def is_default(self) -> bool:
        return self.elements is None

    @classmethod
    def from_str(
        cls,
        text: str,
        convert_label: Callable[[str], Any] = str,
        convert_element: Callable[[str], Any] = str,
    ) -> EquivalenceClass:
        """Parse a class such as ``0 [a, b]`` or ``2 *``; trailing input is ignored."""
        try:
            equivalence_class, _ = parse_class(text, convert_label, convert_element)
        except ParseError as error:
            raise ParseError(f"Could not parse {text}") from error
        return equivalence_class


def parse_set(
    text: str, convert_element: Callable[[str], Any] = str
) -> tuple[frozenset, str]:
    """Parse a bracketed set of elements such as ``[0, 1, 2]``."""
    elements, rest = parse_vec(
        text, partial(parse_token, convert=convert_element), "[", "]", ","
    )
    return frozenset(elements), rest


def parse_class(
    text: str,
    convert_label: Callable[[str], Any] = str,
    convert_element: Callable[[str], Any] = str,
) -> tuple[EquivalenceClass, str]:
    """Parse a label followed by either a set of elements or ``*``."""
    label, rest = parse_token(text, convert_label)
    rest = skip_space(rest)
    if not rest:
        raise IncompleteInput("Expected '*' or a set, found end of input")
    if rest.startswith("*"):
        return EquivalenceClass(label, None), rest[1:]
    elements, rest = parse_set(rest, convert_element)
    return EquivalenceClass(label, elements), rest


class EquivalenceRelation:
    """Maps elements to the label of their class, or to a default label."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, classes: Mapping[Hashable, Iterable[Hashable]], default: Hashable):
        projection: dict[Hashable, Hashable] = {}
        for label, members in classes.items():
            if label == default:
                raise ValueError(
                    "There can only be one default class in the equivalence relation!"
                )
            for member in members:
                if member in projection:
                    raise ValueError(
                        "All classes of the equivalence relation must be disjoint!"
                    )
                projection[member] = label
        self._projection = projection
        self.default = default

    @classmethod
    def _from_projection(
        cls, projection: dict[Hashable, Hashable], default: Hashable
    ) -> EquivalenceRelation:
        relation = cls.__new__(cls)
        relation._projection = projection
        relation.default = default
        return relation

    @classmethod
    def from_classes(cls, classes: Iterable[EquivalenceClass]) -> EquivalenceRelation:
        """Build a relation from classes; exactly the last default class is used."""
        projection: dict[Hashable, Hashable] = {}
        default = None
        has_default = False
        for equivalence_class in classes:
            if equivalence_class.elements is None:
                default = equivalence_class.label
                has_default = True
            else:
                for element in equivalence_class.elements:
                    projection[element] = equivalence_class.label
        if not has_default:
            raise ValueError("The equivalence relation needs a default class")
        return cls._from_projection(projection, default)

    @classmethod
    def from_str(
        cls,
        text: str,
        convert_label: Callable[[str], Any] = str,
        convert_element: Callable[[str], Any] = str,
    ) -> EquivalenceRelation:
        """Parse one class per line, one of which must be the default class ``label *``."""
        classes: dict[Hashable, frozenset] = {}
        default = None
        has_default = False
        for line in text.splitlines():
            if not line:
                continue
            equivalence_class = EquivalenceClass.from_str(
                line.strip(), convert_label, convert_element
            )
            if equivalence_class.elements is None:
                default = equivalence_class.label
                has_default = True
            else:
                classes[equivalence_class.label] = equivalence_class.elements

        if has_default:
            try:
                return cls(classes, default)
            except ValueError:
                pass
        raise ParseError(f"Could not parse {text}")

    def project(self, key: Hashable) -> Hashable:
        """Return the label of the class that ``key`` belongs to."""
        return self._projection.get(key, self.default)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EquivalenceRelation):
            return NotImplemented
        return self.default == other.default and self._projection == other._projection

    def __repr__(self) -> str:
        return f"EquivalenceRelation(projection={self._projection!r}, default={self.default!r})"