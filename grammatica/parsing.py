"""Small combinator-style helpers for the line-based grammar formats.

Every parser takes a string and returns ``(value, rest)``, where ``rest`` is
the unconsumed remainder. Malformed input raises :class:`ParseError`; input
that ends before a construct is complete raises :class:`IncompleteInput`.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any, TypeVar

__all__ = [
    "ParseError",
    "IncompleteInput",
    "parse_token",
    "parse_vec",
    "skip_space",
    "parse_initial_rule_grammar",
]

V = TypeVar("V")
R = TypeVar("R")

_SPACE = " \t"
_DELIMITERS = frozenset('[](),"#%')
_INITIAL_TAG = "initial:"


class ParseError(ValueError):
    """The input does not match the expected format."""


class IncompleteInput(ParseError):
    """The input ended before the construct being parsed was complete."""


def skip_space(text: str) -> str:
    """Drop leading spaces and tabs (but not line breaks)."""
    return text.lstrip(_SPACE)


def _convert(raw: str, convert: Callable[[str], V]) -> V:
    try:
        return convert(raw)
    except (ValueError, TypeError) as error:
        raise ParseError(f"Could not convert {raw!r}") from error


def parse_token(text: str, convert: Callable[[str], V] = str) -> tuple[V, str]:
    """Read one token, either double-quoted or a run of non-delimiter characters."""
    if not text:
        raise IncompleteInput("Expected a token, found end of input")

    if text[0] == '"':
        closing = text.find('"', 1)
        if closing < 0:
            raise IncompleteInput(f"Unterminated quoted token in {text!r}")
        return _convert(text[1:closing], convert), text[closing + 1:]

    end = 0
    for char in text:
        if char.isspace() or char in _DELIMITERS:
            break
        end += 1
    if end == 0:
        raise ParseError(f"Expected a token at {text!r}")
    return _convert(text[:end], convert), text[end:]


def _expect(text: str, literal: str) -> str:
    if text.startswith(literal):
        return text[len(literal):]
    if literal.startswith(text):
        raise IncompleteInput(f"Expected {literal!r}, found end of input")
    raise ParseError(f"Expected {literal!r} at {text!r}")


def parse_vec(
    text: str,
    item_parser: Callable[[str], tuple[V, str]],
    open_bracket: str = "[",
    close_bracket: str = "]",
    separator: str = ",",
) -> tuple[list[V], str]:
    """Parse a bracketed, separated list of items parsed by ``item_parser``."""
    rest = skip_space(_expect(text, open_bracket))
    items: list[V] = []
    if not rest:
        raise IncompleteInput(f"Expected {close_bracket!r} or an item, found end of input")
    if rest.startswith(close_bracket):
        return items, rest[len(close_bracket):]

    while True:
        item, rest = item_parser(rest)
        items.append(item)
        rest = skip_space(rest)
        if not rest:
            raise IncompleteInput(f"Expected {close_bracket!r} or {separator!r}, found end of input")
        if rest.startswith(close_bracket):
            return items, rest[len(close_bracket):]
        if rest.startswith(separator):
            rest = skip_space(rest[len(separator):])
            continue
        raise ParseError(f"Expected {close_bracket!r} or {separator!r} at {rest!r}")


def _parse_initial_line(line: str, convert_nonterminal: Callable[[str], Any]) -> list[Any]:
    try:
        rest = skip_space(line[len(_INITIAL_TAG):])
        nonterminals, rest = parse_vec(
            rest, partial(parse_token, convert=convert_nonterminal), "[", "]", ","
        )
        rest = skip_space(rest)
        if rest and not rest.startswith("%"):
            raise ParseError(f"Unexpected trailing input {rest!r}")
    except ParseError as error:
        raise ParseError(
            f"Malformed declaration of initial nonterminals: '{line}'"
        ) from error
    return nonterminals


def parse_initial_rule_grammar(
    text: str,
    rule_parser: Callable[[str], R],
    convert_nonterminal: Callable[[str], Any] = str,
) -> tuple[list[Any], list[R]]:
    """Split a grammar text into its initial nonterminals and its rules.

    Blank lines and lines starting with ``%`` are ignored. Every line starting
    with ``initial:`` adds to the initial nonterminals; every other line is
    handed to ``rule_parser``.
    """
    initial: list[Any] = []
    rules: list[R] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("%"):
            continue
        if line.startswith(_INITIAL_TAG):
            initial.extend(_parse_initial_line(line, convert_nonterminal))
        else:
            rules.append(rule_parser(line))
    return initial, rules