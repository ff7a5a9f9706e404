"""Answer evaluation for single- and multi-select questions."""

from __future__ import annotations

from collections.abc import Iterable


def evaluate(selected: Iterable[int], correct: Iterable[int]) -> bool:
    """Return True only when the selection matches the correct set exactly.

    A multi-select answer that is a strict subset or superset of the correct
    options earns no credit.
    """
    return set(selected) == set(correct)
