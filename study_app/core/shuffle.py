"""Randomized question and option ordering that keeps answers correct."""

from __future__ import annotations

from collections.abc import Sequence
import random

from study_app.core.models import Question, SortingPreference


def shuffle_order(questions: Sequence[Question], rng: random.Random | None = None) -> list[Question]:
    """Return the questions in a new random order; the input is left untouched."""
    rng = rng or random.Random()
    shuffled = list(questions)
    rng.shuffle(shuffled)
    return shuffled


def shuffle_options(question: Question, rng: random.Random | None = None) -> Question:
    """Return a copy of ``question`` with its options permuted.

    Each correct index is remapped by looking up the text of the original
    correct option in the permuted list. When several options share the same
    text the first matching position wins, in ascending original-index order.
    """
    rng = rng or random.Random()
    options = list(question.options)
    rng.shuffle(options)

    new_indices = [options.index(question.options[old]) for old in sorted(question.answer_indices)]
    return question.with_options(options, new_indices)


def shuffle_options_only(questions: Sequence[Question], rng: random.Random | None = None) -> list[Question]:
    """Shuffle options within every question while keeping question order."""
    rng = rng or random.Random()
    return [shuffle_options(question, rng) for question in questions]


def shuffle_questions(questions: Sequence[Question], rng: random.Random | None = None) -> list[Question]:
    """Shuffle both the question order and the options of every question."""
    rng = rng or random.Random()
    return shuffle_options_only(shuffle_order(questions, rng), rng)


def prepare_session(
    questions: Sequence[Question],
    preference: SortingPreference,
    rng: random.Random | None = None,
    shuffle_sequential_options: bool = False,
) -> list[Question]:
    """Build the working question list for a new quiz session.

    ``RANDOM`` shuffles order and options. ``SEQUENTIAL`` keeps the authored
    order and, unless ``shuffle_sequential_options`` is set, the authored option layout.
    """
    match preference:
        case SortingPreference.RANDOM:
            return shuffle_questions(questions, rng)
        case SortingPreference.SEQUENTIAL:
            if shuffle_sequential_options:
                return shuffle_options_only(questions, rng)
            return list(questions)
        case _:
            raise ValueError(f"Unknown sorting preference: {preference!r}")
