"""Domain models for the study application."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePath

from study_app.constants.quiz_constants import FLASHCARD_SET_NAME_TEMPLATE, QUIZ_NAME_TEMPLATE


class QuizValidationError(ValueError):
    """Raised when quiz content violates the model invariants."""


class SortingPreference(Enum):
    """How a course presents the questions of its quizzes."""

    SEQUENTIAL = "sequential"
    RANDOM = "random"


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with one or more correct options."""

    id: int
    text: str
    options: tuple[str, ...]
    answer_indices: frozenset[int]
    explanation: str | None = None

    def __post_init__(self) -> None:
        if self.options is None:
            raise QuizValidationError("Question must define its options.")
        options = tuple(self.options)
        if len(options) < 2:
            raise QuizValidationError("Each question must have at least two options.")
        if any(not isinstance(option, str) for option in options):
            raise QuizValidationError("Option text must be a string.")
        if self.answer_indices is None:
            raise QuizValidationError("Question must have at least one correct answer.")
        try:
            indices = frozenset(self.answer_indices)
        except TypeError as exc:
            raise QuizValidationError("Answer indices must be a collection of integers.") from exc
        if not indices:
            raise QuizValidationError("Question must have at least one correct answer.")
        for index in indices:
            if isinstance(index, bool) or not isinstance(index, int):
                raise QuizValidationError(f"Answer index {index!r} is not an integer.")
            if not 0 <= index < len(options):
                raise QuizValidationError(
                    f"Answer index {index} is out of bounds for {len(options)} options."
                )
        # Normalize containers so equality and hashing do not depend on input types.
        object.__setattr__(self, "options", options)
        object.__setattr__(self, "answer_indices", indices)

    @property
    def is_multi_select(self) -> bool:
        return len(self.answer_indices) > 1

    @property
    def correct_options(self) -> list[str]:
        return [self.options[index] for index in sorted(self.answer_indices)]

    def with_options(self, options: Iterable[str], answer_indices: Iterable[int]) -> Question:
        """Return a copy carrying a different option layout."""
        return Question(
            id=self.id,
            text=self.text,
            options=tuple(options),
            answer_indices=frozenset(answer_indices),
            explanation=self.explanation,
        )


@dataclass(frozen=True, slots=True)
class QuizAttemptRecord:
    """One completed pass through a quiz, persisted append-only."""

    course_id: str
    quiz_index: int
    quiz_name: str
    score: int
    total_questions: int
    timestamp: int  # epoch millis
    duration_seconds: int | None = None

    def __post_init__(self) -> None:
        if self.score < 0:
            raise QuizValidationError("Score cannot be negative.")
        if self.total_questions < 0:
            raise QuizValidationError("Total question count cannot be negative.")

    @property
    def percentage(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return (self.score / self.total_questions) * 100


@dataclass(frozen=True, slots=True)
class MissedQuestion:
    """A question answered incorrectly together with the learner's selection."""

    question: Question
    selection: frozenset[int]


@dataclass(frozen=True, slots=True)
class QuizSummary:
    """Terminal result of a quiz session."""

    score: int
    total: int
    missed: tuple[MissedQuestion, ...] = ()

    def to_attempt_record(
        self,
        course_id: str,
        quiz_index: int,
        quiz_name: str,
        timestamp: int | None = None,
        duration_seconds: int | None = None,
    ) -> QuizAttemptRecord:
        if timestamp is None:
            timestamp = current_timestamp_ms()
        return QuizAttemptRecord(
            course_id=course_id,
            quiz_index=quiz_index,
            quiz_name=quiz_name,
            score=self.score,
            total_questions=self.total,
            timestamp=timestamp,
            duration_seconds=duration_seconds,
        )


@dataclass(frozen=True, slots=True)
class Flashcard:
    """Two-sided study card: a prompt on the front, the answer on the back."""

    id: int
    front: str
    back: str
    explanation: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.front, str) or not self.front.strip():
            raise QuizValidationError("Flashcard front must not be empty.")
        if not isinstance(self.back, str) or not self.back.strip():
            raise QuizValidationError("Flashcard back must not be empty.")


@dataclass(slots=True)
class Course:
    """A course owning quizzes (lists of questions), flashcard sets and study PDFs.

    Display names are stored sparsely by position; positions without an entry
    fall back to the default naming for that kind of item.
    """

    id: str
    name: str
    quizzes: list[list[Question]] = field(default_factory=list)
    flashcard_sets: list[list[Flashcard]] = field(default_factory=list)
    pdfs: list[str] = field(default_factory=list)
    quiz_names: dict[int, str] = field(default_factory=dict)
    flashcard_set_names: dict[int, str] = field(default_factory=dict)
    pdf_names: dict[int, str] = field(default_factory=dict)
    quiz_sorting_preference: SortingPreference = SortingPreference.SEQUENTIAL
    created_at: int = field(default_factory=lambda: current_timestamp_ms())
    updated_at: int = field(default_factory=lambda: current_timestamp_ms())

    @property
    def quiz_count(self) -> int:
        return len(self.quizzes)

    @property
    def total_question_count(self) -> int:
        return sum(len(quiz) for quiz in self.quizzes)

    @property
    def flashcard_set_count(self) -> int:
        return len(self.flashcard_sets)

    @property
    def pdf_count(self) -> int:
        return len(self.pdfs)

    def quiz_name(self, index: int) -> str:
        return self.quiz_names.get(index) or QUIZ_NAME_TEMPLATE.format(number=index + 1)

    def flashcard_set_name(self, index: int) -> str:
        return self.flashcard_set_names.get(index) or FLASHCARD_SET_NAME_TEMPLATE.format(
            number=index + 1
        )

    def pdf_name(self, index: int) -> str:
        return self.pdf_names.get(index) or PurePath(self.pdfs[index]).name


def current_timestamp_ms() -> int:
    return int(datetime.now().timestamp() * 1000)
