"""Service for running a single learner through one quiz."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto
import logging
import random

from study_app.core.models import (
    MissedQuestion,
    Question,
    QuizSummary,
    QuizValidationError,
    SortingPreference,
)
from study_app.core.scoring import evaluate
from study_app.core.settings import SessionSettings
from study_app.core.shuffle import prepare_session

logger = logging.getLogger(__name__)


class SessionStateError(RuntimeError):
    """Raised when an operation is not allowed in the current session phase."""


class SessionPhase(Enum):
    AWAITING_SELECTION = auto()
    REVEALED = auto()
    COMPLETED = auto()


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Immutable view of the session returned by every transition."""

    phase: SessionPhase
    current_index: int
    total: int
    question: Question
    selection: frozenset[int]
    revealed: bool
    is_correct: bool | None
    score: int
    missed: tuple[MissedQuestion, ...]

    @property
    def is_first_question(self) -> bool:
        return self.current_index == 0

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= self.total - 1

    @property
    def progress(self) -> float:
        return (self.current_index + 1) / self.total


@dataclass(frozen=True, slots=True)
class _AnswerRecord:
    selection: frozenset[int]
    is_correct: bool


class QuizSession:
    """State machine over a working copy of a quiz.

    A question moves from awaiting a selection to revealed exactly once; the
    score and the missed log are only touched on that transition. Stepping
    back to an earlier question restores its recorded selection for display.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        preference: SortingPreference = SortingPreference.SEQUENTIAL,
        rng: random.Random | None = None,
        settings: SessionSettings | None = None,
    ) -> None:
        if not questions:
            raise QuizValidationError("Quiz must contain at least one question.")
        self._settings = settings or SessionSettings()
        self._original_questions: tuple[Question, ...] = tuple(questions)
        self._questions: tuple[Question, ...] = tuple(
            prepare_session(
                self._original_questions,
                preference,
                rng,
                shuffle_sequential_options=self._settings.shuffle_options_in_sequence,
            )
        )
        self._reset_progress()

    # --- Read-only state ---

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question:
        return self._questions[self._current_index]

    @property
    def progress(self) -> float:
        return (self._current_index + 1) / len(self._questions)

    @property
    def score(self) -> int:
        return self._score

    @property
    def missed(self) -> tuple[MissedQuestion, ...]:
        return tuple(self._missed)

    @property
    def phase(self) -> SessionPhase:
        if self._completed:
            return SessionPhase.COMPLETED
        if self._current_index in self._answers:
            return SessionPhase.REVEALED
        return SessionPhase.AWAITING_SELECTION

    def snapshot(self) -> SessionSnapshot:
        record = self._answers.get(self._current_index)
        return SessionSnapshot(
            phase=self.phase,
            current_index=self._current_index,
            total=len(self._questions),
            question=self.current_question,
            selection=frozenset(self._selection),
            revealed=record is not None,
            is_correct=record.is_correct if record else None,
            score=self._score,
            missed=tuple(self._missed),
        )

    def summary(self) -> QuizSummary:
        if not self._completed:
            raise SessionStateError("The quiz has not been completed yet.")
        return self._build_summary()

    # --- Transitions ---

    def toggle_option(self, option_index: int) -> SessionSnapshot:
        """Select or deselect an option of the current question.

        Single-select questions replace the selection instead of toggling.
        """
        self._require_phase(SessionPhase.AWAITING_SELECTION, "change the selection")
        question = self.current_question
        if not 0 <= option_index < len(question.options):
            raise IndexError(f"Option index {option_index} out of range")

        if question.is_multi_select:
            if option_index in self._selection:
                self._selection.remove(option_index)
            else:
                self._selection.add(option_index)
            return self.snapshot()

        self._selection = {option_index}
        if self._settings.auto_reveal_single_select:
            return self.reveal()
        return self.snapshot()

    def reveal(self) -> SessionSnapshot:
        """Score the current selection and disclose the correct answer."""
        if self.phase is SessionPhase.REVEALED:
            return self.snapshot()
        self._require_phase(SessionPhase.AWAITING_SELECTION, "reveal an answer")
        if not self._selection:
            raise SessionStateError("Select at least one option before revealing the answer.")

        question = self.current_question
        selection = frozenset(self._selection)
        is_correct = evaluate(selection, question.answer_indices)
        self._answers[self._current_index] = _AnswerRecord(selection=selection, is_correct=is_correct)
        if is_correct:
            self._score += 1
        else:
            self._missed.append(MissedQuestion(question=question, selection=selection))
        logger.debug(
            "Question %s revealed (%s)", question.id, "correct" if is_correct else "incorrect"
        )
        return self.snapshot()

    def advance(self) -> SessionSnapshot | QuizSummary:
        """Move past a revealed question; returns the summary after the last one."""
        self._require_phase(SessionPhase.REVEALED, "advance")
        if self._current_index >= len(self._questions) - 1:
            self._completed = True
            logger.info("Quiz completed with score %s/%s", self._score, len(self._questions))
            return self._build_summary()

        self._current_index += 1
        self._load_question_state()
        return self.snapshot()

    def retreat(self) -> SessionSnapshot:
        """Step back to the previous question as a read-only view."""
        if self._completed:
            raise SessionStateError("Cannot navigate a completed quiz.")
        if self._current_index == 0:
            raise SessionStateError("Already at the first question.")
        self._current_index -= 1
        self._load_question_state()
        return self.snapshot()

    def reset(self) -> SessionSnapshot:
        """Start over on the original question list with a cleared score."""
        self._questions = self._original_questions
        self._reset_progress()
        return self.snapshot()

    # --- Internals ---

    def _reset_progress(self) -> None:
        self._current_index = 0
        self._selection: set[int] = set()
        self._answers: dict[int, _AnswerRecord] = {}
        self._score = 0
        self._missed: list[MissedQuestion] = []
        self._completed = False

    def _load_question_state(self) -> None:
        # An unrevealed selection is discarded when leaving a question.
        record = self._answers.get(self._current_index)
        self._selection = set(record.selection) if record else set()

    def _require_phase(self, expected: SessionPhase, action: str) -> None:
        current = self.phase
        if current is not expected:
            raise SessionStateError(f"Cannot {action} while the session is {current.name.lower()}.")

    def _build_summary(self) -> QuizSummary:
        return QuizSummary(
            score=self._score,
            total=len(self._questions),
            missed=tuple(self._missed),
        )
