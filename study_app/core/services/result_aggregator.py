"""Service for summarizing a course's quiz attempt history."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from statistics import fmean

from study_app.constants.quiz_constants import DEFAULT_RECENT_ACTIVITY_LIMIT, QUIZ_NAME_TEMPLATE
from study_app.core.models import QuizAttemptRecord
from study_app.core.services.attempt_store import AttemptStore


@dataclass(frozen=True, slots=True)
class QuizPerformance:
    """Average percentage achieved on one quiz."""

    quiz_index: int
    name: str
    average: float


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """One per-quiz entry of the chart series."""

    quiz_index: int
    name: str
    average: float
    low: float
    high: float
    attempts: int


class ResultAggregator:
    """Pure reductions over an immutable snapshot of attempt records."""

    def __init__(
        self,
        attempts: Iterable[QuizAttemptRecord],
        quiz_names: Mapping[int, str] | None = None,
    ) -> None:
        self._attempts: tuple[QuizAttemptRecord, ...] = tuple(attempts)
        self._quiz_names: dict[int, str] = dict(quiz_names or {})

    @classmethod
    async def load(
        cls,
        store: AttemptStore,
        course_id: str,
        quiz_names: Mapping[int, str] | None = None,
    ) -> ResultAggregator:
        """Fetch the course history once and wrap it."""
        attempts = await store.load_attempts(course_id)
        return cls(attempts, quiz_names)

    @property
    def attempts(self) -> tuple[QuizAttemptRecord, ...]:
        return self._attempts

    def average_score(self) -> float | None:
        if not self._attempts:
            return None
        return fmean(attempt.percentage for attempt in self._attempts)

    def total_attempts(self) -> int:
        return len(self._attempts)

    def best_performing_quiz(self) -> QuizPerformance | None:
        best: ChartPoint | None = None
        # Series is ordered by quiz index, so a strict comparison keeps the lowest index on ties.
        for point in self.chart_series():
            if best is None or point.average > best.average:
                best = point
        if best is None:
            return None
        return QuizPerformance(quiz_index=best.quiz_index, name=best.name, average=best.average)

    def chart_series(self) -> list[ChartPoint]:
        series = []
        for quiz_index, attempts in sorted(self._group_by_quiz().items()):
            percentages = [attempt.percentage for attempt in attempts]
            series.append(
                ChartPoint(
                    quiz_index=quiz_index,
                    name=self.quiz_name(quiz_index),
                    average=fmean(percentages),
                    low=min(percentages),
                    high=max(percentages),
                    attempts=len(attempts),
                )
            )
        return series

    def performance_by_quiz(self) -> dict[str, float]:
        return {point.name: point.average for point in self.chart_series()}

    def recent_activity(self, limit: int = DEFAULT_RECENT_ACTIVITY_LIMIT) -> list[QuizAttemptRecord]:
        if limit <= 0:
            return []
        ordered = sorted(self._attempts, key=lambda attempt: attempt.timestamp, reverse=True)
        return ordered[:limit]

    # --- Per-quiz helpers ---

    def attempts_for_quiz(self, quiz_index: int) -> list[QuizAttemptRecord]:
        return [attempt for attempt in self._attempts if attempt.quiz_index == quiz_index]

    def average_for_quiz(self, quiz_index: int) -> float | None:
        attempts = self.attempts_for_quiz(quiz_index)
        if not attempts:
            return None
        return fmean(attempt.percentage for attempt in attempts)

    def most_recent_attempt(self, quiz_index: int) -> QuizAttemptRecord | None:
        attempts = self.attempts_for_quiz(quiz_index)
        if not attempts:
            return None
        return max(attempts, key=lambda attempt: attempt.timestamp)

    def quiz_name(self, quiz_index: int) -> str:
        """Display name: supplied mapping, then the latest recorded name, then a default."""
        name = self._quiz_names.get(quiz_index)
        if name:
            return name
        latest = self.most_recent_attempt(quiz_index)
        if latest is not None and latest.quiz_name:
            return latest.quiz_name
        return QUIZ_NAME_TEMPLATE.format(number=quiz_index + 1)

    def _group_by_quiz(self) -> dict[int, list[QuizAttemptRecord]]:
        grouped: dict[int, list[QuizAttemptRecord]] = {}
        for attempt in self._attempts:
            grouped.setdefault(attempt.quiz_index, []).append(attempt)
        return grouped
