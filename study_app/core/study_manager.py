"""Business logic tying courses, quiz sessions and attempt history together."""

from __future__ import annotations

from collections.abc import Callable
import logging
import random
from threading import Lock

from study_app.core.models import QuizAttemptRecord, QuizSummary, current_timestamp_ms
from study_app.core.services.attempt_store import AttemptStore
from study_app.core.services.course_catalog import CourseCatalog
from study_app.core.services.flashcard_session import FlashcardSession
from study_app.core.services.quiz_session import QuizSession
from study_app.core.services.result_aggregator import ResultAggregator
from study_app.core.settings import SessionSettings

logger = logging.getLogger(__name__)


class StudyManager:
    """Facade for the course catalog, quiz sessions and the attempt store."""

    def __init__(
        self,
        catalog: CourseCatalog,
        store: AttemptStore,
        rng: random.Random | None = None,
        settings: SessionSettings | None = None,
        clock: Callable[[], int] = current_timestamp_ms,
    ) -> None:
        self._lock = Lock()
        self._catalog = catalog
        self._store = store
        self._rng = rng or random.Random()
        self._settings = settings or SessionSettings()
        self._clock = clock

    @property
    def catalog(self) -> CourseCatalog:
        return self._catalog

    def start_quiz(self, course_id: str, quiz_index: int) -> QuizSession:
        """Create a session over one quiz, ordered by the course preference."""
        with self._lock:
            course = self._catalog.get_course(course_id)
            questions = self._catalog.get_quiz(course_id, quiz_index)
            logger.info(
                "Starting quiz %s of course %s (%s questions, %s order)",
                quiz_index,
                course_id,
                len(questions),
                course.quiz_sorting_preference.value,
            )
            return QuizSession(
                questions,
                preference=course.quiz_sorting_preference,
                rng=self._rng,
                settings=self._settings,
            )

    def start_flashcards(self, course_id: str, set_index: int) -> FlashcardSession:
        with self._lock:
            cards = self._catalog.get_flashcard_set(course_id, set_index)
        logger.info("Starting flashcard set %s of course %s (%s cards)", set_index, course_id, len(cards))
        return FlashcardSession(cards)

    def quiz_name(self, course_id: str, quiz_index: int) -> str:
        with self._lock:
            return self._catalog.quiz_names(course_id)[quiz_index]

    async def finish_quiz(
        self,
        course_id: str,
        quiz_index: int,
        summary: QuizSummary,
        duration_seconds: int | None = None,
    ) -> QuizAttemptRecord:
        """Record a completed quiz; a store failure propagates to the caller."""
        record = summary.to_attempt_record(
            course_id=course_id,
            quiz_index=quiz_index,
            quiz_name=self.quiz_name(course_id, quiz_index),
            timestamp=self._clock(),
            duration_seconds=duration_seconds,
        )
        await self._store.save_attempt(record)
        return record

    async def load_analytics(self, course_id: str) -> ResultAggregator:
        with self._lock:
            quiz_names = self._catalog.quiz_names(course_id)
        return await ResultAggregator.load(self._store, course_id, quiz_names)

    async def delete_course(self, course_id: str) -> None:
        """Remove a course and its attempt history."""
        with self._lock:
            self._catalog.delete_course(course_id)
        await self._store.delete_attempts(course_id)
