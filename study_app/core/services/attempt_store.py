"""Persistence boundary for quiz attempt history.

The engine only needs to append one record when a quiz finishes and to read
a course's full history when analytics are opened. Both calls are
awaitable; failures surface as :class:`PersistenceError` and are never
retried here.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Protocol

from study_app.constants.quiz_constants import RESULTS_FILE_TEMPLATE
from study_app.core.models import QuizAttemptRecord, QuizValidationError
from study_app.core.schemas import parse_attempt, serialize_attempt

logger = logging.getLogger(__name__)

_UNSAFE_ID_CHARACTERS = ("/", "\\", "\0")


class PersistenceError(Exception):
    """Raised when attempt history cannot be read or written."""


class AttemptStore(Protocol):
    async def load_attempts(self, course_id: str) -> list[QuizAttemptRecord]: ...

    async def save_attempt(self, record: QuizAttemptRecord) -> None: ...

    async def delete_attempts(self, course_id: str) -> None: ...


class InMemoryAttemptStore:
    """Attempt store kept in process memory."""

    def __init__(self) -> None:
        self._attempts: dict[str, list[QuizAttemptRecord]] = {}
        self._lock = Lock()

    async def load_attempts(self, course_id: str) -> list[QuizAttemptRecord]:
        with self._lock:
            return list(self._attempts.get(course_id, []))

    async def save_attempt(self, record: QuizAttemptRecord) -> None:
        with self._lock:
            self._attempts.setdefault(record.course_id, []).append(record)

    async def delete_attempts(self, course_id: str) -> None:
        with self._lock:
            self._attempts.pop(course_id, None)


class JsonFileAttemptStore:
    """Attempt store writing one JSON list per course, oldest attempt first."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._lock = Lock()

    def path_for(self, course_id: str) -> Path:
        if not course_id or any(char in course_id for char in _UNSAFE_ID_CHARACTERS):
            raise PersistenceError(f"Course id {course_id!r} cannot be used as a file name.")
        return self._directory / RESULTS_FILE_TEMPLATE.format(course_id=course_id)

    async def load_attempts(self, course_id: str) -> list[QuizAttemptRecord]:
        return await asyncio.to_thread(self._load_sync, course_id)

    async def save_attempt(self, record: QuizAttemptRecord) -> None:
        await asyncio.to_thread(self._save_sync, record)

    async def delete_attempts(self, course_id: str) -> None:
        await asyncio.to_thread(self._delete_sync, course_id)

    def _load_sync(self, course_id: str) -> list[QuizAttemptRecord]:
        with self._lock:
            return self._read(course_id)

    def _save_sync(self, record: QuizAttemptRecord) -> None:
        with self._lock:
            attempts = self._read(record.course_id)
            attempts.append(record)
            path = self.path_for(record.course_id)
            document = json.dumps([serialize_attempt(attempt) for attempt in attempts], indent=2)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(document, encoding="utf-8")
            except OSError as exc:
                raise PersistenceError(f"Could not write attempts to {path}") from exc
        logger.info(
            "Saved attempt for course %s quiz %s (%s/%s)",
            record.course_id,
            record.quiz_index,
            record.score,
            record.total_questions,
        )

    def _delete_sync(self, course_id: str) -> None:
        path = self.path_for(course_id)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise PersistenceError(f"Could not delete {path}") from exc

    def _read(self, course_id: str) -> list[QuizAttemptRecord]:
        path = self.path_for(course_id)
        if not path.exists():
            return []
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Could not read attempts from {path}") from exc
        if not raw.strip():
            return []
        try:
            decoded = json.loads(raw)
            if not isinstance(decoded, list):
                raise PersistenceError(f"Attempt history in {path} is not a list.")
            return [parse_attempt(item) for item in decoded]
        except (json.JSONDecodeError, QuizValidationError) as exc:
            raise PersistenceError(f"Attempt history in {path} is corrupt.") from exc
