"""Service for managing courses and the quizzes, flashcard sets and PDFs they contain."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

from study_app.core.models import (
    Course,
    Flashcard,
    Question,
    QuizValidationError,
    SortingPreference,
    current_timestamp_ms,
)
from study_app.core.schemas import parse_course, serialize_course


class CourseCatalog:
    """Keeps the course collection in memory; saving it is up to the caller.

    Items are addressed by position. Custom display names are stored per
    position, so every operation that moves or removes items also rewrites
    the matching name map.
    """

    def __init__(self) -> None:
        self._courses: dict[str, Course] = {}
        self._course_counter: int = 0

    def load_courses(self, data: list[dict[str, Any]]) -> None:
        """Replace the catalog with courses decoded from JSON."""
        courses = [parse_course(item) for item in data]
        self._courses = {course.id: course for course in courses}

    def dump_courses(self) -> list[dict[str, Any]]:
        return [serialize_course(course) for course in self._courses.values()]

    def list_courses(self) -> list[Course]:
        return list(self._courses.values())

    def get_course(self, course_id: str) -> Course:
        try:
            return self._courses[course_id]
        except KeyError:
            raise KeyError(f"Course with id {course_id} not found") from None

    def create_course(self, name: str) -> Course:
        cleaned_name = _clean_name(name, "Course")
        now = current_timestamp_ms()
        course = Course(
            id=self._next_course_id(now),
            name=cleaned_name,
            created_at=now,
            updated_at=now,
        )
        self._courses[course.id] = course
        return course

    def rename_course(self, course_id: str, name: str) -> Course:
        return self._update(course_id, name=_clean_name(name, "Course"))

    def delete_course(self, course_id: str) -> None:
        self.get_course(course_id)
        del self._courses[course_id]

    # --- Quizzes ---

    def get_quiz(self, course_id: str, quiz_index: int) -> list[Question]:
        course = self.get_course(course_id)
        self._check_index(quiz_index, len(course.quizzes), "Quiz")
        return list(course.quizzes[quiz_index])

    def add_quiz(self, course_id: str, questions: list[Question], name: str | None = None) -> Course:
        if not questions:
            raise QuizValidationError("Quiz must contain at least one question.")
        course = self.get_course(course_id)
        quiz_names = dict(course.quiz_names)
        if name is not None:
            quiz_names[len(course.quizzes)] = _clean_name(name, "Quiz")
        return self._update(
            course_id, quizzes=[*course.quizzes, list(questions)], quiz_names=quiz_names
        )

    def rename_quiz(self, course_id: str, quiz_index: int, name: str) -> Course:
        course = self.get_course(course_id)
        self._check_index(quiz_index, len(course.quizzes), "Quiz")
        cleaned_name = _clean_name(name, "Quiz")
        return self._update(course_id, quiz_names={**course.quiz_names, quiz_index: cleaned_name})

    def delete_quiz(self, course_id: str, quiz_index: int) -> Course:
        course = self.get_course(course_id)
        self._check_index(quiz_index, len(course.quizzes), "Quiz")
        kept = [index for index in range(len(course.quizzes)) if index != quiz_index]
        return self._update(
            course_id,
            quizzes=[course.quizzes[index] for index in kept],
            quiz_names=_names_for_positions(kept, course.quiz_names.get),
        )

    def reorder_quizzes(self, course_id: str, old_index: int, new_index: int) -> Course:
        """Move a quiz; every quiz keeps the name it was shown with."""
        course = self.get_course(course_id)
        order = self._moved_order(len(course.quizzes), old_index, new_index, "Quiz")
        return self._update(
            course_id,
            quizzes=[course.quizzes[index] for index in order],
            quiz_names=_names_for_positions(order, course.quiz_name),
        )

    def quiz_names(self, course_id: str) -> dict[int, str]:
        """Display names keyed by quiz index, custom or default."""
        course = self.get_course(course_id)
        return {index: course.quiz_name(index) for index in range(len(course.quizzes))}

    # --- Flashcard sets ---

    def get_flashcard_set(self, course_id: str, set_index: int) -> list[Flashcard]:
        course = self.get_course(course_id)
        self._check_index(set_index, len(course.flashcard_sets), "Flashcard set")
        return list(course.flashcard_sets[set_index])

    def add_flashcard_set(
        self, course_id: str, cards: list[Flashcard], name: str | None = None
    ) -> Course:
        if not cards:
            raise QuizValidationError("Flashcard set must contain at least one card.")
        course = self.get_course(course_id)
        set_names = dict(course.flashcard_set_names)
        if name is not None:
            set_names[len(course.flashcard_sets)] = _clean_name(name, "Flashcard set")
        return self._update(
            course_id,
            flashcard_sets=[*course.flashcard_sets, list(cards)],
            flashcard_set_names=set_names,
        )

    def rename_flashcard_set(self, course_id: str, set_index: int, name: str) -> Course:
        course = self.get_course(course_id)
        self._check_index(set_index, len(course.flashcard_sets), "Flashcard set")
        cleaned_name = _clean_name(name, "Flashcard set")
        return self._update(
            course_id,
            flashcard_set_names={**course.flashcard_set_names, set_index: cleaned_name},
        )

    def delete_flashcard_set(self, course_id: str, set_index: int) -> Course:
        course = self.get_course(course_id)
        self._check_index(set_index, len(course.flashcard_sets), "Flashcard set")
        kept = [index for index in range(len(course.flashcard_sets)) if index != set_index]
        return self._update(
            course_id,
            flashcard_sets=[course.flashcard_sets[index] for index in kept],
            flashcard_set_names=_names_for_positions(kept, course.flashcard_set_names.get),
        )

    def reorder_flashcard_sets(self, course_id: str, old_index: int, new_index: int) -> Course:
        course = self.get_course(course_id)
        order = self._moved_order(len(course.flashcard_sets), old_index, new_index, "Flashcard set")
        return self._update(
            course_id,
            flashcard_sets=[course.flashcard_sets[index] for index in order],
            flashcard_set_names=_names_for_positions(order, course.flashcard_set_name),
        )

    # --- PDFs ---

    def add_pdf(self, course_id: str, pdf_path: str) -> Course:
        course = self.get_course(course_id)
        return self._update(course_id, pdfs=[*course.pdfs, pdf_path])

    def rename_pdf(self, course_id: str, pdf_index: int, name: str) -> Course:
        course = self.get_course(course_id)
        self._check_index(pdf_index, len(course.pdfs), "PDF")
        return self._update(
            course_id, pdf_names={**course.pdf_names, pdf_index: _clean_name(name, "PDF")}
        )

    def delete_pdf(self, course_id: str, pdf_path: str) -> Course:
        course = self.get_course(course_id)
        kept = [index for index, path in enumerate(course.pdfs) if path != pdf_path]
        return self._update(
            course_id,
            pdfs=[course.pdfs[index] for index in kept],
            pdf_names=_names_for_positions(kept, course.pdf_names.get),
        )

    def reorder_pdfs(self, course_id: str, old_index: int, new_index: int) -> Course:
        """Move a PDF; only custom names travel, defaults follow the file name."""
        course = self.get_course(course_id)
        order = self._moved_order(len(course.pdfs), old_index, new_index, "PDF")
        return self._update(
            course_id,
            pdfs=[course.pdfs[index] for index in order],
            pdf_names=_names_for_positions(order, course.pdf_names.get),
        )

    def set_sorting_preference(self, course_id: str, preference: SortingPreference) -> Course:
        return self._update(course_id, quiz_sorting_preference=SortingPreference(preference))

    # --- Internals ---

    def _update(self, course_id: str, **changes: Any) -> Course:
        course = self.get_course(course_id)
        updated = replace(course, updated_at=current_timestamp_ms(), **changes)
        self._courses[course_id] = updated
        return updated

    def _next_course_id(self, now: int) -> str:
        self._course_counter += 1
        return f"course_{now}_{self._course_counter}"

    @classmethod
    def _moved_order(cls, length: int, old_index: int, new_index: int, label: str) -> list[int]:
        """Old positions listed in their new order after moving one item."""
        cls._check_index(old_index, length, label)
        cls._check_index(new_index, length, label)
        order = list(range(length))
        order.insert(new_index, order.pop(old_index))
        return order

    @staticmethod
    def _check_index(index: int, length: int, label: str) -> None:
        if not 0 <= index < length:
            raise IndexError(f"{label} index {index} out of range")


def _clean_name(name: str, label: str) -> str:
    cleaned_name = name.strip()
    if not cleaned_name:
        raise ValueError(f"{label} name must not be empty.")
    return cleaned_name


def _names_for_positions(
    old_positions: Iterable[int], name_for: Callable[[int], str | None]
) -> dict[int, str]:
    """Re-key names after items moved; ``old_positions[new] == old``."""
    names: dict[int, str] = {}
    for new_index, old_index in enumerate(old_positions):
        name = name_for(old_index)
        if name:
            names[new_index] = name
    return names
