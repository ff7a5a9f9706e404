"""JSON interchange models for questions, attempts and courses.

The payload classes mirror the stored JSON shapes (camelCase keys) and
convert to and from the frozen domain models in ``study_app.core.models``.
Questions written by older versions carry a single ``answerIndex``; it is
accepted on input and always written back as ``answerIndices``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from study_app.core.models import (
    Course,
    Flashcard,
    Question,
    QuizAttemptRecord,
    QuizValidationError,
    SortingPreference,
    current_timestamp_ms,
)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class QuestionPayload(_Payload):
    id: int
    text: str
    options: list[str] = Field(min_length=2)
    answer_indices: list[int] = Field(alias="answerIndices", min_length=1)
    explanation: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_answer(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "answerIndices" in data or "answer_indices" in data:
            return data
        if "answerIndex" not in data:
            raise ValueError("Question must contain either answerIndex or answerIndices.")
        normalized = {key: value for key, value in data.items() if key != "answerIndex"}
        normalized["answerIndices"] = [data["answerIndex"]]
        return normalized

    @model_validator(mode="after")
    def _check_indices(self) -> QuestionPayload:
        for index in self.answer_indices:
            if not 0 <= index < len(self.options):
                raise ValueError(
                    f"Answer index {index} is out of bounds for options length {len(self.options)}"
                )
        return self

    def to_domain(self) -> Question:
        return Question(
            id=self.id,
            text=self.text,
            options=tuple(self.options),
            answer_indices=frozenset(self.answer_indices),
            explanation=self.explanation,
        )

    @classmethod
    def from_domain(cls, question: Question) -> QuestionPayload:
        return cls(
            id=question.id,
            text=question.text,
            options=list(question.options),
            answer_indices=sorted(question.answer_indices),
            explanation=question.explanation,
        )


class QuizAttemptPayload(_Payload):
    course_id: str = Field(alias="courseId")
    quiz_index: int = Field(alias="quizIndex")
    quiz_name: str = Field(alias="quizName")
    score: int = Field(ge=0)
    total_questions: int = Field(alias="totalQuestions", ge=0)
    timestamp: int
    duration: int | None = None

    def to_domain(self) -> QuizAttemptRecord:
        return QuizAttemptRecord(
            course_id=self.course_id,
            quiz_index=self.quiz_index,
            quiz_name=self.quiz_name,
            score=self.score,
            total_questions=self.total_questions,
            timestamp=self.timestamp,
            duration_seconds=self.duration,
        )

    @classmethod
    def from_domain(cls, record: QuizAttemptRecord) -> QuizAttemptPayload:
        return cls(
            course_id=record.course_id,
            quiz_index=record.quiz_index,
            quiz_name=record.quiz_name,
            score=record.score,
            total_questions=record.total_questions,
            timestamp=record.timestamp,
            duration=record.duration_seconds,
        )


class FlashcardPayload(_Payload):
    id: int
    front: str = Field(min_length=1)
    back: str = Field(min_length=1)
    explanation: str | None = None

    def to_domain(self) -> Flashcard:
        return Flashcard(id=self.id, front=self.front, back=self.back, explanation=self.explanation)

    @classmethod
    def from_domain(cls, card: Flashcard) -> FlashcardPayload:
        return cls(id=card.id, front=card.front, back=card.back, explanation=card.explanation)


class CoursePayload(_Payload):
    id: str
    name: str
    quizzes: list[list[QuestionPayload]] = Field(default_factory=list)
    flashcards: list[list[FlashcardPayload]] = Field(default_factory=list)
    pdfs: list[str] = Field(default_factory=list)
    # JSON object keys are strings; pydantic coerces them back to positions.
    quiz_names: dict[int, str] = Field(alias="quizNames", default_factory=dict)
    flashcard_set_names: dict[int, str] = Field(alias="flashcardSetNames", default_factory=dict)
    pdf_names: dict[int, str] = Field(alias="pdfNames", default_factory=dict)
    quiz_sorting_preference: SortingPreference = Field(
        alias="quizSortingPreference", default=SortingPreference.SEQUENTIAL
    )
    created_at: int = Field(alias="createdAt", default_factory=current_timestamp_ms)
    updated_at: int = Field(alias="updatedAt", default_factory=current_timestamp_ms)

    def to_domain(self) -> Course:
        return Course(
            id=self.id,
            name=self.name,
            quizzes=[[payload.to_domain() for payload in quiz] for quiz in self.quizzes],
            flashcard_sets=[[card.to_domain() for card in cards] for cards in self.flashcards],
            pdfs=list(self.pdfs),
            quiz_names=dict(self.quiz_names),
            flashcard_set_names=dict(self.flashcard_set_names),
            pdf_names=dict(self.pdf_names),
            quiz_sorting_preference=self.quiz_sorting_preference,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, course: Course) -> CoursePayload:
        return cls(
            id=course.id,
            name=course.name,
            quizzes=[[QuestionPayload.from_domain(q) for q in quiz] for quiz in course.quizzes],
            flashcards=[
                [FlashcardPayload.from_domain(card) for card in cards] for cards in course.flashcard_sets
            ],
            pdfs=list(course.pdfs),
            quiz_names=dict(course.quiz_names),
            flashcard_set_names=dict(course.flashcard_set_names),
            pdf_names=dict(course.pdf_names),
            quiz_sorting_preference=course.quiz_sorting_preference,
            created_at=course.created_at,
            updated_at=course.updated_at,
        )


def parse_question(data: dict[str, Any]) -> Question:
    """Validate a decoded JSON object and build a :class:`Question`."""
    try:
        return QuestionPayload.model_validate(data).to_domain()
    except ValidationError as exc:
        raise QuizValidationError(f"Invalid question: {exc}") from exc


def serialize_question(question: Question) -> dict[str, Any]:
    return QuestionPayload.from_domain(question).model_dump(by_alias=True, exclude_none=True)


def parse_questions(data: Any) -> list[Question]:
    if not isinstance(data, list):
        raise QuizValidationError("A quiz must be a JSON list of questions.")
    return [parse_question(item) for item in data]


def serialize_questions(questions: list[Question]) -> list[dict[str, Any]]:
    return [serialize_question(question) for question in questions]


def parse_attempt(data: dict[str, Any]) -> QuizAttemptRecord:
    try:
        return QuizAttemptPayload.model_validate(data).to_domain()
    except ValidationError as exc:
        raise QuizValidationError(f"Invalid quiz attempt: {exc}") from exc


def serialize_attempt(record: QuizAttemptRecord) -> dict[str, Any]:
    return QuizAttemptPayload.from_domain(record).model_dump(by_alias=True, exclude_none=True)


def parse_course(data: dict[str, Any]) -> Course:
    try:
        return CoursePayload.model_validate(data).to_domain()
    except ValidationError as exc:
        raise QuizValidationError(f"Invalid course: {exc}") from exc


def serialize_course(course: Course) -> dict[str, Any]:
    return CoursePayload.from_domain(course).model_dump(
        by_alias=True, exclude_none=True, mode="json"
    )


def parse_flashcards(data: Any) -> list[Flashcard]:
    if not isinstance(data, list):
        raise QuizValidationError("A flashcard set must be a JSON list of cards.")
    try:
        return [FlashcardPayload.model_validate(item).to_domain() for item in data]
    except ValidationError as exc:
        raise QuizValidationError(f"Invalid flashcard: {exc}") from exc


def serialize_flashcards(cards: list[Flashcard]) -> list[dict[str, Any]]:
    return [
        FlashcardPayload.from_domain(card).model_dump(by_alias=True, exclude_none=True)
        for card in cards
    ]
