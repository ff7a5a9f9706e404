"""Utilities for importing quizzes from JSON files.

File format: a JSON list of question objects.

    [
      {
        "id": 1,
        "text": "What is 2 + 2?",
        "options": ["3", "4", "5", "6"],
        "answerIndices": [1],
        "explanation": "Basic arithmetic."
      }
    ]

Older files may use ``"answerIndex": 1`` instead of ``answerIndices``.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path

from study_app.core.models import Question, QuizValidationError
from study_app.core.schemas import parse_questions


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    source_path: Path
    questions: list[Question]


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuizImportError(f"Could not read quiz file {file_path}.") from exc
    questions = parse_quiz_text(text)
    return ImportedQuiz(source_path=file_path, questions=questions)


def parse_quiz_text(text: str) -> list[Question]:
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuizImportError(f"Quiz file is not valid JSON: {exc.msg}.") from exc
    try:
        questions = parse_questions(decoded)
    except QuizValidationError as exc:
        raise QuizImportError(str(exc)) from exc
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return questions
