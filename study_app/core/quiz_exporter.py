"""Utilities for exporting quizzes to the JSON format used for imports."""

from __future__ import annotations

import json
from pathlib import Path

from study_app.core.models import Question
from study_app.core.schemas import serialize_questions


def save_quiz_to_file(file_path: Path, questions: list[Question]) -> None:
    """Persist the provided questions to disk in the import format."""

    if not questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    document = json.dumps(serialize_questions(questions), indent=2, ensure_ascii=False)
    file_path.write_text(document + "\n", encoding="utf-8")
