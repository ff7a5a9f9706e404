"""Utilities for importing flashcard sets from JSON or plain text.

JSON format: a list of ``{"id": 1, "front": "...", "back": "...",
"explanation": "..."}`` objects.

Text that is not JSON is read as blocks separated by blank lines, one card
per block. A block may use ``Front:``/``Back:`` (or ``Q:``/``A:``) prefixes
plus an optional ``Explanation:`` line, a single ``term<TAB>definition``
line, or bare lines taken as front, back and explanation in that order.
"""

from __future__ import annotations

import json
from pathlib import Path

from study_app.core.models import Flashcard, QuizValidationError
from study_app.core.quiz_importer import QuizImportError
from study_app.core.schemas import parse_flashcards

_FRONT_PREFIXES = ("Front:", "Q:")
_BACK_PREFIXES = ("Back:", "A:")
_EXPLANATION_PREFIX = "Explanation:"


def load_flashcards_from_file(file_path: Path) -> list[Flashcard]:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuizImportError(f"Could not read flashcard file {file_path}.") from exc
    return parse_flashcard_text(text)


def parse_flashcard_text(text: str) -> list[Flashcard]:
    stripped = text.strip()
    if not stripped:
        raise QuizImportError("No flashcard content provided.")
    try:
        decoded = json.loads(stripped)
    except json.JSONDecodeError:
        cards = _parse_plain_text(stripped)
    else:
        try:
            cards = parse_flashcards(decoded)
        except QuizValidationError as exc:
            raise QuizImportError(str(exc)) from exc
    if not cards:
        raise QuizImportError(
            "Could not parse flashcards; use JSON or Front:/Back: blocks separated by blank lines."
        )
    return cards


def _split_blocks(text: str) -> list[list[str]]:
    blocks: list[list[str]] = []
    current: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if line:
            current.append(line)
        elif current:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)
    return blocks


def _parse_plain_text(text: str) -> list[Flashcard]:
    cards: list[Flashcard] = []
    for lines in _split_blocks(text):
        front: str | None = None
        back: str | None = None
        explanation: str | None = None
        for line in lines:
            if line.startswith(_FRONT_PREFIXES):
                front = line.partition(":")[2].strip()
            elif line.startswith(_BACK_PREFIXES):
                back = line.partition(":")[2].strip()
            elif line.startswith(_EXPLANATION_PREFIX):
                explanation = line.partition(":")[2].strip()
            elif front is None and back is None and "\t" in line:
                term, _, definition = line.partition("\t")
                front, back = term.strip(), definition.strip()
            elif front is None:
                front = line
            elif back is None:
                back = line
            elif explanation is None:
                explanation = line
        # Blocks without both sides are skipped.
        if front and back:
            cards.append(
                Flashcard(id=len(cards) + 1, front=front, back=back, explanation=explanation or None)
            )
    return cards
