"""Application entry point for the StudyQuiz console runner."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Callable
from pathlib import Path
import random
import sys
import time

from study_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from study_app.constants.quiz_constants import DEFAULT_COURSE_ID, DEFAULT_RESULTS_DIRECTORY
from study_app.core.models import QuizSummary, SortingPreference
from study_app.core.quiz_importer import QuizImportError, load_quiz_from_file
from study_app.core.schemas import serialize_questions
from study_app.core.services.attempt_store import JsonFileAttemptStore, PersistenceError
from study_app.core.services.course_catalog import CourseCatalog
from study_app.core.services.quiz_session import QuizSession, SessionPhase, SessionStateError
from study_app.core.services.result_aggregator import ResultAggregator
from study_app.core.study_manager import StudyManager
from study_app.utils.logging_config import configure_logging

_BACK_COMMAND = "b"


def _option_letter(index: int) -> str:
    return chr(ord("A") + index)


def _parse_choices(raw: str, option_count: int) -> list[int] | None:
    indices: list[int] = []
    for token in raw.replace(",", " ").split():
        if len(token) != 1 or not token.isalpha():
            return None
        index = ord(token.upper()) - ord("A")
        if not 0 <= index < option_count:
            return None
        if index not in indices:
            indices.append(index)
    return indices or None


def _show_question(session: QuizSession, output_fn: Callable[[str], None]) -> None:
    snapshot = session.snapshot()
    question = snapshot.question
    output_fn("")
    output_fn(f"Question {snapshot.current_index + 1}/{snapshot.total}: {question.text}")
    if question.is_multi_select:
        output_fn("(select all that apply)")
    for index, option in enumerate(question.options):
        marker = "*" if index in snapshot.selection else " "
        output_fn(f" {marker} {_option_letter(index)}. {option}")


def _show_result(session: QuizSession, output_fn: Callable[[str], None]) -> None:
    snapshot = session.snapshot()
    question = snapshot.question
    if snapshot.is_correct:
        output_fn("Correct!")
    else:
        letters = ", ".join(_option_letter(index) for index in sorted(question.answer_indices))
        output_fn(f"Incorrect. Correct answer: {letters}")
    if question.explanation:
        output_fn(question.explanation)


def run_console_quiz(
    session: QuizSession,
    input_fn: Callable[[str], str] | None = None,
    output_fn: Callable[[str], None] | None = None,
) -> QuizSummary:
    """Drive a session from line-based input until the quiz is completed."""
    input_fn = input_fn or input
    output_fn = output_fn or print
    while True:
        _show_question(session, output_fn)
        if session.phase is SessionPhase.AWAITING_SELECTION:
            raw = input_fn("Your answer (e.g. A or A,C; 'b' to go back): ").strip()
            if raw.lower() == _BACK_COMMAND:
                try:
                    session.retreat()
                except SessionStateError as exc:
                    output_fn(str(exc))
                continue
            question = session.current_question
            choices = _parse_choices(raw, len(question.options))
            if choices is None or (not question.is_multi_select and len(choices) > 1):
                output_fn("Unrecognized choice, please try again.")
                continue
            for index in choices:
                session.toggle_option(index)
            session.reveal()
            continue

        _show_result(session, output_fn)
        raw = input_fn("Press Enter to continue ('b' to go back): ").strip()
        if raw.lower() == _BACK_COMMAND:
            try:
                session.retreat()
            except SessionStateError as exc:
                output_fn(str(exc))
            continue
        outcome = session.advance()
        if isinstance(outcome, QuizSummary):
            return outcome


def print_analytics(analytics: ResultAggregator, output_fn: Callable[[str], None] = print) -> None:
    average = analytics.average_score()
    if average is None:
        output_fn("No quiz attempts recorded yet.")
        return
    output_fn(f"Attempts: {analytics.total_attempts()}  Average: {average:.1f}%")
    best = analytics.best_performing_quiz()
    if best is not None:
        output_fn(f"Best quiz: {best.name} ({best.average:.1f}%)")
    for attempt in analytics.recent_activity():
        output_fn(f"  {attempt.quiz_name}: {attempt.score}/{attempt.total_questions}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description=APP_ABOUT_TEXT)
    parser.add_argument("quiz_file", type=Path, help="JSON quiz file")
    parser.add_argument("--random", action="store_true", help="shuffle questions and options")
    parser.add_argument("--seed", type=int, default=None, help="seed for shuffling")
    parser.add_argument("--course-id", default=DEFAULT_COURSE_ID)
    parser.add_argument("--results-dir", type=Path, default=Path(DEFAULT_RESULTS_DIRECTORY))
    return parser


def main(argv: list[str] | None = None) -> int:
    """Initialize logging, run one quiz, then record and summarize the attempt."""
    logger = configure_logging()
    args = _build_parser().parse_args(argv)
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    try:
        imported = load_quiz_from_file(args.quiz_file)
    except QuizImportError as exc:
        logger.error("Could not import %s: %s", args.quiz_file, exc)
        return 1

    preference = SortingPreference.RANDOM if args.random else SortingPreference.SEQUENTIAL
    catalog = CourseCatalog()
    catalog.load_courses(
        [
            {
                "id": args.course_id,
                "name": args.quiz_file.stem,
                "quizzes": [serialize_questions(imported.questions)],
                "quizSortingPreference": preference.value,
            }
        ]
    )
    manager = StudyManager(catalog, JsonFileAttemptStore(args.results_dir), rng=random.Random(args.seed))

    session = manager.start_quiz(args.course_id, 0)
    started = time.monotonic()
    try:
        summary = run_console_quiz(session)
    except EOFError:
        logger.error("Input closed before the quiz was finished; nothing was recorded")
        return 1
    duration = int(time.monotonic() - started)
    print(f"\nFinal score: {summary.score}/{summary.total}")

    try:
        asyncio.run(manager.finish_quiz(args.course_id, 0, summary, duration_seconds=duration))
    except PersistenceError:
        # The learner's result is already on screen; a lost record is not fatal.
        logger.warning("Could not record the attempt", exc_info=True)

    try:
        analytics = asyncio.run(manager.load_analytics(args.course_id))
    except PersistenceError:
        logger.warning("Could not load attempt history", exc_info=True)
        return 0
    print_analytics(analytics)
    return 0


if __name__ == "__main__":
    sys.exit(main())
