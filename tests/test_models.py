import pytest

from study_app.core.models import (
    Course,
    Flashcard,
    Question,
    QuizAttemptRecord,
    QuizSummary,
    QuizValidationError,
)


def test_question_normalizes_containers():
    question = Question(id=1, text="Q", options=["a", "b"], answer_indices=[1])
    assert question.options == ("a", "b")
    assert question.answer_indices == frozenset({1})
    assert not question.is_multi_select
    assert question.correct_options == ["b"]


def test_multi_select_flag(multi_question):
    assert multi_question.is_multi_select


@pytest.mark.parametrize(
    "options, indices",
    [
        ([], [0]),
        (["only"], [0]),
        (["a", "b"], []),
        (["a", "b"], [2]),
        (["a", "b"], [-1]),
        (["a", "b"], None),
        (["a", "b"], ["1"]),
        (["a", "b"], [1.5]),
        (["a", "b"], [True]),
    ],
)
def test_malformed_question_is_rejected(options, indices):
    with pytest.raises(QuizValidationError):
        Question(id=1, text="Q", options=options, answer_indices=indices)


def test_question_is_immutable(single_question):
    with pytest.raises(AttributeError):
        single_question.answer_indices = frozenset({0})


def test_with_options_returns_new_question(single_question):
    moved = single_question.with_options(["5", "3", "4"], [2])
    assert moved is not single_question
    assert moved.correct_options == ["4"]
    assert single_question.options == ("3", "4", "5")


def test_percentage():
    record = QuizAttemptRecord("c", 0, "Quiz 1", score=3, total_questions=4, timestamp=1)
    assert record.percentage == pytest.approx(75.0)


def test_percentage_with_no_questions_is_zero():
    record = QuizAttemptRecord("c", 0, "Quiz 1", score=0, total_questions=0, timestamp=1)
    assert record.percentage == 0.0


def test_negative_score_rejected():
    with pytest.raises(QuizValidationError):
        QuizAttemptRecord("c", 0, "Quiz 1", score=-1, total_questions=4, timestamp=1)


def test_summary_to_attempt_record():
    summary = QuizSummary(score=2, total=3)
    record = summary.to_attempt_record("c", 1, "Quiz 2", timestamp=99, duration_seconds=30)
    assert record == QuizAttemptRecord("c", 1, "Quiz 2", 2, 3, 99, 30)


def test_summary_defaults_timestamp_to_now():
    record = QuizSummary(score=1, total=1).to_attempt_record("c", 0, "Quiz 1")
    assert record.timestamp > 0


def test_course_counts(quiz_questions):
    course = Course(id="c", name="Math", quizzes=[quiz_questions, quiz_questions[:1]], pdfs=["a.pdf"])
    assert course.quiz_count == 2
    assert course.total_question_count == 4
    assert course.pdf_count == 1


def test_course_default_names(quiz_questions, flashcards):
    course = Course(
        id="c",
        name="Math",
        quizzes=[quiz_questions, quiz_questions],
        flashcard_sets=[flashcards],
        pdfs=["notes/week1.pdf"],
        quiz_names={1: "Midterm"},
    )
    assert course.quiz_name(0) == "Quiz 1"
    assert course.quiz_name(1) == "Midterm"
    assert course.flashcard_set_name(0) == "Flashcard Set 1"
    assert course.pdf_name(0) == "week1.pdf"
    assert course.flashcard_set_count == 1


@pytest.mark.parametrize("front, back", [("", "b"), ("f", "  "), (None, "b")])
def test_blank_flashcard_rejected(front, back):
    with pytest.raises(QuizValidationError):
        Flashcard(id=1, front=front, back=back)
