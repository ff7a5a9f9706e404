import pytest

from study_app.core.models import Flashcard, Question, QuizAttemptRecord


def make_attempt(quiz_index, score, total=10, timestamp=0, course_id="course-1", quiz_name=None):
    return QuizAttemptRecord(
        course_id=course_id,
        quiz_index=quiz_index,
        quiz_name=quiz_name or f"Quiz {quiz_index + 1}",
        score=score,
        total_questions=total,
        timestamp=timestamp,
    )


@pytest.fixture
def single_question():
    return Question(id=1, text="What is 2 + 2?", options=("3", "4", "5"), answer_indices=frozenset({1}))


@pytest.fixture
def multi_question():
    return Question(
        id=2,
        text="Which numbers are even?",
        options=("2", "4", "5", "9"),
        answer_indices=frozenset({0, 1}),
        explanation="2 and 4 are divisible by two.",
    )


@pytest.fixture
def quiz_questions(single_question, multi_question):
    third = Question(id=3, text="Capital of France?", options=("Paris", "Rome"), answer_indices=frozenset({0}))
    return [single_question, multi_question, third]


@pytest.fixture
def flashcards():
    return [
        Flashcard(id=1, front="Mitochondria", back="Powerhouse of the cell"),
        Flashcard(id=2, front="H2O", back="Water", explanation="Two hydrogen atoms, one oxygen."),
        Flashcard(id=3, front="Pi", back="3.14159"),
    ]
