import pytest

from study_app.core.models import QuizValidationError, SortingPreference
from study_app.core.services.course_catalog import CourseCatalog


@pytest.fixture
def catalog():
    return CourseCatalog()


def test_create_and_get_course(catalog):
    course = catalog.create_course("  Math 101 ")
    assert course.name == "Math 101"
    assert catalog.get_course(course.id) is course
    assert course.quiz_sorting_preference is SortingPreference.SEQUENTIAL


def test_course_ids_are_unique(catalog):
    first = catalog.create_course("A")
    second = catalog.create_course("B")
    assert first.id != second.id
    assert len(catalog.list_courses()) == 2


def test_blank_course_name_rejected(catalog):
    with pytest.raises(ValueError):
        catalog.create_course("   ")


def test_unknown_course(catalog):
    with pytest.raises(KeyError):
        catalog.get_course("missing")


def test_quiz_management(catalog, quiz_questions, single_question):
    course = catalog.create_course("Math")
    catalog.add_quiz(course.id, quiz_questions)
    catalog.add_quiz(course.id, [single_question])
    assert catalog.get_quiz(course.id, 1) == [single_question]
    assert catalog.quiz_names(course.id) == {0: "Quiz 1", 1: "Quiz 2"}

    updated = catalog.reorder_quizzes(course.id, 1, 0)
    assert updated.quizzes[0] == [single_question]

    updated = catalog.delete_quiz(course.id, 0)
    assert updated.quizzes == [quiz_questions]
    with pytest.raises(IndexError):
        catalog.get_quiz(course.id, 1)


def test_rename_quiz(catalog, quiz_questions):
    course = catalog.create_course("Math")
    catalog.add_quiz(course.id, quiz_questions)
    catalog.add_quiz(course.id, quiz_questions, name="  Final exam ")
    updated = catalog.rename_quiz(course.id, 0, "Warm-up")
    assert updated.quiz_name(0) == "Warm-up"
    assert catalog.quiz_names(course.id) == {0: "Warm-up", 1: "Final exam"}
    with pytest.raises(ValueError):
        catalog.rename_quiz(course.id, 0, "   ")
    with pytest.raises(IndexError):
        catalog.rename_quiz(course.id, 2, "Missing")


def test_names_follow_quizzes_when_reordered(catalog, quiz_questions, single_question):
    course = catalog.create_course("Math")
    catalog.add_quiz(course.id, quiz_questions, name="Algebra")
    catalog.add_quiz(course.id, [single_question])
    catalog.add_quiz(course.id, quiz_questions, name="Geometry")

    updated = catalog.reorder_quizzes(course.id, 0, 2)
    assert updated.quizzes[0] == [single_question]
    assert catalog.quiz_names(course.id) == {0: "Quiz 2", 1: "Geometry", 2: "Algebra"}


def test_delete_quiz_shifts_custom_names(catalog, quiz_questions):
    course = catalog.create_course("Math")
    for name in ("Algebra", None, "Geometry"):
        catalog.add_quiz(course.id, quiz_questions, name=name)

    updated = catalog.delete_quiz(course.id, 0)
    assert updated.quiz_names == {1: "Geometry"}
    assert catalog.quiz_names(course.id) == {0: "Quiz 1", 1: "Geometry"}


def test_empty_quiz_rejected(catalog):
    course = catalog.create_course("Math")
    with pytest.raises(QuizValidationError):
        catalog.add_quiz(course.id, [])


def test_pdfs_and_preferences(catalog):
    course = catalog.create_course("History")
    catalog.add_pdf(course.id, "notes.pdf")
    catalog.add_pdf(course.id, "slides.pdf")
    updated = catalog.delete_pdf(course.id, "notes.pdf")
    assert updated.pdfs == ["slides.pdf"]

    updated = catalog.set_sorting_preference(course.id, SortingPreference.RANDOM)
    assert updated.quiz_sorting_preference is SortingPreference.RANDOM
    assert updated.updated_at >= course.updated_at


def test_rename_and_delete(catalog):
    course = catalog.create_course("Old")
    assert catalog.rename_course(course.id, "New").name == "New"
    catalog.delete_course(course.id)
    assert catalog.list_courses() == []
    with pytest.raises(KeyError):
        catalog.delete_course(course.id)


def test_dump_and_load(catalog, quiz_questions):
    course = catalog.create_course("Math")
    catalog.add_quiz(course.id, quiz_questions)
    catalog.set_sorting_preference(course.id, SortingPreference.RANDOM)

    restored = CourseCatalog()
    restored.load_courses(catalog.dump_courses())
    assert restored.get_course(course.id) == catalog.get_course(course.id)


def test_pdf_names_and_reorder(catalog):
    course = catalog.create_course("History")
    for path in ("docs/notes.pdf", "docs/slides.pdf", "docs/map.pdf"):
        catalog.add_pdf(course.id, path)
    catalog.rename_pdf(course.id, 0, "Lecture notes")

    updated = catalog.reorder_pdfs(course.id, 0, 2)
    assert updated.pdfs == ["docs/slides.pdf", "docs/map.pdf", "docs/notes.pdf"]
    assert updated.pdf_names == {2: "Lecture notes"}
    assert [updated.pdf_name(index) for index in range(3)] == ["slides.pdf", "map.pdf", "Lecture notes"]

    updated = catalog.delete_pdf(course.id, "docs/slides.pdf")
    assert updated.pdf_names == {1: "Lecture notes"}
    with pytest.raises(IndexError):
        catalog.reorder_pdfs(course.id, 0, 5)


def test_flashcard_set_management(catalog, flashcards):
    course = catalog.create_course("Biology")
    catalog.add_flashcard_set(course.id, flashcards)
    catalog.add_flashcard_set(course.id, flashcards[:1], name="Cells")
    assert catalog.get_flashcard_set(course.id, 1) == flashcards[:1]

    updated = catalog.reorder_flashcard_sets(course.id, 1, 0)
    assert updated.flashcard_sets[0] == flashcards[:1]
    assert [updated.flashcard_set_name(index) for index in range(2)] == ["Cells", "Flashcard Set 1"]

    updated = catalog.rename_flashcard_set(course.id, 1, "Molecules")
    assert updated.flashcard_set_name(1) == "Molecules"

    updated = catalog.delete_flashcard_set(course.id, 0)
    assert updated.flashcard_sets == [flashcards]
    assert updated.flashcard_set_names == {0: "Molecules"}
    with pytest.raises(IndexError):
        catalog.get_flashcard_set(course.id, 1)


def test_empty_flashcard_set_rejected(catalog):
    course = catalog.create_course("Biology")
    with pytest.raises(QuizValidationError):
        catalog.add_flashcard_set(course.id, [])


def test_dump_and_load_keeps_flashcards_and_names(catalog, quiz_questions, flashcards):
    course = catalog.create_course("Biology")
    catalog.add_quiz(course.id, quiz_questions, name="Cells quiz")
    catalog.add_flashcard_set(course.id, flashcards, name="Vocabulary")
    catalog.add_pdf(course.id, "cells.pdf")
    catalog.rename_pdf(course.id, 0, "Cell notes")

    restored = CourseCatalog()
    restored.load_courses(catalog.dump_courses())
    loaded = restored.get_course(course.id)
    assert loaded == catalog.get_course(course.id)
    assert loaded.quiz_name(0) == "Cells quiz"
    assert loaded.flashcard_set_name(0) == "Vocabulary"
    assert loaded.pdf_name(0) == "Cell notes"
