"""Static metadata describing StudyQuiz."""

APP_NAME = "StudyQuiz"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "StudyQuiz runs self-paced quizzes with single- and multi-select questions, "
    "optional shuffling, and per-course progress analytics."
)
