"""Quiz-related constants shared across the core and the console driver."""

DEFAULT_RECENT_ACTIVITY_LIMIT: int = 5
DEFAULT_AUTO_REVEAL_SINGLE_SELECT: bool = False
DEFAULT_SHUFFLE_OPTIONS_IN_SEQUENCE: bool = False

QUIZ_NAME_TEMPLATE: str = "Quiz {number}"
FLASHCARD_SET_NAME_TEMPLATE: str = "Flashcard Set {number}"
RESULTS_FILE_TEMPLATE: str = "quiz_results_{course_id}.json"
DEFAULT_RESULTS_DIRECTORY: str = ".studyquiz"
DEFAULT_COURSE_ID: str = "default"
