"""Quiz-related constants shared across the core and server layers."""

DEFAULT_DURATION_MINUTES: int = 15
DEFAULT_NEGATIVE_MARKING: float = 0.0
CORRECT_ANSWER_WEIGHT: int = 4
COUNTDOWN_TICK_SECONDS: float = 1.0
SAMPLE_QUIZ_FILENAME: str = "sample_quiz.txt"
