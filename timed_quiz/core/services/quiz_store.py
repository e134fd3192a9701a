"""Persistence contract required by the quiz catalog and the attempt engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from timed_quiz.core.models import Attempt, Quiz, QuizSummary, ScoreResult


class QuizStore(ABC):
    """Durable mapping of quizzes, attempts and per-question answers.

    Every method is atomic on its own. Answers are keyed by the
    ``(attempt_id, question_id)`` pair, so concurrent writes for different
    questions never interfere and concurrent writes for the same pair resolve
    last-write-wins. Lookups of unknown ids raise ``NotFoundError``.
    """

    # --- Quiz catalog ---

    @abstractmethod
    def add_quiz(self, quiz: Quiz) -> None:
        """Persist a fully built quiz."""

    @abstractmethod
    def list_quizzes(self) -> list[QuizSummary]:
        ...

    @abstractmethod
    def count_quizzes(self) -> int:
        ...

    @abstractmethod
    def get_quiz_with_questions(self, quiz_id: str) -> Quiz:
        ...

    @abstractmethod
    def get_correct_option_map(self, quiz_id: str) -> dict[str, str]:
        """Return question id -> correct option id, omitting unscorable questions."""

    # --- Attempts ---

    @abstractmethod
    def create_attempt(self, quiz_id: str, name: str, started_at: datetime) -> str:
        """Create an in-progress attempt and return its id."""

    @abstractmethod
    def get_attempt(self, attempt_id: str) -> Attempt:
        ...

    @abstractmethod
    def upsert_answer(self, attempt_id: str, question_id: str, option_id: str | None) -> None:
        """Insert or replace the answer for one question of an attempt."""

    @abstractmethod
    def get_answers(self, attempt_id: str) -> dict[str, str | None]:
        ...

    @abstractmethod
    def finalize_attempt(
        self,
        attempt_id: str,
        submitted_at: datetime,
        result: ScoreResult,
    ) -> bool:
        """Stamp the submission and store the result.

        Returns False and writes nothing when the attempt was already finalized.
        """
