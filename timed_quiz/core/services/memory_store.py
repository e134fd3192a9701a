"""In-process quiz store guarded by a single lock."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import replace
from datetime import datetime
from threading import Lock
from uuid import uuid4

from timed_quiz.core.errors import NotFoundError
from timed_quiz.core.models import Attempt, Quiz, QuizSummary, ScoreResult
from timed_quiz.core.services.quiz_store import QuizStore


class InMemoryQuizStore(QuizStore):
    """Keeps quizzes, attempts and answers in dictionaries for a single process."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, Quiz] = {}
        self._attempts: dict[str, Attempt] = {}
        self._answers: dict[tuple[str, str], str | None] = {}

    # --- Quiz catalog ---

    def add_quiz(self, quiz: Quiz) -> None:
        with self._lock:
            self._quizzes[quiz.id] = deepcopy(quiz)

    def list_quizzes(self) -> list[QuizSummary]:
        with self._lock:
            return [quiz.summary() for quiz in self._quizzes.values()]

    def count_quizzes(self) -> int:
        with self._lock:
            return len(self._quizzes)

    def get_quiz_with_questions(self, quiz_id: str) -> Quiz:
        with self._lock:
            return deepcopy(self._require_quiz(quiz_id))

    def get_correct_option_map(self, quiz_id: str) -> dict[str, str]:
        with self._lock:
            return self._require_quiz(quiz_id).correct_option_map()

    # --- Attempts ---

    def create_attempt(self, quiz_id: str, name: str, started_at: datetime) -> str:
        with self._lock:
            self._require_quiz(quiz_id)
            attempt_id = str(uuid4())
            self._attempts[attempt_id] = Attempt(
                id=attempt_id,
                quiz_id=quiz_id,
                participant_name=name,
                started_at=started_at,
            )
            return attempt_id

    def get_attempt(self, attempt_id: str) -> Attempt:
        with self._lock:
            return replace(self._require_attempt(attempt_id))

    def upsert_answer(self, attempt_id: str, question_id: str, option_id: str | None) -> None:
        with self._lock:
            self._require_attempt(attempt_id)
            self._answers[(attempt_id, question_id)] = option_id

    def get_answers(self, attempt_id: str) -> dict[str, str | None]:
        with self._lock:
            self._require_attempt(attempt_id)
            return {
                question_id: option_id
                for (owner_id, question_id), option_id in self._answers.items()
                if owner_id == attempt_id
            }

    def finalize_attempt(
        self,
        attempt_id: str,
        submitted_at: datetime,
        result: ScoreResult,
    ) -> bool:
        with self._lock:
            attempt = self._require_attempt(attempt_id)
            if attempt.is_submitted:
                return False
            attempt.submitted_at = submitted_at
            attempt.result = result
            return True

    def _require_quiz(self, quiz_id: str) -> Quiz:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz {quiz_id} not found")
        return quiz

    def _require_attempt(self, attempt_id: str) -> Attempt:
        attempt = self._attempts.get(attempt_id)
        if attempt is None:
            raise NotFoundError(f"Attempt {attempt_id} not found")
        return attempt
