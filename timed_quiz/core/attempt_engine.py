"""Attempt lifecycle: start, record answers, submit and score."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from threading import Lock

from timed_quiz.core.errors import InvalidInputError, InvalidStateError
from timed_quiz.core.models import Attempt, ScoreResult
from timed_quiz.core.scoring import score_answers
from timed_quiz.core.services.quiz_store import QuizStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _AttemptLocks:
    """Hands out one lock per attempt id and forgets it once nobody holds it."""

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[str, tuple[Lock, int]] = {}

    @contextmanager
    def hold(self, attempt_id: str) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(attempt_id, (None, 0))
            if lock is None:
                lock = Lock()
            self._locks[attempt_id] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                _, users = self._locks[attempt_id]
                if users <= 1:
                    del self._locks[attempt_id]
                else:
                    self._locks[attempt_id] = (lock, users - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class AttemptEngine:
    """State machine for quiz attempts on top of a ``QuizStore``.

    Attempts move from ``in_progress`` to ``submitted`` exactly once, and only
    through :meth:`submit`. Re-submitting returns the stored result unchanged.
    Answers and submission for the same attempt are serialized in-process so
    no answer can slip in between scoring and finalization; different
    attempts never wait on each other.
    """

    def __init__(self, store: QuizStore, clock: Callable[[], datetime] = utc_now) -> None:
        self._store = store
        self._clock = clock
        self._locks = _AttemptLocks()

    @property
    def store(self) -> QuizStore:
        return self._store

    def start(self, quiz_id: str, participant_name: str) -> Attempt:
        quiz_id = (quiz_id or "").strip()
        name = (participant_name or "").strip()
        if not quiz_id:
            raise InvalidInputError("quiz_id is required")
        if not name:
            raise InvalidInputError("Participant name must not be empty")

        # Raises NotFoundError for unknown quizzes before anything is written.
        quiz = self._store.get_quiz_with_questions(quiz_id)
        started_at = self._clock()
        attempt_id = self._store.create_attempt(quiz.id, name, started_at)
        logger.info(
            "Attempt %s started on quiz %s (%d questions) by %r",
            attempt_id,
            quiz.id,
            len(quiz.questions),
            name,
        )
        return Attempt(
            id=attempt_id,
            quiz_id=quiz.id,
            participant_name=name,
            started_at=started_at,
        )

    def get_attempt(self, attempt_id: str) -> Attempt:
        return self._store.get_attempt(attempt_id)

    def record_answer(self, attempt_id: str, question_id: str, option_id: str | None) -> None:
        """Upsert the chosen option for one question; ``None`` clears it."""
        if not question_id:
            raise InvalidInputError("question_id is required")
        chosen = option_id or None

        with self._locks.hold(attempt_id):
            attempt = self._store.get_attempt(attempt_id)
            if attempt.is_submitted:
                raise InvalidStateError(f"Attempt {attempt_id} has already been submitted")
            quiz = self._store.get_quiz_with_questions(attempt.quiz_id)
            if not quiz.has_question(question_id):
                raise InvalidInputError(
                    f"Question {question_id} does not belong to quiz {attempt.quiz_id}"
                )
            self._store.upsert_answer(attempt_id, question_id, chosen)
        logger.debug("Attempt %s answered %s with %s", attempt_id, question_id, chosen)

    def submit(self, attempt_id: str) -> ScoreResult:
        with self._locks.hold(attempt_id):
            attempt = self._store.get_attempt(attempt_id)
            if attempt.result is not None:
                logger.info("Attempt %s already submitted; returning stored result", attempt_id)
                return attempt.result

            quiz = self._store.get_quiz_with_questions(attempt.quiz_id)
            correct_by_question = self._store.get_correct_option_map(attempt.quiz_id)
            answers = self._store.get_answers(attempt_id)
            result = score_answers(correct_by_question, answers, quiz.negative_marking)

            if not self._store.finalize_attempt(attempt_id, self._clock(), result):
                # Another process finalized first; its result is the one that counts.
                stored = self._store.get_attempt(attempt_id).result
                if stored is not None:
                    return stored
                raise InvalidStateError(f"Attempt {attempt_id} was finalized without a result")

        logger.info(
            "Attempt %s submitted: %d/%d correct, %d wrong, score %.2f",
            attempt_id,
            result.correct,
            result.total,
            result.wrong,
            result.score,
        )
        return result
