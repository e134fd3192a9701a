"""Facade tying the quiz catalog and the attempt engine to one store."""

from __future__ import annotations

import logging
from pathlib import Path

from timed_quiz.constants.quiz_constants import SAMPLE_QUIZ_FILENAME
from timed_quiz.core.attempt_engine import AttemptEngine
from timed_quiz.core.models import Attempt, Quiz, QuizSummary, ScoreResult
from timed_quiz.core.quiz_importer import load_quiz_from_file
from timed_quiz.core.services.memory_store import InMemoryQuizStore
from timed_quiz.core.services.quiz_catalog import QuizCatalog, QuizDraft
from timed_quiz.core.services.quiz_store import QuizStore
from timed_quiz.core.services.sql_store import SqlQuizStore
from timed_quiz.utils.settings import Settings

logger = logging.getLogger(__name__)

_SAMPLE_QUIZ_PATH = Path(__file__).resolve().parent.parent / "data" / SAMPLE_QUIZ_FILENAME


def build_store(settings: Settings) -> QuizStore:
    if settings.uses_memory_store:
        logger.info("Using in-memory quiz store; data is lost on restart")
        return InMemoryQuizStore()
    return SqlQuizStore.from_url(settings.database_url)


class QuizService:
    """Entry point used by the HTTP layer: catalog lookups plus attempt commands."""

    def __init__(self, store: QuizStore) -> None:
        self._store = store
        self._catalog = QuizCatalog(store)
        self._engine = AttemptEngine(store)

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuizService":
        service = cls(build_store(settings))
        if settings.seed_sample_quiz:
            service.seed_sample_quiz()
        return service

    @property
    def catalog(self) -> QuizCatalog:
        return self._catalog

    @property
    def engine(self) -> AttemptEngine:
        return self._engine

    # --- Catalog ---

    def list_quizzes(self) -> list[QuizSummary]:
        return self._catalog.list_quizzes()

    def get_quiz(self, quiz_id: str) -> Quiz:
        return self._catalog.get_quiz(quiz_id)

    def create_quiz(self, draft: QuizDraft) -> Quiz:
        return self._catalog.create_quiz(draft)

    def seed_sample_quiz(self, source: Path = _SAMPLE_QUIZ_PATH) -> Quiz | None:
        """Load the bundled sample quiz when the catalog is still empty."""
        if not self._catalog.is_empty():
            return None
        quiz = self._catalog.create_quiz(load_quiz_from_file(source))
        logger.info("Seeded sample quiz %s from %s", quiz.id, source.name)
        return quiz

    # --- Attempts ---

    def start_attempt(self, quiz_id: str, participant_name: str) -> Attempt:
        return self._engine.start(quiz_id, participant_name)

    def record_answer(self, attempt_id: str, question_id: str, option_id: str | None) -> None:
        self._engine.record_answer(attempt_id, question_id, option_id)

    def submit_attempt(self, attempt_id: str) -> ScoreResult:
        return self._engine.submit(attempt_id)

    def get_attempt(self, attempt_id: str) -> Attempt:
        return self._engine.get_attempt(attempt_id)
