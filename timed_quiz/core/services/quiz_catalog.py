"""Service for authoring, listing and publishing quizzes."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from uuid import uuid4

from timed_quiz.constants.quiz_constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_NEGATIVE_MARKING,
)
from timed_quiz.core.errors import InvalidInputError
from timed_quiz.core.models import Quiz, QuizOption, QuizQuestion, QuizSummary
from timed_quiz.core.services.quiz_store import QuizStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OptionDraft:
    label: str
    is_correct: bool = False


@dataclass(slots=True)
class QuestionDraft:
    statement: str
    options: list[OptionDraft] = field(default_factory=list)


@dataclass(slots=True)
class QuizDraft:
    """Unvalidated quiz definition coming from an admin request or a text file."""

    title: str
    subject: str
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    negative_marking: float = DEFAULT_NEGATIVE_MARKING
    questions: list[QuestionDraft] = field(default_factory=list)


class QuizCatalog:
    """Read-mostly catalog of quizzes backed by a ``QuizStore``."""

    def __init__(self, store: QuizStore) -> None:
        self._store = store

    def create_quiz(self, draft: QuizDraft) -> Quiz:
        """Validate a draft, assign ids and persist it."""
        quiz = self._build_quiz(draft)
        self._store.add_quiz(quiz)
        logger.info("Created quiz %s %r with %d questions", quiz.id, quiz.title, len(quiz.questions))
        return quiz

    def list_quizzes(self) -> list[QuizSummary]:
        return self._store.list_quizzes()

    def is_empty(self) -> bool:
        return self._store.count_quizzes() == 0

    def get_quiz(self, quiz_id: str) -> Quiz:
        return self._store.get_quiz_with_questions(quiz_id)

    def _build_quiz(self, draft: QuizDraft) -> Quiz:
        title = (draft.title or "").strip()
        subject = (draft.subject or "").strip()
        if not title or not subject:
            raise InvalidInputError("title and subject required")

        return Quiz(
            id=str(uuid4()),
            title=title,
            subject=subject,
            duration_minutes=self._validate_duration(draft.duration_minutes),
            negative_marking=self._validate_negative_marking(draft.negative_marking),
            questions=[self._build_question(index, question) for index, question in enumerate(draft.questions, 1)],
        )

    @staticmethod
    def _build_question(number: int, draft: QuestionDraft) -> QuizQuestion:
        statement = (draft.statement or "").strip()
        if not statement:
            raise InvalidInputError(f"Question {number}: statement must not be empty.")
        if not draft.options:
            raise InvalidInputError(f"Question {number}: at least one option is required.")

        options: list[QuizOption] = []
        for option in draft.options:
            label = (option.label or "").strip()
            if not label:
                raise InvalidInputError(f"Question {number}: option label cannot be empty.")
            options.append(QuizOption(id=str(uuid4()), label=label, is_correct=bool(option.is_correct)))

        if sum(1 for option in options if option.is_correct) > 1:
            raise InvalidInputError(f"Question {number}: at most one option may be marked correct.")
        return QuizQuestion(id=str(uuid4()), statement=statement, options=options)

    @staticmethod
    def _validate_duration(duration_minutes: int) -> int:
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
            raise InvalidInputError("Duration must be a whole number of minutes.")
        if duration_minutes <= 0:
            raise InvalidInputError("Duration must be a positive number of minutes.")
        return duration_minutes

    @staticmethod
    def _validate_negative_marking(negative_marking: float) -> float:
        try:
            value = float(negative_marking)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError("Negative marking must be a number.") from exc
        if math.isnan(value) or math.isinf(value) or value < 0:
            raise InvalidInputError("Negative marking must be a non-negative number.")
        return value
