"""Domain models for the timed quiz service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(slots=True)
class QuizOption:
    """Selectable option of a question. Only the server ever sees ``is_correct``."""

    id: str
    label: str
    is_correct: bool = False


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice question with one or more options."""

    id: str
    statement: str
    options: list[QuizOption] = field(default_factory=list)

    @property
    def correct_option_id(self) -> str | None:
        # Authoring allows at most one correct option; the first one wins otherwise.
        return next((option.id for option in self.options if option.is_correct), None)


@dataclass(slots=True)
class Quiz:
    """A timed quiz with its full question set."""

    id: str
    title: str
    subject: str
    duration_minutes: int
    negative_marking: float
    questions: list[QuizQuestion] = field(default_factory=list)

    def has_question(self, question_id: str) -> bool:
        return any(question.id == question_id for question in self.questions)

    def correct_option_map(self) -> dict[str, str]:
        """Map each scorable question id to its correct option id."""
        mapping: dict[str, str] = {}
        for question in self.questions:
            correct = question.correct_option_id
            if correct is not None:
                mapping[question.id] = correct
        return mapping

    def summary(self) -> QuizSummary:
        return QuizSummary(
            id=self.id,
            title=self.title,
            subject=self.subject,
            duration_minutes=self.duration_minutes,
        )


@dataclass(slots=True)
class QuizSummary:
    """Listing entry for a quiz."""

    id: str
    title: str
    subject: str
    duration_minutes: int


@dataclass(frozen=True, slots=True)
class ScoreResult:
    """Outcome of scoring one attempt."""

    total: int
    correct: int
    wrong: int
    score: float

    def as_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "correct": self.correct,
            "wrong": self.wrong,
            "score": self.score,
        }


class AttemptStatus(str, Enum):
    """Lifecycle states of an attempt. ``SUBMITTED`` is terminal."""

    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


@dataclass(slots=True)
class Attempt:
    """One participant's timed run through a quiz."""

    id: str
    quiz_id: str
    participant_name: str
    started_at: datetime
    submitted_at: datetime | None = None
    result: ScoreResult | None = None

    @property
    def status(self) -> AttemptStatus:
        if self.submitted_at is None:
            return AttemptStatus.IN_PROGRESS
        return AttemptStatus.SUBMITTED

    @property
    def is_submitted(self) -> bool:
        return self.status is AttemptStatus.SUBMITTED

    @property
    def score(self) -> float | None:
        return self.result.score if self.result is not None else None
