from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from timed_quiz.core.attempt_engine import AttemptEngine
from timed_quiz.core.models import Quiz
from timed_quiz.core.services.memory_store import InMemoryQuizStore
from timed_quiz.core.services.quiz_catalog import OptionDraft, QuestionDraft, QuizCatalog, QuizDraft
from timed_quiz.core.services.sql_store import SqlQuizStore


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def kinematics_draft(negative_marking: float = 0.0, unscored_questions: int = 0) -> QuizDraft:
    """Two scorable questions with the correct option listed first."""
    questions = [
        QuestionDraft(
            statement="Displacement under constant acceleration?",
            options=[
                OptionDraft("s = ut + 1/2 at^2", is_correct=True),
                OptionDraft("s = u/t + at"),
                OptionDraft("s = u^2 + 2as"),
            ],
        ),
        QuestionDraft(
            statement="Time of flight of a projectile?",
            options=[
                OptionDraft("T = 2u sin(theta) / g", is_correct=True),
                OptionDraft("T = u cos(theta) / g"),
            ],
        ),
    ]
    for index in range(unscored_questions):
        questions.append(
            QuestionDraft(
                statement=f"Opinion poll {index + 1}",
                options=[OptionDraft("Yes"), OptionDraft("No")],
            )
        )
    return QuizDraft(
        title="Kinematics Basics",
        subject="Physics",
        duration_minutes=10,
        negative_marking=negative_marking,
        questions=questions,
    )


def correct_option(quiz: Quiz, question_index: int) -> str:
    return quiz.questions[question_index].correct_option_id


def wrong_option(quiz: Quiz, question_index: int) -> str:
    question = quiz.questions[question_index]
    return next(option.id for option in question.options if not option.is_correct)


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryQuizStore()
    return SqlQuizStore.from_url(f"sqlite:///{tmp_path / 'quizzes.db'}")


@pytest.fixture
def catalog(store) -> QuizCatalog:
    return QuizCatalog(store)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(store, clock) -> AttemptEngine:
    return AttemptEngine(store, clock=clock)
