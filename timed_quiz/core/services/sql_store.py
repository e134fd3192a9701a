"""SQLAlchemy-backed quiz store (SQLite by default)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    func,
    select,
    update,
)
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, relationship, selectinload, sessionmaker
from sqlalchemy.pool import StaticPool

from timed_quiz.core.errors import NotFoundError
from timed_quiz.core.models import (
    Attempt,
    Quiz,
    QuizOption,
    QuizQuestion,
    QuizSummary,
    ScoreResult,
)
from timed_quiz.core.services.quiz_store import QuizStore

logger = logging.getLogger(__name__)

Base = declarative_base()


class QuizRow(Base):
    __tablename__ = "quizzes"

    id = Column(String(36), primary_key=True)
    title = Column(Text, nullable=False)
    subject = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=15)
    negative_marking = Column(Float, nullable=False, default=0.0)

    questions = relationship(
        "QuestionRow",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuestionRow.position",
    )


class QuestionRow(Base):
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True)
    quiz_id = Column(String(36), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    statement = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    quiz = relationship("QuizRow", back_populates="questions")
    options = relationship(
        "OptionRow",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="OptionRow.position",
    )


class OptionRow(Base):
    __tablename__ = "options"

    id = Column(String(36), primary_key=True)
    question_id = Column(String(36), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(Text, nullable=False)
    is_correct = Column(Integer, nullable=False, default=0)
    position = Column(Integer, nullable=False, default=0)

    question = relationship("QuestionRow", back_populates="options")


class AttemptRow(Base):
    __tablename__ = "attempts"

    id = Column(String(36), primary_key=True)
    quiz_id = Column(String(36), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    total = Column(Integer, nullable=True)
    correct = Column(Integer, nullable=True)
    wrong = Column(Integer, nullable=True)
    score = Column(Float, nullable=True)


class AnswerRow(Base):
    __tablename__ = "answers"

    # Answers stay permissive about option ownership, so option_id is not a foreign key.
    attempt_id = Column(String(36), ForeignKey("attempts.id", ondelete="CASCADE"), primary_key=True)
    question_id = Column(String(36), primary_key=True)
    option_id = Column(String(36), nullable=True)


def create_store_engine(database_url: str) -> Engine:
    """Build an engine that is safe to share between request threads."""
    if database_url.startswith("sqlite"):
        kwargs: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SqlQuizStore(QuizStore):
    """Relational quiz store. Each call runs in its own short transaction."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlQuizStore":
        store = cls(create_store_engine(database_url))
        store.create_schema()
        return store

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self._engine)
        logger.info("Database schema ready on %s", self._engine.url.render_as_string(hide_password=True))

    # --- Quiz catalog ---

    def add_quiz(self, quiz: Quiz) -> None:
        row = QuizRow(
            id=quiz.id,
            title=quiz.title,
            subject=quiz.subject,
            duration_minutes=quiz.duration_minutes,
            negative_marking=quiz.negative_marking,
            questions=[
                QuestionRow(
                    id=question.id,
                    statement=question.statement,
                    position=question_position,
                    options=[
                        OptionRow(
                            id=option.id,
                            label=option.label,
                            is_correct=1 if option.is_correct else 0,
                            position=option_position,
                        )
                        for option_position, option in enumerate(question.options)
                    ],
                )
                for question_position, question in enumerate(quiz.questions)
            ],
        )
        with self._session_factory.begin() as session:
            session.add(row)

    def list_quizzes(self) -> list[QuizSummary]:
        with self._session_factory() as session:
            rows = session.execute(select(QuizRow).order_by(QuizRow.title)).scalars().all()
            return [
                QuizSummary(
                    id=row.id,
                    title=row.title,
                    subject=row.subject,
                    duration_minutes=row.duration_minutes,
                )
                for row in rows
            ]

    def count_quizzes(self) -> int:
        with self._session_factory() as session:
            return session.execute(select(func.count()).select_from(QuizRow)).scalar_one()

    def get_quiz_with_questions(self, quiz_id: str) -> Quiz:
        with self._session_factory() as session:
            row = session.execute(
                select(QuizRow)
                .where(QuizRow.id == quiz_id)
                .options(selectinload(QuizRow.questions).selectinload(QuestionRow.options))
            ).scalar_one_or_none()
            if row is None:
                raise NotFoundError(f"Quiz {quiz_id} not found")
            return Quiz(
                id=row.id,
                title=row.title,
                subject=row.subject,
                duration_minutes=row.duration_minutes,
                negative_marking=row.negative_marking,
                questions=[
                    QuizQuestion(
                        id=question.id,
                        statement=question.statement,
                        options=[
                            QuizOption(id=option.id, label=option.label, is_correct=bool(option.is_correct))
                            for option in question.options
                        ],
                    )
                    for question in row.questions
                ],
            )

    def get_correct_option_map(self, quiz_id: str) -> dict[str, str]:
        with self._session_factory() as session:
            if session.get(QuizRow, quiz_id) is None:
                raise NotFoundError(f"Quiz {quiz_id} not found")
            rows = session.execute(
                select(QuestionRow.id, OptionRow.id)
                .join(OptionRow, OptionRow.question_id == QuestionRow.id)
                .where(QuestionRow.quiz_id == quiz_id, OptionRow.is_correct == 1)
                .order_by(QuestionRow.position, OptionRow.position)
            ).all()
            mapping: dict[str, str] = {}
            for question_id, option_id in rows:
                mapping.setdefault(question_id, option_id)
            return mapping

    # --- Attempts ---

    def create_attempt(self, quiz_id: str, name: str, started_at: datetime) -> str:
        attempt_id = str(uuid4())
        with self._session_factory.begin() as session:
            if session.get(QuizRow, quiz_id) is None:
                raise NotFoundError(f"Quiz {quiz_id} not found")
            session.add(AttemptRow(id=attempt_id, quiz_id=quiz_id, name=name, started_at=started_at))
        return attempt_id

    def get_attempt(self, attempt_id: str) -> Attempt:
        with self._session_factory() as session:
            row = self._require_attempt(session, attempt_id)
            result = None
            if row.submitted_at is not None:
                result = ScoreResult(
                    total=row.total or 0,
                    correct=row.correct or 0,
                    wrong=row.wrong or 0,
                    score=row.score or 0.0,
                )
            return Attempt(
                id=row.id,
                quiz_id=row.quiz_id,
                participant_name=row.name,
                started_at=_as_utc(row.started_at),
                submitted_at=_as_utc(row.submitted_at),
                result=result,
            )

    def upsert_answer(self, attempt_id: str, question_id: str, option_id: str | None) -> None:
        with self._session_factory.begin() as session:
            self._require_attempt(session, attempt_id)
            if session.get_bind().dialect.name == "sqlite":
                statement = sqlite_insert(AnswerRow).values(
                    attempt_id=attempt_id,
                    question_id=question_id,
                    option_id=option_id,
                )
                session.execute(
                    statement.on_conflict_do_update(
                        index_elements=[AnswerRow.attempt_id, AnswerRow.question_id],
                        set_={"option_id": statement.excluded.option_id},
                    )
                )
            else:
                session.merge(AnswerRow(attempt_id=attempt_id, question_id=question_id, option_id=option_id))

    def get_answers(self, attempt_id: str) -> dict[str, str | None]:
        with self._session_factory() as session:
            self._require_attempt(session, attempt_id)
            rows = session.execute(
                select(AnswerRow.question_id, AnswerRow.option_id).where(AnswerRow.attempt_id == attempt_id)
            ).all()
            return {question_id: option_id for question_id, option_id in rows}

    def finalize_attempt(
        self,
        attempt_id: str,
        submitted_at: datetime,
        result: ScoreResult,
    ) -> bool:
        with self._session_factory.begin() as session:
            outcome = session.execute(
                update(AttemptRow)
                .where(AttemptRow.id == attempt_id, AttemptRow.submitted_at.is_(None))
                .values(
                    submitted_at=submitted_at,
                    total=result.total,
                    correct=result.correct,
                    wrong=result.wrong,
                    score=result.score,
                )
            )
            if outcome.rowcount == 1:
                return True
            self._require_attempt(session, attempt_id)
            return False

    @staticmethod
    def _require_attempt(session: Session, attempt_id: str) -> AttemptRow:
        row = session.get(AttemptRow, attempt_id)
        if row is None:
            raise NotFoundError(f"Attempt {attempt_id} not found")
        return row
