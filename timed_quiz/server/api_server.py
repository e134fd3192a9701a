"""FastAPI server exposing the quiz catalog and attempt endpoints."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field
import uvicorn

from timed_quiz.constants.network_constants import (
    ADMIN_TOKEN_HEADER,
    API_PREFIX,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from timed_quiz.constants.quiz_constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_NEGATIVE_MARKING,
)
from timed_quiz.core.errors import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    QuizServiceError,
    UnauthorizedError,
)
from timed_quiz.core.markdown_renderer import renderer
from timed_quiz.core.models import Attempt, Quiz
from timed_quiz.core.quiz_service import QuizService
from timed_quiz.core.services.quiz_catalog import OptionDraft, QuestionDraft, QuizDraft
from timed_quiz.server.participant_page import PARTICIPANT_PAGE_HTML

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[QuizServiceError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
)


class StartAttemptPayload(BaseModel):
    """Payload schema for starting an attempt."""

    quiz_id: str | None = None
    name: str | None = None


class AnswerPayload(BaseModel):
    """Payload schema for recording an answer. ``option_id`` null clears it."""

    question_id: str | None = None
    option_id: str | None = None


class OptionPayload(BaseModel):
    label: str = ""
    is_correct: bool = False


class QuestionPayload(BaseModel):
    statement: str = ""
    options: list[OptionPayload] = Field(default_factory=list)


class QuizPayload(BaseModel):
    """Payload schema for admin quiz creation."""

    title: str | None = None
    subject: str | None = None
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    negative_marking: float = DEFAULT_NEGATIVE_MARKING
    questions: list[QuestionPayload] = Field(default_factory=list)

    def to_draft(self) -> QuizDraft:
        return QuizDraft(
            title=self.title or "",
            subject=self.subject or "",
            duration_minutes=self.duration_minutes,
            negative_marking=self.negative_marking,
            questions=[
                QuestionDraft(
                    statement=question.statement,
                    options=[OptionDraft(label=option.label, is_correct=option.is_correct) for option in question.options],
                )
                for question in self.questions
            ],
        )


def _isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _to_http_error(exc: QuizServiceError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred.")


def _public_quiz(quiz: Quiz) -> dict[str, object]:
    """Serialize a quiz for participants; correctness flags never leave the server."""
    return {
        "id": quiz.id,
        "title": quiz.title,
        "subject": quiz.subject,
        "duration_minutes": quiz.duration_minutes,
        "negative_marking": quiz.negative_marking,
        "questions": [
            {
                "id": question.id,
                "statement": question.statement,
                "statement_html": renderer.render_fragment(question.statement),
                "options": [
                    {
                        "id": option.id,
                        "label": option.label,
                        "label_html": renderer.render_inline(option.label),
                    }
                    for option in question.options
                ],
            }
            for question in quiz.questions
        ],
    }


def _attempt_record(attempt: Attempt) -> dict[str, object]:
    return {
        "id": attempt.id,
        "quiz_id": attempt.quiz_id,
        "name": attempt.participant_name,
        "status": attempt.status.value,
        "started_at": _isoformat(attempt.started_at),
        "submitted_at": _isoformat(attempt.submitted_at),
        "score": attempt.score,
    }


def _get_quiz_service_dependency(quiz_service: QuizService):
    def dependency() -> QuizService:
        return quiz_service

    return dependency


def _admin_token_dependency(admin_token: str):
    def dependency(token: str | None = Header(default=None, alias=ADMIN_TOKEN_HEADER)) -> None:
        if token is None or not secrets.compare_digest(token.encode(), admin_token.encode()):
            logger.warning("Rejected admin request with missing or invalid token")
            raise _to_http_error(UnauthorizedError("Unauthorized: invalid admin token"))

    return dependency


def create_api_app(quiz_service: QuizService, admin_token: str) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz service."""
    app = FastAPI(title="Timed Quiz API", version="1.0.0")
    service_dep = _get_quiz_service_dependency(quiz_service)
    require_admin = _admin_token_dependency(admin_token)
    api = APIRouter(prefix=API_PREFIX)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred."},
        )

    @app.get("/", response_class=HTMLResponse)
    def serve_participant_page() -> str:
        return PARTICIPANT_PAGE_HTML

    @api.get("/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    @api.get("/quizzes")
    def list_quizzes(service: QuizService = Depends(service_dep)) -> list[dict[str, object]]:
        return [
            {
                "id": summary.id,
                "title": summary.title,
                "subject": summary.subject,
                "duration_minutes": summary.duration_minutes,
            }
            for summary in service.list_quizzes()
        ]

    @api.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: str, service: QuizService = Depends(service_dep)) -> dict[str, object]:
        try:
            quiz = service.get_quiz(quiz_id)
        except QuizServiceError as exc:
            logger.warning("Quiz lookup failed for %s: %s", quiz_id, exc)
            raise _to_http_error(exc) from exc
        return _public_quiz(quiz)

    @api.post("/attempts")
    def start_attempt(
        payload: StartAttemptPayload,
        service: QuizService = Depends(service_dep),
    ) -> dict[str, object]:
        try:
            attempt = service.start_attempt(payload.quiz_id or "", payload.name or "")
        except QuizServiceError as exc:
            logger.warning("Could not start attempt on quiz %s: %s", payload.quiz_id, exc)
            raise _to_http_error(exc) from exc
        return {
            "attempt_id": attempt.id,
            "started_at": _isoformat(attempt.started_at),
        }

    @api.post("/attempts/{attempt_id}/answer")
    def record_answer(
        attempt_id: str,
        payload: AnswerPayload,
        service: QuizService = Depends(service_dep),
    ) -> dict[str, bool]:
        try:
            service.record_answer(attempt_id, payload.question_id or "", payload.option_id)
        except QuizServiceError as exc:
            logger.warning("Answer rejected for attempt %s: %s", attempt_id, exc)
            raise _to_http_error(exc) from exc
        return {"ok": True}

    @api.post("/attempts/{attempt_id}/submit")
    def submit_attempt(attempt_id: str, service: QuizService = Depends(service_dep)) -> dict[str, object]:
        try:
            result = service.submit_attempt(attempt_id)
        except QuizServiceError as exc:
            logger.warning("Submit failed for attempt %s: %s", attempt_id, exc)
            raise _to_http_error(exc) from exc
        return result.as_dict()

    @api.get("/attempts/{attempt_id}")
    def get_attempt(attempt_id: str, service: QuizService = Depends(service_dep)) -> dict[str, object]:
        try:
            attempt = service.get_attempt(attempt_id)
        except QuizServiceError as exc:
            raise _to_http_error(exc) from exc
        return _attempt_record(attempt)

    @api.post(
        "/admin/quizzes",
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_admin)],
    )
    def create_quiz(payload: QuizPayload, service: QuizService = Depends(service_dep)) -> dict[str, str]:
        try:
            quiz = service.create_quiz(payload.to_draft())
        except QuizServiceError as exc:
            logger.warning("Quiz creation rejected: %s", exc)
            raise _to_http_error(exc) from exc
        return {"id": quiz.id}

    app.include_router(api)
    return app


def run_api_server(
    quiz_service: QuizService,
    admin_token: str,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve the API with uvicorn until the process is stopped."""
    app = create_api_app(quiz_service, admin_token)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level.lower())
    uvicorn.Server(config).run()
