"""Typed HTTP client for the quiz API."""

from __future__ import annotations

import httpx

from timed_quiz.constants.network_constants import API_PREFIX
from timed_quiz.core.errors import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    QuizServiceError,
    UnauthorizedError,
)
from timed_quiz.core.models import ScoreResult

_ERROR_BY_STATUS: dict[int, type[QuizServiceError]] = {
    400: InvalidInputError,
    401: UnauthorizedError,
    404: NotFoundError,
    409: InvalidStateError,
}


class QuizApiClient:
    """Wraps an ``httpx.Client`` and maps error responses onto the error taxonomy."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    @classmethod
    def connect(cls, base_url: str, timeout: float = 10.0) -> "QuizApiClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def close(self) -> None:
        self._http.close()

    def list_quizzes(self) -> list[dict]:
        return self._request("GET", "/quizzes")

    def get_quiz(self, quiz_id: str) -> dict:
        return self._request("GET", f"/quizzes/{quiz_id}")

    def start_attempt(self, quiz_id: str, name: str) -> dict:
        return self._request("POST", "/attempts", json={"quiz_id": quiz_id, "name": name})

    def record_answer(self, attempt_id: str, question_id: str, option_id: str | None) -> None:
        self._request(
            "POST",
            f"/attempts/{attempt_id}/answer",
            json={"question_id": question_id, "option_id": option_id},
        )

    def submit(self, attempt_id: str) -> ScoreResult:
        body = self._request("POST", f"/attempts/{attempt_id}/submit")
        return ScoreResult(
            total=body["total"],
            correct=body["correct"],
            wrong=body["wrong"],
            score=float(body["score"]),
        )

    def get_attempt(self, attempt_id: str) -> dict:
        return self._request("GET", f"/attempts/{attempt_id}")

    def _request(self, method: str, path: str, json: dict | None = None):
        response = self._http.request(method, f"{API_PREFIX}{path}", json=json)
        error_type = _ERROR_BY_STATUS.get(response.status_code)
        if error_type is not None:
            raise error_type(_detail(response))
        response.raise_for_status()
        return response.json()


def _detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    return str(detail or response.text or response.reason_phrase)
