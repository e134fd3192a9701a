import threading

import pytest
from fastapi.testclient import TestClient

from conftest import kinematics_draft
from timed_quiz.client.api_client import QuizApiClient
from timed_quiz.client.quiz_session import Countdown, ParticipantSession
from timed_quiz.core.errors import InvalidInputError, InvalidStateError, NotFoundError
from timed_quiz.core.models import ScoreResult
from timed_quiz.core.quiz_service import QuizService
from timed_quiz.core.services.memory_store import InMemoryQuizStore
from timed_quiz.server.api_server import create_api_app


class ManualClock:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


@pytest.fixture
def service() -> QuizService:
    return QuizService(InMemoryQuizStore())


@pytest.fixture
def quiz(service):
    return service.create_quiz(kinematics_draft(negative_marking=0.5))


@pytest.fixture
def api(service) -> QuizApiClient:
    return QuizApiClient(TestClient(create_api_app(service, admin_token="token")))


def test_session_navigation_and_answers(api, service, quiz):
    session = ParticipantSession(api, clock=ManualClock())
    session.start(quiz.id, "Ada")

    assert session.current_question["id"] == quiz.questions[0].id
    assert not session.previous_question()
    session.select_option(quiz.questions[0].correct_option_id)
    assert session.next_question()
    assert not session.next_question()
    session.select_option(quiz.questions[1].options[1].id)
    session.clear_selection()
    session.select_option(quiz.questions[1].options[1].id)

    assert session.selected == {
        quiz.questions[0].id: quiz.questions[0].correct_option_id,
        quiz.questions[1].id: quiz.questions[1].options[1].id,
    }
    result = session.submit()
    assert result == ScoreResult(total=2, correct=1, wrong=1, score=3.5)
    assert service.get_attempt(session.attempt_id).score == 3.5


def test_session_submit_is_idempotent_and_locks_answers(api, quiz):
    session = ParticipantSession(api, clock=ManualClock())
    session.start(quiz.id, "Ada")

    first = session.submit()
    assert session.submit() is first
    with pytest.raises(InvalidStateError):
        session.select_option(quiz.questions[0].correct_option_id)


def test_tick_auto_submits_when_time_runs_out(api, service, quiz):
    clock = ManualClock()
    session = ParticipantSession(api, clock=clock)
    session.start(quiz.id, "Ada")
    session.select_option(quiz.questions[0].correct_option_id)

    clock.value += 9 * 60
    assert session.remaining_seconds() == 60
    assert session.tick() is True
    assert session.result is None

    clock.value += 61
    assert session.tick() is False
    assert session.result == ScoreResult(total=2, correct=1, wrong=0, score=4.0)
    assert service.get_attempt(session.attempt_id).is_submitted


def test_commands_before_start_fail(api):
    session = ParticipantSession(api)
    assert session.current_question is None
    assert session.remaining_seconds() == 0.0
    assert session.tick() is False
    with pytest.raises(InvalidStateError):
        session.submit()
    with pytest.raises(InvalidStateError):
        session.select_option("x")


def test_api_errors_map_to_taxonomy(api, quiz):
    with pytest.raises(NotFoundError):
        api.get_quiz("missing")
    with pytest.raises(InvalidInputError):
        api.start_attempt(quiz.id, "")
    attempt_id = api.start_attempt(quiz.id, "Ada")["attempt_id"]
    api.submit(attempt_id)
    with pytest.raises(InvalidStateError):
        api.record_answer(attempt_id, quiz.questions[0].id, None)


def test_countdown_auto_submits_and_stops(api, quiz):
    clock = ManualClock()
    submitted = threading.Event()
    countdowns: list[Countdown] = []

    def factory(on_tick):
        def tick_and_signal() -> bool:
            keep_running = on_tick()
            if not keep_running:
                submitted.set()
            return keep_running

        countdown = Countdown(tick_and_signal, interval_seconds=0.01)
        countdowns.append(countdown)
        return countdown

    session = ParticipantSession(api, clock=clock, countdown_factory=factory)
    session.start(quiz.id, "Ada")
    assert countdowns[0].is_running

    clock.value += 10 * 60
    assert submitted.wait(timeout=5)
    assert session.result is not None
    assert not countdowns[0].is_running


def test_manual_submit_cancels_countdown(api, quiz):
    countdowns: list[Countdown] = []

    def factory(on_tick):
        countdown = Countdown(on_tick, interval_seconds=60)
        countdowns.append(countdown)
        return countdown

    session = ParticipantSession(api, clock=ManualClock(), countdown_factory=factory)
    session.start(quiz.id, "Ada")
    session.submit()

    assert not countdowns[0].is_running
    with pytest.raises(RuntimeError):
        countdowns[0].start()


def test_countdown_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        Countdown(lambda: False, interval_seconds=0)
