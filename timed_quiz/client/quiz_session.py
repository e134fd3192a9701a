"""Participant-side session: navigation, answer dispatch and the countdown.

All state lives on an explicit :class:`ParticipantSession` object. Presentation
code calls its commands (``start``, ``select_option``, ``submit``) instead of
mutating shared globals, and the countdown that auto-submits at zero is a
cancellable task owned by the session, not by the server.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from threading import Lock, Timer

from timed_quiz.client.api_client import QuizApiClient
from timed_quiz.constants.quiz_constants import COUNTDOWN_TICK_SECONDS
from timed_quiz.core.errors import InvalidStateError
from timed_quiz.core.models import ScoreResult

logger = logging.getLogger(__name__)


class Countdown:
    """Repeating timer that calls ``on_tick`` until it returns False or is cancelled."""

    def __init__(self, on_tick: Callable[[], bool], interval_seconds: float = COUNTDOWN_TICK_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError("Countdown interval must be positive.")
        self._on_tick = on_tick
        self._interval = interval_seconds
        self._lock = Lock()
        self._timer: Timer | None = None
        self._cancelled = False

    def start(self) -> None:
        with self._lock:
            if self._timer is not None or self._cancelled:
                raise RuntimeError("Countdown can only be started once.")
            self._schedule()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._timer is not None and not self._cancelled

    def _schedule(self) -> None:
        self._timer = Timer(self._interval, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        try:
            keep_running = self._on_tick()
        except Exception:
            logger.exception("Countdown tick failed; stopping countdown")
            keep_running = False
        with self._lock:
            if keep_running and not self._cancelled:
                self._schedule()
            else:
                self._cancelled = True


class ParticipantSession:
    """One participant working through one quiz attempt."""

    def __init__(
        self,
        client: QuizApiClient,
        clock: Callable[[], float] = time.monotonic,
        countdown_factory: Callable[[Callable[[], bool]], Countdown] | None = None,
    ) -> None:
        self._client = client
        self._clock = clock
        self._countdown_factory = countdown_factory
        self._countdown: Countdown | None = None
        self._submit_lock = Lock()

        self.quiz: dict | None = None
        self.attempt_id: str | None = None
        self.current_index: int = 0
        self.selected: dict[str, str | None] = {}
        self.result: ScoreResult | None = None
        self._deadline: float | None = None

    # --- Lifecycle ---

    def start(self, quiz_id: str, name: str) -> None:
        if self.attempt_id is not None and self.result is None:
            raise InvalidStateError("A quiz attempt is already in progress.")
        quiz = self._client.get_quiz(quiz_id)
        attempt = self._client.start_attempt(quiz_id, name)

        self.quiz = quiz
        self.attempt_id = attempt["attempt_id"]
        self.current_index = 0
        self.selected = {}
        self.result = None
        self._deadline = self._clock() + quiz["duration_minutes"] * 60
        logger.info("Started attempt %s on quiz %s", self.attempt_id, quiz_id)

        if self._countdown_factory is not None:
            self._countdown = self._countdown_factory(self.tick)
            self._countdown.start()

    def tick(self) -> bool:
        """Advance the countdown; auto-submit at zero. Returns True while time remains."""
        if self.attempt_id is None or self.result is not None:
            return False
        if self.remaining_seconds() > 0:
            return True
        logger.info("Time is up for attempt %s; submitting", self.attempt_id)
        self.submit()
        return False

    def submit(self) -> ScoreResult:
        with self._submit_lock:
            self._require_started()
            if self.result is not None:
                return self.result
            if self._countdown is not None:
                self._countdown.cancel()
            self.result = self._client.submit(self.attempt_id)
            return self.result

    # --- Navigation ---

    @property
    def questions(self) -> list[dict]:
        return list(self.quiz["questions"]) if self.quiz else []

    @property
    def current_question(self) -> dict | None:
        questions = self.questions
        if not questions:
            return None
        return questions[self.current_index]

    def next_question(self) -> bool:
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            return True
        return False

    def previous_question(self) -> bool:
        if self.current_index > 0:
            self.current_index -= 1
            return True
        return False

    # --- Answers ---

    def select_option(self, option_id: str) -> None:
        self._record(option_id)

    def clear_selection(self) -> None:
        self._record(None)

    def remaining_seconds(self) -> float:
        if self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self._clock())

    def _record(self, option_id: str | None) -> None:
        self._require_started()
        if self.result is not None:
            raise InvalidStateError("The attempt has already been submitted.")
        question = self.current_question
        if question is None:
            raise InvalidStateError("The quiz has no questions to answer.")
        self._client.record_answer(self.attempt_id, question["id"], option_id)
        self.selected[question["id"]] = option_id

    def _require_started(self) -> None:
        if self.attempt_id is None:
            raise InvalidStateError("No quiz attempt has been started.")
