"""Deterministic scoring of a quiz attempt with optional negative marking."""

from __future__ import annotations

from collections.abc import Mapping

from timed_quiz.constants.quiz_constants import CORRECT_ANSWER_WEIGHT
from timed_quiz.core.models import ScoreResult


def score_answers(
    correct_by_question: Mapping[str, str],
    chosen_by_question: Mapping[str, str | None],
    negative_marking: float,
) -> ScoreResult:
    """Score recorded answers against the correct-option key.

    Only questions present in ``correct_by_question`` count towards ``total``.
    Unanswered or cleared questions are skipped. Any other choice that does not
    match the key counts as wrong, even if the option id belongs to no
    question at all. The score is never clamped, so it may go negative.
    """
    correct = 0
    wrong = 0
    for question_id, correct_option_id in correct_by_question.items():
        chosen = chosen_by_question.get(question_id)
        if not chosen:
            continue
        if chosen == correct_option_id:
            correct += 1
        else:
            wrong += 1

    score = float(correct * CORRECT_ANSWER_WEIGHT) - wrong * float(negative_marking)
    return ScoreResult(
        total=len(correct_by_question),
        correct=correct,
        wrong=wrong,
        score=score,
    )
