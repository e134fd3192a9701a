from timed_quiz.core.models import ScoreResult
from timed_quiz.core.scoring import score_answers

KEY = {"q1": "c1", "q2": "c2", "q3": "c3", "q4": "c4", "q5": "c5"}


def test_unanswered_attempt_scores_zero():
    result = score_answers(KEY, {}, negative_marking=1.0)
    assert result == ScoreResult(total=5, correct=0, wrong=0, score=0.0)


def test_cleared_answers_are_skipped():
    result = score_answers(KEY, {"q1": None, "q2": None}, negative_marking=2.0)
    assert (result.correct, result.wrong, result.score) == (0, 0, 0.0)


def test_fractional_negative_marking_is_exact():
    answers = {"q1": "c1", "q2": "c2", "q3": "c3", "q4": "x", "q5": "y"}
    result = score_answers(KEY, answers, negative_marking=0.25)
    assert (result.correct, result.wrong) == (3, 2)
    assert result.score == 11.5


def test_score_is_not_clamped_at_zero():
    answers = {"q1": "x", "q2": "x", "q3": "x"}
    result = score_answers(KEY, answers, negative_marking=5)
    assert result.score == -15.0


def test_total_only_counts_scorable_questions():
    # "poll" has no correct option so it is absent from the key.
    result = score_answers({"q1": "c1"}, {"q1": "c1", "poll": "yes"}, negative_marking=1.0)
    assert result == ScoreResult(total=1, correct=1, wrong=0, score=4.0)


def test_unknown_option_counts_as_wrong():
    result = score_answers({"q1": "c1"}, {"q1": "not-an-option"}, negative_marking=1.0)
    assert (result.correct, result.wrong, result.score) == (0, 1, -1.0)


def test_two_question_scenarios():
    key = {"q1": "C1", "q2": "C2"}
    answers = {"q1": "C1", "q2": "W2"}
    assert score_answers(key, answers, 0.0) == ScoreResult(total=2, correct=1, wrong=1, score=4.0)
    assert score_answers(key, answers, 1.0).score == 3.0
