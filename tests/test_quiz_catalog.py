import pytest

from conftest import kinematics_draft
from timed_quiz.core.errors import InvalidInputError, NotFoundError
from timed_quiz.core.services.quiz_catalog import OptionDraft, QuestionDraft, QuizDraft


def test_create_quiz_assigns_ids_and_trims_text(catalog):
    draft = QuizDraft(
        title="  Optics ",
        subject=" Physics ",
        questions=[QuestionDraft(" Focal length? ", [OptionDraft(" f ", True), OptionDraft("2f")])],
    )

    quiz = catalog.create_quiz(draft)

    assert quiz.title == "Optics"
    assert quiz.subject == "Physics"
    assert quiz.duration_minutes == 15
    assert quiz.negative_marking == 0.0
    question = quiz.questions[0]
    assert question.statement == "Focal length?"
    assert [option.label for option in question.options] == ["f", "2f"]
    assert question.correct_option_id == question.options[0].id
    assert len({quiz.id, question.id, *(option.id for option in question.options)}) == 4


def test_listing_exposes_summaries(catalog):
    quiz = catalog.create_quiz(kinematics_draft())

    [summary] = catalog.list_quizzes()

    assert (summary.id, summary.title, summary.subject, summary.duration_minutes) == (
        quiz.id,
        "Kinematics Basics",
        "Physics",
        10,
    )
    assert not catalog.is_empty()


def test_get_quiz_unknown_id(catalog):
    with pytest.raises(NotFoundError):
        catalog.get_quiz("missing")


@pytest.mark.parametrize(
    "draft",
    [
        QuizDraft(title="", subject="Physics"),
        QuizDraft(title="Optics", subject="   "),
        QuizDraft(title="Optics", subject="Physics", duration_minutes=0),
        QuizDraft(title="Optics", subject="Physics", negative_marking=-0.5),
        QuizDraft(title="Optics", subject="Physics", negative_marking=float("nan")),
        QuizDraft(title="Optics", subject="Physics", questions=[QuestionDraft("", [OptionDraft("a")])]),
        QuizDraft(title="Optics", subject="Physics", questions=[QuestionDraft("Q?", [])]),
        QuizDraft(title="Optics", subject="Physics", questions=[QuestionDraft("Q?", [OptionDraft(" ")])]),
        QuizDraft(
            title="Optics",
            subject="Physics",
            questions=[QuestionDraft("Q?", [OptionDraft("a", True), OptionDraft("b", True)])],
        ),
    ],
)
def test_invalid_drafts_are_rejected(catalog, draft):
    with pytest.raises(InvalidInputError):
        catalog.create_quiz(draft)
    assert catalog.is_empty()


def test_question_without_correct_option_is_allowed(catalog):
    quiz = catalog.create_quiz(
        QuizDraft(title="Survey", subject="Meta", questions=[QuestionDraft("Enjoyed it?", [OptionDraft("Yes")])])
    )
    assert quiz.questions[0].correct_option_id is None
