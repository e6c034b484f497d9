import pytest

from echowave.lifecycle import SurveyLifecycle
from echowave.model import AnswerDraft, QuestionDraft, QuestionType, SurveyTemplateType


def build_questions():
    """One rating, one multiple choice and one yes/no question."""
    return [
        QuestionDraft(type=QuestionType.RATING, prompt="Overall?", min_value=1, max_value=5),
        QuestionDraft(type=QuestionType.MULTIPLE_CHOICE, prompt="How often?", choices=["Daily", "Weekly"]),
        QuestionDraft(type=QuestionType.YES_NO, prompt="Recommend?"),
    ]


def valid_answers(survey, rating="4", choice="Daily", yes_no="yes"):
    values = {
        QuestionType.RATING: rating,
        QuestionType.MULTIPLE_CHOICE: choice,
        QuestionType.YES_NO: yes_no,
        QuestionType.TEXT: "Keep going",
    }
    return [AnswerDraft(question_id=q.id, value=values[q.type]) for q in survey.questions]


@pytest.fixture
def lifecycle():
    return SurveyLifecycle()


@pytest.fixture
def survey(lifecycle):
    return lifecycle.create_survey(
        "owner-1", SurveyTemplateType.CUSTOM, "Team pulse", min_responses=3, questions=build_questions()
    )
