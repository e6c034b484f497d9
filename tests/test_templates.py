"""
Tests for the template catalog.

Every template except CUSTOM ships three valid default questions.
"""

import pytest

from echowave.model import QuestionType, SurveyTemplateType
from echowave.templates import template_description, template_questions
from echowave.validation import validate_question


@pytest.mark.parametrize("template", [t for t in SurveyTemplateType if t != SurveyTemplateType.CUSTOM])
def test_default_questions_are_valid(template):
    drafts = template_questions(template)
    assert len(drafts) == 3
    for draft in drafts:
        assert validate_question(draft) == []
    assert drafts[0].type == QuestionType.RATING
    assert (drafts[0].min_value, drafts[0].max_value) == (1, 5)


def test_custom_has_no_defaults():
    assert template_questions(SurveyTemplateType.CUSTOM) == []


def test_team_communication_choices():
    choice = template_questions(SurveyTemplateType.TEAM)[1]
    assert choice.choices == ["Very clear", "Mostly clear", "Sometimes unclear", "Often confusing"]


def test_returns_fresh_copies():
    first = template_questions(SurveyTemplateType.PRODUCT)
    first[1].choices.append("Never")
    assert "Never" not in template_questions(SurveyTemplateType.PRODUCT)[1].choices


def test_descriptions():
    assert template_description(SurveyTemplateType.SERVICE) == "Measure service quality and customer satisfaction"
