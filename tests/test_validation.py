"""
Tests for question and answer validation rules.
"""

import pytest

from echowave.config import LifecycleConfig
from echowave.model import Question, QuestionDraft, QuestionType
from echowave.validation import (
    MAX_QUESTIONS,
    MAX_RATING_SPAN,
    MIN_QUESTIONS,
    normalize_question,
    validate_answer,
    validate_min_responses,
    validate_question,
    validate_question_count,
    validate_title,
)


CONFIG = LifecycleConfig()


def rating_question(min_value=1, max_value=5):
    return Question(id="r", survey_id="s", order=0, type=QuestionType.RATING, prompt="Rate",
                    min_value=min_value, max_value=max_value)


class TestSurveyLevelRules:
    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_empty_title(self, title):
        assert validate_title(title, CONFIG)

    def test_short_title_after_trimming(self):
        assert validate_title("  ab  ", CONFIG)
        assert validate_title("abc", CONFIG) == []

    def test_question_count_bounds(self):
        assert validate_question_count(2)
        assert validate_question_count(3) == []
        assert validate_question_count(10) == []
        assert validate_question_count(11)

    def test_question_count_is_not_configurable(self):
        assert (MIN_QUESTIONS, MAX_QUESTIONS) == (3, 10)
        assert "max_questions" not in LifecycleConfig.__dataclass_fields__

    def test_min_responses(self):
        assert validate_min_responses(0)
        assert validate_min_responses(-1)
        assert validate_min_responses(True)
        assert validate_min_responses(1) == []


class TestQuestionRules:
    def test_blank_prompt(self):
        assert validate_question(QuestionDraft(type=QuestionType.TEXT, prompt="  "))

    def test_multiple_choice_needs_two_non_empty_choices(self):
        one = QuestionDraft(type=QuestionType.MULTIPLE_CHOICE, prompt="Pick", choices=["A", " ", ""])
        two = QuestionDraft(type=QuestionType.MULTIPLE_CHOICE, prompt="Pick", choices=["A", "B"])
        assert validate_question(one)
        assert validate_question(two) == []

    def test_rating_bounds(self):
        missing = QuestionDraft(type=QuestionType.RATING, prompt="Rate", min_value=1)
        equal = QuestionDraft(type=QuestionType.RATING, prompt="Rate", min_value=3, max_value=3)
        ok = QuestionDraft(type=QuestionType.RATING, prompt="Rate", min_value=1, max_value=5)
        assert validate_question(missing)
        assert validate_question(equal)
        assert validate_question(ok) == []

    @pytest.mark.parametrize("bounds", [("1", "5"), (1.0, 5), (1, 5.5), (False, True), (1, "10")])
    def test_rating_bounds_must_be_integers(self, bounds):
        draft = QuestionDraft(type=QuestionType.RATING, prompt="Rate", min_value=bounds[0], max_value=bounds[1])
        assert validate_question(draft) == ["rating bounds must be integers"]

    def test_rating_span_is_capped(self):
        widest = QuestionDraft(type=QuestionType.RATING, prompt="Rate", min_value=0, max_value=MAX_RATING_SPAN)
        too_wide = QuestionDraft(type=QuestionType.RATING, prompt="Rate", min_value=0, max_value=MAX_RATING_SPAN + 1)
        assert validate_question(widest) == []
        assert validate_question(too_wide)

    @pytest.mark.parametrize("choices", [[1, 2], ["A", None, "B"], "AB", {"A": 1, "B": 2}])
    def test_choices_must_be_strings(self, choices):
        draft = QuestionDraft(type=QuestionType.MULTIPLE_CHOICE, prompt="Pick", choices=choices)
        assert validate_question(draft) == ["choices must be a list of strings"]

    @pytest.mark.parametrize("prompt", [None, 42, ["Why?"]])
    def test_prompt_must_be_a_string(self, prompt):
        assert validate_question(QuestionDraft(type=QuestionType.TEXT, prompt=prompt)) == ["prompt must be a string"]

    def test_position_prefix(self):
        problems = validate_question(QuestionDraft(type=QuestionType.TEXT, prompt=""), position=1)
        assert problems[0].startswith("Question 2:")

    def test_normalize_drops_irrelevant_fields(self):
        draft = QuestionDraft(type=QuestionType.TEXT, prompt=" Why? ", choices=["A"], min_value=1, max_value=5)
        normalized = normalize_question(draft)
        assert normalized.prompt == "Why?"
        assert normalized.choices is None
        assert normalized.min_value is None

    def test_normalize_strips_empty_choices(self):
        draft = QuestionDraft(type=QuestionType.MULTIPLE_CHOICE, prompt="Pick", choices=[" A ", "", "B"])
        assert normalize_question(draft).choices == ["A", "B"]


class TestAnswerRules:
    def test_choice_membership(self):
        q = Question(id="c", survey_id="s", order=0, type=QuestionType.MULTIPLE_CHOICE, prompt="Pick",
                     choices=("Daily", "Weekly"))
        assert validate_answer(q, "Daily") is None
        assert validate_answer(q, "Yearly") is not None

    @pytest.mark.parametrize("value", ["1", "5", " 3 "])
    def test_rating_in_range(self, value):
        assert validate_answer(rating_question(), value) is None

    @pytest.mark.parametrize("value", ["0", "6", "3.5", "three", ""])
    def test_rating_rejected(self, value):
        assert validate_answer(rating_question(), value) is not None

    @pytest.mark.parametrize("value", ["1_0", "+3", "\u0663", "\uff13", "0x3", "3\n4"])
    def test_rating_must_be_plain_ascii_digits(self, value):
        assert validate_answer(rating_question(1, 20), value) is not None

    def test_negative_rating_scale(self):
        q = rating_question(-2, 2)
        assert validate_answer(q, "-2") is None
        assert validate_answer(q, "-3") is not None

    def test_yes_no_tokens(self):
        q = Question(id="y", survey_id="s", order=0, type=QuestionType.YES_NO, prompt="Ok?")
        assert validate_answer(q, "yes") is None
        assert validate_answer(q, "no") is None
        assert validate_answer(q, "maybe") is not None
        assert validate_answer(q, "Yes") is not None

    def test_text_must_not_be_blank(self):
        q = Question(id="t", survey_id="s", order=0, type=QuestionType.TEXT, prompt="Why?")
        assert validate_answer(q, "Because") is None
        assert validate_answer(q, "   ") is not None

    def test_non_string_value(self):
        q = Question(id="t", survey_id="s", order=0, type=QuestionType.TEXT, prompt="Why?")
        assert validate_answer(q, 5) is not None
