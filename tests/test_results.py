"""
Tests for response aggregation.
"""

from conftest import build_questions, valid_answers
from echowave.model import QuestionDraft, QuestionType, SurveyTemplateType
from echowave.results import aggregate_results


def test_tallies_per_question_type(lifecycle):
    questions = build_questions() + [QuestionDraft(type=QuestionType.TEXT, prompt="Anything else?")]
    survey = lifecycle.create_survey("o", SurveyTemplateType.CUSTOM, "Pulse", 3, questions)
    lifecycle.record_response(survey.id, valid_answers(survey, rating="5", choice="Daily", yes_no="yes"))
    lifecycle.record_response(survey.id, valid_answers(survey, rating="3", choice="Daily", yes_no="no"))
    lifecycle.record_response(survey.id, valid_answers(survey, rating="4", choice="Weekly", yes_no="yes"))

    results = lifecycle.results(survey.id)
    rating, choice, yes_no, text = results.questions

    assert results.response_count == 3
    assert rating.answered == 3
    assert rating.average == 4.0
    assert rating.distribution == {1: 0, 2: 0, 3: 1, 4: 1, 5: 1}
    assert choice.counts == {"Daily": 2, "Weekly": 1}
    assert yes_no.counts == {"yes": 2, "no": 1}
    assert text.texts == ["Keep going"] * 3


def test_unpicked_options_are_reported(survey):
    results = aggregate_results(survey, [])
    choice = results.for_question(survey.questions[1].id)
    assert choice.counts == {"Daily": 0, "Weekly": 0}
    assert results.for_question(survey.questions[0].id).average is None


def test_results_follow_question_order(lifecycle, survey):
    for _ in range(3):
        lifecycle.record_response(survey.id, valid_answers(survey))
    results = lifecycle.results(survey.id)
    assert [r.order for r in results.questions] == [0, 1, 2]
    assert results.for_question("missing") is None
