"""
Response aggregation for survey owners.

Turns the stored anonymous responses of a survey into per-question
tallies. This module does NOT enforce the anonymity threshold itself;
it is only reached through SurveyLifecycle.results, which does.

It produces read-only reports and never modifies the survey.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from echowave.model import Question, QuestionType, Response, Survey
from echowave.validation import YES_NO_VALUES


@dataclass
class QuestionResult:
    """Aggregated answers to one question."""

    question_id: str
    order: int
    prompt: str
    type: QuestionType
    answered: int = 0

    # Choice and yes/no questions
    counts: Dict[str, int] = field(default_factory=dict)

    # Rating questions
    distribution: Dict[int, int] = field(default_factory=dict)
    average: Optional[float] = None

    # Text questions
    texts: List[str] = field(default_factory=list)


@dataclass
class SurveyResults:
    survey_id: str
    title: str
    response_count: int
    questions: List[QuestionResult] = field(default_factory=list)

    def for_question(self, question_id: str) -> Optional[QuestionResult]:
        for result in self.questions:
            if result.question_id == question_id:
                return result
        return None


def _empty_result(question: Question) -> QuestionResult:
    result = QuestionResult(
        question_id=question.id,
        order=question.order,
        prompt=question.prompt,
        type=question.type,
    )
    # Every option appears, including ones nobody picked
    if question.type == QuestionType.MULTIPLE_CHOICE:
        result.counts = {choice: 0 for choice in question.choices or ()}
    elif question.type == QuestionType.YES_NO:
        result.counts = {v: 0 for v in YES_NO_VALUES}
    elif question.type == QuestionType.RATING:
        result.distribution = {v: 0 for v in range(question.min_value, question.max_value + 1)}
    return result


def aggregate_results(survey: Survey, responses: Sequence[Response]) -> SurveyResults:
    """
    Aggregate responses question by question.

    Args:
        survey: The survey the responses belong to
        responses: Stored responses (already validated on submission)

    Returns:
        SurveyResults with one QuestionResult per question, in order
    """
    by_question = {q.id: _empty_result(q) for q in survey.questions}
    ratings: Dict[str, Counter] = {q.id: Counter() for q in survey.questions}

    for response in responses:
        for answer in response.answers:
            result = by_question.get(answer.question_id)
            if result is None:
                continue
            result.answered += 1
            if result.type in (QuestionType.MULTIPLE_CHOICE, QuestionType.YES_NO):
                result.counts[answer.value] = result.counts.get(answer.value, 0) + 1
            elif result.type == QuestionType.RATING:
                ratings[answer.question_id][int(answer.value.strip())] += 1
            else:
                result.texts.append(answer.value)

    for question_id, counter in ratings.items():
        if not counter:
            continue
        result = by_question[question_id]
        for value, count in counter.items():
            result.distribution[value] = result.distribution.get(value, 0) + count
        total = sum(counter.values())
        result.average = sum(v * c for v, c in counter.items()) / total

    return SurveyResults(
        survey_id=survey.id,
        title=survey.title,
        response_count=len(responses),
        questions=sorted(by_question.values(), key=lambda r: r.order),
    )


__all__ = ["QuestionResult", "SurveyResults", "aggregate_results"]
