"""
Demo: Create a survey, collect anonymous responses, unlock results.
"""

import logging
import random
import uuid

from echowave.auth import Authenticator, InMemoryCredentialVerifier
from echowave.lifecycle import SurveyLifecycle, Summarizer
from echowave.model import (
    AnswerDraft,
    QuestionType,
    Sentiment,
    SurveySummary,
    SurveyTemplateType,
    utc_now,
)
from echowave.serialization import survey_to_yaml


class CannedSummarizer(Summarizer):
    """Stands in for the real summarization service."""

    def summarize(self, survey, responses):
        return SurveySummary(
            id=str(uuid.uuid4()),
            survey_id=survey.id,
            model_name="canned",
            created_at=utc_now(),
            overall_sentiment=Sentiment.POSITIVE,
            sentiment_score=0.4,
            key_themes=("collaboration",),
            raw_summary=f"{len(responses)} responses summarised.",
        )


def random_answers(survey):
    answers = []
    for q in survey.questions:
        if q.type == QuestionType.RATING:
            value = str(random.randint(q.min_value, q.max_value))
        elif q.type == QuestionType.MULTIPLE_CHOICE:
            value = random.choice(q.choices)
        elif q.type == QuestionType.YES_NO:
            value = random.choice(["yes", "no"])
        else:
            value = "More regular check-ins would help."
        answers.append(AnswerDraft(question_id=q.id, value=value))
    return answers


def print_results(results):
    print()
    print("=" * 70)
    print(f"RESULTS: {results.title} ({results.response_count} responses)")
    print("=" * 70)
    for qr in results.questions:
        print(f"\n{qr.order + 1}. {qr.prompt}")
        if qr.counts:
            for option, count in qr.counts.items():
                print(f"    {option:<20} {count}")
        if qr.average is not None:
            print(f"    average {qr.average:.2f}  distribution {qr.distribution}")
        for text in qr.texts:
            print(f"    - {text}")
    print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    auth = Authenticator(InMemoryCredentialVerifier())
    session, user = auth.sign_up("owner@example.com", "secret123")

    lifecycle = SurveyLifecycle()
    lifecycle.register_user(user)
    survey = lifecycle.create_survey(
        session.user_id, SurveyTemplateType.TEAM, "Quarterly team pulse", min_responses=3
    )
    print(f"Share link: {lifecycle.share_url(survey.id)}")

    for _ in range(3):
        lifecycle.record_response(survey.id, random_answers(survey))
        current = lifecycle.get_survey(survey.id)
        print(f"Responses: {current.response_count}/{survey.min_responses} "
              f"results visible: {lifecycle.can_view_results(survey.id)}")

    print_results(lifecycle.results(survey.id))
    lifecycle.summarize(survey.id, CannedSummarizer())
    lifecycle.close_survey(survey.id)

    print(f"Owner points: {user.points} level {user.level} badges {[b.id for b in user.badges]}")
    print(survey_to_yaml(lifecycle.get_survey(survey.id)))
