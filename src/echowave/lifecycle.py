"""
Survey Lifecycle: creating surveys, counting anonymous responses and gating results.

Rules enforced here:
    - A survey is created with 3-10 valid questions and a threshold > 0
    - Responses are anonymous and counted exactly once
    - Results and summaries stay hidden until the threshold is reached
    - A summary is written at most once
    - Closing is one-way; closed surveys refuse responses

CONCURRENCY:
    Each survey has its own lock. Appending a response and incrementing
    the counter happen under that lock, so concurrent submissions never
    lose an update and the counter always equals the number of stored
    responses. Closing and summary attachment take the same lock.
    A separate registry lock guards the survey table, the token index
    and the user directory. Lock order is always survey lock first,
    registry lock second.
"""

from __future__ import annotations

import logging
import secrets
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from echowave import gamification
from echowave.config import LifecycleConfig
from echowave.errors import (
    ClosedSurveyError,
    ConflictError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from echowave.model import (
    Answer,
    AnswerDraft,
    Question,
    QuestionDraft,
    Response,
    Survey,
    SurveySummary,
    SurveyTemplateType,
    User,
    utc_now,
)
from echowave.results import SurveyResults, aggregate_results
from echowave.templates import template_questions
from echowave.validation import (
    normalize_question,
    validate_answer,
    validate_min_responses,
    validate_question,
    validate_question_count,
    validate_title,
)


logger = logging.getLogger(__name__)

AnswerInput = Union[Sequence[AnswerDraft], Mapping[str, str]]


class Summarizer(ABC):
    """
    External summarization collaborator.

    Receives a survey and its anonymised responses once results are
    visible, and returns a SurveySummary for that survey.
    """

    @abstractmethod
    def summarize(self, survey: Survey, responses: Sequence[Response]) -> SurveySummary:
        ...


@dataclass
class _SurveyRecord:
    survey: Survey
    responses: List[Response] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)


def _new_id() -> str:
    return str(uuid.uuid4())


class SurveyLifecycle:
    """
    In-memory owner of surveys, their responses and their owners.

    Every public operation is all-or-nothing: input is validated in full
    before anything is written.
    """

    def __init__(self, config: Optional[LifecycleConfig] = None,
                 token_factory: Optional[Callable[[int], str]] = None):
        self.config = config or LifecycleConfig()
        self._token_factory = token_factory or secrets.token_urlsafe
        self._records: Dict[str, _SurveyRecord] = {}
        self._tokens: Dict[str, str] = {}
        self._users: Dict[str, User] = {}
        self._registry_lock = threading.Lock()

    # =========================================================================
    # USERS
    # =========================================================================

    def register_user(self, user: User) -> User:
        """Add a user to the directory. Re-registering an id is a ConflictError."""
        with self._registry_lock:
            if user.id in self._users:
                raise ConflictError(f"User {user.id} is already registered")
            self._users[user.id] = user
        return user

    def get_user(self, user_id: str) -> User:
        with self._registry_lock:
            user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"Unknown user: {user_id}")
        return user

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def _record(self, survey_id: str) -> _SurveyRecord:
        with self._registry_lock:
            record = self._records.get(survey_id)
        if record is None:
            raise NotFoundError(f"Unknown survey: {survey_id}")
        return record

    @staticmethod
    def _snapshot(record: _SurveyRecord) -> Survey:
        with record.lock:
            return replace(record.survey)

    def get_survey(self, survey_id: str) -> Survey:
        """
        Current state of a survey.

        Returns a detached copy; changing it has no effect on the stored
        survey. All changes go through the lifecycle operations.
        """
        return self._snapshot(self._record(survey_id))

    def find_by_token(self, token: str) -> Survey:
        """Resolve a public share token to its survey."""
        with self._registry_lock:
            survey_id = self._tokens.get(token)
        if survey_id is None:
            raise NotFoundError("Unknown share token")
        return self.get_survey(survey_id)

    def surveys_for_owner(self, owner_id: str) -> List[Survey]:
        with self._registry_lock:
            records = [r for r in self._records.values() if r.survey.owner_id == owner_id]
        return sorted((self._snapshot(r) for r in records), key=lambda s: s.created_at)

    def share_url(self, survey_id: str) -> str:
        return self.get_survey(survey_id).share_url(self.config.share_base_url)

    # =========================================================================
    # CREATION
    # =========================================================================

    def _generate_token(self) -> str:
        # Caller holds the registry lock
        while True:
            token = self._token_factory(self.config.token_bytes)
            if token not in self._tokens:
                return token
            logger.warning("Share token collision, drawing a new token")

    def create_survey(
        self,
        owner_id: str,
        template: SurveyTemplateType,
        title: str,
        min_responses: int,
        questions: Optional[Sequence[QuestionDraft]] = None,
        description: Optional[str] = None,
    ) -> Survey:
        """
        Create and publish a survey.

        Args:
            owner_id: Verified id of the owning user
            template: Template type the survey is based on
            title: Survey title (at least 3 characters after trimming)
            min_responses: Anonymity threshold, must be > 0
            questions: Question drafts; defaults to the template's questions
            description: Optional description (blank becomes None)

        Returns:
            A detached copy of the published Survey

        Raises:
            ValidationError: If any input rule is broken (nothing is stored)
        """
        if questions is None and isinstance(template, SurveyTemplateType):
            questions = template_questions(template)
        questions = list(questions or [])

        problems: List[str] = []
        if not owner_id:
            problems.append("Owner id must not be empty")
        if not isinstance(template, SurveyTemplateType):
            problems.append(f"Unknown template type: {template!r}")
        problems.extend(validate_title(title, self.config))
        if description is not None and not isinstance(description, str):
            problems.append("Description must be a string")
        problems.extend(validate_min_responses(min_responses))
        problems.extend(validate_question_count(len(questions)))
        for i, draft in enumerate(questions):
            if not isinstance(draft, QuestionDraft):
                problems.append(f"Question {i + 1}: expected a QuestionDraft, got {type(draft).__name__}")
            else:
                problems.extend(validate_question(draft, position=i))
        if problems:
            raise ValidationError(problems[0], problems)

        survey_id = _new_id()
        published: Tuple[Question, ...] = tuple(
            self._publish_question(survey_id, order, normalize_question(draft))
            for order, draft in enumerate(questions)
        )

        with self._registry_lock:
            survey = Survey(
                id=survey_id,
                owner_id=owner_id,
                template_type=template,
                min_responses=min_responses,
                url_token=self._generate_token(),
                title=title.strip(),
                description=(description or "").strip() or None,
                questions=published,
            )
            self._records[survey.id] = _SurveyRecord(survey=survey)
            self._tokens[survey.url_token] = survey.id
            self._register_survey_with_owner(survey)
            created = replace(survey)

        logger.info(
            "Created survey %s for owner %s (%d questions, threshold %d)",
            survey.id, owner_id, len(published), min_responses,
        )
        return created

    @staticmethod
    def _publish_question(survey_id: str, order: int, draft: QuestionDraft) -> Question:
        return Question(
            id=_new_id(),
            survey_id=survey_id,
            order=order,
            type=draft.type,
            prompt=draft.prompt,
            is_required=draft.is_required,
            choices=tuple(draft.choices) if draft.choices is not None else None,
            min_value=draft.min_value,
            max_value=draft.max_value,
            min_label=draft.min_label,
            max_label=draft.max_label,
        )

    def _register_survey_with_owner(self, survey: Survey) -> None:
        # Caller holds the registry lock
        user = self._users.get(survey.owner_id)
        if user is None:
            logger.debug("Owner %s not in directory, registering", survey.owner_id)
            user = User(id=survey.owner_id, email="")
            self._users[user.id] = user
        user.survey_ids.append(survey.id)
        gamification.award_points(user, self.config.points_survey_created, self.config)
        gamification.grant_badge(user, "first_survey")

    # =========================================================================
    # RESPONSES
    # =========================================================================

    def _build_answers(self, survey: Survey, response_id: str, answers: AnswerInput) -> Tuple[Answer, ...]:
        if isinstance(answers, Mapping):
            drafts = [AnswerDraft(question_id=k, value=v) for k, v in answers.items()]
        else:
            drafts = list(answers)

        problems: List[str] = []
        by_question: Dict[str, AnswerDraft] = {}
        for draft in drafts:
            if survey.get_question(draft.question_id) is None:
                problems.append(f"Answer references unknown question {draft.question_id}")
            elif draft.question_id in by_question:
                problems.append(f"Question {draft.question_id} answered more than once")
            else:
                by_question[draft.question_id] = draft

        for question in survey.questions:
            draft = by_question.get(question.id)
            if draft is None:
                if question.is_required:
                    problems.append(f"Missing answer for required question {question.id}")
                continue
            problem = validate_answer(question, draft.value)
            if problem:
                problems.append(problem)

        if problems:
            raise ValidationError(problems[0], problems)

        return tuple(
            Answer(id=_new_id(), response_id=response_id, question_id=q.id, value=by_question[q.id].value)
            for q in survey.questions
            if q.id in by_question
        )

    def record_response(self, survey_id: str, answers: AnswerInput) -> Response:
        """
        Store an anonymous response and count it.

        Args:
            survey_id: Target survey
            answers: AnswerDrafts, or a mapping of question id -> value

        Returns:
            The stored Response

        Raises:
            NotFoundError: Unknown survey
            ClosedSurveyError: Survey no longer accepts responses
            ValidationError: Answers don't exactly cover the required
                questions, or a value breaks its question's constraint
        """
        record = self._record(survey_id)
        survey = record.survey
        if not survey.is_active:
            raise ClosedSurveyError(f"Survey {survey_id} is closed")

        # Questions are immutable, so answers can be checked outside the lock
        response_id = _new_id()
        stored_answers = self._build_answers(survey, response_id, answers)

        with record.lock:
            if not survey.is_active:
                raise ClosedSurveyError(f"Survey {survey_id} is closed")
            response = Response(
                id=response_id,
                survey_id=survey_id,
                sequence=len(record.responses) + 1,
                submitted_at=utc_now(),
                answers=stored_answers,
            )
            record.responses.append(response)
            survey.response_count += 1
            if survey.response_count == survey.min_responses:
                self._on_threshold_reached(survey)

        logger.debug("Recorded response #%d for survey %s", response.sequence, survey_id)
        return response

    def _on_threshold_reached(self, survey: Survey) -> None:
        logger.info("Survey %s reached its threshold of %d responses", survey.id, survey.min_responses)
        with self._registry_lock:
            user = self._users.get(survey.owner_id)
            if user is not None:
                gamification.award_points(user, self.config.points_results_unlocked, self.config)
                gamification.grant_badge(user, "first_results")

    # =========================================================================
    # VISIBILITY
    # =========================================================================

    def can_view_results(self, survey_id: str) -> bool:
        record = self._record(survey_id)
        with record.lock:
            return record.survey.can_view_results

    def _visible_responses(self, record: _SurveyRecord) -> Tuple[Response, ...]:
        # Caller holds the survey lock
        survey = record.survey
        if not survey.can_view_results:
            raise PreconditionError(
                f"Survey {survey.id} has {survey.response_count} of "
                f"{survey.min_responses} responses needed to view results"
            )
        return tuple(record.responses)

    def get_responses(self, survey_id: str) -> Tuple[Response, ...]:
        """
        Owner read of all stored responses.

        Raises:
            PreconditionError: If the anonymity threshold is not reached
        """
        record = self._record(survey_id)
        with record.lock:
            return self._visible_responses(record)

    def results(self, survey_id: str) -> SurveyResults:
        """Aggregated results, available only once the threshold is reached."""
        record = self._record(survey_id)
        with record.lock:
            responses = self._visible_responses(record)
        return aggregate_results(record.survey, responses)

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def attach_summary(self, survey_id: str, summary: SurveySummary) -> None:
        """
        Attach the write-once summary.

        Raises:
            NotFoundError: Unknown survey
            PreconditionError: Threshold not reached yet
            ConflictError: A summary is already attached
            ValidationError: Summary is for another survey or its score is
                outside [-1.0, 1.0]
        """
        record = self._record(survey_id)
        with record.lock:
            survey = record.survey
            if not survey.can_view_results:
                raise PreconditionError(
                    f"Summary for survey {survey_id} refused before the anonymity threshold is met"
                )
            if survey.summary is not None:
                raise ConflictError(f"Survey {survey_id} already has a summary")
            if summary.survey_id != survey_id:
                raise ValidationError(f"Summary belongs to survey {summary.survey_id}, not {survey_id}")
            if not -1.0 <= summary.sentiment_score <= 1.0:
                raise ValidationError("Sentiment score must be within [-1.0, 1.0]")
            survey.summary = summary

        logger.info("Attached summary %s to survey %s", summary.id, survey_id)

    def summarize(self, survey_id: str, summarizer: Summarizer) -> SurveySummary:
        """
        Ask the summarization collaborator for a summary and attach it.

        The collaborator is only called once results are visible and no
        summary exists yet.
        """
        record = self._record(survey_id)
        with record.lock:
            responses = self._visible_responses(record)
            if record.survey.summary is not None:
                raise ConflictError(f"Survey {survey_id} already has a summary")
        summary = summarizer.summarize(self._snapshot(record), responses)
        self.attach_summary(survey_id, summary)
        return summary

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close_survey(self, survey_id: str) -> None:
        """Stop accepting responses. Closing a closed survey is a no-op."""
        record = self._record(survey_id)
        with record.lock:
            if not record.survey.is_active:
                logger.debug("Survey %s already closed", survey_id)
                return
            record.survey.is_active = False
            state = record.survey.state

        logger.info("Closed survey %s (%s)", survey_id, state.value)


__all__ = ["Summarizer", "SurveyLifecycle"]
