"""
Core Survey Model Objects

Defines the data shapes of an anonymous-feedback survey:
    - Users (survey owners, with gamification counters)
    - Surveys (root container, owns its questions)
    - Questions (typed prompts, ordered)
    - Responses and Answers (anonymous submissions)
    - Summaries (opaque, externally produced insights)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering, storage or transport
        - Hold no identity on the response side
        - Are immutable once published, except the Survey counters
        - Represent structure, not lifecycle rules (see lifecycle.py)
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SurveyTemplateType(Enum):
    """Template a survey was created from."""

    INDIVIDUAL = "individual"
    TEAM = "team"
    PRODUCT = "product"
    SERVICE = "service"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _TEMPLATE_DISPLAY_NAMES[self]


_TEMPLATE_DISPLAY_NAMES = {
    SurveyTemplateType.INDIVIDUAL: "Individual Feedback",
    SurveyTemplateType.TEAM: "Team Performance",
    SurveyTemplateType.PRODUCT: "Product Review",
    SurveyTemplateType.SERVICE: "Service Quality",
    SurveyTemplateType.CUSTOM: "Custom Survey",
}


class QuestionType(Enum):
    """
    Question kinds.

    Each kind constrains the shape of its answers:
        MULTIPLE_CHOICE: value must be one of the question's choices
        TEXT:            free text
        RATING:          integer within [min_value, max_value]
        YES_NO:          "yes" or "no"
    """

    MULTIPLE_CHOICE = "multiple_choice"
    TEXT = "text"
    RATING = "rating"
    YES_NO = "yes_no"


class SurveyState(Enum):
    """
    Lifecycle state of a survey.

    Transitions are monotonic:
        OPEN -> OPEN_RESULTS_VISIBLE   (response count reaches threshold)
        OPEN_RESULTS_VISIBLE -> CLOSED
        OPEN -> CLOSED_BELOW_THRESHOLD

    Both closed states are terminal.
    """

    OPEN = "open"
    OPEN_RESULTS_VISIBLE = "open_results_visible"
    CLOSED = "closed"
    CLOSED_BELOW_THRESHOLD = "closed_below_threshold"


class Sentiment(Enum):
    VERY_POSITIVE = "very_positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    VERY_NEGATIVE = "very_negative"


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class QuestionDraft:
    """
    A question as supplied by the survey owner, before publication.

    The lifecycle turns drafts into Questions by assigning an id,
    the owning survey id and a sequential order index.

    Properties:
        type: QuestionType
        prompt: Text shown to respondents
        choices: Options (multiple choice only)
        min_value / max_value: Inclusive bounds (rating only)
        min_label / max_label: Captions for the bounds (rating only)
        is_required: Whether every response must answer it
    """

    type: QuestionType
    prompt: str
    choices: Optional[List[str]] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    min_label: Optional[str] = None
    max_label: Optional[str] = None
    is_required: bool = True


@dataclass(frozen=True)
class Question:
    """
    A published question.

    Belongs to exactly one survey and never changes after publication.
    `order` is the stable position within the survey, starting at 0.
    """

    id: str
    survey_id: str
    order: int
    type: QuestionType
    prompt: str
    is_required: bool = True
    choices: Optional[Tuple[str, ...]] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    min_label: Optional[str] = None
    max_label: Optional[str] = None


@dataclass(frozen=True)
class AnswerDraft:
    """An answer as submitted by a respondent: question id plus raw value."""

    question_id: str
    value: str


@dataclass(frozen=True)
class Answer:
    id: str
    response_id: str
    question_id: str
    value: str


@dataclass(frozen=True)
class Response:
    """
    An anonymous submission to a survey.

    ARCHITECTURAL RULE:
        No identity, address or device information is ever stored here.
        `sequence` is assigned by the store, increasing per survey.
    """

    id: str
    survey_id: str
    sequence: int
    submitted_at: datetime
    answers: Tuple[Answer, ...] = ()

    def get_answer(self, question_id: str) -> Optional[Answer]:
        for answer in self.answers:
            if answer.question_id == question_id:
                return answer
        return None


@dataclass(frozen=True)
class ActionableInsight:
    id: str
    title: str
    description: str
    priority: Priority
    category: str


@dataclass(frozen=True)
class SurveySummary:
    """
    AI-generated insights about a survey's responses.

    Produced by an external summarization collaborator and treated as
    opaque, write-once data.

    Properties:
        sentiment_score: Overall sentiment in [-1.0, 1.0]
        model_name: Name of the model that produced the summary
        raw_summary: Unstructured summary text
    """

    id: str
    survey_id: str
    model_name: str
    created_at: datetime
    overall_sentiment: Sentiment
    sentiment_score: float
    strengths: Tuple[str, ...] = ()
    opportunities: Tuple[str, ...] = ()
    key_themes: Tuple[str, ...] = ()
    actionable_insights: Tuple[ActionableInsight, ...] = ()
    raw_summary: str = ""


@dataclass
class Survey:
    """
    Root container for one survey.

    Owns its questions (same lifetime). Responses are stored beside it,
    keyed by survey id, and never deleted.

    Properties:
        id: Internal identifier (never shown to respondents)
        owner_id: Id of the owning user
        template_type: Template the survey was created from
        min_responses: Anonymity threshold, always > 0
        url_token: Unguessable, URL-safe share token
        response_count: Number of stored responses, only increases
        is_active: False once closed, never reopened
        summary: Attached at most once, after results are visible

    INVARIANTS:
        - response_count >= 0
        - can_view_results <=> response_count >= min_responses
        - questions are ordered by `order`, starting at 0
    """

    id: str
    owner_id: str
    template_type: SurveyTemplateType
    min_responses: int
    url_token: str
    title: str
    description: Optional[str] = None
    questions: Tuple[Question, ...] = ()
    created_at: datetime = field(default_factory=utc_now)
    response_count: int = 0
    is_active: bool = True
    summary: Optional[SurveySummary] = None

    @property
    def can_view_results(self) -> bool:
        return self.response_count >= self.min_responses

    @property
    def state(self) -> SurveyState:
        if self.is_active:
            if self.can_view_results:
                return SurveyState.OPEN_RESULTS_VISIBLE
            return SurveyState.OPEN
        if self.can_view_results:
            return SurveyState.CLOSED
        return SurveyState.CLOSED_BELOW_THRESHOLD

    @property
    def required_question_ids(self) -> List[str]:
        return [q.id for q in self.questions if q.is_required]

    def share_url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/feedback/{self.url_token}"

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Returns:
            Question or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    icon_name: str
    earned_at: datetime


@dataclass
class User:
    """
    A survey owner.

    Surveys are referenced by id only; the lifecycle store owns them.
    Gamification counters are mutated through echowave.gamification.
    """

    id: str
    email: str
    created_at: datetime = field(default_factory=utc_now)
    display_name: Optional[str] = None
    survey_ids: List[str] = field(default_factory=list)
    points: int = 0
    level: int = 1
    streak_days: int = 0
    last_active_on: Optional[date] = None
    badges: List[Badge] = field(default_factory=list)

    def has_badge(self, badge_id: str) -> bool:
        return any(b.id == badge_id for b in self.badges)
