"""
Input validation for survey creation and response submission.

Every check here is read-only: it reports problems as strings and never
touches stored state. The lifecycle collects the problems and raises a
single ValidationError before any mutation.
"""

import re
from typing import Any, List, Optional

from echowave.config import LifecycleConfig
from echowave.model import Question, QuestionDraft, QuestionType


YES_NO_VALUES = ("yes", "no")

# Product rule: every survey carries 3 to 10 questions
MIN_QUESTIONS = 3
MAX_QUESTIONS = 10

# Widest rating scale; results list every value on the scale
MAX_RATING_SPAN = 100

_RATING_RE = re.compile(r"-?[0-9]+")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _clean_choices(choices: Optional[List[str]]) -> List[str]:
    return [c.strip() for c in (choices or []) if isinstance(c, str) and c.strip()]


def validate_title(title: Optional[str], config: LifecycleConfig) -> List[str]:
    if title is not None and not isinstance(title, str):
        return ["Survey title must be a string"]
    stripped = (title or "").strip()
    if not stripped:
        return ["Survey title must not be empty"]
    if len(stripped) < config.min_title_length:
        return [f"Survey title must be at least {config.min_title_length} characters"]
    return []


def validate_question_count(count: int) -> List[str]:
    if count < MIN_QUESTIONS or count > MAX_QUESTIONS:
        return [f"A survey needs between {MIN_QUESTIONS} and {MAX_QUESTIONS} questions, got {count}"]
    return []


def validate_min_responses(min_responses: int) -> List[str]:
    if not _is_int(min_responses):
        return ["Minimum responses must be an integer"]
    if min_responses <= 0:
        return ["Minimum responses must be greater than zero"]
    return []


def validate_question(draft: QuestionDraft, position: Optional[int] = None) -> List[str]:
    """
    Check a question draft against its type-specific rules.

    Rules:
        - prompt must be a non-blank string
        - multiple choice needs a list of strings, at least 2 of them non-empty
        - rating needs integer bounds with min_value < max_value, at most
          MAX_RATING_SPAN apart

    Args:
        draft: Question draft to check
        position: Optional index used to prefix problems ("Question 2: ...")

    Returns:
        List of problems (empty if valid)
    """
    prefix = f"Question {position + 1}: " if position is not None else ""
    problems = []

    if not isinstance(draft.type, QuestionType):
        return [f"{prefix}unknown question type {draft.type!r}"]

    if not isinstance(draft.prompt, str):
        problems.append(f"{prefix}prompt must be a string")
    elif not draft.prompt.strip():
        problems.append(f"{prefix}prompt must not be empty")

    if draft.type == QuestionType.MULTIPLE_CHOICE:
        choices = draft.choices
        if choices is not None and (
            not isinstance(choices, (list, tuple)) or not all(isinstance(c, str) for c in choices)
        ):
            problems.append(f"{prefix}choices must be a list of strings")
        elif len(_clean_choices(choices)) < 2:
            problems.append(f"{prefix}multiple choice needs at least 2 non-empty choices")

    elif draft.type == QuestionType.RATING:
        if draft.min_value is None or draft.max_value is None:
            problems.append(f"{prefix}rating needs both min_value and max_value")
        elif not _is_int(draft.min_value) or not _is_int(draft.max_value):
            problems.append(f"{prefix}rating bounds must be integers")
        elif draft.min_value >= draft.max_value:
            problems.append(
                f"{prefix}rating min_value ({draft.min_value}) must be below max_value ({draft.max_value})"
            )
        elif draft.max_value - draft.min_value > MAX_RATING_SPAN:
            problems.append(f"{prefix}rating scale may span at most {MAX_RATING_SPAN} points")

    return problems


def normalize_question(draft: QuestionDraft) -> QuestionDraft:
    """
    Drop fields that don't apply to the draft's type.

    Choices are trimmed and empty entries removed; rating bounds and
    labels are kept only for rating questions.
    """
    is_choice = draft.type == QuestionType.MULTIPLE_CHOICE
    is_rating = draft.type == QuestionType.RATING
    return QuestionDraft(
        type=draft.type,
        prompt=draft.prompt.strip(),
        choices=_clean_choices(draft.choices) if is_choice else None,
        min_value=draft.min_value if is_rating else None,
        max_value=draft.max_value if is_rating else None,
        min_label=(draft.min_label or None) if is_rating else None,
        max_label=(draft.max_label or None) if is_rating else None,
        is_required=draft.is_required,
    )


def validate_answer(question: Question, value: Optional[str]) -> Optional[str]:
    """
    Check a single answer value against its question.

    Returns:
        A problem description, or None if the value is acceptable
    """
    if not isinstance(value, str):
        return f"Answer to question {question.id} must be a string"

    if question.type == QuestionType.MULTIPLE_CHOICE:
        if value not in (question.choices or ()):
            return f"Answer to question {question.id} is not one of its choices"

    elif question.type == QuestionType.RATING:
        stripped = value.strip()
        if not _RATING_RE.fullmatch(stripped):
            return f"Answer to question {question.id} must be an integer rating"
        rating = int(stripped)
        if not question.min_value <= rating <= question.max_value:
            return (
                f"Rating for question {question.id} must be between "
                f"{question.min_value} and {question.max_value}"
            )

    elif question.type == QuestionType.YES_NO:
        if value not in YES_NO_VALUES:
            return f"Answer to question {question.id} must be 'yes' or 'no'"

    elif question.type == QuestionType.TEXT:
        if not value.strip():
            return f"Answer to question {question.id} must not be blank"

    return None


__all__ = [
    "YES_NO_VALUES",
    "MIN_QUESTIONS",
    "MAX_QUESTIONS",
    "MAX_RATING_SPAN",
    "validate_title",
    "validate_question_count",
    "validate_min_responses",
    "validate_question",
    "normalize_question",
    "validate_answer",
]
