"""
Serialization helpers for survey objects (Survey, Response, SurveySummary).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
Datetimes are written as ISO-8601 strings, enums as their values.
This module intentionally keeps serialization structure stable and explicit.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict

import yaml

from echowave.model import (
    ActionableInsight,
    Answer,
    Priority,
    Question,
    QuestionType,
    Response,
    Sentiment,
    Survey,
    SurveySummary,
    SurveyTemplateType,
)


def _dt_to_str(dt: datetime) -> str:
    return dt.isoformat()


def _dt_from_str(s: str) -> datetime:
    return datetime.fromisoformat(s)


def _tuple_or_none(values: Any) -> Any:
    return tuple(values) if values is not None else None


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "survey_id": q.survey_id,
        "order": q.order,
        "type": q.type.value,
        "prompt": q.prompt,
        "is_required": q.is_required,
        "choices": list(q.choices) if q.choices is not None else None,
        "min_value": q.min_value,
        "max_value": q.max_value,
        "min_label": q.min_label,
        "max_label": q.max_label,
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    return Question(
        id=d["id"],
        survey_id=d["survey_id"],
        order=d["order"],
        type=QuestionType(d["type"]),
        prompt=d.get("prompt", ""),
        is_required=d.get("is_required", True),
        choices=_tuple_or_none(d.get("choices")),
        min_value=d.get("min_value"),
        max_value=d.get("max_value"),
        min_label=d.get("min_label"),
        max_label=d.get("max_label"),
    )


def answer_to_dict(a: Answer) -> Dict[str, Any]:
    return {"id": a.id, "response_id": a.response_id, "question_id": a.question_id, "value": a.value}


def answer_from_dict(d: Dict[str, Any]) -> Answer:
    return Answer(id=d["id"], response_id=d["response_id"], question_id=d["question_id"], value=d["value"])


def response_to_dict(r: Response) -> Dict[str, Any]:
    return {
        "id": r.id,
        "survey_id": r.survey_id,
        "sequence": r.sequence,
        "submitted_at": _dt_to_str(r.submitted_at),
        "answers": [answer_to_dict(a) for a in r.answers],
    }


def response_from_dict(d: Dict[str, Any]) -> Response:
    return Response(
        id=d["id"],
        survey_id=d["survey_id"],
        sequence=d["sequence"],
        submitted_at=_dt_from_str(d["submitted_at"]),
        answers=tuple(answer_from_dict(a) for a in d.get("answers", [])),
    )


def insight_to_dict(i: ActionableInsight) -> Dict[str, Any]:
    return {
        "id": i.id,
        "title": i.title,
        "description": i.description,
        "priority": i.priority.value,
        "category": i.category,
    }


def insight_from_dict(d: Dict[str, Any]) -> ActionableInsight:
    return ActionableInsight(
        id=d["id"],
        title=d["title"],
        description=d.get("description", ""),
        priority=Priority(d["priority"]),
        category=d.get("category", ""),
    )


def summary_to_dict(s: SurveySummary | None) -> Dict[str, Any] | None:
    if s is None:
        return None
    return {
        "id": s.id,
        "survey_id": s.survey_id,
        "model_name": s.model_name,
        "created_at": _dt_to_str(s.created_at),
        "overall_sentiment": s.overall_sentiment.value,
        "sentiment_score": s.sentiment_score,
        "strengths": list(s.strengths),
        "opportunities": list(s.opportunities),
        "key_themes": list(s.key_themes),
        "actionable_insights": [insight_to_dict(i) for i in s.actionable_insights],
        "raw_summary": s.raw_summary,
    }


def summary_from_dict(d: Dict[str, Any] | None) -> SurveySummary | None:
    if d is None:
        return None
    return SurveySummary(
        id=d["id"],
        survey_id=d["survey_id"],
        model_name=d.get("model_name", ""),
        created_at=_dt_from_str(d["created_at"]),
        overall_sentiment=Sentiment(d["overall_sentiment"]),
        sentiment_score=float(d["sentiment_score"]),
        strengths=tuple(d.get("strengths", [])),
        opportunities=tuple(d.get("opportunities", [])),
        key_themes=tuple(d.get("key_themes", [])),
        actionable_insights=tuple(insight_from_dict(i) for i in d.get("actionable_insights", [])),
        raw_summary=d.get("raw_summary", ""),
    )


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "id": s.id,
        "owner_id": s.owner_id,
        "template_type": s.template_type.value,
        "min_responses": s.min_responses,
        "url_token": s.url_token,
        "created_at": _dt_to_str(s.created_at),
        "title": s.title,
        "description": s.description,
        "questions": [question_to_dict(q) for q in s.questions],
        "response_count": s.response_count,
        "is_active": s.is_active,
        "summary": summary_to_dict(s.summary),
    }


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    return Survey(
        id=d["id"],
        owner_id=d["owner_id"],
        template_type=SurveyTemplateType(d["template_type"]),
        min_responses=d["min_responses"],
        url_token=d["url_token"],
        created_at=_dt_from_str(d["created_at"]),
        title=d.get("title", ""),
        description=d.get("description"),
        questions=tuple(question_from_dict(q) for q in d.get("questions", [])),
        response_count=d.get("response_count", 0),
        is_active=d.get("is_active", True),
        summary=summary_from_dict(d.get("summary")),
    )


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_from_json(s: str) -> Survey:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s))


def survey_from_yaml(s: str) -> Survey:
    d = yaml.safe_load(s)
    return survey_from_dict(d)


def response_to_json(r: Response) -> str:
    return json.dumps(response_to_dict(r), sort_keys=True)


def response_from_json(s: str) -> Response:
    return response_from_dict(json.loads(s))
