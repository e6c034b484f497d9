"""
Template catalog: default questions per survey template.

The catalog is static data in templates.yaml, so adding or editing a
template never touches lifecycle code. Callers always get fresh
QuestionDraft objects they are free to edit.
"""

import os
from functools import lru_cache
from typing import Any, Dict, List

import yaml

from echowave.model import QuestionDraft, QuestionType, SurveyTemplateType


CATALOG_PATH = os.path.join(os.path.dirname(__file__), "templates.yaml")


class TemplateCatalogError(Exception):
    """Raised when the template catalog file is malformed."""
    pass


def _draft_from_dict(d: Dict[str, Any]) -> QuestionDraft:
    try:
        qtype = QuestionType(d["type"])
    except (KeyError, ValueError) as e:
        raise TemplateCatalogError(f"Bad question type in template catalog: {e}")
    return QuestionDraft(
        type=qtype,
        prompt=d.get("prompt", ""),
        choices=list(d["choices"]) if d.get("choices") is not None else None,
        min_value=d.get("min_value"),
        max_value=d.get("max_value"),
        min_label=d.get("min_label"),
        max_label=d.get("max_label"),
        is_required=d.get("is_required", True),
    )


@lru_cache(maxsize=None)
def _load_catalog(path: str = CATALOG_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    missing = [t.value for t in SurveyTemplateType if t.value not in data]
    if missing:
        raise TemplateCatalogError(f"Template catalog is missing: {missing}")
    return data


def template_questions(template: SurveyTemplateType) -> List[QuestionDraft]:
    """
    Default questions for a template.

    Returns:
        New QuestionDraft objects (empty list for CUSTOM)
    """
    entry = _load_catalog()[template.value]
    return [_draft_from_dict(q) for q in entry.get("questions") or []]


def template_description(template: SurveyTemplateType) -> str:
    return _load_catalog()[template.value].get("description", "")


__all__ = ["TemplateCatalogError", "template_questions", "template_description"]
