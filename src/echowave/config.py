"""
Lifecycle configuration.

Defaults match the product rules; overrides come from a YAML file:

    min_title_length: 5
    share_base_url: https://echowave.example

Unknown keys are rejected so that typos never pass silently.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

from echowave.errors import ValidationError


@dataclass(frozen=True)
class LifecycleConfig:
    """
    Tunable limits and rewards.

    The 3 to 10 question count is a product rule, not a setting
    (see validation.MIN_QUESTIONS / MAX_QUESTIONS).

    Properties:
        min_title_length: Minimum title length after trimming
        token_bytes: Entropy of share tokens (16 bytes -> 22 URL-safe chars)
        share_base_url: Prefix for public share links
        points_per_level: Points needed per gamification level
        points_survey_created: Points awarded for creating a survey
        points_results_unlocked: Points awarded when a survey reaches its threshold
    """

    min_title_length: int = 3
    token_bytes: int = 16
    share_base_url: str = "http://localhost:3000"
    points_per_level: int = 250
    points_survey_created: int = 50
    points_results_unlocked: int = 100


def config_from_dict(d: Optional[Dict[str, Any]], base: Optional[LifecycleConfig] = None) -> LifecycleConfig:
    base = base or LifecycleConfig()
    if not d:
        return base

    known = {f.name: f for f in fields(LifecycleConfig)}
    unknown = sorted(k for k in d if k not in known)
    if unknown:
        raise ValidationError(f"Unknown configuration keys: {', '.join(unknown)}")

    problems = []
    for key, value in d.items():
        expected = type(getattr(base, key))
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            problems.append(f"{key} must be an integer")
        elif expected is str and not isinstance(value, str):
            problems.append(f"{key} must be a string")
    if problems:
        raise ValidationError("Invalid configuration", problems)

    config = replace(base, **d)
    if config.min_title_length < 1:
        raise ValidationError("min_title_length must be positive")
    if config.points_per_level <= 0:
        raise ValidationError("points_per_level must be positive")
    return config


def load_config(path: str) -> LifecycleConfig:
    """
    Load configuration overrides from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the file holds unknown keys or bad values
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValidationError(f"Configuration file {path} must contain a mapping")
    return config_from_dict(data)


__all__ = ["LifecycleConfig", "config_from_dict", "load_config"]
