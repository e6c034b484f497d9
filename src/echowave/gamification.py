"""
Points, levels, streaks and badges for survey owners.

Levels follow points: every `points_per_level` points is one level,
starting at level 1. Streaks count consecutive days with activity.
"""

from datetime import date, timedelta
from typing import Optional

from echowave.config import LifecycleConfig
from echowave.model import Badge, User, utc_now


BADGES = {
    "first_survey": ("First Survey", "Created your first survey", "doc.badge.plus"),
    "first_results": ("Results Unlocked", "A survey reached its anonymity threshold", "lock.open.fill"),
    "week_streak": ("On Fire", "7 day streak", "flame.fill"),
}


def level_for_points(points: int, points_per_level: int) -> int:
    return points // points_per_level + 1


def points_to_next_level(user: User, config: LifecycleConfig) -> int:
    return user.level * config.points_per_level - user.points


def award_points(user: User, points: int, config: LifecycleConfig) -> bool:
    """
    Add points to a user and recompute their level.

    Returns:
        True if the user levelled up
    """
    if points < 0:
        raise ValueError("Points awarded must not be negative")
    previous = user.level
    user.points += points
    user.level = level_for_points(user.points, config.points_per_level)
    return user.level > previous


def grant_badge(user: User, badge_id: str) -> Optional[Badge]:
    """Grant a badge once. Returns the new Badge, or None if already held."""
    if user.has_badge(badge_id):
        return None
    name, description, icon = BADGES[badge_id]
    badge = Badge(id=badge_id, name=name, description=description, icon_name=icon, earned_at=utc_now())
    user.badges.append(badge)
    return badge


def record_activity(user: User, day: date) -> int:
    """
    Update the user's streak for activity on `day`.

    Same day: unchanged. Next day: streak + 1. Any gap: restart at 1.
    Activity dated before the last active day is ignored.
    """
    last = user.last_active_on
    if last is None or day - last > timedelta(days=1):
        user.streak_days = 1
    elif day - last == timedelta(days=1):
        user.streak_days += 1
    else:
        return user.streak_days

    user.last_active_on = day
    if user.streak_days >= 7:
        grant_badge(user, "week_streak")
    return user.streak_days


__all__ = [
    "BADGES",
    "level_for_points",
    "points_to_next_level",
    "award_points",
    "grant_badge",
    "record_activity",
]
