"""
Badge System

Badges are one-time awards unlocked when a cumulative stat first reaches
a threshold. Each catalog entry carries a single requirement:
- count: total items classified
- streak: current daily streak
- co2: total kg of CO2 saved

Features:
- Pure evaluation against already-updated stats
- Progress tracking for locked badges
"""

from typing import Iterable, List, Optional
import logging

from src.models.gamification import Badge, RequirementType, UserStats

logger = logging.getLogger(__name__)


def stat_for_requirement(requirement_type: str, stats: UserStats) -> Optional[float]:
    """
    Stat value a requirement type is measured against

    Returns:
        The stat value, or None for an unrecognised requirement type
    """
    if requirement_type == RequirementType.COUNT.value:
        return stats.total_items_classified
    if requirement_type == RequirementType.STREAK.value:
        return stats.current_streak
    if requirement_type == RequirementType.CO2.value:
        return stats.total_co2_saved
    return None


def is_badge_earned(badge: Badge, stats: UserStats) -> bool:
    value = stat_for_requirement(badge.requirement_type, stats)
    if value is None:
        return False
    return value >= badge.requirement_value


def find_newly_earned_badges(
    catalog: Iterable[Badge],
    earned_ids: Iterable,
    stats: UserStats,
) -> List[Badge]:
    """
    Badges whose requirement is met and that the user does not hold yet

    Several badges may be returned for one event (e.g. 10 items crosses
    both "First Steps" and "Getting Started" for a user who had none).

    Args:
        catalog: Full badge catalog
        earned_ids: Ids of badges the user already holds
        stats: Stats after the current event has been applied

    Returns:
        Newly earned badges in catalog order
    """
    earned = set(earned_ids)
    newly_earned = []

    for badge in catalog:
        if badge.id in earned:
            continue
        if is_badge_earned(badge, stats):
            newly_earned.append(badge)

    return newly_earned
