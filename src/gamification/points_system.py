"""
Points and Leveling System

Points are awarded per classification event:
- 10 points per detected item
- +20 bonus when a single photo contains more than one item

Levels are flat: every 100 points is one level, starting at level 1.
Badge rewards are shown on the badge but are not added to the points total.
"""

from typing import Dict
from datetime import date
import logging

from pydantic import BaseModel

from src.models.classification import EnhancedClassificationResult
from src.models.gamification import UserStats
from src.gamification.streak_system import calculate_streak

logger = logging.getLogger(__name__)

POINTS_PER_ITEM = 10
MULTI_ITEM_BONUS = 20
POINTS_PER_LEVEL = 100


class StatsUpdate(BaseModel):
    """Result of applying one classification event to a user's stats"""
    stats: UserStats
    points_earned: int
    leveled_up: bool = False
    recyclable_items: int = 0


def calculate_points_earned(items_detected: int) -> int:
    """
    Points for one classification event

    >>> calculate_points_earned(1)
    10
    >>> calculate_points_earned(3)
    50
    """
    items = max(int(items_detected), 0)
    points = items * POINTS_PER_ITEM
    if items > 1:
        points += MULTI_ITEM_BONUS
    return points


def calculate_level(total_points: int) -> int:
    """Level 1 at 0-99 points, level 2 at 100-199, ..."""
    return max(int(total_points), 0) // POINTS_PER_LEVEL + 1


def points_for_next_level(level: int) -> int:
    """Total points at which `level` ends"""
    return level * POINTS_PER_LEVEL


def level_progress(total_points: int) -> Dict[str, int]:
    """
    Progress within the current level

    Returns:
        {
            'level': int,
            'points_in_level': int,
            'points_to_next_level': int,
            'next_level_at': int
        }
    """
    level = calculate_level(total_points)
    next_level_at = points_for_next_level(level)
    return {
        "level": level,
        "points_in_level": total_points - (level - 1) * POINTS_PER_LEVEL,
        "points_to_next_level": next_level_at - total_points,
        "next_level_at": next_level_at,
    }


def apply_classification(
    prior_stats: UserStats,
    result: EnhancedClassificationResult,
    today: date,
) -> StatsUpdate:
    """
    Fold one multi-item classification into the user's aggregate stats

    Args:
        prior_stats: Current stats (a fresh UserStats for first-time users)
        result: Normalized enhanced classification
        today: Activity date, injected for testability

    Returns:
        StatsUpdate with the new stats; prior_stats is not modified
    """
    points_earned = calculate_points_earned(result.items_detected)
    total_points = prior_stats.total_points + points_earned
    level = calculate_level(total_points)

    current_streak, activity_date = calculate_streak(
        prior_stats.current_streak,
        prior_stats.last_activity_date,
        today,
    )
    recyclable_items = result.recyclable_count

    stats = prior_stats.model_copy(
        update={
            "total_points": total_points,
            "level": level,
            "current_streak": current_streak,
            "longest_streak": max(prior_stats.longest_streak, current_streak),
            "last_activity_date": activity_date,
            "total_co2_saved": prior_stats.total_co2_saved + result.carbon_impact,
            "total_items_classified": prior_stats.total_items_classified + result.items_detected,
            "total_items_recycled": prior_stats.total_items_recycled + recyclable_items,
        }
    )

    leveled_up = level > prior_stats.level
    if leveled_up:
        logger.info(f"User {prior_stats.user_id} leveled up from {prior_stats.level} to {level}")

    return StatsUpdate(
        stats=stats,
        points_earned=points_earned,
        leveled_up=leveled_up,
        recyclable_items=recyclable_items,
    )
