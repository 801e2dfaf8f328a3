"""
Daily Classification Streak

A streak counts consecutive calendar days with at least one classification.

Rules:
- No previous activity: streak starts at 1
- Previous activity yesterday: streak + 1
- Previous activity today: unchanged
- Gap of two or more days: reset to 1
"""

from typing import Optional, Tuple
from datetime import date, datetime, timedelta
import logging

logger = logging.getLogger(__name__)

STREAK_MILESTONES = (3, 7, 14, 30, 100)


def calculate_streak(
    current_streak: int,
    last_activity_date: Optional[date],
    today: date,
) -> Tuple[int, date]:
    """
    Compute the streak after an activity on `today`

    Args:
        current_streak: Streak stored before this activity
        last_activity_date: Date of the previous activity, None if never active
        today: Date of this activity

    Returns:
        (new_streak, new_last_activity_date)
    """
    if isinstance(last_activity_date, datetime):
        last_activity_date = last_activity_date.date()

    # First activity
    if last_activity_date is None:
        return 1, today

    # Same day, or a stored date ahead of the server clock
    if last_activity_date >= today:
        return max(current_streak, 1), last_activity_date

    # Consecutive day
    if last_activity_date == today - timedelta(days=1):
        return current_streak + 1, today

    # Gap
    gap_days = (today - last_activity_date).days
    logger.debug(f"Streak reset after {gap_days} day gap (was {current_streak})")
    return 1, today


def is_milestone(streak: int) -> bool:
    return streak in STREAK_MILESTONES
