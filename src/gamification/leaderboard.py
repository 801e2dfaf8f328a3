"""Leaderboard periods and ranking"""
import logging
from datetime import datetime, timedelta
from typing import List

from src.models.gamification import LeaderboardEntry, LeaderboardPeriod

logger = logging.getLogger(__name__)


def period_start(period: LeaderboardPeriod, now: datetime) -> datetime:
    """
    Start of the current leaderboard period

    - daily: today at 00:00
    - weekly: the most recent Sunday at 00:00
    - monthly: the first of the month at 00:00
    """
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period == LeaderboardPeriod.DAILY:
        return midnight
    if period == LeaderboardPeriod.WEEKLY:
        # weekday(): Monday=0 ... Sunday=6
        days_since_sunday = (midnight.weekday() + 1) % 7
        return midnight - timedelta(days=days_since_sunday)
    if period == LeaderboardPeriod.MONTHLY:
        return midnight.replace(day=1)
    raise ValueError(f"No period start for {period}")


def rank_all_time(rows: List[dict]) -> List[LeaderboardEntry]:
    """Turn user_stats rows (already ordered by points) into ranked entries"""
    return [
        LeaderboardEntry(
            rank=index + 1,
            user_id=row["user_id"],
            points=row["total_points"],
            level=row.get("level") or 1,
            username=row.get("username") or "Anonymous",
            avatar_url=row.get("avatar_url"),
        )
        for index, row in enumerate(rows)
    ]


def rank_period(rows: List[dict]) -> List[LeaderboardEntry]:
    """Turn precomputed leaderboard_entries rows into entries"""
    return [
        LeaderboardEntry(
            rank=row.get("rank") or index + 1,
            user_id=row["user_id"],
            points=row["points"],
            username=row.get("username") or "Anonymous",
            avatar_url=row.get("avatar_url"),
        )
        for index, row in enumerate(rows)
    ]
