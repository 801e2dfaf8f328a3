"""Gamification database queries"""
import logging
from typing import Optional
from datetime import datetime
from src.db.connection import db

logger = logging.getLogger(__name__)

STATS_COLUMNS = """
    user_id, total_points, level, current_streak, longest_streak, last_activity_date,
    total_co2_saved, total_items_classified, total_items_recycled, updated_at
"""

BADGE_COLUMNS = "id, name, description, icon, category, requirement_type, requirement_value, points_reward"


# ==========================================
# User Stats
# ==========================================

async def get_user_stats(user_id: str) -> Optional[dict]:
    """
    Get the user's stats row

    Returns:
        Stats dict, or None if the user has no activity yet
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {STATS_COLUMNS}
                FROM user_stats
                WHERE user_id = %s
                """,
                (user_id,)
            )
            row = await cur.fetchone()
            return dict(row) if row else None


async def upsert_user_stats(stats: dict) -> None:
    """
    Insert or replace the user's stats row (last write wins)

    Args:
        stats: Dict with every UserStats field
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO user_stats (
                    user_id, total_points, level, current_streak, longest_streak, last_activity_date,
                    total_co2_saved, total_items_classified, total_items_recycled, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, CURRENT_TIMESTAMP)
                ON CONFLICT (user_id) DO UPDATE SET
                    total_points = EXCLUDED.total_points,
                    level = EXCLUDED.level,
                    current_streak = EXCLUDED.current_streak,
                    longest_streak = EXCLUDED.longest_streak,
                    last_activity_date = EXCLUDED.last_activity_date,
                    total_co2_saved = EXCLUDED.total_co2_saved,
                    total_items_classified = EXCLUDED.total_items_classified,
                    total_items_recycled = EXCLUDED.total_items_recycled,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    stats['user_id'],
                    stats['total_points'],
                    stats['level'],
                    stats['current_streak'],
                    stats['longest_streak'],
                    stats['last_activity_date'],
                    stats['total_co2_saved'],
                    stats['total_items_classified'],
                    stats['total_items_recycled'],
                )
            )
            await conn.commit()


# ==========================================
# Badges
# ==========================================

async def get_all_badges() -> list[dict]:
    """Get the badge catalog ordered by threshold"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {BADGE_COLUMNS}
                FROM badges
                ORDER BY requirement_value ASC, name
                """
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def get_earned_badge_ids(user_id: str) -> set:
    """Get ids of badges the user already holds"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT badge_id FROM user_badges WHERE user_id = %s",
                (user_id,)
            )
            rows = await cur.fetchall()
            return {row['badge_id'] for row in rows}


async def award_user_badge(user_id: str, badge_id) -> bool:
    """
    Record a badge for the user

    Returns:
        True if newly awarded, False if the user already had it
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO user_badges (user_id, badge_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, badge_id) DO NOTHING
                RETURNING id
                """,
                (user_id, badge_id)
            )
            result = await cur.fetchone()
            await conn.commit()
            return result is not None


async def get_user_badges(user_id: str) -> list[dict]:
    """
    Get the user's earned badges joined with the catalog, newest first

    Returns:
        List of {id, user_id, badge_id, earned_at, badge: {...}}
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT ub.id, ub.user_id, ub.badge_id, ub.earned_at,
                       b.name, b.description, b.icon, b.category,
                       b.requirement_type, b.requirement_value, b.points_reward
                FROM user_badges ub
                JOIN badges b ON b.id = ub.badge_id
                WHERE ub.user_id = %s
                ORDER BY ub.earned_at DESC
                """,
                (user_id,)
            )
            rows = await cur.fetchall()

    return [
        {
            'id': row['id'],
            'user_id': row['user_id'],
            'badge_id': row['badge_id'],
            'earned_at': row['earned_at'],
            'badge': {
                'id': row['badge_id'],
                'name': row['name'],
                'description': row['description'],
                'icon': row['icon'],
                'category': row['category'],
                'requirement_type': row['requirement_type'],
                'requirement_value': row['requirement_value'],
                'points_reward': row['points_reward'],
            },
        }
        for row in rows
    ]


# ==========================================
# Leaderboard
# ==========================================

async def get_all_time_leaderboard(limit: int = 10) -> list[dict]:
    """Top users by total points with their profile names"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT s.user_id, s.total_points, s.level, p.username, p.avatar_url
                FROM user_stats s
                LEFT JOIN profiles p ON p.id::text = s.user_id
                ORDER BY s.total_points DESC
                LIMIT %s
                """,
                (limit,)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def get_period_leaderboard(period: str, period_start: datetime, limit: int = 10) -> list[dict]:
    """Precomputed ranking rows for a daily/weekly/monthly period"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT l.user_id, l.points, l.rank, p.username, p.avatar_url
                FROM leaderboard_entries l
                LEFT JOIN profiles p ON p.id::text = l.user_id
                WHERE l.period = %s AND l.period_start >= %s
                ORDER BY l.rank ASC
                LIMIT %s
                """,
                (period, period_start, limit)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


# ==========================================
# Challenges
# ==========================================

async def get_active_challenges(now: datetime) -> list[dict]:
    """Active challenges running at `now`, ending soonest first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, title, description, challenge_type, goal_type, goal_value,
                       points_reward, start_date, end_date, is_active
                FROM challenges
                WHERE is_active = TRUE AND start_date <= %s AND end_date >= %s
                ORDER BY end_date ASC
                """,
                (now, now)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def get_user_challenges(user_id: str) -> list[dict]:
    """User's challenge progress joined with the challenge, most recently updated first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT uc.id, uc.user_id, uc.challenge_id, uc.current_progress,
                       uc.completed, uc.completed_at,
                       c.title, c.description, c.challenge_type, c.goal_type, c.goal_value,
                       c.points_reward, c.start_date, c.end_date, c.is_active
                FROM user_challenges uc
                JOIN challenges c ON c.id = uc.challenge_id
                WHERE uc.user_id = %s
                ORDER BY uc.updated_at DESC
                """,
                (user_id,)
            )
            rows = await cur.fetchall()

    return [
        {
            'id': row['id'],
            'user_id': row['user_id'],
            'challenge_id': row['challenge_id'],
            'current_progress': row['current_progress'],
            'completed': row['completed'],
            'completed_at': row['completed_at'],
            'challenge': {
                'id': row['challenge_id'],
                'title': row['title'],
                'description': row['description'],
                'challenge_type': row['challenge_type'],
                'goal_type': row['goal_type'],
                'goal_value': row['goal_value'],
                'points_reward': row['points_reward'],
                'start_date': row['start_date'],
                'end_date': row['end_date'],
                'is_active': row['is_active'],
            },
        }
        for row in rows
    ]
