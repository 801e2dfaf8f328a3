"""
GamificationService - Gamification Business Logic

Handles points, streaks, badges, leaderboards and challenges.
Stats bookkeeping after a classification is best-effort: it reports its
result as a BookkeepingOutcome instead of raising.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from src.db import queries
from src.gamification.badge_system import find_newly_earned_badges
from src.gamification.leaderboard import period_start, rank_all_time, rank_period
from src.gamification.points_system import apply_classification
from src.gamification.streak_system import is_milestone
from src.models.classification import EnhancedClassificationResult
from src.models.gamification import (
    Badge,
    Challenge,
    LeaderboardEntry,
    LeaderboardPeriod,
    UserBadge,
    UserChallenge,
    UserStats,
)
from src.observability.metrics import (
    badges_awarded_total,
    bookkeeping_failures_total,
    points_awarded_total,
)

logger = logging.getLogger(__name__)


@dataclass
class BookkeepingOutcome:
    """Result of a best-effort persistence step"""
    succeeded: bool
    operation: str
    error: Optional[str] = None
    points_earned: int = 0
    badges_awarded: List[str] = field(default_factory=list)


class GamificationService:
    """
    Service for gamification features.

    Responsibilities:
    - Fold classification events into user stats
    - Badge checking and awarding
    - Leaderboard and challenge reads
    """

    def __init__(self, db_connection):
        """
        Initialize GamificationService.

        Args:
            db_connection: Database instance
        """
        self.db = db_connection
        logger.debug("GamificationService initialized")

    async def record_classification(
        self,
        user_id: str,
        result: EnhancedClassificationResult,
        today: Optional[date] = None,
    ) -> BookkeepingOutcome:
        """
        Update stats and award badges after a multi-item classification

        Steps: read stats, apply the event, upsert, then award every badge the
        updated stats qualify for. A failed upsert skips the badge pass.

        Args:
            user_id: Signed-in user
            result: Normalized classification
            today: Activity date (defaults to date.today())

        Returns:
            BookkeepingOutcome; never raises
        """
        today = today or date.today()

        try:
            row = await queries.get_user_stats(user_id)
            prior = UserStats(**row) if row else UserStats(user_id=user_id)
            update = apply_classification(prior, result, today)
            await queries.upsert_user_stats(update.stats.model_dump())
        except Exception as e:
            return self._failed("update_user_stats", user_id, e)

        points_awarded_total.inc(update.points_earned)
        if is_milestone(update.stats.current_streak) and update.stats.current_streak != prior.current_streak:
            logger.info(f"User {user_id} reached a {update.stats.current_streak}-day streak")

        awarded = []
        try:
            catalog = [Badge(**b) for b in await queries.get_all_badges()]
            earned_ids = await queries.get_earned_badge_ids(user_id)

            for badge in find_newly_earned_badges(catalog, earned_ids, update.stats):
                if await queries.award_user_badge(user_id, badge.id):
                    awarded.append(badge.name)
                    badges_awarded_total.labels(requirement_type=badge.requirement_type).inc()
                    logger.info(f"User {user_id} earned badge: {badge.name}")
        except Exception as e:
            outcome = self._failed("award_badges", user_id, e)
            outcome.points_earned = update.points_earned
            outcome.badges_awarded = awarded
            return outcome

        logger.info(
            f"Recorded classification for user {user_id}: +{update.points_earned} points, "
            f"level {update.stats.level}, streak {update.stats.current_streak}"
        )
        return BookkeepingOutcome(
            succeeded=True,
            operation="record_classification",
            points_earned=update.points_earned,
            badges_awarded=awarded,
        )

    def _failed(self, operation: str, user_id: str, error: Exception) -> BookkeepingOutcome:
        logger.error(f"Gamification bookkeeping failed ({operation}) for user {user_id}: {error}", exc_info=True)
        bookkeeping_failures_total.labels(operation=operation).inc()
        return BookkeepingOutcome(succeeded=False, operation=operation, error=str(error))

    # ==========================================
    # Reads
    # ==========================================

    async def get_user_stats(self, user_id: str) -> Optional[UserStats]:
        row = await queries.get_user_stats(user_id)
        return UserStats(**row) if row else None

    async def get_user_badges(self, user_id: str) -> List[UserBadge]:
        """Earned badges with catalog details, newest first"""
        rows = await queries.get_user_badges(user_id)
        return [UserBadge(**row) for row in rows]

    async def get_all_badges(self) -> List[Badge]:
        return [Badge(**row) for row in await queries.get_all_badges()]

    async def get_leaderboard(
        self,
        period: LeaderboardPeriod = LeaderboardPeriod.ALL_TIME,
        limit: int = 10,
        now: Optional[datetime] = None,
    ) -> List[LeaderboardEntry]:
        """
        Top users for a period

        all-time ranks user_stats by total points; daily, weekly and monthly
        read the precomputed leaderboard_entries for the current period.
        """
        if period == LeaderboardPeriod.ALL_TIME:
            return rank_all_time(await queries.get_all_time_leaderboard(limit))

        start = period_start(period, now or datetime.now())
        return rank_period(await queries.get_period_leaderboard(period.value, start, limit))

    async def get_active_challenges(self, now: Optional[datetime] = None) -> List[Challenge]:
        rows = await queries.get_active_challenges(now or datetime.now())
        return [Challenge(**row) for row in rows]

    async def get_user_challenge_progress(self, user_id: str) -> List[UserChallenge]:
        rows = await queries.get_user_challenges(user_id)
        return [UserChallenge(**row) for row in rows]
