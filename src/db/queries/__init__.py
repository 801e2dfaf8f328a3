"""
Database queries - Re-export all functions.

All imports like 'from src.db.queries import save_classification'
resolve here.

Module organization:
- classifications.py: Waste classification history
- pickups.py: Pickup scheduling requests
- gamification.py: User stats, badges, leaderboard, challenges
"""

# Classification history
from src.db.queries.classifications import (
    save_classification,
    get_user_classifications,
    count_user_classifications,
)

# Pickup requests
from src.db.queries.pickups import (
    create_pickup_request,
    get_user_pickup_requests,
    get_pickup_requests_by_status,
)

# Gamification operations
from src.db.queries.gamification import (
    get_user_stats,
    upsert_user_stats,
    get_all_badges,
    get_earned_badge_ids,
    award_user_badge,
    get_user_badges,
    get_all_time_leaderboard,
    get_period_leaderboard,
    get_active_challenges,
    get_user_challenges,
)

# Re-export for 'from src.db import queries' pattern
__all__ = [
    # Classifications (3 functions)
    "save_classification",
    "get_user_classifications",
    "count_user_classifications",

    # Pickups (3 functions)
    "create_pickup_request",
    "get_user_pickup_requests",
    "get_pickup_requests_by_status",

    # Gamification (10 functions)
    "get_user_stats",
    "upsert_user_stats",
    "get_all_badges",
    "get_earned_badge_ids",
    "award_user_badge",
    "get_user_badges",
    "get_all_time_leaderboard",
    "get_period_leaderboard",
    "get_active_challenges",
    "get_user_challenges",
]
