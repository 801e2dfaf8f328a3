"""
Gamification system for Smart Waste

This module implements the recycling motivation layer:
- Points and levels per classification
- Daily classification streaks
- Threshold badges
- Leaderboards and dashboard summaries
"""

from src.gamification.points_system import (
    StatsUpdate,
    apply_classification,
    calculate_level,
    calculate_points_earned,
    points_for_next_level,
)
from src.gamification.streak_system import calculate_streak
from src.gamification.badge_system import find_newly_earned_badges
from src.gamification.dashboards import calculate_rank, carbon_equivalents, dashboard_summary

__all__ = [
    "StatsUpdate",
    "apply_classification",
    "calculate_level",
    "calculate_points_earned",
    "points_for_next_level",
    "calculate_streak",
    "find_newly_earned_badges",
    "calculate_rank",
    "carbon_equivalents",
    "dashboard_summary",
]
