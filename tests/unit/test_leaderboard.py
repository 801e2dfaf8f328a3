"""Unit tests for leaderboards and dashboards (src/gamification/leaderboard.py, dashboards.py)"""
import pytest
from datetime import datetime

from src.gamification.dashboards import (
    calculate_rank,
    carbon_equivalents,
    dashboard_summary,
)
from src.gamification.leaderboard import period_start, rank_all_time, rank_period
from src.models.gamification import LeaderboardPeriod, UserStats

# Wednesday
NOW = datetime(2024, 6, 12, 15, 30, 45)


# ============================================================================
# Period Starts
# ============================================================================

def test_daily_period_starts_at_midnight():
    assert period_start(LeaderboardPeriod.DAILY, NOW) == datetime(2024, 6, 12)


def test_weekly_period_starts_on_sunday():
    assert period_start(LeaderboardPeriod.WEEKLY, NOW) == datetime(2024, 6, 9)


def test_weekly_period_on_a_sunday_is_that_day():
    assert period_start(LeaderboardPeriod.WEEKLY, datetime(2024, 6, 9, 8, 0)) == datetime(2024, 6, 9)


def test_weekly_period_on_a_saturday():
    assert period_start(LeaderboardPeriod.WEEKLY, datetime(2024, 6, 15, 23, 0)) == datetime(2024, 6, 9)


def test_monthly_period_starts_on_the_first():
    assert period_start(LeaderboardPeriod.MONTHLY, NOW) == datetime(2024, 6, 1)


def test_all_time_has_no_period_start():
    with pytest.raises(ValueError):
        period_start(LeaderboardPeriod.ALL_TIME, NOW)


# ============================================================================
# Ranking
# ============================================================================

def test_rank_all_time_numbers_rows_in_order():
    rows = [
        {"user_id": "a", "total_points": 500, "level": 6, "username": "ana", "avatar_url": None},
        {"user_id": "b", "total_points": 300, "level": 4, "username": None, "avatar_url": None},
    ]

    entries = rank_all_time(rows)

    assert [(e.rank, e.user_id, e.points) for e in entries] == [(1, "a", 500), (2, "b", 300)]
    assert entries[0].username == "ana"
    assert entries[1].username == "Anonymous"
    assert entries[0].level == 6


def test_rank_period_uses_stored_rank():
    rows = [
        {"user_id": "a", "points": 80, "rank": 1, "username": "ana"},
        {"user_id": "c", "points": 80, "rank": 1, "username": "cy"},
        {"user_id": "b", "points": 40, "rank": 3},
    ]

    entries = rank_period(rows)

    assert [e.rank for e in entries] == [1, 1, 3]
    assert entries[2].username == "Anonymous"


def test_rank_empty():
    assert rank_all_time([]) == []


# ============================================================================
# Dashboards
# ============================================================================

@pytest.mark.parametrize("points,title", [
    (0, "Beginner"),
    (99, "Beginner"),
    (100, "Eco Explorer"),
    (999, "Recycling Hero"),
    (2500, "Sustainability Champion"),
    (9999, "Earth Protector"),
    (10000, "Eco Legend"),
])
def test_calculate_rank(points, title):
    assert calculate_rank(points) == title


def test_carbon_equivalents():
    stats = UserStats(user_id="u", total_co2_saved=42, total_items_recycled=15)

    assert carbon_equivalents(stats) == {
        "trees": 2,
        "miles_not_driven": 102,
        "water_bottles_saved": 10,
    }


def test_dashboard_summary_with_stats():
    pickups = [{"status": "pending"}, {"status": "pending"}, {"status": "completed"}, {"status": "cancelled"}]
    stats = UserStats(user_id="u", total_points=150, level=2, total_co2_saved=21)

    summary = dashboard_summary(pickups, 12, stats)

    assert summary["total_pickups"] == 4
    assert summary["pending_pickups"] == 2
    assert summary["completed_pickups"] == 1
    assert summary["total_classifications"] == 12
    assert summary["rank"] == "Eco Explorer"
    assert summary["level_progress"]["points_to_next_level"] == 50
    assert summary["carbon_equivalents"]["trees"] == 1
    assert summary["stats"]["total_points"] == 150


def test_dashboard_summary_without_activity():
    summary = dashboard_summary([], 0, None)

    assert summary["total_pickups"] == 0
    assert summary["stats"] is None
    assert summary["rank"] == "Beginner"
    assert summary["level_progress"]["level"] == 1
    assert summary["carbon_equivalents"] == {"trees": 0, "miles_not_driven": 0, "water_bottles_saved": 0}


def test_carbon_equivalents_ignores_non_finite_total():
    stats = UserStats(user_id="u", total_co2_saved=float("inf"), total_items_recycled=3)

    assert carbon_equivalents(stats) == {
        "trees": 0,
        "miles_not_driven": 0,
        "water_bottles_saved": 2,
    }
