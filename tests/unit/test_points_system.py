"""Unit tests for points and levels (src/gamification/points_system.py)"""
import pytest
from datetime import date, timedelta

from src.gamification.points_system import (
    apply_classification,
    calculate_level,
    calculate_points_earned,
    level_progress,
    points_for_next_level,
)
from src.models.gamification import UserStats


@pytest.mark.parametrize("items,expected", [
    (0, 0),
    (1, 10),
    (2, 40),
    (3, 50),
    (5, 70),
])
def test_calculate_points_earned(items, expected):
    assert calculate_points_earned(items) == expected


@pytest.mark.parametrize("points,expected", [
    (0, 1),
    (99, 1),
    (100, 2),
    (250, 3),
    (1000, 11),
])
def test_calculate_level(points, expected):
    assert calculate_level(points) == expected


def test_points_for_next_level():
    assert points_for_next_level(1) == 100
    assert points_for_next_level(4) == 400


def test_level_progress():
    assert level_progress(250) == {
        "level": 3,
        "points_in_level": 50,
        "points_to_next_level": 50,
        "next_level_at": 300,
    }


def test_level_progress_at_boundary():
    progress = level_progress(100)
    assert progress["level"] == 2
    assert progress["points_in_level"] == 0
    assert progress["points_to_next_level"] == 100


# ============================================================================
# Applying Classifications
# ============================================================================

def test_first_classification_for_new_user(user_stats, today, enhanced_result_factory):
    result = enhanced_result_factory(("recyclable", "organic"), carbon_impact=1.5)

    update = apply_classification(user_stats, result, today)

    assert update.points_earned == 40
    assert update.recyclable_items == 1
    assert update.leveled_up is False
    assert update.stats.total_points == 40
    assert update.stats.level == 1
    assert update.stats.current_streak == 1
    assert update.stats.longest_streak == 1
    assert update.stats.last_activity_date == today
    assert update.stats.total_co2_saved == 1.5
    assert update.stats.total_items_classified == 2
    assert update.stats.total_items_recycled == 1


def test_classification_levels_up(today, enhanced_result):
    prior = UserStats(user_id="user-123", total_points=95, level=1)

    update = apply_classification(prior, enhanced_result, today)

    assert update.stats.total_points == 105
    assert update.stats.level == 2
    assert update.leveled_up is True


def test_consecutive_day_extends_streak(today, enhanced_result):
    prior = UserStats(
        user_id="user-123",
        current_streak=4,
        longest_streak=4,
        last_activity_date=today - timedelta(days=1),
    )

    update = apply_classification(prior, enhanced_result, today)

    assert update.stats.current_streak == 5
    assert update.stats.longest_streak == 5


def test_longest_streak_is_kept_after_reset(today, enhanced_result):
    prior = UserStats(
        user_id="user-123",
        current_streak=2,
        longest_streak=9,
        last_activity_date=today - timedelta(days=5),
    )

    update = apply_classification(prior, enhanced_result, today)

    assert update.stats.current_streak == 1
    assert update.stats.longest_streak == 9


def test_prior_stats_are_not_modified(user_stats, today, enhanced_result):
    apply_classification(user_stats, enhanced_result, today)

    assert user_stats.total_points == 0
    assert user_stats.last_activity_date is None


def test_totals_accumulate(today, enhanced_result_factory):
    prior = UserStats(
        user_id="user-123",
        total_points=300,
        level=4,
        total_co2_saved=10.25,
        total_items_classified=30,
        total_items_recycled=20,
        current_streak=1,
        last_activity_date=today,
    )
    result = enhanced_result_factory(("recyclable", "recyclable", "hazardous"), carbon_impact=0.75)

    update = apply_classification(prior, result, today)

    assert update.stats.total_points == 350
    assert update.stats.total_co2_saved == 11.0
    assert update.stats.total_items_classified == 33
    assert update.stats.total_items_recycled == 22
    assert update.stats.current_streak == 1
    assert update.stats.last_activity_date == date(2024, 6, 12)
