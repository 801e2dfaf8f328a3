"""Unit tests for daily classification streaks (src/gamification/streak_system.py)"""
from datetime import date, datetime, timedelta

from src.gamification.streak_system import calculate_streak, is_milestone

TODAY = date(2024, 6, 12)


def test_first_activity_starts_streak():
    assert calculate_streak(0, None, TODAY) == (1, TODAY)


def test_activity_yesterday_extends_streak():
    assert calculate_streak(3, TODAY - timedelta(days=1), TODAY) == (4, TODAY)


def test_same_day_activity_leaves_streak_unchanged():
    assert calculate_streak(3, TODAY, TODAY) == (3, TODAY)


def test_same_day_with_zero_streak_counts_as_one():
    assert calculate_streak(0, TODAY, TODAY) == (1, TODAY)


def test_two_day_gap_resets():
    assert calculate_streak(10, TODAY - timedelta(days=2), TODAY) == (1, TODAY)


def test_long_gap_resets():
    assert calculate_streak(42, TODAY - timedelta(days=90), TODAY) == (1, TODAY)


def test_future_last_activity_is_treated_as_same_day():
    future = TODAY + timedelta(days=1)
    assert calculate_streak(5, future, TODAY) == (5, future)


def test_datetime_last_activity_is_compared_by_date():
    last = datetime(2024, 6, 11, 23, 59)
    assert calculate_streak(2, last, TODAY) == (3, TODAY)


def test_streak_across_month_boundary():
    assert calculate_streak(1, date(2024, 5, 31), date(2024, 6, 1)) == (2, date(2024, 6, 1))


def test_milestones():
    assert is_milestone(3)
    assert is_milestone(7)
    assert is_milestone(30)
    assert not is_milestone(4)
