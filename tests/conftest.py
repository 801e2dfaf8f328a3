"""Global test fixtures and utilities for smart-waste tests"""
import os

# Must be set before src.config is imported
os.environ["API_KEYS"] = "test_key_123"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENABLE_SENTRY"] = "false"

import pytest
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

from src.models.classification import (
    ClassificationItem,
    EnhancedClassificationResult,
    ItemWasteType,
)
from src.models.gamification import Badge, UserStats


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with standard query results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """
    Patch the shared pool so `async with db.connection() as conn` and
    `async with conn.cursor() as cur` yield mocks
    """
    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = mock_db_cursor
    conn.commit = AsyncMock()

    with patch('src.db.connection.db.connection') as mock_connection:
        mock_connection.return_value.__aenter__.return_value = conn
        yield conn


# ============================================================================
# User & Domain Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


@pytest.fixture
def today():
    return date(2024, 6, 12)


@pytest.fixture
def badge_catalog():
    """The default badge catalog"""
    rows = [
        (1, "First Steps", "classification", "count", 1, 10),
        (2, "Getting Started", "classification", "count", 10, 50),
        (3, "Eco Warrior", "classification", "count", 50, 200),
        (4, "Streak Starter", "streak", "streak", 3, 30),
        (5, "On Fire", "streak", "streak", 7, 100),
        (6, "Carbon Saver", "recycling", "co2", 10, 100),
    ]
    return [
        Badge(
            id=badge_id,
            name=name,
            description=f"{name} badge",
            icon="🌱",
            category=category,
            requirement_type=requirement_type,
            requirement_value=value,
            points_reward=reward,
        )
        for badge_id, name, category, requirement_type, value, reward in rows
    ]


def make_enhanced_result(waste_types=("recyclable",), carbon_impact=0.5) -> EnhancedClassificationResult:
    """Enhanced classification with one item per waste type"""
    items = [
        ClassificationItem(
            waste_type=ItemWasteType(waste_type),
            confidence=90,
            disposal_instructions="Rinse and place in the recycling bin",
        )
        for waste_type in waste_types
    ]
    return EnhancedClassificationResult(
        items_detected=len(items) or 1,
        items=items,
        explanation="Clean plastic bottle",
        context_tips=["Remove the cap"],
        carbon_impact=carbon_impact,
    )


@pytest.fixture
def enhanced_result():
    return make_enhanced_result()


@pytest.fixture
def user_stats(test_user_id):
    return UserStats(user_id=test_user_id)


def make_pickup_row(user_id: str, pickup: dict) -> dict:
    """Stored pickup_requests row for a validated submission"""
    now = datetime(2024, 6, 12, 9, 0)
    row = {
        "id": uuid4(),
        "user_id": user_id,
        "status": "pending",
        "created_at": now,
        "updated_at": now,
    }
    row.update(pickup)
    return row


@pytest.fixture
def enhanced_result_factory():
    return make_enhanced_result


@pytest.fixture
def pickup_row_factory():
    return make_pickup_row
