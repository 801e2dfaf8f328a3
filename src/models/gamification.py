"""Gamification models: stats, badges, leaderboard, challenges"""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import date, datetime


class RequirementType(str, Enum):
    """Stat a badge threshold is measured against"""
    COUNT = "count"    # total_items_classified
    STREAK = "streak"  # current_streak
    CO2 = "co2"        # total_co2_saved (kg)


class BadgeCategory(str, Enum):
    CLASSIFICATION = "classification"
    STREAK = "streak"
    RECYCLING = "recycling"


class LeaderboardPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALL_TIME = "all-time"


class UserStats(BaseModel):
    """Per-user gamification counters"""
    user_id: str
    total_points: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_activity_date: Optional[date] = None
    total_co2_saved: float = Field(default=0, ge=0)
    total_items_classified: int = Field(default=0, ge=0)
    total_items_recycled: int = Field(default=0, ge=0)


class Badge(BaseModel):
    """Badge catalog entry"""
    id: Any  # serial or uuid depending on the deployment
    name: str
    description: str
    icon: str
    category: str
    requirement_type: str
    requirement_value: float
    points_reward: int = 0


class UserBadge(BaseModel):
    """Badge earned by a user"""
    id: Any
    user_id: str
    badge_id: Any
    earned_at: datetime
    badge: Optional[Badge] = None


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    points: int
    username: str = "Anonymous"
    avatar_url: Optional[str] = None
    level: int = 1


class Challenge(BaseModel):
    """Time-boxed community goal"""
    id: Any
    title: str
    description: str
    challenge_type: str
    goal_type: str
    goal_value: float
    points_reward: int = 0
    start_date: datetime
    end_date: datetime
    is_active: bool = True


class UserChallenge(BaseModel):
    id: Any
    user_id: str
    challenge_id: Any
    current_progress: float = 0
    completed: bool = False
    completed_at: Optional[datetime] = None
    challenge: Optional[Challenge] = None
