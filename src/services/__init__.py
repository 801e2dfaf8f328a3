"""
Service Layer Package

This package contains business logic services that separate concerns between
the presentation layer (FastAPI routes) and the data access layer (database queries).

Core Services:
- ClassificationService: Vision classification, history
- GamificationService: Points, streaks, badges, leaderboards, challenges
- PickupService: Pickup validation, pricing, scheduling
"""

from src.services.container import ServiceContainer, get_container, init_container
from src.services.gamification_service import BookkeepingOutcome, GamificationService
from src.services.classification_service import ClassificationService
from src.services.pickup_service import PickupService

__all__ = [
    # Service Layer Container
    "ServiceContainer",
    "get_container",
    "init_container",
    # Services
    "BookkeepingOutcome",
    "ClassificationService",
    "GamificationService",
    "PickupService",
]
