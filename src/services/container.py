"""
Service Container - Dependency Injection Container

Simple DI container for managing service instances and their dependencies.
Uses lazy loading to only instantiate services when first accessed.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    The database instance is injected.
    """

    # Infrastructure dependencies (injected)
    db: object  # Database instance

    # Services (lazy-loaded via properties)
    _classification_service: Optional[object] = field(default=None, init=False, repr=False)
    _gamification_service: Optional[object] = field(default=None, init=False, repr=False)
    _pickup_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def gamification_service(self):
        """Get GamificationService instance (lazy-loaded)"""
        if self._gamification_service is None:
            from src.services.gamification_service import GamificationService
            self._gamification_service = GamificationService(self.db)
            logger.debug("GamificationService instantiated")
        return self._gamification_service

    @property
    def classification_service(self):
        """Get ClassificationService instance (lazy-loaded)"""
        if self._classification_service is None:
            from src.services.classification_service import ClassificationService
            self._classification_service = ClassificationService(self.db, self.gamification_service)
            logger.debug("ClassificationService instantiated")
        return self._classification_service

    @property
    def pickup_service(self):
        """Get PickupService instance (lazy-loaded)"""
        if self._pickup_service is None:
            from src.services.pickup_service import PickupService
            self._pickup_service = PickupService(self.db)
            logger.debug("PickupService instantiated")
        return self._pickup_service


# Global container instance (initialized at app startup)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Returns:
        ServiceContainer: The global container instance

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() during application startup before using services."
        )
    return _container


def init_container(db: object) -> ServiceContainer:
    """
    Initialize the global service container.

    Should be called once during application startup after the pool opens.

    Args:
        db: Database instance

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    _container = ServiceContainer(db=db)

    logger.info("Service container initialized")
    return _container
