"""
PickupService - Waste Pickup Scheduling

Validates pickup requests, estimates price and CO2 savings, and stores
them with status 'pending'. Status changes after that belong to the
facility operator workflow.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from src.db import queries
from src.exceptions import ValidationError
from src.models.pickup import (
    PRIORITY_FEE,
    RECURRING_DISCOUNTS,
    WASTE_TYPES,
    PickupRequest,
    PickupRequestInput,
    PickupStatus,
    RecurringSchedule,
)
from src.observability.metrics import pickup_validation_failures_total, pickups_scheduled_total
from src.validators import validate_pickup_request

logger = logging.getLogger(__name__)


def estimate_price(
    waste_types: Iterable[str],
    weight: float,
    is_priority: bool = False,
    recurring: str = RecurringSchedule.NONE.value,
) -> float:
    """
    Price estimate in dollars

    sum(price_per_kg * weight) over the selected types, plus the express fee
    for priority pickups, then the recurring discount.
    """
    total = sum(WASTE_TYPES[t].price_per_kg * weight for t in waste_types if t in WASTE_TYPES)

    if is_priority:
        total += PRIORITY_FEE

    try:
        discount = RECURRING_DISCOUNTS[RecurringSchedule(recurring)]
    except ValueError:
        discount = 0
    if discount:
        total = total * (1 - discount / 100)

    return round(total, 2)


def estimate_co2_saved(waste_types: Iterable[str], weight: float) -> float:
    """Kg of CO2 saved by collecting the selected types"""
    total = sum(WASTE_TYPES[t].co2_saved_per_kg * weight for t in waste_types if t in WASTE_TYPES)
    return round(total, 2)


class PickupService:
    """
    Service for pickup scheduling.

    Responsibilities:
    - Validate and price pickup requests
    - Store new requests
    - List requests for users and facility operators
    """

    def __init__(self, db_connection):
        """
        Initialize PickupService.

        Args:
            db_connection: Database instance
        """
        self.db = db_connection
        logger.debug("PickupService initialized")

    async def schedule_pickup(
        self,
        user_id: str,
        data: PickupRequestInput,
        today: Optional[date] = None,
    ) -> PickupRequest:
        """
        Validate, price and store a pickup request

        Args:
            user_id: Requesting user
            data: Submitted form
            today: Current date (defaults to date.today())

        Returns:
            The stored request with status 'pending'

        Raises:
            ValidationError: With field-level messages; nothing is written
        """
        today = today or date.today()

        errors = validate_pickup_request(data, today)
        if errors:
            for field in errors:
                pickup_validation_failures_total.labels(field=field).inc()
            raise ValidationError(
                message=next(iter(errors.values())),
                fields=errors,
                user_id=user_id,
                operation="schedule_pickup",
            )

        pickup = data.model_dump(exclude={"coordinates"})
        pickup["estimated_price"] = estimate_price(
            data.waste_types, data.estimated_weight, data.is_priority, data.recurring_schedule
        )
        pickup["estimated_co2_saved"] = estimate_co2_saved(data.waste_types, data.estimated_weight)
        pickup["latitude"] = data.coordinates.lat if data.coordinates else None
        pickup["longitude"] = data.coordinates.lng if data.coordinates else None

        row = await queries.create_pickup_request(user_id, pickup)

        pickups_scheduled_total.labels(
            recurring_schedule=data.recurring_schedule,
            priority=str(data.is_priority).lower(),
        ).inc()
        logger.info(
            f"Scheduled pickup for user {user_id} on {data.preferred_date} "
            f"({', '.join(data.waste_types)}, ${pickup['estimated_price']})"
        )
        return PickupRequest(**row)

    async def list_user_pickups(self, user_id: str) -> List[PickupRequest]:
        """User's pickup requests, newest first"""
        rows = await queries.get_user_pickup_requests(user_id)
        return [PickupRequest(**row) for row in rows]

    async def list_pickups_by_status(self, status: Optional[PickupStatus] = PickupStatus.PENDING) -> List[PickupRequest]:
        """Requests across all users for the facility operator view"""
        rows = await queries.get_pickup_requests_by_status(status.value if status else None)
        return [PickupRequest(**row) for row in rows]
