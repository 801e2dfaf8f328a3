"""
Centralized Input Validation Layer

Provides validation for user inputs so invalid data never reaches the
database or an AI provider.

Validation Categories:
1. Chat Input - Non-empty message, max 4000 chars, bounded history
2. Pickup Requests - Address, future date, time slot, waste types, weight, schedule
3. Request Errors - Pydantic errors turned into field -> message maps
"""

import logging
from datetime import date
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from src.models.pickup import (
    PickupRequestInput,
    RecurringSchedule,
    TIME_SLOTS,
    WASTE_TYPES,
)

logger = logging.getLogger(__name__)


# ============================================================================
# CHAT INPUT VALIDATION
# ============================================================================

MAX_MESSAGE_LENGTH = 4000
MAX_HISTORY_MESSAGES = 50


class ChatHistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatInput(BaseModel):
    """
    Validate a chat request

    Constraints:
    - Message: 1-4000 characters after trimming
    - History: at most 50 prior messages
    """
    message: str = Field(default="", max_length=MAX_MESSAGE_LENGTH)
    history: list[ChatHistoryMessage] = Field(default_factory=list, max_length=MAX_HISTORY_MESSAGES)

    @field_validator('message')
    @classmethod
    def trim_message(cls, v: str) -> str:
        return v.strip()


# ============================================================================
# PICKUP REQUEST VALIDATION
# ============================================================================

MIN_PICKUP_WEIGHT = 1
MAX_PICKUP_WEIGHT = 100


def validate_pickup_request(data: PickupRequestInput, today: date) -> Dict[str, str]:
    """
    Check a pickup form submission

    Every problem is reported, keyed by the field it belongs to, so the
    form can show all messages at once.

    Args:
        data: Submitted form
        today: Current date; the pickup must be strictly after it

    Returns:
        {field: message}, empty when the request is valid
    """
    errors: Dict[str, str] = {}

    if not data.address or not data.address.strip():
        errors['address'] = "Address is required"

    if data.preferred_date is None:
        errors['preferred_date'] = "Pickup date is required"
    elif data.preferred_date <= today:
        errors['preferred_date'] = "Pickup date must be in the future"

    if not data.preferred_time_slot:
        errors['preferred_time_slot'] = "Time slot is required"
    elif data.preferred_time_slot not in TIME_SLOTS:
        errors['preferred_time_slot'] = "Please choose one of the available time slots"

    if not data.waste_types:
        errors['waste_types'] = "Please select at least one waste type"
    else:
        unknown = [t for t in data.waste_types if t not in WASTE_TYPES]
        if unknown:
            errors['waste_types'] = f"Unknown waste type: {', '.join(unknown)}"

    if not MIN_PICKUP_WEIGHT <= data.estimated_weight <= MAX_PICKUP_WEIGHT:
        errors['estimated_weight'] = (
            f"Estimated weight must be between {MIN_PICKUP_WEIGHT} and {MAX_PICKUP_WEIGHT} kg"
        )

    if data.recurring_schedule not in {s.value for s in RecurringSchedule}:
        errors['recurring_schedule'] = "Invalid recurring schedule"

    if errors:
        logger.debug(f"Pickup request rejected: {errors}")

    return errors


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def format_validation_errors(errors: list[dict]) -> Dict[str, str]:
    """
    Turn pydantic/FastAPI error entries into {field: message}

    Args:
        errors: e.errors() from a pydantic or FastAPI RequestValidationError

    Returns:
        Field -> first message for that field
    """
    fields: Dict[str, str] = {}
    for error in errors:
        loc = [part for part in error.get('loc', ()) if part not in ('body', 'query', 'path', 'header')]
        field = str(loc[-1]) if loc else 'input'
        fields.setdefault(field, error.get('msg', 'Invalid value'))
    return fields


def first_error_message(fields: Dict[str, str], default: str = "Validation failed") -> Optional[str]:
    """First message in a field map, used as the top-level error"""
    return next(iter(fields.values()), default)
