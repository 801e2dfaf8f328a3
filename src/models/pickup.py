"""Pickup request Pydantic models"""
from enum import Enum
from typing import Optional
from datetime import date, datetime
from uuid import UUID
from pydantic import BaseModel, Field


class PickupStatus(str, Enum):
    """Pickup lifecycle, advanced by the facility operator workflow"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecurringSchedule(str, Enum):
    NONE = "none"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class WasteTypeInfo(BaseModel):
    """Pricing and CO2 data for a pickup waste type"""
    id: str
    label: str
    price_per_kg: float
    co2_saved_per_kg: float


WASTE_TYPES: dict[str, WasteTypeInfo] = {
    info.id: info
    for info in [
        WasteTypeInfo(id="general", label="General Waste", price_per_kg=0.5, co2_saved_per_kg=0.1),
        WasteTypeInfo(id="recyclable", label="Recyclable Materials", price_per_kg=0.3, co2_saved_per_kg=0.8),
        WasteTypeInfo(id="organic", label="Organic/Food Waste", price_per_kg=0.4, co2_saved_per_kg=0.5),
        WasteTypeInfo(id="electronic", label="Electronic Waste", price_per_kg=1.5, co2_saved_per_kg=2.5),
        WasteTypeInfo(id="hazardous", label="Hazardous Materials", price_per_kg=2.0, co2_saved_per_kg=1.2),
        WasteTypeInfo(id="bulky", label="Bulky Items", price_per_kg=0.8, co2_saved_per_kg=0.6),
    ]
}

TIME_SLOTS: tuple[str, ...] = (
    "8:00 AM - 10:00 AM",
    "10:00 AM - 12:00 PM",
    "12:00 PM - 2:00 PM",
    "2:00 PM - 4:00 PM",
    "4:00 PM - 6:00 PM",
)

# Percent off the estimate for recurring pickups
RECURRING_DISCOUNTS: dict[RecurringSchedule, int] = {
    RecurringSchedule.NONE: 0,
    RecurringSchedule.WEEKLY: 10,
    RecurringSchedule.BIWEEKLY: 8,
    RecurringSchedule.MONTHLY: 5,
}

PRIORITY_FEE = 15.0


class Coordinates(BaseModel):
    lat: float
    lng: float


class PickupRequestInput(BaseModel):
    """
    Raw pickup form submission

    Fields are deliberately loose; field-level rules live in
    src.validators.validate_pickup_request so every problem is reported
    at once with a form-friendly message.
    """
    address: str = ""
    waste_types: list[str] = Field(default_factory=list)
    preferred_date: Optional[date] = None
    preferred_time_slot: str = ""
    special_instructions: Optional[str] = None
    driver_notes: Optional[str] = None
    estimated_weight: float = 10
    recurring_schedule: str = RecurringSchedule.NONE.value
    is_priority: bool = False
    notification_email: bool = True
    notification_sms: bool = False
    photos: list[str] = Field(default_factory=list)
    coordinates: Optional[Coordinates] = None


class PickupRequest(BaseModel):
    """Stored pickup request row"""
    id: UUID
    user_id: str
    address: str
    waste_types: list[str]
    preferred_date: date
    preferred_time_slot: str
    special_instructions: Optional[str] = None
    driver_notes: Optional[str] = None
    estimated_weight: float
    recurring_schedule: RecurringSchedule = RecurringSchedule.NONE
    is_priority: bool = False
    notification_email: bool = True
    notification_sms: bool = False
    estimated_price: float
    estimated_co2_saved: float
    photos: list[str] = Field(default_factory=list)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    status: PickupStatus = PickupStatus.PENDING
    created_at: datetime
    updated_at: datetime
