"""Unit tests for pickup scheduling (src/services/pickup_service.py)"""
import pytest
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

from src.exceptions import ValidationError
from src.models.pickup import PickupRequestInput, PickupStatus
from src.services.pickup_service import PickupService, estimate_co2_saved, estimate_price


@pytest.fixture
def service():
    return PickupService(MagicMock())


@pytest.fixture
def valid_request(today):
    return PickupRequestInput(
        address="12 Green Street, Springfield",
        waste_types=["recyclable", "organic"],
        preferred_date=today + timedelta(days=2),
        preferred_time_slot="10:00 AM - 12:00 PM",
        estimated_weight=10,
        coordinates={"lat": 40.7128, "lng": -74.006},
    )


# ============================================================================
# Estimates
# ============================================================================

def test_estimate_price_sums_selected_types():
    assert estimate_price(["general", "recyclable"], 10) == 8.0


def test_estimate_price_priority_fee():
    assert estimate_price(["general"], 10, is_priority=True) == 20.0


def test_estimate_price_recurring_discount_applies_after_fee():
    assert estimate_price(["general", "recyclable"], 10, is_priority=True, recurring="weekly") == 20.7


@pytest.mark.parametrize("recurring,expected", [
    ("none", 15.0),
    ("weekly", 13.5),
    ("biweekly", 13.8),
    ("monthly", 14.25),
])
def test_estimate_price_discounts(recurring, expected):
    assert estimate_price(["electronic"], 10, recurring=recurring) == pytest.approx(expected)


def test_estimate_price_ignores_unknown_types_and_schedules():
    assert estimate_price(["general", "spaceship"], 10, recurring="hourly") == 5.0


def test_estimate_co2_saved():
    assert estimate_co2_saved(["electronic"], 4) == 10.0
    assert estimate_co2_saved(["recyclable", "organic"], 10) == 13.0


# ============================================================================
# Scheduling
# ============================================================================

@pytest.mark.asyncio
async def test_schedule_pickup_stores_pending_request(service, valid_request, test_user_id, today, pickup_row_factory):
    async def create(user_id, pickup):
        return pickup_row_factory(user_id, pickup)

    mock_create = AsyncMock(side_effect=create)

    with patch('src.db.queries.create_pickup_request', mock_create):
        pickup = await service.schedule_pickup(test_user_id, valid_request, today=today)

    stored = mock_create.call_args[0][1]
    assert stored["estimated_price"] == 7.0
    assert stored["estimated_co2_saved"] == 13.0
    assert stored["latitude"] == 40.7128
    assert stored["longitude"] == -74.006
    assert "coordinates" not in stored

    assert pickup.user_id == test_user_id
    assert pickup.status == PickupStatus.PENDING
    assert pickup.preferred_date == today + timedelta(days=2)


@pytest.mark.asyncio
async def test_schedule_pickup_in_the_past_is_rejected_without_db_call(service, valid_request, test_user_id, today):
    request = valid_request.model_copy(update={"preferred_date": today - timedelta(days=1)})
    mock_create = AsyncMock()

    with patch('src.db.queries.create_pickup_request', mock_create):
        with pytest.raises(ValidationError) as exc_info:
            await service.schedule_pickup(test_user_id, request, today=today)

    mock_create.assert_not_called()
    assert exc_info.value.fields == {"preferred_date": "Pickup date must be in the future"}
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_schedule_pickup_reports_every_field(service, test_user_id, today):
    request = PickupRequestInput(estimated_weight=0)
    mock_create = AsyncMock()

    with patch('src.db.queries.create_pickup_request', mock_create):
        with pytest.raises(ValidationError) as exc_info:
            await service.schedule_pickup(test_user_id, request, today=today)

    mock_create.assert_not_called()
    assert set(exc_info.value.fields) == {
        "address",
        "preferred_date",
        "preferred_time_slot",
        "waste_types",
        "estimated_weight",
    }
    assert exc_info.value.message == "Address is required"


@pytest.mark.asyncio
async def test_list_pickups_by_status_all(service, test_user_id, pickup_row_factory, valid_request):
    row = pickup_row_factory(test_user_id, {
        **valid_request.model_dump(exclude={"coordinates"}),
        "estimated_price": 7.0,
        "estimated_co2_saved": 13.0,
    })
    mock_query = AsyncMock(return_value=[row])

    with patch('src.db.queries.get_pickup_requests_by_status', mock_query):
        pickups = await service.list_pickups_by_status(None)

    mock_query.assert_awaited_once_with(None)
    assert len(pickups) == 1


@pytest.mark.asyncio
async def test_list_pickups_by_status_defaults_to_pending(service):
    mock_query = AsyncMock(return_value=[])

    with patch('src.db.queries.get_pickup_requests_by_status', mock_query):
        await service.list_pickups_by_status()

    mock_query.assert_awaited_once_with("pending")
