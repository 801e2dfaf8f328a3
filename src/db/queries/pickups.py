"""Pickup request queries"""
import logging
from typing import Optional
from src.db.connection import db

logger = logging.getLogger(__name__)

PICKUP_COLUMNS = """
    id, user_id, address, waste_types, preferred_date, preferred_time_slot,
    special_instructions, driver_notes, estimated_weight, recurring_schedule,
    is_priority, notification_email, notification_sms, estimated_price,
    estimated_co2_saved, photos, latitude, longitude, status, created_at, updated_at
"""


async def create_pickup_request(user_id: str, pickup: dict) -> dict:
    """
    Insert a pickup request with status 'pending'

    Args:
        user_id: Owner of the request
        pickup: Validated fields plus estimated_price / estimated_co2_saved

    Returns:
        The stored row
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                INSERT INTO pickup_requests (
                    user_id, address, waste_types, preferred_date, preferred_time_slot,
                    special_instructions, driver_notes, estimated_weight, recurring_schedule,
                    is_priority, notification_email, notification_sms, estimated_price,
                    estimated_co2_saved, photos, latitude, longitude, status
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, 'pending')
                RETURNING {PICKUP_COLUMNS}
                """,
                (
                    user_id,
                    pickup['address'],
                    pickup['waste_types'],
                    pickup['preferred_date'],
                    pickup['preferred_time_slot'],
                    pickup.get('special_instructions'),
                    pickup.get('driver_notes'),
                    pickup['estimated_weight'],
                    pickup['recurring_schedule'],
                    pickup['is_priority'],
                    pickup.get('notification_email', True),
                    pickup.get('notification_sms', False),
                    pickup['estimated_price'],
                    pickup['estimated_co2_saved'],
                    pickup.get('photos', []),
                    pickup.get('latitude'),
                    pickup.get('longitude'),
                )
            )
            row = await cur.fetchone()
            await conn.commit()
            logger.info(f"Created pickup request {row['id']} for user {user_id}")
            return dict(row)


async def get_user_pickup_requests(user_id: str, limit: int = 100) -> list[dict]:
    """Pickup requests for a user, newest first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {PICKUP_COLUMNS}
                FROM pickup_requests
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def get_pickup_requests_by_status(status: Optional[str] = None, limit: int = 100) -> list[dict]:
    """
    Pickup requests across all users for facility operators

    Args:
        status: Filter by status, or None for every status
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            if status:
                await cur.execute(
                    f"""
                    SELECT {PICKUP_COLUMNS}
                    FROM pickup_requests
                    WHERE status = %s
                    ORDER BY preferred_date ASC, created_at DESC
                    LIMIT %s
                    """,
                    (status, limit)
                )
            else:
                await cur.execute(
                    f"""
                    SELECT {PICKUP_COLUMNS}
                    FROM pickup_requests
                    ORDER BY preferred_date ASC, created_at DESC
                    LIMIT %s
                    """,
                    (limit,)
                )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]
