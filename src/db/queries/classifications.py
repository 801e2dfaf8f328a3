"""Waste classification history queries"""
import logging
from typing import Optional
from psycopg.types.json import Jsonb
from src.db.connection import db

logger = logging.getLogger(__name__)

CLASSIFICATION_COLUMNS = """
    id, user_id, image_url, category, confidence, explanation, recycling_tips,
    disposal_method, environmental_impact, waste_type, items_detected, ocr_text,
    context_tips, multi_item_results, carbon_impact, created_at
"""


async def save_classification(
    user_id: str,
    image_url: str,
    category: Optional[str] = None,
    confidence: float = 0,
    explanation: str = "",
    recycling_tips: Optional[list[str]] = None,
    disposal_method: Optional[str] = None,
    environmental_impact: Optional[str] = None,
    waste_type: Optional[str] = None,
    items_detected: int = 1,
    ocr_text: Optional[str] = None,
    context_tips: Optional[list[str]] = None,
    multi_item_results: Optional[list[dict]] = None,
    carbon_impact: float = 0,
) -> str:
    """
    Insert a classification history row

    Rows are immutable once written.

    Returns:
        New row id (UUID string)
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO waste_classifications (
                    user_id, image_url, category, confidence, explanation, recycling_tips,
                    disposal_method, environmental_impact, waste_type, items_detected, ocr_text,
                    context_tips, multi_item_results, carbon_impact
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id
                """,
                (
                    user_id,
                    image_url,
                    category,
                    confidence,
                    explanation,
                    Jsonb(recycling_tips or []),
                    disposal_method,
                    environmental_impact,
                    waste_type,
                    items_detected,
                    ocr_text,
                    Jsonb(context_tips or []),
                    Jsonb(multi_item_results) if multi_item_results else None,
                    carbon_impact,
                )
            )
            result = await cur.fetchone()
            await conn.commit()
            return str(result['id']) if result else None


async def get_user_classifications(user_id: str, limit: int = 50) -> list[dict]:
    """Classification history for a user, newest first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {CLASSIFICATION_COLUMNS}
                FROM waste_classifications
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]


async def count_user_classifications(user_id: str) -> int:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT COUNT(*) AS total FROM waste_classifications WHERE user_id = %s",
                (user_id,)
            )
            row = await cur.fetchone()
            return int(row['total']) if row else 0
