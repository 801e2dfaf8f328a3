"""
Create the smart waste schema and seed the badge catalog and default challenge
"""
import asyncio
import logging
from datetime import datetime, timedelta
from pathlib import Path

from src.db.connection import db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"

# (name, description, icon, category, requirement_type, requirement_value, points_reward)
DEFAULT_BADGES = [
    ("First Steps", "Classify your first waste item", "🌱", "classification", "count", 1, 10),
    ("Getting Started", "Classify 10 waste items", "🌿", "classification", "count", 10, 50),
    ("Eco Warrior", "Classify 50 waste items", "🌳", "classification", "count", 50, 200),
    ("Recycling Hero", "Classify 100 waste items", "♻️", "classification", "count", 100, 500),
    ("Streak Starter", "Maintain a 3-day streak", "🔥", "streak", "streak", 3, 30),
    ("On Fire", "Maintain a 7-day streak", "🔥", "streak", "streak", 7, 100),
    ("Unstoppable", "Maintain a 30-day streak", "⚡", "streak", "streak", 30, 500),
    ("Carbon Saver", "Save 10kg of CO2", "🌍", "recycling", "co2", 10, 100),
    ("Planet Protector", "Save 50kg of CO2", "🌎", "recycling", "co2", 50, 300),
    ("Earth Guardian", "Save 100kg of CO2", "🌏", "recycling", "co2", 100, 1000),
]


async def apply_migrations() -> None:
    """Run every migrations/*.sql file in name order"""
    for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
        logger.info(f"Running {path.name}...")
        async with db.connection() as conn:
            await conn.execute(path.read_text(encoding="utf-8"))
            await conn.commit()
        logger.info(f"  {path.name} completed")


async def seed_badges() -> int:
    """Insert the default badge catalog, skipping badges that already exist"""
    inserted = 0
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            for badge in DEFAULT_BADGES:
                await cur.execute(
                    """
                    INSERT INTO badges (
                        name, description, icon, category,
                        requirement_type, requirement_value, points_reward
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (name) DO NOTHING
                    RETURNING id
                    """,
                    badge
                )
                if await cur.fetchone():
                    inserted += 1
        await conn.commit()

    logger.info(f"Seeded {inserted} new badges ({len(DEFAULT_BADGES)} in catalog)")
    return inserted


async def seed_default_challenge(now: datetime) -> None:
    """Weekly Recycler: recycle 20 items this week"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO challenges (
                    title, description, challenge_type, goal_type, goal_value,
                    points_reward, start_date, end_date, is_active
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, TRUE)
                ON CONFLICT (title) DO NOTHING
                """,
                (
                    "Weekly Recycler",
                    "Recycle 20 items this week",
                    "weekly",
                    "recycling",
                    20,
                    100,
                    now,
                    now + timedelta(days=7),
                )
            )
        await conn.commit()

    logger.info("Default challenge ready")


async def setup(skip_seed: bool = False) -> None:
    await db.init_pool()
    try:
        await apply_migrations()
        if not skip_seed:
            await seed_badges()
            await seed_default_challenge(datetime.now())
        logger.info("Database setup complete")
    finally:
        await db.close_pool()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create the smart waste schema and seed default data")
    parser.add_argument("--skip-seed", action="store_true", help="Only apply migrations")

    args = parser.parse_args()

    asyncio.run(setup(skip_seed=args.skip_seed))
