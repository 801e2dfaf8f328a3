"""
Gamification Dashboards

Rank titles, carbon-savings equivalents and the user dashboard summary
shown on the web client's home page.
"""

import logging
import math
from typing import Dict, List, Optional

from src.models.gamification import UserStats
from src.gamification.points_system import level_progress

logger = logging.getLogger(__name__)

# (exclusive upper bound, title)
RANK_TITLES = [
    (100, "Beginner"),
    (500, "Eco Explorer"),
    (1000, "Recycling Hero"),
    (2500, "Green Guardian"),
    (5000, "Sustainability Champion"),
    (10000, "Earth Protector"),
]
TOP_RANK_TITLE = "Eco Legend"

KG_CO2_PER_TREE_YEAR = 21
KG_CO2_PER_MILE_DRIVEN = 0.411
BOTTLES_PER_RECYCLED_ITEM = 0.7


def calculate_rank(points: int) -> str:
    """Rank title for a points total"""
    for upper_bound, title in RANK_TITLES:
        if points < upper_bound:
            return title
    return TOP_RANK_TITLE


def carbon_equivalents(stats: UserStats) -> Dict[str, int]:
    """
    Express saved CO2 in everyday terms

    Returns:
        {'trees': int, 'miles_not_driven': int, 'water_bottles_saved': int}
    """
    co2_saved = stats.total_co2_saved if math.isfinite(stats.total_co2_saved) else 0.0
    return {
        "trees": math.floor(co2_saved / KG_CO2_PER_TREE_YEAR),
        "miles_not_driven": math.floor(co2_saved / KG_CO2_PER_MILE_DRIVEN),
        "water_bottles_saved": math.floor(stats.total_items_recycled * BOTTLES_PER_RECYCLED_ITEM),
    }


def dashboard_summary(
    pickups: List[dict],
    classifications_count: int,
    stats: Optional[UserStats] = None,
) -> Dict:
    """
    Home dashboard payload

    Args:
        pickups: User's pickup request rows
        classifications_count: Number of stored classifications
        stats: User stats, None for users without activity
    """
    statuses = [p.get("status") for p in pickups]
    summary = {
        "total_pickups": len(pickups),
        "pending_pickups": statuses.count("pending"),
        "completed_pickups": statuses.count("completed"),
        "total_classifications": classifications_count,
    }

    if stats is not None:
        summary["stats"] = stats.model_dump(mode="json")
        summary["rank"] = calculate_rank(stats.total_points)
        summary["level_progress"] = level_progress(stats.total_points)
        summary["carbon_equivalents"] = carbon_equivalents(stats)
    else:
        summary["stats"] = None
        summary["rank"] = calculate_rank(0)
        summary["level_progress"] = level_progress(0)
        summary["carbon_equivalents"] = {"trees": 0, "miles_not_driven": 0, "water_bottles_saved": 0}

    return summary
