"""Unit tests for category guidance (src/utils/disposal_guide.py)"""
import pytest

from src.exceptions import UnknownCategoryError
from src.models.classification import WasteCategory
from src.utils.disposal_guide import (
    DISPOSAL_METHODS,
    ENVIRONMENTAL_IMPACT,
    RECYCLING_TIPS,
    get_category_guidance,
)


@pytest.mark.parametrize("category", list(WasteCategory))
def test_every_category_has_guidance(category):
    guidance = get_category_guidance(category)

    assert guidance.recycling_tips
    assert guidance.disposal_method
    assert guidance.environmental_impact


def test_tables_cover_the_whole_enum():
    categories = set(WasteCategory)
    assert set(RECYCLING_TIPS) == categories
    assert set(DISPOSAL_METHODS) == categories
    assert set(ENVIRONMENTAL_IMPACT) == categories


def test_plastic_guidance():
    guidance = get_category_guidance(WasteCategory.PLASTIC)

    assert "Remove caps and labels before recycling" in guidance.recycling_tips
    assert guidance.disposal_method.startswith("Place in recycling bin")


def test_guidance_tips_are_a_copy():
    guidance = get_category_guidance(WasteCategory.GLASS)
    guidance.recycling_tips.append("extra")

    assert "extra" not in RECYCLING_TIPS[WasteCategory.GLASS]


def test_plain_string_is_rejected():
    with pytest.raises(UnknownCategoryError) as exc_info:
        get_category_guidance("Styrofoam")

    assert exc_info.value.category == "Styrofoam"
    assert exc_info.value.operation == "get_category_guidance"
