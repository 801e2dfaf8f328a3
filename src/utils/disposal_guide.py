"""Static recycling tips, disposal methods and impact notes per waste category"""
import logging

from src.exceptions import UnknownCategoryError
from src.models.classification import CategoryGuidance, WasteCategory

logger = logging.getLogger(__name__)


RECYCLING_TIPS: dict[WasteCategory, list[str]] = {
    WasteCategory.PLASTIC: [
        "Remove caps and labels before recycling",
        "Rinse containers to remove food residue",
        "Check the recycling number on the bottom",
        "Avoid putting plastic bags in regular recycling bins",
    ],
    WasteCategory.GLASS: [
        "Remove metal caps and lids",
        "Rinse containers clean",
        "Separate by color if required locally",
        "Never mix with other glass types like windows or mirrors",
    ],
    WasteCategory.METAL: [
        "Remove any plastic or paper labels",
        "Rinse food containers clean",
        "Crush aluminum cans to save space",
        "Separate ferrous and non-ferrous metals if required",
    ],
    WasteCategory.PAPER: [
        "Remove any plastic coating or tape",
        "Keep paper dry and clean",
        "Separate different paper types",
        "Avoid recycling paper with food contamination",
    ],
    WasteCategory.ORGANIC: [
        "Compost in your backyard or community program",
        "Remove any non-organic materials",
        "Keep separate from other waste types",
        "Consider vermicomposting for apartment living",
    ],
    WasteCategory.E_WASTE: [
        "Take to certified e-waste recycling centers",
        "Remove personal data from devices",
        "Keep batteries separate",
        "Never put in regular trash due to toxic materials",
    ],
    WasteCategory.BIOMEDICAL: [
        "Use designated medical waste disposal services",
        "Never put in regular trash or recycling",
        "Follow local healthcare facility guidelines",
        "Ensure proper containment to prevent contamination",
    ],
    WasteCategory.UNKNOWN: [
        "Check the packaging for recycling symbols",
        "Look up your local council's sorting guidelines",
        "When in doubt, keep it out of the recycling bin",
    ],
}

ENVIRONMENTAL_IMPACT: dict[WasteCategory, str] = {
    WasteCategory.PLASTIC: (
        "Recycling plastic reduces oil consumption and prevents ocean pollution. "
        "One recycled plastic bottle can save enough energy to power a light bulb for 3 hours."
    ),
    WasteCategory.GLASS: (
        "Glass can be recycled indefinitely without losing quality. "
        "Recycling glass reduces energy consumption by 30% compared to making new glass."
    ),
    WasteCategory.METAL: (
        "Recycling aluminum cans uses 95% less energy than producing new ones. "
        "Steel recycling saves 74% of energy needed for new steel production."
    ),
    WasteCategory.PAPER: (
        "Recycling paper saves trees, water, and energy. "
        "One ton of recycled paper saves 17 trees and 7,000 gallons of water."
    ),
    WasteCategory.ORGANIC: (
        "Composting organic waste reduces methane emissions from landfills "
        "and creates nutrient-rich soil amendment for plants."
    ),
    WasteCategory.E_WASTE: (
        "Proper e-waste recycling recovers valuable metals and prevents toxic materials "
        "from contaminating soil and water."
    ),
    WasteCategory.BIOMEDICAL: (
        "Proper disposal prevents disease transmission and environmental contamination "
        "from pharmaceutical and biological materials."
    ),
    WasteCategory.UNKNOWN: (
        "Sorting waste correctly keeps recyclable material out of landfill. "
        "Items that cannot be identified are safest handled through general waste."
    ),
}

DISPOSAL_METHODS: dict[WasteCategory, str] = {
    WasteCategory.PLASTIC: "Place in recycling bin with plastic containers (check local guidelines for accepted types)",
    WasteCategory.GLASS: "Place in glass recycling bin or take to recycling center",
    WasteCategory.METAL: "Place in metal recycling bin or scrap metal collection",
    WasteCategory.PAPER: "Place in paper recycling bin (ensure it's clean and dry)",
    WasteCategory.ORGANIC: "Compost bin, organic waste collection, or backyard composting",
    WasteCategory.E_WASTE: "Take to certified e-waste recycling center or electronics retailer",
    WasteCategory.BIOMEDICAL: "Use medical waste disposal service or return to healthcare facility",
    WasteCategory.UNKNOWN: "Check local guidelines; if unsure, dispose of as general waste",
}


def get_category_guidance(category: WasteCategory) -> CategoryGuidance:
    """
    Look up tips, disposal method and environmental impact for a category

    Raises:
        UnknownCategoryError: If category is not a WasteCategory member
    """
    if not isinstance(category, WasteCategory):
        raise UnknownCategoryError(category, operation="get_category_guidance")

    return CategoryGuidance(
        recycling_tips=list(RECYCLING_TIPS[category]),
        disposal_method=DISPOSAL_METHODS[category],
        environmental_impact=ENVIRONMENTAL_IMPACT[category],
    )
