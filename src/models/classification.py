"""Waste classification Pydantic models"""
from enum import Enum
from typing import Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WasteCategory(str, Enum):
    """Material categories the vision model classifies into"""
    PLASTIC = "Plastic"
    GLASS = "Glass"
    METAL = "Metal"
    PAPER = "Paper"
    ORGANIC = "Organic"
    E_WASTE = "E-waste"
    BIOMEDICAL = "Biomedical"
    UNKNOWN = "Unknown"

    @classmethod
    def known(cls) -> list["WasteCategory"]:
        """The seven categories offered to the model"""
        return [c for c in cls if c is not cls.UNKNOWN]

    @classmethod
    def from_label(cls, label: object) -> "WasteCategory":
        """Case-insensitive match of a model label, UNKNOWN when nothing matches"""
        if not isinstance(label, str):
            return cls.UNKNOWN
        normalized = label.strip().lower().replace("_", "-").replace(" ", "-")
        for category in cls.known():
            if category.value.lower() == normalized:
                return category
        # "ewaste" / "e waste"
        if normalized in ("ewaste", "electronic", "electronics"):
            return cls.E_WASTE
        return cls.UNKNOWN


class ItemWasteType(str, Enum):
    """Per-item disposal stream used by the multi-item classifier"""
    RECYCLABLE = "recyclable"
    ORGANIC = "organic"
    HAZARDOUS = "hazardous"
    GENERAL = "general"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the web client"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClassificationResult(BaseModel):
    """Normalized {category, confidence, explanation} parsed from the model"""
    category: WasteCategory
    confidence: float = Field(ge=0, le=100)
    explanation: str = ""
    raw_category: Optional[str] = None  # label exactly as the model returned it


class CategoryGuidance(BaseModel):
    """Static recycling guidance attached to a category"""
    recycling_tips: list[str]
    disposal_method: str
    environmental_impact: str


class ClassifiedWaste(CamelModel):
    """Single-item classification enriched with guidance"""
    category: WasteCategory
    confidence: float
    explanation: str
    recycling_tips: list[str]
    disposal_method: str
    environmental_impact: str


class BoundingBox(CamelModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float
    width: float
    height: float


class ClassificationItem(CamelModel):
    """One detected item in a multi-item classification"""
    waste_type: ItemWasteType
    confidence: float = Field(ge=0, le=100)
    disposal_instructions: str = ""
    bounding_box: Optional[BoundingBox] = None


class EnhancedClassificationResult(CamelModel):
    """Multi-item classification with OCR, tips and a CO2 estimate"""
    items_detected: int = Field(ge=0)
    items: list[ClassificationItem] = Field(default_factory=list)
    explanation: str = ""
    ocr_text: Optional[str] = None
    context_tips: list[str] = Field(default_factory=list)
    carbon_impact: float = Field(default=0, ge=0, allow_inf_nan=False)  # kg CO2

    @property
    def recyclable_count(self) -> int:
        return sum(1 for item in self.items if item.waste_type == ItemWasteType.RECYCLABLE)


class ClassificationRecord(BaseModel):
    """Stored classification history row"""
    id: UUID
    user_id: str
    image_url: str
    category: Optional[WasteCategory] = None
    confidence: float = 0
    explanation: str = ""
    recycling_tips: list[str] = Field(default_factory=list)
    disposal_method: Optional[str] = None
    environmental_impact: Optional[str] = None
    waste_type: Optional[ItemWasteType] = None
    items_detected: int = 1
    ocr_text: Optional[str] = None
    context_tips: list[str] = Field(default_factory=list)
    multi_item_results: Optional[list[dict]] = None
    carbon_impact: float = 0
    created_at: datetime
