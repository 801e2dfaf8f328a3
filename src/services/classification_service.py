"""
ClassificationService - Waste Photo Classification

Runs the vision pipeline (prompt, model call, parse, enrich) and persists
the result for signed-in users. Persistence and stats bookkeeping are
best-effort: their failures are reported in a BookkeepingOutcome and never
change the classification returned to the caller.
"""

import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from src.config import VISION_MODEL, get_model_provider, get_provider_api_key
from src.db import queries
from src.exceptions import (
    AIProviderError,
    ClassificationError,
    ImageFetchError,
    WasteAppError,
)
from src.models.classification import (
    BoundingBox,
    ClassificationItem,
    ClassificationRecord,
    ClassifiedWaste,
    EnhancedClassificationResult,
    ItemWasteType,
    WasteCategory,
)
from src.observability.metrics import (
    bookkeeping_failures_total,
    classification_categories_total,
    classifications_total,
)
from src.services.gamification_service import BookkeepingOutcome
from src.utils.disposal_guide import get_category_guidance
from src.utils.image_data import decode_data_url, fetch_image
from src.utils.response_parser import coerce_confidence, parse_ai_json, parse_classification
from src.utils.vision import analyze_image, generate_text, require_api_key

logger = logging.getLogger(__name__)

# Bounds for model-reported counts so stats columns stay in range
MAX_ITEMS_DETECTED = 50
MAX_CARBON_IMPACT_KG = 1000.0


CLASSIFICATION_PROMPT = f"""You are an expert waste classification AI. Analyze this image and classify the waste into one of these 7 categories: {", ".join(c.value for c in WasteCategory.known())}.

Please provide:
1. The most likely category from the 7 options
2. Confidence percentage (0-100)
3. Detailed explanation of your analysis
4. Consider material composition, shape, and visible recycling symbols
5. Handle unclear images by providing your best assessment

Respond in this exact JSON format:
{{
  "category": "category_name",
  "confidence": confidence_percentage,
  "explanation": "detailed_explanation_of_analysis"
}}

Focus on accuracy and provide educational explanations about why you classified the item as you did."""


def build_enhanced_prompt(
    enable_ocr: bool = True,
    enable_explanation: bool = True,
    user_location: Optional[str] = None,
) -> str:
    """Multi-item classification prompt with optional OCR, reasoning and local rules"""
    ocr_step = "Extract any visible text from labels or packaging" if enable_ocr else ""
    explanation_step = (
        "Explain your reasoning for each classification in detail, including WHY each item belongs to its category"
        if enable_explanation else ""
    )
    location_step = (
        f"Consider local regulations for {user_location}"
        if user_location else "Provide general disposal guidelines"
    )

    return f"""Analyze this waste image and provide a detailed classification in JSON format.

Instructions:
1. Detect ALL waste items in the image (multi-item detection)
2. For each item, classify as: recyclable, organic, hazardous, or general waste
3. Provide confidence scores (0-100) for each classification
4. {ocr_step}
5. {explanation_step}
6. Provide specific disposal instructions for each item
7. {location_step}
8. Estimate CO2 impact if properly recycled (in kg)
9. Provide context-aware tips (e.g., 'Pizza box? If greasy → general waste. If clean → recyclable.')

Return ONLY a valid JSON object with this exact structure (no markdown, no code blocks):
{{
  "itemsDetected": <number>,
  "items": [
    {{
      "wasteType": "recyclable|organic|hazardous|general",
      "confidence": <number 0-100>,
      "disposalInstructions": "<detailed instructions>"
    }}
  ],
  "explanation": "<detailed reasoning with WHY for each classification>",
  "ocrText": "<extracted text from labels if any>",
  "contextTips": ["<practical tip 1>", "<practical tip 2>"],
  "carbonImpact": <number in kg>
}}"""


# ==========================================
# Normalisation
# ==========================================

def _item_waste_type(value: Any) -> ItemWasteType:
    if isinstance(value, str):
        try:
            return ItemWasteType(value.strip().lower())
        except ValueError:
            pass
    return ItemWasteType.GENERAL


def _bounding_box(value: Any) -> Optional[BoundingBox]:
    if not isinstance(value, dict):
        return None
    try:
        return BoundingBox(**{k: float(value[k]) for k in ("x", "y", "width", "height")})
    except (KeyError, TypeError, ValueError):
        return None


def _non_negative(value: Any, upper: float) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return min(max(number, 0.0), upper)


def normalize_enhanced_result(data: Dict[str, Any]) -> EnhancedClassificationResult:
    """
    Fill defaults and clamp values of a parsed multi-item response

    - itemsDetected: 1 when missing, zero or not finite; at most MAX_ITEMS_DETECTED
    - items / contextTips: [] when missing
    - carbonImpact: 0 when missing or not finite, within 0..MAX_CARBON_IMPACT_KG
    - item confidence clamped to 0-100, unknown waste types become general
    """
    raw_items = data.get("items")
    items = []
    for raw in raw_items if isinstance(raw_items, list) else []:
        if not isinstance(raw, dict):
            continue
        instructions = raw.get("disposalInstructions")
        items.append(
            ClassificationItem(
                waste_type=_item_waste_type(raw.get("wasteType")),
                confidence=coerce_confidence(raw.get("confidence")),
                disposal_instructions=instructions if isinstance(instructions, str) else "",
                bounding_box=_bounding_box(raw.get("boundingBox")),
            )
        )

    items_detected = int(_non_negative(data.get("itemsDetected"), MAX_ITEMS_DETECTED)) or 1

    tips = data.get("contextTips")
    explanation = data.get("explanation")
    ocr_text = data.get("ocrText")

    return EnhancedClassificationResult(
        items_detected=items_detected,
        items=items,
        explanation=explanation if isinstance(explanation, str) else "",
        ocr_text=ocr_text if isinstance(ocr_text, str) and ocr_text else None,
        context_tips=[t for t in tips if isinstance(t, str)] if isinstance(tips, list) else [],
        carbon_impact=_non_negative(data.get("carbonImpact"), MAX_CARBON_IMPACT_KG),
    )


# ==========================================
# Vision pipeline
# ==========================================

async def classify_waste(image_data_url: str, api_key: Optional[str] = None) -> ClassifiedWaste:
    """
    Classify a single waste item from an uploaded image

    Args:
        image_data_url: Image as a data URL (or plain base64 JPEG)
        api_key: Optional caller key, used only when the server has none

    Returns:
        ClassifiedWaste enriched with the category's guidance

    Raises:
        ValidationError: If the image is missing or malformed
        ConfigurationError: If no API key is available
        ClassificationError: If the model call fails or the answer is unparsable
    """
    image = decode_data_url(image_data_url)
    key = require_api_key(get_provider_api_key(VISION_MODEL, api_key), VISION_MODEL)

    try:
        text = await analyze_image(CLASSIFICATION_PROMPT, image, key)
    except AIProviderError as e:
        classifications_total.labels(mode="basic", status="error").inc()
        raise ClassificationError(e.message, operation="classify_waste", cause=e)

    try:
        parsed = parse_classification(text)
    except ClassificationError:
        classifications_total.labels(mode="basic", status="error").inc()
        raise

    guidance = get_category_guidance(parsed.category)
    classifications_total.labels(mode="basic", status="success").inc()
    classification_categories_total.labels(category=parsed.category.value).inc()
    logger.info(f"Classified waste as {parsed.category.value} ({parsed.confidence:.0f}%)")

    return ClassifiedWaste(
        category=parsed.category,
        confidence=parsed.confidence,
        explanation=parsed.explanation,
        recycling_tips=guidance.recycling_tips,
        disposal_method=guidance.disposal_method,
        environmental_impact=guidance.environmental_impact,
    )


async def enhanced_classify_waste(
    image_url: str,
    enable_ocr: bool = True,
    enable_explanation: bool = True,
    user_location: Optional[str] = None,
    api_key: Optional[str] = None,
) -> EnhancedClassificationResult:
    """
    Detect and classify every waste item in an image

    Args:
        image_url: http(s) URL or data URL of the image
        enable_ocr: Ask the model to read label text
        enable_explanation: Ask for per-item reasoning
        user_location: Location whose local rules the model should consider
        api_key: Optional caller key, used only when the server has none

    Raises:
        ConfigurationError: If no API key is available
        ClassificationError: If fetching, the model call or parsing fails
    """
    key = require_api_key(get_provider_api_key(VISION_MODEL, api_key), VISION_MODEL)

    try:
        image = await fetch_image(image_url)
        text = await analyze_image(
            build_enhanced_prompt(enable_ocr, enable_explanation, user_location),
            image,
            key,
        )
        data = parse_ai_json(text)
    except (AIProviderError, ImageFetchError) as e:
        classifications_total.labels(mode="enhanced", status="error").inc()
        raise ClassificationError(e.message, operation="enhanced_classify_waste", cause=e)
    except ClassificationError:
        classifications_total.labels(mode="enhanced", status="error").inc()
        raise

    result = normalize_enhanced_result(data)
    classifications_total.labels(mode="enhanced", status="success").inc()
    logger.info(
        f"Enhanced classification found {result.items_detected} item(s), "
        f"{result.carbon_impact:.2f} kg CO2"
    )
    return result


async def check_ai_connection(api_key: Optional[str] = None) -> Tuple[bool, str]:
    """
    Send a tiny prompt to confirm the vision key and model work

    Returns:
        (ok, message)
    """
    provider = get_model_provider(VISION_MODEL)
    key = get_provider_api_key(VISION_MODEL, api_key)
    if not key:
        return False, f"No API key configured for {provider or VISION_MODEL}."

    try:
        await generate_text("ping", key)
    except WasteAppError as e:
        return False, f"AI check failed: {e.message}"

    return True, f"{VISION_MODEL} is reachable and the API key looks valid."


# ==========================================
# Service
# ==========================================

class ClassificationService:
    """
    Service for waste classification.

    Responsibilities:
    - Run single-item and multi-item classification
    - Save classification history for signed-in users
    - Hand multi-item results to gamification bookkeeping
    """

    def __init__(self, db_connection, gamification_service=None):
        """
        Initialize ClassificationService.

        Args:
            db_connection: Database instance
            gamification_service: GamificationService for stats bookkeeping
        """
        self.db = db_connection
        self.gamification = gamification_service
        logger.debug("ClassificationService initialized")

    async def classify(
        self,
        image: str,
        api_key: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Tuple[ClassifiedWaste, Optional[BookkeepingOutcome]]:
        """
        Classify an uploaded image and save it for the user

        Returns:
            (classification, history outcome or None when anonymous)
        """
        result = await classify_waste(image, api_key)

        if not user_id:
            logger.debug("No user on request; skipping history save")
            return result, None

        outcome = await self._save_history(
            user_id,
            image_url=image,
            category=result.category.value,
            confidence=result.confidence,
            explanation=result.explanation,
            recycling_tips=result.recycling_tips,
            disposal_method=result.disposal_method,
            environmental_impact=result.environmental_impact,
        )
        return result, outcome

    async def classify_enhanced(
        self,
        image_url: str,
        enable_ocr: bool = True,
        enable_explanation: bool = True,
        user_location: Optional[str] = None,
        user_id: Optional[str] = None,
        api_key: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Tuple[EnhancedClassificationResult, Optional[BookkeepingOutcome], Optional[BookkeepingOutcome]]:
        """
        Multi-item classification with history and stats bookkeeping

        Returns:
            (result, history outcome, stats outcome); outcomes are None when anonymous
        """
        result = await enhanced_classify_waste(
            image_url,
            enable_ocr=enable_ocr,
            enable_explanation=enable_explanation,
            user_location=user_location,
            api_key=api_key,
        )

        if not user_id:
            return result, None, None

        first_item = result.items[0] if result.items else None
        history = await self._save_history(
            user_id,
            image_url=image_url,
            confidence=first_item.confidence if first_item else 0,
            explanation=result.explanation,
            disposal_method=first_item.disposal_instructions if first_item else None,
            waste_type=(first_item.waste_type if first_item else ItemWasteType.GENERAL).value,
            items_detected=result.items_detected,
            ocr_text=result.ocr_text,
            context_tips=result.context_tips,
            multi_item_results=(
                [item.model_dump(mode="json", by_alias=True) for item in result.items]
                if len(result.items) > 1 else None
            ),
            carbon_impact=result.carbon_impact,
        )

        stats = None
        if self.gamification is not None:
            stats = await self.gamification.record_classification(user_id, result, today=today)

        return result, history, stats

    async def get_history(self, user_id: str, limit: int = 50) -> List[ClassificationRecord]:
        rows = await queries.get_user_classifications(user_id, limit)
        return [ClassificationRecord(**row) for row in rows]

    async def count_history(self, user_id: str) -> int:
        return await queries.count_user_classifications(user_id)

    async def _save_history(self, user_id: str, image_url: str, **fields) -> BookkeepingOutcome:
        try:
            record_id = await queries.save_classification(user_id=user_id, image_url=image_url, **fields)
        except Exception as e:
            logger.error(f"Failed to save classification history for user {user_id}: {e}", exc_info=True)
            bookkeeping_failures_total.labels(operation="save_classification").inc()
            return BookkeepingOutcome(succeeded=False, operation="save_classification", error=str(e))

        logger.info(f"Saved classification {record_id} for user {user_id}")
        return BookkeepingOutcome(succeeded=True, operation="save_classification")
