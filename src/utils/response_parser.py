"""
Parse JSON out of free-form AI model responses

Vision models are asked to answer with JSON only, but regularly wrap the
object in markdown fences or surround it with prose. Parsing tries, in
order:

1. the whole response as JSON
2. the first ```json ... ``` (or bare ```) fenced object
3. everything from the first "{" to the last "}"

and raises ResponseParseError when none of them yields a JSON object.
"""
import json
import math
import logging
import re
from typing import Any

from src.exceptions import ResponseParseError
from src.models.classification import ClassificationResult, WasteCategory

logger = logging.getLogger(__name__)

FENCED_JSON_PATTERN = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
BARE_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def _loads_object(candidate: str) -> dict:
    data = json.loads(candidate)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_ai_json(text: str) -> dict:
    """
    Extract a JSON object from a model response

    Args:
        text: Raw text returned by the model

    Returns:
        The parsed object

    Raises:
        ResponseParseError: If no strategy yields a JSON object
    """
    if not isinstance(text, str):
        raise ResponseParseError(raw_response=repr(text))

    try:
        return _loads_object(text)
    except ValueError:
        logger.debug("Direct JSON parse failed, trying fenced code block")

    fenced = FENCED_JSON_PATTERN.search(text)
    if fenced:
        try:
            return _loads_object(fenced.group(1))
        except ValueError:
            logger.debug("Fenced JSON parse failed, trying bare object")

    bare = BARE_OBJECT_PATTERN.search(text)
    if bare:
        try:
            return _loads_object(bare.group(0))
        except ValueError:
            pass

    logger.warning(f"Failed to parse AI response: {text[:200]!r}")
    raise ResponseParseError(raw_response=text)


def coerce_confidence(value: Any) -> float:
    """Coerce a model-supplied confidence to a number in [0, 100]"""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(confidence):
        return 0.0
    return max(0.0, min(100.0, confidence))


def parse_classification(text: str) -> ClassificationResult:
    """
    Parse a single-item classification response

    Returns:
        ClassificationResult; categories outside the enum become UNKNOWN
        with the model's label kept in raw_category
    """
    data = parse_ai_json(text)

    raw_category = data.get("category")
    category = WasteCategory.from_label(raw_category)
    if category is WasteCategory.UNKNOWN:
        logger.warning(f"Model returned unrecognised category: {raw_category!r}")

    explanation = data.get("explanation")

    return ClassificationResult(
        category=category,
        confidence=coerce_confidence(data.get("confidence")),
        explanation=explanation if isinstance(explanation, str) else "",
        raw_category=raw_category if isinstance(raw_category, str) else None,
    )
