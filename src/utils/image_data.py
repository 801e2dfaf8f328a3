"""Decode uploaded images (data URLs) and fetch remote images for vision calls"""
import base64
import binascii
import logging
import re
from dataclasses import dataclass

import httpx

from src.config import AI_REQUEST_TIMEOUT
from src.exceptions import ImageFetchError, ValidationError

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w=.-]+)*;base64,(?P<data>.*)$", re.DOTALL)
DEFAULT_MEDIA_TYPE = "image/jpeg"


@dataclass
class ImagePayload:
    """Base64 image data plus its media type"""
    data: str
    media_type: str = DEFAULT_MEDIA_TYPE

    def to_data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


def is_data_url(value: str) -> bool:
    return value.startswith("data:")


def decode_data_url(value: str) -> ImagePayload:
    """
    Split a data URL into media type and base64 payload

    Plain base64 strings (no "data:" prefix) are accepted as JPEG.

    Raises:
        ValidationError: If the value is empty or not valid base64
    """
    if not value or not value.strip():
        raise ValidationError("No image provided", field="image")

    value = value.strip()
    match = DATA_URL_PATTERN.match(value)
    if match:
        data = match.group("data")
        media_type = match.group("mime") or DEFAULT_MEDIA_TYPE
    elif is_data_url(value):
        raise ValidationError("Image must be base64 encoded", field="image")
    else:
        data = value
        media_type = DEFAULT_MEDIA_TYPE

    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image data is not valid base64", field="image")

    return ImagePayload(data=data, media_type=media_type)


async def fetch_image(image_url: str) -> ImagePayload:
    """
    Load an image from a URL (or decode it when given a data URL)

    Raises:
        ImageFetchError: If the download fails
    """
    if is_data_url(image_url):
        return decode_data_url(image_url)

    logger.info(f"Fetching image for classification: {image_url[:100]}")
    try:
        async with httpx.AsyncClient(timeout=AI_REQUEST_TIMEOUT, follow_redirects=True) as client:
            response = await client.get(image_url)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ImageFetchError(
            f"Failed to fetch image: {e}",
            status_code=e.response.status_code,
            operation="fetch_image",
            cause=e,
        )
    except httpx.HTTPError as e:
        raise ImageFetchError(f"Failed to fetch image: {e}", operation="fetch_image", cause=e)

    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    media_type = content_type if content_type.startswith("image/") else DEFAULT_MEDIA_TYPE

    return ImagePayload(
        data=base64.b64encode(response.content).decode("utf-8"),
        media_type=media_type,
    )
