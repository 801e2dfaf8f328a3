"""Vision AI integration for waste photo analysis"""
import logging
import time
from typing import Optional

from src.config import VISION_MODEL, get_model_name, get_model_provider
from src.exceptions import AIProviderError, ConfigurationError
from src.observability.metrics import ai_request_duration_seconds, ai_requests_total
from src.utils.image_data import ImagePayload

logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 1500


async def analyze_image(
    prompt: str,
    image: ImagePayload,
    api_key: str,
    model: str = VISION_MODEL,
) -> str:
    """
    Send an image and a prompt to the configured vision model

    Args:
        prompt: Instruction text
        image: Base64 image payload
        api_key: Provider API key (already resolved by the caller)
        model: "<provider>:<model>" string

    Returns:
        Raw text returned by the model

    Raises:
        ConfigurationError: If the provider prefix is not supported
        AIProviderError: If the provider call fails or returns no text
    """
    provider = get_model_provider(model)
    model_name = get_model_name(model)
    logger.info(f"Analyzing waste image with model {model}")

    if provider == "openai":
        call = _analyze_with_openai(prompt, image, api_key, model_name)
    elif provider == "anthropic":
        call = _analyze_with_anthropic(prompt, image, api_key, model_name)
    elif provider == "google-gla":
        call = _analyze_with_gemini(prompt, image, api_key, model_name)
    else:
        raise ConfigurationError(f"Unknown vision model: {model}", config_key="VISION_MODEL")

    return await _timed(provider, "vision", call)


async def generate_text(
    prompt: str,
    api_key: str,
    model: str = VISION_MODEL,
) -> str:
    """Text-only completion on the vision model (used for connectivity checks)"""
    provider = get_model_provider(model)
    model_name = get_model_name(model)

    if provider == "openai":
        call = _text_with_openai(prompt, api_key, model_name)
    elif provider == "anthropic":
        call = _text_with_anthropic(prompt, api_key, model_name)
    elif provider == "google-gla":
        call = _text_with_gemini(prompt, api_key, model_name)
    else:
        raise ConfigurationError(f"Unknown vision model: {model}", config_key="VISION_MODEL")

    return await _timed(provider, "ping", call)


async def _timed(provider: str, kind: str, call) -> str:
    start = time.perf_counter()
    try:
        text = await call
    except (AIProviderError, ConfigurationError):
        ai_requests_total.labels(provider=provider, kind=kind, status="error").inc()
        raise
    except Exception as e:
        ai_requests_total.labels(provider=provider, kind=kind, status="error").inc()
        raise AIProviderError(
            str(e),
            provider=provider,
            status_code=getattr(e, "status_code", None),
            operation=f"{kind}_request",
            cause=e,
        )
    finally:
        ai_request_duration_seconds.labels(provider=provider, kind=kind).observe(time.perf_counter() - start)

    if not text:
        ai_requests_total.labels(provider=provider, kind=kind, status="error").inc()
        raise AIProviderError("Empty response from AI model", provider=provider, operation=f"{kind}_request")

    ai_requests_total.labels(provider=provider, kind=kind, status="success").inc()
    logger.debug(f"{provider} {kind} response: {text[:500]}")
    return text


# ==========================================
# OpenAI
# ==========================================

async def _analyze_with_openai(prompt: str, image: ImagePayload, api_key: str, model_name: str) -> str:
    """Use OpenAI vision (e.g. gpt-4o-mini)"""
    from openai import AsyncOpenAI

    client = AsyncOpenAI(api_key=api_key)
    response = await client.chat.completions.create(
        model=model_name,
        messages=[
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": image.to_data_url()}},
                ],
            }
        ],
        max_tokens=MAX_OUTPUT_TOKENS,
    )
    return response.choices[0].message.content or ""


async def _text_with_openai(prompt: str, api_key: str, model_name: str) -> str:
    from openai import AsyncOpenAI

    client = AsyncOpenAI(api_key=api_key)
    response = await client.chat.completions.create(
        model=model_name,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=16,
    )
    return response.choices[0].message.content or ""


# ==========================================
# Anthropic
# ==========================================

async def _analyze_with_anthropic(prompt: str, image: ImagePayload, api_key: str, model_name: str) -> str:
    """Use Anthropic Claude vision"""
    from anthropic import AsyncAnthropic

    client = AsyncAnthropic(api_key=api_key)
    response = await client.messages.create(
        model=model_name,
        max_tokens=MAX_OUTPUT_TOKENS,
        messages=[
            {
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": image.media_type,
                            "data": image.data,
                        },
                    },
                    {"type": "text", "text": prompt},
                ],
            }
        ],
    )
    return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")


async def _text_with_anthropic(prompt: str, api_key: str, model_name: str) -> str:
    from anthropic import AsyncAnthropic

    client = AsyncAnthropic(api_key=api_key)
    response = await client.messages.create(
        model=model_name,
        max_tokens=16,
        messages=[{"role": "user", "content": prompt}],
    )
    return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")


# ==========================================
# Google Gemini
# ==========================================

async def _analyze_with_gemini(prompt: str, image: ImagePayload, api_key: str, model_name: str) -> str:
    """Use Google Gemini (e.g. gemini-2.5-flash)"""
    import google.generativeai as genai

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(model_name)
    response = await model.generate_content_async(
        [
            prompt,
            {"mime_type": image.media_type, "data": image.to_bytes()},
        ]
    )
    return response.text


async def _text_with_gemini(prompt: str, api_key: str, model_name: str) -> str:
    import google.generativeai as genai

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(model_name)
    response = await model.generate_content_async(prompt)
    return response.text


def require_api_key(api_key: Optional[str], model: str = VISION_MODEL) -> str:
    """
    Fail closed when no key is available for the vision provider

    Raises:
        ConfigurationError: If api_key is empty
    """
    if not api_key:
        provider = get_model_provider(model)
        env_var = {
            "openai": "OPENAI_API_KEY",
            "anthropic": "ANTHROPIC_API_KEY",
            "google-gla": "GEMINI_API_KEY",
        }.get(provider, "the provider API key")
        raise ConfigurationError(
            f"Missing API key for {model}",
            config_key=env_var,
            user_message=f"AI API key is required. Save it in Settings or set {env_var} in the environment.",
        )
    return api_key
