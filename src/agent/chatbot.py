"""PydanticAI chat assistant for waste and recycling questions"""
import logging
from typing import Optional

from pydantic_ai import Agent
from pydantic_ai.messages import ModelMessage, ModelRequest, ModelResponse, TextPart

from src.config import CHAT_MODEL, get_model_provider, get_provider_api_key
from src.exceptions import ChatError, ConfigurationError

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are an eco-friendly waste management assistant. Help users with:
- Where to dispose of specific items
- How to properly recycle or dispose of waste
- Environmental impact of different disposal methods
- Tips for reducing waste
- Local recycling guidelines
- Hazardous waste handling

Be friendly, concise, and actionable. Always prioritize environmental safety."""

_agent: Optional[Agent] = None


def get_chat_agent() -> Agent:
    """
    Build the chat agent on first use

    Raises:
        ConfigurationError: If no key is configured for CHAT_MODEL's provider
    """
    global _agent

    if not get_provider_api_key(CHAT_MODEL):
        raise ConfigurationError(
            f"No API key configured for chat model {CHAT_MODEL} ({get_model_provider(CHAT_MODEL)})",
            config_key="CHAT_MODEL",
            user_message="Chatbot is not configured. Please contact the administrator.",
        )

    if _agent is None:
        _agent = Agent(model=CHAT_MODEL, system_prompt=SYSTEM_PROMPT)
        logger.info(f"Chat agent initialized with model {CHAT_MODEL}")
    return _agent


def convert_history(history: Optional[list[dict]]) -> list[ModelMessage]:
    """Convert {role, content} dicts to pydantic_ai messages"""
    converted: list[ModelMessage] = []
    for msg in history or []:
        content = msg.get("content")
        if not content:
            continue
        if msg.get("role") == "user":
            converted.append(ModelRequest.user_text_prompt(content))
        elif msg.get("role") == "assistant":
            converted.append(ModelResponse(parts=[TextPart(content=content)], model_name="assistant"))
    return converted


async def chat_with_assistant(message: str, history: Optional[list[dict]] = None) -> str:
    """
    Answer a user's waste question in the context of prior turns

    Args:
        message: The new user message
        history: Earlier turns as [{"role": "user"|"assistant", "content": str}]

    Returns:
        Assistant reply text

    Raises:
        ConfigurationError: If the chat model has no API key
        ChatError: If the model call fails
    """
    agent = get_chat_agent()

    try:
        result = await agent.run(message, message_history=convert_history(history))
    except Exception as e:
        raise ChatError(str(e), operation="chat_with_assistant", cause=e)

    logger.info(f"Chat reply generated ({len(history or [])} prior messages)")
    return result.output
