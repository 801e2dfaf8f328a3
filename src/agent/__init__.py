"""PydanticAI agents"""
from src.agent.chatbot import chat_with_assistant, get_chat_agent

__all__ = ["chat_with_assistant", "get_chat_agent"]
