"""LLM clients."""
from .chat_client import OpenAIChatClient

__all__ = ["OpenAIChatClient"]
