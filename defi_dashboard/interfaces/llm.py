"""LLM client protocol — text generation abstraction."""
from typing import Protocol


class LLMClient(Protocol):
    """Abstract interface for a single-prompt text completion."""

    async def generate(self, prompt: str, system: str = "") -> str: ...
