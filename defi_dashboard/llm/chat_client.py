"""OpenAI-compatible chat-completions client with retries."""
from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import LLMConfig

logger = logging.getLogger(__name__)

# Seconds to wait before retry n is ``RETRY_DELAY * n``.
RETRY_DELAY = 1.0


class OpenAIChatClient:
    """Single-prompt text generation against ``{base_url}/chat/completions``."""

    def __init__(self, config: LLMConfig) -> None:
        self.url = f"{config.base_url.rstrip('/')}/chat/completions"
        self.api_key = config.api_key
        self.model = config.model
        self.temperature = config.temperature
        self.max_retries = config.max_retries
        self.timeout = config.timeout

    def _payload(self, prompt: str, system: str) -> dict[str, Any]:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }

    async def _complete(self, payload: dict[str, Any]) -> str:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                self.url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(f"HTTP {response.status}: {error_text}")
                data = await response.json()

        choices = data.get("choices") or []
        if not choices:
            raise RuntimeError("LLM response contained no choices")
        return choices[0].get("message", {}).get("content") or ""

    async def generate(self, prompt: str, system: str = "") -> str:
        """Return the model's reply, retrying up to ``max_retries`` times."""
        if not self.api_key:
            raise RuntimeError("LLM_API_KEY environment variable is not configured")

        payload = self._payload(prompt, system)
        attempts = self.max_retries + 1

        last_error: Exception | None = None
        for attempt in range(attempts):
            try:
                text = await self._complete(payload)
                if attempt:
                    logger.info("LLM request succeeded on attempt %d", attempt + 1)
                return text
            except Exception as e:
                last_error = e
                logger.warning(
                    "LLM request attempt %d/%d failed: %s", attempt + 1, attempts, e
                )
                if attempt < attempts - 1:
                    await asyncio.sleep(RETRY_DELAY * (attempt + 1))

        raise RuntimeError(
            f"LLM request failed after {attempts} attempts: {last_error}"
        )
