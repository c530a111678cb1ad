"""
Groq text generation client used by the Advisor.
The agent only needs `generate(prompt) -> raw text`; the output has no
guaranteed structure.
"""

import logging
from typing import Optional, Protocol

import groq
import httpx
from groq import AsyncGroq

from config import settings
from services.errors import ModelUnavailableError


logger = logging.getLogger(__name__)


ADVISOR_SYSTEM_PROMPT = (
    "You are a careful personal finance assistant. "
    "You always answer with exactly one JSON object and nothing else."
)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class GroqTextGenerator:
    """Single-call text completion over the Groq chat API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.model = model or settings.agent_model
        self.client = AsyncGroq(
            api_key=api_key or settings.groq_api_key,
            timeout=httpx.Timeout(timeout or settings.model_timeout_seconds),
            max_retries=0,  # the caller's timeout bounds the whole call
        )

    async def generate(self, prompt: str) -> str:
        try:
            chat_completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": ADVISOR_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                temperature=settings.model_temperature,
                max_tokens=settings.model_max_tokens,
            )
        except groq.APIError as e:
            raise ModelUnavailableError(f"Groq request failed: {e}") from e

        content = chat_completion.choices[0].message.content
        if not content:
            raise ModelUnavailableError("Groq returned an empty completion")
        return content
