"""OpenAI service for LLM-based branding analysis.

This service uses the OpenAI Python SDK against any OpenAI-compatible API
(``OPENAI_BASE_URL``). It exposes a single prompt-in, JSON-out call.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from openai import AsyncOpenAI

from app.core import config
from app.core.config import OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL, OPENAI_TIMEOUT
from app.exceptions import EnrichmentFailedError

logger = logging.getLogger(__name__)


class OpenAIService:
    """Service for JSON-structured text generation via the OpenAI SDK."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = OPENAI_MODEL,
        base_url: str = OPENAI_BASE_URL,
        timeout: float = OPENAI_TIMEOUT,
        deadline: float | None = None,
    ) -> None:
        # Prefer explicit api_key, otherwise env var; strip to avoid hidden whitespace/newlines.
        self.api_key = (api_key or OPENAI_API_KEY or "").strip()
        self.model = model
        self._base_url = base_url
        self._timeout = timeout
        self._deadline = deadline or config.OPENAI_DEADLINE
        self._client: AsyncOpenAI | None = None

    @property
    def is_configured(self) -> bool:
        """Check if the API key is configured."""
        return bool(self.api_key)

    def _get_client(self) -> AsyncOpenAI:
        """Get or create SDK client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    async def close(self) -> None:
        """Close SDK client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def _chat_completion(
        self,
        *,
        messages: list[dict[str, Any]],
        temperature: float = 0,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        client = self._get_client()
        resp = await client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            response_format=response_format,
        )
        if not resp.choices:
            return ""
        return (resp.choices[0].message.content or "").strip()

    async def generate_json(self, prompt: str) -> dict[str, Any]:
        """Send a prompt and parse the reply as a JSON object.

        Raises:
            EnrichmentFailedError: If the service is unconfigured, the request
                fails, or the reply is empty or not a JSON object.
        """
        if not self.is_configured:
            logger.warning("OpenAI API key not configured")
            raise EnrichmentFailedError("OpenAI API key not configured")

        try:
            content_text = await asyncio.wait_for(
                self._chat_completion(
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0,
                    response_format={"type": "json_object"},
                ),
                timeout=self._deadline,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"OpenAI request exceeded {self._deadline}s deadline")
            raise EnrichmentFailedError(f"Request exceeded {self._deadline}s deadline") from e
        except Exception as e:
            logger.exception("OpenAI SDK request failed: %s", e)
            raise EnrichmentFailedError(f"Request failed: {e}") from e

        if not content_text:
            raise EnrichmentFailedError("Model returned no content")

        try:
            data = json.loads(self._extract_json(content_text))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse LLM response as JSON: {e}")
            raise EnrichmentFailedError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            logger.error(f"LLM response is {type(data).__name__}, expected object")
            raise EnrichmentFailedError("Model response is not a JSON object")
        return data

    def _extract_json(self, text: str) -> str:
        """Extract JSON from response, handling markdown code blocks."""
        text = text.strip()
        if text.startswith("```"):
            lines = text.split("\n")
            lines = [line for line in lines if not line.startswith("```")]
            text = "\n".join(lines)
        return text.strip()


_openai_service: OpenAIService | None = None


def get_openai_service() -> OpenAIService:
    """Get the singleton OpenAIService instance."""
    global _openai_service
    if _openai_service is None:
        _openai_service = OpenAIService()
    return _openai_service
