"""Tests for the OpenAI JSON generation service."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import AsyncOpenAI

from app.core import config
from app.exceptions import EnrichmentFailedError
from app.services import openai_service
from app.services.openai_service import OpenAIService, get_openai_service


class TestConfiguration:
    """Test OpenAIService configuration."""

    def test_is_configured_with_key(self):
        """Test service reports configured when a key is given."""
        assert OpenAIService(api_key="sk-test").is_configured is True

    def test_api_key_is_stripped(self):
        """Test whitespace around the key is removed."""
        assert OpenAIService(api_key="  sk-test\n").api_key == "sk-test"

    def test_not_configured_without_key(self):
        """Test service reports unconfigured with no key."""
        with patch.object(openai_service, "OPENAI_API_KEY", ""):
            assert OpenAIService().is_configured is False

    def test_client_created_lazily(self):
        """Test the SDK client is created on first use and reused."""
        service = OpenAIService(api_key="sk-test")
        assert service._client is None

        client = service._get_client()
        assert isinstance(client, AsyncOpenAI)
        assert service._get_client() is client

    @pytest.mark.asyncio
    async def test_close_resets_client(self):
        """Test close() releases the SDK client."""
        service = OpenAIService(api_key="sk-test")
        service._get_client()
        await service.close()
        assert service._client is None

    def test_deadline_defaults_to_config(self):
        """Test the overall deadline comes from configuration unless given."""
        with patch.object(config, "OPENAI_DEADLINE", 12.0):
            assert OpenAIService(api_key="sk-test")._deadline == 12.0
        assert OpenAIService(api_key="sk-test", deadline=3.0)._deadline == 3.0

    def test_singleton(self):
        """Test get_openai_service returns the same instance."""
        with patch.object(openai_service, "_openai_service", None):
            first = get_openai_service()
            assert get_openai_service() is first


class TestExtractJson:
    """Test markdown fence handling."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = OpenAIService(api_key="sk-test")

    def test_plain_json(self):
        """Test plain JSON passes through."""
        assert self.service._extract_json(' {"a": 1} ') == '{"a": 1}'

    def test_fenced_json(self):
        """Test ```json fences are removed."""
        text = '```json\n{"a": 1}\n```'
        assert self.service._extract_json(text) == '{"a": 1}'


class TestGenerateJson:
    """Test generate_json."""

    @pytest.mark.asyncio
    async def test_returns_parsed_object(self, ai_service, mock_create, completion):
        """Test a JSON object reply is parsed."""
        mock_create.return_value = completion(json.dumps({"businessName": "Acme"}))

        result = await ai_service.generate_json("prompt text")

        assert result == {"businessName": "Acme"}

    @pytest.mark.asyncio
    async def test_sends_prompt_as_user_message(self, ai_service, mock_create, completion):
        """Test the request carries the prompt, model and JSON response format."""
        mock_create.return_value = completion("{}")

        await ai_service.generate_json("describe https://example.com/logo.png")

        mock_create.assert_awaited_once()
        kwargs = mock_create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"] == [
            {"role": "user", "content": "describe https://example.com/logo.png"}
        ]
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0

    @pytest.mark.asyncio
    async def test_fenced_reply_parsed(self, ai_service, mock_create, completion):
        """Test replies wrapped in markdown fences are accepted."""
        mock_create.return_value = completion('```json\n{"primaryColor": "#fff000"}\n```')

        result = await ai_service.generate_json("prompt")

        assert result == {"primaryColor": "#fff000"}

    @pytest.mark.asyncio
    async def test_request_error_raises(self, ai_service, mock_create):
        """Test SDK errors become EnrichmentFailedError."""
        mock_create.side_effect = Exception("OpenAI API error")

        with pytest.raises(EnrichmentFailedError, match="OpenAI API error"):
            await ai_service.generate_json("prompt")

    @pytest.mark.asyncio
    async def test_slow_reply_exceeds_deadline(self, mock_create):
        """Test a reply slower than the deadline raises EnrichmentFailedError."""

        async def slow_create(**kwargs):
            await asyncio.sleep(1)

        mock_create.side_effect = slow_create
        service = OpenAIService(api_key="sk-test", deadline=0.05)
        service._client = MagicMock()
        service._client.chat.completions.create = mock_create

        with pytest.raises(EnrichmentFailedError, match="deadline"):
            await service.generate_json("prompt")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, ai_service, mock_create, completion):
        """Test non-JSON replies raise EnrichmentFailedError."""
        mock_create.return_value = completion("Sorry, I can't help with that.")

        with pytest.raises(EnrichmentFailedError, match="Invalid JSON"):
            await ai_service.generate_json("prompt")

    @pytest.mark.asyncio
    async def test_non_object_json_raises(self, ai_service, mock_create, completion):
        """Test a JSON array reply is rejected."""
        mock_create.return_value = completion('["not", "an", "object"]')

        with pytest.raises(EnrichmentFailedError, match="not a JSON object"):
            await ai_service.generate_json("prompt")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_reply_raises(self, ai_service, mock_create, completion, content):
        """Test empty replies raise EnrichmentFailedError."""
        mock_create.return_value = completion(content)

        with pytest.raises(EnrichmentFailedError, match="no content"):
            await ai_service.generate_json("prompt")

    @pytest.mark.asyncio
    async def test_unconfigured_skips_request(self):
        """Test an unconfigured service fails without calling the API."""
        with patch.object(openai_service, "OPENAI_API_KEY", ""):
            service = OpenAIService()
        service._client = AsyncMock()

        with pytest.raises(EnrichmentFailedError, match="not configured"):
            await service.generate_json("prompt")

        service._client.chat.completions.create.assert_not_called()
