"""
Unit tests for the LLM module.
Tests LLMMessage, LLMResponse, the Gemini provider and the factory.
"""

import pytest
from unittest.mock import AsyncMock, patch, MagicMock

from amily.llm.base import LLMMessage, LLMResponse
from amily.llm.gemini_provider import GeminiProvider
from amily.llm.factory import create_llm_provider


class TestLLMMessage:
    """Tests for LLMMessage dataclass."""

    def test_text_message(self):
        msg = LLMMessage.text("user", "Hello")
        assert msg.role == "user"
        assert msg.content == "Hello"

    def test_system_message(self):
        msg = LLMMessage.text("system", "You are Amily")
        assert msg.role == "system"
        assert msg.content == "You are Amily"


class TestLLMResponse:
    """Tests for LLMResponse dataclass."""

    def test_basic_response(self):
        resp = LLMResponse(content="Hello!", model="gemini-1.5-flash")
        assert resp.content == "Hello!"
        assert resp.usage == {}
        assert resp.raw is None


class TestGeminiProvider:
    """Tests for the Gemini provider."""

    def test_init_defaults(self):
        provider = GeminiProvider(api_key="test-key")
        assert provider.api_key == "test-key"
        assert provider.model == "gemini-1.5-flash"
        assert "generativelanguage.googleapis.com" in provider.base_url

    def test_headers(self):
        headers = GeminiProvider(api_key="g-123")._get_headers()
        assert headers["x-goog-api-key"] == "g-123"
        assert headers["Content-Type"] == "application/json"

    def test_build_payload(self):
        provider = GeminiProvider(api_key="test")
        payload = provider._build_payload(
            [
                LLMMessage.text("system", "be kind"),
                LLMMessage.text("user", "hi"),
                LLMMessage.text("assistant", "hello"),
            ],
            temperature=0.5,
            max_tokens=100,
        )
        assert payload["systemInstruction"] == {"parts": [{"text": "be kind"}]}
        assert payload["contents"] == [
            {"role": "user", "parts": [{"text": "hi"}]},
            {"role": "model", "parts": [{"text": "hello"}]},
        ]
        assert payload["generationConfig"] == {"temperature": 0.5, "maxOutputTokens": 100}

    def test_build_payload_without_system(self):
        payload = GeminiProvider(api_key="t")._build_payload([LLMMessage.text("user", "hi")], 0.7, 10)
        assert "systemInstruction" not in payload

    def test_extract_text_empty(self):
        assert GeminiProvider._extract_text({}) == ""

    @pytest.mark.asyncio
    async def test_chat_completion_success(self):
        provider = GeminiProvider(api_key="test-key")
        mock_response = MagicMock()
        mock_response.json.return_value = {
            "candidates": [{"content": {"parts": [{"text": "Hello… "}, {"text": "dear"}]}}],
            "modelVersion": "gemini-1.5-flash-002",
            "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5, "totalTokenCount": 15},
        }
        mock_response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = AsyncMock()
            mock_instance.post.return_value = mock_response
            mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
            mock_instance.__aexit__ = AsyncMock(return_value=False)
            mock_client.return_value = mock_instance

            result = await provider.chat_completion(
                [LLMMessage.text("user", "Hello")]
            )

            assert result.content == "Hello… dear"
            assert result.model == "gemini-1.5-flash-002"
            assert result.usage["total_tokens"] == 15
            url = mock_instance.post.call_args[0][0]
            assert url.endswith("/models/gemini-1.5-flash:generateContent")

    @pytest.mark.asyncio
    async def test_chat_completion_error_propagates(self):
        provider = GeminiProvider(api_key="test-key")

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = AsyncMock()
            mock_instance.post.side_effect = RuntimeError("connection reset")
            mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
            mock_instance.__aexit__ = AsyncMock(return_value=False)
            mock_client.return_value = mock_instance

            with pytest.raises(RuntimeError):
                await provider.chat_completion([LLMMessage.text("user", "Hello")])


class TestFactory:
    """Tests for the LLM provider factory."""

    def test_no_api_key(self):
        assert create_llm_provider(provider="gemini", api_key="") is None

    def test_create_gemini(self):
        provider = create_llm_provider(provider="gemini", api_key="key", model="gemini-2.0-flash", timeout=5)
        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.0-flash"
        assert provider.timeout == 5

    def test_unsupported_provider(self):
        with pytest.raises(ValueError):
            create_llm_provider(provider="unknown", api_key="key")
