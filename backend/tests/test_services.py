"""
Unit tests for external collaborators.
Tests speech synthesis, care circle notifications and both record stores.
"""

import base64
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from amily.core.exceptions import NotificationError, SpeechSynthesisError
from amily.services.notifications import CareCircleNotifier
from amily.services.speech import SpeechService
from amily.storage.local_storage import LocalRecordStore
from amily.storage.supabase_storage import SupabaseRecordStore


def _mock_client(mock_client, response=None, error=None, method="post"):
    mock_instance = AsyncMock()
    call = getattr(mock_instance, method)
    if error is not None:
        call.side_effect = error
    else:
        call.return_value = response
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    mock_client.return_value = mock_instance
    return mock_instance


class TestSpeechService:
    """Tests for ElevenLabs speech synthesis."""

    @pytest.mark.asyncio
    async def test_demo_mode_returns_none(self):
        service = SpeechService(api_key=None)
        assert service.is_configured() is False
        assert await service.synthesize("Hello dear") is None

    @pytest.mark.asyncio
    async def test_synthesize_returns_data_url(self):
        service = SpeechService(api_key="xi-key", voice_id="voice1")
        mock_response = MagicMock()
        mock_response.content = b"mp3-bytes"
        mock_response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_client(mock_client, response=mock_response)
            audio_url = await service.synthesize("Hello… dear")

        assert audio_url == "data:audio/mpeg;base64," + base64.b64encode(b"mp3-bytes").decode()
        url = mock_instance.post.call_args[0][0]
        kwargs = mock_instance.post.call_args[1]
        assert url.endswith("/text-to-speech/voice1")
        assert kwargs["headers"]["xi-api-key"] == "xi-key"
        assert kwargs["json"]["text"] == "Hello… dear"
        assert kwargs["json"]["model_id"] == "eleven_turbo_v2_5"

    @pytest.mark.asyncio
    async def test_synthesize_failure_raises(self):
        service = SpeechService(api_key="xi-key")
        with patch("httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, error=httpx.ConnectError("down"))
            with pytest.raises(SpeechSynthesisError):
                await service.synthesize("Hello")


class TestCareCircleNotifier:
    """Tests for n8n notifications."""

    @pytest.mark.asyncio
    async def test_unconfigured_returns_false(self):
        assert await CareCircleNotifier(None).notify("emergency_alert", {"userId": "u1"}) is False

    @pytest.mark.asyncio
    async def test_notify_posts_event(self):
        notifier = CareCircleNotifier("https://n8n.example.com/webhook/amily")
        mock_response = MagicMock()
        mock_response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_client(mock_client, response=mock_response)
            assert await notifier.notify("mood_alert", {"userId": "u1", "mood": "low"}) is True

        args, kwargs = mock_instance.post.call_args
        assert args[0] == "https://n8n.example.com/webhook/amily"
        assert kwargs["json"] == {"event": "mood_alert", "userId": "u1", "mood": "low"}

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self):
        notifier = CareCircleNotifier("https://n8n.example.com/webhook/amily")
        with patch("httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, error=httpx.ConnectTimeout("timeout"))
            with pytest.raises(NotificationError):
                await notifier.notify("emergency_alert", {"userId": "u1"})


class TestLocalRecordStore:
    """Tests for the JSON-lines record store."""

    @pytest.mark.asyncio
    async def test_save_and_fetch_newest_first(self, tmp_path):
        store = LocalRecordStore(str(tmp_path))
        assert await store.save("chat_messages", {"user_id": "u1", "text": "first", "timestamp": "2026-01-01T10:00:00"})
        assert await store.save("chat_messages", {"user_id": "u2", "text": "other", "timestamp": "2026-01-01T10:30:00"})
        assert await store.save("chat_messages", {"user_id": "u1", "text": "second", "timestamp": "2026-01-01T11:00:00"})

        rows = await store.fetch("chat_messages", {"user_id": "u1"})
        assert [r["text"] for r in rows] == ["second", "first"]

        limited = await store.fetch("chat_messages", limit=1)
        assert [r["text"] for r in limited] == ["second"]

    @pytest.mark.asyncio
    async def test_missing_collection_is_empty(self, tmp_path):
        assert await LocalRecordStore(str(tmp_path)).fetch("memories") == []

    @pytest.mark.asyncio
    async def test_path_traversal_is_rejected(self, tmp_path):
        store = LocalRecordStore(str(tmp_path / "data"))
        assert await store.save("../escape", {"x": 1}) is False
        assert await store.fetch("../escape") == []
        assert not (tmp_path / "escape.jsonl").exists()

    @pytest.mark.asyncio
    async def test_unserializable_record_is_stored_as_text(self, tmp_path):
        store = LocalRecordStore(str(tmp_path))
        assert await store.save("wellness_log", {"value": {1, 2}, "timestamp": "t"}) is True


class TestSupabaseRecordStore:
    """Tests for the Supabase (PostgREST) record store."""

    @pytest.mark.asyncio
    async def test_save(self):
        store = SupabaseRecordStore("https://xyz.supabase.co/", "anon-key")
        mock_response = MagicMock()
        mock_response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_client(mock_client, response=mock_response)
            assert await store.save("check_ins", {"user_id": "u1"}) is True

        args, kwargs = mock_instance.post.call_args
        assert args[0] == "https://xyz.supabase.co/rest/v1/check_ins"
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
        assert kwargs["headers"]["Prefer"] == "return=minimal"

    @pytest.mark.asyncio
    async def test_save_failure_returns_false(self):
        store = SupabaseRecordStore("https://xyz.supabase.co", "anon-key")
        with patch("httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, error=httpx.ConnectError("down"))
            assert await store.save("check_ins", {"user_id": "u1"}) is False

    @pytest.mark.asyncio
    async def test_fetch_builds_filters(self):
        store = SupabaseRecordStore("https://xyz.supabase.co", "anon-key")
        mock_response = MagicMock()
        mock_response.json.return_value = [{"user_id": "u1", "text": "hi"}]
        mock_response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_client(mock_client, response=mock_response, method="get")
            rows = await store.fetch("chat_messages", {"user_id": "u1"}, limit=20)

        assert rows == [{"user_id": "u1", "text": "hi"}]
        params = mock_instance.get.call_args[1]["params"]
        assert params == {"select": "*", "order": "timestamp.desc", "user_id": "eq.u1", "limit": 20}

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_empty(self):
        store = SupabaseRecordStore("https://xyz.supabase.co", "anon-key")
        with patch("httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, error=httpx.ReadTimeout("slow"), method="get")
            assert await store.fetch("chat_messages") == []
