"""
Services module - external collaborators, created once from settings.

The getters double as FastAPI dependencies, so tests can swap any of them
through app.dependency_overrides.
"""

import logging
from typing import Optional

from ..config import settings
from ..core.reminder_store import ReminderFlagStore
from ..llm import LLMProvider, create_llm_provider
from ..storage import LocalRecordStore, RecordStore, SupabaseRecordStore
from .notifications import CareCircleNotifier
from .speech import SpeechService

logger = logging.getLogger(__name__)

_record_store: Optional[RecordStore] = None
_speech_service: Optional[SpeechService] = None
_notifier: Optional[CareCircleNotifier] = None
_reminder_store: Optional[ReminderFlagStore] = None


def get_record_store() -> RecordStore:
    """Supabase when configured, local JSON-lines files otherwise."""
    global _record_store
    if _record_store is None:
        if settings.supabase_url and settings.supabase_key:
            _record_store = SupabaseRecordStore(
                settings.supabase_url, settings.supabase_key, timeout=settings.http_timeout
            )
            logger.info("Record store: Supabase")
        else:
            _record_store = LocalRecordStore(settings.local_storage_path)
            logger.info(f"Record store: local files at {settings.local_storage_path}")
    return _record_store


def get_speech_service() -> SpeechService:
    global _speech_service
    if _speech_service is None:
        _speech_service = SpeechService(
            api_key=settings.elevenlabs_api_key,
            voice_id=settings.elevenlabs_voice_id,
            model=settings.elevenlabs_model,
            base_url=settings.elevenlabs_base_url,
            timeout=settings.http_timeout,
        )
    return _speech_service


def get_notifier() -> CareCircleNotifier:
    global _notifier
    if _notifier is None:
        _notifier = CareCircleNotifier(settings.n8n_webhook_url, timeout=settings.http_timeout)
    return _notifier


def get_llm_provider() -> Optional[LLMProvider]:
    """Get configured LLM provider or None."""
    return create_llm_provider(
        provider="gemini",
        api_key=settings.gemini_api_key or "",
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.http_timeout,
    )


def get_reminder_store() -> ReminderFlagStore:
    global _reminder_store
    if _reminder_store is None:
        _reminder_store = ReminderFlagStore()
    return _reminder_store


__all__ = [
    'CareCircleNotifier', 'SpeechService',
    'get_record_store', 'get_speech_service', 'get_notifier',
    'get_llm_provider', 'get_reminder_store',
]
