"""
ChatBox API - Free conversation with Amily, with stored history.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends

from ..config import settings
from ..core.care_circle import escalate_alert
from ..core.chat import generate_chat_reply
from ..core.exceptions import CompanionError, InvalidRequestError
from ..core.persona import ComposeOptions, format_for_speech
from ..core.reminder_store import ReminderFlagStore
from ..core.safety import classify_safety
from ..llm import LLMProvider
from ..models import ChatboxRequest
from ..services import (
    CareCircleNotifier,
    SpeechService,
    get_llm_provider,
    get_notifier,
    get_record_store,
    get_reminder_store,
    get_speech_service,
)
from ..storage import RecordStore
from .envelope import envelope, now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chatbox", tags=["chatbox"])

HISTORY_CONTEXT_LIMIT = 20
HISTORY_PAGE_LIMIT = 50


async def _save_turn(store: RecordStore, user_id: str, role: str, text: str, emotion: Optional[str] = None):
    await store.save("chat_messages", {
        "user_id": user_id,
        "role": role,
        "text": text,
        "emotion": emotion,
        "timestamp": now_iso(),
    })


@router.post("")
async def chat(
    request: ChatboxRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
    notifier: CareCircleNotifier = Depends(get_notifier),
    reminders: ReminderFlagStore = Depends(get_reminder_store),
    llm_provider: Optional[LLMProvider] = Depends(get_llm_provider),
):
    """
    Answer a ChatBox message.

    The first message of the day also asks about medication and water.
    Messages that sound like an emergency go to the care circle instead
    of the conversational reply.
    """
    if not request.input or not request.input.strip():
        raise InvalidRequestError("Please share a little about how you are feeling.")

    user_id = str(request.user_id or "anonymous")
    user_input = request.input

    try:
        first_turn = reminders.check_and_set(user_id)

        alert = classify_safety(user_input)
        if alert.is_high_severity:
            result = await escalate_alert(
                notifier, speech, user_id, alert, context=user_input, store=store
            )
            await _save_turn(store, user_id, "user", user_input)
            await _save_turn(store, user_id, "amily", result["tts_text"], emotion="emergency")
            return envelope(
                data={"firstTurn": first_turn, "emergency": True},
                tts_text=result["tts_text"],
                audio_url=result["audio_url"],
                alert=alert.model_dump(by_alias=True),
                alertId=result["alert_id"],
                caregiverNotified=result["caregiver_notified"],
            )

        history = await store.fetch(
            "chat_messages", {"user_id": user_id}, limit=HISTORY_CONTEXT_LIMIT
        )
        reply = await generate_chat_reply(user_input, history, first_turn, llm_provider)
        tts_text = format_for_speech(reply, ComposeOptions(include_reassurance=False))
        audio_url = await speech.synthesize(tts_text)

        await _save_turn(store, user_id, "user", user_input)
        await _save_turn(store, user_id, "amily", tts_text)

        return envelope(
            data={
                "firstTurn": first_turn,
                "reasoningModel": settings.gemini_model,
                "voiceModel": settings.elevenlabs_model,
            },
            tts_text=tts_text,
            audio_url=audio_url,
        )
    except Exception as e:
        logger.error(f"ChatBox error: {e}", exc_info=True)
        raise CompanionError(
            str(e), user_message="I had trouble answering just now… can we try again in a moment?"
        )


@router.get("/history/{user_id}")
async def chat_history(
    user_id: str,
    store: RecordStore = Depends(get_record_store),
):
    """Recent ChatBox messages for a user, newest first."""
    rows = await store.fetch("chat_messages", {"user_id": user_id}, limit=HISTORY_PAGE_LIMIT)
    messages = [
        {
            "type": "user" if row.get("role") == "user" else "amily",
            "text": row.get("text"),
            "emotion": row.get("emotion"),
            "timestamp": row.get("timestamp"),
        }
        for row in rows
    ]
    return envelope(data=messages)
