"""
Companion API endpoints - Daily check-in, MemoryLane, buddy messages,
empathetic responses and user preferences.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends

from ..core.care_circle import escalate_alert
from ..core.companion import (
    DEFAULT_PREFERENCES,
    extract_memory,
    plan_for_mood,
    summarize_buddy_message,
)
from ..core.exceptions import CompanionError, InvalidRequestError
from ..core.persona import (
    detect_emotion,
    emotion_to_mood,
    format_for_speech,
    generate_check_in_message,
    generate_empathetic_response,
    generate_memory_prompt,
    generate_social_encouragement,
)
from ..core.safety import classify_safety
from ..core.wellness import stress_reduction
from ..models import BuddyRequest, CheckInRequest, EmpathyRequest, MemoryRequest
from ..services import (
    CareCircleNotifier,
    SpeechService,
    get_notifier,
    get_record_store,
    get_speech_service,
)
from ..storage import RecordStore
from .envelope import envelope, now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["companion"])


@router.post("/checkin")
async def daily_checkin(
    request: CheckInRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
    notifier: CareCircleNotifier = Depends(get_notifier),
):
    """
    Daily check-in with mood assessment and a gentle plan.

    The mood comes from the user's words when given, otherwise from the
    mood the app sent, otherwise it is assumed good.
    """
    user_id = request.user_id or "anonymous"

    try:
        if request.user_input and request.user_input.strip():
            mood = emotion_to_mood(detect_emotion(request.user_input))
        else:
            mood = request.mood or "good"

        plan = plan_for_mood(mood)
        tts_text = f"{generate_check_in_message(plan.mood)} {format_for_speech(plan.summary)}"
        audio_url = await speech.synthesize(tts_text)

        await store.save("check_ins", {
            "user_id": user_id,
            "plan": plan.model_dump(),
            "timestamp": now_iso(),
        })

        if plan.mood == "low":
            await notifier.notify("mood_alert", {
                "userId": user_id,
                "mood": "low",
                "timestamp": now_iso(),
            })

        return envelope(data=plan.model_dump(), tts_text=tts_text, audio_url=audio_url)
    except Exception as e:
        logger.error(f"Check-in error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="Something went wrong... let's try again in a moment.")


@router.post("/memory")
async def record_memory(
    request: MemoryRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
):
    """Record a memory for MemoryLane."""
    if not request.story_input or not request.story_input.strip():
        raise InvalidRequestError("Please share a memory with me.")

    try:
        memory = extract_memory(request.story_input)
        tts_text = format_for_speech(
            f"{generate_memory_prompt()} I've saved your story about \"{memory.title}\"."
        )
        audio_url = await speech.synthesize(tts_text)

        await store.save("memories", {
            "user_id": request.user_id,
            "memory": memory.model_dump(),
            "timestamp": now_iso(),
        })

        return envelope(data=memory.model_dump(), tts_text=tts_text, audio_url=audio_url)
    except Exception as e:
        logger.error(f"Memory recording error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="I had trouble saving that... can we try once more?")


@router.post("/buddy")
async def buddy_message(
    request: BuddyRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
):
    """Summarize a message from a friend and encourage a reply."""
    try:
        summary = summarize_buddy_message(request.message_from, request.message_text)
        tts_text = format_for_speech(f"{summary.summary} {generate_social_encouragement()}")
        audio_url = await speech.synthesize(tts_text)

        await store.save("buddy_messages", {
            "user_id": request.user_id,
            "message_from": request.message_from,
            "summary": summary.model_dump(),
            "timestamp": now_iso(),
        })

        return envelope(data=summary.model_dump(), tts_text=tts_text, audio_url=audio_url)
    except Exception as e:
        logger.error(f"Buddy message error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="I couldn't read that message... let's check again.")


@router.post("/empathy")
async def empathetic_response(
    request: EmpathyRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
    notifier: CareCircleNotifier = Depends(get_notifier),
):
    """
    Respond to how the user feels. Safety concerns are checked first; an
    emergency goes to the care circle and gets a calm reassurance.
    """
    user_input = request.user_input
    if not isinstance(user_input, str) or not user_input.strip():
        raise InvalidRequestError("I'm listening... tell me a little about how you feel.")

    user_id = request.user_id or "unknown"

    try:
        alert = classify_safety(user_input)

        if alert.is_high_severity:
            result = await escalate_alert(
                notifier, speech, user_id, alert, context=user_input, store=store
            )
            return envelope(
                data={"emotion": "emergency", "response": result["tts_text"]},
                tts_text=result["tts_text"],
                audio_url=result["audio_url"],
                emergency=True,
                alert=alert.model_dump(by_alias=True),
                alertId=result["alert_id"],
                caregiverNotified=result["caregiver_notified"],
            )

        emotion = detect_emotion(user_input)
        response = generate_empathetic_response(emotion)
        audio_url = await speech.synthesize(response)

        data = {"emotion": emotion, "response": response}
        if emotion == "stressed":
            data["breathing"] = stress_reduction("medium").model_dump(by_alias=True, exclude_none=True)

        return envelope(
            data=data,
            tts_text=response,
            audio_url=audio_url,
            emergency=False,
            alert=alert.model_dump(by_alias=True) if alert.level == "concern" else None,
        )
    except Exception as e:
        logger.error(f"Empathy response error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="I'm here... let's take a breath together.")


@router.get("/preferences/{user_id}")
async def get_preferences(
    user_id: str,
    store: RecordStore = Depends(get_record_store),
):
    """Get user preferences, falling back to gentle defaults."""
    rows = await store.fetch("user_preferences", {"user_id": user_id}, limit=1)
    preferences: Optional[dict] = None
    if rows:
        row = rows[0]
        preferences = row.get("preferences") or {
            key: value for key, value in row.items() if key not in ("id", "user_id", "timestamp")
        }

    return envelope(data={**DEFAULT_PREFERENCES, **(preferences or {})})
