"""
Safety API endpoints - Vitals monitoring, manual emergencies and
safety check-in questions.
"""

import logging
from fastapi import APIRouter, Depends, Query

from ..core.care_circle import escalate_alert
from ..core.exceptions import CompanionError
from ..core.persona import format_for_speech, generate_greeting
from ..core.safety import classify_vitals, manual_emergency_alert, parse_vitals, safety_check_in_questions
from ..models import EmergencyRequest, TimeOfDay, VitalsRequest, VitalsSnapshot
from ..services import (
    CareCircleNotifier,
    SpeechService,
    get_notifier,
    get_record_store,
    get_speech_service,
)
from ..storage import RecordStore
from .envelope import envelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/safety", tags=["safety"])


@router.post("/vitals")
async def monitor_vitals(
    request: VitalsRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
    notifier: CareCircleNotifier = Depends(get_notifier),
):
    """
    Check a vitals snapshot and escalate urgent readings to the care circle.
    """
    user_id = request.user_id or "unknown"

    try:
        alert = classify_vitals(request.vitals)

        if alert.is_high_severity:
            result = await escalate_alert(
                notifier, speech, user_id, alert, vitals=parse_vitals(request.vitals), store=store
            )
            return envelope(
                tts_text=result["tts_text"],
                audio_url=result["audio_url"],
                alert=alert.model_dump(by_alias=True),
                alertId=result["alert_id"],
                caregiverNotified=result["caregiver_notified"],
            )

        return envelope(
            alert=alert.model_dump(by_alias=True),
            message="Vitals within normal range",
        )
    except Exception as e:
        logger.error(f"Vitals monitoring error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="Could not process vitals data")


@router.post("/emergency")
async def trigger_emergency(
    request: EmergencyRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
    notifier: CareCircleNotifier = Depends(get_notifier),
):
    """Handle an emergency raised by the user (help button, voice, device)."""
    user_id = request.user_id or "unknown"

    try:
        alert = manual_emergency_alert(request.type)
        vitals = VitalsSnapshot(location=request.location)

        result = await escalate_alert(
            notifier, speech, user_id, alert, vitals=vitals, store=store
        )
        return envelope(
            tts_text=result["tts_text"],
            audio_url=result["audio_url"],
            alert=alert.model_dump(by_alias=True),
            alertId=result["alert_id"],
            caregiverNotified=result["caregiver_notified"],
        )
    except Exception as e:
        logger.error(f"Emergency trigger error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="Emergency alert sent, help is coming")


@router.get("/checkin-questions")
async def checkin_questions(
    time_of_day: TimeOfDay = Query("morning", alias="timeOfDay"),
):
    """Gentle safety questions for the given part of the day, opened with a greeting."""
    return envelope(
        data=safety_check_in_questions(time_of_day),
        tts_text=format_for_speech(generate_greeting(time_of_day)),
    )
