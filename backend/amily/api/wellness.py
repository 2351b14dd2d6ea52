"""
Wellness API endpoints - Medication, hydration, weather and activity
nudges, plus the wellness activity log.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from ..core.companion import wellness_log_acknowledgement
from ..core.exceptions import CompanionError, InvalidRequestError
from ..core.persona import format_for_speech
from ..core.wellness import select_nudges
from ..models import (
    HydrationGoal,
    MedicationSchedule,
    Mood,
    NudgeRequest,
    TimeOfDay,
    WeatherData,
    WellnessLogRequest,
)
from ..services import SpeechService, get_record_store, get_speech_service
from ..storage import RecordStore
from .envelope import envelope, now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/wellness", tags=["wellness"])


def _dump_nudges(nudges) -> List[Dict[str, Any]]:
    return [nudge.model_dump(by_alias=True, exclude_none=True) for nudge in nudges]


async def _load_medications(store: RecordStore, user_id: str) -> List[MedicationSchedule]:
    medications = []
    for row in await store.fetch("wellness_medications", {"user_id": user_id}):
        try:
            medications.append(MedicationSchedule.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping malformed medication record for user {user_id}: {e}")
    return medications


def _glasses_logged(value: Any) -> int:
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return 1


def _local_date(timestamp: Any) -> Optional[date]:
    """Calendar day of a stored UTC timestamp, in the server's local time."""
    if not isinstance(timestamp, str) or not timestamp:
        return None
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Ignoring unreadable log timestamp: {timestamp!r}")
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone().date()


async def _load_hydration(
    store: RecordStore, user_id: str, now: Optional[datetime] = None
) -> HydrationGoal:
    daily_glasses = HydrationGoal().daily_glasses
    rows = await store.fetch("wellness_hydration", {"user_id": user_id}, limit=1)
    if rows:
        goal = rows[0].get("daily_glasses", rows[0].get("dailyGlasses"))
        if isinstance(goal, int) and goal > 0:
            daily_glasses = goal

    # Same local clock as the medication schedule
    today = (now or datetime.now().astimezone()).astimezone().date()
    entries = await store.fetch("wellness_log", {"user_id": user_id, "type": "water"})
    todays = [row for row in entries if _local_date(row.get("timestamp")) == today]

    return HydrationGoal(
        daily_glasses=daily_glasses,
        current_glasses=sum(_glasses_logged(row.get("value")) for row in todays),
        last_drink=todays[0].get("timestamp") if todays else None,
    )


@router.get("/nudges")
async def get_nudges(
    user_id: Optional[str] = Query(None, alias="userId"),
    time_of_day: TimeOfDay = Query("morning", alias="timeOfDay"),
    mood: Mood = Query("ok"),
    temp: Optional[float] = Query(None),
    condition: Optional[str] = Query(None),
    humidity: float = Query(0),
    store: RecordStore = Depends(get_record_store),
):
    """
    Current nudges for a user, read from their stored medications,
    hydration goal and today's water log.

    Weather is only considered when the app passes temp and condition.
    """
    if not user_id:
        raise InvalidRequestError("User ID is required.")

    try:
        medications = await _load_medications(store, user_id)
        hydration = await _load_hydration(store, user_id)
        weather = None
        if temp is not None and condition:
            weather = WeatherData(temp=temp, condition=condition, humidity=humidity)

        nudges = select_nudges(time_of_day, medications, hydration, weather, mood)
        return envelope(data=_dump_nudges(nudges))
    except Exception as e:
        logger.error(f"Wellness nudges error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="Could not get wellness nudges")


@router.post("/nudges")
async def compute_nudges(request: NudgeRequest):
    """Nudges for state supplied by the app itself."""
    nudges = select_nudges(
        request.time_of_day,
        request.medications,
        request.hydration,
        request.weather,
        request.mood,
    )
    return envelope(data=_dump_nudges(nudges))


@router.post("/log")
async def log_activity(
    request: WellnessLogRequest,
    speech: SpeechService = Depends(get_speech_service),
    store: RecordStore = Depends(get_record_store),
):
    """Log a wellness activity (water, medication, activity) and cheer the user on."""
    if not request.type:
        raise InvalidRequestError("Please tell me what you'd like to log.")

    try:
        await store.save("wellness_log", {
            "user_id": request.user_id,
            "type": request.type,
            "value": request.value,
            "timestamp": now_iso(),
        })

        tts_text = format_for_speech(wellness_log_acknowledgement(request.type))
        audio_url = await speech.synthesize(tts_text)

        return envelope(tts_text=tts_text, audio_url=audio_url)
    except Exception as e:
        logger.error(f"Wellness log error: {e}", exc_info=True)
        raise CompanionError(str(e), user_message="Could not log activity")
