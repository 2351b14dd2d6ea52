"""
Care Circle - Emergency escalation and spoken reassurance.

Notification and reassurance are independent: a caregiver webhook that
fails never stops Amily from comforting the user, and a speech failure
never stops the caregivers from being told.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..models.safety import SafetyAlert, VitalsSnapshot
from ..services.notifications import CareCircleNotifier
from ..services.speech import SpeechService
from ..storage.interface import RecordStore
from .exceptions import NotificationError, SpeechSynthesisError
from .persona import ComposeOptions, compose_message

logger = logging.getLogger(__name__)


def new_alert_id() -> str:
    return f"alert_{int(time.time() * 1000)}"


def emergency_reassurance(alert: SafetyAlert, options: Optional[ComposeOptions] = None) -> str:
    """Calm spoken reassurance matching the alert severity."""
    return compose_message(alert.level, options)


async def handle_emergency(
    notifier: CareCircleNotifier,
    user_id: str,
    alert: SafetyAlert,
    vitals: Optional[VitalsSnapshot] = None,
    context: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Trigger the emergency workflow for the user's care circle.

    Returns:
        Dict with "success" (webhook accepted) and "alert_id"

    Raises:
        NotificationError: If the webhook could not be reached
    """
    payload = {
        "userId": user_id,
        "level": alert.level,
        "detected": alert.detected,
        "actions": alert.actions,
        "vitals": vitals.model_dump(by_alias=True, exclude_none=True) if vitals else None,
        "context": context,
        "location": vitals.location.model_dump() if vitals and vitals.location else None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    logger.warning(
        f"[EMERGENCY] User {user_id} - Level: {alert.level}",
        extra={"extra_fields": {
            "user_id": user_id,
            "level": alert.level,
            "detected": alert.detected,
            "actions": alert.actions,
        }}
    )

    success = await notifier.notify("emergency_alert", payload)
    return {"success": success, "alert_id": new_alert_id()}


async def escalate_alert(
    notifier: CareCircleNotifier,
    speech: SpeechService,
    user_id: str,
    alert: SafetyAlert,
    vitals: Optional[VitalsSnapshot] = None,
    context: Optional[str] = None,
    store: Optional[RecordStore] = None,
    options: Optional[ComposeOptions] = None,
) -> Dict[str, Any]:
    """
    Notify the care circle and reassure the user, each regardless of the
    other's outcome.

    Args:
        store: When given, the alert is also recorded in "safety_alerts"

    Returns:
        Dict with alert_id, caregiver_notified, tts_text and audio_url
    """
    try:
        result = await handle_emergency(notifier, user_id, alert, vitals, context)
        alert_id, notified = result["alert_id"], result["success"]
    except NotificationError:
        logger.error(f"Care circle notification failed for user {user_id}; continuing with reassurance")
        alert_id, notified = new_alert_id(), False

    if store is not None:
        await store.save("safety_alerts", {
            "user_id": user_id,
            "alert_id": alert_id,
            "alert": alert.model_dump(by_alias=True),
            "caregiver_notified": notified,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    reassurance = emergency_reassurance(alert, options)
    try:
        audio_url = await speech.synthesize(reassurance)
    except SpeechSynthesisError:
        logger.error(f"Reassurance audio failed for user {user_id}; sending text only")
        audio_url = None

    return {
        "alert_id": alert_id,
        "caregiver_notified": notified,
        "tts_text": reassurance,
        "audio_url": audio_url,
    }
