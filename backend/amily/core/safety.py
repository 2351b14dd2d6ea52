"""
Safety Classification - Detects emergencies from free text and vitals.

Both classifiers are pure functions over fixed tables: the same input always
yields the same alert. Severity is totally ordered
(emergency > urgent > concern > normal) and only the highest matching
severity is reported; lower-severity matches are discarded, never merged.
"""

import logging
import math
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from pydantic import ValidationError

from ..models.safety import Location, SafetyAlert, VitalsSnapshot
from ..models.wellness import TimeOfDay

logger = logging.getLogger(__name__)


# Checked first; any hit short-circuits the concern scan.
EMERGENCY_PHRASES: Tuple[str, ...] = (
    # Direct help requests
    "i need help",
    "help me",
    "call for help",
    "get help",
    # Safety concerns
    "i don't feel safe",
    "i feel unsafe",
    "not safe",
    "scared",
    "afraid",
    # Medical emergencies
    "i feel dizzy",
    "i feel weak",
    "i fell",
    "i fell down",
    "chest pain",
    "cant breathe",
    "can't breathe",
    "trouble breathing",
    "heart racing",
    # Urgent situations
    "emergency",
    "911",
    "ambulance",
)

CONCERN_PHRASES: Tuple[str, ...] = (
    "not feeling well",
    "feeling tired",
    "feeling confused",
    "forgot to take",
    "missed my medication",
    "feel lonely",
    "feel sad",
)

HIGH_HEART_RATE = 120  # bpm, exclusive
LOW_HEART_RATE = 50  # bpm, exclusive

# Fixed outcome per (source, level)
ALERT_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "text_emergency": {
        "level": "emergency",
        "message": "I hear you need help... I'm contacting your care circle right now. "
                   "Stay calm, help is on the way.",
        "actions": ["alert_caregiver", "emergency_protocol", "location_share"],
        "caregiver_alert": True,
    },
    "text_concern": {
        "level": "concern",
        "message": "I understand you're not feeling your best... let's talk about it. "
                   "Would you like me to let someone know?",
        "actions": ["offer_support", "suggest_contact"],
        "caregiver_alert": False,
    },
    "fall": {
        "level": "emergency",
        "message": "I detected a fall... I'm getting help right now. Can you hear me? Help is coming.",
        "actions": ["emergency_protocol", "alert_caregiver", "location_share", "check_responsive"],
        "caregiver_alert": True,
    },
    "vitals_urgent": {
        "level": "urgent",
        "message": "I'm noticing some unusual vitals... let's take a moment to rest. "
                   "I'm letting your care circle know, just to be safe.",
        "actions": ["alert_caregiver", "suggest_rest", "monitor_vitals"],
        "caregiver_alert": True,
    },
    "manual": {
        "level": "emergency",
        "message": "Help is on the way... stay calm.",
        "actions": ["emergency_protocol", "alert_caregiver", "location_share"],
        "caregiver_alert": True,
    },
}

SAFETY_CHECK_IN_QUESTIONS: Dict[str, Tuple[str, ...]] = {
    "morning": (
        "Good morning... how did you sleep?",
        "Did you take your morning medication?",
        "Have you had some water yet today?",
    ),
    "afternoon": (
        "How are you feeling this afternoon?",
        "Have you had lunch and stayed hydrated?",
        "Did you get some movement or fresh air today?",
    ),
    "evening": (
        "How was your day today?",
        "Did you take your evening medication?",
        "Are you feeling safe and comfortable for the night?",
    ),
}


def normal_alert() -> SafetyAlert:
    return SafetyAlert(level="normal")


def _alert_from_template(key: str, detected: list) -> SafetyAlert:
    template = ALERT_TEMPLATES[key]
    return SafetyAlert(
        level=template["level"],
        detected=detected,
        message=template["message"],
        actions=list(template["actions"]),
        caregiver_alert=template["caregiver_alert"],
    )


def _match_phrases(text: str, phrases: Tuple[str, ...]) -> list:
    """Return every phrase found in text, in table order."""
    return [phrase for phrase in phrases if phrase in text]


def classify_safety(text: Any) -> SafetyAlert:
    """
    Analyze free text for safety concerns.

    Args:
        text: User utterance. Anything that is not a string counts as empty.

    Returns:
        SafetyAlert at emergency, concern or normal level
    """
    if not isinstance(text, str) or not text.strip():
        return normal_alert()

    lower_text = text.lower()

    detected = _match_phrases(lower_text, EMERGENCY_PHRASES)
    if detected:
        logger.warning(f"Emergency phrases detected: {detected}")
        return _alert_from_template("text_emergency", detected)

    detected = _match_phrases(lower_text, CONCERN_PHRASES)
    if detected:
        logger.info(f"Wellness concern phrases detected: {detected}")
        return _alert_from_template("text_concern", detected)

    return normal_alert()


_TRUE_STRINGS = ("true", "yes", "1")


def _signal(vitals: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in vitals:
            return vitals[name]
    return None


def _read_fall(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


def _read_heart_rate(value: Any) -> Optional[float]:
    """Heart rate in bpm, or None when the reading is missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        heart_rate = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric heart rate: {value!r}")
        return None
    if not math.isfinite(heart_rate):
        return None
    return heart_rate


def _as_mapping(vitals: Union[VitalsSnapshot, Mapping[str, Any], None]) -> Mapping[str, Any]:
    if isinstance(vitals, VitalsSnapshot):
        return vitals.model_dump()
    if isinstance(vitals, Mapping):
        return vitals
    return {}


def parse_vitals(vitals: Union[VitalsSnapshot, Mapping[str, Any], None]) -> Optional[VitalsSnapshot]:
    """
    Build a snapshot from raw vitals, keeping every field that parses and
    dropping the ones that do not.
    """
    if vitals is None or isinstance(vitals, VitalsSnapshot):
        return vitals
    raw = _as_mapping(vitals)

    fields: Dict[str, Any] = {
        "heart_rate": _read_heart_rate(_signal(raw, "heartRate", "heart_rate")),
        "fall_detected": _read_fall(_signal(raw, "fallDetected", "fall_detected")),
    }

    location = _signal(raw, "location")
    if location is not None:
        try:
            fields["location"] = Location.model_validate(location)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed location: {e}")

    timestamp = _signal(raw, "timestamp")
    if isinstance(timestamp, str):
        fields["timestamp"] = timestamp

    return VitalsSnapshot(**fields)


def classify_vitals(vitals: Union[VitalsSnapshot, Mapping[str, Any], None]) -> SafetyAlert:
    """
    Analyze a vitals snapshot for safety concerns.

    Each signal is read on its own, so a malformed field only silences
    itself. A detected fall is always an emergency, whatever the other
    readings say. Heart rate outside [LOW_HEART_RATE, HIGH_HEART_RATE] is
    urgent. Missing or unreadable readings mean no concern from that signal.
    """
    raw = _as_mapping(vitals)

    if _read_fall(_signal(raw, "fallDetected", "fall_detected")):
        logger.warning("Fall detected in vitals snapshot")
        return _alert_from_template("fall", ["fall_detected"])

    concerns = []
    heart_rate = _read_heart_rate(_signal(raw, "heartRate", "heart_rate"))
    if heart_rate is not None:
        if heart_rate > HIGH_HEART_RATE:
            concerns.append("elevated_heart_rate")
        elif heart_rate < LOW_HEART_RATE:
            concerns.append("low_heart_rate")

    if concerns:
        logger.warning(f"Vitals concerns detected: {concerns} (heart_rate={heart_rate})")
        return _alert_from_template("vitals_urgent", concerns)

    return normal_alert()


def manual_emergency_alert(trigger_type: Optional[str] = None) -> SafetyAlert:
    """Alert for an emergency raised explicitly by the user or a device."""
    return _alert_from_template("manual", [trigger_type or "manual_trigger"])


def safety_check_in_questions(time_of_day: TimeOfDay) -> list:
    """Gentle safety questions for the given part of the day."""
    return list(SAFETY_CHECK_IN_QUESTIONS[time_of_day])
