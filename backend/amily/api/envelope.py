"""
Uniform response envelope shared by every companion endpoint.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def envelope(
    data: Any = None,
    tts_text: Optional[str] = None,
    audio_url: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """
    Build a success envelope: {success, data?, ttsText?, audioUrl?, ..., timestamp}.

    Keys with a None value are left out, except those passed in extra.
    """
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if tts_text is not None:
        body["ttsText"] = tts_text
    if audio_url is not None:
        body["audioUrl"] = audio_url
    body.update(extra)
    body["timestamp"] = now_iso()
    return body


def error_envelope(message: str) -> Dict[str, Any]:
    return {"success": False, "error": message}
