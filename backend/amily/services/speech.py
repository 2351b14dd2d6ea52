"""
Text-to-Speech Service using the ElevenLabs API.
"""

import base64
import logging
import time
from typing import Optional

import httpx

from ..core.exceptions import SpeechSynthesisError
from ..core.logging_config import truncate_large_data

logger = logging.getLogger(__name__)


class SpeechService:
    """
    Service for turning Amily's replies into audio.
    Audio is returned inline as a base64 data URL.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        voice_id: str = "21m00Tcm4TlvDq8ikWAM",
        model: str = "eleven_turbo_v2_5",
        base_url: str = "https://api.elevenlabs.io/v1",
        timeout: float = 30.0,
        stability: float = 0.5,
        similarity_boost: float = 0.75,
    ):
        """
        Initialize speech service.

        Args:
            api_key: ElevenLabs API key. Without one, synthesis is skipped.
            voice_id: ElevenLabs voice
            model: ElevenLabs TTS model id
            base_url: API base URL
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.voice_id = voice_id
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.stability = stability
        self.similarity_boost = similarity_boost

    def is_configured(self) -> bool:
        """
        Check if the speech service is properly configured.

        Returns:
            bool: True if API key is set, False otherwise
        """
        return bool(self.api_key)

    async def synthesize(self, text: str) -> Optional[str]:
        """
        Synthesize speech for text.

        Args:
            text: Text already formatted for speech

        Returns:
            Audio as a data URL, or None when the service is not configured

        Raises:
            SpeechSynthesisError: If the ElevenLabs call fails
        """
        if not self.is_configured():
            logger.info(f"[DEMO] Speech synthesis skipped (no API key): \"{truncate_large_data(text, 50)}\"")
            return None

        start_time = time.time()
        url = f"{self.base_url}/text-to-speech/{self.voice_id}"
        payload = {
            "text": text,
            "model_id": self.model,
            "voice_settings": {
                "stability": self.stability,
                "similarity_boost": self.similarity_boost,
            },
        }
        headers = {
            "xi-api-key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=headers)
                resp.raise_for_status()
                audio = resp.content
        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs TTS failed: {e}", exc_info=True)
            raise SpeechSynthesisError(f"Speech synthesis failed: {e}") from e

        logger.info(
            "Speech synthesized",
            extra={"extra_fields": {
                "provider": "elevenlabs",
                "model": self.model,
                "characters": len(text),
                "audio_bytes": len(audio),
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }}
        )
        return f"data:audio/mpeg;base64,{base64.b64encode(audio).decode('ascii')}"
