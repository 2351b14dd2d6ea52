"""
Care Circle Notifications via an n8n workflow webhook.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class CareCircleNotifier:
    """Triggers n8n workflows that reach the user's caregivers."""

    def __init__(self, webhook_url: Optional[str] = None, timeout: float = 30.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    async def notify(self, event: str, payload: Dict[str, Any]) -> bool:
        """
        Trigger the workflow for event.

        Args:
            event: Workflow event name, e.g. "emergency_alert"
            payload: JSON-serializable event data

        Returns:
            bool: True if the webhook accepted the event, False when unconfigured

        Raises:
            NotificationError: On transport failure or an error response
        """
        if not self.is_configured():
            logger.info(f"[DEMO] Would trigger n8n workflow '{event}' (no webhook configured)")
            return False

        body = {"event": event, **payload}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.webhook_url, json=body)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"n8n webhook for '{event}' failed: {e}", exc_info=True)
            raise NotificationError(f"Notification '{event}' failed: {e}") from e

        logger.info(
            f"Care circle notified: {event}",
            extra={"extra_fields": {"event": event, "user_id": payload.get("userId")}}
        )
        return True
