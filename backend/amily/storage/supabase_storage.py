"""
Supabase Record Store.
Talks to the PostgREST endpoint that Supabase exposes for every table.
"""

import httpx
import logging
from typing import Optional, List, Dict, Any
from .interface import RecordStore

logger = logging.getLogger(__name__)


class SupabaseRecordStore(RecordStore):
    """Record store backed by Supabase tables."""

    def __init__(self, url: str, api_key: str, timeout: float = 30.0):
        """
        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            api_key: Service or anon key
            timeout: Request timeout in seconds
        """
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _table_url(self, collection: str) -> str:
        return f"{self.url}/rest/v1/{collection}"

    async def save(self, collection: str, record: Dict[str, Any]) -> bool:
        """Insert a row; failures are logged and reported as False."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self._table_url(collection),
                    json=record,
                    headers={**self._get_headers(), "Prefer": "return=minimal"},
                )
                resp.raise_for_status()
            logger.debug(f"Saved record to Supabase table '{collection}'")
            return True
        except Exception as e:
            logger.error(f"Supabase save to {collection} failed: {e}", exc_info=True)
            return False

    async def fetch(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows matching all filters, newest first."""
        params: Dict[str, Any] = {"select": "*", "order": "timestamp.desc"}
        for key, value in (filters or {}).items():
            params[key] = f"eq.{value}"
        if limit:
            params["limit"] = limit

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(
                    self._table_url(collection),
                    params=params,
                    headers=self._get_headers(),
                )
                resp.raise_for_status()
                data = resp.json()
            return data if isinstance(data, list) else []
        except Exception as e:
            logger.error(f"Supabase fetch from {collection} failed: {e}", exc_info=True)
            return []
