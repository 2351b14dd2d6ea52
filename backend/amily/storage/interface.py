"""
Storage Interface - Abstract base class for all record stores.
This interface enables seamless switching between Supabase and local files.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any


class RecordStore(ABC):
    """
    Abstract record store. Records are flat JSON objects grouped in named
    collections (Supabase tables, or one file per collection locally).
    """

    @abstractmethod
    async def save(self, collection: str, record: Dict[str, Any]) -> bool:
        """
        Append a record to a collection.

        Implementations must never raise: failures are logged and reported
        by returning False.

        Args:
            collection: Collection (table) name, e.g. "check_ins"
            record: JSON-serializable record

        Returns:
            bool: True if save was successful, False otherwise
        """
        pass

    @abstractmethod
    async def fetch(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch records matching all equality filters, newest first.

        Args:
            collection: Collection (table) name
            filters: Field -> value equality filters
            limit: Maximum number of records to return

        Returns:
            List[Dict]: Matching records ordered by "timestamp" descending
        """
        pass
