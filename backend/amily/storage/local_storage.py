"""
Local Filesystem Record Store.
Each collection is a JSON-lines file under the base directory. Used when
Supabase is not configured.
"""

import json
import logging
import aiofiles
from pathlib import Path
from typing import Optional, List, Dict, Any
from .interface import RecordStore

logger = logging.getLogger(__name__)


class LocalRecordStore(RecordStore):
    """
    Local filesystem record store.
    Stores every collection as <base_dir>/<collection>.jsonl.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored files
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_collection_path(self, collection: str) -> Path:
        """Resolve the file backing a collection inside the base directory."""
        full_path = (self.base_dir / f"{collection}.jsonl").resolve()

        # Security check: ensure path is within base_dir
        if full_path.parent != self.base_dir:
            raise ValueError(f"Invalid collection: {collection} - path traversal detected")

        return full_path

    async def save(self, collection: str, record: Dict[str, Any]) -> bool:
        """Append a record to the collection file."""
        try:
            full_path = self._get_collection_path(collection)
            line = json.dumps(record, ensure_ascii=False, default=str)
            async with aiofiles.open(full_path, 'a', encoding='utf-8') as f:
                await f.write(line + "\n")
            logger.debug(f"Saved record to local collection '{collection}'")
            return True
        except Exception as e:
            logger.error(f"Error saving record to {collection}: {e}", exc_info=True)
            return False

    async def fetch(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Read matching records, newest first."""
        try:
            full_path = self._get_collection_path(collection)
            if not full_path.exists():
                return []

            records = []
            async with aiofiles.open(full_path, 'r', encoding='utf-8') as f:
                async for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        record = json.loads(line)
                    except json.JSONDecodeError:
                        # Skip truncated lines
                        continue
                    if all(record.get(key) == value for key, value in (filters or {}).items()):
                        records.append(record)

            records.sort(key=lambda r: str(r.get("timestamp", "")), reverse=True)
            return records[:limit] if limit else records
        except Exception as e:
            logger.error(f"Error fetching records from {collection}: {e}", exc_info=True)
            return []
