"""
Reminder Flags - Remembers, per user, whether the daily reminder was asked.

Flags live for the lifetime of the process. There is no expiry.
"""

import threading
from typing import Dict


class ReminderFlagStore:
    """Keyed user_id -> flag mapping with an atomic check-and-set."""

    def __init__(self):
        self._flags: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> bool:
        with self._lock:
            return self._flags.get(user_id, False)

    def set(self, user_id: str, value: bool = True) -> None:
        with self._lock:
            self._flags[user_id] = value

    def check_and_set(self, user_id: str) -> bool:
        """
        Mark the reminder as asked for user_id.

        Returns:
            bool: True if this call is the first one to ask (flag was unset)
        """
        with self._lock:
            first = not self._flags.get(user_id, False)
            self._flags[user_id] = True
            return first

    def clear(self) -> None:
        with self._lock:
            self._flags.clear()
