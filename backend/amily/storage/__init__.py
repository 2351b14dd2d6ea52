"""Storage module - provides interface and implementations for data persistence."""

from .interface import RecordStore
from .local_storage import LocalRecordStore
from .supabase_storage import SupabaseRecordStore

__all__ = ['RecordStore', 'LocalRecordStore', 'SupabaseRecordStore']
