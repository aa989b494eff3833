"""
Record store infrastructure - remote and local backends for the registry collections.
"""

from config.app_config import StoreConfig
from .record_store import RecordStore, RecordStoreError, PERMITS, USERS, COLLECTIONS


def create_record_store(store_config: StoreConfig) -> RecordStore:
    """Build the record store selected by configuration"""
    if store_config.backend == "supabase":
        from infrastructure.external.supabase_client import SupabaseRecordStore
        return SupabaseRecordStore(
            store_config.supabase_url,
            store_config.supabase_key,
            timeout=store_config.request_timeout_seconds
        )
    if store_config.backend == "sqlite":
        from .sqlite_store import SQLiteRecordStore
        return SQLiteRecordStore(store_config.sqlite_path)
    raise ValueError(f"Unsupported store backend: {store_config.backend}")


__all__ = [
    'RecordStore',
    'RecordStoreError',
    'PERMITS',
    'USERS',
    'COLLECTIONS',
    'create_record_store'
]
