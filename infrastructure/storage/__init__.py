"""
Storage infrastructure - key-value backends, versioned record codec and repositories.
"""

from .errors import StorageError, StorageCorruptionError
from .key_value_store import (
    KeyValueStore,
    InMemoryKeyValueStore,
    SQLiteKeyValueStore,
    create_key_value_store,
    get_key_value_store
)
from .record_codec import RecordCodec, SCHEMA_VERSION, Timestamp, utc_now
from .record_repository import RecordRepository

__all__ = [
    'StorageError',
    'StorageCorruptionError',
    'KeyValueStore',
    'InMemoryKeyValueStore',
    'SQLiteKeyValueStore',
    'create_key_value_store',
    'get_key_value_store',
    'RecordCodec',
    'SCHEMA_VERSION',
    'Timestamp',
    'utc_now',
    'RecordRepository'
]
