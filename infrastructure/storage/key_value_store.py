"""
Key-value store backends - the profile-scoped persistence used by every service.

A store maps string keys to string values with synchronous get/set/remove.
``set_many`` writes several keys in one step so callers can keep two records
consistent with each other.
"""

import os
import sqlite3
from typing import Dict, Iterable, List, Optional

from infrastructure.config.settings import get_config
from infrastructure.monitoring.logging_service import get_logger
from infrastructure.storage.errors import StorageError


class KeyValueStore:
    """Interface of a synchronous string key-value store"""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def set_many(self, items: Dict[str, str]) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.remove(key)


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store; contents vanish with the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def set_many(self, items: Dict[str, str]) -> None:
        self._data.update(items)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._data)


class SQLiteKeyValueStore(KeyValueStore):
    """
    Store persisted in a single SQLite file (one file per profile).
    Opens a connection per operation.
    """

    def __init__(self, db_path: str = None):
        """
        Initialize the SQLite store

        Args:
            db_path: Path to the profile database (defaults to config setting)
        """
        self.logger = get_logger(__name__)
        config = get_config()
        self.db_path = db_path or config.storage.db_path

        self._init_database()

    def _init_database(self):
        """Create the key-value table"""
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        try:
            conn = sqlite3.connect(self.db_path)
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()
            conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize store at {self.db_path}: {e}") from e

        self.logger.info(f"Key-value store initialized: {self.db_path}")

    def get(self, key: str) -> Optional[str]:
        try:
            conn = sqlite3.connect(self.db_path)
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Error reading key {key}: {e}", key) from e

        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: Dict[str, str]) -> None:
        conn = sqlite3.connect(self.db_path)
        try:
            # Single transaction: either every key lands or none does
            with conn:
                conn.executemany("""
                    INSERT INTO kv_store (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """, list(items.items()))
        except sqlite3.Error as e:
            raise StorageError(f"Error writing keys {sorted(items)}: {e}") from e
        finally:
            conn.close()

    def remove(self, key: str) -> None:
        self.remove_many([key])

    def remove_many(self, keys: Iterable[str]) -> None:
        conn = sqlite3.connect(self.db_path)
        try:
            with conn:
                conn.executemany("DELETE FROM kv_store WHERE key = ?", [(key,) for key in keys])
        except sqlite3.Error as e:
            raise StorageError(f"Error removing keys: {e}") from e
        finally:
            conn.close()

    def keys(self) -> List[str]:
        try:
            conn = sqlite3.connect(self.db_path)
            cursor = conn.cursor()
            cursor.execute("SELECT key FROM kv_store ORDER BY key")
            rows = cursor.fetchall()
            conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Error listing keys: {e}") from e

        return [row[0] for row in rows]


def create_key_value_store(backend: str = None, db_path: str = None) -> KeyValueStore:
    """
    Build a store for the configured backend

    Args:
        backend: "sqlite" or "memory" (defaults to config setting)
        db_path: SQLite file path when backend is "sqlite"

    Returns:
        KeyValueStore instance
    """
    backend = backend or get_config().storage.backend

    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "sqlite":
        return SQLiteKeyValueStore(db_path)

    raise ValueError(f"Unknown storage backend: {backend}")


# Global store instance
_key_value_store: Optional[KeyValueStore] = None


def get_key_value_store() -> KeyValueStore:
    """Get the global key-value store instance"""
    global _key_value_store
    if _key_value_store is None:
        _key_value_store = create_key_value_store()
    return _key_value_store
