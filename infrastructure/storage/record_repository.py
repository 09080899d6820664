"""
Record repository - binds one store key to one record codec.
"""

from typing import Callable, Generic, Optional, Tuple, TypeVar

from infrastructure.monitoring.logging_service import get_logger, get_error_tracker
from infrastructure.storage.errors import StorageCorruptionError
from infrastructure.storage.key_value_store import KeyValueStore
from infrastructure.storage.record_codec import RecordCodec

T = TypeVar("T")

QUARANTINE_SUFFIX = ".corrupt"


class RecordRepository(Generic[T]):
    """
    Reads and writes a single typed value under a fixed key.

    A corrupt stored value is reported through the error tracker, copied
    aside under ``<key>.corrupt`` and replaced by the default value.
    """

    def __init__(self, store: KeyValueStore, key: str, codec: RecordCodec[T],
                 default_factory: Callable[[], T]):
        self.store = store
        self.key = key
        self.codec = codec
        self.default_factory = default_factory
        self.logger = get_logger(__name__)

    def load(self) -> T:
        raw = self.store.get(self.key)
        if raw is None:
            return self.default_factory()

        try:
            return self.codec.decode(raw, self.key)
        except StorageCorruptionError as e:
            get_error_tracker().track_error(e, f"load:{self.key}", key=self.key)
            self._quarantine(raw)
            return self.default_factory()

    def load_optional(self) -> Optional[T]:
        """Load the value, or None when the key is absent"""
        if self.store.get(self.key) is None:
            return None
        return self.load()

    def exists(self) -> bool:
        return self.store.get(self.key) is not None

    def save(self, value: T) -> None:
        self.store.set(self.key, self.codec.encode(value))

    def encode_item(self, value: T) -> Tuple[str, str]:
        """(key, encoded value) pair for a combined ``set_many`` write"""
        return self.key, self.codec.encode(value)

    def clear(self) -> None:
        self.store.remove(self.key)

    def _quarantine(self, raw: str) -> None:
        quarantine_key = self.key + QUARANTINE_SUFFIX
        self.store.set_many({quarantine_key: raw})
        self.store.remove(self.key)
        self.logger.warning(f"Corrupt value for {self.key} moved to {quarantine_key}")
