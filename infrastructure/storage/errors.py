"""
Storage error types.
"""

from typing import Optional


class StorageError(Exception):
    """A read or write against the key-value store failed"""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class StorageCorruptionError(StorageError):
    """A persisted value could not be decoded into its record type"""

    def __init__(self, message: str, key: Optional[str] = None, raw: Optional[str] = None):
        super().__init__(message, key)
        self.raw = raw
