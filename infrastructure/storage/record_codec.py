"""
Versioned record codec - turns typed records into stored strings and back.

Every value is wrapped in an envelope::

    {"kind": "products", "schema_version": 1, "data": [...]}

Decoding fails closed: a payload that is not valid JSON, carries the wrong
kind, an unknown schema version, or does not validate against its record
type raises ``StorageCorruptionError``. Bare payloads without an envelope
are the unversioned camelCase layout written by the first EcoFinds client
(schema version 0) and are migrated on read.
"""

import json
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Generic, Optional, Type, TypeVar

from pydantic import AfterValidator, TypeAdapter, ValidationError

from infrastructure.storage.errors import StorageCorruptionError


SCHEMA_VERSION = 1

T = TypeVar("T")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# All persisted timestamps are compared in UTC
Timestamp = Annotated[datetime, AfterValidator(_ensure_utc)]


# Version 0 field names -> current field names
LEGACY_FIELD_NAMES: Dict[str, str] = {
    "displayName": "display_name",
    "createdAt": "created_at",
    "emailVerified": "email_verified",
    "verificationToken": "verification_token",
    "verificationTokenExpiry": "verification_token_expiry",
    "password": "password_hash",
    "sellerId": "seller_id",
    "sellerName": "seller_name",
    "buyerId": "buyer_id",
    "products": "lines",
    "date": "created_at",
}


def migrate_legacy_payload(payload: Any) -> Any:
    """Rename version 0 field names recursively"""
    if isinstance(payload, list):
        return [migrate_legacy_payload(item) for item in payload]
    if isinstance(payload, dict):
        return {
            LEGACY_FIELD_NAMES.get(key, key): migrate_legacy_payload(value)
            for key, value in payload.items()
        }
    return payload


class RecordCodec(Generic[T]):
    """
    Encoder/decoder for one kind of persisted value.

    Args:
        kind: Tag stored in the envelope (e.g. "users")
        record_type: Type of the decoded value, e.g. ``List[UserRecord]``
    """

    def __init__(self, kind: str, record_type: Type[T]):
        self.kind = kind
        self.adapter = TypeAdapter(record_type)

    def encode(self, value: T) -> str:
        envelope = {
            "kind": self.kind,
            "schema_version": SCHEMA_VERSION,
            "data": self.adapter.dump_python(value, mode="json"),
        }
        return json.dumps(envelope, ensure_ascii=False)

    def decode(self, raw: str, key: Optional[str] = None) -> T:
        try:
            document = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise StorageCorruptionError(f"{self.kind}: stored value is not JSON ({e})", key, raw) from e

        payload = self._unwrap(document, key, raw)

        try:
            return self.adapter.validate_python(payload)
        except ValidationError as e:
            raise StorageCorruptionError(
                f"{self.kind}: {e.error_count()} invalid field(s) in stored value", key, raw
            ) from e

    def _unwrap(self, document: Any, key: Optional[str], raw: str) -> Any:
        if isinstance(document, dict) and "schema_version" in document:
            if document.get("kind") != self.kind:
                raise StorageCorruptionError(
                    f"expected kind {self.kind!r}, found {document.get('kind')!r}", key, raw
                )
            version = document["schema_version"]
            if version != SCHEMA_VERSION:
                raise StorageCorruptionError(
                    f"{self.kind}: unsupported schema version {version!r}", key, raw
                )
            if "data" not in document:
                raise StorageCorruptionError(f"{self.kind}: envelope has no data", key, raw)
            return document["data"]

        # Unversioned layout
        return migrate_legacy_payload(document)
