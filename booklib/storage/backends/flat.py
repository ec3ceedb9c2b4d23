"""Flat tier: the whole record collection as one JSON string.

Last-resort, metadata-only storage. Writes are best-effort (quota and I/O
errors are logged and ignored) and payloads are never persisted.
"""

import logging
from collections.abc import Sequence

import msgspec

from booklib.core.models import (
    Record,
    StoredPayload,
    decode_records,
    encode_records,
    sort_records,
)
from booklib.storage.capabilities import FlatKeyValueCapability
from booklib.storage.exceptions import StorageError
from booklib.storage.results import PayloadOutcome

from .base import BaseBackend, Tier, remove_record, upsert_records

logger = logging.getLogger(__name__)

FLAT_KEY = "library_meta"


class FlatBackend(BaseBackend):
    """Records in a flat key/value store, payloads not supported."""

    tier = Tier.FLAT

    def __init__(self, store: FlatKeyValueCapability, key: str = FLAT_KEY):
        self.store = store
        self.key = key

    async def load_all(self) -> list[Record]:
        """Load records; unreadable data yields an empty collection."""
        return self.load_records()

    def load_records(self) -> list[Record]:
        """Synchronous load used directly as the startup fallback."""
        try:
            raw = self.store.get(self.key)
            if not raw:
                return []
            return sort_records(decode_records(raw))
        except (msgspec.DecodeError, StorageError, OSError, ValueError) as e:
            logger.warning(f"Flat store unreadable, starting empty: {e}")
            return []

    def save_records(self, records: Sequence[Record]) -> bool:
        """Write the whole collection; returns False if the write was dropped."""
        try:
            self.store.set(self.key, encode_records(records))
            return True
        except (StorageError, OSError, ValueError) as e:
            logger.warning(f"Flat store write dropped: {e}")
            return False

    async def save_record(self, record: Record, current: Sequence[Record]) -> None:
        self.save_records(upsert_records(record, current))

    async def delete_record(self, record_id: str, current: Sequence[Record]) -> None:
        self.save_records(remove_record(record_id, current))

    async def save_payload(self, payload: StoredPayload) -> PayloadOutcome:
        logger.warning(f"Flat tier cannot store payloads; dropped {payload.id}")
        return PayloadOutcome.degraded(payload.id, "flat tier stores no payloads")

    async def get_payload(
        self, record_id: str, current: Sequence[Record]
    ) -> StoredPayload | None:
        return None

    async def delete_payload(self, record_id: str) -> PayloadOutcome:
        return PayloadOutcome.skipped(record_id, "flat tier stores no payloads")
