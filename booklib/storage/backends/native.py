"""Native tier: structured key/value storage plus a file area for payloads.

Records are one JSON array under a fixed key, rewritten in full on every
mutation. Payloads are files named after the record id, written as base64
text. Either capability may be missing: without key/value storage records go
through the flat store, without a file area payload operations degrade to
no-ops.
"""

import logging
from collections.abc import Sequence

from booklib.core.codec import decode_from_text, encode_for_text
from booklib.core.models import (
    DEFAULT_MIME_TYPE,
    Record,
    StoredPayload,
    decode_records,
    encode_records,
    sort_records,
)
from booklib.storage.capabilities import FileAreaCapability, KeyValueCapability
from booklib.storage.exceptions import StorageError
from booklib.storage.results import PayloadOutcome

from .base import BaseBackend, Tier, remove_record, upsert_records
from .flat import FlatBackend

logger = logging.getLogger(__name__)

PREFS_BOOKS_KEY = "booklib_library_books_v2"
PAYLOAD_DIR = "ebooks"


def payload_filename(record_id: str) -> str:
    """Convert a record id to a safe payload file name."""
    safe_id = "".join(c if c.isalnum() or c in "-_" else "_" for c in record_id)
    return f"{safe_id}.bin"


class NativeBackend(BaseBackend):
    """Records in key/value storage, payloads in the file area."""

    tier = Tier.NATIVE

    def __init__(
        self,
        preferences: KeyValueCapability | None,
        file_area: FileAreaCapability | None,
        fallback: FlatBackend,
        key: str = PREFS_BOOKS_KEY,
        payload_dir: str = PAYLOAD_DIR,
    ):
        self.preferences = preferences
        self.file_area = file_area
        self.fallback = fallback
        self.key = key
        self.payload_dir = payload_dir

    def payload_path(self, record_id: str) -> str:
        """Path of a record's payload inside the file area."""
        return f"{self.payload_dir}/{payload_filename(record_id)}"

    async def load_all(self) -> list[Record]:
        if self.preferences is None:
            return self.fallback.load_records()

        value = await self.preferences.get(self.key)
        if not value:
            return []
        return sort_records(decode_records(value))

    async def save_all(self, records: Sequence[Record]) -> None:
        """Write the whole collection in a single set."""
        if self.preferences is None:
            self.fallback.save_records(records)
            return

        await self.preferences.set(self.key, encode_records(records))

    async def save_record(self, record: Record, current: Sequence[Record]) -> None:
        await self.save_all(upsert_records(record, current))

    async def delete_record(self, record_id: str, current: Sequence[Record]) -> None:
        await self.save_all(remove_record(record_id, current))

    async def save_payload(self, payload: StoredPayload) -> PayloadOutcome:
        if self.file_area is None:
            logger.warning(f"File area missing; payload for {payload.id} not saved")
            return PayloadOutcome.degraded(payload.id, "file area unavailable")

        try:
            await self.file_area.write_file(
                self.payload_path(payload.id), encode_for_text(payload.data), "utf8"
            )
        except (OSError, StorageError, ValueError) as e:
            logger.error(f"Native payload write failed for {payload.id}: {e}")
            return PayloadOutcome.failed(payload.id, e)
        return PayloadOutcome.saved(payload.id)

    async def get_payload(
        self, record_id: str, current: Sequence[Record]
    ) -> StoredPayload | None:
        if self.file_area is None:
            return None

        owner = next((r for r in current if r.id == record_id), None)
        mime_type = owner.payload_mime_type if owner else DEFAULT_MIME_TYPE

        try:
            content = await self.file_area.read_file(self.payload_path(record_id))
            if isinstance(content, str):
                data = decode_from_text(content)
            else:
                data = bytes(content)
        except FileNotFoundError:
            return None
        except (OSError, StorageError, ValueError) as e:
            logger.error(f"Native payload read failed for {record_id}: {e}")
            return None
        return StoredPayload(id=record_id, data=data, mime_type=mime_type)

    async def delete_payload(self, record_id: str) -> PayloadOutcome:
        if self.file_area is None:
            return PayloadOutcome.skipped(record_id, "file area unavailable")

        try:
            await self.file_area.delete_file(self.payload_path(record_id))
        except FileNotFoundError:
            return PayloadOutcome.missing(record_id)
        except (OSError, StorageError, ValueError) as e:
            logger.warning(f"Native payload delete failed for {record_id}: {e}")
            return PayloadOutcome.failed(record_id, e)
        return PayloadOutcome.deleted(record_id)
