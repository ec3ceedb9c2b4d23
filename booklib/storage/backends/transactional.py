"""Transactional tier: records and payloads in a two-collection object store.

Payload content is stored as a plain list of byte values, never as a native
binary buffer. Some embedded web runtimes corrupt binary buffers written to
their object store, so this encoding is mandatory. Reads accept a binary
buffer, a list of ints or base64 text and normalize to ``bytes``.
"""

import logging
from collections.abc import Sequence
from typing import Any

from booklib.core.codec import decode_from_text
from booklib.core.models import (
    DEFAULT_MIME_TYPE,
    Record,
    StoredPayload,
    sort_records,
)
from booklib.storage.capabilities import SchemaUpgrade, TransactionalStore
from booklib.storage.exceptions import StorageUnavailableError, TransactionError
from booklib.storage.results import PayloadOutcome

from .base import BaseBackend, Tier, remove_record, upsert_records
from .flat import FlatBackend

logger = logging.getLogger(__name__)

DB_VERSION = 1
BOOKS_STORE = "books"
FILES_STORE = "files"


def payload_to_object(payload: StoredPayload) -> dict[str, Any]:
    """Build the stored payload object with content as a list of ints."""
    return {
        "id": payload.id,
        "content": list(payload.data),
        "mime_type": payload.mime_type,
    }


def normalize_content(content: Any) -> bytes:
    """Normalize stored payload content to bytes.

    Raises:
        ValueError: If the content has no byte interpretation.
    """
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    if isinstance(content, list):
        return bytes(content)
    if isinstance(content, str):
        return decode_from_text(content)
    try:
        return bytes(content)
    except TypeError as e:
        raise ValueError(f"Unsupported payload content: {type(content).__name__}") from e


class TransactionalBackend(BaseBackend):
    """Records and payloads in a transactional object store.

    If the store failed to open, ``load_all`` raises StorageUnavailableError,
    record writes go to the flat store and payload operations are no-ops.
    """

    tier = Tier.TRANSACTIONAL

    def __init__(
        self,
        store: TransactionalStore,
        fallback: FlatBackend,
        version: int = DB_VERSION,
    ):
        self.store = store
        self.fallback = fallback
        self.version = version
        self.is_open = False

    async def open(self) -> None:
        """Open the store, creating both collections on first open.

        Raises:
            StoreOpenError: If the store cannot be opened.
        """
        await self.store.open(self.version, self._upgrade)
        self.is_open = True

    @staticmethod
    def _upgrade(schema: SchemaUpgrade) -> None:
        logger.info(
            f"Upgrading object store {schema.old_version} -> {schema.new_version}"
        )
        for name in (BOOKS_STORE, FILES_STORE):
            if not schema.has_collection(name):
                schema.create_collection(name)

    async def load_all(self) -> list[Record]:
        if not self.is_open:
            raise StorageUnavailableError(self.name)

        objects = await self.store.get_all(BOOKS_STORE)
        return sort_records(Record.from_dict(obj) for obj in objects)

    async def save_record(self, record: Record, current: Sequence[Record]) -> None:
        if not self.is_open:
            self.fallback.save_records(upsert_records(record, current))
            return

        await self.store.put(BOOKS_STORE, record.to_dict())

    async def delete_record(self, record_id: str, current: Sequence[Record]) -> None:
        if not self.is_open:
            self.fallback.save_records(remove_record(record_id, current))
            return

        await self.store.delete(BOOKS_STORE, record_id)

    async def save_payload(self, payload: StoredPayload) -> PayloadOutcome:
        if not self.is_open:
            return PayloadOutcome.degraded(payload.id, "object store not open")

        try:
            await self.store.put(FILES_STORE, payload_to_object(payload))
        except TransactionError as e:
            logger.error(f"Payload write failed for {payload.id}: {e}")
            return PayloadOutcome.failed(payload.id, e)
        return PayloadOutcome.saved(payload.id)

    async def get_payload(
        self, record_id: str, current: Sequence[Record]
    ) -> StoredPayload | None:
        if not self.is_open:
            return None

        raw = await self.store.get(FILES_STORE, record_id)
        if not raw:
            return None
        return StoredPayload(
            id=raw.get("id", record_id),
            data=normalize_content(raw.get("content")),
            mime_type=raw.get("mime_type") or DEFAULT_MIME_TYPE,
        )

    async def delete_payload(self, record_id: str) -> PayloadOutcome:
        if not self.is_open:
            return PayloadOutcome.skipped(record_id, "object store not open")

        try:
            await self.store.delete(FILES_STORE, record_id)
        except TransactionError as e:
            logger.warning(f"Payload delete failed for {record_id}: {e}")
            return PayloadOutcome.failed(record_id, e)
        return PayloadOutcome.deleted(record_id)

    def close(self) -> None:
        """Close the object store."""
        if self.is_open:
            self.store.close()
            self.is_open = False
