"""Library facade: the single entry point for catalog storage.

The facade owns the in-memory record set, which is the source of truth for
reads and for observers. Writes persist through the active tier first and
only then touch the in-memory set, so a failed write leaves the set matching
the last durable state. Payload operations are best-effort: their failures
are logged and reported as PayloadOutcome values, never raised.

Mutations are serialized through one asyncio lock, so overlapping callers
never rewrite the record collection from a stale snapshot.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from booklib.config import LibrarySettings
from booklib.core.codec import to_embeddable_uri
from booklib.core.models import (
    Record,
    StoredPayload,
    generate_record_id,
)
from booklib.storage.backends import BaseBackend, Tier
from booklib.storage.backends.base import remove_record
from booklib.storage.capabilities import HostEnvironment
from booklib.storage.events import Event, EventBus, EventPublisher, EventType
from booklib.storage.objecturls import ObjectUrlRegistry
from booklib.storage.results import PayloadOutcome
from booklib.storage.selector import TierSelector

logger = logging.getLogger(__name__)


class Library(EventPublisher):
    """Catalog of records and payloads over the best available tier."""

    def __init__(
        self,
        host: HostEnvironment,
        event_bus: EventBus | None = None,
        object_urls: ObjectUrlRegistry | None = None,
        today: Callable[[], date] = date.today,
    ):
        EventPublisher.__init__(self, event_bus or EventBus())
        self.host = host
        self.selector = TierSelector(host)
        self.object_urls = object_urls or ObjectUrlRegistry()
        self.backend: BaseBackend | None = None
        self._records: list[Record] = []
        self._loading = False
        self._write_lock = asyncio.Lock()
        self._today = today

    @classmethod
    def from_settings(cls, settings: LibrarySettings, **kwargs: Any) -> "Library":
        """Create a library on the local host described by settings."""
        from booklib.storage.hosts import LocalHost

        return cls(LocalHost(settings), **kwargs)

    # Read access

    @property
    def records(self) -> list[Record]:
        """Snapshot of the record set, newest first."""
        return list(self._records)

    @property
    def is_loading(self) -> bool:
        """True while initialize() is running."""
        return self._loading

    @property
    def tier(self) -> Tier | None:
        """The active tier, or None before initialize()."""
        return self.backend.tier if self.backend else None

    def find(self, record_id: str) -> Record | None:
        """Find a cached record by id."""
        return next((r for r in self._records if r.id == record_id), None)

    def subscribe(self, handler: Callable[[Event], None]) -> None:
        """Call handler with a snapshot whenever the record set changes."""
        self.event_bus.subscribe(EventType.RECORDS_CHANGED, handler)

    def unsubscribe(self, handler: Callable[[Event], None]) -> None:
        """Stop notifying handler."""
        self.event_bus.unsubscribe(EventType.RECORDS_CHANGED, handler)

    # Lifecycle

    async def initialize(self) -> None:
        """Select the tier and load the record set.

        Never raises. If the active tier cannot load, the record set comes
        from the flat store while writes keep targeting the selected tier.
        """
        self._set_loading(True)
        try:
            try:
                self.backend = await self.selector.select()
                records = await self.backend.load_all()
            except Exception as e:
                logger.error(f"Initial load failed, falling back to flat store: {e}")
                records = self._load_fallback()

            self._records = records
            logger.info(f"Loaded {len(records)} records from {self.backend.name} tier")
            self._publish_event(EventType.RECORDS_LOADED, records=self.records)
            self._publish_changed()
        finally:
            self._set_loading(False)

    def _load_fallback(self) -> list[Record]:
        flat = self.selector.flat_backend()
        if self.backend is None:
            self.backend = flat
        try:
            return flat.load_records()
        except Exception as e:
            logger.error(f"Flat store load failed, starting empty: {e}")
            return []

    def close(self) -> None:
        """Release the tier and revoke outstanding object references."""
        self.object_urls.revoke_all()
        if self.backend:
            self.backend.close()

    # Mutations

    async def add_record(
        self, metadata: Mapping[str, Any], payload: bytes | None = None
    ) -> Record:
        """Create a record and, when given, store its payload.

        ``id`` and ``added_date`` are assigned here; values for them in
        ``metadata`` are ignored. The payload is written only when bytes are
        given and the record is not a bare reference link.

        Raises:
            Exception: Whatever the tier raises when the record write fails;
                the record set is unchanged in that case.
        """
        async with self._write_lock:
            backend = self._require_backend()
            record = Record.from_dict(
                {**metadata, "id": self._new_id(), "added_date": self._today()}
            )

            await backend.save_record(record, self._records)

            outcome = None
            if payload is not None and record.has_payload:
                outcome = await self._save_payload(
                    backend,
                    StoredPayload(
                        id=record.id,
                        data=bytes(payload),
                        mime_type=record.payload_mime_type,
                    ),
                )

            self._records = [record, *self._records]
            logger.info(f"Added record {record.id}")
            self._publish_event(
                EventType.RECORD_ADDED,
                record_id=record.id,
                record=record,
                payload_outcome=outcome,
            )
            self._publish_changed()
            return record

    async def update_record(
        self, record_id: str, updates: Mapping[str, Any]
    ) -> Record | None:
        """Merge fields onto a record; returns None if the id is unknown.

        The payload is never touched, and ``id``/``added_date`` never change.
        """
        async with self._write_lock:
            backend = self._require_backend()
            current = self.find(record_id)
            if current is None:
                return None

            updated = current.merged(updates)
            await backend.save_record(updated, self._records)

            self._records = [updated if r.id == record_id else r for r in self._records]
            logger.info(f"Updated record {record_id}")
            self._publish_event(
                EventType.RECORD_UPDATED, record_id=record_id, record=updated
            )
            self._publish_changed()
            return updated

    async def delete_record(self, record_id: str) -> PayloadOutcome:
        """Delete a record, then best-effort delete its payload.

        Unknown ids are not an error and leave the record collection
        untouched; only the payload delete is attempted.

        Raises:
            Exception: Whatever the tier raises when the record delete fails.
        """
        async with self._write_lock:
            backend = self._require_backend()
            existing = self.find(record_id)
            if existing is None:
                # Unknown ids never touch the record collection
                logger.debug(f"Delete of unknown record {record_id}")
                return await self._delete_payload(backend, record_id)

            await backend.delete_record(record_id, self._records)
            outcome = await self._delete_payload(backend, record_id)

            self._records = remove_record(record_id, self._records)
            logger.info(f"Deleted record {record_id}")
            self._publish_event(
                EventType.RECORD_DELETED,
                record_id=record_id,
                record=existing,
                payload_outcome=outcome,
            )
            self._publish_changed()
            return outcome

    # Payload access

    async def get_payload_uri(self, record_id: str) -> str | None:
        """URI for viewing a payload, or None on absence or failure.

        The native tier returns an embedded data URI; other tiers return a
        short-lived ``file://`` reference (see revoke_payload_uri).
        """
        payload = await self._fetch_payload(record_id)
        if payload is None:
            return None
        try:
            if self.tier is Tier.NATIVE:
                return to_embeddable_uri(payload.data, payload.mime_type)
            return self.object_urls.create(payload.data, payload.mime_type)
        except OSError as e:
            logger.error(f"Could not expose payload {record_id}: {e}")
            return None

    async def get_payload_as_embedded_uri(self, record_id: str) -> str | None:
        """Self-contained data URI for a payload, or None."""
        payload = await self._fetch_payload(record_id)
        if payload is None:
            return None
        return to_embeddable_uri(payload.data, payload.mime_type)

    def revoke_payload_uri(self, url: str) -> bool:
        """Release a reference returned by get_payload_uri."""
        return self.object_urls.revoke(url)

    # Internals

    def _require_backend(self) -> BaseBackend:
        if self.backend is None:
            raise RuntimeError("Library not initialized")
        return self.backend

    def _new_id(self) -> str:
        ids = {r.id for r in self._records}
        record_id = generate_record_id()
        while record_id in ids:
            record_id = generate_record_id()
        return record_id

    async def _fetch_payload(self, record_id: str) -> StoredPayload | None:
        if self.backend is None:
            return None
        try:
            return await self.backend.get_payload(record_id, self._records)
        except Exception as e:
            logger.error(f"Payload read failed for {record_id}: {e}")
            return None

    async def _save_payload(
        self, backend: BaseBackend, payload: StoredPayload
    ) -> PayloadOutcome:
        try:
            outcome = await backend.save_payload(payload)
        except Exception as e:
            logger.error(f"Payload write failed for {payload.id}: {e}")
            return PayloadOutcome.failed(payload.id, e)
        if not outcome.success:
            logger.warning(f"Payload for {payload.id} not stored: {outcome.message}")
        return outcome

    async def _delete_payload(
        self, backend: BaseBackend, record_id: str
    ) -> PayloadOutcome:
        try:
            return await backend.delete_payload(record_id)
        except Exception as e:
            logger.warning(f"Payload delete failed for {record_id}: {e}")
            return PayloadOutcome.failed(record_id, e)

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._publish_event(EventType.LOADING_CHANGED, loading=loading)

    def _publish_changed(self) -> None:
        self._publish_event(EventType.RECORDS_CHANGED, records=self.records)
