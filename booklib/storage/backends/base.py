"""Base storage tier interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

from booklib.core.models import Record, StoredPayload
from booklib.storage.results import PayloadOutcome


class Tier(Enum):
    """Storage tiers, best first."""

    NATIVE = "native"
    TRANSACTIONAL = "transactional"
    FLAT = "flat"


class BaseBackend(ABC):
    """Abstract base class for storage tiers.

    Record mutations receive ``current``, the facade's in-memory record set,
    so tiers that persist the whole collection at once can compute the new
    collection without re-reading durable state. Record errors propagate;
    payload writes and deletes are best-effort and report a PayloadOutcome.
    """

    tier: Tier

    @abstractmethod
    async def load_all(self) -> list[Record]:
        """Load every record, newest first."""
        pass

    @abstractmethod
    async def save_record(self, record: Record, current: Sequence[Record]) -> None:
        """Insert or replace a record."""
        pass

    @abstractmethod
    async def delete_record(self, record_id: str, current: Sequence[Record]) -> None:
        """Delete a record by id (no error if absent)."""
        pass

    @abstractmethod
    async def save_payload(self, payload: StoredPayload) -> PayloadOutcome:
        """Store a record's payload."""
        pass

    @abstractmethod
    async def get_payload(
        self, record_id: str, current: Sequence[Record]
    ) -> StoredPayload | None:
        """Fetch a record's payload, or None if absent."""
        pass

    @abstractmethod
    async def delete_payload(self, record_id: str) -> PayloadOutcome:
        """Delete a record's payload."""
        pass

    def close(self) -> None:
        """Release tier resources."""
        pass

    @property
    def name(self) -> str:
        """Tier name for logging."""
        return self.tier.value


def upsert_records(record: Record, current: Sequence[Record]) -> list[Record]:
    """Replace ``record`` by id in ``current``, or prepend it if new."""
    if any(r.id == record.id for r in current):
        return [record if r.id == record.id else r for r in current]
    return [record, *current]


def remove_record(record_id: str, current: Sequence[Record]) -> list[Record]:
    """Filter ``record_id`` out of ``current``."""
    return [r for r in current if r.id != record_id]
