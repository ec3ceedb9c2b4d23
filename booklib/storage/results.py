"""Typed outcomes for best-effort payload operations."""

from dataclasses import dataclass
from enum import Enum


class PayloadStatus(Enum):
    """Status of a payload write or delete."""

    SAVED = "saved"
    DELETED = "deleted"
    MISSING = "missing"
    SKIPPED = "skipped"
    DEGRADED = "degraded"
    FAILED = "failed"

    def is_success(self) -> bool:
        """Check if status indicates the operation took effect (or had nothing to do)."""
        return self in [self.SAVED, self.DELETED, self.MISSING, self.SKIPPED]

    def is_failure(self) -> bool:
        """Check if status indicates a degraded or failed operation."""
        return not self.is_success()


@dataclass(frozen=True)
class PayloadOutcome:
    """Result of a best-effort payload operation."""

    status: PayloadStatus
    record_id: str
    message: str = ""

    @property
    def success(self) -> bool:
        """Check if the operation succeeded."""
        return self.status.is_success()

    @classmethod
    def saved(cls, record_id: str) -> "PayloadOutcome":
        return cls(PayloadStatus.SAVED, record_id)

    @classmethod
    def deleted(cls, record_id: str) -> "PayloadOutcome":
        return cls(PayloadStatus.DELETED, record_id)

    @classmethod
    def missing(cls, record_id: str) -> "PayloadOutcome":
        return cls(PayloadStatus.MISSING, record_id, "no payload stored")

    @classmethod
    def skipped(cls, record_id: str, reason: str) -> "PayloadOutcome":
        return cls(PayloadStatus.SKIPPED, record_id, reason)

    @classmethod
    def degraded(cls, record_id: str, reason: str) -> "PayloadOutcome":
        return cls(PayloadStatus.DEGRADED, record_id, reason)

    @classmethod
    def failed(cls, record_id: str, error: Exception) -> "PayloadOutcome":
        return cls(PayloadStatus.FAILED, record_id, str(error))
