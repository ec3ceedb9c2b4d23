"""Flat key/value capability: synchronous, last-resort storage."""

import threading
from pathlib import Path

from booklib.storage.exceptions import QuotaExceededError

from ._atomic import load_document, save_document


def _document_size(document: dict[str, str]) -> int:
    return sum(len(k) + len(v) for k, v in document.items())


class JsonFileFlatStore:
    """Flat store persisted to one JSON file with an optional byte quota."""

    def __init__(self, path: Path, quota_bytes: int | None = None):
        self.path = Path(path)
        self.quota_bytes = quota_bytes
        self._lock = threading.RLock()

    def get(self, key: str) -> str | None:
        """Read the text stored under key."""
        with self._lock:
            return load_document(self.path).get(key)

    def set(self, key: str, value: str) -> None:
        """Store text under key.

        Raises:
            QuotaExceededError: If the document would exceed the quota.
        """
        with self._lock:
            document = load_document(self.path)
            document[key] = value
            size = _document_size(document)
            if self.quota_bytes is not None and size > self.quota_bytes:
                raise QuotaExceededError(self.quota_bytes, size)
            save_document(self.path, document)


class MemoryFlatStore:
    """In-memory flat store for testing and ephemeral sessions."""

    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        """Read the text stored under key."""
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        """Store text under key.

        Raises:
            QuotaExceededError: If the store would exceed the quota.
        """
        candidate = {**self._data, key: value}
        size = _document_size(candidate)
        if self.quota_bytes is not None and size > self.quota_bytes:
            raise QuotaExceededError(self.quota_bytes, size)
        self._data = candidate
