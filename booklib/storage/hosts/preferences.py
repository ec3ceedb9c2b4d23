"""Structured key/value capability stored as one JSON document."""

import asyncio
import threading
from pathlib import Path

from ._atomic import load_document, save_document


class PreferencesStore:
    """Async key/value store persisted to a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    async def get(self, key: str) -> str | None:
        """Read the text stored under key."""
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        """Store text under key."""
        await asyncio.to_thread(self._set, key, value)

    def _get(self, key: str) -> str | None:
        with self._lock:
            return load_document(self.path).get(key)

    def _set(self, key: str, value: str) -> None:
        with self._lock:
            document = load_document(self.path)
            document[key] = value
            save_document(self.path, document)
