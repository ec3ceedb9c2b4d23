"""Local host environment built from library settings."""

import logging
from pathlib import Path

from booklib.config import LibrarySettings
from booklib.storage.exceptions import CapabilityUnavailableError

from .filearea import DirectoryFileArea
from .flat import JsonFileFlatStore
from .preferences import PreferencesStore
from .sqlite import SQLiteObjectStore

logger = logging.getLogger(__name__)

DB_NAME = "booklib-library"


def _prepare(path: Path, capability: str) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CapabilityUnavailableError(capability, str(e)) from e
    return path


class LocalHost:
    """Host environment whose capabilities live under the data directory."""

    def __init__(self, settings: LibrarySettings):
        self.settings = settings
        self.data_dir = settings.data_dir
        self._flat_store: JsonFileFlatStore | None = None

    def is_native_host(self) -> bool:
        """Check whether the configured host is a native shell."""
        return self.settings.native_host

    async def acquire_preferences(self) -> PreferencesStore:
        """Acquire the structured key/value capability.

        Raises:
            CapabilityUnavailableError: If the data directory is unusable.
        """
        root = _prepare(self.data_dir, "preferences")
        return PreferencesStore(root / "preferences.json")

    async def acquire_file_area(self) -> DirectoryFileArea:
        """Acquire the file-area capability.

        Raises:
            CapabilityUnavailableError: If the files directory is unusable.
        """
        return DirectoryFileArea(_prepare(self.data_dir / "files", "filesystem"))

    def transactional_store(self) -> SQLiteObjectStore:
        """Create the transactional store (opened by the tier)."""
        return SQLiteObjectStore(self.data_dir / f"{DB_NAME}.sqlite3")

    def flat_store(self) -> JsonFileFlatStore:
        """Get the flat key/value store."""
        if self._flat_store is None:
            path = self.data_dir / "flat.json"
            logger.debug(f"Flat store at {path}")
            self._flat_store = JsonFileFlatStore(
                path, quota_bytes=self.settings.flat_quota_bytes
            )
        return self._flat_store
