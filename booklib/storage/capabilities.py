"""Host capability protocols consumed by the storage tiers.

The tiers never talk to a concrete platform API. They consume the
capabilities below, which a host environment hands out at startup:

- **PlatformProbe**: tells whether the process runs inside a native shell
- **KeyValueCapability**: async structured key/value storage (native only)
- **FileAreaCapability**: async file storage for large payloads (native only)
- **TransactionalStore**: two-collection object store with schema upgrades
- **FlatKeyValueCapability**: sync last-resort key/value storage
"""

from collections.abc import Callable
from typing import Any, Protocol


class PlatformProbe(Protocol):
    """Protocol for the platform probe."""

    def is_native_host(self) -> bool:
        """Check whether the process runs inside a native-capable shell."""
        ...


class KeyValueCapability(Protocol):
    """Protocol for the structured key/value capability."""

    async def get(self, key: str) -> str | None:
        """Read the text stored under key."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store text under key."""
        ...


class FileAreaCapability(Protocol):
    """Protocol for the file-area capability."""

    async def ensure_directory(self, path: str) -> None:
        """Create a directory (and parents) inside the area."""
        ...

    async def write_file(
        self, path: str, content: str, encoding: str | None = None
    ) -> None:
        """Write text content to a file."""
        ...

    async def read_file(self, path: str) -> str | bytes:
        """Read file content; hosts may return text or raw bytes."""
        ...

    async def delete_file(self, path: str) -> None:
        """Delete a file."""
        ...


class SchemaUpgrade(Protocol):
    """Schema handle passed to the upgrade callback of a transactional store."""

    old_version: int
    new_version: int

    def has_collection(self, name: str) -> bool:
        """Check if a collection already exists."""
        ...

    def create_collection(self, name: str) -> None:
        """Create a collection keyed by ``id``."""
        ...


class TransactionalStore(Protocol):
    """Protocol for the transactional object store.

    Every operation runs in its own transaction.
    """

    async def open(
        self, version: int, on_upgrade: Callable[[SchemaUpgrade], None]
    ) -> None:
        """Open the store, running ``on_upgrade`` when the version increases."""
        ...

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        """Read every object in a collection."""
        ...

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """Read one object by id."""
        ...

    async def put(self, collection: str, value: dict[str, Any]) -> None:
        """Insert or replace an object keyed by its ``id``."""
        ...

    async def delete(self, collection: str, key: str) -> None:
        """Delete an object by id (no error if absent)."""
        ...

    def close(self) -> None:
        """Release the store."""
        ...


class FlatKeyValueCapability(Protocol):
    """Protocol for the flat key/value capability."""

    def get(self, key: str) -> str | None:
        """Read the text stored under key."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store text under key; may raise on quota exceeded."""
        ...


class HostEnvironment(PlatformProbe, Protocol):
    """Platform probe plus factories for every capability."""

    async def acquire_preferences(self) -> KeyValueCapability:
        """Acquire the structured key/value capability (may raise)."""
        ...

    async def acquire_file_area(self) -> FileAreaCapability:
        """Acquire the file-area capability (may raise)."""
        ...

    def transactional_store(self) -> TransactionalStore:
        """Create the (unopened) transactional store."""
        ...

    def flat_store(self) -> FlatKeyValueCapability:
        """Get the flat key/value store."""
        ...
