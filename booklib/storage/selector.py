"""Tier selection, run once when the library initializes.

A native host always gets the native tier, even when one of its
capabilities could not be acquired; the missing capability only degrades the
operations that depend on it. Any other host gets the transactional tier.
There is no user-facing override.
"""

import logging

from booklib.storage.backends import (
    BaseBackend,
    FlatBackend,
    NativeBackend,
    TransactionalBackend,
)
from booklib.storage.backends.native import PAYLOAD_DIR
from booklib.storage.capabilities import (
    FileAreaCapability,
    HostEnvironment,
    KeyValueCapability,
)
from booklib.storage.exceptions import StorageError

logger = logging.getLogger(__name__)


class TierSelector:
    """Probe the host and build the active tier."""

    def __init__(self, host: HostEnvironment):
        self.host = host

    def flat_backend(self) -> FlatBackend:
        """Build the flat tier used as fallback by every other tier."""
        return FlatBackend(self.host.flat_store())

    async def select(self) -> BaseBackend:
        """Build the active tier.

        Never raises: capability and store-open failures are logged and leave
        the selected tier in a degraded state.
        """
        fallback = self.flat_backend()

        if not self.host.is_native_host():
            backend = TransactionalBackend(self.host.transactional_store(), fallback)
            try:
                await backend.open()
            except (StorageError, OSError) as e:
                logger.error(f"Object store unavailable: {e}")
            logger.info(f"Selected {backend.name} tier")
            return backend

        preferences = await self._acquire_preferences()
        file_area = await self._acquire_file_area()
        if file_area is not None:
            await self._ensure_payload_dir(file_area)

        backend = NativeBackend(preferences, file_area, fallback)
        logger.info(f"Selected {backend.name} tier")
        return backend

    async def _acquire_preferences(self) -> KeyValueCapability | None:
        try:
            return await self.host.acquire_preferences()
        except Exception as e:
            logger.warning(f"Key/value capability not available: {e}")
            return None

    async def _acquire_file_area(self) -> FileAreaCapability | None:
        try:
            return await self.host.acquire_file_area()
        except Exception as e:
            logger.warning(f"File area capability not available: {e}")
            return None

    async def _ensure_payload_dir(self, file_area: FileAreaCapability) -> None:
        try:
            await file_area.ensure_directory(PAYLOAD_DIR)
        except FileExistsError:
            pass
        except (OSError, StorageError, ValueError) as e:
            logger.warning(f"Could not create payload directory: {e}")
