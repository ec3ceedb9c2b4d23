"""Catalog storage over native, transactional and flat tiers.

- **Library**: facade owning the in-memory record set and its observers
- **TierSelector**: picks the tier once per process from host capabilities
- **Backends**: one driver per tier behind a common operation set
- **Events**: record-set change notifications
- **PayloadOutcome**: typed result of best-effort payload operations
"""

from booklib.storage.backends import (
    BaseBackend,
    FlatBackend,
    NativeBackend,
    Tier,
    TransactionalBackend,
)
from booklib.storage.events import Event, EventBus, EventPublisher, EventType
from booklib.storage.exceptions import (
    CapabilityUnavailableError,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
    StoreOpenError,
    TransactionError,
)
from booklib.storage.library import Library
from booklib.storage.objecturls import ObjectUrlRegistry
from booklib.storage.results import PayloadOutcome, PayloadStatus
from booklib.storage.selector import TierSelector

__all__ = [
    # Facade
    "Library",
    "TierSelector",
    "ObjectUrlRegistry",
    # Backends
    "BaseBackend",
    "FlatBackend",
    "NativeBackend",
    "Tier",
    "TransactionalBackend",
    # Events
    "Event",
    "EventBus",
    "EventPublisher",
    "EventType",
    # Results
    "PayloadOutcome",
    "PayloadStatus",
    # Errors
    "CapabilityUnavailableError",
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
    "StoreOpenError",
    "TransactionError",
]
