"""Storage tiers behind a single operation set.

- **NativeBackend**: key/value records plus a file area for payloads
- **TransactionalBackend**: two-collection transactional object store
- **FlatBackend**: single-key JSON, metadata only

Exactly one tier is active per library; the facade never branches on the
platform after selection.
"""

from .base import BaseBackend, Tier
from .flat import FlatBackend
from .native import NativeBackend
from .transactional import TransactionalBackend

__all__ = [
    "BaseBackend",
    "FlatBackend",
    "NativeBackend",
    "Tier",
    "TransactionalBackend",
]
