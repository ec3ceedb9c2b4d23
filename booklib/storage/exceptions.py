"""Exception classes for the storage layer."""


class StorageError(Exception):
    """Base exception for storage-related errors."""

    pass


class StoreOpenError(StorageError):
    """Raised when the transactional store cannot be opened or upgraded."""

    def __init__(self, name: str, details: str = ""):
        """Initialize with store name and details."""
        self.name = name
        message = f"Failed to open store {name}"
        if details:
            message += f": {details}"
        super().__init__(message)


class TransactionError(StorageError):
    """Raised when a single store transaction fails."""

    def __init__(self, collection: str, operation: str, details: str = ""):
        """Initialize with the collection and operation that failed."""
        self.collection = collection
        self.operation = operation
        message = f"Transaction {operation} on {collection} failed"
        if details:
            message += f": {details}"
        super().__init__(message)


class StorageUnavailableError(StorageError):
    """Raised when an operation targets a tier whose store is not open."""

    def __init__(self, tier: str):
        """Initialize with the tier name."""
        self.tier = tier
        super().__init__(f"Storage for {tier} tier is not available")


class CapabilityUnavailableError(StorageError):
    """Raised when a host capability cannot be acquired."""

    def __init__(self, capability: str, details: str = ""):
        """Initialize with capability name and details."""
        self.capability = capability
        message = f"Capability not available: {capability}"
        if details:
            message += f" ({details})"
        super().__init__(message)


class QuotaExceededError(StorageError):
    """Raised by the flat store when a write would exceed its quota."""

    def __init__(self, quota: int, required: int):
        """Initialize with the quota and the size that was required."""
        self.quota = quota
        self.required = required
        super().__init__(f"Flat store quota exceeded: {required} > {quota} bytes")
