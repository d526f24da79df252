"""Common exceptions for the scheduling engine.

Validation problems are raised synchronously before any write reaches the
store. Store failures are raised by store implementations and turned into
user-visible notifications by the services.
"""


class InvalidRecordError(Exception):
    """Raised when a record is missing required data.

    ``errors`` maps a field name to a human readable message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        details = "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"Validation failed: {details}")


class SurgeryValidationError(InvalidRecordError):
    """Raised when a surgery cannot be written as entered."""


class ResourceNotFoundError(Exception):
    """Raised when a resource doesn't exist."""

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class StoreWriteError(Exception):
    """Raised when the backing store rejects or fails a write."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")


class StoreUnavailableError(StoreWriteError):
    """Transient store failure (network, connection); the write may be retried."""
