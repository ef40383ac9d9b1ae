class DomainError(Exception):
    """Base exception for business rule violations."""


class NotFoundError(DomainError):
    """Raised when a referenced document does not exist."""


class InvalidTransitionError(DomainError):
    """Raised when a work-log status change would move backwards."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from '{current}' to '{requested}'")


class HandoverValidationError(DomainError):
    """Raised when a handover is submitted with nothing to hand over."""


class HandoverAlreadySentError(DomainError):
    """Raised when a sent handover draft is submitted again without reset."""


class StorageError(DomainError):
    """Raised when the photo object storage rejects a write."""


class DeliveryError(DomainError):
    """Raised when a handover could not be delivered to the next shift."""


class PhotoTooLargeError(StorageError):
    """Raised when an upload exceeds ``PHOTO_MAX_BYTES``."""
