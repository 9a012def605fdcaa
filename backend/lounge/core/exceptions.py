"""Exception hierarchy for the lounge core.

Form validation failures are pydantic's ``ValidationError``; everything the
core raises on its own derives from ``LoungeError``.
"""


class LoungeError(Exception):
    """Base exception for all lounge errors."""


class NotFoundError(LoungeError):
    """Raised when a referenced record does not exist."""


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id: str):
        super().__init__(f"Customer not found: {customer_id}")
        self.customer_id = customer_id


class StorageUnavailableError(LoungeError):
    """Raised when the persisted collection cannot be read or decoded."""


class StoreConflictError(LoungeError):
    """Raised when another writer saved the collection since it was loaded."""

    def __init__(self, key: str):
        super().__init__(f"Collection '{key}' was modified by another writer")
        self.key = key


class MembershipNumberExhaustedError(LoungeError):
    """Raised when no free membership number was found within the retry budget."""


class VerificationError(LoungeError):
    """Verification failure carrying the message shown on the verification screen."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTransitionError(VerificationError):
    """Raised when a decision is not available in the session's current state."""
