from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested note or template does not exist."""

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message)


class OutOfRangeError(UserError):
    """Raised when a history/version index is outside the note's history."""

    def __init__(self, message: str = "Version index out of range") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class StorageError(UserError):
    """Raised when the persistence layer rejects an operation."""

    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message)


class StorageQuotaExceededError(StorageError):
    """Raised when a write is rejected because the store is full.

    Kept distinct from StorageError so callers can prompt the user to clean up.
    """

    def __init__(self, message: str = "Storage quota exceeded") -> None:
        super().__init__(message)


class EncodingError(UserError):
    """Raised when note content cannot be obfuscated."""
