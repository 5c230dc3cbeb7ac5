"""Custom exceptions for the flag store."""

from __future__ import annotations


class FlagStoreError(Exception):
    """Base exception for flag store errors."""

    def __init__(self, message: str, code: str = "FLAG_STORE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidNameError(FlagStoreError):
    """Raised when a flag type or target kind name is empty."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} must not be empty", "INVALID_NAME")


class EntityRefError(FlagStoreError):
    """Raised when an object cannot be referenced by kind and id."""

    def __init__(self, message: str = "Entity has no usable id"):
        super().__init__(message, "INVALID_REF")


class UnknownFlaggerKindError(FlagStoreError):
    """Raised when no loader is registered for a flagger kind."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"No flagger loader registered for kind '{kind}'", "UNKNOWN_FLAGGER_KIND")
