# Path: core/errors.py
# Purpose: Define the error taxonomy shared by settings validation, orchestration, and persistence.
# Layer: core.
# Details: Local errors never reach the provider; provider failures are wrapped in CorrectionFailedError.

from __future__ import annotations

GENERIC_FAILURE_MESSAGE = "Refinement process interrupted."


class OnModelError(Exception):
    """Base class for all errors raised by the core."""


class ValidationError(OnModelError, ValueError):
    """Malformed input rejected before any provider call."""


class InvalidSettingError(ValidationError):
    """A correction setting field holds a value outside its closed set."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"Invalid value for {field}: {value!r}")
        self.field = field
        self.value = value


class InvalidImageError(ValidationError):
    """Image data that cannot be decoded."""


class PreconditionError(OnModelError):
    """The workbench is not in a state that allows the requested operation."""


class CorrectionInProgressError(PreconditionError):
    """A correction attempt is already outstanding."""


class CorrectionFailedError(OnModelError):
    """The external provider failed; carries a user-facing message."""

    def __init__(self, detail: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(detail)
        self.detail = detail


class PersistenceReadError(OnModelError):
    """A stored record is corrupt or unreadable. Always resolved by falling back to defaults."""


__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "CorrectionFailedError",
    "CorrectionInProgressError",
    "InvalidImageError",
    "InvalidSettingError",
    "OnModelError",
    "PersistenceReadError",
    "PreconditionError",
    "ValidationError",
]
