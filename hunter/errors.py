"""
Error types raised by the Hunter System core.

Services raise these for business rule violations; repositories raise
StoreFailure when a transaction cannot be committed.
"""

from __future__ import annotations


class HunterError(Exception):
    """Base class for all Hunter System errors."""


class NotFoundError(HunterError):
    """A quest, item or character does not exist."""


class InvalidStateError(HunterError):
    """The record exists but is not in a state that allows the operation."""


class ValidationError(HunterError, ValueError):
    """Input failed validation (unknown enum value, bad amount, too few points)."""


class StoreFailure(HunterError):
    """The backing store failed; the transaction was rolled back."""
