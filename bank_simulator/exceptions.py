"""
Banking Domain Errors

Every failure the ledger can report to its caller has its own exception
type so the CLI shell can translate each into a user-facing message.
Validation errors also subclass ValueError.
"""

from typing import Optional, Union
from pathlib import Path


class BankError(Exception):
    """Base class for all bank simulator errors"""
    pass


class InvalidAmount(BankError, ValueError):
    """Malformed, non-positive or out-of-range monetary amount"""
    pass


class InvalidPin(BankError, ValueError):
    """PIN is not 4-12 decimal digits"""
    pass


class InsufficientFunds(BankError):
    """Withdrawal exceeds the current balance"""
    pass


class CorruptStore(BankError):
    """
    Persisted account file could not be parsed.

    Raised for the whole load; no accounts are returned from a file that
    contains a malformed record.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 line_number: Optional[int] = None):
        self.path = str(path) if path is not None else None
        self.line_number = line_number
        if self.path and line_number is not None:
            message = f"{self.path}:{line_number}: {message}"
        elif self.path:
            message = f"{self.path}: {message}"
        super().__init__(message)
