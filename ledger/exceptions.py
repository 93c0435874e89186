"""
Ledger Exceptions

This module defines custom exceptions for the ledger models and the UTXO pool.
"""


class LedgerError(Exception):
    """Base exception for ledger-related errors."""
    pass


class SnapshotError(LedgerError):
    """Raised when a UTXO pool snapshot cannot be read or is malformed."""
    pass


class DuplicateUTXOError(LedgerError):
    """Raised when adding an output reference that is already in the pool."""

    def __init__(self, reference: str, message: str = None):
        self.reference = reference
        if message is None:
            message = f"UTXO {reference} is already present in the pool"
        super().__init__(message)
