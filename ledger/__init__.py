"""
Ledger Module

Transaction and UTXO data models, and the UTXO pool the validator reads from.
"""

from .exceptions import (
    LedgerError,
    SnapshotError,
    DuplicateUTXOError,
)

from .models import (
    UTXOReference,
    TransactionInput,
    TransactionOutput,
    Transaction,
    UTXO,
    coerce_amount,
    sum_amounts,
)

from .pool import (
    UTXOPool,
    InMemoryUTXOPool,
)

__all__ = [
    "LedgerError",
    "SnapshotError",
    "DuplicateUTXOError",
    "UTXOReference",
    "TransactionInput",
    "TransactionOutput",
    "Transaction",
    "UTXO",
    "coerce_amount",
    "sum_amounts",
    "UTXOPool",
    "InMemoryUTXOPool",
]
