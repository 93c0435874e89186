"""
UTXO Pool

This module provides the lookup contract the validator reads from, and a thread-safe
in-memory implementation that can be loaded from a JSON snapshot file.

Snapshot file format::

    {"utxos": [{"ref": {"tx_id": "T", "output_index": 0},
                "recipient": "<identity hex>", "amount": "50"}]}
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError as ModelValidationError

from .exceptions import DuplicateUTXOError, SnapshotError
from .models import UTXO, UTXOReference, sum_amounts


class UTXOPool(ABC):
    """
    Read-only view of the currently spendable outputs.

    Implementations must answer lookups from a stable snapshot for the duration of
    one validation call.
    """

    @abstractmethod
    def get_utxo(self, tx_id: str, output_index: int) -> Optional[UTXO]:
        """
        Look up one output.

        Args:
            tx_id: Source transaction identifier
            output_index: Output position in the source transaction

        Returns:
            The UTXO, or None if it is not in the pool
        """
        pass

    def contains(self, tx_id: str, output_index: int) -> bool:
        return self.get_utxo(tx_id, output_index) is not None


class InMemoryUTXOPool(UTXOPool):
    """
    Dictionary-backed UTXO pool.

    Reads and writes are guarded by a lock so that the pool can be shared between
    threads. The validator only reads; `remove` is there for the surrounding ledger
    that consumes outputs once a transaction is accepted.
    """

    def __init__(self, utxos: Optional[Iterable[UTXO]] = None):
        self.logger = logging.getLogger("ledger.pool")
        self._utxos: Dict[Tuple[str, int], UTXO] = {}
        self._lock = threading.RLock()

        for utxo in utxos or ():
            self.add(utxo)

    def add(self, utxo: UTXO) -> None:
        """
        Add a spendable output.

        Raises:
            DuplicateUTXOError: If the reference is already present
        """
        with self._lock:
            if utxo.key in self._utxos:
                raise DuplicateUTXOError(str(utxo.ref))
            self._utxos[utxo.key] = utxo
        self.logger.debug(f"Added UTXO {utxo.ref} ({utxo.amount})")

    def remove(self, tx_id: str, output_index: int) -> Optional[UTXO]:
        """Remove an output, returning it if it was present."""
        with self._lock:
            utxo = self._utxos.pop((tx_id, output_index), None)
        if utxo is not None:
            self.logger.debug(f"Removed UTXO {tx_id}:{output_index}")
        return utxo

    def get_utxo(self, tx_id: str, output_index: int) -> Optional[UTXO]:
        with self._lock:
            return self._utxos.get((tx_id, output_index))

    def get(self, reference: Union[UTXOReference, str]) -> Optional[UTXO]:
        """Look up by reference object or ``tx_id:index`` string."""
        if isinstance(reference, str):
            reference = UTXOReference.parse(reference)
        return self.get_utxo(reference.tx_id, reference.output_index)

    def snapshot(self) -> 'InMemoryUTXOPool':
        """Return an independent copy that later writes to this pool do not affect."""
        with self._lock:
            utxos = list(self._utxos.values())
        return InMemoryUTXOPool(utxos)

    def total_value(self) -> Decimal:
        with self._lock:
            return sum_amounts(utxo.amount for utxo in self._utxos.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._utxos)

    def __iter__(self) -> Iterator[UTXO]:
        with self._lock:
            return iter(list(self._utxos.values()))

    def __contains__(self, reference) -> bool:
        if isinstance(reference, str):
            reference = UTXOReference.parse(reference)
        return self.contains(reference.tx_id, reference.output_index)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {"utxos": [utxo.model_dump(mode='json') for utxo in self]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InMemoryUTXOPool':
        """
        Build a pool from snapshot data.

        Raises:
            SnapshotError: If the data is not a valid snapshot
        """
        if not isinstance(data, dict) or not isinstance(data.get("utxos"), list):
            raise SnapshotError("Snapshot must be an object with a 'utxos' list")

        try:
            utxos = [UTXO.model_validate(entry) for entry in data["utxos"]]
        except ModelValidationError as e:
            raise SnapshotError(f"Invalid UTXO entry in snapshot: {e}") from e

        try:
            return cls(utxos)
        except DuplicateUTXOError as e:
            raise SnapshotError(f"Snapshot contains a duplicate entry: {e}") from e

    @classmethod
    def from_snapshot_file(cls, path: Union[str, Path]) -> 'InMemoryUTXOPool':
        """Load a pool from a JSON snapshot file."""
        path = Path(path)
        try:
            with open(path, 'r') as f:
                data = json.load(f, parse_float=Decimal)
        except FileNotFoundError:
            raise SnapshotError(f"Snapshot file not found: {path}")
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Invalid JSON in snapshot {path}: {e}") from e

        pool = cls.from_dict(data)
        pool.logger.info(f"Loaded {len(pool)} UTXOs from {path}")
        return pool
