"""
Pytest configuration and fixtures for transaction validator tests.
"""

from decimal import Decimal

import pytest

from crypto.keys import PrivateKey
from crypto.signatures import sign_payload
from ledger.models import (
    Transaction, TransactionInput, TransactionOutput, UTXO, UTXOReference
)
from ledger.pool import InMemoryUTXOPool
from validator.payload import build_signable_payload


TIMESTAMP = 1700000000000


@pytest.fixture
def alice():
    """Deterministic key of the first UTXO holder."""
    return PrivateKey(bytes.fromhex("11" * 32))


@pytest.fixture
def bob():
    """Deterministic key of the second UTXO holder."""
    return PrivateKey(bytes.fromhex("22" * 32))


@pytest.fixture
def mallory():
    """Key that owns nothing in the pool."""
    return PrivateKey(bytes.fromhex("33" * 32))


@pytest.fixture
def pool(alice, bob):
    """
    Pool snapshot used by most tests:

    T:0 -> alice 50, T:1 -> bob 30, U:0 -> alice 20
    """
    return InMemoryUTXOPool([
        UTXO(ref=UTXOReference(tx_id="T", output_index=0), recipient=alice.identity, amount=50),
        UTXO(ref=UTXOReference(tx_id="T", output_index=1), recipient=bob.identity, amount=30),
        UTXO(ref=UTXOReference(tx_id="U", output_index=0), recipient=alice.identity, amount=20),
    ])


def sign_inputs(transaction, signers):
    """Return a copy of the transaction with input i signed by signers[i]."""
    payload = build_signable_payload(transaction)
    signed_inputs = tuple(
        tx_input.model_copy(update={"signature": sign_payload(key, payload) if key else b""})
        for tx_input, key in zip(transaction.inputs, signers)
    )
    return transaction.model_copy(update={"inputs": signed_inputs})


@pytest.fixture
def make_transaction():
    """
    Factory for transactions.

    inputs are (tx_id, output_index, owner) tuples, outputs are (recipient, amount)
    tuples, and signers (optional) are private keys aligned with the inputs.
    """
    def _make(inputs, outputs, signers=None, tx_id="tx-1", timestamp=TIMESTAMP):
        transaction = Transaction(
            id=tx_id,
            inputs=[
                TransactionInput(
                    utxo_id=UTXOReference(tx_id=source, output_index=index),
                    owner=owner,
                )
                for source, index, owner in inputs
            ],
            outputs=[
                TransactionOutput(recipient=recipient, amount=amount)
                for recipient, amount in outputs
            ],
            timestamp=timestamp,
        )
        if signers:
            transaction = sign_inputs(transaction, signers)
        return transaction

    return _make


@pytest.fixture
def valid_transaction(make_transaction, alice, bob):
    """Alice spends T:0 (50) and pays 40 to bob with 10 change."""
    return make_transaction(
        inputs=[("T", 0, alice.identity)],
        outputs=[(bob.identity, 40), (alice.identity, Decimal("10"))],
        signers=[alice],
    )


# Test markers for different test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "concurrency: mark test as a concurrency test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# Pytest collection hooks
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test names."""
    for item in items:
        # Add markers based on test file paths
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)

        if "concurrent" in item.name or "thread" in item.name:
            item.add_marker(pytest.mark.concurrency)

        if "slow" in item.name or "large" in item.name:
            item.add_marker(pytest.mark.slow)
