"""
Tests for Ledger Data Models

Tests UTXO references, transaction models, amount coercion and exact summation.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from ledger.models import (
    AMOUNT_MAX_DIGITS,
    Transaction,
    TransactionInput,
    TransactionOutput,
    UTXO,
    UTXOReference,
    coerce_amount,
    sum_amounts,
)


class TestUTXOReference:
    """Test UTXOReference model."""

    def test_reference_creation(self):
        ref = UTXOReference(tx_id="abc", output_index=2)

        assert ref.key == ("abc", 2)
        assert str(ref) == "abc:2"

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            UTXOReference(tx_id="abc", output_index=-1)

    def test_parse(self):
        assert UTXOReference.parse("abc:7") == UTXOReference(tx_id="abc", output_index=7)

    def test_parse_keeps_colons_in_tx_id(self):
        ref = UTXOReference.parse("chain:abc:1")

        assert ref.tx_id == "chain:abc"
        assert ref.output_index == 1

    @pytest.mark.parametrize("value", ["abc", ":1", "abc:x"])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            UTXOReference.parse(value)

    def test_references_are_hashable_and_frozen(self):
        ref = UTXOReference(tx_id="abc", output_index=0)

        assert {ref, UTXOReference(tx_id="abc", output_index=0)} == {ref}
        with pytest.raises(ValidationError):
            ref.output_index = 1


class TestAmounts:
    """Test amount coercion and summation."""

    @pytest.mark.parametrize("value,expected", [
        (5, Decimal(5)),
        (Decimal("1.25"), Decimal("1.25")),
        ("0.1", Decimal("0.1")),
        (" 7 ", Decimal(7)),
        (-3, Decimal(-3)),
    ])
    def test_coerce_accepts_exact_values(self, value, expected):
        assert coerce_amount(value) == expected

    @pytest.mark.parametrize("value", [0.1, True, "ten", "NaN", "Infinity", None, [1]])
    def test_coerce_rejects(self, value):
        with pytest.raises(ValueError):
            coerce_amount(value)

    def test_sum_is_exact(self):
        amounts = [Decimal("0.1")] * 10

        assert sum_amounts(amounts) == Decimal("1.0")

    def test_sum_beyond_default_precision(self):
        amounts = [Decimal("1" + "0" * 40), Decimal("0.000000001")]

        assert sum_amounts(amounts) == Decimal("1" + "0" * 40 + ".000000001")

    def test_sum_of_nothing(self):
        assert sum_amounts([]) == Decimal(0)

    @pytest.mark.parametrize("value", ["1E+999999999999", "1E-999999999999",
                                       "5E+1000", "1" * 1001])
    def test_coerce_rejects_oversized(self, value):
        with pytest.raises(ValueError, match="digits"):
            coerce_amount(value)

    def test_coerce_accepts_digit_limit(self):
        widest = "9" * AMOUNT_MAX_DIGITS + "." + "9" * AMOUNT_MAX_DIGITS

        assert coerce_amount(widest) == Decimal(widest)

    @pytest.mark.parametrize("value", ["0E+999999999999", "-0E-999999999999", "0.000"])
    def test_coerce_normalizes_zero(self, value):
        amount = coerce_amount(value)

        assert amount == 0
        assert amount.as_tuple().exponent == 0

    def test_output_refuses_oversized_amount(self):
        with pytest.raises(ValidationError):
            TransactionOutput(recipient="bob", amount="1E+999999999999")


class TestTransactionModels:
    """Test transaction, input and output models."""

    def test_input_signature_from_hex(self):
        tx_input = TransactionInput(
            utxo_id={"tx_id": "T", "output_index": 0}, owner="alice", signature="deadbeef"
        )

        assert tx_input.signature == bytes.fromhex("deadbeef")
        assert tx_input.model_dump(mode="json")["signature"] == "deadbeef"

    def test_input_signature_defaults_empty(self):
        tx_input = TransactionInput(utxo_id=UTXOReference(tx_id="T", output_index=0), owner="a")

        assert tx_input.signature == b""

    def test_input_signature_invalid_hex(self):
        with pytest.raises(ValidationError):
            TransactionInput(utxo_id={"tx_id": "T", "output_index": 0}, owner="a", signature="xyz")

    def test_output_refuses_float(self):
        with pytest.raises(ValidationError):
            TransactionOutput(recipient="bob", amount=1.5)

    def test_output_allows_non_positive_amounts(self):
        """Semantic checks belong to the validator."""
        assert TransactionOutput(recipient="bob", amount=0).amount == 0
        assert TransactionOutput(recipient="bob", amount=-1).amount == -1

    def test_transaction_allows_empty_sequences(self):
        tx = Transaction(id="tx", timestamp=0)

        assert tx.inputs == ()
        assert tx.outputs == ()
        assert tx.output_total == Decimal(0)

    def test_transaction_round_trip(self, valid_transaction):
        data = valid_transaction.to_dict()

        assert data["outputs"][1]["amount"] == "10"
        assert Transaction.from_dict(data) == valid_transaction

    def test_output_total(self, make_transaction):
        tx = make_transaction(inputs=[], outputs=[("a", "1.5"), ("b", 2), ("c", Decimal("0.25"))])

        assert tx.output_total == Decimal("3.75")

    def test_transaction_is_immutable(self, valid_transaction):
        with pytest.raises(ValidationError):
            valid_transaction.id = "other"


class TestUTXO:
    """Test UTXO model."""

    def test_utxo_accessors(self):
        utxo = UTXO(ref={"tx_id": "T", "output_index": 3}, recipient="bob", amount="12.5")

        assert utxo.tx_id == "T"
        assert utxo.output_index == 3
        assert utxo.key == ("T", 3)
        assert utxo.amount == Decimal("12.5")

    def test_utxo_refuses_float(self):
        with pytest.raises(ValidationError):
            UTXO(ref={"tx_id": "T", "output_index": 0}, recipient="bob", amount=0.3)
