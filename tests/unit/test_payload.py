"""
Tests for the Canonical Signable Payload

Tests byte-level stability of the payload layout, exclusion of signatures, and
canonical amount formatting.
"""

import json
from decimal import Decimal, localcontext

import pytest

from ledger.models import Transaction
from validator.payload import (
    PAYLOAD_VERSION,
    build_signable_payload,
    format_amount,
    signable_fields,
)


class TestFormatAmount:
    """Test canonical amount strings."""

    @pytest.mark.parametrize("amount,expected", [
        (50, "50"),
        (Decimal("50"), "50"),
        (Decimal("50.00"), "50"),
        (Decimal("5E+1"), "50"),
        (Decimal("0.10"), "0.1"),
        (Decimal("1E-8"), "0.00000001"),
        (Decimal("-2.500"), "-2.5"),
        (Decimal("-0"), "0"),
        (Decimal("0E-5"), "0"),
        ("12.3400", "12.34"),
        (Decimal("1000"), "1000"),
    ])
    def test_canonical_forms(self, amount, expected):
        assert format_amount(amount) == expected

    def test_independent_of_context_precision(self):
        amount = Decimal("123456789012345678901234567890.123456789")

        with localcontext() as ctx:
            ctx.prec = 5
            assert format_amount(amount) == "123456789012345678901234567890.123456789"

    def test_rejects_float(self):
        with pytest.raises(ValueError):
            format_amount(0.5)


class TestBuildSignablePayload:
    """Test payload construction."""

    def test_exact_layout(self, make_transaction):
        tx = make_transaction(
            inputs=[("T", 0, "alice"), ("U", 3, "bob")],
            outputs=[("carol", 40), ("alice", Decimal("10.50"))],
            tx_id="tx-42",
            timestamp=1700000000000,
        )

        expected = (
            b'{"version":1,"id":"tx-42",'
            b'"inputs":[{"tx_id":"T","output_index":0,"owner":"alice"},'
            b'{"tx_id":"U","output_index":3,"owner":"bob"}],'
            b'"outputs":[{"recipient":"carol","amount":"40"},'
            b'{"recipient":"alice","amount":"10.5"}],'
            b'"timestamp":1700000000000}'
        )
        assert build_signable_payload(tx) == expected

    def test_payload_is_ascii_json(self, valid_transaction):
        payload = build_signable_payload(valid_transaction)

        decoded = json.loads(payload.decode("ascii"))
        assert decoded["version"] == PAYLOAD_VERSION
        assert list(decoded.keys()) == ["version", "id", "inputs", "outputs", "timestamp"]

    def test_non_ascii_identities_are_escaped(self, make_transaction):
        tx = make_transaction(inputs=[("T", 0, "zoë")], outputs=[("jürgen", 1)])

        payload = build_signable_payload(tx)

        payload.decode("ascii")
        assert b"\\u00eb" in payload

    def test_signatures_are_excluded(self, valid_transaction, make_transaction, alice, bob):
        unsigned = make_transaction(
            inputs=[("T", 0, alice.identity)],
            outputs=[(bob.identity, 40), (alice.identity, 10)],
        )

        assert valid_transaction.inputs[0].signature != b""
        assert build_signable_payload(valid_transaction) == build_signable_payload(unsigned)
        assert b"signature" not in build_signable_payload(valid_transaction)

    def test_equal_transactions_equal_payloads(self, make_transaction):
        first = make_transaction(inputs=[("T", 0, "a")], outputs=[("b", 5)])
        second = Transaction.from_dict(first.to_dict())

        assert first is not second
        assert build_signable_payload(first) == build_signable_payload(second)

    def test_equivalent_amount_spellings_match(self, make_transaction):
        first = make_transaction(inputs=[("T", 0, "a")], outputs=[("b", 5)])
        second = make_transaction(inputs=[("T", 0, "a")], outputs=[("b", "5.000")])

        assert build_signable_payload(first) == build_signable_payload(second)

    @pytest.mark.parametrize("change", [
        {"id": "tx-2"},
        {"timestamp": 1},
    ])
    def test_signed_fields_change_payload(self, make_transaction, change):
        tx = make_transaction(inputs=[("T", 0, "a")], outputs=[("b", 5)])

        assert build_signable_payload(tx) != build_signable_payload(tx.model_copy(update=change))

    def test_order_is_preserved(self, make_transaction):
        forward = make_transaction(
            inputs=[("T", 0, "a"), ("T", 1, "a")],
            outputs=[("b", 1), ("c", 2)],
        )
        swapped_inputs = make_transaction(
            inputs=[("T", 1, "a"), ("T", 0, "a")],
            outputs=[("b", 1), ("c", 2)],
        )
        swapped_outputs = make_transaction(
            inputs=[("T", 0, "a"), ("T", 1, "a")],
            outputs=[("c", 2), ("b", 1)],
        )

        payloads = {
            build_signable_payload(forward),
            build_signable_payload(swapped_inputs),
            build_signable_payload(swapped_outputs),
        }
        assert len(payloads) == 3

    def test_owner_is_signed(self, make_transaction):
        first = make_transaction(inputs=[("T", 0, "alice")], outputs=[("b", 5)])
        second = make_transaction(inputs=[("T", 0, "mallory")], outputs=[("b", 5)])

        assert build_signable_payload(first) != build_signable_payload(second)

    def test_empty_sequences_encode(self, make_transaction):
        tx = make_transaction(inputs=[], outputs=[])

        fields = signable_fields(tx)
        assert fields["inputs"] == []
        assert fields["outputs"] == []
        assert b'"inputs":[]' in build_signable_payload(tx)
