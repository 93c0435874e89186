"""
Canonical Signable Payload

Builds the exact bytes that an input's signature must cover. The external signer and
this validator must produce identical bytes for identical transactions, so the
layout below is a stable contract: changing it invalidates every signature issued
under the previous layout, and must come with a new PAYLOAD_VERSION.

Layout (version 1), compact ASCII JSON with keys in this fixed order::

    {"version":1,
     "id":<transaction id>,
     "inputs":[{"tx_id":..,"output_index":..,"owner":..}, ...],   # input order
     "outputs":[{"recipient":..,"amount":"<decimal>"}, ...],       # output order
     "timestamp":<int>}

Signatures are never part of the payload. Amounts are canonical decimal strings
(see `format_amount`) so that 50, Decimal("50") and Decimal("50.00") all encode as
"50".
"""

import json
from decimal import Decimal
from typing import Any, Dict, List

from ledger.models import Transaction, coerce_amount


PAYLOAD_VERSION = 1


def format_amount(amount: Any) -> str:
    """
    Render an amount as a canonical decimal string.

    Plain positional notation, no exponent, no trailing fractional zeros, and no
    sign on zero. Formatting is exact and independent of the active decimal
    context and of locale.
    """
    if not isinstance(amount, Decimal):
        amount = coerce_amount(amount)

    text = format(amount, 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text in ('-0', ''):
        text = '0'
    return text


def signable_fields(transaction: Transaction) -> Dict[str, Any]:
    """
    Collect the signed fields in their canonical order.

    Args:
        transaction: Transaction to encode

    Returns:
        Insertion-ordered dictionary mirroring the payload layout
    """
    inputs: List[Dict[str, Any]] = [
        {
            "tx_id": tx_input.utxo_id.tx_id,
            "output_index": tx_input.utxo_id.output_index,
            "owner": tx_input.owner,
        }
        for tx_input in transaction.inputs
    ]
    outputs: List[Dict[str, Any]] = [
        {
            "recipient": output.recipient,
            "amount": format_amount(output.amount),
        }
        for output in transaction.outputs
    ]

    return {
        "version": PAYLOAD_VERSION,
        "id": transaction.id,
        "inputs": inputs,
        "outputs": outputs,
        "timestamp": transaction.timestamp,
    }


def build_signable_payload(transaction: Transaction) -> bytes:
    """
    Build the canonical signable payload of a transaction.

    Args:
        transaction: Transaction to encode

    Returns:
        Payload bytes to be signed and verified
    """
    fields = signable_fields(transaction)
    text = json.dumps(fields, separators=(',', ':'), ensure_ascii=True, sort_keys=False)
    return text.encode('ascii')
