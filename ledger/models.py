"""
Ledger Data Models

This module defines the immutable Pydantic models for transactions, their inputs and
outputs, and the unspent outputs held by a UTXO pool.

Models only check shape (types, hex encodings, exact amounts). Semantic rules such as
non-empty inputs or positive amounts are left to the validator, so a malformed
transaction can still be built and then reported on.
"""

from decimal import Context, Decimal, InvalidOperation, MAX_EMAX, MAX_PREC, MIN_EMIN, localcontext
from typing import Any, Dict, Iterable, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


# Unbounded precision so that sums of amounts are never rounded
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

# Most digits an amount may carry on either side of the decimal point
AMOUNT_MAX_DIGITS = 1000


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Add amounts without rounding."""
    total = Decimal(0)
    with localcontext(EXACT_CONTEXT):
        for amount in amounts:
            total += amount
    return total


def coerce_amount(value: Any) -> Decimal:
    """
    Convert an amount to an exact Decimal.

    Integers, Decimals and numeric strings are accepted. Floats are refused because
    they cannot carry an exact value through to the totals. Amounts needing more
    than AMOUNT_MAX_DIGITS digits before or after the decimal point are refused, so
    that exact sums and positional formatting stay bounded.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(
            f"Amount must be an integer, Decimal or numeric string, not {type(value).__name__}"
        )

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Amount is not a number: {value!r}")
    else:
        raise ValueError(f"Unsupported amount type: {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")

    # 0E+n and 0E-n would otherwise expand to n zeros
    if amount.is_zero():
        return Decimal(0)

    if amount.adjusted() >= AMOUNT_MAX_DIGITS:
        raise ValueError(f"Amount has more than {AMOUNT_MAX_DIGITS} integer digits")
    if -amount.as_tuple().exponent > AMOUNT_MAX_DIGITS:
        raise ValueError(f"Amount has more than {AMOUNT_MAX_DIGITS} fractional digits")
    return amount


class UTXOReference(BaseModel):
    """Reference to one output of a prior transaction."""

    model_config = ConfigDict(frozen=True)

    tx_id: str = Field(..., description="Source transaction identifier")
    output_index: int = Field(..., ge=0, description="Output position in the source transaction")

    @property
    def key(self) -> Tuple[str, int]:
        """Lookup key used by pools and duplicate detection."""
        return (self.tx_id, self.output_index)

    def __str__(self) -> str:
        return f"{self.tx_id}:{self.output_index}"

    @classmethod
    def parse(cls, value: str) -> 'UTXOReference':
        """Parse the ``tx_id:output_index`` form."""
        tx_id, sep, index = value.rpartition(':')
        if not sep or not tx_id:
            raise ValueError(f"UTXO reference must look like 'tx_id:index', got {value!r}")
        return cls(tx_id=tx_id, output_index=int(index))


class TransactionInput(BaseModel):
    """Spend of one UTXO."""

    model_config = ConfigDict(frozen=True)

    utxo_id: UTXOReference
    owner: str = Field(..., description="Claimed owner identity (informational)")
    signature: bytes = Field(default=b"", description="Signature over the canonical payload")

    @field_validator('signature', mode='before')
    @classmethod
    def decode_signature(cls, v):
        """Accept signatures as raw bytes or hex strings."""
        if isinstance(v, str):
            try:
                return bytes.fromhex(v)
            except ValueError:
                raise ValueError('Signature must be a hex string')
        if isinstance(v, bytearray):
            return bytes(v)
        return v

    @field_serializer('signature')
    def encode_signature(self, v: bytes) -> str:
        return v.hex()


class TransactionOutput(BaseModel):
    """Value assigned to a recipient."""

    model_config = ConfigDict(frozen=True)

    recipient: str = Field(..., description="Recipient identity")
    amount: Decimal

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v):
        return coerce_amount(v)


class Transaction(BaseModel):
    """A proposed transaction."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Transaction identifier")
    inputs: Tuple[TransactionInput, ...] = Field(default_factory=tuple)
    outputs: Tuple[TransactionOutput, ...] = Field(default_factory=tuple)
    timestamp: int = Field(..., description="Creation time, milliseconds since the epoch")

    @property
    def output_total(self) -> Decimal:
        return sum_amounts(output.amount for output in self.outputs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')


class UTXO(BaseModel):
    """A currently spendable output, as recorded by the pool."""

    model_config = ConfigDict(frozen=True)

    ref: UTXOReference
    recipient: str = Field(..., description="Identity authorized to spend this output")
    amount: Decimal

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v):
        return coerce_amount(v)

    @property
    def tx_id(self) -> str:
        return self.ref.tx_id

    @property
    def output_index(self) -> int:
        return self.ref.output_index

    @property
    def key(self) -> Tuple[str, int]:
        return self.ref.key
