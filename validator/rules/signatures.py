"""
Signature Authorization Rule

This module implements the SignatureRule class, which checks that every resolved
input is signed by the identity the pool records as the UTXO's recipient.

The input's own `owner` field is not consulted: only the recorded recipient can
authorize a spend. Inputs whose UTXO was not found are skipped, as their absence
is already reported.
"""

from validator.core import ValidationRule, ValidationContext
from validator.errors import ValidationErrorCode


class SignatureRule(ValidationRule):
    """
    Validation rule for spend authorization.
    """

    def __init__(self):
        super().__init__(
            name="signature",
            description="Requires a valid recipient signature on every resolved input"
        )

    def is_applicable(self, context: ValidationContext) -> bool:
        return len(context.resolved_inputs) > 0

    def validate(self, context: ValidationContext) -> bool:
        passed = True

        for resolved in context.resolved_inputs:
            tx_input = resolved.tx_input
            identity = resolved.utxo.recipient

            if context.verify_signature(tx_input.signature, identity):
                continue

            context.add_error(
                self.name,
                ValidationErrorCode.INVALID_SIGNATURE,
                f"Invalid signature on input {resolved.index} "
                f"spending UTXO {tx_input.utxo_id}",
                location=f"inputs[{resolved.index}]",
                utxo=str(tx_input.utxo_id),
                identity=identity,
            )
            passed = False

        return passed
