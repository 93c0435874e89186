"""
Structural Well-Formedness Rule

This module implements the StructureRule class, which checks that a transaction has
inputs and outputs and that every output carries a strictly positive amount.
"""

from validator.core import ValidationRule, ValidationContext
from validator.errors import ValidationErrorCode


class StructureRule(ValidationRule):
    """
    Validation rule for transaction shape.

    All checks run on every call so that a malformed transaction reports each of
    its structural problems at once. Zero and negative amounts share the
    NON_POSITIVE_AMOUNT code; the `sign` detail tells them apart.
    """

    def __init__(self):
        super().__init__(
            name="structure",
            description="Requires inputs, outputs and positive output amounts"
        )

    def validate(self, context: ValidationContext) -> bool:
        transaction = context.transaction
        inputs = transaction.inputs or ()
        outputs = transaction.outputs or ()
        passed = True

        if len(inputs) == 0:
            context.add_error(
                self.name,
                ValidationErrorCode.EMPTY_INPUTS,
                "Transaction has no inputs",
                location="inputs",
            )
            passed = False

        if len(outputs) == 0:
            context.add_error(
                self.name,
                ValidationErrorCode.EMPTY_OUTPUTS,
                "Transaction has no outputs",
                location="outputs",
            )
            passed = False

        for index, output in enumerate(outputs):
            if output.amount > 0:
                continue

            sign = "zero" if output.amount == 0 else "negative"
            context.add_error(
                self.name,
                ValidationErrorCode.NON_POSITIVE_AMOUNT,
                f"Output {index} amount is {sign} ({output.amount})",
                location=f"outputs[{index}]",
                amount=output.amount,
                sign=sign,
            )
            passed = False

        if not passed:
            self.logger.debug(f"Transaction {transaction.id} is structurally malformed")
        return passed
