"""
Input Resolution and Value Conservation Rules

This module implements the rules that resolve each input against the UTXO pool and
check that the resolved inputs carry exactly the value the outputs spend.

InputResolutionRule walks the inputs in order:
- an input naming an output reference already seen is a DOUBLE_SPEND and is
  skipped entirely (the first occurrence has already been counted);
- an input whose output is absent from the pool is UTXO_NOT_FOUND;
- otherwise the UTXO amount is added to the input total and the input is kept
  for signature checking.

ValueConservationRule then compares the input total with the output total. It
runs even when resolution reported errors.
"""

from typing import Dict, Tuple

from ledger.models import sum_amounts
from validator.core import ResolvedInput, ValidationRule, ValidationContext
from validator.errors import ValidationErrorCode
from validator.payload import format_amount


class InputResolutionRule(ValidationRule):
    """
    Validation rule for duplicate references and UTXO existence.
    """

    def __init__(self):
        super().__init__(
            name="input_resolution",
            description="Rejects duplicate and unknown UTXO references"
        )

    def validate(self, context: ValidationContext) -> bool:
        seen: Dict[Tuple[str, int], int] = {}
        resolved_amounts = []
        passed = True

        for index, tx_input in enumerate(context.transaction.inputs):
            reference = tx_input.utxo_id
            key = reference.key

            if key in seen:
                context.add_error(
                    self.name,
                    ValidationErrorCode.DOUBLE_SPEND,
                    f"UTXO {reference} is referenced more than once "
                    f"(input {index} repeats input {seen[key]})",
                    location=f"inputs[{index}]",
                    utxo=str(reference),
                    first_input=seen[key],
                )
                passed = False
                continue

            seen[key] = index

            utxo = context.lookup_utxo(reference)
            if utxo is None:
                context.add_error(
                    self.name,
                    ValidationErrorCode.UTXO_NOT_FOUND,
                    f"UTXO {reference} not found",
                    location=f"inputs[{index}]",
                    utxo=str(reference),
                )
                passed = False
                continue

            resolved_amounts.append(utxo.amount)
            context.resolved_inputs.append(
                ResolvedInput(index=index, tx_input=tx_input, utxo=utxo)
            )

        context.input_total = sum_amounts(resolved_amounts)
        self.logger.debug(
            f"Resolved {len(context.resolved_inputs)} of "
            f"{len(context.transaction.inputs)} inputs, total {context.input_total}"
        )
        return passed


class ValueConservationRule(ValidationRule):
    """
    Validation rule requiring inputs to sum exactly to outputs.
    """

    def __init__(self):
        super().__init__(
            name="value_conservation",
            description="Requires input total to equal output total"
        )

    def validate(self, context: ValidationContext) -> bool:
        input_total = context.input_total
        output_total = context.transaction.output_total

        if input_total == output_total:
            return True

        context.add_error(
            self.name,
            ValidationErrorCode.AMOUNT_MISMATCH,
            f"Input total {format_amount(input_total)} does not equal "
            f"output total {format_amount(output_total)}",
            location="transaction",
            input_total=input_total,
            output_total=output_total,
        )
        return False
