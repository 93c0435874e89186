"""
Transaction Validator Core Engine

This module provides the TransactionValidator, which checks one proposed transaction
against a UTXO pool snapshot and reports every violated invariant.

The engine runs its rules in two phases:
- Structural rules (empty inputs/outputs, non-positive amounts). Any error here ends
  the call; value and signature checks are meaningless on a malformed transaction.
- Ledger rules, in order: input resolution (duplicates, existence, input total),
  value conservation, signature authorization. Their errors accumulate.

Diagnostics are returned as data. Exceptions only escape when a collaborator (the
pool or the signature verifier) itself fails.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from crypto.signatures import verify_payload
from ledger.models import Transaction, TransactionInput, UTXO, UTXOReference
from ledger.pool import UTXOPool

from .errors import (
    CollaboratorError,
    ValidationError,
    ValidationErrorCode,
    ValidationResult,
)
from .payload import build_signable_payload


# verify(payload, signature, identity) -> bool
SignatureVerifier = Callable[[bytes, bytes, str], bool]


@dataclass
class ResolvedInput:
    """An input whose referenced UTXO was found in the pool."""
    index: int
    tx_input: TransactionInput
    utxo: UTXO


@dataclass
class ValidationContext:
    """
    Context object passed between validation rules.

    Holds the transaction, the collaborators, and the state accumulated by earlier
    rules (errors, resolved inputs, input total). One context is created per call
    and discarded afterwards.
    """
    transaction: Transaction
    pool: UTXOPool
    verifier: SignatureVerifier

    # Validation state
    errors: List[ValidationError] = field(default_factory=list)
    resolved_inputs: List[ResolvedInput] = field(default_factory=list)
    input_total: Decimal = Decimal(0)
    rule_results: Dict[str, bool] = field(default_factory=dict)

    _payload: Optional[bytes] = field(default=None, repr=False)

    def add_error(self, rule_name: str, code: ValidationErrorCode, message: str,
                  location: str = "", **details: Any):
        """Add a validation error."""
        self.errors.append(ValidationError(
            code=code,
            message=message,
            location=location,
            details=details,
        ))
        self.rule_results[rule_name] = False

    def mark_rule_passed(self, rule_name: str):
        """Mark a validation rule as passed."""
        self.rule_results[rule_name] = True

    def has_errors(self) -> bool:
        """Check if validation has errors."""
        return len(self.errors) > 0

    @property
    def signable_payload(self) -> bytes:
        """Canonical payload, built once per validation call."""
        if self._payload is None:
            self._payload = build_signable_payload(self.transaction)
        return self._payload

    def lookup_utxo(self, reference: UTXOReference) -> Optional[UTXO]:
        """
        Look up a referenced output in the pool.

        Raises:
            CollaboratorError: If the pool raises
        """
        try:
            return self.pool.get_utxo(reference.tx_id, reference.output_index)
        except Exception as e:
            raise CollaboratorError("UTXO pool", f"lookup of {reference}", e) from e

    def verify_signature(self, signature: bytes, identity: str) -> bool:
        """
        Verify a signature over the canonical payload.

        Raises:
            CollaboratorError: If the verifier raises
        """
        try:
            return bool(self.verifier(self.signable_payload, signature, identity))
        except Exception as e:
            raise CollaboratorError("signature verifier", "verification", e) from e

    def to_result(self) -> ValidationResult:
        return ValidationResult.from_errors(self.errors)


class ValidationRule(ABC):
    """
    Abstract base class for validation rules.

    Each rule checks one aspect of a transaction and records its findings on the
    context.
    """

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.logger = logging.getLogger(f"validator.rules.{name}")

    @abstractmethod
    def validate(self, context: ValidationContext) -> bool:
        """
        Validate the transaction context.

        Args:
            context: Validation context containing transaction data

        Returns:
            True if validation passes, False otherwise
        """
        pass

    def is_applicable(self, context: ValidationContext) -> bool:
        """
        Check if this rule applies to the given context.

        Args:
            context: Validation context

        Returns:
            True if this rule should be applied
        """
        return True


class TransactionValidator:
    """
    Validates transactions against a UTXO pool.

    Holds no state besides its collaborators, so one instance may serve concurrent
    callers as long as the pool supports concurrent reads.
    """

    def __init__(self, pool: UTXOPool, verifier: SignatureVerifier = verify_payload):
        """
        Initialize the validator.

        Args:
            pool: UTXO lookup collaborator
            verifier: Signature verification primitive
        """
        self.pool = pool
        self.verifier = verifier
        self.logger = logging.getLogger("validator.engine")

        # Import here to avoid circular imports
        from .rules.structure import StructureRule
        from .rules.inputs import InputResolutionRule, ValueConservationRule
        from .rules.signatures import SignatureRule

        self.structural_rules: List[ValidationRule] = [StructureRule()]
        self.ledger_rules: List[ValidationRule] = [
            InputResolutionRule(),
            ValueConservationRule(),
            SignatureRule(),
        ]

    @property
    def rules(self) -> List[ValidationRule]:
        return self.structural_rules + self.ledger_rules

    def validate(self, transaction: Transaction) -> ValidationResult:
        """
        Validate a transaction.

        Args:
            transaction: Transaction to validate

        Returns:
            ValidationResult with every error found, in detection order

        Raises:
            CollaboratorError: If the pool or the verifier fails
        """
        self.logger.debug(f"Validating transaction {transaction.id}")
        context = ValidationContext(
            transaction=transaction,
            pool=self.pool,
            verifier=self.verifier,
        )

        self._apply_rules(self.structural_rules, context)
        if context.has_errors():
            self.logger.info(
                f"Transaction {transaction.id} rejected as malformed: "
                f"{len(context.errors)} structural errors"
            )
            self._log_rule_results(transaction, context)
            return context.to_result()

        self._apply_rules(self.ledger_rules, context)
        self._log_rule_results(transaction, context)

        result = context.to_result()
        if result.valid:
            self.logger.info(f"Transaction {transaction.id} approved")
        else:
            self.logger.info(
                f"Transaction {transaction.id} rejected: "
                f"{', '.join(code.value for code in result.codes)}"
            )
        return result

    def _apply_rules(self, rules: List[ValidationRule], context: ValidationContext):
        """Apply rules in order."""
        for rule in rules:
            if not rule.is_applicable(context):
                self.logger.debug(f"Skipping rule {rule.name} - not applicable")
                continue

            self.logger.debug(f"Applying rule: {rule.name} ({rule.description})")
            if rule.validate(context):
                context.mark_rule_passed(rule.name)
                self.logger.debug(f"Rule {rule.name} passed")
            else:
                self.logger.debug(f"Rule {rule.name} failed")

    def _log_rule_results(self, transaction: Transaction, context: ValidationContext):
        outcomes = ', '.join(
            f"{name}={'passed' if passed else 'failed'}"
            for name, passed in context.rule_results.items()
        )
        self.logger.debug(f"Rule results for {transaction.id}: {outcomes}")


def validate(transaction: Transaction, pool: UTXOPool,
             verifier: SignatureVerifier = verify_payload) -> ValidationResult:
    """
    Validate a transaction against a pool snapshot.

    Args:
        transaction: Transaction to validate
        pool: UTXO lookup collaborator
        verifier: Signature verification primitive

    Returns:
        ValidationResult
    """
    return TransactionValidator(pool, verifier).validate(transaction)
