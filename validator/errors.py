"""
Validation Errors and Results

This module defines the closed set of diagnostic codes the validator reports, the
result returned for every validation call, and the exceptions reserved for
infrastructure failures (which are never folded into a result).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ValidationErrorCode(str, Enum):
    """Diagnostic codes, one per violated invariant."""
    EMPTY_INPUTS = "EMPTY_INPUTS"
    EMPTY_OUTPUTS = "EMPTY_OUTPUTS"
    NON_POSITIVE_AMOUNT = "NON_POSITIVE_AMOUNT"
    DOUBLE_SPEND = "DOUBLE_SPEND"
    UTXO_NOT_FOUND = "UTXO_NOT_FOUND"
    AMOUNT_MISMATCH = "AMOUNT_MISMATCH"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


STRUCTURAL_CODES = frozenset({
    ValidationErrorCode.EMPTY_INPUTS,
    ValidationErrorCode.EMPTY_OUTPUTS,
    ValidationErrorCode.NON_POSITIVE_AMOUNT,
})


@dataclass(frozen=True)
class ValidationError:
    """A single diagnostic found in a transaction."""
    code: ValidationErrorCode
    message: str
    location: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "location": self.location,
            "details": {key: _plain(value) for key, value in self.details.items()},
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one transaction.

    `errors` is in detection order. Callers that need a single reason should use
    `first_error`.
    """
    valid: bool
    errors: Tuple[ValidationError, ...] = ()

    @classmethod
    def from_errors(cls, errors: List[ValidationError]) -> 'ValidationResult':
        return cls(valid=len(errors) == 0, errors=tuple(errors))

    @property
    def first_error(self) -> Optional[ValidationError]:
        return self.errors[0] if self.errors else None

    @property
    def codes(self) -> List[ValidationErrorCode]:
        return [error.code for error in self.errors]

    def has_code(self, code: ValidationErrorCode) -> bool:
        return any(error.code == code for error in self.errors)

    def errors_with_code(self, code: ValidationErrorCode) -> List[ValidationError]:
        return [error for error in self.errors if error.code == code]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [error.to_dict() for error in self.errors],
        }


def _plain(value: Any) -> Any:
    """Make detail values JSON friendly."""
    if isinstance(value, (str, int, bool)) or value is None:
        return value
    return str(value)


class ValidatorError(Exception):
    """Base exception for validator infrastructure errors."""
    pass


class CollaboratorError(ValidatorError):
    """
    Raised when the UTXO pool or the signature verifier fails.

    Terminates the validation call; the original exception is chained.
    """

    def __init__(self, collaborator: str, operation: str, cause: Exception):
        self.collaborator = collaborator
        self.operation = operation
        self.cause = cause
        super().__init__(f"{collaborator} failed during {operation}: {cause}")


class ConfigurationError(ValidatorError):
    """Raised when validator or CLI configuration is invalid."""
    pass
