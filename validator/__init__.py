"""
Transaction Validator Module

This module validates proposed transactions against a UTXO pool snapshot:
structural well-formedness, duplicate and unknown UTXO references, value
conservation, and signature authorization over a canonical payload.
"""

from .errors import (
    ValidationErrorCode,
    ValidationError,
    ValidationResult,
    ValidatorError,
    CollaboratorError,
    ConfigurationError,
)

from .payload import (
    PAYLOAD_VERSION,
    build_signable_payload,
    format_amount,
)

from .core import (
    TransactionValidator,
    ValidationContext,
    ValidationRule,
    validate,
)

from .rules import (
    StructureRule,
    InputResolutionRule,
    ValueConservationRule,
    SignatureRule,
)

__all__ = [
    "ValidationErrorCode",
    "ValidationError",
    "ValidationResult",
    "ValidatorError",
    "CollaboratorError",
    "ConfigurationError",
    "PAYLOAD_VERSION",
    "build_signable_payload",
    "format_amount",
    "TransactionValidator",
    "ValidationContext",
    "ValidationRule",
    "validate",
    "StructureRule",
    "InputResolutionRule",
    "ValueConservationRule",
    "SignatureRule",
]
