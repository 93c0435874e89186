"""
Transaction Validator Rules Module

This module contains the concrete validation rules: structural well-formedness,
input resolution, value conservation, and signature authorization.
"""

from .structure import StructureRule
from .inputs import InputResolutionRule, ValueConservationRule
from .signatures import SignatureRule

__all__ = [
    "StructureRule",
    "InputResolutionRule",
    "ValueConservationRule",
    "SignatureRule",
]
