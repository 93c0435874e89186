"""
Cryptographic Exceptions for the Transaction Validator

This module defines custom exceptions for key handling and signing operations.
"""


class CryptoError(Exception):
    """Base exception for all cryptographic errors."""
    pass


class InvalidKeyError(CryptoError):
    """Raised when a key is invalid or malformed."""
    pass


class InvalidSignatureError(CryptoError):
    """Raised when a signature cannot be produced or parsed."""
    pass
