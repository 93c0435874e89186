"""
Transaction Validator - Cryptographic Operations Module

This module provides the cryptographic collaborators of the validator:
- secp256k1 key wrappers and identity encoding
- ECDSA signing and verification of canonical payloads

Dependencies:
- coincurve: Fast secp256k1 operations
- hashlib: Cryptographic hash functions
- secrets: Secure random number generation
"""

from .exceptions import (
    CryptoError,
    InvalidKeyError,
    InvalidSignatureError,
)

from .keys import (
    PrivateKey,
    PublicKey,
    generate_key_pair,
)

from .signatures import (
    payload_digest,
    sign_payload,
    verify_payload,
)

__version__ = "0.1.0"
__all__ = [
    # Exceptions
    "CryptoError",
    "InvalidKeyError",
    "InvalidSignatureError",

    # Keys
    "PrivateKey",
    "PublicKey",
    "generate_key_pair",

    # Signatures
    "payload_digest",
    "sign_payload",
    "verify_payload",
]
