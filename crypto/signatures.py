"""
ECDSA Payload Signatures for the Transaction Validator

This module provides the signature primitive the validator depends on, plus the
matching signing helper used by external signers and the test suite.

Scheme:
- message digest: SHA256(canonical payload bytes)
- signature: DER-encoded secp256k1 ECDSA over the digest (libsecp256k1 emits and
  accepts only low-S signatures)
- identity: hex-encoded SEC1 public key of the authorizing party

References:
- ECDSA: https://en.wikipedia.org/wiki/Elliptic_Curve_Digital_Signature_Algorithm
- RFC6979: https://tools.ietf.org/rfc/rfc6979.txt (Deterministic ECDSA)
"""

import hashlib
from typing import Union

from .exceptions import InvalidSignatureError, InvalidKeyError
from .keys import PrivateKey, PublicKey


def payload_digest(payload: bytes) -> bytes:
    """
    Compute the 32-byte digest that is actually signed.

    Args:
        payload: Canonical payload bytes

    Returns:
        SHA256 digest of the payload
    """
    if not isinstance(payload, (bytes, bytearray)):
        raise TypeError("Payload must be bytes")
    return hashlib.sha256(bytes(payload)).digest()


def sign_payload(private_key: Union[PrivateKey, str], payload: bytes) -> bytes:
    """
    Sign a canonical payload.

    coincurve uses RFC6979 nonces, so signing the same payload with the same key
    always yields the same signature.

    Args:
        private_key: Private key object or its hex encoding
        payload: Canonical payload bytes

    Returns:
        DER-encoded signature
    """
    if isinstance(private_key, str):
        private_key = PrivateKey.from_hex(private_key)

    try:
        return private_key.sign(payload_digest(payload))
    except InvalidKeyError as e:
        raise InvalidSignatureError(f"ECDSA signing failed: {e}")


def verify_payload(payload: bytes, signature: bytes, identity: str) -> bool:
    """
    Verify a payload signature against an identity.

    Malformed identities and signatures are untrusted input, not failures of this
    primitive: they verify as False.

    Args:
        payload: Canonical payload bytes
        signature: DER-encoded signature
        identity: Hex-encoded SEC1 public key

    Returns:
        True if signature is valid
    """
    if not isinstance(signature, (bytes, bytearray)) or not signature:
        return False

    try:
        public_key = PublicKey.from_identity(identity)
    except InvalidKeyError:
        return False

    return public_key.verify(bytes(signature), payload_digest(payload))
