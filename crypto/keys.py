"""
Key Handling for the Transaction Validator

This module wraps secp256k1 private/public keys and converts between key objects
and the hex-encoded identities recorded on UTXOs.

An identity is the hex encoding of a SEC1 public key, either compressed (33 bytes)
or uncompressed (65 bytes).
"""

import secrets
from typing import Optional, Union
from coincurve import PrivateKey as CoinCurvePrivateKey, PublicKey as CoinCurvePublicKey

from .exceptions import InvalidKeyError


# secp256k1 group order
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

PUBLIC_KEY_LENGTHS = (33, 65)


class PrivateKey:
    """
    Wrapper for private key operations.
    """

    def __init__(self, key_bytes: Optional[bytes] = None):
        """
        Initialize private key.

        Args:
            key_bytes: 32-byte private key. If None, generates random key.
        """
        try:
            if key_bytes is None:
                key_bytes = secrets.randbits(256).to_bytes(32, 'big')
                while int.from_bytes(key_bytes, 'big') == 0 or \
                      int.from_bytes(key_bytes, 'big') >= CURVE_ORDER:
                    key_bytes = secrets.randbits(256).to_bytes(32, 'big')

            if not isinstance(key_bytes, bytes) or len(key_bytes) != 32:
                raise InvalidKeyError("Private key must be 32 bytes")

            key_int = int.from_bytes(key_bytes, 'big')
            if key_int == 0 or key_int >= CURVE_ORDER:
                raise InvalidKeyError("Private key out of valid range")

            self._key = CoinCurvePrivateKey(key_bytes)

        except Exception as e:
            if isinstance(e, InvalidKeyError):
                raise
            raise InvalidKeyError(f"Failed to create private key: {e}")

    @classmethod
    def from_hex(cls, key_hex: str) -> 'PrivateKey':
        """Create a private key from its hex encoding."""
        try:
            return cls(bytes.fromhex(key_hex))
        except ValueError as e:
            raise InvalidKeyError(f"Private key is not valid hex: {e}")

    @property
    def bytes(self) -> bytes:
        """Get private key as bytes."""
        return self._key.secret

    @property
    def hex(self) -> str:
        """Get private key as hex string."""
        return self._key.secret.hex()

    def public_key(self) -> 'PublicKey':
        """Get corresponding public key."""
        return PublicKey(self._key.public_key)

    @property
    def identity(self) -> str:
        """Identity string of the corresponding public key."""
        return self.public_key().hex

    def sign(self, message_hash: bytes) -> bytes:
        """
        Sign a message hash.

        Args:
            message_hash: 32-byte message hash to sign

        Returns:
            DER-encoded signature
        """
        if len(message_hash) != 32:
            raise InvalidKeyError("Message hash must be 32 bytes")
        return self._key.sign(message_hash, hasher=None)


class PublicKey:
    """
    Wrapper for public key operations.
    """

    def __init__(self, key_data: Union[bytes, CoinCurvePublicKey]):
        """
        Initialize public key.

        Args:
            key_data: Public key bytes (33 or 65 bytes) or CoinCurvePublicKey
        """
        try:
            if isinstance(key_data, CoinCurvePublicKey):
                self._key = key_data
            else:
                if not isinstance(key_data, bytes):
                    raise InvalidKeyError("Public key data must be bytes")
                if len(key_data) not in PUBLIC_KEY_LENGTHS:
                    raise InvalidKeyError("Public key must be 33 or 65 bytes")
                self._key = CoinCurvePublicKey(key_data)
        except Exception as e:
            if isinstance(e, InvalidKeyError):
                raise
            raise InvalidKeyError(f"Failed to create public key: {e}")

    @classmethod
    def from_identity(cls, identity: str) -> 'PublicKey':
        """
        Parse an identity string into a public key.

        Args:
            identity: Hex-encoded SEC1 public key

        Returns:
            PublicKey object
        """
        if not isinstance(identity, str):
            raise InvalidKeyError("Identity must be a hex string")
        try:
            key_bytes = bytes.fromhex(identity)
        except ValueError as e:
            raise InvalidKeyError(f"Identity is not valid hex: {e}")
        return cls(key_bytes)

    @property
    def bytes(self) -> bytes:
        """Get compressed public key as bytes."""
        return self._key.format(compressed=True)

    @property
    def uncompressed_bytes(self) -> bytes:
        """Get uncompressed public key as bytes."""
        return self._key.format(compressed=False)

    @property
    def hex(self) -> str:
        """Get compressed public key as hex string."""
        return self.bytes.hex()

    def verify(self, signature: bytes, message_hash: bytes) -> bool:
        """
        Verify signature against message hash.

        Args:
            signature: DER-encoded signature
            message_hash: 32-byte message hash

        Returns:
            True if signature is valid
        """
        try:
            if len(message_hash) != 32:
                return False
            return self._key.verify(signature, message_hash, hasher=None)
        except Exception:
            return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.bytes == other.bytes

    def __hash__(self) -> int:
        return hash(self.bytes)


def generate_key_pair():
    """
    Generate a fresh key pair.

    Returns:
        Tuple of (private_key, identity)
    """
    private_key = PrivateKey()
    return private_key, private_key.identity
