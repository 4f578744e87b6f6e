"""
NaCl SealedBox Encryption Module for COTRA

Used for sealing unique identities with the authority's public key.
The resulting envelopes are what devices exchange with each other.

SealedBox provides anonymous public-key encryption:
- Devices encrypt with the authority's public key
- Only the authority can decrypt with its secret key
- No authentication of sender (a receiver cannot tell who sealed it)
"""

import base64
import binascii
from typing import Optional, Tuple

from nacl.exceptions import CryptoError
from nacl.public import PrivateKey, PublicKey as NaClPublicKey, SealedBox

from cotra.errors import PublicKeyParseError, SecretKeyParseError


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.encode('ascii'), validate=True)


class PublicKey:
    """
    X25519 public key of an authority.

    Meant to be published: str() gives standard Base64 which
    from_string() parses back to an identical key.
    """

    __slots__ = ('_key',)

    def __init__(self, key_bytes: bytes):
        """
        Args:
            key_bytes: 32 raw key bytes

        Raises:
            PublicKeyParseError: if the bytes are not a valid key
        """
        try:
            self._key = NaClPublicKey(bytes(key_bytes))
        except (TypeError, ValueError):
            raise PublicKeyParseError() from None

    @classmethod
    def from_string(cls, text: str) -> 'PublicKey':
        """Parse a Base64 public key."""
        try:
            raw = _b64decode(text)
        except (binascii.Error, UnicodeEncodeError, AttributeError):
            raise PublicKeyParseError() from None
        return cls(raw)

    def __bytes__(self) -> bytes:
        return bytes(self._key)

    def __str__(self) -> str:
        return base64.b64encode(bytes(self._key)).decode('utf-8')

    def __repr__(self) -> str:
        return f"PublicKey({str(self)!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return bytes(self) == bytes(other)

    def __hash__(self) -> int:
        return hash(bytes(self))


class SecretKey:
    """
    X25519 secret key. Only ever held by the authority.
    """

    __slots__ = ('_key',)

    def __init__(self, key_bytes: bytes):
        try:
            self._key = PrivateKey(bytes(key_bytes))
        except (TypeError, ValueError):
            raise SecretKeyParseError() from None

    @classmethod
    def from_string(cls, text: str) -> 'SecretKey':
        """Parse a Base64 secret key."""
        try:
            raw = _b64decode(text)
        except (binascii.Error, UnicodeEncodeError, AttributeError):
            raise SecretKeyParseError() from None
        return cls(raw)

    @property
    def public_key(self) -> PublicKey:
        """Derive the matching public key."""
        return PublicKey(bytes(self._key.public_key))

    def __bytes__(self) -> bytes:
        return bytes(self._key)

    def __str__(self) -> str:
        return base64.b64encode(bytes(self._key)).decode('utf-8')

    def __repr__(self) -> str:
        # Key material stays out of logs and tracebacks
        return f"SecretKey(public_key={str(self.public_key)!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, SecretKey):
            return NotImplemented
        return bytes(self) == bytes(other)

    def __hash__(self) -> int:
        return hash(bytes(self))


def generate_keypair() -> Tuple[PublicKey, SecretKey]:
    """
    Generate a new X25519 keypair for sealing.

    Returns:
        Tuple[PublicKey, SecretKey]: (public_key, secret_key)
    """
    private_key = PrivateKey.generate()
    return PublicKey(bytes(private_key.public_key)), SecretKey(bytes(private_key))


def seal(plaintext: bytes, public_key: PublicKey) -> bytes:
    """
    Encrypt bytes for the holder of public_key.

    Every call uses a fresh ephemeral key, so sealing the same plaintext
    twice gives different ciphertexts.
    """
    box = SealedBox(NaClPublicKey(bytes(public_key)))
    return box.encrypt(plaintext)


def unseal(ciphertext: bytes, secret_key: SecretKey) -> Optional[bytes]:
    """
    Decrypt a sealed box.

    Args:
        ciphertext: Sealed bytes
        secret_key: Receiver's secret key

    Returns:
        bytes: Plaintext, or None if the ciphertext is corrupt, truncated,
        of the wrong type or sealed for another key
    """
    box = SealedBox(PrivateKey(bytes(secret_key)))
    try:
        return box.decrypt(ciphertext)
    except (CryptoError, TypeError, ValueError):
        return None
