"""
Identity Module for COTRA

A device holds an Identity: a random unique id plus its hashed form.

- UniqueIdentity: kept private; only sent to the authority after a
  positive test. Rotate it after it has been revealed.
- HashedIdentity: one-way derivation, used to poll the authority.
- ShareIdentity: the unique id sealed with the authority's public key.
  Broadcast to nearby devices and rotated every few minutes. Only the
  authority can open it, and two envelopes of the same identity cannot be
  linked to each other.
"""

import base64
import binascii
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cotra.crypto.encryption import PublicKey, SecretKey, seal, unseal
from cotra.crypto.hashing import HASH_LENGTH, derive_identity_hash
from cotra.errors import (
    HashedIdentityParseError,
    IdentityParseError,
    ShareIdentityParseError,
)


@dataclass(frozen=True)
class HashedIdentity:
    """32-byte PBKDF2 digest of a unique identity."""
    digest: bytes

    def __post_init__(self):
        if not isinstance(self.digest, bytes) or len(self.digest) != HASH_LENGTH:
            raise HashedIdentityParseError()

    @classmethod
    def from_string(cls, text: str) -> 'HashedIdentity':
        """Parse the hex form."""
        try:
            digest = bytes.fromhex(text)
        except (TypeError, ValueError):
            raise HashedIdentityParseError() from None
        return cls(digest)

    def __bytes__(self) -> bytes:
        return self.digest

    def __str__(self) -> str:
        return self.digest.hex()

    def __repr__(self) -> str:
        return f"HashedIdentity({str(self)!r})"


@dataclass(frozen=True)
class UniqueIdentity:
    """Just the unique id, detached from the hashed form."""
    value: uuid.UUID

    @classmethod
    def unique(cls) -> 'UniqueIdentity':
        """Create a new random unique identity."""
        return cls(uuid.uuid4())

    @classmethod
    def from_string(cls, text: str) -> 'UniqueIdentity':
        try:
            return cls(uuid.UUID(text))
        except (TypeError, ValueError, AttributeError):
            raise IdentityParseError() from None

    @classmethod
    def from_bytes(cls, raw: bytes) -> Optional['UniqueIdentity']:
        """Parse 16 raw bytes, or None if they are not a valid id."""
        if len(raw) != 16:
            return None
        return cls(uuid.UUID(bytes=raw))

    def hash(self) -> HashedIdentity:
        """Derive the hashed identity."""
        return HashedIdentity(derive_identity_hash(self.value.bytes))

    def __bytes__(self) -> bytes:
        return self.value.bytes

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ShareIdentity:
    """
    An identity that can be shared with other devices.

    Equality and hashing use the raw envelope bytes, so receiving the same
    broadcast twice is recognised as the same contact.
    """
    envelope: bytes

    @classmethod
    def from_string(cls, text: str) -> 'ShareIdentity':
        """Parse the Base64 form."""
        try:
            raw = base64.b64decode(text.encode('ascii'), validate=True)
        except (binascii.Error, UnicodeEncodeError, AttributeError):
            raise ShareIdentityParseError() from None
        if not raw:
            raise ShareIdentityParseError()
        return cls(raw)

    def reveal(self, secret_key: SecretKey) -> Optional[UniqueIdentity]:
        """
        Reveal the unique identity behind this share identity.

        Returns None both when the envelope cannot be opened and when it
        opens to something that is not a unique id. Callers cannot tell
        the two apart.
        """
        plaintext = unseal(self.envelope, secret_key)
        if plaintext is None:
            return None
        return UniqueIdentity.from_bytes(plaintext)

    def __bytes__(self) -> bytes:
        return self.envelope

    def __str__(self) -> str:
        return base64.b64encode(self.envelope).decode('utf-8')

    def __repr__(self) -> str:
        return f"ShareIdentity({str(self)!r})"


class Identity:
    """
    The unique identity of a person, with its hashed form.

    The identity is kept private on the device. For subscription or
    check-in purposes the hashed identity is used instead.
    """

    __slots__ = ('_unique_id', '_hashed_id')

    def __init__(self, unique_id: UniqueIdentity):
        self._unique_id = unique_id
        # Always derived, never taken from storage
        self._hashed_id = unique_id.hash()

    @classmethod
    def unique(cls) -> 'Identity':
        """Create a new random identity."""
        return cls(UniqueIdentity.unique())

    @property
    def unique_id(self) -> UniqueIdentity:
        return self._unique_id

    @property
    def hashed_id(self) -> HashedIdentity:
        return self._hashed_id

    def new_share_id(self, public_key: PublicKey) -> ShareIdentity:
        """
        Create a new share identity sealed for public_key.

        Args:
            public_key: The authority's public key

        Returns:
            ShareIdentity: A fresh envelope, unlinkable to earlier ones
        """
        return ShareIdentity(seal(bytes(self._unique_id), public_key))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize. The hashed id is deliberately left out."""
        return {"unique_id": str(self._unique_id)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Identity':
        if not isinstance(data, dict) or 'unique_id' not in data:
            raise IdentityParseError()
        return cls(UniqueIdentity.from_string(data['unique_id']))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Identity):
            return NotImplemented
        return self._unique_id == other._unique_id

    def __hash__(self) -> int:
        return hash(self._unique_id)

    def __repr__(self) -> str:
        return f"Identity(hashed_id={str(self._hashed_id)!r})"
