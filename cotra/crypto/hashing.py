"""
PBKDF2-HMAC-SHA256 Module for COTRA

Derives hashed identities from unique identities. The hashed identity is
what a device uses to poll the authority, so it must not be invertible
back to the unique identity.

A slow KDF is used instead of a single SHA-256 pass so that brute forcing
the space of unique identities stays expensive. Hashing only happens on
identity creation and when polling.

The salt and iteration count are protocol parameters: every implementation
must use the same values or hashed identities will not match.
"""

import hashlib

SHARED_SALT = b"nX\xdfu\x1au=\xd7\xe3d.\x1c\xb2\x11P\x0b"
HASH_ITERATIONS = 50000
HASH_LENGTH = 32


def derive_identity_hash(unique_bytes: bytes) -> bytes:
    """
    Derive the 32-byte hashed identity for raw unique identity bytes.

    Args:
        unique_bytes: Raw bytes of the unique identity (16 for a UUID)

    Returns:
        bytes: 32-byte digest
    """
    return hashlib.pbkdf2_hmac(
        'sha256',
        unique_bytes,
        SHARED_SALT,
        HASH_ITERATIONS,
        dklen=HASH_LENGTH
    )
