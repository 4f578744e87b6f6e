"""
COTRA - Crypto Module

Provides cryptographic primitives for the identity protocol:
- NaCl SealedBox encryption (device -> authority share identities)
- PBKDF2-HMAC-SHA256 derivation (hashed identities for polling)
"""

from .encryption import PublicKey, SecretKey, generate_keypair, seal, unseal
from .hashing import SHARED_SALT, HASH_ITERATIONS, HASH_LENGTH, derive_identity_hash

__all__ = [
    'PublicKey',
    'SecretKey',
    'generate_keypair',
    'seal',
    'unseal',
    'SHARED_SALT',
    'HASH_ITERATIONS',
    'HASH_LENGTH',
    'derive_identity_hash'
]
