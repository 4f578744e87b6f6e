"""
COTRA - Contact Tracing Identity Protocol

Conceptually there are three components:
- Identity: a single device
- Authority: a trusted authority (for instance the ministry of health)
- ContactLog: the share identities a device has seen

An identity is looked at in two other ways. A ShareIdentity is encrypted
with the authority's public key and only shared with other devices; it
rotates regularly so devices cannot tell they have seen someone twice.
A HashedIdentity is used to poll the authority; the authority can map a
unique identity to its hashed form but not the other way round.
"""

from .crypto import PublicKey, SecretKey, generate_keypair
from .errors import (
    ParseError,
    PublicKeyParseError,
    SecretKeyParseError,
    ShareIdentityParseError,
    HashedIdentityParseError,
    IdentityParseError,
    AuthorityParseError,
    ContactLogParseError,
)
from .protocol import (
    Authority,
    ContactLog,
    ExposureReport,
    ExposureStatus,
    HashedIdentity,
    Identity,
    ShareIdentity,
    UniqueIdentity,
    resolve_status,
    trace_exposures,
)

__all__ = [
    'PublicKey',
    'SecretKey',
    'generate_keypair',
    'ParseError',
    'PublicKeyParseError',
    'SecretKeyParseError',
    'ShareIdentityParseError',
    'HashedIdentityParseError',
    'IdentityParseError',
    'AuthorityParseError',
    'ContactLogParseError',
    'Authority',
    'ContactLog',
    'ExposureReport',
    'ExposureStatus',
    'HashedIdentity',
    'Identity',
    'ShareIdentity',
    'UniqueIdentity',
    'resolve_status',
    'trace_exposures'
]

__version__ = '0.1.0'
