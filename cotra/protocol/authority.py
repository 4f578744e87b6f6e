"""
Central Authority for COTRA

The authority holds the only secret key that can open share identities.
Its public key is the one thing devices need.
"""

from typing import Any, Dict

from cotra.crypto.encryption import PublicKey, SecretKey, generate_keypair
from cotra.errors import AuthorityParseError, ParseError


class Authority:
    """
    Represents the central authority (for instance a ministry of health).

    Tracking of infected and tainted identities lives outside this class
    (see cotra.registry and the authority service).
    """

    __slots__ = ('_public_key', '_secret_key')

    def __init__(self, public_key: PublicKey, secret_key: SecretKey):
        if secret_key.public_key != public_key:
            raise AuthorityParseError("secret key does not match public key")
        self._public_key = public_key
        self._secret_key = secret_key

    @classmethod
    def unique(cls) -> 'Authority':
        """Create a new authority with a fresh keypair."""
        public_key, secret_key = generate_keypair()
        return cls(public_key, secret_key)

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def secret_key(self) -> SecretKey:
        return self._secret_key

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize both keys.

        Only for the authority's own storage, never for anything handed to
        a device.
        """
        return {
            "public_key": str(self._public_key),
            "secret_key": str(self._secret_key)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Authority':
        try:
            public_key = PublicKey.from_string(data['public_key'])
            secret_key = SecretKey.from_string(data['secret_key'])
        except (KeyError, TypeError, ParseError):
            raise AuthorityParseError() from None
        return cls(public_key, secret_key)

    def __repr__(self) -> str:
        return f"Authority(public_key={str(self._public_key)!r})"
