"""
Parse errors for COTRA values.

Decryption failures are never exceptions (they come back as None);
only malformed text or stored data raises.
"""


class ParseError(ValueError):
    """Base class for values that could not be parsed."""


class PublicKeyParseError(ParseError):
    def __init__(self, msg: str = "cannot parse public key"):
        super().__init__(msg)


class SecretKeyParseError(ParseError):
    def __init__(self, msg: str = "cannot parse secret key"):
        super().__init__(msg)


class ShareIdentityParseError(ParseError):
    def __init__(self, msg: str = "cannot parse share identity"):
        super().__init__(msg)


class HashedIdentityParseError(ParseError):
    def __init__(self, msg: str = "cannot parse hashed identity"):
        super().__init__(msg)


class IdentityParseError(ParseError):
    def __init__(self, msg: str = "cannot parse identity"):
        super().__init__(msg)


class AuthorityParseError(ParseError):
    def __init__(self, msg: str = "cannot parse authority"):
        super().__init__(msg)


class ContactLogParseError(ParseError):
    def __init__(self, msg: str = "cannot parse contact log"):
        super().__init__(msg)
