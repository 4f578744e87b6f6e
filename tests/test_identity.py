"""Tests for identities, hashed identities and share identities."""

import uuid

import pytest

from cotra.crypto.encryption import seal
from cotra.errors import (
    HashedIdentityParseError,
    IdentityParseError,
    ShareIdentityParseError,
)
from cotra.protocol.identity import HashedIdentity, Identity, ShareIdentity, UniqueIdentity


class TestIdentity:
    def test_hash_matches_unique_id(self, identity):
        assert identity.unique_id.hash() == identity.hashed_id

    def test_hash_survives_round_trip(self, identity):
        restored = Identity.from_dict(identity.to_dict())
        assert restored.unique_id == identity.unique_id
        assert restored.hashed_id == identity.hashed_id
        assert restored == identity

    def test_hashed_id_not_serialized(self, identity):
        data = identity.to_dict()
        assert data == {"unique_id": str(identity.unique_id)}
        assert str(identity.hashed_id) not in str(data)

    def test_stored_hash_is_ignored(self, identity):
        data = identity.to_dict()
        data["hashed_id"] = "00" * 32
        assert Identity.from_dict(data).hashed_id == identity.hashed_id

    def test_unique_identities_differ(self):
        first, second = Identity.unique(), Identity.unique()
        assert first.unique_id != second.unique_id
        assert first.hashed_id != second.hashed_id

    def test_unique_id_is_uuid4(self, identity):
        assert identity.unique_id.value.version == 4
        assert len(bytes(identity.unique_id)) == 16

    @pytest.mark.parametrize("data", [{}, {"unique_id": "nope"}, {"unique_id": 5}, []])
    def test_from_dict_rejects_malformed(self, data):
        with pytest.raises(IdentityParseError):
            Identity.from_dict(data)


class TestHashedIdentity:
    def test_text_round_trip(self, identity):
        text = str(identity.hashed_id)
        assert len(text) == 64
        assert HashedIdentity.from_string(text) == identity.hashed_id
        assert bytes(HashedIdentity.from_string(text)) == bytes(identity.hashed_id)

    @pytest.mark.parametrize("text", ["", "abc", "zz" * 32, "00" * 31])
    def test_rejects_malformed(self, text):
        with pytest.raises(HashedIdentityParseError):
            HashedIdentity.from_string(text)

    def test_rejects_wrong_length(self):
        with pytest.raises(HashedIdentityParseError):
            HashedIdentity(b"\x00" * 16)

    def test_usable_as_set_member(self, identity):
        copy = HashedIdentity(bytes(identity.hashed_id))
        assert copy in {identity.hashed_id}


class TestShareIdentity:
    def test_reveal(self, authority, identity):
        share_id = identity.new_share_id(authority.public_key)
        assert share_id.reveal(authority.secret_key) == identity.unique_id

    def test_envelopes_are_unlinkable(self, authority, identity):
        first = identity.new_share_id(authority.public_key)
        second = identity.new_share_id(authority.public_key)
        assert bytes(first) != bytes(second)
        assert first != second
        assert first.reveal(authority.secret_key) == second.reveal(authority.secret_key)

    def test_wrong_key_reveals_nothing(self, authority, other_authority, identity):
        share_id = identity.new_share_id(authority.public_key)
        assert share_id.reveal(other_authority.secret_key) is None

    def test_malformed_payload_reveals_nothing(self, authority):
        # Opens fine but is not a 16 byte unique id
        share_id = ShareIdentity(seal(b"not an identity", authority.public_key))
        assert share_id.reveal(authority.secret_key) is None

    def test_garbage_reveals_nothing(self, authority):
        assert ShareIdentity(b"\x00" * 64).reveal(authority.secret_key) is None

    def test_equality_by_bytes(self, authority, identity):
        share_id = identity.new_share_id(authority.public_key)
        copy = ShareIdentity(bytes(share_id))
        assert copy == share_id
        assert hash(copy) == hash(share_id)

    def test_text_round_trip(self, authority, identity):
        share_id = identity.new_share_id(authority.public_key)
        parsed = ShareIdentity.from_string(str(share_id))
        assert bytes(parsed) == bytes(share_id)
        assert parsed.reveal(authority.secret_key) == identity.unique_id

    @pytest.mark.parametrize("text", ["", "***", "ab"])
    def test_rejects_malformed_text(self, text):
        with pytest.raises(ShareIdentityParseError):
            ShareIdentity.from_string(text)


class TestUniqueIdentity:
    def test_from_bytes(self):
        value = uuid.uuid4()
        assert UniqueIdentity.from_bytes(value.bytes) == UniqueIdentity(value)
        assert UniqueIdentity.from_bytes(b"\x00" * 15) is None

    def test_from_string(self):
        value = uuid.uuid4()
        assert UniqueIdentity.from_string(str(value)).value == value
