"""Tests for the sealed box adapter and identity hashing."""

import hashlib

import pytest

from cotra.crypto.encryption import PublicKey, SecretKey, generate_keypair, seal, unseal
from cotra.crypto.hashing import HASH_ITERATIONS, SHARED_SALT, derive_identity_hash
from cotra.errors import PublicKeyParseError, SecretKeyParseError
from cotra.protocol.identity import UniqueIdentity


class TestKeys:
    def test_public_key_text_round_trip(self):
        public_key, _ = generate_keypair()
        parsed = PublicKey.from_string(str(public_key))
        assert parsed == public_key
        assert bytes(parsed) == bytes(public_key)
        assert len(bytes(parsed)) == 32

    def test_secret_key_text_round_trip(self):
        _, secret_key = generate_keypair()
        parsed = SecretKey.from_string(str(secret_key))
        assert bytes(parsed) == bytes(secret_key)

    def test_secret_key_derives_public_key(self):
        public_key, secret_key = generate_keypair()
        assert secret_key.public_key == public_key

    def test_keypairs_are_fresh(self):
        first, _ = generate_keypair()
        second, _ = generate_keypair()
        assert first != second

    @pytest.mark.parametrize("text", ["", "not base64!", "AAAA", "QUJD" * 20])
    def test_public_key_rejects_malformed(self, text):
        with pytest.raises(PublicKeyParseError):
            PublicKey.from_string(text)

    def test_public_key_rejects_non_ascii(self):
        with pytest.raises(PublicKeyParseError):
            PublicKey.from_string("ключ")

    def test_secret_key_rejects_malformed(self):
        with pytest.raises(SecretKeyParseError):
            SecretKey.from_string("AAAA")

    def test_parse_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            PublicKey.from_string("garbage")

    def test_secret_key_repr_hides_material(self):
        _, secret_key = generate_keypair()
        assert str(secret_key) not in repr(secret_key)


class TestSealedBox:
    def test_seal_unseal(self):
        public_key, secret_key = generate_keypair()
        assert unseal(seal(b"hello", public_key), secret_key) == b"hello"

    def test_seal_is_probabilistic(self):
        public_key, _ = generate_keypair()
        assert seal(b"hello", public_key) != seal(b"hello", public_key)

    def test_wrong_key_gives_none(self):
        public_key, _ = generate_keypair()
        _, other_secret = generate_keypair()
        assert unseal(seal(b"hello", public_key), other_secret) is None

    def test_corrupted_ciphertext_gives_none(self):
        public_key, secret_key = generate_keypair()
        ciphertext = bytearray(seal(b"hello", public_key))
        ciphertext[-1] ^= 0xFF
        assert unseal(bytes(ciphertext), secret_key) is None

    @pytest.mark.parametrize("ciphertext", [b"", b"short", b"\x00" * 47])
    def test_truncated_ciphertext_gives_none(self, ciphertext):
        _, secret_key = generate_keypair()
        assert unseal(ciphertext, secret_key) is None


class TestHashing:
    def test_matches_pbkdf2_parameters(self):
        raw = bytes(range(16))
        expected = hashlib.pbkdf2_hmac('sha256', raw, SHARED_SALT, HASH_ITERATIONS, 32)
        assert derive_identity_hash(raw) == expected

    def test_known_answer(self):
        # Fixed vector shared with other implementations of the protocol
        unique_id = UniqueIdentity.from_string("12345678-1234-5678-1234-567812345678")
        expected = "092fe442f51838fc5c035a941f3cc210b71b66b88a25be01eafd654018d2c191"
        assert derive_identity_hash(bytes.fromhex("12345678123456781234567812345678")).hex() == expected
        assert str(unique_id.hash()) == expected

    def test_protocol_constants(self):
        assert SHARED_SALT == b"nX\xdfu\x1au=\xd7\xe3d.\x1c\xb2\x11P\x0b"
        assert len(SHARED_SALT) == 16
        assert HASH_ITERATIONS == 50000

    def test_deterministic(self):
        raw = b"\x01" * 16
        assert derive_identity_hash(raw) == derive_identity_hash(raw)
        assert derive_identity_hash(raw) != derive_identity_hash(b"\x02" * 16)
        assert len(derive_identity_hash(raw)) == 32
