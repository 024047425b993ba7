"""Unit tests for key storage and signing engines."""

import pytest

from tokenio_sdk.core.exceptions import InvalidSignatureError, KeyNotFoundError
from tokenio_sdk.core.types import KeyLevel, MemberRecord, Signature
from tokenio_sdk.security import (
    InMemoryKeyStore,
    SecretKey,
    find_key,
    key_id_for,
    verify_signature,
)


def _secret(key_id, level=KeyLevel.LOW, expires_at_ms=None):
    return SecretKey(
        id=key_id,
        level=level,
        public_key=f"pub-{key_id}",
        private_key=f"priv-{key_id}",
        expires_at_ms=expires_at_ms
    )


class TestInMemoryKeyStore:
    """Test InMemoryKeyStore."""

    def test_get_by_level_returns_newest(self, key_store):
        key_store.put("m:1", _secret("k1"))
        key_store.put("m:1", _secret("k2"))
        assert key_store.get_by_level("m:1", KeyLevel.LOW).id == "k2"

    def test_get_by_level_skips_expired(self, key_store):
        key_store.put("m:1", _secret("k1"))
        key_store.put("m:1", _secret("k2", expires_at_ms=1))
        assert key_store.get_by_level("m:1", KeyLevel.LOW).id == "k1"

    def test_get_by_level_missing(self, key_store):
        key_store.put("m:1", _secret("k1", level=KeyLevel.STANDARD))
        with pytest.raises(KeyNotFoundError):
            key_store.get_by_level("m:1", KeyLevel.PRIVILEGED)

    def test_get_by_id(self, key_store):
        key_store.put("m:1", _secret("k1"))
        assert key_store.get_by_id("m:1", "k1").private_key == "priv-k1"
        with pytest.raises(KeyNotFoundError):
            key_store.get_by_id("m:2", "k1")

    def test_get_by_id_expired(self, key_store):
        key_store.put("m:1", _secret("k1", expires_at_ms=1))
        with pytest.raises(KeyNotFoundError, match="expired"):
            key_store.get_by_id("m:1", "k1")

    def test_members_are_isolated(self, key_store):
        key_store.put("m:1", _secret("k1"))
        key_store.put("m:2", _secret("k2"))
        key_store.delete_keys("m:1")
        assert key_store.list_keys("m:1") == []
        assert [k.id for k in key_store.list_keys("m:2")] == ["k2"]

    def test_secret_key_public_half(self):
        key = _secret("k1", level=KeyLevel.PRIVILEGED).to_public_key()
        assert key.id == "k1"
        assert key.public_key == "pub-k1"
        assert key.level == KeyLevel.PRIVILEGED


class TestKeyStoreCryptoEngine:
    """Test the key store engine with the HMAC test algorithm."""

    def test_generate_key(self, engine_factory, key_store):
        engine = engine_factory.create("m:1")
        key = engine.generate_key(KeyLevel.STANDARD)

        assert key.id == key_id_for(key.public_key)
        assert key.level == KeyLevel.STANDARD
        assert key.algorithm == "HMAC-SHA256"
        assert key_store.get_by_id("m:1", key.id).level == KeyLevel.STANDARD

    def test_sign_and_verify(self, crypto_engine):
        signer = crypto_engine.create_signer(KeyLevel.LOW)
        signature = signer.sign("payload")

        verifier = crypto_engine.create_verifier(signer.key_id)
        verifier.verify("payload", signature)
        verifier.verify(b"payload", signature)

    def test_verify_rejects_tampering(self, crypto_engine):
        signer = crypto_engine.create_signer(KeyLevel.LOW)
        signature = signer.sign("payload")

        with pytest.raises(InvalidSignatureError):
            crypto_engine.create_verifier(signer.key_id).verify("payload!", signature)

    def test_missing_level(self, engine_factory):
        engine = engine_factory.create("m:empty")
        with pytest.raises(KeyNotFoundError):
            engine.create_signer(KeyLevel.LOW)

    def test_public_keys_and_delete(self, crypto_engine):
        assert {k.level for k in crypto_engine.get_public_keys()} == set(KeyLevel)
        crypto_engine.delete_keys()
        assert crypto_engine.get_public_keys() == []

    def test_factory_verifier_for_public_key(self, crypto_engine, engine_factory):
        """Test verifying with only the public key, as for another member."""
        signer = crypto_engine.create_signer(KeyLevel.STANDARD)
        key = next(k for k in crypto_engine.get_public_keys() if k.id == signer.key_id)

        engine_factory.create_verifier(key).verify("data", signer.sign("data"))


class TestVerifySignature:
    """Test verification against a member record."""

    def test_verify(self, crypto_engine, engine_factory, member_record):
        signer = crypto_engine.create_signer(KeyLevel.LOW)
        signature = Signature(
            member_id=member_record.id,
            key_id=signer.key_id,
            signature=signer.sign("hello")
        )

        verify_signature(member_record, "hello", signature, engine_factory.create_verifier)

    def test_unknown_key(self, engine_factory, member_record):
        signature = Signature(key_id="unknown", signature="00")
        with pytest.raises(KeyNotFoundError):
            verify_signature(member_record, "hello", signature, engine_factory.create_verifier)

    def test_find_key(self, member_record):
        key = member_record.keys[0]
        assert find_key(member_record, key.id) == key
        with pytest.raises(KeyNotFoundError):
            find_key(MemberRecord(id="m:1"), key.id)
