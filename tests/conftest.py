"""Shared fixtures: configuration and an HMAC test signing engine."""

import hashlib
import hmac
import secrets
from unittest.mock import AsyncMock, Mock

import pytest

from tokenio_sdk.core.config import TokenCluster, TokenConfig
from tokenio_sdk.core.sync import LoopRunner
from tokenio_sdk.core.types import KeyLevel, MemberRecord
from tokenio_sdk.rpc.client import Client
from tokenio_sdk.security import (
    InMemoryKeyStore,
    KeyStoreCryptoEngine,
    KeyStoreCryptoEngineFactory,
)

from . import TEST_CONFIG, TEST_MEMBERS


class HmacCryptoEngine(KeyStoreCryptoEngine):
    """Symmetric engine for tests: the public key is the private key."""

    algorithm = "HMAC-SHA256"

    def _generate_key_pair(self):
        key = secrets.token_hex(16)
        return key, key

    def _sign(self, private_key, data):
        return hmac.new(private_key.encode('ascii'), data, hashlib.sha256).hexdigest()

    def _verify(self, public_key, data, signature):
        return hmac.compare_digest(self._sign(public_key, data), signature)


@pytest.fixture
def config():
    """Test configuration."""
    return TokenConfig.for_cluster(
        TokenCluster.SANDBOX,
        TEST_CONFIG['dev_key'],
        request_timeout=TEST_CONFIG['timeout'],
        max_retries=TEST_CONFIG['max_retries'],
        retry_delay=TEST_CONFIG['retry_delay']
    )


@pytest.fixture
def key_store():
    return InMemoryKeyStore()


@pytest.fixture
def engine_factory(key_store):
    return KeyStoreCryptoEngineFactory(HmacCryptoEngine, key_store)


@pytest.fixture
def crypto_engine(engine_factory):
    """Engine for the payer holding one key of each level."""
    engine = engine_factory.create(TEST_MEMBERS['payer'])
    for level in (KeyLevel.PRIVILEGED, KeyLevel.STANDARD, KeyLevel.LOW):
        engine.generate_key(level)
    return engine


@pytest.fixture
def runner():
    runner = LoopRunner(timeout=5)
    yield runner
    runner.close()


@pytest.fixture
def member_record(crypto_engine):
    return MemberRecord(
        id=TEST_MEMBERS['payer'],
        last_hash="hash-1",
        keys=crypto_engine.get_public_keys()
    )


@pytest.fixture
def mock_client():
    """Client whose gateway calls are all AsyncMocks."""
    client = Mock(spec=Client)
    for name in dir(Client):
        if not name.startswith('_') and callable(getattr(Client, name)):
            setattr(client, name, AsyncMock())
    client.member_id = TEST_MEMBERS['payer']
    client.for_access_token = Mock()
    client.use_access_token = Mock()
    client.clear_access_token = Mock()
    client.crypto_engine = Mock()
    return client
