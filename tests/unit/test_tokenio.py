"""Unit tests for TokenIOAsync, TokenIO and TokenIOBuilder."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from tokenio_sdk.core.config import TokenCluster
from tokenio_sdk.core.exceptions import ConfigurationError, InvalidStateError
from tokenio_sdk.core.types import (
    Alias,
    AliasType,
    KeyLevel,
    RequestSignaturePayload,
    Signature,
    TokenPayload,
)
from tokenio_sdk.core.util import canonical_json, url_encode
from tokenio_sdk.member import Member, MemberAsync
from tokenio_sdk.security import InMemoryKeyStore
from tokenio_sdk.tokenio import TokenIO, TokenIOAsync, TokenIOBuilder
from tokenio_sdk.tokenrequest import TokenRequestState

from tests import TEST_MEMBERS
from tests.conftest import HmacCryptoEngine


class Gateway:
    """Stand-in for ``_make_rpc_call`` answering by method name."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    async def __call__(self, method, request, headers=None, timeout=None):
        self.requests.append((method, request))
        response = self.responses[method]
        return response(request) if callable(response) else response

    def request(self, method):
        return next(request for name, request in self.requests if name == method)


@pytest.fixture
def token_io(config, engine_factory, runner):
    return TokenIOAsync(config, engine_factory, runner)


def _use_gateway(token_io, responses):
    gateway = Gateway(responses)
    return gateway, patch.object(token_io.transport, '_make_rpc_call', AsyncMock(side_effect=gateway.__call__))


class TestTokenIOBuilder:
    """Test SDK configuration."""

    def test_defaults_to_sandbox(self, engine_factory):
        token_io = TokenIO.builder().dev_key("dev").crypto_engine(engine_factory).build_async()

        assert token_io.config.cluster == TokenCluster.SANDBOX
        assert token_io.config.gateway_url == "https://api-grpc.sandbox.token.io:443"
        assert token_io.config.dev_key == "dev"
        assert token_io.crypto_engine_factory is engine_factory

    def test_production(self, engine_factory):
        token_io = TokenIOBuilder().production().dev_key("dev") \
            .crypto_engine(engine_factory).timeout(3).max_retries(1).build_async()

        assert token_io.config.host == "api-grpc.token.io"
        assert token_io.config.request_timeout == 3
        assert token_io.config.max_retries == 1

    def test_custom_host(self, engine_factory):
        token_io = TokenIOBuilder().hostname("localhost").port(9000) \
            .dev_key("dev").crypto_engine(engine_factory).build_async()

        assert token_io.config.gateway_url == "http://localhost:9000"
        with pytest.raises(ConfigurationError):
            token_io.generate_token_request_url("rq:1")

    def test_missing_dev_key(self, engine_factory):
        with pytest.raises(ConfigurationError, match="developer key"):
            TokenIOBuilder().crypto_engine(engine_factory).build_async()

    def test_missing_crypto_engine(self):
        with pytest.raises(ConfigurationError):
            TokenIOBuilder().dev_key("dev").build_async()

    def test_with_key_store(self):
        key_store = InMemoryKeyStore()
        token_io = TokenIOBuilder().dev_key("dev").with_key_store(key_store, HmacCryptoEngine).build_async()

        engine = token_io.crypto_engine_factory.create(TEST_MEMBERS['payer'])
        assert isinstance(engine, HmacCryptoEngine)

    def test_with_key_store_rejects_other_classes(self):
        with pytest.raises(ConfigurationError):
            TokenIOBuilder().with_key_store(InMemoryKeyStore(), dict)


class TestTokenIOAsync:
    """Test member creation and lookups."""

    async def test_create_member(self, token_io):
        member_id = TEST_MEMBERS['payer']
        gateway, patcher = _use_gateway(token_io, {
            'CreateMember': {'memberId': member_id},
            'UpdateMember': lambda request: {
                'member': {'id': member_id, 'lastHash': 'hash-1'}
            },
        })

        with patcher:
            member = await token_io.create_member(Alias(type=AliasType.EMAIL, value="Payer@Example.com"))

        assert isinstance(member, MemberAsync)
        assert member.member_id == member_id
        assert member.runner is token_io.runner

        request = gateway.request('UpdateMember')
        operations = request['update']['operations']
        levels = [op['addKey']['key']['level'] for op in operations if 'addKey' in op]
        assert levels == ["PRIVILEGED", "STANDARD", "LOW"]
        assert 'addAlias' in operations[-1]
        assert request['metadata'][0]['addAliasMetadata']['alias']['value'] == "payer@example.com"

        privileged = token_io.crypto_engine_factory.create(member_id).create_signer(KeyLevel.PRIVILEGED)
        assert request['updateSignature']['keyId'] == privileged.key_id

    async def test_create_member_without_alias(self, token_io):
        gateway, patcher = _use_gateway(token_io, {
            'CreateMember': {'memberId': 'm:1'},
            'UpdateMember': {'member': {'id': 'm:1'}},
        })

        with patcher:
            await token_io.create_member()

        request = gateway.request('UpdateMember')
        assert len(request['update']['operations']) == 3
        assert 'metadata' not in request

    async def test_alias_exists(self, token_io):
        gateway, patcher = _use_gateway(token_io, {'ResolveAlias': {'member': {'id': 'm:1'}}})

        with patcher:
            assert await token_io.alias_exists(Alias(type=AliasType.EMAIL, value=" A@B.COM"))

        assert gateway.request('ResolveAlias')['alias']['value'] == "a@b.com"

    async def test_provision_device(self, token_io):
        _, patcher = _use_gateway(token_io, {'ResolveAlias': {'member': {'id': TEST_MEMBERS['payee']}}})

        with patcher:
            device = await token_io.provision_device(Alias(type=AliasType.EMAIL, value="payee@example.com"))

        assert device.member_id == TEST_MEMBERS['payee']
        assert [key.level for key in device.keys] == [KeyLevel.PRIVILEGED, KeyLevel.STANDARD, KeyLevel.LOW]

    async def test_notify_payment_request_fills_ref_id(self, token_io, caplog):
        gateway, patcher = _use_gateway(token_io, {'RequestTransfer': {'status': 'ACCEPTED'}})
        payload = TokenPayload(description="Invoice 7")

        with patcher:
            status = await token_io.notify_payment_request(payload)

        assert status == 'ACCEPTED'
        assert gateway.request('RequestTransfer')['tokenPayload']['refId']
        assert payload.ref_id is None
        assert "refId is not set" in caplog.text

    def test_generate_token_request_url(self, token_io):
        url = token_io.generate_token_request_url("rq:1", "order-42", "csrf")
        assert url.startswith("https://web-app.sandbox.token.io/request-token/rq:1?state=")


@pytest.fixture
def token_engine(engine_factory):
    engine = engine_factory.create(TEST_MEMBERS['token'])
    engine.generate_key(KeyLevel.STANDARD)
    return engine


def _callback_url(token_engine, token_id, serialized_state):
    signer = token_engine.create_signer(KeyLevel.STANDARD)
    payload = RequestSignaturePayload(token_id=token_id, state=serialized_state)
    signature = Signature(
        member_id=TEST_MEMBERS['token'],
        key_id=signer.key_id,
        signature=signer.sign(canonical_json(payload))
    )
    return "https://tpp.example/callback?token-id={}&state={}&signature={}".format(
        url_encode(token_id),
        url_encode(serialized_state),
        url_encode(json.dumps(signature.to_json_dict()))
    )


class TestTokenRequestCallbacks:
    """Test callback verification against the Token member."""

    @pytest.fixture
    def token_gateway(self, token_io, token_engine):
        return _use_gateway(token_io, {
            'ResolveAlias': {'member': {'id': TEST_MEMBERS['token']}},
            'GetMember': {'member': {
                'id': TEST_MEMBERS['token'],
                'keys': [key.to_json_dict() for key in token_engine.get_public_keys()],
            }},
        })

    async def test_parse_callback_url(self, token_io, token_engine, token_gateway):
        gateway, patcher = token_gateway
        state = TokenRequestState.create("csrf", "order-42").serialize()

        with patcher:
            callback = await token_io.parse_token_request_callback_url(
                _callback_url(token_engine, "tt:1", state), "csrf"
            )

        assert callback.token_id == "tt:1"
        assert callback.state == "order-42"
        assert gateway.request('ResolveAlias')['alias'] == {'type': 'DOMAIN', 'value': 'token.io'}

    async def test_parse_callback_wrong_csrf(self, token_io, token_engine, token_gateway):
        _, patcher = token_gateway
        state = TokenRequestState.create("csrf", "order-42").serialize()

        with patcher, pytest.raises(InvalidStateError):
            await token_io.parse_token_request_callback_url(
                _callback_url(token_engine, "tt:1", state), "other"
            )

    async def test_parse_callback_params(self, token_io, token_engine, token_gateway):
        _, patcher = token_gateway
        state = TokenRequestState.create("", "s").serialize()
        signer = token_engine.create_signer(KeyLevel.STANDARD)
        signature = Signature(
            member_id=TEST_MEMBERS['token'],
            key_id=signer.key_id,
            signature=signer.sign(canonical_json(RequestSignaturePayload(token_id="tt:2", state=state)))
        )

        with patcher:
            callback = await token_io.parse_token_request_callback_params({
                'token-id': 'tt:2',
                'state': state,
                'signature': json.dumps(signature.to_json_dict()),
            })

        assert callback.token_id == "tt:2"
        assert callback.state == "s"


class TestTokenIO:
    """Test the blocking facade."""

    def test_create_member(self, token_io):
        _, patcher = _use_gateway(token_io, {
            'CreateMember': {'memberId': 'm:1'},
            'UpdateMember': {'member': {'id': 'm:1'}},
        })

        with patcher:
            member = token_io.sync().create_member()

        assert isinstance(member, Member)
        assert member.member_id == "m:1"

    def test_close_stops_runner(self, token_io):
        blocking = token_io.sync()
        with blocking:
            assert blocking.async_() is token_io

        assert token_io.runner.closed
        blocking.close()
