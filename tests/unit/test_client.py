"""Unit tests for the gateway clients."""

from unittest.mock import AsyncMock, patch

import pytest

from tokenio_sdk.core.exceptions import (
    ExternalAuthorizationRequiredError,
    MemberNotFoundError,
    TransferTokenError,
)
from tokenio_sdk.core.types import (
    Alias,
    AliasType,
    KeyLevel,
    MemberUpdate,
    RecoveryRule,
    TokenPayload,
    TokenType,
    TransferPayload,
)
from tokenio_sdk.core.util import canonical_json, token_action
from tokenio_sdk.rpc.client import Client, UnauthenticatedClient
from tokenio_sdk.rpc.transport import GatewayTransport
from tokenio_sdk.tokenrequest import TokenRequest

from tests import TEST_MEMBERS

TOKEN_JSON = {
    'id': 'tt:1',
    'payload': {
        'version': '1.0',
        'refId': 'ref-1',
        'from': {'id': TEST_MEMBERS['payer']},
        'to': {'id': TEST_MEMBERS['payee']},
        'transfer': {'currency': 'EUR', 'lifetimeAmount': '100.0'},
    },
}


@pytest.fixture
def transport(config):
    return GatewayTransport(config)


@pytest.fixture
def rpc(transport):
    """Mocked gateway call."""
    with patch.object(transport, '_make_rpc_call', AsyncMock(return_value={})) as mock:
        yield mock


@pytest.fixture
def client(crypto_engine, transport):
    return Client(TEST_MEMBERS['payer'], crypto_engine, transport)


@pytest.fixture
def unauthenticated(transport):
    return UnauthenticatedClient(transport)


def _calls(rpc):
    """(method, request) of each gateway call."""
    return [(c.args[0], c.args[1]) for c in rpc.await_args_list]


class TestUnauthenticatedClient:
    """Test calls that need no member identity."""

    @pytest.mark.asyncio
    async def test_get_member_id(self, unauthenticated, rpc):
        rpc.return_value = {'member': {'id': 'm:1'}}
        alias = Alias(type=AliasType.EMAIL, value="alice@example.com")

        assert await unauthenticated.get_member_id(alias) == 'm:1'
        assert _calls(rpc) == [('ResolveAlias', {'alias': {'type': 'EMAIL', 'value': 'alice@example.com'}})]

    @pytest.mark.asyncio
    async def test_get_member_id_not_found(self, unauthenticated, rpc):
        rpc.return_value = {}
        with pytest.raises(MemberNotFoundError):
            await unauthenticated.get_member_id(Alias(type=AliasType.EMAIL, value="nobody@example.com"))

    @pytest.mark.asyncio
    async def test_alias_exists(self, unauthenticated, rpc):
        rpc.return_value = {'member': {'id': 'm:1'}}
        assert await unauthenticated.alias_exists(Alias(type=AliasType.USERNAME, value="alice"))
        rpc.return_value = {}
        assert not await unauthenticated.alias_exists(Alias(type=AliasType.USERNAME, value="bob"))

    @pytest.mark.asyncio
    async def test_create_member(self, unauthenticated, rpc, crypto_engine):
        """Test the initial update is signed by the given signer."""
        rpc.side_effect = [{'memberId': 'm:new'}, {'member': {'id': 'm:new', 'lastHash': 'h1'}}]
        signer = crypto_engine.create_signer(KeyLevel.PRIVILEGED)

        member_id = await unauthenticated.create_member_id()
        record = await unauthenticated.create_member(member_id, [], [], signer)

        assert record.last_hash == 'h1'
        (method, create), (update_method, request) = _calls(rpc)
        assert method == 'CreateMember'
        assert create['memberType'] == 'PERSONAL'
        assert create['nonce']
        assert update_method == 'UpdateMember'
        assert request['updateSignature']['keyId'] == signer.key_id
        update = MemberUpdate.from_json_dict(request['update'])
        crypto_engine.create_verifier(signer.key_id).verify(
            canonical_json(update),
            request['updateSignature']['signature']
        )

    @pytest.mark.asyncio
    async def test_get_banks(self, unauthenticated, rpc):
        rpc.return_value = {'banks': [{'id': 'iron', 'name': 'Iron Bank'}]}

        banks = await unauthenticated.get_banks(country="GB", per_page=10)

        assert banks[0].name == 'Iron Bank'
        assert _calls(rpc) == [('GetBanks', {'country': 'GB', 'perPage': 10})]

    @pytest.mark.asyncio
    async def test_retrieve_token_request(self, unauthenticated, rpc):
        rpc.return_value = {'tokenRequest': {
            'id': 'rq:1',
            'requestPayload': {'accessBody': {'type': ['ACCOUNTS']}},
            'requestOptions': {'from': {'id': 'm:1'}},
        }}

        request = await unauthenticated.retrieve_token_request('rq:1')

        assert request.request_payload.body_case == 'access_body'
        assert request.request_options.from_.id == 'm:1'

    @pytest.mark.asyncio
    async def test_complete_recovery_with_default_rule(self, unauthenticated, rpc, engine_factory):
        """Test recovery registers new keys signed by the new privileged key."""
        engine = engine_factory.create('m:lost')
        rpc.side_effect = [
            {'recoveryEntry': {'authorization': {'memberId': 'm:lost'}}},
            {'member': {'id': 'm:lost', 'lastHash': 'h7'}},
            {'member': {'id': 'm:lost', 'lastHash': 'h8'}},
        ]

        record = await unauthenticated.complete_recovery_with_default_rule(
            'm:lost', 'verification-1', '1234', engine
        )

        assert record.last_hash == 'h8'
        methods = [method for method, _ in _calls(rpc)]
        assert methods == ['CompleteRecovery', 'GetMember', 'UpdateMember']
        update = _calls(rpc)[2][1]['update']
        assert update['prevHash'] == 'h7'
        assert 'recover' in update['operations'][0]
        assert len([op for op in update['operations'] if 'addKey' in op]) == 3


class TestClient:
    """Test authenticated member calls."""

    @pytest.mark.asyncio
    async def test_calls_are_signed(self, client, rpc):
        rpc.return_value = {'member': {'id': TEST_MEMBERS['payer']}}

        await client.get_member(TEST_MEMBERS['payer'])

        headers = rpc.await_args.kwargs['headers']
        assert headers['token-member-id'] == TEST_MEMBERS['payer']
        assert 'token-signature' in headers

    @pytest.mark.asyncio
    async def test_update_member_chains_last_hash(self, client, rpc, crypto_engine):
        rpc.side_effect = [
            {'member': {'id': TEST_MEMBERS['payer'], 'lastHash': 'h1'}},
            {'member': {'id': TEST_MEMBERS['payer'], 'lastHash': 'h2'}},
        ]

        record = await client.update_member([])

        assert record.last_hash == 'h2'
        request = _calls(rpc)[1][1]
        assert request['update']['prevHash'] == 'h1'
        privileged = crypto_engine.create_signer(KeyLevel.PRIVILEGED).key_id
        assert request['updateSignature']['keyId'] == privileged
        assert rpc.await_args.kwargs['headers']['token-key-id'] == privileged

    @pytest.mark.asyncio
    async def test_on_behalf_of(self, client, rpc):
        """Test an access token client adds the on-behalf-of header."""
        rpc.return_value = {'accounts': []}
        delegate = client.for_access_token('tt:access', customer_initiated=True)

        await delegate.get_accounts()
        assert rpc.await_args.kwargs['headers']['token-on-behalf-of'] == 'tt:access'
        assert rpc.await_args.kwargs['headers']['customer-initiated'] == 'true'

        await client.get_accounts()
        assert 'token-on-behalf-of' not in rpc.await_args.kwargs['headers']

    @pytest.mark.asyncio
    async def test_get_balance(self, client, rpc):
        rpc.return_value = {'balance': {
            'current': {'currency': 'EUR', 'value': '10.00'},
            'available': {'currency': 'EUR', 'value': '8.00'},
        }}

        balance = await client.get_balance('a:1', KeyLevel.STANDARD)

        assert balance.account_id == 'a:1'
        assert balance.available.value == '8.00'

    @pytest.mark.asyncio
    async def test_get_transactions_page(self, client, rpc):
        rpc.return_value = {'transactions': [{'id': 'tx:1'}], 'offset': 'next'}

        page = await client.get_transactions('a:1', None, 5, KeyLevel.LOW)

        assert [t.id for t in page] == ['tx:1']
        assert page.offset == 'next'
        assert _calls(rpc) == [('GetTransactions', {'accountId': 'a:1', 'page': {'limit': 5}})]

    @pytest.mark.asyncio
    async def test_get_tokens_with_offset(self, client, rpc):
        rpc.return_value = {'tokens': [TOKEN_JSON]}

        page = await client.get_tokens(TokenType.TRANSFER, 'o1', 10)

        assert page.data[0].payload.from_.id == TEST_MEMBERS['payer']
        assert page.offset is None
        assert _calls(rpc)[0][1] == {'type': 'TRANSFER', 'page': {'limit': 10, 'offset': 'o1'}}

    @pytest.mark.asyncio
    async def test_create_transfer_token(self, client, rpc):
        rpc.return_value = {'status': 'SUCCESS', 'token': TOKEN_JSON}
        payload = TokenPayload.from_json_dict(TOKEN_JSON['payload'])

        token = await client.create_transfer_token(payload, 'rq:1')

        assert token.id == 'tt:1'
        method, request = _calls(rpc)[0]
        assert method == 'CreateTransferToken'
        assert request['tokenRequestId'] == 'rq:1'
        assert request['payload']['from'] == {'id': TEST_MEMBERS['payer']}

    @pytest.mark.asyncio
    async def test_create_transfer_token_failure(self, client, rpc):
        rpc.return_value = {'status': 'FAILURE_INSUFFICIENT_FUNDS'}

        with pytest.raises(TransferTokenError) as exc_info:
            await client.create_transfer_token(TokenPayload.from_json_dict(TOKEN_JSON['payload']))

        assert exc_info.value.status == 'FAILURE_INSUFFICIENT_FUNDS'

    @pytest.mark.asyncio
    async def test_create_transfer_token_external_authorization(self, client, rpc):
        rpc.return_value = {
            'status': 'FAILURE_EXTERNAL_AUTHORIZATION_REQUIRED',
            'authorizationDetails': {'url': 'https://bank.example/authorize'},
        }

        with pytest.raises(ExternalAuthorizationRequiredError) as exc_info:
            await client.create_transfer_token(TokenPayload.from_json_dict(TOKEN_JSON['payload']))

        assert exc_info.value.authorization_url == 'https://bank.example/authorize'

    @pytest.mark.asyncio
    async def test_endorse_token(self, client, rpc, crypto_engine):
        """Test the endorsement signs the payload with the endorsed action."""
        rpc.return_value = {'result': {'status': 'SUCCESS', 'token': TOKEN_JSON}}
        token = await _token(client, rpc)

        result = await client.endorse_token(token, KeyLevel.STANDARD)

        assert result.status == 'SUCCESS'
        request = _calls(rpc)[-1][1]
        signature = request['signature']
        assert signature['keyId'] == crypto_engine.create_signer(KeyLevel.STANDARD).key_id
        crypto_engine.create_verifier(signature['keyId']).verify(
            token_action(token.payload, "ENDORSED"),
            signature['signature']
        )

    @pytest.mark.asyncio
    async def test_cancel_token(self, client, rpc, crypto_engine):
        rpc.return_value = {'result': {'status': 'SUCCESS'}}
        token = await _token(client, rpc)

        await client.cancel_token(token)

        signature = _calls(rpc)[-1][1]['signature']
        crypto_engine.create_verifier(signature['keyId']).verify(
            token_action(token.payload, "CANCELLED"),
            signature['signature']
        )

    @pytest.mark.asyncio
    async def test_create_transfer_signs_payload(self, client, rpc, crypto_engine):
        rpc.return_value = {'transfer': {
            'id': 't:1',
            'payload': {'refId': 'r', 'tokenId': 'tt:1'},
        }}
        payload = TransferPayload(ref_id='r', token_id='tt:1')

        transfer = await client.create_transfer(payload)

        assert transfer.payload.token_id == 'tt:1'
        signature = _calls(rpc)[0][1]['payloadSignature']
        crypto_engine.create_verifier(signature['keyId']).verify(
            canonical_json(payload),
            signature['signature']
        )

    @pytest.mark.asyncio
    async def test_get_transfers_filter(self, client, rpc):
        rpc.return_value = {'transfers': []}

        await client.get_transfers('tt:1', None, 20)

        assert _calls(rpc)[0][1] == {'page': {'limit': 20}, 'filter': {'tokenId': 'tt:1'}}

    @pytest.mark.asyncio
    async def test_store_token_request(self, client, rpc):
        rpc.return_value = {'tokenRequest': {'id': 'rq:9'}}

        request = TokenRequest.transfer_request(10, 'EUR').set_to_member_id('m:1').build()
        request_id = await client.store_token_request(request.request_payload, request.request_options)

        assert request_id == 'rq:9'
        body = _calls(rpc)[0][1]
        assert body['requestPayload']['transferBody'] == {'lifetimeAmount': '10.0', 'currency': 'EUR'}
        assert body['requestOptions'] == {}

    @pytest.mark.asyncio
    async def test_authorize_recovery(self, client, crypto_engine):
        authorization = {'memberId': 'm:other', 'prevHash': 'h'}

        signature = await client.authorize_recovery(authorization)

        assert signature.member_id == TEST_MEMBERS['payer']
        crypto_engine.create_verifier(signature.key_id).verify(
            canonical_json(authorization),
            signature.signature
        )

    @pytest.mark.asyncio
    async def test_add_recovery_rule(self, client, rpc):
        rpc.side_effect = [
            {'member': {'id': TEST_MEMBERS['payer'], 'lastHash': 'h1'}},
            {'member': {'id': TEST_MEMBERS['payer'], 'lastHash': 'h2'}},
        ]

        record = await client.add_recovery_rule(RecoveryRule(primary_agent='m:agent'))

        assert record.last_hash == 'h2'
        assert [method for method, _ in _calls(rpc)] == ['GetMember', 'UpdateMember']
        operation = _calls(rpc)[1][1]['update']['operations'][0]
        assert operation['recoveryRules']['recoveryRule']['primaryAgent'] == 'm:agent'

    @pytest.mark.asyncio
    async def test_get_bank_info(self, client, rpc):
        rpc.return_value = {'info': {
            'linkUri': 'https://bank.example/link',
            'redirectUriRegex': 'https://app.example/.*',
        }}

        info = await client.get_bank_info('iron')

        assert _calls(rpc) == [('GetBankInfo', {'bankId': 'iron'})]
        assert info.link_uri == 'https://bank.example/link'
        assert info.redirect_uri_regex == 'https://app.example/.*'
        assert info.realm is None

    @pytest.mark.asyncio
    async def test_replace_and_endorse(self, client, rpc, crypto_engine):
        """Test the replacement payload is endorsed with the standard key."""
        rpc.return_value = {'result': {'status': 'SUCCESS', 'token': TOKEN_JSON}}
        token = await _token(client, rpc)
        replacement = TokenPayload.from_json_dict({**TOKEN_JSON['payload'], 'refId': 'ref-2'})

        result = await client.replace_and_endorse(token, replacement)

        assert result.status == 'SUCCESS'
        method, request = _calls(rpc)[-1]
        assert method == 'ReplaceToken'
        assert request['cancelToken']['tokenId'] == 'tt:1'
        crypto_engine.create_verifier(request['cancelToken']['signature']['keyId']).verify(
            token_action(token.payload, "CANCELLED"),
            request['cancelToken']['signature']['signature']
        )
        signature = request['createToken']['payloadSignature']
        assert signature['keyId'] == crypto_engine.create_signer(KeyLevel.STANDARD).key_id
        crypto_engine.create_verifier(signature['keyId']).verify(
            token_action(replacement, "ENDORSED"),
            signature['signature']
        )
        assert request['createToken']['payload']['refId'] == 'ref-2'


async def _token(client, rpc):
    """Fetch the sample token through the client, keeping the mocked result."""
    result = rpc.return_value
    rpc.return_value = {'token': TOKEN_JSON}
    token = await client.get_token('tt:1')
    rpc.return_value = result
    return token
