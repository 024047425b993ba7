"""Gateway clients: unauthenticated calls and calls made as a member."""

import logging
from typing import Any, Dict, List, Optional

from ..core.exceptions import (
    MemberNotFoundError,
    ExternalAuthorizationRequiredError,
    TransferTokenError,
)
from ..core.paging import PagedList
from ..core.types import (
    Address,
    AddressRecord,
    Alias,
    AliasType,
    AccountRecord,
    Balance,
    Bank,
    BankInfo,
    Blob,
    BlobPayload,
    Key,
    KeyLevel,
    MemberOperation,
    MemberOperationMetadata,
    MemberRecord,
    MemberRecoveryOperation,
    MemberUpdate,
    Notification,
    Profile,
    RecoveryRule,
    Signature,
    StoredTokenRequest,
    Subscriber,
    Token,
    TokenMember,
    TokenOperationResult,
    TokenPayload,
    TokenRequestOptions,
    TokenRequestPayload,
    TokenType,
    Transaction,
    Transfer,
    TransferEndpoint,
    TransferPayload,
)
from ..core.util import (
    canonical_json,
    generate_nonce,
    normalize_alias,
    to_add_key_operation,
    to_recovery_rule_operation,
    token_action,
)
from ..security import CryptoEngine, Signer
from .auth import AuthenticationContext, RequestAuthenticator
from .transport import GatewayTransport

logger = logging.getLogger(__name__)

TOKEN_MEMBER_ALIAS = Alias(type=AliasType.DOMAIN, value="token.io")
TRANSFER_TOKEN_SUCCESS = "SUCCESS"
EXTERNAL_AUTHORIZATION_REQUIRED = "FAILURE_EXTERNAL_AUTHORIZATION_REQUIRED"


def _page(offset: Optional[str], limit: int) -> Dict[str, Any]:
    page: Dict[str, Any] = {'limit': limit}
    if offset:
        page['offset'] = offset
    return page


def _sign(signer: Signer, member_id: str, payload: str) -> Signature:
    return Signature(member_id=member_id, key_id=signer.key_id, signature=signer.sign(payload))


def _key_operations(*keys: Key) -> List[MemberOperation]:
    return [to_add_key_operation(key) for key in keys]


def _signed_update_request(
    update: MemberUpdate,
    signer: Signer,
    metadata: Optional[List[MemberOperationMetadata]] = None
) -> Dict[str, Any]:
    request = {
        'update': update.to_json_dict(),
        'updateSignature': _sign(signer, update.member_id, canonical_json(update)).to_json_dict(),
    }
    if metadata:
        request['metadata'] = [m.to_json_dict() for m in metadata]
    return request


class UnauthenticatedClient:
    """Gateway calls that need no member identity."""

    def __init__(self, transport: GatewayTransport):
        self.transport = transport

    async def _call(self, method: str, request: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.transport._make_rpc_call(method, request or {})

    async def alias_exists(self, alias: Alias) -> bool:
        response = await self._call('ResolveAlias', {'alias': alias.to_json_dict()})
        return TokenMember.from_json_dict(response.get('member')).is_set

    async def get_member_id(self, alias: Alias) -> str:
        """Resolve an alias to a member id.

        Raises:
            MemberNotFoundError: No member has the alias
        """
        response = await self._call('ResolveAlias', {'alias': alias.to_json_dict()})
        member = TokenMember.from_json_dict(response.get('member'))
        if not member.id:
            raise MemberNotFoundError(alias)
        return member.id

    async def get_member(self, member_id: str) -> MemberRecord:
        response = await self._call('GetMember', {'memberId': member_id})
        return MemberRecord.from_json_dict(response.get('member'))

    async def get_token_member(self) -> MemberRecord:
        """The Token member, which signs token request callbacks."""
        return await self.get_member(await self.get_member_id(TOKEN_MEMBER_ALIAS))

    async def create_member_id(self, member_type: str = "PERSONAL") -> str:
        response = await self._call('CreateMember', {
            'nonce': generate_nonce(),
            'memberType': member_type,
        })
        return response['memberId']

    async def create_member(
        self,
        member_id: str,
        operations: List[MemberOperation],
        metadata: List[MemberOperationMetadata],
        signer: Signer
    ) -> MemberRecord:
        """Apply the initial update (keys, aliases) to a new member id."""
        update = MemberUpdate(member_id=member_id, operations=operations)
        response = await self._call('UpdateMember', _signed_update_request(update, signer, metadata))
        return MemberRecord.from_json_dict(response.get('member'))

    async def retrieve_token_request(self, request_id: str) -> StoredTokenRequest:
        response = await self._call('RetrieveTokenRequest', {'requestId': request_id})
        return StoredTokenRequest.from_json_dict(response.get('tokenRequest'))

    async def get_banks(
        self,
        bank_ids: Optional[List[str]] = None,
        search: Optional[str] = None,
        country: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None
    ) -> List[Bank]:
        request: Dict[str, Any] = {}
        if bank_ids:
            request['ids'] = bank_ids
        if search:
            request['search'] = search
        if country:
            request['country'] = country
        if page is not None:
            request['page'] = page
        if per_page is not None:
            request['perPage'] = per_page
        response = await self._call('GetBanks', request)
        return [Bank.from_json_dict(bank) for bank in response.get('banks', [])]

    async def notify_payment_request(self, payload: TokenPayload) -> str:
        response = await self._call('RequestTransfer', {'tokenPayload': payload.to_json_dict()})
        return response.get('status', 'ACCEPTED')

    async def begin_recovery(self, alias: Alias) -> str:
        response = await self._call('BeginRecovery', {'alias': normalize_alias(alias).to_json_dict()})
        return response['verificationId']

    async def get_recovery_authorization(
        self,
        verification_id: str,
        code: str,
        privileged_key: Key
    ) -> MemberRecoveryOperation:
        response = await self._call('CompleteRecovery', {
            'verificationId': verification_id,
            'code': code,
            'key': privileged_key.to_json_dict(),
        })
        return MemberRecoveryOperation.from_json_dict(response.get('recoveryEntry'))

    async def complete_recovery(
        self,
        member_id: str,
        recovery_operations: List[MemberRecoveryOperation],
        crypto_engine: CryptoEngine
    ) -> MemberRecord:
        """Recover a member with agent authorizations and fresh keys.

        Args:
            member_id: Member to recover
            recovery_operations: Signed authorizations from recovery agents
            crypto_engine: Engine holding the member's new keys

        Returns:
            Updated member record
        """
        operations = [MemberOperation(recover=op) for op in recovery_operations]
        return await self._recover(member_id, operations, crypto_engine)

    async def complete_recovery_with_default_rule(
        self,
        member_id: str,
        verification_id: str,
        code: str,
        crypto_engine: CryptoEngine
    ) -> MemberRecord:
        """Recover a member whose recovery agent is Token itself."""
        privileged_key = crypto_engine.generate_key(KeyLevel.PRIVILEGED)
        entry = await self.get_recovery_authorization(verification_id, code, privileged_key)
        return await self._recover(
            member_id,
            [MemberOperation(recover=entry)],
            crypto_engine,
            privileged_key
        )

    async def _recover(
        self,
        member_id: str,
        operations: List[MemberOperation],
        crypto_engine: CryptoEngine,
        privileged_key: Optional[Key] = None
    ) -> MemberRecord:
        if privileged_key is None:
            privileged_key = crypto_engine.generate_key(KeyLevel.PRIVILEGED)
        standard_key = crypto_engine.generate_key(KeyLevel.STANDARD)
        low_key = crypto_engine.generate_key(KeyLevel.LOW)
        signer = crypto_engine.create_signer(KeyLevel.PRIVILEGED)

        member = await self.get_member(member_id)
        update = MemberUpdate(
            member_id=member_id,
            prev_hash=member.last_hash,
            operations=operations + _key_operations(privileged_key, standard_key, low_key)
        )
        response = await self._call('UpdateMember', _signed_update_request(update, signer))
        logger.info(f"Recovered member {member_id}")
        return MemberRecord.from_json_dict(response.get('member'))


class Client:
    """Gateway calls authenticated as one member."""

    def __init__(
        self,
        member_id: str,
        crypto_engine: CryptoEngine,
        transport: GatewayTransport,
        context: Optional[AuthenticationContext] = None
    ):
        self.member_id = member_id
        self.crypto_engine = crypto_engine
        self.transport = transport
        self.authenticator = RequestAuthenticator(member_id, crypto_engine)
        self.context = context or AuthenticationContext()

    def for_access_token(self, token_id: str, customer_initiated: bool = False) -> 'Client':
        """Copy of this client acting on behalf of an access token grantor."""
        context = AuthenticationContext()
        context.use_access_token(token_id, customer_initiated)
        return Client(self.member_id, self.crypto_engine, self.transport, context)

    def use_access_token(self, token_id: str, customer_initiated: bool = False) -> None:
        self.context.use_access_token(token_id, customer_initiated)

    def clear_access_token(self) -> None:
        self.context.clear()

    async def _call(
        self,
        method: str,
        request: Optional[Dict[str, Any]] = None,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> Dict[str, Any]:
        request = request or {}
        headers = self.authenticator.headers(request, key_level, self.context)
        return await self.transport._make_rpc_call(method, request, headers=headers)

    def _signature(self, level: KeyLevel, payload: str) -> Signature:
        return _sign(self.authenticator.signer(level), self.member_id, payload)

    # Member

    async def get_member(self, member_id: str) -> MemberRecord:
        response = await self._call('GetMember', {'memberId': member_id})
        return MemberRecord.from_json_dict(response.get('member'))

    async def update_member(
        self,
        operations: List[MemberOperation],
        metadata: Optional[List[MemberOperationMetadata]] = None
    ) -> MemberRecord:
        """Apply operations on top of the member's latest state.

        Args:
            operations: Member operations
            metadata: Metadata for the operations, e.g. alias values

        Returns:
            Updated member record
        """
        member = await self.get_member(self.member_id)
        update = MemberUpdate(
            member_id=self.member_id,
            prev_hash=member.last_hash,
            operations=operations
        )
        signer = self.authenticator.signer(KeyLevel.PRIVILEGED)
        response = await self._call(
            'UpdateMember',
            _signed_update_request(update, signer, metadata),
            key_level=KeyLevel.PRIVILEGED
        )
        return MemberRecord.from_json_dict(response.get('member'))

    async def get_aliases(self) -> List[Alias]:
        response = await self._call('GetAliases')
        return [Alias.from_json_dict(alias) for alias in response.get('aliases', [])]

    async def retry_verification(self, alias: Alias) -> str:
        response = await self._call('RetryVerification', {
            'memberId': self.member_id,
            'alias': alias.to_json_dict(),
        })
        return response['verificationId']

    async def verify_alias(self, verification_id: str, code: str) -> None:
        await self._call('VerifyAlias', {'verificationId': verification_id, 'code': code})

    async def get_default_agent(self) -> str:
        response = await self._call('GetDefaultAgent')
        return response['memberId']

    async def add_recovery_rule(self, rule: RecoveryRule) -> MemberRecord:
        return await self.update_member([to_recovery_rule_operation(rule)])

    async def use_default_recovery_rule(self) -> MemberRecord:
        agent = await self.get_default_agent()
        return await self.add_recovery_rule(RecoveryRule(primary_agent=agent))

    async def authorize_recovery(self, authorization: Dict[str, Any]) -> Signature:
        return self._signature(KeyLevel.PRIVILEGED, canonical_json(authorization))

    async def delete_member(self) -> None:
        await self._call('DeleteMember', key_level=KeyLevel.PRIVILEGED)

    # Notifications

    async def subscribe_to_notifications(
        self,
        handler: str,
        handler_instructions: Optional[Dict[str, str]] = None
    ) -> Subscriber:
        response = await self._call('SubscribeToNotifications', {
            'handler': handler,
            'handlerInstructions': handler_instructions or {},
        })
        return Subscriber.from_json_dict(response.get('subscriber'))

    async def get_subscribers(self) -> List[Subscriber]:
        response = await self._call('GetSubscribers')
        return [Subscriber.from_json_dict(s) for s in response.get('subscribers', [])]

    async def get_subscriber(self, subscriber_id: str) -> Subscriber:
        response = await self._call('GetSubscriber', {'subscriberId': subscriber_id})
        return Subscriber.from_json_dict(response.get('subscriber'))

    async def unsubscribe_from_notifications(self, subscriber_id: str) -> None:
        await self._call('UnsubscribeFromNotifications', {'subscriberId': subscriber_id})

    async def get_notifications(self, offset: Optional[str], limit: int) -> PagedList[Notification]:
        response = await self._call('GetNotifications', {'page': _page(offset, limit)})
        return PagedList(
            data=[Notification.from_json_dict(n) for n in response.get('notifications', [])],
            offset=response.get('offset')
        )

    async def get_notification(self, notification_id: str) -> Notification:
        response = await self._call('GetNotification', {'notificationId': notification_id})
        return Notification.from_json_dict(response.get('notification'))

    async def trigger_token_step_up_notification(self, token_id: str) -> str:
        response = await self._call('TriggerStepUpNotification', {
            'tokenStepUp': {'tokenId': token_id},
        })
        return response.get('status', 'ACCEPTED')

    async def trigger_balance_step_up_notification(self, account_ids: List[str]) -> str:
        response = await self._call('TriggerStepUpNotification', {
            'balanceStepUp': {'accountId': account_ids},
        })
        return response.get('status', 'ACCEPTED')

    async def trigger_transaction_step_up_notification(self, account_id: str) -> str:
        response = await self._call('TriggerStepUpNotification', {
            'transactionStepUp': {'accountId': account_id},
        })
        return response.get('status', 'ACCEPTED')

    # Accounts

    async def link_accounts(self, bank_authorization: Dict[str, Any]) -> List[AccountRecord]:
        response = await self._call('LinkAccounts', {'bankAuthorization': bank_authorization})
        return [AccountRecord.from_json_dict(a) for a in response.get('accounts', [])]

    async def unlink_accounts(self, account_ids: List[str]) -> None:
        await self._call('UnlinkAccounts', {'accountIds': account_ids})

    async def get_account(self, account_id: str) -> AccountRecord:
        response = await self._call('GetAccount', {'accountId': account_id})
        return AccountRecord.from_json_dict(response.get('account'))

    async def get_accounts(self) -> List[AccountRecord]:
        response = await self._call('GetAccounts')
        return [AccountRecord.from_json_dict(a) for a in response.get('accounts', [])]

    async def get_default_account(self, member_id: str) -> AccountRecord:
        response = await self._call('GetDefaultAccount', {'memberId': member_id})
        return AccountRecord.from_json_dict(response.get('account'))

    async def set_default_account(self, account_id: str) -> None:
        await self._call('SetDefaultAccount', {'memberId': self.member_id, 'accountId': account_id})

    async def is_default(self, account_id: str) -> bool:
        response = await self._call('GetDefaultAccount', {'memberId': self.member_id})
        return (response.get('account') or {}).get('id') == account_id

    async def get_balance(self, account_id: str, key_level: KeyLevel) -> Balance:
        response = await self._call('GetBalance', {'accountId': account_id}, key_level=key_level)
        return Balance.from_json_dict({'accountId': account_id, **(response.get('balance') or {})})

    async def get_balances(self, account_ids: List[str], key_level: KeyLevel) -> List[Balance]:
        response = await self._call('GetBalances', {'accountId': account_ids}, key_level=key_level)
        return [Balance.from_json_dict(b.get('balance', b)) for b in response.get('response', [])]

    async def get_transaction(
        self,
        account_id: str,
        transaction_id: str,
        key_level: KeyLevel
    ) -> Transaction:
        response = await self._call('GetTransaction', {
            'accountId': account_id,
            'transactionId': transaction_id,
        }, key_level=key_level)
        return Transaction.from_json_dict(response.get('transaction'))

    async def get_transactions(
        self,
        account_id: str,
        offset: Optional[str],
        limit: int,
        key_level: KeyLevel
    ) -> PagedList[Transaction]:
        response = await self._call('GetTransactions', {
            'accountId': account_id,
            'page': _page(offset, limit),
        }, key_level=key_level)
        return PagedList(
            data=[Transaction.from_json_dict(t) for t in response.get('transactions', [])],
            offset=response.get('offset')
        )

    async def resolve_transfer_destinations(self, account_id: str) -> List[TransferEndpoint]:
        response = await self._call('ResolveTransferDestinations', {'accountId': account_id})
        return [TransferEndpoint.from_json_dict(d) for d in response.get('destinations', [])]

    async def get_bank_info(self, bank_id: str) -> BankInfo:
        response = await self._call('GetBankInfo', {'bankId': bank_id})
        return BankInfo.from_json_dict(response.get('info'))

    # Tokens

    async def store_token_request(
        self,
        payload: TokenRequestPayload,
        options: Optional[TokenRequestOptions] = None
    ) -> str:
        request = {'requestPayload': payload.to_json_dict()}
        if options is not None:
            request['requestOptions'] = options.to_json_dict()
        response = await self._call('StoreTokenRequest', request)
        return response['tokenRequest']['id']

    async def update_token_request(self, request_id: str, options: TokenRequestOptions) -> None:
        await self._call('UpdateTokenRequest', {
            'requestId': request_id,
            'requestOptions': options.to_json_dict(),
        })

    async def create_transfer_token(
        self,
        payload: TokenPayload,
        token_request_id: Optional[str] = None
    ) -> Token:
        """Create a transfer token.

        Raises:
            ExternalAuthorizationRequiredError: The bank wants the user to authorize first
            TransferTokenError: The gateway refused the token
        """
        request = {'payload': payload.to_json_dict()}
        if token_request_id:
            request['tokenRequestId'] = token_request_id
        response = await self._call('CreateTransferToken', request)

        status = response.get('status', TRANSFER_TOKEN_SUCCESS)
        if status == EXTERNAL_AUTHORIZATION_REQUIRED:
            url = (response.get('authorizationDetails') or {}).get('url')
            if url:
                raise ExternalAuthorizationRequiredError(url)
        if status != TRANSFER_TOKEN_SUCCESS:
            raise TransferTokenError(status)
        return Token.from_json_dict(response.get('token'))

    async def create_access_token(
        self,
        payload: TokenPayload,
        token_request_id: Optional[str] = None
    ) -> Token:
        request = {'payload': payload.to_json_dict()}
        if token_request_id:
            request['tokenRequestId'] = token_request_id
        response = await self._call('CreateAccessToken', request)
        return Token.from_json_dict(response.get('token'))

    async def create_token(
        self,
        payload: TokenPayload,
        token_request_id: Optional[str] = None
    ) -> Token:
        """Create a token of any body type, e.g. a standing order."""
        request = {'payload': payload.to_json_dict()}
        if token_request_id:
            request['tokenRequestId'] = token_request_id
        response = await self._call('CreateToken', request)
        return Token.from_json_dict(response.get('token'))

    async def get_token(self, token_id: str) -> Token:
        response = await self._call('GetToken', {'tokenId': token_id})
        return Token.from_json_dict(response.get('token'))

    async def get_active_access_token(self, to_member_id: str) -> Token:
        response = await self._call('GetActiveAccessToken', {'toMemberId': to_member_id})
        return Token.from_json_dict(response.get('token'))

    async def get_tokens(
        self,
        token_type: TokenType,
        offset: Optional[str],
        limit: int
    ) -> PagedList[Token]:
        response = await self._call('GetTokens', {
            'type': token_type.value,
            'page': _page(offset, limit),
        })
        return PagedList(
            data=[Token.from_json_dict(t) for t in response.get('tokens', [])],
            offset=response.get('offset')
        )

    async def endorse_token(self, token: Token, key_level: KeyLevel) -> TokenOperationResult:
        signature = self._signature(key_level, token_action(token.payload, "ENDORSED"))
        response = await self._call('EndorseToken', {
            'tokenId': token.id,
            'signature': signature.to_json_dict(),
        }, key_level=key_level)
        return TokenOperationResult.from_json_dict(response.get('result'))

    async def cancel_token(self, token: Token) -> TokenOperationResult:
        signature = self._signature(KeyLevel.LOW, token_action(token.payload, "CANCELLED"))
        response = await self._call('CancelToken', {
            'tokenId': token.id,
            'signature': signature.to_json_dict(),
        })
        return TokenOperationResult.from_json_dict(response.get('result'))

    async def replace(self, token_to_cancel: Token, token_to_create: TokenPayload) -> TokenOperationResult:
        """Cancel an access token and create its replacement in one call."""
        signature = self._signature(KeyLevel.LOW, token_action(token_to_cancel.payload, "CANCELLED"))
        response = await self._call('ReplaceToken', {
            'cancelToken': {
                'tokenId': token_to_cancel.id,
                'signature': signature.to_json_dict(),
            },
            'createToken': {'payload': token_to_create.to_json_dict()},
        })
        return TokenOperationResult.from_json_dict(response.get('result'))

    async def replace_and_endorse(
        self,
        token_to_cancel: Token,
        token_to_create: TokenPayload
    ) -> TokenOperationResult:
        """Cancel an access token and create an endorsed replacement in one call."""
        cancel_signature = self._signature(KeyLevel.LOW, token_action(token_to_cancel.payload, "CANCELLED"))
        endorse_signature = self._signature(KeyLevel.STANDARD, token_action(token_to_create, "ENDORSED"))
        response = await self._call('ReplaceToken', {
            'cancelToken': {
                'tokenId': token_to_cancel.id,
                'signature': cancel_signature.to_json_dict(),
            },
            'createToken': {
                'payload': token_to_create.to_json_dict(),
                'payloadSignature': endorse_signature.to_json_dict(),
            },
        }, key_level=KeyLevel.STANDARD)
        return TokenOperationResult.from_json_dict(response.get('result'))

    async def sign_token_request_state(
        self,
        token_request_id: str,
        token_id: str,
        state: str
    ) -> Signature:
        response = await self._call('SignTokenRequestState', {
            'payload': {'tokenId': token_id, 'state': state},
            'tokenRequestId': token_request_id,
        })
        return Signature.from_json_dict(response.get('signature'))

    # Transfers

    async def create_transfer(self, payload: TransferPayload) -> Transfer:
        signature = self._signature(KeyLevel.LOW, canonical_json(payload))
        response = await self._call('CreateTransfer', {
            'payload': payload.to_json_dict(),
            'payloadSignature': signature.to_json_dict(),
        })
        return Transfer.from_json_dict(response.get('transfer'))

    async def get_transfer(self, transfer_id: str) -> Transfer:
        response = await self._call('GetTransfer', {'transferId': transfer_id})
        return Transfer.from_json_dict(response.get('transfer'))

    async def get_transfers(
        self,
        token_id: Optional[str],
        offset: Optional[str],
        limit: int
    ) -> PagedList[Transfer]:
        request: Dict[str, Any] = {'page': _page(offset, limit)}
        if token_id:
            request['filter'] = {'tokenId': token_id}
        response = await self._call('GetTransfers', request)
        return PagedList(
            data=[Transfer.from_json_dict(t) for t in response.get('transfers', [])],
            offset=response.get('offset')
        )

    # Blobs

    async def create_blob(self, payload: BlobPayload) -> str:
        response = await self._call('CreateBlob', {'payload': payload.to_json_dict()})
        return response['blobId']

    async def get_blob(self, blob_id: str) -> Blob:
        response = await self._call('GetBlob', {'blobId': blob_id})
        return Blob.from_json_dict(response.get('blob'))

    async def get_token_blob(self, token_id: str, blob_id: str) -> Blob:
        response = await self._call('GetTokenBlob', {'tokenId': token_id, 'blobId': blob_id})
        return Blob.from_json_dict(response.get('blob'))

    # Addresses and profile

    async def add_address(self, name: str, address: Address) -> AddressRecord:
        signature = self._signature(KeyLevel.LOW, canonical_json(address))
        response = await self._call('AddAddress', {
            'name': name,
            'address': address.to_json_dict(),
            'addressSignature': signature.to_json_dict(),
        })
        return AddressRecord.from_json_dict(response.get('address'))

    async def get_address(self, address_id: str) -> AddressRecord:
        response = await self._call('GetAddress', {'addressId': address_id})
        return AddressRecord.from_json_dict(response.get('address'))

    async def get_addresses(self) -> List[AddressRecord]:
        response = await self._call('GetAddresses')
        return [AddressRecord.from_json_dict(a) for a in response.get('addresses', [])]

    async def delete_address(self, address_id: str) -> None:
        await self._call('DeleteAddress', {'addressId': address_id})

    async def set_profile(self, profile: Profile) -> Profile:
        response = await self._call('SetProfile', {'profile': profile.to_json_dict()})
        return Profile.from_json_dict(response.get('profile'))

    async def get_profile(self, member_id: str) -> Profile:
        response = await self._call('GetProfile', {'memberId': member_id})
        return Profile.from_json_dict(response.get('profile'))

    async def set_profile_picture(self, payload: BlobPayload) -> None:
        await self._call('SetProfilePicture', {'payload': payload.to_json_dict()})

    async def get_profile_picture(self, member_id: str, size: str) -> Blob:
        response = await self._call('GetProfilePicture', {'memberId': member_id, 'size': size})
        return Blob.from_json_dict(response.get('blob'))
