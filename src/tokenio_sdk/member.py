"""Token members: identity, accounts, tokens and transfers."""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from .account import Account, AccountAsync
from .builders import AccessTokenBuilder, StandingOrderTokenBuilder, TransferTokenBuilder
from .builders.transfer import Amount
from .core.paging import PagedList
from .core.sync import LoopRunner
from .core.types import (
    Address,
    AddressRecord,
    Alias,
    Balance,
    BankInfo,
    Blob,
    BlobPayload,
    Key,
    KeyLevel,
    MemberRecord,
    Money,
    Notification,
    Profile,
    RecoveryRule,
    Signature,
    Subscriber,
    Token,
    TokenOperationResult,
    TokenPayload,
    TokenRequestOptions,
    TokenType,
    Transaction,
    Transfer,
    TransferEndpoint,
    TransferPayload,
)
from .core.util import (
    format_amount,
    generate_nonce,
    normalize_alias,
    to_add_alias_operation,
    to_add_alias_operation_metadata,
    to_add_key_operation,
    to_remove_alias_operation,
    to_remove_key_operation,
)
from .rpc.client import Client
from .tokenrequest import TokenRequest

logger = logging.getLogger(__name__)


class MemberAsync:
    """A Token member; every remote call is a coroutine.

    Obtained from ``TokenIOAsync.create_member`` or ``TokenIOAsync.get_member``.
    """

    def __init__(self, record: MemberRecord, client: Client, runner: LoopRunner):
        """Initialize the member.

        Args:
            record: Member record as returned by the gateway
            client: Client authenticated as this member
            runner: Event loop runner shared with the blocking facades
        """
        self._record = record
        self._client = client
        self.runner = runner

    def sync(self) -> 'Member':
        """Blocking version of this member."""
        return Member(self)

    @property
    def member_id(self) -> str:
        return self._record.id

    @property
    def last_hash(self) -> Optional[str]:
        return self._record.last_hash

    def keys(self) -> List[Key]:
        return list(self._record.keys)

    def to_record(self) -> MemberRecord:
        return self._record.model_copy(deep=True)

    def for_access_token(self, token_id: str, customer_initiated: bool = False) -> 'MemberAsync':
        """Copy of this member acting as the grantor of an access token."""
        return MemberAsync(
            self._record,
            self._client.for_access_token(token_id, customer_initiated),
            self.runner
        )

    def use_access_token(self, token_id: str, customer_initiated: bool = False) -> None:
        """Make subsequent calls on behalf of the grantor of an access token."""
        self._client.use_access_token(token_id, customer_initiated)

    def clear_access_token(self) -> None:
        self._client.clear_access_token()

    # Identity

    async def first_alias(self) -> Optional[Alias]:
        aliases = await self.aliases()
        return aliases[0] if aliases else None

    async def aliases(self) -> List[Alias]:
        return await self._client.get_aliases()

    async def _update(self, operations, metadata=None) -> None:
        self._record = await self._client.update_member(operations, metadata)

    async def add_alias(self, alias: Alias) -> None:
        await self.add_aliases([alias])

    async def add_aliases(self, aliases: List[Alias]) -> None:
        """Add aliases; each must then be verified.

        Args:
            aliases: Aliases to add, normalized before hashing
        """
        normalized = [normalize_alias(alias) for alias in aliases]
        await self._update(
            [to_add_alias_operation(alias) for alias in normalized],
            [to_add_alias_operation_metadata(alias) for alias in normalized]
        )
        logger.info(f"Added {len(normalized)} alias(es) to member {self.member_id}")

    async def remove_alias(self, alias: Alias) -> None:
        await self.remove_aliases([alias])

    async def remove_aliases(self, aliases: List[Alias]) -> None:
        await self._update([to_remove_alias_operation(normalize_alias(a)) for a in aliases])

    async def retry_alias_verification(self, alias: Alias) -> str:
        """Resend the verification message for an alias; returns the verification id."""
        return await self._client.retry_verification(normalize_alias(alias))

    async def verify_alias(self, verification_id: str, code: str) -> None:
        await self._client.verify_alias(verification_id, code)

    async def approve_key(self, key: Key) -> None:
        await self.approve_keys([key])

    async def approve_keys(self, keys: List[Key]) -> None:
        await self._update([to_add_key_operation(key) for key in keys])

    async def remove_key(self, key_id: str) -> None:
        await self.remove_keys([key_id])

    async def remove_keys(self, key_ids: List[str]) -> None:
        await self._update([to_remove_key_operation(key_id) for key_id in key_ids])

    async def add_recovery_rule(self, rule: RecoveryRule) -> None:
        """Set the agents that can authorize recovery of this member."""
        self._record = await self._client.add_recovery_rule(rule)

    async def use_default_recovery_rule(self) -> None:
        """Make Token the member's recovery agent."""
        self._record = await self._client.use_default_recovery_rule()

    async def authorize_recovery(self, authorization: Dict[str, Any]) -> Signature:
        """Sign another member's recovery authorization as their agent."""
        return await self._client.authorize_recovery(authorization)

    async def delete_member(self) -> None:
        await self._client.delete_member()
        self._client.crypto_engine.delete_keys()
        logger.info(f"Deleted member {self.member_id}")

    # Accounts

    def _account(self, record) -> AccountAsync:
        return AccountAsync(self, record, self._client)

    async def link_accounts(self, bank_authorization: Dict[str, Any]) -> List[AccountAsync]:
        records = await self._client.link_accounts(bank_authorization)
        return [self._account(record) for record in records]

    async def unlink_accounts(self, account_ids: List[str]) -> None:
        await self._client.unlink_accounts(account_ids)

    async def get_accounts(self) -> List[AccountAsync]:
        return [self._account(record) for record in await self._client.get_accounts()]

    async def get_account(self, account_id: str) -> AccountAsync:
        return self._account(await self._client.get_account(account_id))

    async def get_default_account(self) -> AccountAsync:
        return self._account(await self._client.get_default_account(self.member_id))

    async def set_default_account(self, account_id: str) -> None:
        await self._client.set_default_account(account_id)

    async def get_balance(self, account_id: str, key_level: KeyLevel = KeyLevel.LOW) -> Balance:
        return await self._client.get_balance(account_id, key_level)

    async def get_balances(
        self,
        account_ids: List[str],
        key_level: KeyLevel = KeyLevel.LOW
    ) -> List[Balance]:
        return await self._client.get_balances(account_ids, key_level)

    async def get_current_balance(
        self,
        account_id: str,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> Optional[Money]:
        return (await self.get_balance(account_id, key_level)).current

    async def get_available_balance(
        self,
        account_id: str,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> Optional[Money]:
        return (await self.get_balance(account_id, key_level)).available

    async def get_transaction(
        self,
        account_id: str,
        transaction_id: str,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> Transaction:
        return await self._client.get_transaction(account_id, transaction_id, key_level)

    async def get_transactions(
        self,
        account_id: str,
        offset: Optional[str],
        limit: int,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> PagedList[Transaction]:
        return await self._client.get_transactions(account_id, offset, limit, key_level)

    async def resolve_transfer_destinations(self, account_id: str) -> List[TransferEndpoint]:
        return await self._client.resolve_transfer_destinations(account_id)

    async def get_bank_info(self, bank_id: str) -> BankInfo:
        return await self._client.get_bank_info(bank_id)

    # Tokens

    async def create_transfer_token(self, amount: Amount, currency: str) -> TransferTokenBuilder:
        """Start building a transfer token paid by this member.

        Args:
            amount: Lifetime amount
            currency: Currency code

        Returns:
            Builder with the payer (id and first alias) filled in
        """
        builder = TransferTokenBuilder(amount, currency, member=self)
        alias = await self.first_alias()
        if alias is not None:
            builder.set_from_alias(alias)
        return builder

    async def create_transfer_token_from_payload(
        self,
        payload: TokenPayload,
        token_request_id: Optional[str] = None
    ) -> Token:
        token = await self._client.create_transfer_token(payload, token_request_id)
        logger.info(f"Created transfer token {token.id}")
        return token

    async def create_access_token(self, builder: AccessTokenBuilder) -> Token:
        """Create an access token granted by this member.

        Args:
            builder: Builder with the redeemer and resources set

        Returns:
            The created access token
        """
        payload = builder.set_from(self.member_id).build()
        token = await self._client.create_access_token(payload, builder.token_request_id)
        logger.info(f"Created access token {token.id}")
        return token

    async def create_standing_order_token_builder(
        self,
        amount: Amount,
        currency: str,
        frequency: str,
        start_date: str,
        end_date: Optional[str] = None
    ) -> StandingOrderTokenBuilder:
        builder = StandingOrderTokenBuilder(self, amount, currency, frequency, start_date, end_date)
        alias = await self.first_alias()
        if alias is not None:
            builder.set_from_alias(alias)
        return builder

    async def create_standing_order_token(self, builder: StandingOrderTokenBuilder) -> Token:
        payload = builder.build_payload()
        token = await self._client.create_token(payload, payload.token_request_id)
        logger.info(f"Created standing order token {token.id}")
        return token

    async def get_token(self, token_id: str) -> Token:
        return await self._client.get_token(token_id)

    async def get_transfer_tokens(self, offset: Optional[str], limit: int) -> PagedList[Token]:
        return await self._client.get_tokens(TokenType.TRANSFER, offset, limit)

    async def get_access_tokens(self, offset: Optional[str], limit: int) -> PagedList[Token]:
        return await self._client.get_tokens(TokenType.ACCESS, offset, limit)

    async def get_active_access_token(self, to_member_id: str) -> Token:
        return await self._client.get_active_access_token(to_member_id)

    async def endorse_token(
        self,
        token: Token,
        key_level: KeyLevel = KeyLevel.STANDARD
    ) -> TokenOperationResult:
        return await self._client.endorse_token(token, key_level)

    async def cancel_token(self, token: Token) -> TokenOperationResult:
        return await self._client.cancel_token(token)

    async def replace_access_token(
        self,
        token_to_cancel: Token,
        builder: AccessTokenBuilder
    ) -> TokenOperationResult:
        """Cancel an access token and create a replacement in one step."""
        payload = builder.set_from(self.member_id).build()
        return await self._client.replace(token_to_cancel, payload)

    async def replace_and_endorse_access_token(
        self,
        token_to_cancel: Token,
        builder: AccessTokenBuilder
    ) -> TokenOperationResult:
        """Cancel an access token and create an endorsed replacement in one step."""
        payload = builder.set_from(self.member_id).build()
        return await self._client.replace_and_endorse(token_to_cancel, payload)

    async def redeem_token(
        self,
        token: Token,
        amount: Optional[Union[int, float, str, Decimal]] = None,
        currency: Optional[str] = None,
        description: Optional[str] = None,
        destination: Optional[TransferEndpoint] = None,
        ref_id: Optional[str] = None
    ) -> Transfer:
        """Redeem a transfer token.

        Args:
            token: Transfer token to redeem
            amount: Amount to transfer, defaults to the token's amount
            currency: Currency, defaults to the token's currency
            description: Transfer description, defaults to the token's
            destination: Where to send the money, if not fixed by the token
            ref_id: Idempotency id; a random one is used when omitted

        Returns:
            Transfer record
        """
        if not ref_id:
            logger.warning("refId is not set. A random ID will be used.")
            ref_id = generate_nonce()

        payload = TransferPayload(
            ref_id=ref_id,
            token_id=token.id,
            description=description if description is not None else token.payload.description
        )
        transfer_body = token.payload.transfer
        if amount is not None:
            payload.amount = Money(
                currency=currency or (transfer_body.currency if transfer_body else ""),
                value=format_amount(amount)
            )
        if destination is not None:
            payload.destinations = [destination]

        transfer = await self._client.create_transfer(payload)
        logger.info(f"Redeemed token {token.id}: transfer {transfer.id}")
        return transfer

    # Transfers

    async def get_transfer(self, transfer_id: str) -> Transfer:
        return await self._client.get_transfer(transfer_id)

    async def get_transfers(
        self,
        token_id: Optional[str],
        offset: Optional[str],
        limit: int
    ) -> PagedList[Transfer]:
        return await self._client.get_transfers(token_id, offset, limit)

    # Blobs

    async def create_blob(
        self,
        owner_id: str,
        type: str,
        name: str,
        data: bytes,
        access_mode: str = "DEFAULT"
    ) -> str:
        """Upload a blob; returns its id."""
        payload = BlobPayload.from_bytes(owner_id, type, name, data, access_mode)
        return await self._client.create_blob(payload)

    async def get_blob(self, blob_id: str) -> Blob:
        return await self._client.get_blob(blob_id)

    async def get_token_blob(self, token_id: str, blob_id: str) -> Blob:
        return await self._client.get_token_blob(token_id, blob_id)

    # Addresses and profile

    async def add_address(self, name: str, address: Address) -> AddressRecord:
        return await self._client.add_address(name, address)

    async def get_address(self, address_id: str) -> AddressRecord:
        return await self._client.get_address(address_id)

    async def get_addresses(self) -> List[AddressRecord]:
        return await self._client.get_addresses()

    async def delete_address(self, address_id: str) -> None:
        await self._client.delete_address(address_id)

    async def set_profile(self, profile: Profile) -> Profile:
        return await self._client.set_profile(profile)

    async def get_profile(self, member_id: str) -> Profile:
        return await self._client.get_profile(member_id)

    async def set_profile_picture(self, type: str, data: bytes) -> None:
        payload = BlobPayload.from_bytes(self.member_id, type, "profile", data, "PUBLIC")
        await self._client.set_profile_picture(payload)

    async def get_profile_picture(self, member_id: str, size: str = "ORIGINAL") -> Blob:
        return await self._client.get_profile_picture(member_id, size)

    # Notifications

    async def subscribe_to_notifications(
        self,
        handler: str,
        handler_instructions: Optional[Dict[str, str]] = None
    ) -> Subscriber:
        return await self._client.subscribe_to_notifications(handler, handler_instructions)

    async def get_subscribers(self) -> List[Subscriber]:
        return await self._client.get_subscribers()

    async def get_subscriber(self, subscriber_id: str) -> Subscriber:
        return await self._client.get_subscriber(subscriber_id)

    async def unsubscribe_from_notifications(self, subscriber_id: str) -> None:
        await self._client.unsubscribe_from_notifications(subscriber_id)

    async def get_notifications(self, offset: Optional[str], limit: int) -> PagedList[Notification]:
        return await self._client.get_notifications(offset, limit)

    async def get_notification(self, notification_id: str) -> Notification:
        return await self._client.get_notification(notification_id)

    async def trigger_token_step_up_notification(self, token_id: str) -> str:
        return await self._client.trigger_token_step_up_notification(token_id)

    async def trigger_balance_step_up_notification(self, account_ids: List[str]) -> str:
        return await self._client.trigger_balance_step_up_notification(account_ids)

    async def trigger_transaction_step_up_notification(self, account_id: str) -> str:
        return await self._client.trigger_transaction_step_up_notification(account_id)

    # Token requests

    async def store_token_request(self, token_request: TokenRequest) -> str:
        """Store a token request; returns the request id to redirect the user with."""
        return await self._client.store_token_request(
            token_request.request_payload,
            token_request.request_options
        )

    async def update_token_request(self, request_id: str, options: TokenRequestOptions) -> None:
        await self._client.update_token_request(request_id, options)

    async def sign_token_request_state(
        self,
        token_request_id: str,
        token_id: str,
        state: str
    ) -> Signature:
        return await self._client.sign_token_request_state(token_request_id, token_id, state)

    def __eq__(self, other):
        if not isinstance(other, MemberAsync):
            return NotImplemented
        return self.member_id == other.member_id

    def __hash__(self):
        return hash(self.member_id)

    def __repr__(self):
        return f"MemberAsync(member_id={self.member_id!r})"


class Member:
    """Blocking facade over ``MemberAsync``."""

    def __init__(self, member: MemberAsync):
        self._async = member

    def _run(self, coro):
        return self._async.runner.run(coro)

    def async_(self) -> MemberAsync:
        return self._async

    @property
    def member_id(self) -> str:
        return self._async.member_id

    @property
    def last_hash(self) -> Optional[str]:
        return self._async.last_hash

    def keys(self) -> List[Key]:
        return self._async.keys()

    def to_record(self) -> MemberRecord:
        return self._async.to_record()

    def for_access_token(self, token_id: str, customer_initiated: bool = False) -> 'Member':
        return Member(self._async.for_access_token(token_id, customer_initiated))

    def use_access_token(self, token_id: str, customer_initiated: bool = False) -> None:
        self._async.use_access_token(token_id, customer_initiated)

    def clear_access_token(self) -> None:
        self._async.clear_access_token()

    # Identity

    def first_alias(self) -> Optional[Alias]:
        return self._run(self._async.first_alias())

    def aliases(self) -> List[Alias]:
        return self._run(self._async.aliases())

    def add_alias(self, alias: Alias) -> None:
        self._run(self._async.add_alias(alias))

    def add_aliases(self, aliases: List[Alias]) -> None:
        self._run(self._async.add_aliases(aliases))

    def remove_alias(self, alias: Alias) -> None:
        self._run(self._async.remove_alias(alias))

    def remove_aliases(self, aliases: List[Alias]) -> None:
        self._run(self._async.remove_aliases(aliases))

    def retry_alias_verification(self, alias: Alias) -> str:
        return self._run(self._async.retry_alias_verification(alias))

    def verify_alias(self, verification_id: str, code: str) -> None:
        self._run(self._async.verify_alias(verification_id, code))

    def approve_key(self, key: Key) -> None:
        self._run(self._async.approve_key(key))

    def approve_keys(self, keys: List[Key]) -> None:
        self._run(self._async.approve_keys(keys))

    def remove_key(self, key_id: str) -> None:
        self._run(self._async.remove_key(key_id))

    def remove_keys(self, key_ids: List[str]) -> None:
        self._run(self._async.remove_keys(key_ids))

    def add_recovery_rule(self, rule: RecoveryRule) -> None:
        self._run(self._async.add_recovery_rule(rule))

    def use_default_recovery_rule(self) -> None:
        self._run(self._async.use_default_recovery_rule())

    def authorize_recovery(self, authorization: Dict[str, Any]) -> Signature:
        return self._run(self._async.authorize_recovery(authorization))

    def delete_member(self) -> None:
        self._run(self._async.delete_member())

    # Accounts

    def link_accounts(self, bank_authorization: Dict[str, Any]) -> List[Account]:
        return [a.sync() for a in self._run(self._async.link_accounts(bank_authorization))]

    def unlink_accounts(self, account_ids: List[str]) -> None:
        self._run(self._async.unlink_accounts(account_ids))

    def get_accounts(self) -> List[Account]:
        return [a.sync() for a in self._run(self._async.get_accounts())]

    def get_account(self, account_id: str) -> Account:
        return self._run(self._async.get_account(account_id)).sync()

    def get_default_account(self) -> Account:
        return self._run(self._async.get_default_account()).sync()

    def set_default_account(self, account_id: str) -> None:
        self._run(self._async.set_default_account(account_id))

    def get_balance(self, account_id: str, key_level: KeyLevel = KeyLevel.LOW) -> Balance:
        return self._run(self._async.get_balance(account_id, key_level))

    def get_balances(self, account_ids: List[str], key_level: KeyLevel = KeyLevel.LOW) -> List[Balance]:
        return self._run(self._async.get_balances(account_ids, key_level))

    def get_current_balance(self, account_id: str, key_level: KeyLevel = KeyLevel.LOW) -> Optional[Money]:
        return self._run(self._async.get_current_balance(account_id, key_level))

    def get_available_balance(self, account_id: str, key_level: KeyLevel = KeyLevel.LOW) -> Optional[Money]:
        return self._run(self._async.get_available_balance(account_id, key_level))

    def get_transaction(
        self,
        account_id: str,
        transaction_id: str,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> Transaction:
        return self._run(self._async.get_transaction(account_id, transaction_id, key_level))

    def get_transactions(
        self,
        account_id: str,
        offset: Optional[str],
        limit: int,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> PagedList[Transaction]:
        return self._run(self._async.get_transactions(account_id, offset, limit, key_level))

    def resolve_transfer_destinations(self, account_id: str) -> List[TransferEndpoint]:
        return self._run(self._async.resolve_transfer_destinations(account_id))

    def get_bank_info(self, bank_id: str) -> BankInfo:
        return self._run(self._async.get_bank_info(bank_id))

    # Tokens

    def create_transfer_token(self, amount: Amount, currency: str) -> TransferTokenBuilder:
        return self._run(self._async.create_transfer_token(amount, currency))

    def create_transfer_token_from_payload(
        self,
        payload: TokenPayload,
        token_request_id: Optional[str] = None
    ) -> Token:
        return self._run(self._async.create_transfer_token_from_payload(payload, token_request_id))

    def create_access_token(self, builder: AccessTokenBuilder) -> Token:
        return self._run(self._async.create_access_token(builder))

    def create_standing_order_token_builder(
        self,
        amount: Amount,
        currency: str,
        frequency: str,
        start_date: str,
        end_date: Optional[str] = None
    ) -> StandingOrderTokenBuilder:
        return self._run(self._async.create_standing_order_token_builder(
            amount, currency, frequency, start_date, end_date
        ))

    def create_standing_order_token(self, builder: StandingOrderTokenBuilder) -> Token:
        return self._run(self._async.create_standing_order_token(builder))

    def get_token(self, token_id: str) -> Token:
        return self._run(self._async.get_token(token_id))

    def get_transfer_tokens(self, offset: Optional[str], limit: int) -> PagedList[Token]:
        return self._run(self._async.get_transfer_tokens(offset, limit))

    def get_access_tokens(self, offset: Optional[str], limit: int) -> PagedList[Token]:
        return self._run(self._async.get_access_tokens(offset, limit))

    def get_active_access_token(self, to_member_id: str) -> Token:
        return self._run(self._async.get_active_access_token(to_member_id))

    def endorse_token(self, token: Token, key_level: KeyLevel = KeyLevel.STANDARD) -> TokenOperationResult:
        return self._run(self._async.endorse_token(token, key_level))

    def cancel_token(self, token: Token) -> TokenOperationResult:
        return self._run(self._async.cancel_token(token))

    def replace_access_token(self, token_to_cancel: Token, builder: AccessTokenBuilder) -> TokenOperationResult:
        return self._run(self._async.replace_access_token(token_to_cancel, builder))

    def replace_and_endorse_access_token(
        self,
        token_to_cancel: Token,
        builder: AccessTokenBuilder
    ) -> TokenOperationResult:
        return self._run(self._async.replace_and_endorse_access_token(token_to_cancel, builder))

    def redeem_token(
        self,
        token: Token,
        amount: Optional[Union[int, float, str, Decimal]] = None,
        currency: Optional[str] = None,
        description: Optional[str] = None,
        destination: Optional[TransferEndpoint] = None,
        ref_id: Optional[str] = None
    ) -> Transfer:
        return self._run(self._async.redeem_token(
            token, amount, currency, description, destination, ref_id
        ))

    # Transfers

    def get_transfer(self, transfer_id: str) -> Transfer:
        return self._run(self._async.get_transfer(transfer_id))

    def get_transfers(self, token_id: Optional[str], offset: Optional[str], limit: int) -> PagedList[Transfer]:
        return self._run(self._async.get_transfers(token_id, offset, limit))

    # Blobs

    def create_blob(self, owner_id: str, type: str, name: str, data: bytes, access_mode: str = "DEFAULT") -> str:
        return self._run(self._async.create_blob(owner_id, type, name, data, access_mode))

    def get_blob(self, blob_id: str) -> Blob:
        return self._run(self._async.get_blob(blob_id))

    def get_token_blob(self, token_id: str, blob_id: str) -> Blob:
        return self._run(self._async.get_token_blob(token_id, blob_id))

    # Addresses and profile

    def add_address(self, name: str, address: Address) -> AddressRecord:
        return self._run(self._async.add_address(name, address))

    def get_address(self, address_id: str) -> AddressRecord:
        return self._run(self._async.get_address(address_id))

    def get_addresses(self) -> List[AddressRecord]:
        return self._run(self._async.get_addresses())

    def delete_address(self, address_id: str) -> None:
        self._run(self._async.delete_address(address_id))

    def set_profile(self, profile: Profile) -> Profile:
        return self._run(self._async.set_profile(profile))

    def get_profile(self, member_id: str) -> Profile:
        return self._run(self._async.get_profile(member_id))

    def set_profile_picture(self, type: str, data: bytes) -> None:
        self._run(self._async.set_profile_picture(type, data))

    def get_profile_picture(self, member_id: str, size: str = "ORIGINAL") -> Blob:
        return self._run(self._async.get_profile_picture(member_id, size))

    # Notifications

    def subscribe_to_notifications(
        self,
        handler: str,
        handler_instructions: Optional[Dict[str, str]] = None
    ) -> Subscriber:
        return self._run(self._async.subscribe_to_notifications(handler, handler_instructions))

    def get_subscribers(self) -> List[Subscriber]:
        return self._run(self._async.get_subscribers())

    def get_subscriber(self, subscriber_id: str) -> Subscriber:
        return self._run(self._async.get_subscriber(subscriber_id))

    def unsubscribe_from_notifications(self, subscriber_id: str) -> None:
        self._run(self._async.unsubscribe_from_notifications(subscriber_id))

    def get_notifications(self, offset: Optional[str], limit: int) -> PagedList[Notification]:
        return self._run(self._async.get_notifications(offset, limit))

    def get_notification(self, notification_id: str) -> Notification:
        return self._run(self._async.get_notification(notification_id))

    def trigger_token_step_up_notification(self, token_id: str) -> str:
        return self._run(self._async.trigger_token_step_up_notification(token_id))

    def trigger_balance_step_up_notification(self, account_ids: List[str]) -> str:
        return self._run(self._async.trigger_balance_step_up_notification(account_ids))

    def trigger_transaction_step_up_notification(self, account_id: str) -> str:
        return self._run(self._async.trigger_transaction_step_up_notification(account_id))

    # Token requests

    def store_token_request(self, token_request: TokenRequest) -> str:
        return self._run(self._async.store_token_request(token_request))

    def update_token_request(self, request_id: str, options: TokenRequestOptions) -> None:
        self._run(self._async.update_token_request(request_id, options))

    def sign_token_request_state(self, token_request_id: str, token_id: str, state: str) -> Signature:
        return self._run(self._async.sign_token_request_state(token_request_id, token_id, state))

    def __eq__(self, other):
        if not isinstance(other, Member):
            return NotImplemented
        return self._async == other._async

    def __hash__(self):
        return hash(self._async)

    def __repr__(self):
        return f"Member(member_id={self.member_id!r})"
