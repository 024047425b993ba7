"""Linked bank accounts of a member."""

import logging
from typing import TYPE_CHECKING, Optional

from .core.paging import PagedList
from .core.sync import LoopRunner
from .core.types import AccountRecord, Balance, KeyLevel, Money, Transaction
from .rpc.client import Client

if TYPE_CHECKING:
    from .member import Member, MemberAsync

logger = logging.getLogger(__name__)


class AccountAsync:
    """A bank account linked to a member; calls are coroutines."""

    def __init__(self, member: 'MemberAsync', record: AccountRecord, client: Client):
        self._member = member
        self._record = record
        self._client = client

    def sync(self) -> 'Account':
        """Blocking version of this account."""
        return Account(self)

    def member(self) -> 'MemberAsync':
        return self._member

    @property
    def id(self) -> str:
        return self._record.id

    @property
    def name(self) -> Optional[str]:
        return self._record.name

    @property
    def bank_id(self) -> Optional[str]:
        return self._record.bank_id

    @property
    def is_locked(self) -> bool:
        return self._record.locked

    def to_record(self) -> AccountRecord:
        return self._record.model_copy(deep=True)

    async def set_as_default(self) -> None:
        await self._client.set_default_account(self.id)

    async def is_default(self) -> bool:
        return await self._client.is_default(self.id)

    async def get_balance(self, key_level: KeyLevel = KeyLevel.LOW) -> Balance:
        """Look up the account balance.

        Args:
            key_level: Key level to sign the request with

        Returns:
            Current and available balance
        """
        return await self._client.get_balance(self.id, key_level)

    async def get_current_balance(self, key_level: KeyLevel = KeyLevel.LOW) -> Optional[Money]:
        return (await self.get_balance(key_level)).current

    async def get_available_balance(self, key_level: KeyLevel = KeyLevel.LOW) -> Optional[Money]:
        return (await self.get_balance(key_level)).available

    async def get_transaction(
        self,
        transaction_id: str,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> Transaction:
        return await self._client.get_transaction(self.id, transaction_id, key_level)

    async def get_transactions(
        self,
        offset: Optional[str],
        limit: int,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> PagedList[Transaction]:
        """Look up a page of transactions.

        Args:
            offset: Offset from a previous page, None for the first page
            limit: Maximum number of records
            key_level: Key level to sign the request with

        Returns:
            Transactions and the offset of the next page
        """
        return await self._client.get_transactions(self.id, offset, limit, key_level)

    def __eq__(self, other):
        if not isinstance(other, AccountAsync):
            return NotImplemented
        return self._record == other._record and self._member.member_id == other._member.member_id

    def __hash__(self):
        return hash((self._member.member_id, self._record.id))

    def __repr__(self):
        return f"AccountAsync(id={self.id!r}, name={self.name!r}, bank_id={self.bank_id!r})"


class Account:
    """Blocking facade over ``AccountAsync``."""

    def __init__(self, account: AccountAsync):
        self._async = account

    @property
    def _runner(self) -> LoopRunner:
        return self._async.member().runner

    def async_(self) -> AccountAsync:
        return self._async

    def member(self) -> 'Member':
        return self._async.member().sync()

    @property
    def id(self) -> str:
        return self._async.id

    @property
    def name(self) -> Optional[str]:
        return self._async.name

    @property
    def bank_id(self) -> Optional[str]:
        return self._async.bank_id

    @property
    def is_locked(self) -> bool:
        return self._async.is_locked

    def to_record(self) -> AccountRecord:
        return self._async.to_record()

    def set_as_default(self) -> None:
        self._runner.run(self._async.set_as_default())

    def is_default(self) -> bool:
        return self._runner.run(self._async.is_default())

    def get_balance(self, key_level: KeyLevel = KeyLevel.LOW) -> Balance:
        return self._runner.run(self._async.get_balance(key_level))

    def get_current_balance(self, key_level: KeyLevel = KeyLevel.LOW) -> Optional[Money]:
        return self._runner.run(self._async.get_current_balance(key_level))

    def get_available_balance(self, key_level: KeyLevel = KeyLevel.LOW) -> Optional[Money]:
        return self._runner.run(self._async.get_available_balance(key_level))

    def get_transaction(self, transaction_id: str, key_level: KeyLevel = KeyLevel.LOW) -> Transaction:
        return self._runner.run(self._async.get_transaction(transaction_id, key_level))

    def get_transactions(
        self,
        offset: Optional[str],
        limit: int,
        key_level: KeyLevel = KeyLevel.LOW
    ) -> PagedList[Transaction]:
        return self._runner.run(self._async.get_transactions(offset, limit, key_level))

    def __eq__(self, other):
        if not isinstance(other, Account):
            return NotImplemented
        return self._async == other._async

    def __hash__(self):
        return hash(self._async)

    def __repr__(self):
        return f"Account(id={self.id!r}, name={self.name!r}, bank_id={self.bank_id!r})"
