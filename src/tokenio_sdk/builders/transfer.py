"""Transfer token builder."""

import asyncio
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from ..core.exceptions import TokenArgumentsError, ValidationError
from ..core.types import (
    ActingAs,
    Alias,
    Attachment,
    BankAccount,
    BankAccountCustom,
    BankAccountToken,
    BlobPayload,
    Pricing,
    Token,
    TokenAuthorization,
    TokenMember,
    TokenPayload,
    TransferBody,
    TransferDestination,
    TransferEndpoint,
    TransferInstructions,
    TransferMetadata,
)
from ..core.util import REF_ID_MAX_LENGTH, format_amount, generate_nonce

if TYPE_CHECKING:
    from ..member import MemberAsync

logger = logging.getLogger(__name__)

Amount = Union[int, float, str, Decimal]

# Account cases that can fund a transfer
SOURCE_ACCOUNT_CASES = ('token_authorization', 'token', 'bank', 'custom')


def check_ref_id(ref_id: str) -> str:
    """Raise if a ref id is too long for the gateway."""
    if len(ref_id) > REF_ID_MAX_LENGTH:
        raise ValidationError(
            f"The length of the refId is at most {REF_ID_MAX_LENGTH}, got: {len(ref_id)}",
            field='ref_id',
            value=ref_id
        )
    return ref_id


class TransferTokenBuilder:
    """Builds and creates transfer tokens.

    Example:
        token = await (await member.create_transfer_token(100, "EUR")) \\
            .set_account_id(account_id) \\
            .set_to_member_id(payee_id) \\
            .set_description("Book purchase") \\
            .execute_async()
    """

    def __init__(
        self,
        amount: Amount,
        currency: str,
        member: Optional['MemberAsync'] = None
    ):
        """Initialize the builder.

        Args:
            amount: Lifetime amount of the token
            currency: Currency code, e.g. "EUR"
            member: Payer; required for ``set_account_id`` and ``execute``
        """
        self.member = member
        self.token_request_id: Optional[str] = None
        self.blob_payloads: List[BlobPayload] = []
        self.payload = TokenPayload(
            version="1.0",
            transfer=TransferBody(
                currency=currency,
                lifetime_amount=format_amount(amount)
            )
        )
        if member is not None:
            self.payload.from_ = TokenMember(id=member.member_id)

    def _instructions(self) -> TransferInstructions:
        transfer = self.payload.transfer
        if transfer.instructions is None:
            transfer.instructions = TransferInstructions()
        return transfer.instructions

    def _to(self) -> TokenMember:
        if self.payload.to is None:
            self.payload.to = TokenMember()
        return self.payload.to

    def _redeemer(self) -> TokenMember:
        transfer = self.payload.transfer
        if transfer.redeemer is None:
            transfer.redeemer = TokenMember()
        return transfer.redeemer

    def _metadata(self) -> TransferMetadata:
        instructions = self._instructions()
        if instructions.metadata is None:
            instructions.metadata = TransferMetadata()
        return instructions.metadata

    def set_from_alias(self, alias: Alias) -> 'TransferTokenBuilder':
        if self.payload.from_ is None:
            self.payload.from_ = TokenMember()
        self.payload.from_.alias = alias
        return self

    def set_account_id(self, account_id: str) -> 'TransferTokenBuilder':
        """Fund the transfer from one of the payer's linked accounts."""
        if self.member is None:
            raise TokenArgumentsError(
                "Setting an account id requires a member",
                field='account_id',
                value=account_id
            )
        return self.set_source(TransferEndpoint(account=BankAccount(
            token=BankAccountToken(member_id=self.member.member_id, account_id=account_id)
        )))

    def set_bank_authorization(self, authorization: Dict[str, Any]) -> 'TransferTokenBuilder':
        """Fund the transfer from an account the bank authorized directly."""
        return self.set_source(TransferEndpoint(account=BankAccount(
            token_authorization=TokenAuthorization(authorization=authorization)
        )))

    def set_custom_authorization(self, bank_id: str, authorization: str) -> 'TransferTokenBuilder':
        return self.set_source(TransferEndpoint(account=BankAccount(
            custom=BankAccountCustom(bank_id=bank_id, payload=authorization)
        )))

    def set_source(self, source: TransferEndpoint) -> 'TransferTokenBuilder':
        self._instructions().source = source
        return self

    def add_destination(self, destination: TransferEndpoint) -> 'TransferTokenBuilder':
        self._instructions().destinations.append(destination)
        return self

    def add_transfer_destination(self, destination: TransferDestination) -> 'TransferTokenBuilder':
        self._instructions().transfer_destinations.append(destination)
        return self

    def set_expires_at_ms(self, expires_at_ms: int) -> 'TransferTokenBuilder':
        self.payload.expires_at_ms = expires_at_ms
        return self

    def set_effective_at_ms(self, effective_at_ms: int) -> 'TransferTokenBuilder':
        self.payload.effective_at_ms = effective_at_ms
        return self

    def set_endorse_until_ms(self, endorse_until_ms: int) -> 'TransferTokenBuilder':
        self.payload.endorse_until_ms = endorse_until_ms
        return self

    def set_charge_amount(self, charge_amount: Amount) -> 'TransferTokenBuilder':
        """Maximum amount per redemption."""
        self.payload.transfer.amount = format_amount(charge_amount)
        return self

    def set_description(self, description: str) -> 'TransferTokenBuilder':
        self.payload.description = description
        return self

    def set_to_alias(self, alias: Alias) -> 'TransferTokenBuilder':
        self._to().alias = alias
        self._redeemer().alias = alias
        return self

    def set_to_member_id(self, member_id: str) -> 'TransferTokenBuilder':
        self._to().id = member_id
        self._redeemer().id = member_id
        return self

    def set_redeemer_alias(self, alias: Alias) -> 'TransferTokenBuilder':
        return self.set_to_alias(alias)

    def set_redeemer_member_id(self, member_id: str) -> 'TransferTokenBuilder':
        return self.set_to_member_id(member_id)

    def add_attachment(self, attachment: Attachment) -> 'TransferTokenBuilder':
        self.payload.transfer.attachments.append(attachment)
        return self

    def add_attachment_data(
        self,
        owner_id: str,
        type: str,
        name: str,
        data: bytes
    ) -> 'TransferTokenBuilder':
        """Attach raw data; it is uploaded as a blob on ``execute``."""
        self.blob_payloads.append(BlobPayload.from_bytes(owner_id, type, name, data))
        return self

    def set_ref_id(self, ref_id: str) -> 'TransferTokenBuilder':
        self.payload.ref_id = check_ref_id(ref_id)
        return self

    def set_pricing(self, pricing: Pricing) -> 'TransferTokenBuilder':
        self.payload.transfer.pricing = pricing
        return self

    def set_purpose_of_payment(self, purpose: str) -> 'TransferTokenBuilder':
        self._metadata().transfer_purpose = purpose
        return self

    def set_acting_as(self, acting_as: ActingAs) -> 'TransferTokenBuilder':
        self.payload.acting_as = acting_as
        return self

    def set_token_request_id(self, token_request_id: str) -> 'TransferTokenBuilder':
        self.payload.token_request_id = token_request_id
        self.token_request_id = token_request_id
        return self

    def set_receipt_requested(self, receipt_requested: bool) -> 'TransferTokenBuilder':
        self.payload.receipt_requested = receipt_requested
        return self

    def build_payload(self) -> TokenPayload:
        """Validated copy of the payload.

        Raises:
            TokenArgumentsError: No payee is set
        """
        if self.payload.to is None or not self.payload.to.is_set:
            raise TokenArgumentsError("No payee on token request", field='to')
        return self.payload.model_copy(deep=True)

    def _check_executable(self) -> None:
        instructions = self.payload.transfer.instructions
        source = instructions.source if instructions else None
        account_case = source.account.account_case if source and source.account else None
        if account_case not in SOURCE_ACCOUNT_CASES:
            raise TokenArgumentsError("No source on token", field='source')

        redeemer = self.payload.transfer.redeemer
        if redeemer is None or not redeemer.is_set:
            raise TokenArgumentsError("No redeemer on token", field='redeemer')

        if self.member is None:
            raise TokenArgumentsError("Creating a token requires a member", field='member')

    async def execute_async(self) -> Token:
        """Upload attachments and create the token.

        Returns:
            The created transfer token

        Raises:
            TokenArgumentsError: No source, redeemer or member
            TransferTokenError: The gateway refused the token
        """
        self._check_executable()

        if not self.payload.ref_id:
            logger.warning("refId is not set. A random ID will be used.")
            self.payload.ref_id = generate_nonce()

        if self.blob_payloads:
            blob_ids = await asyncio.gather(*[
                self.member.create_blob(p.owner_id, p.type, p.name, p.content)
                for p in self.blob_payloads
            ])
            for blob_payload, blob_id in zip(self.blob_payloads, blob_ids):
                self.payload.transfer.attachments.append(Attachment(
                    type=blob_payload.type,
                    name=blob_payload.name,
                    blob_id=blob_id
                ))
            self.blob_payloads = []

        return await self.member.create_transfer_token_from_payload(
            self.build_payload(),
            self.token_request_id
        )

    def execute(self) -> Token:
        """Blocking version of ``execute_async``."""
        if self.member is None:
            raise TokenArgumentsError("Creating a token requires a member", field='member')
        return self.member.runner.run(self.execute_async())
