"""Token requests: descriptions of tokens a third party asks a user to create."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from ..core.exceptions import ValidationError
from ..core.types import (
    AccessRequestBody,
    ActingAs,
    Alias,
    StandingOrderBody,
    TokenMember,
    TokenRequestOptions,
    TokenRequestPayload,
    TransferDestination,
    TransferEndpoint,
    TransferInstructions,
    TransferRequestBody,
)
from ..core.util import format_amount

if TYPE_CHECKING:
    from ..builders import AccessTokenBuilder, TransferTokenBuilder
    from ..builders.transfer import Amount

# Resource grant fields mapped to the resource types a request asks for
_RESOURCE_TYPES = {
    'all_addresses': 'ADDRESSES',
    'address': 'ADDRESSES',
    'all_accounts': 'ACCOUNTS',
    'account': 'ACCOUNTS',
    'all_transactions': 'TRANSACTIONS',
    'transactions': 'TRANSACTIONS',
    'all_balances': 'BALANCES',
    'balance': 'BALANCES',
    'transfer_destinations': 'TRANSFER_DESTINATIONS',
}


@dataclass(frozen=True)
class TokenRequest:
    """Request payload and options, ready to store."""
    request_payload: TokenRequestPayload
    request_options: TokenRequestOptions

    @staticmethod
    def transfer_request(amount: 'Amount', currency: str) -> 'TokenRequestBuilder':
        return TokenRequestBuilder(TokenRequestPayload(transfer_body=TransferRequestBody(
            lifetime_amount=format_amount(amount),
            currency=currency
        )))

    @staticmethod
    def access_request(*resource_types: str) -> 'TokenRequestBuilder':
        """Request for access to resource types such as ACCOUNTS or BALANCES."""
        return TokenRequestBuilder(TokenRequestPayload(
            access_body=AccessRequestBody(type=list(resource_types))
        ))

    @staticmethod
    def standing_order_request(
        amount: 'Amount',
        currency: str,
        frequency: str,
        start_date: str,
        end_date: Optional[str] = None
    ) -> 'TokenRequestBuilder':
        return TokenRequestBuilder(TokenRequestPayload(standing_order_body=StandingOrderBody(
            amount=format_amount(amount),
            currency=currency,
            frequency=frequency,
            start_date=start_date,
            end_date=end_date
        )))

    @staticmethod
    def builder(payload: TokenRequestPayload) -> 'TokenRequestBuilder':
        return TokenRequestBuilder(payload)


class TokenRequestBuilder:
    """Fluent builder for ``TokenRequest``."""

    def __init__(self, payload: TokenRequestPayload):
        self.payload = payload.model_copy(deep=True)
        self.options = TokenRequestOptions()

    @classmethod
    def from_transfer_builder(cls, builder: 'TransferTokenBuilder') -> 'TokenRequestBuilder':
        """Request for the token a transfer builder describes."""
        token = builder.payload
        transfer = token.transfer
        request = cls(TokenRequestPayload(
            ref_id=token.ref_id,
            to=token.to,
            acting_as=token.acting_as,
            description=token.description,
            transfer_body=TransferRequestBody(
                lifetime_amount=transfer.lifetime_amount,
                currency=transfer.currency,
                amount=transfer.amount,
                instructions=transfer.instructions
            )
        ))
        if token.from_ is not None:
            request.set_from(token.from_)
        if token.receipt_requested is not None:
            request.set_receipt_requested(token.receipt_requested)
        return request

    @classmethod
    def from_access_builder(cls, builder: 'AccessTokenBuilder') -> 'TokenRequestBuilder':
        """Request for the resource types an access builder grants."""
        token = builder.payload
        types: List[str] = []
        for resource in token.access.resources if token.access else []:
            for field, resource_type in _RESOURCE_TYPES.items():
                if getattr(resource, field) is not None and resource_type not in types:
                    types.append(resource_type)
        request = cls(TokenRequestPayload(
            ref_id=token.ref_id,
            to=token.to,
            acting_as=token.acting_as,
            description=token.description,
            access_body=AccessRequestBody(type=types)
        ))
        if token.from_ is not None:
            request.set_from(token.from_)
        return request

    def _instructions(self) -> TransferInstructions:
        body = self.payload.transfer_body or self.payload.standing_order_body
        if body is None:
            raise ValidationError(
                "Transfer instructions only apply to transfer and standing order requests",
                field='request_body',
                value=self.payload.body_case
            )
        if body.instructions is None:
            body.instructions = TransferInstructions()
        return body.instructions

    # Payload

    def set_to_member_id(self, member_id: str) -> 'TokenRequestBuilder':
        self.payload.to = TokenMember(id=member_id)
        return self

    def set_to_alias(self, alias: Alias) -> 'TokenRequestBuilder':
        self.payload.to = TokenMember(alias=alias)
        return self

    def set_redirect_url(self, redirect_url: str) -> 'TokenRequestBuilder':
        self.payload.redirect_url = redirect_url
        return self

    def set_ref_id(self, ref_id: str) -> 'TokenRequestBuilder':
        self.payload.ref_id = ref_id
        return self

    def set_user_ref_id(self, user_ref_id: str) -> 'TokenRequestBuilder':
        self.payload.user_ref_id = user_ref_id
        return self

    def set_customization_id(self, customization_id: str) -> 'TokenRequestBuilder':
        self.payload.customization_id = customization_id
        return self

    def set_description(self, description: str) -> 'TokenRequestBuilder':
        self.payload.description = description
        return self

    def set_callback_state(self, state: str) -> 'TokenRequestBuilder':
        self.payload.callback_state = state
        return self

    def set_acting_as(self, acting_as: ActingAs) -> 'TokenRequestBuilder':
        self.payload.acting_as = acting_as
        return self

    def set_destination_country(self, country: str) -> 'TokenRequestBuilder':
        self.payload.destination_country = country
        return self

    def set_charge_amount(self, amount: 'Amount') -> 'TokenRequestBuilder':
        if self.payload.transfer_body is None:
            raise ValidationError(
                "Charge amount only applies to transfer requests",
                field='request_body',
                value=self.payload.body_case
            )
        self.payload.transfer_body.amount = format_amount(amount)
        return self

    def add_destination(self, destination: TransferEndpoint) -> 'TokenRequestBuilder':
        self._instructions().destinations.append(destination)
        return self

    def add_transfer_destination(self, destination: TransferDestination) -> 'TokenRequestBuilder':
        self._instructions().transfer_destinations.append(destination)
        return self

    # Options

    def set_bank_id(self, bank_id: str) -> 'TokenRequestBuilder':
        self.options.bank_id = bank_id
        return self

    def set_from(self, member: TokenMember) -> 'TokenRequestBuilder':
        self.options.from_ = member
        return self

    def set_from_member_id(self, member_id: str) -> 'TokenRequestBuilder':
        return self.set_from(TokenMember(id=member_id))

    def set_from_alias(self, alias: Alias) -> 'TokenRequestBuilder':
        return self.set_from(TokenMember(alias=alias))

    def set_source_account(self, source_account_id: str) -> 'TokenRequestBuilder':
        self.options.source_account_id = source_account_id
        return self

    def set_receipt_requested(self, receipt_requested: bool) -> 'TokenRequestBuilder':
        self.options.receipt_requested = receipt_requested
        return self

    def set_token_request_options(self, options: TokenRequestOptions) -> 'TokenRequestBuilder':
        self.options = options.model_copy(deep=True)
        return self

    def build(self) -> TokenRequest:
        return TokenRequest(
            request_payload=self.payload.model_copy(deep=True),
            request_options=self.options.model_copy(deep=True)
        )
