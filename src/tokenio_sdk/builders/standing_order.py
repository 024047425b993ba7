"""Standing order token builder."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.exceptions import TokenArgumentsError, ValidationError
from ..core.types import (
    ActingAs,
    Alias,
    BankAccount,
    BankAccountToken,
    StandingOrderBody,
    StoredTokenRequest,
    TokenMember,
    TokenPayload,
    TransferDestination,
    TransferEndpoint,
    TransferInstructions,
    TransferMetadata,
)
from ..core.util import format_amount, generate_nonce
from .transfer import Amount, check_ref_id

if TYPE_CHECKING:
    from ..member import MemberAsync

logger = logging.getLogger(__name__)


class StandingOrderTokenBuilder:
    """Builds standing order (recurring transfer) token payloads."""

    def __init__(
        self,
        member: 'MemberAsync',
        amount: Amount,
        currency: str,
        frequency: str,
        start_date: str,
        end_date: Optional[str] = None
    ):
        """Initialize the builder.

        Args:
            member: Payer
            amount: Amount of each payment
            currency: Currency code
            frequency: ISO 20022 frequency code, e.g. "DAIL", "MNTH"
            start_date: First payment date, yyyy-MM-dd
            end_date: Last payment date, open-ended if omitted
        """
        self.payload = TokenPayload(
            version="1.0",
            from_=TokenMember(id=member.member_id),
            standing_order=StandingOrderBody(
                amount=format_amount(amount),
                currency=currency,
                frequency=frequency,
                start_date=start_date,
                end_date=end_date
            )
        )

    @classmethod
    def from_token_request(cls, token_request: StoredTokenRequest) -> 'StandingOrderTokenBuilder':
        """Builder for the token a stored standing order request describes.

        Raises:
            ValidationError: The request is not for a standing order, or has no payee
        """
        request = token_request.request_payload
        if request.body_case != 'standing_order_body':
            raise ValidationError(
                "Require token request with standing order body.",
                field='request_body',
                value=request.body_case
            )
        if request.to is None or not request.to.is_set:
            raise ValidationError("No payee on token request", field='to')

        options = token_request.request_options
        builder = cls.__new__(cls)
        builder.payload = TokenPayload(
            version="1.0",
            ref_id=request.ref_id,
            from_=options.from_,
            to=request.to,
            description=request.description,
            receipt_requested=options.receipt_requested,
            token_request_id=token_request.id,
            acting_as=request.acting_as,
            standing_order=request.standing_order_body.model_copy(deep=True)
        )
        return builder

    def _instructions(self) -> TransferInstructions:
        body = self.payload.standing_order
        if body.instructions is None:
            body.instructions = TransferInstructions()
        return body.instructions

    def _metadata(self) -> TransferMetadata:
        instructions = self._instructions()
        if instructions.metadata is None:
            instructions.metadata = TransferMetadata()
        return instructions.metadata

    def _to(self) -> TokenMember:
        if self.payload.to is None:
            self.payload.to = TokenMember()
        return self.payload.to

    def set_from_alias(self, alias: Alias) -> 'StandingOrderTokenBuilder':
        self.payload.from_.alias = alias
        return self

    def set_expires_at_ms(self, expires_at_ms: int) -> 'StandingOrderTokenBuilder':
        self.payload.expires_at_ms = expires_at_ms
        return self

    def set_effective_at_ms(self, effective_at_ms: int) -> 'StandingOrderTokenBuilder':
        self.payload.effective_at_ms = effective_at_ms
        return self

    def set_endorse_until_ms(self, endorse_until_ms: int) -> 'StandingOrderTokenBuilder':
        self.payload.endorse_until_ms = endorse_until_ms
        return self

    def set_description(self, description: str) -> 'StandingOrderTokenBuilder':
        self.payload.description = description
        return self

    def set_source(self, source: TransferEndpoint) -> 'StandingOrderTokenBuilder':
        self._instructions().source = source
        return self

    def set_account_id(self, account_id: str) -> 'StandingOrderTokenBuilder':
        """Fund the payments from one of the payer's linked accounts.

        Raises:
            TokenArgumentsError: The payload has no payer member id
        """
        if self.payload.from_ is None or not self.payload.from_.id:
            raise TokenArgumentsError(
                "Setting an account id requires a from member id",
                field='from'
            )
        return self.set_source(TransferEndpoint(account=BankAccount(
            token=BankAccountToken(member_id=self.payload.from_.id, account_id=account_id)
        )))

    def add_destination(self, destination: TransferDestination) -> 'StandingOrderTokenBuilder':
        self._instructions().transfer_destinations.append(destination)
        return self

    def set_to_alias(self, alias: Alias) -> 'StandingOrderTokenBuilder':
        self._to().alias = alias
        return self

    def set_to_member_id(self, member_id: str) -> 'StandingOrderTokenBuilder':
        self._to().id = member_id
        return self

    def set_ref_id(self, ref_id: str) -> 'StandingOrderTokenBuilder':
        self.payload.ref_id = check_ref_id(ref_id)
        return self

    def set_purpose_of_payment(self, purpose: str) -> 'StandingOrderTokenBuilder':
        self._metadata().transfer_purpose = purpose
        return self

    def set_provider_transfer_metadata(self, metadata: Dict[str, Any]) -> 'StandingOrderTokenBuilder':
        self._metadata().provider_transfer_metadata = metadata
        return self

    def set_acting_as(self, acting_as: ActingAs) -> 'StandingOrderTokenBuilder':
        self.payload.acting_as = acting_as
        return self

    def set_token_request_id(self, token_request_id: str) -> 'StandingOrderTokenBuilder':
        self.payload.token_request_id = token_request_id
        return self

    def set_receipt_requested(self, receipt_requested: bool) -> 'StandingOrderTokenBuilder':
        self.payload.receipt_requested = receipt_requested
        return self

    def build_payload(self) -> TokenPayload:
        if not self.payload.ref_id:
            logger.warning("refId is not set. A random ID will be used.")
            self.payload.ref_id = generate_nonce()
        return self.payload.model_copy(deep=True)
