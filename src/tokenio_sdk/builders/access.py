"""Access token builder."""

from typing import Optional, Union

from ..core.exceptions import TokenArgumentsError, ValidationError
from ..core.types import (
    AccessBody,
    AccountResource,
    ActingAs,
    AddressResource,
    Alias,
    Empty,
    Resource,
    StoredTokenRequest,
    TokenMember,
    TokenPayload,
)
from ..core.util import generate_nonce


class AccessTokenBuilder:
    """Builds access token payloads.

    Create with ``AccessTokenBuilder.create(redeemer)``, add resource grants,
    then pass to ``MemberAsync.create_access_token``.
    """

    def __init__(self, payload: Optional[TokenPayload] = None, token_request_id: Optional[str] = None):
        if payload is None:
            payload = TokenPayload(version="1.0", ref_id=generate_nonce(), access=AccessBody())
        self.payload = payload
        self.token_request_id = token_request_id

    @classmethod
    def create(cls, redeemer: Union[str, Alias]) -> 'AccessTokenBuilder':
        """Builder for a token the redeemer (member id or alias) can use."""
        return cls().set_to(redeemer)

    @classmethod
    def from_payload(cls, payload: TokenPayload) -> 'AccessTokenBuilder':
        """Builder starting from an existing token's terms, without its grants."""
        copied = payload.model_copy(deep=True)
        copied.access = AccessBody()
        copied.ref_id = generate_nonce()
        return cls(copied)

    @classmethod
    def from_token_request(cls, token_request: StoredTokenRequest) -> 'AccessTokenBuilder':
        """Builder for the token a stored access token request describes.

        Raises:
            ValidationError: The request is not for an access token
        """
        request = token_request.request_payload
        if request.body_case != 'access_body':
            raise ValidationError(
                "Require token request with access body.",
                field='request_body',
                value=request.body_case
            )
        options = token_request.request_options
        payload = TokenPayload(
            version="1.0",
            ref_id=request.ref_id,
            from_=options.from_,
            to=request.to,
            acting_as=request.acting_as,
            description=request.description,
            receipt_requested=options.receipt_requested,
            access=AccessBody()
        )
        return cls(payload, token_request.id)

    def _add(self, resource: Resource) -> 'AccessTokenBuilder':
        if self.payload.access is None:
            self.payload.access = AccessBody()
        self.payload.access.resources.append(resource)
        return self

    def for_address(self, address_id: str) -> 'AccessTokenBuilder':
        return self._add(Resource(address=AddressResource(address_id=address_id)))

    def for_account(self, account_id: str) -> 'AccessTokenBuilder':
        return self._add(Resource(account=AccountResource(account_id=account_id)))

    def for_account_transactions(self, account_id: str) -> 'AccessTokenBuilder':
        return self._add(Resource(transactions=AccountResource(account_id=account_id)))

    def for_account_balances(self, account_id: str) -> 'AccessTokenBuilder':
        return self._add(Resource(balance=AccountResource(account_id=account_id)))

    def for_transfer_destinations(self, account_id: str) -> 'AccessTokenBuilder':
        return self._add(Resource(transfer_destinations=AccountResource(account_id=account_id)))

    def for_all_addresses(self) -> 'AccessTokenBuilder':
        return self._add(Resource(all_addresses=Empty()))

    def for_all_accounts(self) -> 'AccessTokenBuilder':
        return self._add(Resource(all_accounts=Empty()))

    def for_all_transactions(self) -> 'AccessTokenBuilder':
        return self._add(Resource(all_transactions=Empty()))

    def for_all_balances(self) -> 'AccessTokenBuilder':
        return self._add(Resource(all_balances=Empty()))

    def for_all(self) -> 'AccessTokenBuilder':
        """Grant every wildcard resource."""
        return self.for_all_addresses().for_all_accounts().for_all_transactions().for_all_balances()

    def set_from(self, member_id: str) -> 'AccessTokenBuilder':
        self.payload.from_ = TokenMember(id=member_id)
        return self

    def set_to(self, redeemer: Union[str, Alias]) -> 'AccessTokenBuilder':
        if isinstance(redeemer, Alias):
            self.payload.to = TokenMember(alias=redeemer)
        else:
            self.payload.to = TokenMember(id=redeemer)
        return self

    def set_acting_as(self, acting_as: ActingAs) -> 'AccessTokenBuilder':
        self.payload.acting_as = acting_as
        return self

    def build(self) -> TokenPayload:
        """Validated copy of the payload.

        Raises:
            TokenArgumentsError: No resource is granted
        """
        if self.payload.access is None or not self.payload.access.resources:
            raise TokenArgumentsError(
                "At least one access resource must be set",
                field='resources'
            )
        return self.payload.model_copy(deep=True)
