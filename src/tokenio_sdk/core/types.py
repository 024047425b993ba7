"""Core type definitions for the Token SDK.

The gateway owns these messages; the models below mirror the subset the SDK
populates or reads. They serialize to the gateway's JSON form: camelCase
field names, unset fields omitted, unknown fields ignored on input.
"""

import base64
from enum import Enum
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ProtoModel(BaseModel):
    """Base class for gateway messages."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize to the gateway JSON form."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    @classmethod
    def from_json_dict(cls, data: Optional[Dict[str, Any]]):
        """Parse the gateway JSON form."""
        return cls.model_validate(data or {})


class Empty(ProtoModel):
    """Marker message with no fields."""
    pass


class AliasType(str, Enum):
    """Alias types."""
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    DOMAIN = "DOMAIN"
    USERNAME = "USERNAME"
    BANK = "BANK"
    CUSTOM = "CUSTOM"
    EIDAS = "EIDAS"


class KeyLevel(str, Enum):
    """Key privilege levels, PRIVILEGED being the strongest."""
    PRIVILEGED = "PRIVILEGED"
    STANDARD = "STANDARD"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return _KEY_LEVEL_RANKS[self]

    def more_privileged(self) -> Optional['KeyLevel']:
        """The next stronger level, or None for PRIVILEGED."""
        for level, rank in _KEY_LEVEL_RANKS.items():
            if rank == self.rank - 1:
                return level
        return None


_KEY_LEVEL_RANKS = {
    KeyLevel.PRIVILEGED: 1,
    KeyLevel.STANDARD: 2,
    KeyLevel.LOW: 3,
}


class TokenType(str, Enum):
    """Token kinds for list queries."""
    TRANSFER = "TRANSFER"
    ACCESS = "ACCESS"


class Alias(ProtoModel):
    """Human-readable member identifier."""
    type: AliasType
    value: str
    realm: Optional[str] = None

    @field_validator('value')
    @classmethod
    def validate_value(cls, v):
        if not v:
            raise ValueError('Alias value must not be empty')
        return v


class TokenMember(ProtoModel):
    """Party of a token, identified by member id and/or alias."""
    id: Optional[str] = None
    alias: Optional[Alias] = None

    @property
    def is_set(self) -> bool:
        return bool(self.id) or self.alias is not None


class Key(ProtoModel):
    """Public key registered for a member."""
    id: str
    public_key: str
    level: KeyLevel
    algorithm: str = "ED25519"
    expires_at_ms: Optional[int] = None


class Signature(ProtoModel):
    """Signature made with a member key."""
    member_id: Optional[str] = None
    key_id: str
    signature: str


class RecoveryRule(ProtoModel):
    """Agents allowed to authorize member recovery."""
    primary_agent: str
    secondary_agents: List[str] = Field(default_factory=list)


class MemberRecord(ProtoModel):
    """Member as stored by the gateway."""
    id: str
    last_hash: Optional[str] = None
    alias_hashes: List[str] = Field(default_factory=list)
    keys: List[Key] = Field(default_factory=list)
    recovery_rules: List[RecoveryRule] = Field(default_factory=list)


class MemberAddKeyOperation(ProtoModel):
    key: Key


class MemberRemoveKeyOperation(ProtoModel):
    key_id: str


class MemberAliasOperation(ProtoModel):
    alias_hash: str
    realm: Optional[str] = None


class MemberRecoveryRulesOperation(ProtoModel):
    recovery_rule: RecoveryRule


class MemberRecoveryOperation(ProtoModel):
    """Recovery agent authorization to add a key."""
    authorization: Dict[str, Any]
    agent_signature: Optional[Signature] = None


class MemberOperation(ProtoModel):
    """Single change applied by a member update."""
    add_key: Optional[MemberAddKeyOperation] = None
    remove_key: Optional[MemberRemoveKeyOperation] = None
    add_alias: Optional[MemberAliasOperation] = None
    remove_alias: Optional[MemberAliasOperation] = None
    recovery_rules: Optional[MemberRecoveryRulesOperation] = None
    recover: Optional[MemberRecoveryOperation] = None


class AddAliasMetadata(ProtoModel):
    alias_hash: str
    alias: Alias


class MemberOperationMetadata(ProtoModel):
    add_alias_metadata: AddAliasMetadata


class MemberUpdate(ProtoModel):
    """Signed unit of change to a member, chained by previous hash."""
    member_id: str
    prev_hash: Optional[str] = None
    operations: List[MemberOperation] = Field(default_factory=list)


class DeviceInfo(ProtoModel):
    """Keys generated for a member on a new device."""
    member_id: str
    keys: List[Key] = Field(default_factory=list)


class Money(ProtoModel):
    currency: str
    value: str


class Balance(ProtoModel):
    account_id: str
    current: Optional[Money] = None
    available: Optional[Money] = None
    updated_at_ms: Optional[int] = None


class AccountRecord(ProtoModel):
    """Bank account linked to a member."""
    id: str
    name: Optional[str] = None
    bank_id: Optional[str] = None
    locked: bool = False


class BankAccountToken(ProtoModel):
    member_id: str
    account_id: str


class BankAccountBank(ProtoModel):
    bank_id: Optional[str] = None
    account_id: str


class BankAccountCustom(ProtoModel):
    bank_id: str
    payload: str


class BankAccountIban(ProtoModel):
    iban: str
    bic: Optional[str] = None


class TokenAuthorization(ProtoModel):
    authorization: Dict[str, Any]


class BankAccount(ProtoModel):
    """Account reference; exactly one of the fields is expected to be set."""
    token: Optional[BankAccountToken] = None
    token_authorization: Optional[TokenAuthorization] = None
    bank: Optional[BankAccountBank] = None
    custom: Optional[BankAccountCustom] = None
    iban: Optional[BankAccountIban] = None

    @property
    def account_case(self) -> Optional[str]:
        for name in ('token', 'token_authorization', 'bank', 'custom', 'iban'):
            if getattr(self, name) is not None:
                return name
        return None


class CustomerData(ProtoModel):
    legal_names: List[str] = Field(default_factory=list)
    address: Optional[Dict[str, Any]] = None


class TransferEndpoint(ProtoModel):
    """Source or destination of a transfer."""
    account: Optional[BankAccount] = None
    bank_id: Optional[str] = None
    customer_data: Optional[CustomerData] = None


class TokenDestination(ProtoModel):
    account_id: str
    member_id: Optional[str] = None


class SepaDestination(ProtoModel):
    iban: str
    bic: Optional[str] = None


class FasterPaymentsDestination(ProtoModel):
    sort_code: str
    account_number: str


class TransferDestination(ProtoModel):
    """Rail-specific destination of a transfer."""
    token: Optional[TokenDestination] = None
    sepa: Optional[SepaDestination] = None
    faster_payments: Optional[FasterPaymentsDestination] = None
    custom: Optional[BankAccountCustom] = None
    customer_data: Optional[CustomerData] = None


class TransferMetadata(ProtoModel):
    transfer_purpose: Optional[str] = None
    provider_transfer_metadata: Optional[Dict[str, Any]] = None


class TransferInstructions(ProtoModel):
    source: Optional[TransferEndpoint] = None
    destinations: List[TransferEndpoint] = Field(default_factory=list)
    transfer_destinations: List[TransferDestination] = Field(default_factory=list)
    metadata: Optional[TransferMetadata] = None


class Attachment(ProtoModel):
    """Reference to an uploaded blob."""
    type: str
    name: str
    blob_id: str


class Pricing(ProtoModel):
    source_quote: Optional[Dict[str, Any]] = None
    destination_quote: Optional[Dict[str, Any]] = None
    instructions: Optional[Dict[str, Any]] = None


class TransferBody(ProtoModel):
    redeemer: Optional[TokenMember] = None
    instructions: Optional[TransferInstructions] = None
    currency: str
    lifetime_amount: str
    amount: Optional[str] = None
    attachments: List[Attachment] = Field(default_factory=list)
    pricing: Optional[Pricing] = None


class AddressResource(ProtoModel):
    address_id: str


class AccountResource(ProtoModel):
    account_id: str


class Resource(ProtoModel):
    """Single access grant; exactly one field is set."""
    all_addresses: Optional[Empty] = None
    address: Optional[AddressResource] = None
    all_accounts: Optional[Empty] = None
    account: Optional[AccountResource] = None
    all_transactions: Optional[Empty] = None
    transactions: Optional[AccountResource] = None
    all_balances: Optional[Empty] = None
    balance: Optional[AccountResource] = None
    transfer_destinations: Optional[AccountResource] = None


class AccessBody(ProtoModel):
    resources: List[Resource] = Field(default_factory=list)


class StandingOrderBody(ProtoModel):
    amount: str
    currency: str
    frequency: str
    start_date: str
    end_date: Optional[str] = None
    instructions: Optional[TransferInstructions] = None


class ActingAs(ProtoModel):
    """Party on whose behalf the token is requested."""
    display_name: Optional[str] = None
    ref_id: Optional[str] = None
    logo_url: Optional[str] = None
    secondary_name: Optional[str] = None


class TokenPayload(ProtoModel):
    """Terms of a token, signed by its endorsers."""
    version: str = "1.0"
    ref_id: Optional[str] = None
    issuer: Optional[TokenMember] = None
    from_: Optional[TokenMember] = Field(default=None, alias="from")
    to: Optional[TokenMember] = None
    expires_at_ms: Optional[int] = None
    effective_at_ms: Optional[int] = None
    endorse_until_ms: Optional[int] = None
    description: Optional[str] = None
    acting_as: Optional[ActingAs] = None
    receipt_requested: Optional[bool] = None
    token_request_id: Optional[str] = None
    transfer: Optional[TransferBody] = None
    access: Optional[AccessBody] = None
    standing_order: Optional[StandingOrderBody] = None

    @property
    def body_case(self) -> Optional[str]:
        for name in ('transfer', 'access', 'standing_order'):
            if getattr(self, name) is not None:
                return name
        return None


class TokenSignature(ProtoModel):
    action: str
    signature: Signature


class Token(ProtoModel):
    id: str
    payload: TokenPayload
    payload_signatures: List[TokenSignature] = Field(default_factory=list)
    replaced_by_token_id: Optional[str] = None


class TokenOperationResult(ProtoModel):
    """Outcome of endorse/cancel/replace; status is e.g. SUCCESS or MORE_SIGNATURES_NEEDED."""
    token: Optional[Token] = None
    status: str


class TransferPayload(ProtoModel):
    ref_id: str
    token_id: str
    amount: Optional[Money] = None
    destinations: List[TransferEndpoint] = Field(default_factory=list)
    description: Optional[str] = None


class Transfer(ProtoModel):
    id: str
    transaction_id: Optional[str] = None
    created_at_ms: Optional[int] = None
    payload: TransferPayload
    payload_signatures: List[Signature] = Field(default_factory=list)
    status: Optional[str] = None


class Transaction(ProtoModel):
    id: str
    type: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[Money] = None
    description: Optional[str] = None
    token_id: Optional[str] = None
    token_transfer_id: Optional[str] = None
    created_at_ms: Optional[int] = None


class Notification(ProtoModel):
    id: str
    subscriber_id: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    status: Optional[str] = None


class Subscriber(ProtoModel):
    id: str
    handler: Optional[str] = None
    handler_instructions: Dict[str, str] = Field(default_factory=dict)


class Address(ProtoModel):
    house_number: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None


class AddressRecord(ProtoModel):
    id: str
    name: str
    address: Address
    address_signature: Optional[Signature] = None


class Profile(ProtoModel):
    display_name_first: Optional[str] = None
    display_name_last: Optional[str] = None
    original_picture_id: Optional[str] = None


class Bank(ProtoModel):
    id: str
    name: str
    logo_uri: Optional[str] = None
    country: Optional[str] = None


class BankInfo(ProtoModel):
    """Linking details of a bank."""
    link_uri: Optional[str] = None
    redirect_uri_regex: Optional[str] = None
    bank_linking_uri: Optional[str] = None
    realm: Optional[str] = None
    custom_alias_label: Optional[str] = None


class BlobPayload(ProtoModel):
    """Blob contents; data is base64 encoded on the wire."""
    owner_id: str
    type: str
    name: str
    data: str
    access_mode: str = "DEFAULT"

    @classmethod
    def from_bytes(
        cls,
        owner_id: str,
        type: str,
        name: str,
        data: bytes,
        access_mode: str = "DEFAULT"
    ) -> 'BlobPayload':
        return cls(
            owner_id=owner_id,
            type=type,
            name=name,
            data=base64.b64encode(data).decode('ascii'),
            access_mode=access_mode
        )

    @property
    def content(self) -> bytes:
        return base64.b64decode(self.data)


class Blob(ProtoModel):
    id: str
    payload: BlobPayload


class TokenRequestOptions(ProtoModel):
    bank_id: Optional[str] = None
    from_: Optional[TokenMember] = Field(default=None, alias="from")
    source_account_id: Optional[str] = None
    receipt_requested: Optional[bool] = None


class TransferRequestBody(ProtoModel):
    lifetime_amount: str
    currency: str
    amount: Optional[str] = None
    instructions: Optional[TransferInstructions] = None


class AccessRequestBody(ProtoModel):
    """Resource types the requester wants access to, e.g. ACCOUNTS, BALANCES."""
    type: List[str] = Field(default_factory=list)


class TokenRequestPayload(ProtoModel):
    """Description of a token a third party asks a user to create."""
    user_ref_id: Optional[str] = None
    customization_id: Optional[str] = None
    redirect_url: Optional[str] = None
    ref_id: Optional[str] = None
    to: Optional[TokenMember] = None
    acting_as: Optional[ActingAs] = None
    description: Optional[str] = None
    callback_state: Optional[str] = None
    destination_country: Optional[str] = None
    transfer_body: Optional[TransferRequestBody] = None
    access_body: Optional[AccessRequestBody] = None
    standing_order_body: Optional[StandingOrderBody] = None

    @property
    def body_case(self) -> Optional[str]:
        for name in ('transfer_body', 'access_body', 'standing_order_body'):
            if getattr(self, name) is not None:
                return name
        return None


class StoredTokenRequest(ProtoModel):
    """Token request as stored by the gateway."""
    id: str
    request_payload: TokenRequestPayload
    request_options: TokenRequestOptions = Field(default_factory=TokenRequestOptions)


class RequestSignaturePayload(ProtoModel):
    """Payload signed by the token member on a token request callback."""
    token_id: str
    state: str
