"""Shared helpers: nonces, hashing, alias normalization, query strings."""

import base64
import hashlib
import json
import secrets
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Union
from urllib.parse import parse_qsl, quote_plus, unquote_plus

from .exceptions import ValidationError
from .types import (
    ProtoModel,
    Alias,
    AliasType,
    Key,
    MemberOperation,
    MemberAddKeyOperation,
    MemberRemoveKeyOperation,
    MemberAliasOperation,
    MemberOperationMetadata,
    AddAliasMetadata,
    MemberRecoveryRulesOperation,
    RecoveryRule,
    TokenPayload,
)

NONCE_NUM_BYTES = 20
REF_ID_MAX_LENGTH = 18

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def _base58(data: bytes) -> str:
    num = int.from_bytes(data, 'big')
    encoded = ''
    while num > 0:
        num, rem = divmod(num, 58)
        encoded = _BASE58_ALPHABET[rem] + encoded
    leading_zeros = len(data) - len(data.lstrip(b'\x00'))
    return _BASE58_ALPHABET[0] * leading_zeros + encoded


def generate_nonce() -> str:
    """Random human-readable id, used for ref ids and CSRF tokens."""
    return _base58(secrets.token_bytes(NONCE_NUM_BYTES))


def canonical_json(value: Union[ProtoModel, Dict[str, Any]]) -> str:
    """Deterministic JSON encoding used for hashing and signing."""
    if isinstance(value, ProtoModel):
        value = value.to_json_dict()
    return json.dumps(value, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def hash_string(value: str) -> str:
    """Hex SHA-256 of a string as ASCII; other characters hash as "?"."""
    return hashlib.sha256(value.encode('ascii', errors='replace')).hexdigest()


def hash_and_serialize_json(value: Union[ProtoModel, Dict[str, Any]]) -> str:
    digest = hashlib.sha256(canonical_json(value).encode('utf-8')).digest()
    return base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')


def normalize_alias(alias: Alias) -> Alias:
    """Lower-case and trim email and domain aliases."""
    if alias.type in (AliasType.EMAIL, AliasType.DOMAIN):
        return alias.model_copy(update={'value': alias.value.lower().strip()})
    return alias.model_copy()


def hash_alias(alias: Alias) -> str:
    if alias.type == AliasType.USERNAME:
        return alias.value
    return hash_and_serialize_json(alias)


def format_amount(amount: Union[int, float, str, Decimal]) -> str:
    """Decimal string form of an amount, e.g. 100 -> '100.0'.

    Raises:
        ValidationError: Not a finite decimal number
    """
    try:
        value = Decimal(amount if isinstance(amount, str) else str(amount))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {amount!r}", field='amount', value=amount)
    if not value.is_finite():
        raise ValidationError(f"Amount must be finite: {amount!r}", field='amount', value=amount)

    if isinstance(amount, str):
        return amount
    text = str(value)
    return text if '.' in text or 'E' in text else f"{text}.0"


def url_encode(value: str) -> str:
    return quote_plus(value, safe='')


def url_decode(value: str) -> str:
    return unquote_plus(value)


def parse_query_string(query: str) -> Dict[str, str]:
    """Parse a query string into a dict, decoding each value once."""
    return dict(parse_qsl(query.lstrip('?'), keep_blank_values=True))


def token_action(payload: TokenPayload, action: str) -> str:
    """String a member signs to endorse or cancel a token."""
    return f"{canonical_json(payload)}.{action.lower()}"


def to_add_key_operation(key: Key) -> MemberOperation:
    return MemberOperation(add_key=MemberAddKeyOperation(key=key))


def to_remove_key_operation(key_id: str) -> MemberOperation:
    return MemberOperation(remove_key=MemberRemoveKeyOperation(key_id=key_id))


def to_add_alias_operation(alias: Alias) -> MemberOperation:
    return MemberOperation(add_alias=MemberAliasOperation(
        alias_hash=hash_alias(alias),
        realm=alias.realm
    ))


def to_remove_alias_operation(alias: Alias) -> MemberOperation:
    return MemberOperation(remove_alias=MemberAliasOperation(
        alias_hash=hash_alias(alias),
        realm=alias.realm
    ))


def to_add_alias_operation_metadata(alias: Alias) -> MemberOperationMetadata:
    return MemberOperationMetadata(add_alias_metadata=AddAliasMetadata(
        alias_hash=hash_alias(alias),
        alias=alias
    ))


def to_recovery_rule_operation(rule: RecoveryRule) -> MemberOperation:
    return MemberOperation(recovery_rules=MemberRecoveryRulesOperation(recovery_rule=rule))
