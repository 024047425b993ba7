"""Unit tests for shared helpers."""

import json
from decimal import Decimal

import pytest

from tokenio_sdk.core.exceptions import ValidationError
from tokenio_sdk.core.types import Alias, AliasType, MemberOperation, TokenPayload
from tokenio_sdk.core.util import (
    REF_ID_MAX_LENGTH,
    canonical_json,
    format_amount,
    generate_nonce,
    hash_alias,
    hash_string,
    normalize_alias,
    parse_query_string,
    to_add_alias_operation,
    to_add_alias_operation_metadata,
    token_action,
    url_encode,
)


class TestNonce:
    """Test nonce generation."""

    def test_unique(self):
        """Test nonces don't repeat."""
        assert len({generate_nonce() for _ in range(100)}) == 100

    def test_base58(self):
        """Test nonces avoid ambiguous characters."""
        nonce = generate_nonce()
        assert nonce
        assert not set(nonce) & set("0OIl+/=")


class TestFormatAmount:
    """Test amount formatting."""

    @pytest.mark.parametrize("amount,expected", [
        (100, "100.0"),
        (10.5, "10.5"),
        (Decimal("0.01"), "0.01"),
        ("42.00", "42.00"),
    ])
    def test_format(self, amount, expected):
        assert format_amount(amount) == expected

    def test_invalid_string(self):
        """Test non-numeric strings are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            format_amount("ten")
        assert exc_info.value.field == 'amount'
        assert exc_info.value.value == "ten"

    @pytest.mark.parametrize("amount", [
        float('nan'),
        float('inf'),
        "NaN",
        "Infinity",
        "-inf",
        Decimal('Infinity'),
    ])
    def test_non_finite(self, amount):
        """Test NaN and infinities are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            format_amount(amount)
        assert exc_info.value.field == 'amount'


class TestAliases:
    """Test alias normalization and hashing."""

    def test_normalize_email(self):
        alias = Alias(type=AliasType.EMAIL, value="  Alice@Example.COM ")
        assert normalize_alias(alias).value == "alice@example.com"

    def test_normalize_keeps_other_types(self):
        alias = Alias(type=AliasType.PHONE, value="+1 555 0100")
        assert normalize_alias(alias).value == "+1 555 0100"

    def test_username_hash_is_value(self):
        alias = Alias(type=AliasType.USERNAME, value="alice")
        assert hash_alias(alias) == "alice"

    def test_hash_is_stable(self):
        alias = Alias(type=AliasType.EMAIL, value="alice@example.com")
        assert hash_alias(alias) == hash_alias(alias.model_copy())
        assert "=" not in hash_alias(alias)

    def test_add_alias_operation(self):
        """Test the operation carries only the hash; metadata carries the alias."""
        alias = Alias(type=AliasType.EMAIL, value="alice@example.com", realm="token")
        operation = to_add_alias_operation(alias)
        metadata = to_add_alias_operation_metadata(alias)

        assert isinstance(operation, MemberOperation)
        assert operation.add_alias.alias_hash == hash_alias(alias)
        assert operation.add_alias.realm == "token"
        assert metadata.add_alias_metadata.alias == alias


class TestSerialization:
    """Test canonical JSON and query helpers."""

    def test_canonical_json_sorted(self):
        assert canonical_json({'b': 1, 'a': {'d': 2, 'c': 3}}) == '{"a":{"c":3,"d":2},"b":1}'

    def test_canonical_json_model(self):
        """Test models serialize by alias without unset fields."""
        payload = TokenPayload(ref_id="ref", description=None)
        assert json.loads(canonical_json(payload)) == {'version': '1.0', 'refId': 'ref'}

    def test_token_action(self):
        payload = TokenPayload(ref_id="ref")
        assert token_action(payload, "ENDORSED") == canonical_json(payload) + ".endorsed"

    def test_hash_string(self):
        assert hash_string("abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_hash_string_non_ascii(self):
        """Test characters outside ASCII hash like '?' instead of failing."""
        assert hash_string("csrf-é") == hash_string("csrf-?")
        assert hash_string("☃") == hash_string("?")

    def test_parse_query_string_decodes_once(self):
        encoded = url_encode('{"a": "b&c"}')
        assert parse_query_string(f"?x={encoded}&y=") == {'x': '{"a": "b&c"}', 'y': ''}

    def test_ref_id_limit(self):
        assert REF_ID_MAX_LENGTH == 18
