"""Unit tests for StandingOrderTokenBuilder."""

import logging
from unittest.mock import Mock

import pytest

from tokenio_sdk.builders import StandingOrderTokenBuilder
from tokenio_sdk.core.exceptions import TokenArgumentsError, ValidationError
from tokenio_sdk.core.types import (
    AccessRequestBody,
    Alias,
    AliasType,
    StandingOrderBody,
    StoredTokenRequest,
    TokenMember,
    TokenRequestOptions,
    TokenRequestPayload,
    TransferDestination,
    SepaDestination,
)

from tests import TEST_MEMBERS


@pytest.fixture
def member():
    member = Mock()
    member.member_id = TEST_MEMBERS['payer']
    return member


@pytest.fixture
def builder(member):
    return StandingOrderTokenBuilder(member, 50, "EUR", "MNTH", "2026-01-01", "2026-12-31")


def _stored_request(**payload_fields):
    return StoredTokenRequest(
        id="rq:so",
        request_payload=TokenRequestPayload(**payload_fields),
        request_options=TokenRequestOptions(from_=TokenMember(id=TEST_MEMBERS['payer']))
    )


class TestStandingOrderTokenBuilder:
    """Test standing order payload assembly."""

    def test_construction(self, builder):
        body = builder.payload.standing_order
        assert builder.payload.from_.id == TEST_MEMBERS['payer']
        assert body.amount == "50.0"
        assert body.currency == "EUR"
        assert body.frequency == "MNTH"
        assert body.start_date == "2026-01-01"
        assert body.end_date == "2026-12-31"

    def test_setters(self, builder):
        destination = TransferDestination(sepa=SepaDestination(iban="DE89"))
        alias = Alias(type=AliasType.EMAIL, value="payee@example.com")

        payload = builder \
            .set_account_id("a:1") \
            .add_destination(destination) \
            .set_to_alias(alias) \
            .set_description("Rent") \
            .set_ref_id("rent-2026") \
            .set_purpose_of_payment("RENT") \
            .set_provider_transfer_metadata({'code': 'X'}) \
            .set_token_request_id("rq:1") \
            .build_payload()

        instructions = payload.standing_order.instructions
        assert instructions.source.account.token.account_id == "a:1"
        assert instructions.transfer_destinations == [destination]
        assert instructions.metadata.transfer_purpose == "RENT"
        assert instructions.metadata.provider_transfer_metadata == {'code': 'X'}
        assert payload.to.alias == alias
        assert payload.description == "Rent"
        assert payload.ref_id == "rent-2026"
        assert payload.token_request_id == "rq:1"

    def test_ref_id_length(self, builder):
        with pytest.raises(ValidationError):
            builder.set_ref_id("x" * 19)

    def test_build_assigns_ref_id(self, builder, caplog):
        with caplog.at_level(logging.WARNING):
            payload = builder.build_payload()
        assert payload.ref_id
        assert "refId is not set" in caplog.text

    def test_account_id_requires_from_id(self):
        request = _stored_request(
            to=TokenMember(id=TEST_MEMBERS['payee']),
            standing_order_body=StandingOrderBody(
                amount="5.0", currency="EUR", frequency="WEEK", start_date="2026-02-01"
            )
        )
        builder = StandingOrderTokenBuilder.from_token_request(request)
        builder.payload.from_ = TokenMember(alias=Alias(type=AliasType.USERNAME, value="payer"))

        with pytest.raises(TokenArgumentsError):
            builder.set_account_id("a:1")

    def test_from_token_request(self):
        request = _stored_request(
            ref_id="so-ref",
            to=TokenMember(id=TEST_MEMBERS['payee']),
            description="Gym",
            standing_order_body=StandingOrderBody(
                amount="30.0", currency="GBP", frequency="MNTH", start_date="2026-03-01"
            )
        )

        payload = StandingOrderTokenBuilder.from_token_request(request).build_payload()

        assert payload.token_request_id == "rq:so"
        assert payload.from_.id == TEST_MEMBERS['payer']
        assert payload.to.id == TEST_MEMBERS['payee']
        assert payload.ref_id == "so-ref"
        assert payload.standing_order.amount == "30.0"

    def test_from_token_request_wrong_body(self):
        request = _stored_request(access_body=AccessRequestBody(type=["ACCOUNTS"]))
        with pytest.raises(ValidationError, match="standing order body"):
            StandingOrderTokenBuilder.from_token_request(request)

    def test_from_token_request_without_payee(self):
        request = _stored_request(standing_order_body=StandingOrderBody(
            amount="30.0", currency="GBP", frequency="MNTH", start_date="2026-03-01"
        ))
        with pytest.raises(ValidationError, match="No payee"):
            StandingOrderTokenBuilder.from_token_request(request)
