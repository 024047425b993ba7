"""Parsing and verification of token request callbacks."""

import logging
from dataclasses import dataclass
from typing import Callable, Mapping
from urllib.parse import urlsplit

from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import InvalidStateError, InvalidTokenRequestQueryError
from ..core.types import Key, MemberRecord, RequestSignaturePayload, Signature
from ..core.util import canonical_json, parse_query_string
from ..security import Verifier, verify_signature
from .state import TokenRequestState

logger = logging.getLogger(__name__)

TOKEN_ID_FIELD = "token-id"
STATE_FIELD = "state"
SIGNATURE_FIELD = "signature"


@dataclass(frozen=True)
class TokenRequestCallback:
    """Outcome of a completed token request."""
    token_id: str
    state: str


@dataclass(frozen=True)
class TokenRequestCallbackParameters:
    """Raw callback parameters; ``serialized_state`` is what Token signed."""
    token_id: str
    serialized_state: str
    signature: Signature

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> 'TokenRequestCallbackParameters':
        """Read decoded callback parameters.

        Raises:
            InvalidTokenRequestQueryError: A field is missing or malformed
        """
        missing = [
            name for name in (TOKEN_ID_FIELD, STATE_FIELD, SIGNATURE_FIELD)
            if name not in params
        ]
        if missing:
            raise InvalidTokenRequestQueryError(
                f"Token request callback is missing: {', '.join(missing)}"
            )

        try:
            signature = Signature.model_validate_json(params[SIGNATURE_FIELD])
        except PydanticValidationError as e:
            raise InvalidTokenRequestQueryError(f"Invalid callback signature: {e}")

        return cls(
            token_id=params[TOKEN_ID_FIELD],
            serialized_state=params[STATE_FIELD],
            signature=signature
        )

    @classmethod
    def from_query(cls, query: str) -> 'TokenRequestCallbackParameters':
        return cls.from_params(parse_query_string(query))

    @classmethod
    def from_url(cls, url: str) -> 'TokenRequestCallbackParameters':
        return cls.from_query(urlsplit(url).query)


def parse_token_request_callback(
    params: TokenRequestCallbackParameters,
    csrf_token: str,
    token_member: MemberRecord,
    verifier_factory: Callable[[Key], Verifier]
) -> TokenRequestCallback:
    """Check a callback and extract the token id and caller state.

    Args:
        params: Parsed callback parameters
        csrf_token: CSRF token the request URL was generated with
        token_member: Token's member record, whose key signed the callback
        verifier_factory: Creates a verifier for a public key

    Returns:
        Token id and the caller's original state

    Raises:
        InvalidStateError: CSRF token hash does not match the state
        KeyNotFoundError: Signature names an unknown Token key
        InvalidSignatureError: Signature does not verify
    """
    state = TokenRequestState.parse(params.serialized_state)
    if not state.matches(csrf_token):
        raise InvalidStateError(state.csrf_token_hash)

    payload = RequestSignaturePayload(token_id=params.token_id, state=params.serialized_state)
    verify_signature(token_member, canonical_json(payload), params.signature, verifier_factory)

    logger.info(f"Verified token request callback for token {params.token_id}")
    return TokenRequestCallback(token_id=params.token_id, state=state.inner_state)
