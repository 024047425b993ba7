"""State carried through the token request flow."""

import json

from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import InvalidTokenRequestQueryError
from ..core.types import ProtoModel
from ..core.util import canonical_json, hash_string


class TokenRequestState(ProtoModel):
    """Caller state bound to the hash of a CSRF token.

    Serializes to ``{"csrfTokenHash": ..., "innerState": ...}``.
    """
    csrf_token_hash: str
    inner_state: str = ""

    @classmethod
    def create(cls, csrf_token: str, state: str = "") -> 'TokenRequestState':
        """State for a new request; only the CSRF token's hash is kept."""
        return cls(csrf_token_hash=hash_string(csrf_token), inner_state=state)

    @classmethod
    def parse(cls, serialized: str) -> 'TokenRequestState':
        """Parse serialized state.

        Raises:
            InvalidTokenRequestQueryError: Not a serialized state
        """
        try:
            return cls.from_json_dict(json.loads(serialized))
        except (ValueError, TypeError, PydanticValidationError) as e:
            raise InvalidTokenRequestQueryError(f"Invalid token request state: {e}")

    def serialize(self) -> str:
        return canonical_json(self)

    def matches(self, csrf_token: str) -> bool:
        return self.csrf_token_hash == hash_string(csrf_token)
