"""Request authentication for member calls."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.exceptions import KeyNotFoundError
from ..core.types import KeyLevel
from ..core.util import canonical_json
from ..security import CryptoEngine, Signer

logger = logging.getLogger(__name__)

TOKEN_REALM = "Token"
TOKEN_SCHEME = "Token-Ed25519-SHA512"


@dataclass
class AuthenticationContext:
    """Who a member's calls are made as."""
    on_behalf_of: Optional[str] = None
    customer_initiated: bool = False

    def use_access_token(self, token_id: str, customer_initiated: bool = False) -> None:
        logger.info(f"Authenticated On-Behalf-Of: {token_id}")
        self.on_behalf_of = token_id
        self.customer_initiated = customer_initiated

    def clear(self) -> Optional[str]:
        """Stop acting on behalf of an access token; returns the old token id."""
        token_id = self.on_behalf_of
        self.on_behalf_of = None
        self.customer_initiated = False
        return token_id


class RequestAuthenticator:
    """Signs gateway requests with one of a member's keys."""

    def __init__(self, member_id: str, crypto_engine: CryptoEngine):
        self.member_id = member_id
        self.crypto_engine = crypto_engine

    def signer(self, level: KeyLevel) -> Signer:
        """Signer for a key of the level, or of the closest more privileged one.

        Raises:
            KeyNotFoundError: No key at or above the level
        """
        candidate: Optional[KeyLevel] = level
        while candidate is not None:
            try:
                return self.crypto_engine.create_signer(candidate)
            except KeyNotFoundError:
                logger.debug(f"No {candidate.value} key for member {self.member_id}")
                candidate = candidate.more_privileged()
        raise KeyNotFoundError(
            f"Member {self.member_id} has no key at or above level {level.value}"
        )

    def headers(
        self,
        request: Dict[str, Any],
        level: KeyLevel = KeyLevel.LOW,
        context: Optional[AuthenticationContext] = None,
        now_ms: Optional[int] = None
    ) -> Dict[str, str]:
        """Authentication headers for one request.

        Args:
            request: JSON form of the request message
            level: Minimum key level the call requires
            context: On-behalf-of settings
            now_ms: Signing time, defaults to now

        Returns:
            Header dict to send with the call
        """
        signer = self.signer(level)
        created_at_ms = now_ms if now_ms is not None else int(time.time() * 1000)
        payload = canonical_json({'request': request, 'createdAtMs': created_at_ms})

        headers = {
            'token-realm': TOKEN_REALM,
            'token-scheme': TOKEN_SCHEME,
            'token-key-id': signer.key_id,
            'token-signature': signer.sign(payload),
            'token-created-at-ms': str(created_at_ms),
            'token-member-id': self.member_id,
        }
        if context is not None and context.on_behalf_of:
            headers['token-on-behalf-of'] = context.on_behalf_of
            if context.customer_initiated:
                headers['customer-initiated'] = 'true'
        return headers
