#!/usr/bin/env python3
"""
Token Request Example: Asking a User for an Access Token

This example walks through the third-party flow:
- Building and storing a token request
- Generating the URL that sends the user to Token's web app
- Verifying the callback Token redirects back with
- Error handling for tampered or forged callbacks

Requirements:
- TOKEN_DEV_KEY set to a developer key
- A crypto engine whose key algorithm the gateway accepts
"""

import asyncio
import hashlib
import hmac
import logging
import os
import secrets
from pathlib import Path
import sys

# Add the src directory to the path so we can import the SDK modules
project_dir = Path(__file__).parent.parent
src_dir = project_dir / "src"
sys.path.insert(0, str(src_dir))

from tokenio_sdk import (
    Alias,
    AliasType,
    InMemoryKeyStore,
    KeyStoreCryptoEngine,
    TokenIO,
    TokenRequest,
)
from tokenio_sdk.core.exceptions import (
    InvalidSignatureError,
    InvalidStateError,
    InvalidTokenRequestQueryError,
    RPCError,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ExampleCryptoEngine(KeyStoreCryptoEngine):
    """Stand-in engine; swap for one producing keys the gateway accepts."""

    algorithm = "HMAC-SHA256"

    def _generate_key_pair(self):
        key = secrets.token_hex(32)
        return key, key

    def _sign(self, private_key, data):
        return hmac.new(private_key.encode('ascii'), data, hashlib.sha256).hexdigest()

    def _verify(self, public_key, data, signature):
        return hmac.compare_digest(self._sign(public_key, data), signature)


async def example_request_access(token_io):
    """Create a business member and store an access token request."""
    print("\n=== Storing a Token Request ===")

    grantee = await token_io.create_member(
        Alias(type=AliasType.DOMAIN, value=f"tpp-{secrets.token_hex(4)}.example.com"),
        member_type="BUSINESS"
    )
    print(f"Created member: {grantee.member_id}")

    request = TokenRequest.access_request("ACCOUNTS", "BALANCES") \
        .set_to_member_id(grantee.member_id) \
        .set_redirect_url("https://tpp.example.com/token-callback") \
        .set_description("Account overview") \
        .build()

    request_id = await grantee.store_token_request(request)
    print(f"Stored token request: {request_id}")

    csrf_token = secrets.token_urlsafe(16)
    url = token_io.generate_token_request_url(request_id, "session-42", csrf_token)
    print(f"Send the user to: {url}")
    return csrf_token


async def example_callback_errors(token_io, csrf_token):
    """Show how forged callbacks are rejected."""
    print("\n=== Callback Verification ===")

    callbacks = {
        "missing fields": "https://tpp.example.com/token-callback?token-id=tt:1",
        "bad signature": (
            "https://tpp.example.com/token-callback?token-id=tt:1"
            "&state=%7B%22csrfTokenHash%22%3A%22x%22%7D&signature=%7B%22keyId%22%3A%22k%22"
            "%2C%22signature%22%3A%22s%22%7D"
        ),
    }

    for name, url in callbacks.items():
        try:
            await token_io.parse_token_request_callback_url(url, csrf_token)
            print(f"  {name}: unexpectedly accepted")
        except InvalidTokenRequestQueryError as e:
            print(f"  {name}: rejected query ({e.message})")
        except InvalidStateError:
            print(f"  {name}: rejected, CSRF token does not match")
        except InvalidSignatureError as e:
            print(f"  {name}: rejected signature ({e.message})")


async def main():
    """Run the token request examples."""
    print("Token SDK Token Request Example")
    print("=" * 50)

    token_io = TokenIO.builder() \
        .sandbox() \
        .dev_key(os.environ['TOKEN_DEV_KEY']) \
        .with_key_store(InMemoryKeyStore(), ExampleCryptoEngine) \
        .build_async()

    async with token_io:
        try:
            csrf_token = await example_request_access(token_io)
            await example_callback_errors(token_io, csrf_token)
            print("\n" + "=" * 50)
            print("Token request examples completed")
        except RPCError as e:
            print(f"\nGateway call {e.method} failed: {e.message}")
            logger.exception("Example execution failed")


if __name__ == "__main__":
    if not os.environ.get('TOKEN_DEV_KEY'):
        os.environ['TOKEN_DEV_KEY'] = 'example-dev-key'

    asyncio.run(main())
