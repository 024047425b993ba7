"""HTTP transport to the Token gateway."""

import asyncio
import json
import logging
from typing import Optional, Dict, Any

import aiohttp
from aiohttp import ClientTimeout, ClientError

from .._version import __version__
from ..core.config import TokenConfig
from ..core.exceptions import (
    StatusCode,
    RPCError,
    VersionMismatchError,
    NetworkError,
    TimeoutError as SDKTimeoutError,
    RateLimitError
)
from ..core.util import url_decode

logger = logging.getLogger(__name__)

GATEWAY_SERVICE = "io.token.proto.gateway.GatewayService"

SDK_NAME = "python"
TOKEN_SDK_HEADER = "token-sdk"
TOKEN_SDK_VERSION_HEADER = "token-sdk-version"
TOKEN_DEV_KEY_HEADER = "token-dev-key"
TOKEN_ERROR_DETAILS_HEADER = "token-error-details"
TOKEN_CUSTOM_ERROR_HEADER = "token-custom-error"
ERROR_UNSUPPORTED_CLIENT_VERSION = "unsupported-client-version"


def format_error_message(message: str, details: Optional[str]) -> str:
    """Append decoded gateway error details to a status message."""
    if details:
        formatted = details.replace("; ", "\n")
        return f"{message} \nToken error details: \n{formatted}"
    return message


class GatewayTransport:
    """Async transport for gateway calls.

    Each call is a POST of the JSON request message to
    ``/{service}/{Method}``; the response body is the JSON response message.
    """

    def __init__(self, config: TokenConfig):
        """Initialize the transport.

        Args:
            config: Token configuration with the gateway address and retry settings
        """
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None
        self._sessions: Dict[asyncio.AbstractEventLoop, aiohttp.ClientSession] = {}
        self._closed = False

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    @property
    def metadata(self) -> Dict[str, str]:
        """Headers sent with every call."""
        return {
            TOKEN_SDK_HEADER: SDK_NAME,
            TOKEN_SDK_VERSION_HEADER: __version__,
            TOKEN_DEV_KEY_HEADER: self.config.dev_key,
        }

    async def _ensure_session(self):
        """Ensure an aiohttp session bound to the running loop exists.

        Sessions cannot be shared across event loops, so each loop the
        transport is used from gets its own; ``close`` closes all of them.
        """
        loop = asyncio.get_running_loop()
        for other_loop, session in list(self._sessions.items()):
            if other_loop.is_closed():
                await self._close_session(other_loop, session)
                del self._sessions[other_loop]

        session = self._sessions.get(loop)
        if session is None or session.closed:
            if self._sessions:
                logger.debug("Opening a gateway session for another event loop")
            timeout = ClientTimeout(total=self.config.request_timeout)
            session = aiohttp.ClientSession(
                timeout=timeout,
                headers={
                    'Content-Type': 'application/json',
                    'User-Agent': f'Token-Python-SDK/{__version__}',
                    **self.metadata
                }
            )
            self._sessions[loop] = session
        self.session = session

    async def _close_session(self, loop: asyncio.AbstractEventLoop, session: aiohttp.ClientSession):
        if session.closed:
            return
        if loop is not asyncio.get_running_loop() and loop.is_running():
            # That loop may be blocked waiting on this one, so do not wait for it
            asyncio.run_coroutine_threadsafe(session.close(), loop)
            return
        try:
            await session.close()
        except RuntimeError as e:
            logger.warning(f"Gateway session of a closed event loop did not close cleanly: {e}")

    async def close(self):
        """Close the HTTP sessions of every event loop."""
        for loop, session in list(self._sessions.items()):
            await self._close_session(loop, session)
        self._sessions.clear()
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self._closed = True

    def _method_url(self, method: str) -> str:
        return f"{self.config.gateway_url}/{GATEWAY_SERVICE}/{method}"

    def _error_from_response(
        self,
        method: str,
        http_status: int,
        headers,
        body: str
    ) -> RPCError:
        status = StatusCode.from_http_status(http_status)
        message = body or f"HTTP {http_status}"
        try:
            data = json.loads(body)
        except ValueError:
            data = None

        if isinstance(data, dict):
            code = data.get('code')
            if isinstance(code, int) and code in StatusCode._value2member_map_:
                status = StatusCode(code)
            message = data.get('message') or data.get('error') or message

        details = headers.get(TOKEN_ERROR_DETAILS_HEADER)
        if details is not None:
            details = url_decode(details)
        message = format_error_message(f"{status.name}: {message}", details)

        if headers.get(TOKEN_CUSTOM_ERROR_HEADER) == ERROR_UNSUPPORTED_CLIENT_VERSION:
            return VersionMismatchError(
                message,
                method=method,
                status=status,
                status_code=http_status,
                response_data=data if data is not None else body
            )

        return RPCError(
            message,
            method=method,
            status=status,
            status_code=http_status,
            response_data=data if data is not None else body
        )

    async def _make_rpc_call(
        self,
        method: str,
        request: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """Make a gateway call with retry logic.

        Args:
            method: Gateway method name, e.g. ``GetMember``
            request: JSON form of the request message
            headers: Extra per-call headers, e.g. authentication
            timeout: Request timeout override

        Returns:
            JSON form of the response message

        Raises:
            RPCError: Gateway returned an error status
            NetworkError: Network connectivity issues
            TimeoutError: Request timed out
        """
        if self._closed:
            raise RuntimeError("Client has been closed")

        await self._ensure_session()

        last_exception = None

        for attempt in range(self.config.max_retries + 1):
            try:
                logger.debug(f"Gateway call attempt {attempt + 1}: {method}")

                async with self.session.post(
                    self._method_url(method),
                    json=request,
                    headers=headers,
                    timeout=ClientTimeout(total=timeout or self.config.request_timeout)
                ) as response:

                    # Handle rate limiting
                    if response.status == 429:
                        retry_after = int(response.headers.get('Retry-After', 60))
                        raise RateLimitError(
                            "Rate limit exceeded",
                            retry_after=retry_after,
                            details={'status_code': response.status}
                        )

                    # Handle error statuses
                    if response.status >= 400:
                        error_text = await response.text()
                        raise self._error_from_response(
                            method,
                            response.status,
                            response.headers,
                            error_text
                        )

                    try:
                        json_data = await response.json(content_type=None)
                    except Exception as e:
                        raise RPCError(
                            f"Failed to parse JSON response: {e}",
                            method=method,
                            status=StatusCode.INTERNAL,
                            status_code=response.status
                        )

                    if json_data is None:
                        return {}
                    if not isinstance(json_data, dict):
                        raise RPCError(
                            f"Invalid response format: {json_data!r}",
                            method=method,
                            status=StatusCode.INTERNAL,
                            response_data=json_data
                        )
                    return json_data

            except (ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                if attempt < self.config.max_retries:
                    delay = self.config.retry_delay * (2 ** attempt)  # Exponential backoff
                    logger.warning(f"Gateway call {method} failed, retrying in {delay}s: {e}")
                    await asyncio.sleep(delay)
                    continue
                break

            except RPCError:
                # Don't retry status-coded errors
                raise

        # All retries failed
        if isinstance(last_exception, asyncio.TimeoutError):
            raise SDKTimeoutError(
                f"Gateway call {method} timed out after {self.config.max_retries + 1} attempts",
                timeout_duration=self.config.request_timeout
            )
        else:
            raise NetworkError(
                f"Network error after {self.config.max_retries + 1} attempts: {last_exception}"
            )
