"""Blocking facade support: runs SDK coroutines on a private event loop."""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Awaitable, Optional, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)


class LoopRunner:
    """Event loop on a daemon thread that blocking wrappers submit work to.

    Running on its own thread lets the blocking API be called both from
    plain code and from inside someone else's running loop.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._closed = False

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._closed:
                raise RuntimeError("Runner has been closed")
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever,
                    name="tokenio-sdk-loop",
                    daemon=True
                )
                self._thread.start()
                logger.debug("Started blocking API event loop")
            return self._loop

    def run(self, coro: Awaitable[T]) -> T:
        """Run a coroutine to completion and return its result.

        Raises:
            concurrent.futures.TimeoutError: The call outlived ``timeout``;
                the coroutine is cancelled
        """
        loop = self._ensure_loop()
        future = asyncio.run_coroutine_threadsafe(coro, loop)
        try:
            return future.result(self.timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            logger.warning(f"Blocking call timed out after {self.timeout}s, cancelled")
            raise

    def close(self) -> None:
        """Stop the loop thread."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            loop, thread = self._loop, self._thread
        if loop is not None:
            loop.call_soon_threadsafe(loop.stop)
            if thread is not None:
                thread.join()
            loop.close()

    @property
    def closed(self) -> bool:
        return self._closed
