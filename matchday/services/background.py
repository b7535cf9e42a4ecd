"""
Detached background tasks for fire-and-forget saves.

The services are synchronous; saves are coroutines. ``BackgroundTaskRunner``
owns an asyncio event loop on a daemon thread so a command can hand off a save
and return immediately.
"""
import asyncio
import concurrent.futures
import logging
import threading
from typing import Awaitable, Optional, Set

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """Run coroutines on a private event loop thread."""

    def __init__(self, name: str = "matchday-background"):
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name=name, daemon=True)
        self._pending: Set[concurrent.futures.Future] = set()
        self._pending_lock = threading.Lock()
        self._closed = False
        self._thread.start()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, coro: Awaitable, description: str = "background task") -> concurrent.futures.Future:
        """
        Schedule ``coro`` without waiting for it.

        A failure is logged and otherwise ignored.

        Raises:
            RuntimeError: If the runner has been closed
        """
        if self._closed:
            coro.close()
            raise RuntimeError("BackgroundTaskRunner is closed")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        with self._pending_lock:
            self._pending.add(future)

        def _done(fut: concurrent.futures.Future) -> None:
            with self._pending_lock:
                self._pending.discard(fut)
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                logger.error("%s failed: %s", description, exc, exc_info=exc)

        future.add_done_callback(_done)
        return future

    def run(self, coro: Awaitable, timeout: Optional[float] = None):
        """Run ``coro`` on the loop and block for its result (errors propagate)."""
        if self._closed:
            coro.close()
            raise RuntimeError("BackgroundTaskRunner is closed")
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result(timeout)

    def wait_idle(self, timeout: Optional[float] = 5.0) -> bool:
        """
        Wait for every submitted task to finish.

        Returns:
            True if nothing is left pending
        """
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = concurrent.futures.wait(pending, timeout=timeout)
        return not not_done

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """Drain pending tasks, then stop the loop thread."""
        if self._closed:
            return
        self.wait_idle(timeout)
        self._closed = True
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        if not self._thread.is_alive():
            self._loop.close()
