"""
Process runtime — drives the async handler from a synchronous trigger.

One event loop per process; the store is built once, on that loop, the
first time an event arrives. Invocations are serialized by a lock.
"""

import asyncio
import inspect
import logging
import threading
from typing import Callable, Optional

from chat_echo.handler import EchoHandler
from chat_echo.models.message import MessageCreated
from chat_echo.store.base import DocumentStore

logger = logging.getLogger(__name__)


class EchoRuntime:
    def __init__(self, store_factory: Callable[[], DocumentStore]):
        self._store_factory = store_factory
        self._store: Optional[DocumentStore] = None
        self._handler: Optional[EchoHandler] = None
        self._loop = asyncio.new_event_loop()
        self._lock = threading.Lock()

    async def _handle(self, event: MessageCreated) -> Optional[str]:
        if self._handler is None:
            logger.info("Initializing document store")
            self._store = self._store_factory()
            self._handler = EchoHandler(self._store)
        return await self._handler.handle(event)

    def run(self, event: MessageCreated) -> Optional[str]:
        """Run the handler to completion. Failures propagate to the caller."""
        with self._lock:
            return self._loop.run_until_complete(self._handle(event))

    async def _close_store(self) -> None:
        close = getattr(self._store, "close", None)
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                await result

    def close(self) -> None:
        """Release the store's client, then the loop."""
        with self._lock:
            try:
                if self._store is not None:
                    self._loop.run_until_complete(self._close_store())
            finally:
                self._store = None
                self._handler = None
                self._loop.close()
