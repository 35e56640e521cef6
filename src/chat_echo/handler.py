"""
Echo handler — reacts to chats/{userId}/messages/{messageId} creation.

A user-authored message gets exactly one reply written into the same
conversation: "You said: <text>", isUserMessage=false. Replies are
SYSTEM-origin, so their own creation never echoes again.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from chat_echo.errors import ChatEchoError, WriteError
from chat_echo.models.message import MessageCreated, Origin
from chat_echo.paths import messages_collection
from chat_echo.store.base import DocumentStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EchoHandler:
    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = utc_now):
        self._store = store
        self._clock = clock

    async def handle(self, event: MessageCreated) -> Optional[str]:
        """Echo a user message. Returns the new document id, or None when skipped."""
        message = event.message
        if message.origin is not Origin.USER:
            logger.debug("Skipping %s/%s: origin=%s", event.user_id, event.message_id, message.origin.value)
            return None

        collection = messages_collection(event.user_id)
        reply = message.echo(self._clock())
        try:
            doc_id = await self._store.add(collection, reply.to_document())
        except ChatEchoError:
            logger.error("Echo write failed for %s/%s", event.user_id, event.message_id)
            raise
        except Exception as e:
            logger.error("Echo write failed for %s/%s: %s", event.user_id, event.message_id, e)
            raise WriteError(f"Write to {collection} failed: {e}") from e

        logger.info("Echoed %s/%s as %s", event.user_id, event.message_id, doc_id)
        return doc_id

    async def on_created(self, params: dict[str, str], data: dict) -> Optional[str]:
        """Subscriber signature for InMemoryDocumentStore.subscribe."""
        return await self.handle(MessageCreated.from_params(params, data))
