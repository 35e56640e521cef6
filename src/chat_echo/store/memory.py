"""
In-process document store with document-created dispatch.

Subscribers registered against a path pattern are awaited after every add
whose new document path matches, the same way a deployed trigger fires on
its own writes.
"""

from __future__ import annotations

import copy
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from chat_echo.paths import match_path
from chat_echo.store.base import Document

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 20

CreatedCallback = Callable[[dict[str, str], dict[str, Any]], Awaitable[Any]]


def auto_id() -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def _sort_key(item: Document) -> datetime:
    created = item[1].get("createdAt")
    if isinstance(created, datetime):
        return created if created.tzinfo else created.replace(tzinfo=timezone.utc)
    return datetime.min.replace(tzinfo=timezone.utc)


class InMemoryDocumentStore:
    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._subscribers: list[tuple[str, CreatedCallback]] = []

    def subscribe(self, pattern: str, callback: CreatedCallback) -> Callable[[], None]:
        """Call `callback(params, data)` for each created document matching pattern. Returns an unsubscribe function."""
        entry = (pattern, callback)
        self._subscribers.append(entry)

        def remove() -> None:
            try:
                self._subscribers.remove(entry)
            except ValueError:
                pass
        return remove

    @property
    def documents(self) -> dict[str, dict[str, Any]]:
        """Snapshot of every stored document keyed by full path."""
        return copy.deepcopy(self._documents)

    async def add(self, collection_path: str, fields: dict[str, Any]) -> str:
        doc_id = auto_id()
        path = f"{collection_path.strip('/')}/{doc_id}"
        self._documents[path] = copy.deepcopy(fields)
        logger.debug("Created %s", path)
        await self._dispatch(path)
        return doc_id

    async def list(self, collection_path: str, limit: int = 50) -> list[Document]:
        prefix = collection_path.strip("/") + "/"
        docs = [
            (path[len(prefix):], copy.deepcopy(fields))
            for path, fields in self._documents.items()
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        ]
        docs.sort(key=_sort_key)
        return docs[:limit]

    async def _dispatch(self, path: str) -> None:
        for pattern, callback in list(self._subscribers):
            params = match_path(pattern, path)
            if params is not None:
                await callback(params, copy.deepcopy(self._documents[path]))

    async def close(self) -> None:
        self._subscribers.clear()
