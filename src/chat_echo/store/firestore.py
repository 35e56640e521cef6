"""
Document store backed by the async Cloud Firestore client.
"""

from typing import Any

from google.api_core import exceptions as gexc
from google.cloud import firestore

from chat_echo.errors import ChatEchoError, WriteError
from chat_echo.store.base import Document


class FirestoreStore:
    def __init__(self, client: firestore.AsyncClient):
        self._client = client

    async def add(self, collection_path: str, fields: dict[str, Any]) -> str:
        try:
            _update_time, ref = await self._client.collection(collection_path).add(fields)
        except gexc.GoogleAPIError as e:
            raise WriteError(f"Write to {collection_path} failed: {e}") from e
        return ref.id

    async def list(self, collection_path: str, limit: int = 50) -> list[Document]:
        query = self._client.collection(collection_path).order_by("createdAt").limit(limit)
        try:
            return [(snap.id, snap.to_dict() or {}) async for snap in query.stream()]
        except gexc.GoogleAPIError as e:
            raise ChatEchoError("read_failed", f"Read of {collection_path} failed: {e}") from e
