"""
Document store interface used by the echo handler and the CLI.
"""

from typing import Any, Protocol

Document = tuple[str, dict[str, Any]]


class DocumentStore(Protocol):
    async def add(self, collection_path: str, fields: dict[str, Any]) -> str:
        """Create a document with a store-assigned id and return the id."""
        ...

    async def list(self, collection_path: str, limit: int = 50) -> list[Document]:
        """Return (id, fields) pairs ordered by createdAt ascending."""
        ...
