"""
Firestore REST (v1) document store.

Works against production Firestore or the local emulator
(FIRESTORE_EMULATOR_HOST, token "owner").
"""

import base64
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from chat_echo.config import Settings
from chat_echo.errors import ChatEchoError, WriteError
from chat_echo.store.base import Document

logger = logging.getLogger(__name__)

_FRACTION = re.compile(r"\.(\d+)")


def encode_value(value: Any) -> dict[str, Any]:
    """Python value -> Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return {"timestampValue": value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Unsupported Firestore value type: {type(value).__name__}")


def encode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: encode_value(v) for k, v in fields.items()}


def parse_timestamp(raw: str) -> datetime:
    """RFC 3339 with up to nanosecond precision -> aware datetime (microseconds)."""
    raw = raw.replace("Z", "+00:00")
    raw = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), raw, count=1)
    return datetime.fromisoformat(raw)


def decode_value(typed: dict[str, Any]) -> Any:
    """Firestore typed value -> Python value."""
    if "nullValue" in typed:
        return None
    if "booleanValue" in typed:
        return typed["booleanValue"]
    if "integerValue" in typed:
        return int(typed["integerValue"])
    if "doubleValue" in typed:
        return float(typed["doubleValue"])
    if "stringValue" in typed:
        return typed["stringValue"]
    if "bytesValue" in typed:
        return base64.b64decode(typed["bytesValue"])
    if "timestampValue" in typed:
        return parse_timestamp(typed["timestampValue"])
    if "referenceValue" in typed:
        return typed["referenceValue"]
    if "mapValue" in typed:
        return decode_fields(typed["mapValue"].get("fields", {}))
    if "arrayValue" in typed:
        return [decode_value(v) for v in typed["arrayValue"].get("values", [])]
    raise ValueError(f"Unsupported Firestore value: {typed!r}")


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: decode_value(v) for k, v in fields.items()}


class RestDocumentStore:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self._settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.base_url,
            headers={"User-Agent": "chat-echo/0.1.0", "Accept": "application/json"},
            timeout=30.0,
        )

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._settings.token:
            headers["Authorization"] = f"Bearer {self._settings.token}"
        return headers

    def _url(self, collection_path: str) -> str:
        return f"/{self._settings.documents_path}/{collection_path.strip('/')}"

    async def add(self, collection_path: str, fields: dict[str, Any]) -> str:
        url = self._url(collection_path)
        try:
            resp = await self._client.post(url, json={"fields": encode_fields(fields)}, headers=self._headers())
        except httpx.HTTPError as e:
            raise WriteError(f"Write to {collection_path} failed: {e}") from e
        if resp.status_code >= 400:
            raise WriteError(
                f"Write to {collection_path} failed: HTTP {resp.status_code}: {resp.text[:200]}",
                details={"status_code": resp.status_code},
            )
        try:
            doc_id = resp.json()["name"].rsplit("/", 1)[-1]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise WriteError(
                f"Write to {collection_path} returned no document name: {resp.text[:200]}",
                details={"status_code": resp.status_code},
            ) from e
        logger.debug("Created %s/%s", collection_path, doc_id)
        return doc_id

    async def list(self, collection_path: str, limit: int = 50) -> list[Document]:
        url = self._url(collection_path)
        params = {"pageSize": str(limit), "orderBy": "createdAt"}
        try:
            resp = await self._client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise ChatEchoError("read_failed", f"Read of {collection_path} failed: {e}") from e
        if resp.status_code >= 400:
            raise ChatEchoError(
                "read_failed",
                f"Read of {collection_path} failed: HTTP {resp.status_code}: {resp.text[:200]}",
                {"status_code": resp.status_code},
            )
        documents = resp.json().get("documents", [])
        return [
            (doc["name"].rsplit("/", 1)[-1], decode_fields(doc.get("fields", {})))
            for doc in documents
        ]

    async def close(self) -> None:
        await self._client.aclose()
