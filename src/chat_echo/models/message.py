"""
Message models — documents under chats/{userId}/messages.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from chat_echo.errors import TriggerError
from chat_echo.paths import MESSAGE_PATH_PATTERN, match_path

ECHO_PREFIX = "You said: "


class Origin(str, Enum):
    """Who authored a message. Only USER messages get an echo."""
    USER = "user"
    SYSTEM = "system"


class Message(BaseModel):
    text: str = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    is_user_message: Any = Field(default=None, alias="isUserMessage")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return value if isinstance(value, str) else str(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, value: Any) -> Optional[datetime]:
        # Non-timestamp values read as None.
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return None
        return None

    @property
    def origin(self) -> Origin:
        # Stored documents may carry any value here; truthiness decides.
        return Origin.USER if self.is_user_message else Origin.SYSTEM

    @classmethod
    def from_document(cls, data: Optional[dict[str, Any]]) -> Message:
        return cls.model_validate(data or {})

    def echo(self, now: datetime) -> Message:
        """Build the automated reply to this message."""
        return Message(text=f"{ECHO_PREFIX}{self.text}", created_at=now, is_user_message=False)

    def to_document(self) -> dict[str, Any]:
        """Wire fields as stored: text, createdAt, isUserMessage."""
        return {
            "text": self.text,
            "createdAt": self.created_at,
            "isUserMessage": self.origin is Origin.USER,
        }


class MessageCreated(BaseModel):
    """A document-created trigger for chats/{userId}/messages/{messageId}."""
    user_id: str
    message_id: str
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_params(cls, params: dict[str, str], data: Optional[dict[str, Any]]) -> MessageCreated:
        try:
            return cls(user_id=params["userId"], message_id=params["messageId"], data=data or {})
        except KeyError as e:
            raise TriggerError(f"Missing path parameter {e} for {MESSAGE_PATH_PATTERN}")

    @classmethod
    def from_path(cls, path: str, data: Optional[dict[str, Any]]) -> MessageCreated:
        params = match_path(MESSAGE_PATH_PATTERN, path)
        if params is None:
            raise TriggerError(f"Path {path!r} does not match {MESSAGE_PATH_PATTERN}")
        return cls.from_params(params, data)

    @property
    def message(self) -> Message:
        return Message.from_document(self.data)
