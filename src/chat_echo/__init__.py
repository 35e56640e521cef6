"""
chat-echo — Firestore echo trigger for chat conversations.

Replies to every user-authored message under chats/{userId}/messages
with "You said: <text>".
"""

from chat_echo.handler import EchoHandler
from chat_echo.models.message import ECHO_PREFIX, Message, MessageCreated, Origin
from chat_echo.errors import ChatEchoError, WriteError, TriggerError, ConfigError
from chat_echo.config import Settings
from chat_echo.paths import MESSAGE_PATH_PATTERN, match_path, messages_collection
from chat_echo.store.memory import InMemoryDocumentStore

__version__ = "0.1.0"
__all__ = [
    "EchoHandler",
    "ECHO_PREFIX",
    "Message",
    "MessageCreated",
    "Origin",
    "ChatEchoError",
    "WriteError",
    "TriggerError",
    "ConfigError",
    "Settings",
    "MESSAGE_PATH_PATTERN",
    "match_path",
    "messages_collection",
    "InMemoryDocumentStore",
]
