"""
chat-echo error types.
"""

from typing import Any, Optional


class ChatEchoError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class WriteError(ChatEchoError):
    """A document store write failed (permission, quota, connectivity, backend)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("write_failed", message, details)


class TriggerError(ChatEchoError):
    def __init__(self, message: str, code: str = "invalid_trigger"):
        super().__init__(code, message)


class ConfigError(ChatEchoError):
    def __init__(self, message: str):
        super().__init__("config_error", message)
