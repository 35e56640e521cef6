"""Firebase deploy entry point. Functions are discovered from this module."""

from chat_echo.functions import echo

__all__ = ["echo"]
