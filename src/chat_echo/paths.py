"""
Document path helpers for the chats/{userId}/messages/{messageId} tree.
"""

import re
from typing import Optional

CHATS_COLLECTION = "chats"
MESSAGES_COLLECTION = "messages"
MESSAGE_PATH_PATTERN = f"{CHATS_COLLECTION}/{{userId}}/{MESSAGES_COLLECTION}/{{messageId}}"

_WILDCARD = re.compile(r"^\{(\w+)\}$")


def match_path(pattern: str, path: str) -> Optional[dict[str, str]]:
    """Match a document path against a pattern with {param} segments.

    Returns the extracted params, or None if the path does not match.
    """
    pattern_parts = pattern.strip("/").split("/")
    path_parts = path.strip("/").split("/")
    if len(pattern_parts) != len(path_parts):
        return None
    params: dict[str, str] = {}
    for expected, actual in zip(pattern_parts, path_parts):
        if not actual:
            return None
        wildcard = _WILDCARD.match(expected)
        if wildcard:
            params[wildcard.group(1)] = actual
        elif expected != actual:
            return None
    return params


def messages_collection(user_id: str) -> str:
    """Collection path holding one user's conversation."""
    return f"{CHATS_COLLECTION}/{user_id}/{MESSAGES_COLLECTION}"
