"""
Cloud Functions for Firebase entry point.

Deploy with the root main.py, which re-exports `echo`.
"""

import logging
from typing import Any, Optional

import firebase_admin
from firebase_admin import firestore_async
from firebase_functions import firestore_fn

from chat_echo.models.message import MessageCreated
from chat_echo.paths import MESSAGE_PATH_PATTERN
from chat_echo.runtime import EchoRuntime
from chat_echo.store.firestore import FirestoreStore

logger = logging.getLogger(__name__)

_runtime: Optional[EchoRuntime] = None


def _firestore_store() -> FirestoreStore:
    try:
        app = firebase_admin.get_app()
    except ValueError:
        app = firebase_admin.initialize_app()
    return FirestoreStore(firestore_async.client(app))


def get_runtime() -> EchoRuntime:
    global _runtime
    if _runtime is None:
        _runtime = EchoRuntime(_firestore_store)
    return _runtime


def handle_event(event: Any) -> Optional[str]:
    """Convert a platform event (params + snapshot) and run the handler."""
    snapshot = event.data
    if snapshot is None:
        logger.warning("No snapshot for %s", event.params)
        return None
    trigger = MessageCreated.from_params(event.params, snapshot.to_dict())
    return get_runtime().run(trigger)


@firestore_fn.on_document_created(document=MESSAGE_PATH_PATTERN)
def echo(event: firestore_fn.Event[Optional[firestore_fn.DocumentSnapshot]]) -> None:
    handle_event(event)
