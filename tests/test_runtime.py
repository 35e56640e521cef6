"""Synchronous runtime and the Cloud Functions event adapter."""

from types import SimpleNamespace

import pytest

from chat_echo import InMemoryDocumentStore, MessageCreated, WriteError
from chat_echo.runtime import EchoRuntime


class FailingStore:
    async def add(self, collection_path, fields):
        raise WriteError("quota exceeded")

    async def list(self, collection_path, limit=50):
        return []


class Snapshot:
    def __init__(self, data):
        self._data = data

    def to_dict(self):
        return self._data


def test_store_is_built_once():
    store = InMemoryDocumentStore()
    built = []

    def factory():
        built.append(1)
        return store

    runtime = EchoRuntime(factory)
    try:
        runtime.run(MessageCreated(user_id="u1", message_id="m1", data={"text": "a", "isUserMessage": True}))
        runtime.run(MessageCreated(user_id="u1", message_id="m2", data={"text": "b", "isUserMessage": True}))
        runtime.run(MessageCreated(user_id="u1", message_id="m3", data={"text": "c", "isUserMessage": False}))
    finally:
        runtime.close()

    assert built == [1]
    assert sorted(d["text"] for d in store.documents.values()) == ["You said: a", "You said: b"]


def test_failures_propagate():
    runtime = EchoRuntime(FailingStore)
    try:
        with pytest.raises(WriteError, match="quota exceeded"):
            runtime.run(MessageCreated(user_id="u1", message_id="m1", data={"text": "a", "isUserMessage": True}))
    finally:
        runtime.close()


class TestHandleEvent:
    @pytest.fixture
    def store(self, monkeypatch):
        from chat_echo import functions

        store = InMemoryDocumentStore()
        runtime = EchoRuntime(lambda: store)
        monkeypatch.setattr(functions, "_runtime", runtime)
        yield store
        runtime.close()

    def test_user_message_event(self, store):
        from chat_echo.functions import handle_event

        event = SimpleNamespace(
            params={"userId": "u1", "messageId": "m1"},
            data=Snapshot({"text": "hello", "isUserMessage": True}),
        )
        doc_id = handle_event(event)
        assert store.documents[f"chats/u1/messages/{doc_id}"]["text"] == "You said: hello"

    def test_system_message_event(self, store):
        from chat_echo.functions import handle_event

        event = SimpleNamespace(
            params={"userId": "u1", "messageId": "m2"},
            data=Snapshot({"text": "hi", "isUserMessage": False}),
        )
        assert handle_event(event) is None
        assert store.documents == {}

    def test_missing_snapshot(self, store):
        from chat_echo.functions import handle_event

        assert handle_event(SimpleNamespace(params={"userId": "u1", "messageId": "m3"}, data=None)) is None
        assert store.documents == {}


class ClosingStore(InMemoryDocumentStore):
    def __init__(self):
        super().__init__()
        self.closed = 0

    async def close(self) -> None:
        self.closed += 1


def test_close_releases_store():
    store = ClosingStore()
    runtime = EchoRuntime(lambda: store)
    runtime.run(MessageCreated(user_id="u1", message_id="m1", data={"text": "a", "isUserMessage": True}))
    runtime.close()
    assert store.closed == 1


def test_close_before_first_event_builds_nothing():
    built = []
    runtime = EchoRuntime(lambda: built.append(1) or ClosingStore())
    runtime.close()
    assert built == []
