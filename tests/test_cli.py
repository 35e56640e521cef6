"""CLI commands against an in-memory store."""

import json

import pytest
from click.testing import CliRunner

from chat_echo import InMemoryDocumentStore, MESSAGE_PATH_PATTERN
from chat_echo.cli import main as cli_main
from chat_echo.cli.main import main
from chat_echo.errors import WriteError


@pytest.fixture
def store(monkeypatch):
    store = InMemoryDocumentStore()
    monkeypatch.setattr(cli_main, "_get_store", lambda: store)
    return store


@pytest.fixture
def runner():
    return CliRunner()


def test_send_user_message(store, runner):
    result = runner.invoke(main, ["send", "u1", "hello"])
    assert result.exit_code == 0, result.output
    [fields] = store.documents.values()
    assert fields["text"] == "hello"
    assert fields["isUserMessage"] is True


def test_send_system_message(store, runner):
    result = runner.invoke(main, ["send", "u1", "notice", "--system"])
    assert result.exit_code == 0, result.output
    [fields] = store.documents.values()
    assert fields["isUserMessage"] is False


def test_replay_echoes_user_message(store, runner):
    result = runner.invoke(main, ["replay", "u1", "hello", "--json"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert out["echoed"] is True
    assert store.documents[f"chats/u1/messages/{out['id']}"]["text"] == "You said: hello"


def test_replay_skips_system_message(store, runner):
    result = runner.invoke(main, ["replay", "u1", "hello", "--system", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"echoed": False, "id": None}
    assert store.documents == {}


def test_history_json(store, runner):
    from chat_echo.handler import EchoHandler

    store.subscribe(MESSAGE_PATH_PATTERN, EchoHandler(store).on_created)
    assert runner.invoke(main, ["send", "u1", "hello"]).exit_code == 0

    result = runner.invoke(main, ["history", "u1", "--json"])
    assert result.exit_code == 0, result.output
    docs = json.loads(result.output)
    assert [d["text"] for d in docs] == ["hello", "You said: hello"]
    assert [d["isUserMessage"] for d in docs] == [True, False]


def test_history_table(store, runner):
    assert runner.invoke(main, ["send", "u1", "hello"]).exit_code == 0
    result = runner.invoke(main, ["history", "u1"])
    assert result.exit_code == 0, result.output
    assert "hello" in result.output


def test_store_errors_exit_nonzero(monkeypatch, runner):
    class Broken(InMemoryDocumentStore):
        async def add(self, collection_path, fields):
            raise WriteError("permission denied")

    monkeypatch.setattr(cli_main, "_get_store", Broken)
    result = runner.invoke(main, ["send", "u1", "hello"])
    assert result.exit_code == 1
    assert "permission denied" in result.output


def test_config_set_and_show(tmp_path, monkeypatch, runner):
    from chat_echo import config as config_module

    cfg = tmp_path / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_FILE", cfg)
    for name in ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT", "FIRESTORE_EMULATOR_HOST", "CHAT_ECHO_DATABASE", "CHAT_ECHO_TOKEN"):
        monkeypatch.delenv(name, raising=False)

    result = runner.invoke(main, ["config", "set", "--project-id", "demo-chat", "--emulator-host", "localhost:8080"])
    assert result.exit_code == 0, result.output
    assert json.loads(cfg.read_text()) == {"project_id": "demo-chat", "emulator_host": "localhost:8080"}

    result = runner.invoke(main, ["config", "show"])
    assert result.exit_code == 0, result.output
    assert "demo-chat" in result.output
    assert "http://localhost:8080/v1" in result.output


def test_history_tolerates_unreadable_created_at(store, runner):
    import asyncio

    asyncio.run(store.add("chats/u1/messages", {"text": "legacy", "isUserMessage": True, "createdAt": "yesterday"}))
    result = runner.invoke(main, ["history", "u1"])
    assert result.exit_code == 0, result.output
    assert "legacy" in result.output
