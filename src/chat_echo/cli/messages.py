"""CLI: chat-echo send, history, replay"""

import json

import click
from rich.console import Console
from rich.table import Table

from chat_echo.handler import EchoHandler, utc_now
from chat_echo.models.message import Message, MessageCreated
from chat_echo.paths import messages_collection

console = Console()


def _get_store():
    from chat_echo.cli.main import _get_store
    return _get_store()


def _run(coro):
    from chat_echo.cli.main import _run
    return _run(coro)


def _new_message(text: str, system: bool) -> Message:
    return Message(text=text, created_at=utc_now(), is_user_message=not system)


@click.command("send")
@click.argument("user_id")
@click.argument("text")
@click.option("--system", is_flag=True, help="Write as an automated message (isUserMessage=false)")
def send_cmd(user_id: str, text: str, system: bool):
    """Write a message into a user's conversation."""

    async def _send():
        store = _get_store()
        try:
            doc_id = await store.add(messages_collection(user_id), _new_message(text, system).to_document())
        finally:
            await store.close()
        console.print(f"[green]Created {messages_collection(user_id)}/{doc_id}[/green]")

    _run(_send())


@click.command("history")
@click.argument("user_id")
@click.option("--limit", default=50, type=int)
@click.option("--json-output", "--json", is_flag=True)
def history_cmd(user_id: str, limit: int, json_output: bool):
    """List a user's conversation, oldest first."""

    async def _history():
        store = _get_store()
        try:
            docs = await store.list(messages_collection(user_id), limit=limit)
        finally:
            await store.close()
        if json_output:
            click.echo(json.dumps([{"id": doc_id, **fields} for doc_id, fields in docs], indent=2, default=str))
            return
        table = Table(title=f"chats/{user_id} ({len(docs)} messages)")
        table.add_column("ID", style="bold")
        table.add_column("Created")
        table.add_column("Origin")
        table.add_column("Text")
        for doc_id, fields in docs:
            message = Message.from_document(fields)
            created = message.created_at.isoformat() if message.created_at else ""
            table.add_row(doc_id, created, message.origin.value, message.text)
        console.print(table)

    _run(_history())


@click.command("replay")
@click.argument("user_id")
@click.argument("text")
@click.option("--system", is_flag=True, help="Replay as an automated message")
@click.option("--message-id", default="replay", show_default=True)
@click.option("--json-output", "--json", is_flag=True)
def replay_cmd(user_id: str, text: str, system: bool, message_id: str, json_output: bool):
    """Invoke the echo handler locally for a synthetic new message."""

    async def _replay():
        store = _get_store()
        event = MessageCreated(
            user_id=user_id,
            message_id=message_id,
            data=_new_message(text, system).to_document(),
        )
        try:
            doc_id = await EchoHandler(store).handle(event)
        finally:
            await store.close()
        if json_output:
            click.echo(json.dumps({"echoed": doc_id is not None, "id": doc_id}))
        elif doc_id:
            console.print(f"[green]Echo written: {messages_collection(user_id)}/{doc_id}[/green]")
        else:
            console.print("[yellow]Skipped (not a user message).[/yellow]")

    _run(_replay())
