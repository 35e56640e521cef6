"""
chat-echo CLI — `chat-echo` command.

Commands:
  chat-echo config show|set      Project / emulator settings
  chat-echo send <uid> <text>    Write a message into a conversation
  chat-echo history <uid>        List a conversation
  chat-echo replay <uid> <text>  Run the echo handler locally
"""

import asyncio

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install chat-echo[cli]")

from chat_echo import __version__
from chat_echo.config import Settings
from chat_echo.errors import ChatEchoError
from chat_echo.store.rest import RestDocumentStore

console = Console()


def _get_store() -> RestDocumentStore:
    return RestDocumentStore(Settings.load())


def _run(coro):
    try:
        return asyncio.run(coro)
    except ChatEchoError as e:
        console.print(f"[red]{e.code}: {e}[/red]")
        raise SystemExit(1)


@click.group()
@click.version_option(__version__)
def main():
    """chat-echo CLI — inspect and exercise the echo trigger."""


# Register subcommands from separate modules
from chat_echo.cli.config import config
from chat_echo.cli.messages import send_cmd, history_cmd, replay_cmd

main.add_command(config)
main.add_command(send_cmd)
main.add_command(history_cmd)
main.add_command(replay_cmd)


if __name__ == "__main__":
    main()
