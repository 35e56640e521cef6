"""CLI: chat-echo config show|set"""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from chat_echo.config import ENV_VARS, Settings, load_config, save_config

console = Console()


@click.group()
def config():
    """Project and emulator settings."""


@config.command("show")
def config_show():
    """Show effective settings (config file + environment)."""
    settings = Settings.load()
    table = Table(title="chat-echo settings")
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_column("Env")
    for field, value in settings.model_dump().items():
        shown = "****" if field == "token" and value else ("" if value is None else str(value))
        table.add_row(field, shown, ENV_VARS.get(field, ("",))[0])
    table.add_row("base_url", settings.base_url, "")
    console.print(table)


@config.command("set")
@click.option("--project-id", default=None)
@click.option("--database", default=None)
@click.option("--emulator-host", default=None, help="host:port of the Firestore emulator")
@click.option("--token", default=None, help="Bearer token (use 'owner' for the emulator)")
def config_set(project_id: Optional[str], database: Optional[str],
               emulator_host: Optional[str], token: Optional[str]):
    """Save settings to ~/.chat-echo/config.json."""
    updates = {
        "project_id": project_id,
        "database": database,
        "emulator_host": emulator_host,
        "token": token,
    }
    cfg = {**load_config(), **{k: v for k, v in updates.items() if v is not None}}
    save_config(cfg)
    console.print("[green]Settings saved.[/green]")
