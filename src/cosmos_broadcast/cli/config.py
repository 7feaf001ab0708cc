"""CLI: cosmos-tx config set|show"""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from cosmos_broadcast.config import load_config, save_config

console = Console()


@click.group()
def config():
    """Persisted client settings."""


@config.command("set")
@click.option("--node", "node_url", default=None, help="Node REST URL")
@click.option("--chain-id", default=None)
@click.option("--mode", "broadcast_mode", default=None, help="sync | async | block")
@click.option("--denom", "default_denom", default=None)
@click.option("--iterations", "inclusion_iterations", default=None, type=int)
@click.option("--delay-ms", "inclusion_delay_ms", default=None, type=int)
def config_set(**values: Optional[object]):
    """Update saved settings."""
    cfg = load_config()
    updates = {k: v for k, v in values.items() if v is not None}
    cfg = cfg.model_validate({**cfg.model_dump(), **updates})
    save_config(cfg)
    console.print("[green]Config saved.[/green]")


@config.command("show")
def config_show():
    """Show saved settings."""
    table = Table(title="cosmos-broadcast config")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in load_config().model_dump().items():
        table.add_row(key, str(value))
    console.print(table)
