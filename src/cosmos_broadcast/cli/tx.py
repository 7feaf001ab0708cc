"""CLI: cosmos-tx account|sign-bytes|broadcast|wait"""

import json
from typing import Optional

import click
from rich.console import Console

from cosmos_broadcast.errors import BroadcastError
from cosmos_broadcast.models.tx import AccountMeta, StdTx
from cosmos_broadcast.tx import create_sign_message

console = Console()


def _get_client(cfg):
    from cosmos_broadcast.cli.main import _get_client
    return _get_client(cfg)


def _run(coro):
    from cosmos_broadcast.cli.main import _run
    return _run(coro)


def _fail(e: Exception) -> None:
    console.print(f"[red]{e}[/red]")
    raise SystemExit(1)


def _read_tx(path: str) -> StdTx:
    with open(path) as f:
        data = json.load(f)
    # accept a bare tx, a broadcast body, or an LCD `{type, value}` wrapper
    if isinstance(data, dict) and "tx" in data:
        data = data["tx"]
    if isinstance(data, dict) and "value" in data and "fee" not in data:
        data = data["value"]
    return StdTx.model_validate(data)


@click.command("account")
@click.argument("address")
@click.pass_obj
def account_cmd(cfg, address):
    """Show sequence and account number for ADDRESS."""

    async def _account():
        async with _get_client(cfg) as client:
            return await client.account(address)

    try:
        meta = _run(_account())
    except BroadcastError as e:
        _fail(e)
    console.print(f"sequence=[bold]{meta.sequence}[/bold] account_number=[bold]{meta.account_number}[/bold]")


@click.command("sign-bytes")
@click.argument("tx_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--address", default=None, help="Look up sequence/account number for this signer")
@click.option("--sequence", default=None, type=int)
@click.option("--account-number", default=None, type=int)
@click.pass_obj
def sign_bytes_cmd(cfg, tx_file, address: Optional[str], sequence: Optional[int], account_number: Optional[int]):
    """Print the canonical sign payload for an unsigned tx."""
    if not cfg.chain_id:
        _fail(click.UsageError("chain id not set; pass --chain-id or run `cosmos-tx config set --chain-id`"))
    std_tx = _read_tx(tx_file)

    if sequence is not None and account_number is not None:
        meta = AccountMeta(sequence=sequence, account_number=account_number)
    elif address:
        async def _account():
            async with _get_client(cfg) as client:
                return await client.account(address)

        try:
            meta = _run(_account())
        except BroadcastError as e:
            _fail(e)
    else:
        raise click.UsageError("pass --address, or both --sequence and --account-number")

    click.echo(create_sign_message(std_tx, meta, cfg.chain_id))


@click.command("broadcast")
@click.argument("tx_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--mode", default=None, help="sync | async | block")
@click.option("--wait", "wait_for", is_flag=True, help="Poll until included in a block")
@click.pass_obj
def broadcast_cmd(cfg, tx_file, mode, wait_for):
    """Broadcast a signed tx file."""
    signed_tx = _read_tx(tx_file)

    async def _broadcast():
        async with _get_client(cfg) as client:
            with console.status("Broadcasting..."):
                tx_hash = await client.broadcast(signed_tx, mode)
            console.print(f"[green]Broadcast: {tx_hash}[/green]")
            if wait_for:
                with console.status("Waiting for inclusion..."):
                    await client.wait_for_inclusion(tx_hash)
                console.print("[green]Included in a block.[/green]")

    try:
        _run(_broadcast())
    except BroadcastError as e:
        _fail(e)


@click.command("wait")
@click.argument("tx_hash")
@click.option("--iterations", default=None, type=int)
@click.option("--delay-ms", default=None, type=int)
@click.pass_obj
def wait_cmd(cfg, tx_hash, iterations, delay_ms):
    """Poll until TX_HASH is included in a block."""

    async def _wait():
        async with _get_client(cfg) as client:
            with console.status(f"Waiting for {tx_hash}..."):
                return await client.wait_for_inclusion(tx_hash, iterations, delay_ms)

    try:
        tx = _run(_wait())
    except BroadcastError as e:
        _fail(e)
    height = tx.get("height") if isinstance(tx, dict) else None
    console.print(f"[green]Included{f' at height {height}' if height else ''}.[/green]")
