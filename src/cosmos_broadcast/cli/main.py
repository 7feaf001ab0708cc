"""
cosmos-broadcast CLI (`cosmos-tx`).

Commands:
  cosmos-tx config set|show          Node URL, chain id, polling budget
  cosmos-tx account <address>        Sequence and account number
  cosmos-tx sign-bytes <tx.json>     Canonical sign payload for an external signer
  cosmos-tx broadcast <signed.json>  Broadcast a signed tx, optionally wait
  cosmos-tx wait <hash>              Poll until a tx is included in a block
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install cosmos-broadcast[cli]")

from cosmos_broadcast.client import AsyncTxClient
from cosmos_broadcast.config import ClientConfig, load_config

console = Console()


def _get_client(cfg: ClientConfig) -> AsyncTxClient:
    return AsyncTxClient(config=cfg)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("--node", "node_url", default=None, help="Node REST URL (overrides config)")
@click.option("--chain-id", default=None, help="Chain id (overrides config)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx, node_url, chain_id, verbose):
    """Build, sign, broadcast and confirm transactions."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    cfg = load_config()
    overrides = {k: v for k, v in {"node_url": node_url, "chain_id": chain_id}.items() if v}
    ctx.obj = cfg.model_copy(update=overrides)


# Register subcommands from separate modules
from cosmos_broadcast.cli.config import config
from cosmos_broadcast.cli.tx import account_cmd, broadcast_cmd, sign_bytes_cmd, wait_cmd

main.add_command(config)
main.add_command(account_cmd)
main.add_command(sign_bytes_cmd)
main.add_command(broadcast_cmd)
main.add_command(wait_cmd)


if __name__ == "__main__":
    main()
