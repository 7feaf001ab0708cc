"""
Block-inclusion polling.

Fixed delay, hard attempt ceiling, no backoff or jitter: with the defaults the
worst case is 30 x 2s = 60s. Exhausting the budget is final; callers that want
to keep waiting call again.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, Field

from cosmos_broadcast.errors import InclusionTimeoutError

DEFAULT_ITERATIONS = 30
DEFAULT_DELAY_MS = 2000
NOT_INCLUDED_MESSAGE = (
    "The transaction was still not included in a block. "
    "We can't say for certain it will be included in the future."
)

TxQuery = Callable[[str], Awaitable[Any]]
Sleep = Callable[[float], Awaitable[Any]]

logger = logging.getLogger(__name__)


async def query_tx_inclusion(
    tx_hash: str,
    get_tx: TxQuery,
    iterations: int = DEFAULT_ITERATIONS,
    delay_ms: int = DEFAULT_DELAY_MS,
    *,
    cancel: Optional[asyncio.Event] = None,
    sleep: Sleep = asyncio.sleep,
) -> Any:
    """Poll `get_tx(tx_hash)` until it succeeds; return what it returned.

    Any exception from `get_tx` counts as "not included yet" and is followed by
    a `delay_ms` pause. Setting `cancel` stops the loop at the next attempt.
    """
    attempts = 0
    while attempts < iterations:
        if cancel is not None and cancel.is_set():
            raise InclusionTimeoutError(
                f"Inclusion check for {tx_hash} was aborted after {attempts} attempts.",
                attempts=attempts,
                details={"tx_hash": tx_hash, "aborted": True},
            )
        attempts += 1
        try:
            tx = await get_tx(tx_hash)
        except Exception as e:
            logger.debug("tx %s not included yet (attempt %d/%d): %s", tx_hash, attempts, iterations, e)
            await sleep(delay_ms / 1000)
            continue
        logger.debug("tx %s included after %d attempts", tx_hash, attempts)
        return tx

    raise InclusionTimeoutError(
        NOT_INCLUDED_MESSAGE,
        attempts=attempts,
        details={"tx_hash": tx_hash, "aborted": False},
    )


class SendHandle(BaseModel):
    """Result of a successful broadcast.

    `check_inclusion()` polls again on every call; nothing is cached.
    """
    hash: str
    sequence: int
    get_tx: TxQuery = Field(exclude=True, repr=False)
    iterations: int = DEFAULT_ITERATIONS
    delay_ms: int = DEFAULT_DELAY_MS

    model_config = {"frozen": True}

    async def check_inclusion(
        self,
        iterations: Optional[int] = None,
        delay_ms: Optional[int] = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> Any:
        return await query_tx_inclusion(
            self.hash,
            self.get_tx,
            self.iterations if iterations is None else iterations,
            self.delay_ms if delay_ms is None else delay_ms,
            cancel=cancel,
        )

    async def included(self) -> Any:
        return await self.check_inclusion()
