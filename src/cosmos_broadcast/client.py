"""
AsyncTxClient / TxClient: the send pipeline and its sync wrapper.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

import httpx
from pydantic import ValidationError

from cosmos_broadcast.codes import CodeToMessage, code_to_message as default_code_to_message
from cosmos_broadcast.config import ClientConfig
from cosmos_broadcast.errors import SigningError, TransportError
from cosmos_broadcast.getters import Getters, RestGetters
from cosmos_broadcast.inclusion import SendHandle, query_tx_inclusion
from cosmos_broadcast.models.fee import DEFAULT_GAS_PRICE, FeeOptions
from cosmos_broadcast.models.tx import AccountMeta, SignResult, StdTx
from cosmos_broadcast.normalize import normalize_broadcast_response, transport_failure
from cosmos_broadcast.transport.envelope import build_broadcast_body
from cosmos_broadcast.transport.http import HttpClient
from cosmos_broadcast.tx import (
    create_sign_message,
    create_signature,
    create_signed_transaction,
    create_std_tx,
)

Signer = Union[Callable[[str], Any], Callable[[str], Awaitable[Any]]]

logger = logging.getLogger(__name__)


async def sign_with(signer: Any, sign_message: str) -> SignResult:
    """Run a signer (function or object with `.sign`, sync or async).

    Exceptions raised by the signer propagate unchanged. Only a result that
    is not a signature + public key becomes a SigningError.
    """
    fn = getattr(signer, "sign", signer)
    result = fn(sign_message)
    if inspect.isawaitable(result):
        result = await result

    if isinstance(result, SignResult):
        return result
    try:
        return SignResult.model_validate(result)
    except ValidationError as e:
        raise SigningError(f"Signer returned an invalid result: {e}") from e


class AsyncTxClient:
    """Async transaction client (primary)."""

    def __init__(
        self,
        node_url: Optional[str] = None,
        chain_id: Optional[str] = None,
        getters: Optional[Getters] = None,
        code_to_message: Optional[CodeToMessage] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        cfg = config or ClientConfig()
        overrides = {k: v for k, v in {"node_url": node_url, "chain_id": chain_id}.items() if v}
        self.config = cfg.model_copy(update=overrides)

        self.http = HttpClient(base_url=self.config.node_url, timeout=self.config.timeout, transport=transport)
        self.getters: Getters = getters or RestGetters(self.http)
        self._code_to_message = code_to_message or default_code_to_message

    @property
    def chain_id(self) -> str:
        return self.config.chain_id

    async def account(self, address: str) -> AccountMeta:
        meta = await self.getters.account(address)
        if isinstance(meta, AccountMeta):
            return meta
        return AccountMeta.model_validate(meta)

    async def broadcast(self, signed_tx: StdTx, mode: Optional[str] = None) -> str:
        """POST a signed tx to /txs and return its hash."""
        body = build_broadcast_body(signed_tx, mode or self.config.broadcast_mode)
        try:
            res = await self.http.post("/txs", body)
        except TransportError as e:
            raise transport_failure(e) from e
        return normalize_broadcast_response(res, self._code_to_message)

    async def send(
        self,
        fee_options: Union[FeeOptions, dict[str, Any]],
        messages: Iterable[dict[str, Any]],
        sender_address: str,
        signer: Signer,
        mode: Optional[str] = None,
    ) -> SendHandle:
        """Build, sign and broadcast one transaction."""
        if not self.chain_id:
            raise ValueError("chain_id is required to sign a transaction")
        if not isinstance(fee_options, FeeOptions):
            fee_options = self._fee_options(fee_options)

        meta = await self.account(sender_address)
        logger.debug("account %s: sequence=%d account_number=%d", sender_address, meta.sequence, meta.account_number)

        std_tx = create_std_tx(fee_options, messages)
        sign_message = create_sign_message(std_tx, meta, self.chain_id)
        signed = await sign_with(signer, sign_message)

        envelope = create_signature(signed.signature, meta.sequence, meta.account_number, signed.public_key)
        signed_tx = create_signed_transaction(std_tx, envelope)
        tx_hash = await self.broadcast(signed_tx, mode)
        logger.debug("broadcast %s from %s (sequence %d)", tx_hash, sender_address, meta.sequence)
        return self.handle(tx_hash, meta.sequence)

    def _fee_options(self, raw: dict[str, Any]) -> FeeOptions:
        if "gasPrice" not in raw and "gas_price" not in raw:
            raw = {**raw, "gas_price": {"amount": DEFAULT_GAS_PRICE, "denom": self.config.default_denom}}
        return FeeOptions.model_validate(raw)

    def handle(self, tx_hash: str, sequence: int) -> SendHandle:
        return SendHandle(
            hash=tx_hash,
            sequence=sequence,
            get_tx=self.getters.tx,
            iterations=self.config.inclusion_iterations,
            delay_ms=self.config.inclusion_delay_ms,
        )

    async def wait_for_inclusion(
        self,
        tx_hash: str,
        iterations: Optional[int] = None,
        delay_ms: Optional[int] = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> Any:
        return await query_tx_inclusion(
            tx_hash,
            self.getters.tx,
            self.config.inclusion_iterations if iterations is None else iterations,
            self.config.inclusion_delay_ms if delay_ms is None else delay_ms,
            cancel=cancel,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AsyncTxClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


async def send(
    fee_options: Union[FeeOptions, dict[str, Any]],
    messages: Iterable[dict[str, Any]],
    sender_address: str,
    signer: Signer,
    node_url: str,
    chain_id: str,
    getters: Getters,
    code_to_message: Optional[CodeToMessage] = None,
    mode: Optional[str] = None,
) -> SendHandle:
    """One-shot send. The returned handle polls through `getters.tx`."""
    async with AsyncTxClient(node_url, chain_id, getters=getters, code_to_message=code_to_message) as client:
        return await client.send(fee_options, messages, sender_address, signer, mode=mode)


class TxClient:
    """Sync wrapper around AsyncTxClient. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncTxClient(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def config(self) -> ClientConfig:
        return self._async.config

    def account(self, address: str) -> AccountMeta:
        return self._run(self._async.account(address))

    def broadcast(self, signed_tx: StdTx, mode: Optional[str] = None) -> str:
        return self._run(self._async.broadcast(signed_tx, mode))

    def send(self, fee_options: Any, messages: Iterable[dict[str, Any]], sender_address: str,
             signer: Signer, mode: Optional[str] = None) -> SendHandle:
        return self._run(self._async.send(fee_options, messages, sender_address, signer, mode=mode))

    def wait_for_inclusion(self, tx_hash: str, **kwargs: Any) -> Any:
        return self._run(self._async.wait_for_inclusion(tx_hash, **kwargs))

    def check_inclusion(self, handle: SendHandle, **kwargs: Any) -> Any:
        return self._run(handle.check_inclusion(**kwargs))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
