"""
Transaction document construction.

build -> sign message -> (external signer) -> signature envelope -> signed tx.
All functions here are pure; none of them mutate their inputs.
"""

import base64
import json
from typing import Any, Iterable, Union

from cosmos_broadcast.models.fee import Coin, Fee, FeeOptions
from cosmos_broadcast.models.tx import (
    DEFAULT_PUB_KEY_TYPE,
    AccountMeta,
    PubKey,
    SignatureEnvelope,
    StdTx,
)


def create_std_tx(fee_options: FeeOptions, messages: Iterable[dict[str, Any]]) -> StdTx:
    """Unsigned document: the fee is gas x gas price, computed in Decimal."""
    price = fee_options.gas_price
    return StdTx(
        messages=list(messages),
        fee=Fee(
            amount=[Coin(amount=fee_options.fee_amount, denom=price.denom)],
            gas=fee_options.gas,
        ),
        signatures=None,
        memo=fee_options.memo,
    )


def _remove_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _remove_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_remove_none(v) for v in value]
    return value


def create_sign_message(std_tx: StdTx, meta: AccountMeta, chain_id: str) -> str:
    """Canonical sign payload.

    Keys sorted at every level, no whitespace, None properties dropped, so the
    same logical content always yields the same bytes. Empty memo and empty
    lists stay in: the node signs `"memo":""` and `"amount":[]`.
    """
    wire = std_tx.to_wire()
    fee = wire["fee"]
    payload = {
        "account_number": str(meta.account_number),
        "chain_id": chain_id,
        "fee": {"amount": fee.get("amount") or [], "gas": fee["gas"]},
        "memo": wire.get("memo"),
        "msgs": wire["msg"],
        "sequence": str(meta.sequence),
    }
    return json.dumps(_remove_none(payload), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _b64(value: Union[bytes, str]) -> str:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


def create_signature(
    signature: Union[bytes, str],
    sequence: int,
    account_number: int,
    public_key: Union[bytes, str],
    pub_key_type: str = DEFAULT_PUB_KEY_TYPE,
) -> SignatureEnvelope:
    return SignatureEnvelope(
        signature=_b64(signature),
        pub_key=PubKey(type=pub_key_type, value=_b64(public_key)),
        account_number=account_number,
        sequence=sequence,
    )


def create_signed_transaction(std_tx: StdTx, signature: SignatureEnvelope) -> StdTx:
    """Copy of `std_tx` with a single signature attached."""
    return std_tx.model_copy(update={"signatures": [signature]}, deep=True)
