from cosmos_broadcast.models.fee import Coin, Fee, FeeOptions, GasPrice, DEFAULT_GAS_PRICE, DEFAULT_DENOM
from cosmos_broadcast.models.tx import (
    AccountMeta,
    BroadcastBody,
    PubKey,
    SignatureEnvelope,
    SignResult,
    StdTx,
)

__all__ = [
    "Coin",
    "Fee",
    "FeeOptions",
    "GasPrice",
    "DEFAULT_GAS_PRICE",
    "DEFAULT_DENOM",
    "AccountMeta",
    "BroadcastBody",
    "PubKey",
    "SignatureEnvelope",
    "SignResult",
    "StdTx",
]
