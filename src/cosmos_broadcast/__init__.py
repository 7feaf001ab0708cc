"""
cosmos-broadcast: send Cosmos SDK transactions and confirm their inclusion
through a node's REST transaction API.
"""

from cosmos_broadcast.client import AsyncTxClient, TxClient, send
from cosmos_broadcast.config import ClientConfig
from cosmos_broadcast.errors import (
    BroadcastError,
    ChainRejectionError,
    InclusionTimeoutError,
    MalformedResponseError,
    SigningError,
    TransportError,
)
from cosmos_broadcast.getters import RestGetters
from cosmos_broadcast.inclusion import SendHandle, query_tx_inclusion
from cosmos_broadcast.models import AccountMeta, FeeOptions, GasPrice, SignResult, StdTx

__version__ = "0.1.0"
__all__ = [
    "AsyncTxClient",
    "TxClient",
    "send",
    "ClientConfig",
    "BroadcastError",
    "ChainRejectionError",
    "InclusionTimeoutError",
    "MalformedResponseError",
    "SigningError",
    "TransportError",
    "RestGetters",
    "SendHandle",
    "query_tx_inclusion",
    "AccountMeta",
    "FeeOptions",
    "GasPrice",
    "SignResult",
    "StdTx",
]
