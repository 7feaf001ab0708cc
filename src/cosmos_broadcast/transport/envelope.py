"""
Broadcast body construction and parsing.

The mode is not validated beyond being a string: "sync", "async" and "block"
are the known tags, anything else is passed through and the node decides.
"""

import json
import logging
from typing import Any, Optional

from cosmos_broadcast.models.tx import BROADCAST_MODES, DEFAULT_BROADCAST_MODE, BroadcastBody, StdTx

logger = logging.getLogger(__name__)


def build_broadcast_body(signed_tx: StdTx, mode: str = DEFAULT_BROADCAST_MODE) -> dict[str, Any]:
    """Build the `{tx, mode}` body as a dict ready to POST."""
    if mode not in BROADCAST_MODES:
        logger.debug("passing unknown broadcast mode %r through to the node", mode)
    return BroadcastBody(tx=signed_tx, mode=mode).model_dump(mode="json", by_alias=True)


def create_broadcast_body(signed_tx: StdTx, mode: str = DEFAULT_BROADCAST_MODE) -> str:
    """Serialized broadcast body."""
    return json.dumps(build_broadcast_body(signed_tx, mode))


def parse_broadcast_body(raw: str) -> Optional[BroadcastBody]:
    """Parse a serialized broadcast body. Returns None if invalid."""
    try:
        return BroadcastBody.model_validate_json(raw)
    except Exception:
        return None
