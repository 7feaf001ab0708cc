"""
Client configuration, persisted as JSON under ~/.cosmos-broadcast/.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from cosmos_broadcast.inclusion import DEFAULT_DELAY_MS, DEFAULT_ITERATIONS
from cosmos_broadcast.models.fee import DEFAULT_DENOM
from cosmos_broadcast.models.tx import DEFAULT_BROADCAST_MODE
from cosmos_broadcast.transport.http import DEFAULT_NODE_URL, DEFAULT_TIMEOUT

CONFIG_FILE = Path.home() / ".cosmos-broadcast" / "config.json"


class ClientConfig(BaseModel):
    node_url: str = DEFAULT_NODE_URL
    chain_id: str = ""
    broadcast_mode: str = DEFAULT_BROADCAST_MODE
    default_denom: str = DEFAULT_DENOM
    inclusion_iterations: int = Field(default=DEFAULT_ITERATIONS, gt=0)
    inclusion_delay_ms: int = Field(default=DEFAULT_DELAY_MS, ge=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)


def load_config(path: Optional[Path] = None) -> ClientConfig:
    path = path or CONFIG_FILE
    try:
        return ClientConfig.model_validate(json.loads(path.read_text()))
    except (FileNotFoundError, json.JSONDecodeError, ValidationError):
        return ClientConfig()


def save_config(cfg: ClientConfig, path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg.model_dump(), indent=2))
