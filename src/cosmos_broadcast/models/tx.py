"""
Transaction document models.

StdTx is the unsigned document until `signatures` is filled with exactly one
SignatureEnvelope. 64-bit integers (gas, sequence, account_number) go on the
wire as strings, the way the node's amino JSON expects them.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_serializer

from cosmos_broadcast.models.fee import Fee

BROADCAST_MODES = ("sync", "async", "block")
DEFAULT_BROADCAST_MODE = "sync"
DEFAULT_PUB_KEY_TYPE = "tendermint/PubKeySecp256k1"


class AccountMeta(BaseModel):
    """Account state at signing time."""
    sequence: int = Field(ge=0)
    account_number: int = Field(ge=0)


class PubKey(BaseModel):
    type: str = DEFAULT_PUB_KEY_TYPE
    value: str


class SignatureEnvelope(BaseModel):
    signature: str
    pub_key: PubKey
    account_number: int = Field(ge=0)
    sequence: int = Field(ge=0)

    @field_serializer("account_number", "sequence", when_used="json")
    def _uint_str(self, value: int) -> str:
        return str(value)


class StdTx(BaseModel):
    messages: list[dict[str, Any]] = Field(default_factory=list, alias="msg")
    fee: Fee
    signatures: Optional[list[SignatureEnvelope]] = None
    memo: str = ""

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SignResult(BaseModel):
    """What a signer hands back for a sign message."""
    signature: Union[bytes, str]
    public_key: Union[bytes, str] = Field(alias="publicKey")

    model_config = {"populate_by_name": True}


class BroadcastBody(BaseModel):
    tx: StdTx
    mode: str = DEFAULT_BROADCAST_MODE
