"""
Broadcast response interpretation.

A node answers a broadcast in one of several shapes:

- an object carrying ``txhash`` (accepted, possibly with a nonzero ``code``
  when execution failed),
- an object without ``txhash`` (``{code, message?}`` style rejection),
- a list of either of the above,
- or, when the transport itself failed, an error value: a JSON object with a
  ``message`` or a bare string such as
  ``Msg 0 failed: {"code":102,"message":"existing unbonding delegation found"}``.

Raw values are first decoded into one of four result types, then checked in
two passes: envelope shape (hash present), then execution code.
"""

import json
import logging
from typing import Any, Optional, Union

from pydantic import BaseModel

from cosmos_broadcast.codes import CodeToMessage, code_to_message as default_code_to_message
from cosmos_broadcast.errors import ChainRejectionError, MalformedResponseError, TransportError

logger = logging.getLogger(__name__)

NO_RESULT_MESSAGE = "no broadcast result returned"
REJECTED_MESSAGE = "transaction rejected"
UNKNOWN_CODE = -1


class Accepted(BaseModel):
    txhash: str
    code: int = 0
    codespace: Optional[str] = None
    raw: dict[str, Any]


class Rejected(BaseModel):
    code: int = 0
    codespace: Optional[str] = None
    message: Optional[str] = None
    raw: dict[str, Any]


class ResultList(BaseModel):
    items: list["BroadcastResult"]


class Opaque(BaseModel):
    text: str


BroadcastResult = Union[Accepted, Rejected, ResultList, Opaque]
ResultList.model_rebuild()


def _coerce_code(value: Any) -> int:
    """Falsy codes (0, "0", None, "") mean no failure."""
    if not value:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return UNKNOWN_CODE


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def decode_broadcast_result(raw: Any) -> BroadcastResult:
    if isinstance(raw, list):
        return ResultList(items=[decode_broadcast_result(item) for item in raw])
    if isinstance(raw, dict):
        code = _coerce_code(raw.get("code"))
        codespace = _text(raw.get("codespace"))
        txhash = _text(raw.get("txhash"))
        if txhash:
            return Accepted(txhash=txhash, code=code, codespace=codespace, raw=raw)
        message = _text(raw.get("message")) or _text(raw.get("raw_log"))
        return Rejected(code=code, codespace=codespace, message=message, raw=raw)
    return Opaque(text="" if raw is None else str(raw))


def describe_error_text(text: str) -> str:
    """Pull the message out of ``<prefix>: <json>`` error strings.

    Only applies when a ':' appears before the first '{'; otherwise the text
    is returned verbatim.
    """
    idx_colon = text.find(":")
    idx_brace = text.find("{")
    if idx_colon < 0 or idx_brace < 0 or idx_colon > idx_brace:
        return text
    fragment = text[idx_colon + 1:]
    try:
        parsed = json.loads(fragment)
    except ValueError:
        return f"unparsable error payload: {text}"
    if isinstance(parsed, dict) and _text(parsed.get("message")):
        return _text(parsed["message"])  # type: ignore[return-value]
    return text


def describe_transport_error(raw: Any) -> str:
    """Human-readable message for a failed transport call's error value."""
    if isinstance(raw, BaseException):
        message = _text(getattr(raw, "message", None))
        return message or describe_error_text(str(raw))
    if isinstance(raw, dict):
        message = _text(raw.get("message"))
        if message:
            return message
        error = raw.get("error")
        if isinstance(error, str) and error:
            return describe_error_text(error)
        return json.dumps(raw)
    if isinstance(raw, list):
        return json.dumps(raw)
    if raw is None:
        return "transport failure"
    return describe_error_text(str(raw))


def transport_failure(err: TransportError) -> TransportError:
    """Rebuild a transport error with the node's own message extracted."""
    raw = (err.details or {}).get("raw", err.message)
    return TransportError(describe_transport_error(raw), details=err.details)


def _assert_ok(result: BroadcastResult) -> None:
    if isinstance(result, ResultList):
        if not result.items:
            raise MalformedResponseError(NO_RESULT_MESSAGE)
        for item in result.items:
            _assert_ok(item)
        return
    if isinstance(result, Opaque):
        raise MalformedResponseError(describe_error_text(result.text) if result.text else NO_RESULT_MESSAGE)
    if isinstance(result, Rejected) and not result.code:
        raise MalformedResponseError(result.message or REJECTED_MESSAGE, details=result.raw)


def _rejection_text(result: Union[Accepted, Rejected], lookup: CodeToMessage) -> str:
    """Node message when a rejection carries one, otherwise the code lookup."""
    if isinstance(result, Rejected) and result.message:
        return result.message
    return lookup(result.code)


def _assert_executed(result: BroadcastResult, lookup: CodeToMessage) -> None:
    if isinstance(result, ResultList):
        for item in result.items:
            _assert_executed(item, lookup)
        return
    if isinstance(result, (Accepted, Rejected)) and result.code:
        logger.warning("node rejected tx: code=%s codespace=%s", result.code, result.codespace)
        raise ChainRejectionError(
            f"Error sending: {_rejection_text(result, lookup)}",
            chain_code=result.code,
            codespace=result.codespace,
            details=result.raw,
        )


def _first_hash(result: BroadcastResult) -> str:
    if isinstance(result, ResultList):
        return _first_hash(result.items[0])
    if isinstance(result, Accepted):
        return result.txhash
    raise MalformedResponseError(NO_RESULT_MESSAGE)


def normalize_broadcast_response(raw: Any, lookup: Optional[CodeToMessage] = None) -> str:
    """Return the tx hash of a successful broadcast or raise a BroadcastError.

    Shape is checked first (MalformedResponseError), then the execution code
    (ChainRejectionError). A list succeeds only if every element does; its
    first element's hash is returned.
    """
    result = decode_broadcast_result(raw)
    _assert_ok(result)
    _assert_executed(result, lookup or default_code_to_message)
    return _first_hash(result)
