"""
Read-side collaborators: account lookup and tx query.

Anything with async `account(address)` and `tx(hash)` methods works;
`RestGetters` is the default backed by the node's REST API.
"""

from typing import Any, Protocol

from cosmos_broadcast.models.tx import AccountMeta
from cosmos_broadcast.transport.http import HttpClient


class Getters(Protocol):
    async def account(self, address: str) -> AccountMeta: ...

    async def tx(self, tx_hash: str) -> Any: ...


def _unwrap_account(data: Any) -> dict[str, Any]:
    """Accept `{height, result: {type, value: {...}}}` and flatter variants."""
    if isinstance(data, dict) and "result" in data:
        data = data["result"]
    if isinstance(data, dict) and "value" in data and isinstance(data["value"], dict):
        data = data["value"]
    # vesting accounts nest the base account one level deeper
    if isinstance(data, dict) and "BaseVestingAccount" in data:
        data = data["BaseVestingAccount"].get("BaseAccount", data)
    if not isinstance(data, dict):
        raise ValueError(f"unexpected account payload: {data!r}")
    return data


class RestGetters:
    def __init__(self, http: HttpClient):
        self._http = http

    async def account(self, address: str) -> AccountMeta:
        data = _unwrap_account(await self._http.get(f"/auth/accounts/{address}"))
        return AccountMeta(
            sequence=data.get("sequence") or 0,
            account_number=data.get("account_number") or 0,
        )

    async def tx(self, tx_hash: str) -> dict[str, Any]:
        """Raises TransportError while the node does not know the hash."""
        return await self._http.get(f"/txs/{tx_hash}")
