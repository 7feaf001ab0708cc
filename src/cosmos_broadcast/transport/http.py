"""
REST HTTP client for a node's legacy transaction API.
"""

import logging
from typing import Any, Optional

import httpx

from cosmos_broadcast.errors import TransportError

DEFAULT_NODE_URL = "http://localhost:1317"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_NODE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "User-Agent": "cosmos-broadcast/0.1.0",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _error_body(resp: httpx.Response) -> Any:
        """Parsed JSON body if there is one, otherwise the raw text."""
        try:
            return resp.json()
        except ValueError:
            return resp.text

    async def _request(self, method: str, path: str, body: Optional[Any] = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=body)
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, path, e)
            raise TransportError(str(e) or type(e).__name__, details={"raw": str(e)}) from e

        if resp.status_code >= 400:
            raw = self._error_body(resp)
            logger.debug("%s %s -> HTTP %s", method, path, resp.status_code)
            raise TransportError(
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                details={"status": resp.status_code, "raw": raw},
            )

        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(
                f"non-JSON response from {path}: {resp.text[:200]}",
                details={"status": resp.status_code, "raw": resp.text},
            ) from e

    async def get(self, path: str) -> Any:
        return await self._request("GET", path)

    async def post(self, path: str, body: Optional[Any] = None) -> Any:
        return await self._request("POST", path, body)

    async def close(self) -> None:
        await self._client.aclose()
