"""Lotus JSON-RPC transport - posts ``Filecoin.*`` calls over HTTP."""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx

from provider_market.errors import ConfigError, RemoteError

log = logging.getLogger(__name__)

METHOD_PREFIX = "Filecoin."


def parse_api_info(api_info: str) -> tuple[str, str]:
    """Split a Lotus ``*_API_INFO`` value into ``(rpc_url, token)``.

    Format is ``TOKEN:/ip4/127.0.0.1/tcp/2345/http``. A value without a
    token is accepted as a bare multiaddr.
    """
    info = api_info.strip()
    if info.startswith("/"):
        token, maddr = "", info
    else:
        token, _, maddr = info.partition(":")
    if not maddr.startswith("/"):
        raise ConfigError(f"malformed API info {api_info!r}: expected TOKEN:/multiaddr")

    parts = maddr.strip("/").split("/")
    if len(parts) < 4 or parts[2] != "tcp":
        raise ConfigError(f"malformed API multiaddr {maddr!r}")
    proto, host, _, port, *rest = parts
    if proto == "ip6":
        host = f"[{host}]"
    elif proto not in ("ip4", "dns", "dns4", "dns6"):
        raise ConfigError(f"unsupported address protocol {proto!r} in {maddr!r}")
    scheme = "https" if rest and rest[0] in ("https", "wss") else "http"
    return f"{scheme}://{host}:{port}/rpc/v0", token


class LotusRPCClient:
    """Minimal JSON-RPC 2.0 client for a Lotus API endpoint.

    Each call opens a short-lived ``httpx.AsyncClient``. Failures of any kind
    (transport, HTTP status, JSON-RPC ``error``) surface as ``RemoteError``.
    """

    def __init__(self, url: str, token: str = "", timeout: int = 30) -> None:
        self._url = url
        self._token = token
        self._timeout = timeout
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        return self._url

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def call(self, method: str, *params: Any) -> Any:
        """Invoke ``Filecoin.<method>`` and return its ``result`` member."""
        full_method = f"{METHOD_PREFIX}{method}"
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": full_method,
            "params": list(params),
        }
        log.debug("RPC %s -> %s params=%s", full_method, self._url, payload["params"])

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self._url, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            raise RemoteError(full_method, f"{type(exc).__name__}: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        # Lotus may report RPC errors with a non-2xx status; prefer its message.
        if isinstance(data, dict) and (error := data.get("error")):
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RemoteError(full_method, str(message))
        if resp.is_error:
            raise RemoteError(full_method, f"HTTP {resp.status_code}: {resp.text[:200]}")
        if not isinstance(data, dict):
            raise RemoteError(full_method, f"unexpected response: {resp.text[:200]!r}")
        return data.get("result")
