"""Lotus-backed ChainService."""

from __future__ import annotations

import logging

from provider_market.errors import RemoteError
from provider_market.lotus.rpc import LotusRPCClient

log = logging.getLogger(__name__)


class LotusChainService:
    """Chain queries split across the full node (head) and miner (actor) APIs."""

    def __init__(self, full_node: LotusRPCClient, miner: LotusRPCClient) -> None:
        self._full_node = full_node
        self._miner = miner

    async def current_height(self) -> int:
        head = await self._full_node.call("ChainHead")
        try:
            return int(head["Height"])
        except (TypeError, KeyError, ValueError) as exc:
            raise RemoteError("Filecoin.ChainHead", f"malformed tipset: {head!r}") from exc

    async def provider_address(self) -> str:
        address = await self._miner.call("ActorAddress")
        if not isinstance(address, str) or not address:
            raise RemoteError("Filecoin.ActorAddress", f"malformed address: {address!r}")
        return address

    async def sector_capacity(self, address: str) -> int:
        size = await self._miner.call("ActorSectorSize", address)
        log.debug("Sector size for %s: %s", address, size)
        if isinstance(size, bool) or not isinstance(size, (int, str)):
            raise RemoteError("Filecoin.ActorSectorSize", f"malformed sector size: {size!r}")
        try:
            capacity = int(size)
        except ValueError as exc:
            raise RemoteError(
                "Filecoin.ActorSectorSize", f"malformed sector size: {size!r}",
            ) from exc
        if capacity <= 0:
            raise RemoteError("Filecoin.ActorSectorSize", f"malformed sector size: {size!r}")
        return capacity
