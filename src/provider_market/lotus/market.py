"""Lotus-backed MarketService (storage miner API)."""

from __future__ import annotations

import logging
from typing import Any

from multiformats import CID

from provider_market.errors import RemoteError
from provider_market.lotus.rpc import LotusRPCClient
from provider_market.models.ask import StorageAsk

log = logging.getLogger(__name__)


class LotusMarketService:
    """Storage market operations on a Lotus storage miner.

    Lotus serializes BigInts (prices) as decimal strings and CIDs as
    ``{"/": "<cid>"}`` links.
    """

    def __init__(self, miner: LotusRPCClient) -> None:
        self._miner = miner

    async def get_ask(self) -> StorageAsk | None:
        signed = await self._miner.call("MarketGetAsk")
        if signed is None:
            return None
        if not isinstance(signed, dict):
            raise RemoteError("Filecoin.MarketGetAsk", f"malformed signed ask: {signed!r}")
        if not signed.get("Ask"):
            return None
        try:
            return StorageAsk.from_lotus(signed["Ask"])
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteError("Filecoin.MarketGetAsk", f"malformed ask: {exc}") from exc

    async def set_ask(
        self, price: int, duration_epochs: int, min_piece_size: int, max_piece_size: int,
    ) -> None:
        await self._miner.call(
            "MarketSetAsk", str(price), duration_epochs, min_piece_size, max_piece_size,
        )

    async def set_accepting_deals(self, enabled: bool) -> None:
        await self._miner.call("DealsSetAcceptingStorageDeals", enabled)

    async def import_deal_data(self, proposal_cid: CID, path: str) -> None:
        await self._miner.call("DealsImportData", {"/": str(proposal_cid)}, path)

    async def list_incomplete_deals(self) -> list[dict[str, Any]]:
        deals = await self._miner.call("MarketListIncompleteDeals")
        if deals is None:
            return []
        if not isinstance(deals, list):
            raise RemoteError(
                "Filecoin.MarketListIncompleteDeals", f"expected a list, got {type(deals).__name__}",
            )
        return deals
