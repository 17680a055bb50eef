"""MarketService protocol - the provider's storage market module."""

from __future__ import annotations

from typing import Any, Protocol

from multiformats import CID

from provider_market.models.ask import StorageAsk


class MarketService(Protocol):
    """Ask, acceptance policy and deal operations on the storage market."""

    async def get_ask(self) -> StorageAsk | None:
        """Return the currently published ask, or None if there is none."""
        ...

    async def set_ask(
        self, price: int, duration_epochs: int, min_piece_size: int, max_piece_size: int,
    ) -> None:
        """Publish a new ask. The service stamps expiry and sequence number."""
        ...

    async def set_accepting_deals(self, enabled: bool) -> None:
        ...

    async def import_deal_data(self, proposal_cid: CID, path: str) -> None:
        """Hand a local file to the deal engine for an accepted deal."""
        ...

    async def list_incomplete_deals(self) -> list[dict[str, Any]]:
        ...
