"""ChainService protocol - chain height and provider actor lookups."""

from __future__ import annotations

from typing import Protocol


class ChainService(Protocol):
    """Read-only view of chain state relevant to the provider."""

    async def current_height(self) -> int:
        """Return the epoch of the current chain head."""
        ...

    async def provider_address(self) -> str:
        """Return the provider's on-chain actor address (e.g. ``f01000``)."""
        ...

    async def sector_capacity(self, address: str) -> int:
        """Return the sector size in bytes for the given actor."""
        ...
