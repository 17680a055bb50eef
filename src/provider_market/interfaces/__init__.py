"""Protocol interfaces for the remote services provider_market talks to."""

from provider_market.interfaces.chain import ChainService
from provider_market.interfaces.market import MarketService

__all__ = ["ChainService", "MarketService"]
