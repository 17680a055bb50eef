"""Lotus JSON-RPC adapters for the chain and market services."""

from provider_market.lotus.chain import LotusChainService
from provider_market.lotus.market import LotusMarketService
from provider_market.lotus.rpc import LotusRPCClient, parse_api_info

__all__ = ["LotusChainService", "LotusMarketService", "LotusRPCClient", "parse_api_info"]
