"""Configuration models for the market CLI."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class EndpointConfig:
    """A Lotus JSON-RPC endpoint."""

    api_url: str
    token: str = ""  # bearer token, from *_API_INFO or config


@dataclass
class MarketConfig:
    """Complete CLI configuration."""

    # Storage miner API (ActorAddress, Market*, Deals*)
    miner: EndpointConfig = field(
        default_factory=lambda: EndpointConfig("http://127.0.0.1:2345/rpc/v0")
    )
    # Full node API (ChainHead)
    full_node: EndpointConfig = field(
        default_factory=lambda: EndpointConfig("http://127.0.0.1:1234/rpc/v0")
    )

    # Chain
    block_delay: int = 25  # seconds per epoch

    # Client
    request_timeout: int = 30  # seconds

    # Logging
    log_level: str = "info"
