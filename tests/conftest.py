"""Shared fixtures for provider_market tests."""

from __future__ import annotations

import pytest

from provider_market.models.config import EndpointConfig, MarketConfig

from tests.mocks import MockChain, MockMarket

BLOCK_DELAY = 25

_API_ENV = (
    "MINER_API_INFO",
    "FULLNODE_API_INFO",
    "PROVIDER_MARKET_MINER_URL",
    "PROVIDER_MARKET_MINER_TOKEN",
    "PROVIDER_MARKET_FULLNODE_URL",
    "PROVIDER_MARKET_FULLNODE_TOKEN",
    "PROVIDER_MARKET_BLOCK_DELAY",
)


def make_test_config(**overrides) -> MarketConfig:
    """Build a MarketConfig suitable for testing."""
    defaults = dict(
        miner=EndpointConfig("http://127.0.0.1:2345/rpc/v0", "miner-token"),
        full_node=EndpointConfig("http://127.0.0.1:1234/rpc/v0", "node-token"),
        block_delay=BLOCK_DELAY,
        request_timeout=5,
    )
    defaults.update(overrides)
    return MarketConfig(**defaults)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the operator's Lotus environment out of the tests."""
    for name in _API_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def test_config():
    return make_test_config()


@pytest.fixture
def mock_chain():
    return MockChain()


@pytest.fixture
def mock_market(mock_chain):
    return MockMarket(chain=mock_chain)
