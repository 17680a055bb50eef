"""Data models for provider_market."""

from provider_market.models.ask import (
    AskDisplay,
    AskRequest,
    PublishedAsk,
    StorageAsk,
)
from provider_market.models.config import EndpointConfig, MarketConfig

__all__ = [
    "AskDisplay", "AskRequest", "PublishedAsk", "StorageAsk",
    "EndpointConfig", "MarketConfig",
]
