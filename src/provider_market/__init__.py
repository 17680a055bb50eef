"""provider_market - storage provider market administration for Lotus miners."""

__version__ = "0.1.0"
