"""Configuration loading: TOML file + Lotus API_INFO + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from provider_market.errors import ConfigError
from provider_market.lotus.rpc import parse_api_info
from provider_market.models.config import EndpointConfig, MarketConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "PROVIDER_MARKET_",
) -> MarketConfig:
    """Load CLI configuration from TOML file and env vars.

    Priority (highest wins):
        1. PROVIDER_MARKET_* environment variables
        2. MINER_API_INFO / FULLNODE_API_INFO (Lotus convention)
        3. TOML config file
        4. Defaults from MarketConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                try:
                    raw = tomllib.load(f)
                except tomllib.TOMLDecodeError as exc:
                    raise ConfigError(f"invalid config file {p}: {exc}") from exc

    cfg = MarketConfig()

    # ── Endpoint sections ──────────────────────────────────
    cfg.miner = _endpoint(raw.get("miner", {}), cfg.miner)
    cfg.full_node = _endpoint(raw.get("full_node", {}), cfg.full_node)

    # ── Chain section ──────────────────────────────────────
    chain = raw.get("chain", {})
    if v := chain.get("block_delay"):
        cfg.block_delay = _int("chain.block_delay", v)

    # ── Client section ─────────────────────────────────────
    client = raw.get("client", {})
    if v := client.get("request_timeout"):
        cfg.request_timeout = _int("client.request_timeout", v)

    # ── Logging section ────────────────────────────────────
    logging_raw = raw.get("logging", {})
    if v := logging_raw.get("log_level"):
        cfg.log_level = str(v)

    # ── Lotus API_INFO ─────────────────────────────────────
    if info := os.environ.get("MINER_API_INFO"):
        url, token = parse_api_info(info)
        cfg.miner = EndpointConfig(url, token)
    if info := os.environ.get("FULLNODE_API_INFO"):
        url, token = parse_api_info(info)
        cfg.full_node = EndpointConfig(url, token)

    # ── Environment variable overrides (highest priority) ──
    if url := os.environ.get(f"{env_prefix}MINER_URL"):
        cfg.miner.api_url = url
    if token := os.environ.get(f"{env_prefix}MINER_TOKEN"):
        cfg.miner.token = token
    if url := os.environ.get(f"{env_prefix}FULLNODE_URL"):
        cfg.full_node.api_url = url
    if token := os.environ.get(f"{env_prefix}FULLNODE_TOKEN"):
        cfg.full_node.token = token
    if delay := os.environ.get(f"{env_prefix}BLOCK_DELAY"):
        cfg.block_delay = _int(f"{env_prefix}BLOCK_DELAY", delay)

    if cfg.block_delay <= 0:
        raise ConfigError(f"block_delay must be positive, got {cfg.block_delay}")
    if cfg.request_timeout <= 0:
        raise ConfigError(f"request_timeout must be positive, got {cfg.request_timeout}")
    if cfg.log_level.upper() not in LOG_LEVELS:
        raise ConfigError(
            f"unknown log_level {cfg.log_level!r}, expected one of {', '.join(LOG_LEVELS).lower()}"
        )

    return cfg


def _int(key: str, value: object) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from exc


def _endpoint(section: dict, default: EndpointConfig) -> EndpointConfig:
    """Read an endpoint section, accepting either api_url/token or api_info."""
    if info := section.get("api_info"):
        url, token = parse_api_info(str(info))
        return EndpointConfig(url, token)
    return EndpointConfig(
        api_url=str(section.get("api_url", default.api_url)),
        token=str(section.get("token", default.token)),
    )
