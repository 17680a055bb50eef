"""CLI entry point for provider_market."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Any, Coroutine, TypeVar

import click

from provider_market.config import load_config
from provider_market.errors import MarketAdminError
from provider_market.interfaces import ChainService, MarketService
from provider_market.lotus import LotusChainService, LotusMarketService, LotusRPCClient
from provider_market.market.ask import AskInspector, AskPublisher, render_ask_table
from provider_market.market.deals import (
    AcceptancePolicyToggle,
    DealDataBinder,
    DealEnumerator,
    dump_deals,
)
from provider_market.models.ask import DEFAULT_ASK_DURATION, DEFAULT_MIN_PIECE_SIZE, AskRequest
from provider_market.models.config import MarketConfig

T = TypeVar("T")


@dataclass
class Services:
    """Remote collaborators a command needs."""

    chain: ChainService
    market: MarketService
    block_delay: int


def _build_services(cfg: MarketConfig) -> Services:
    miner = LotusRPCClient(cfg.miner.api_url, cfg.miner.token, cfg.request_timeout)
    full_node = LotusRPCClient(cfg.full_node.api_url, cfg.full_node.token, cfg.request_timeout)
    return Services(
        chain=LotusChainService(full_node, miner),
        market=LotusMarketService(miner),
        block_delay=cfg.block_delay,
    )


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _load(ctx: click.Context) -> MarketConfig:
    """Load config once per invocation and apply its log level."""
    if "config" not in ctx.obj:
        try:
            cfg = load_config(ctx.obj["config_path"])
        except MarketAdminError as exc:
            _fail(exc)
        if not ctx.obj["verbose"]:
            logging.getLogger().setLevel(cfg.log_level.upper())
        ctx.obj["config"] = cfg
    return ctx.obj["config"]


def _services(ctx: click.Context) -> Services:
    return _build_services(_load(ctx))


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, reporting any market error and exiting 1."""
    try:
        return asyncio.run(coro)
    except MarketAdminError as exc:
        _fail(exc)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """provider-market - manage a storage provider's market settings and deals."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Acceptance policy ──────────────────────────────────


@cli.command()
@click.pass_context
def enable(ctx: click.Context) -> None:
    """Configure the miner to consider storage deal proposals."""
    svc = _services(ctx)
    _run(AcceptancePolicyToggle(svc.market).set_accepting(True))


@cli.command()
@click.pass_context
def disable(ctx: click.Context) -> None:
    """Configure the miner to reject all storage deal proposals."""
    svc = _services(ctx)
    _run(AcceptancePolicyToggle(svc.market).set_accepting(False))


# ── Ask ────────────────────────────────────────────────


@cli.command("set-ask")
@click.option("--price", type=int, required=True,
              help="Price of the ask (attoFIL / GiB / Epoch)")
@click.option("--duration", default=DEFAULT_ASK_DURATION, show_default=True,
              help="Time after which the ask expires")
@click.option("--min-piece-size", default=DEFAULT_MIN_PIECE_SIZE, show_default=True,
              help="Minimum piece size (w/bit-padding)")
@click.option("--max-piece-size", default=None,
              help="Maximum piece size (w/bit-padding)  [default: miner sector size]")
@click.pass_context
def set_ask(
    ctx: click.Context,
    price: int,
    duration: str,
    min_piece_size: str,
    max_piece_size: str | None,
) -> None:
    """Configure the miner's ask."""
    svc = _services(ctx)
    request = AskRequest(
        price=price,
        duration=duration,
        min_piece_size=min_piece_size,
        max_piece_size=max_piece_size,
    )
    _run(AskPublisher(svc.chain, svc.market, svc.block_delay).publish(request))


@cli.command("get-ask")
@click.pass_context
def get_ask(ctx: click.Context) -> None:
    """Print the miner's ask."""
    svc = _services(ctx)
    display = _run(AskInspector(svc.chain, svc.market, svc.block_delay).inspect())
    click.echo(render_ask_table(display))


# ── Deals ──────────────────────────────────────────────


@cli.group()
def deals():
    """Interact with your deals."""
    pass


@deals.command("list")
@click.pass_context
def deals_list(ctx: click.Context) -> None:
    """List all incomplete deals for this miner."""
    svc = _services(ctx)
    records = _run(DealEnumerator(svc.market).list_incomplete())
    click.echo(dump_deals(records))


@deals.command("import-data")
@click.argument("proposal_cid")
@click.argument("file")
@click.pass_context
def deals_import_data(ctx: click.Context, proposal_cid: str, file: str) -> None:
    """Manually import data for a deal."""
    svc = _services(ctx)
    _run(DealDataBinder(svc.market).import_data(proposal_cid, file))


deals.add_command(enable)
deals.add_command(disable)
deals.add_command(set_ask)
deals.add_command(get_ask)


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show resolved configuration."""
    cfg = _load(ctx)
    click.echo(f"Miner API:     {cfg.miner.api_url}")
    click.echo(f"Miner token:   {'***configured***' if cfg.miner.token else '(not set)'}")
    click.echo(f"Full node API: {cfg.full_node.api_url}")
    click.echo(f"Node token:    {'***configured***' if cfg.full_node.token else '(not set)'}")
    click.echo(f"Block delay:   {cfg.block_delay}s")
    click.echo(f"Timeout:       {cfg.request_timeout}s")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
