"""Ask lifecycle - validate and publish a provider's ask, and render it back."""

from __future__ import annotations

import logging

from provider_market.errors import (
    InvalidPieceRange,
    InvalidPrice,
    PieceSizeExceedsCapacity,
    PieceSizeTooSmall,
)
from provider_market.interfaces.chain import ChainService
from provider_market.interfaces.market import MarketService
from provider_market.models.ask import (
    MIN_PIECE_SIZE,
    AskDisplay,
    AskRequest,
    PublishedAsk,
)
from provider_market.units import duration_to_epochs, format_duration, parse_size, size_str

log = logging.getLogger(__name__)

EXPIRED = "expired"
NO_ASK = "<miner does not have an ask>"
ASK_TABLE_HEADER = (
    "Price per GiB / Epoch",
    "Min. Piece Size (w/bit-padding)",
    "Max. Piece Size (w/bit-padding)",
    "Expiry (Epoch)",
    "Expiry (Appx. Rem. Time)",
    "Seq. No.",
)
_COLUMN_PADDING = 2


def validate_piece_sizes(
    min_bytes: int, max_bytes: int | None, sector_capacity: int,
) -> tuple[int, int]:
    """Check an ask's piece-size range against market rules.

    A missing (or zero) maximum defaults to the sector capacity. Returns the
    effective ``(min, max)`` pair.
    """
    if min_bytes < MIN_PIECE_SIZE:
        raise PieceSizeTooSmall(
            f"minimum piece size (w/bit-padding) is {size_str(MIN_PIECE_SIZE)}, "
            f"got {size_str(min_bytes)}",
            value=min_bytes,
            limit=MIN_PIECE_SIZE,
        )

    if not max_bytes:
        max_bytes = sector_capacity

    if max_bytes > sector_capacity:
        raise PieceSizeExceedsCapacity(
            f"max piece size (w/bit-padding) {size_str(max_bytes)} cannot exceed "
            f"miner sector size {size_str(sector_capacity)}",
            value=max_bytes,
            limit=sector_capacity,
        )

    if min_bytes > max_bytes:
        raise InvalidPieceRange(
            f"min piece size {size_str(min_bytes)} is larger than "
            f"max piece size {size_str(max_bytes)}",
            value=min_bytes,
            limit=max_bytes,
        )

    return min_bytes, max_bytes


class AskPublisher:
    """Turns an ``AskRequest`` into a validated, epoch-denominated ask.

    Local inputs are parsed before any remote call. The sector size is
    resolved before validation, and the market service sees exactly one
    ``set_ask`` call, or none if anything fails.
    """

    def __init__(self, chain: ChainService, market: MarketService, block_delay: int) -> None:
        self._chain = chain
        self._market = market
        self._block_delay = block_delay

    async def publish(self, request: AskRequest) -> PublishedAsk:
        if request.price < 0:
            raise InvalidPrice(
                f"price must be non-negative, got {request.price}",
                value=request.price,
                limit=0,
            )

        duration_epochs = duration_to_epochs(request.duration, self._block_delay)
        min_bytes = parse_size(request.min_piece_size)
        max_bytes = (
            parse_size(request.max_piece_size)
            if request.max_piece_size is not None
            else None
        )

        address = await self._chain.provider_address()
        capacity = await self._chain.sector_capacity(address)

        min_bytes, max_bytes = validate_piece_sizes(min_bytes, max_bytes, capacity)

        await self._market.set_ask(request.price, duration_epochs, min_bytes, max_bytes)
        log.info(
            "Ask set for %s: price=%d duration=%d epochs pieces=%s..%s",
            address, request.price, duration_epochs, size_str(min_bytes), size_str(max_bytes),
        )
        return PublishedAsk(
            price=request.price,
            duration_epochs=duration_epochs,
            min_piece_size=min_bytes,
            max_piece_size=max_bytes,
        )


class AskInspector:
    """Reads the current ask and computes its remaining validity."""

    def __init__(self, chain: ChainService, market: MarketService, block_delay: int) -> None:
        self._chain = chain
        self._market = market
        self._block_delay = block_delay

    async def inspect(self) -> AskDisplay:
        ask = await self._market.get_ask()
        if ask is None:
            return AskDisplay()

        height = await self._chain.current_height()
        remaining_epochs = ask.expiry - height
        if remaining_epochs <= 0:
            remaining = EXPIRED
        else:
            remaining = format_duration(remaining_epochs * self._block_delay)

        return AskDisplay(
            ask=ask,
            min_size=size_str(ask.min_piece_size),
            max_size=size_str(ask.max_piece_size),
            remaining=remaining,
            height=height,
        )


def render_ask_table(display: AskDisplay) -> str:
    """Format an ``AskDisplay`` as a fixed-column table."""
    if display.ask is None:
        return NO_ASK

    ask = display.ask
    row = (
        str(ask.price),
        display.min_size,
        display.max_size,
        str(ask.expiry),
        display.remaining,
        str(ask.seq_no),
    )
    widths = [max(len(h), len(c)) + _COLUMN_PADDING for h, c in zip(ASK_TABLE_HEADER, row)]
    lines = [
        "".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()
        for cells in (ASK_TABLE_HEADER, row)
    ]
    return "\n".join(lines)
