"""Storage ask models: the published quote, the publish request, and its display."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_ASK_DURATION = "720h0m0s"
DEFAULT_MIN_PIECE_SIZE = "256B"
MIN_PIECE_SIZE = 256  # padded bytes


@dataclass(frozen=True)
class StorageAsk:
    """A provider's published price quote as held by the market service."""

    price: int  # attoFIL per GiB per epoch
    min_piece_size: int  # padded bytes
    max_piece_size: int  # padded bytes
    expiry: int  # absolute chain epoch
    seq_no: int
    miner: str = ""
    timestamp: int = 0  # epoch at which the ask was set

    @classmethod
    def from_lotus(cls, raw: dict[str, Any]) -> StorageAsk:
        """Build from the ``Ask`` member of a Lotus ``SignedStorageAsk``."""
        return cls(
            price=int(raw["Price"]),
            min_piece_size=int(raw["MinPieceSize"]),
            max_piece_size=int(raw["MaxPieceSize"]),
            expiry=int(raw["Expiry"]),
            seq_no=int(raw["SeqNo"]),
            miner=str(raw.get("Miner", "")),
            timestamp=int(raw.get("Timestamp", 0)),
        )


@dataclass(frozen=True)
class AskRequest:
    """Operator input for publishing an ask."""

    price: int
    duration: str = DEFAULT_ASK_DURATION
    min_piece_size: str = DEFAULT_MIN_PIECE_SIZE
    max_piece_size: str | None = None  # None -> sector size


@dataclass(frozen=True)
class PublishedAsk:
    """What was submitted to the market service by a successful publish."""

    price: int
    duration_epochs: int
    min_piece_size: int
    max_piece_size: int


@dataclass(frozen=True)
class AskDisplay:
    """Rendered view of the current ask. ``ask is None`` means no ask exists."""

    ask: StorageAsk | None = None
    min_size: str = ""
    max_size: str = ""
    remaining: str = ""
    height: int | None = None

    @property
    def has_ask(self) -> bool:
        return self.ask is not None
