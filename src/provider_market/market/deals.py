"""Deal-side pass-throughs: acceptance policy, manual data import, deal listing."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from multiformats import CID

from provider_market.errors import MalformedProposalId
from provider_market.interfaces.market import MarketService

log = logging.getLogger(__name__)


def parse_proposal_cid(text: str) -> CID:
    """Decode a deal proposal CID string."""
    if not text.strip():
        raise MalformedProposalId(text, "empty CID")
    try:
        return CID.decode(text.strip())
    except (ValueError, KeyError, IndexError) as exc:
        raise MalformedProposalId(text, str(exc)) from exc


class AcceptancePolicyToggle:
    """Switches whether the provider considers new storage deal proposals."""

    def __init__(self, market: MarketService) -> None:
        self._market = market

    async def set_accepting(self, enabled: bool) -> None:
        await self._market.set_accepting_deals(enabled)
        log.info("Storage deal acceptance %s", "enabled" if enabled else "disabled")


class DealDataBinder:
    """Associates local data with a deal the market has already accepted.

    The path is handed to the deal engine as-is; reading and verifying the
    file against the deal's piece happens remotely.
    """

    def __init__(self, market: MarketService) -> None:
        self._market = market

    async def import_data(self, proposal_id: str, file_path: str | Path) -> CID:
        proposal_cid = parse_proposal_cid(proposal_id)
        path = str(file_path)
        await self._market.import_deal_data(proposal_cid, path)
        log.info("Imported %s for deal proposal %s", path, proposal_cid)
        return proposal_cid


class DealEnumerator:
    """Fetches a fresh snapshot of deals that have not completed."""

    def __init__(self, market: MarketService) -> None:
        self._market = market

    async def list_incomplete(self) -> list[dict[str, Any]]:
        deals = await self._market.list_incomplete_deals()
        log.debug("Market reported %d incomplete deals", len(deals))
        return list(deals)


def dump_deals(deals: list[dict[str, Any]]) -> str:
    return json.dumps(deals, indent=2)
