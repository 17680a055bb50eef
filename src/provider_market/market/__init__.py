"""Provider-side storage market operations."""

from provider_market.market.ask import (
    AskInspector,
    AskPublisher,
    render_ask_table,
    validate_piece_sizes,
)
from provider_market.market.deals import (
    AcceptancePolicyToggle,
    DealDataBinder,
    DealEnumerator,
    dump_deals,
    parse_proposal_cid,
)

__all__ = [
    "AskInspector", "AskPublisher", "render_ask_table", "validate_piece_sizes",
    "AcceptancePolicyToggle", "DealDataBinder", "DealEnumerator",
    "dump_deals", "parse_proposal_cid",
]
