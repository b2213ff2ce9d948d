"""
bidcalc Bid Module.

Arithmetic for one English auction bid step:
- Minimal bid and minimal buyout rules
- Settlement of a proposed bid (refund, bonus, fee split)
- String-typed transport payload
"""

from bidcalc.core.bid.terms import (
    AuctionTerms,
    PreviousBidState,
    ProposedBid,
)

from bidcalc.core.bid.rules import (
    apply_bps,
    get_minimal_bid_per_token,
    get_minimal_buyout_per_token,
)

from bidcalc.core.bid.settlement import (
    BidError,
    SettlementResult,
    compute_bid_amounts,
    settle_bid,
    next_previous_state,
)

from bidcalc.core.bid.schemas import SettlementPayload

__all__ = [
    # Terms
    "AuctionTerms",
    "PreviousBidState",
    "ProposedBid",
    # Rules
    "apply_bps",
    "get_minimal_bid_per_token",
    "get_minimal_buyout_per_token",
    # Settlement
    "BidError",
    "SettlementResult",
    "compute_bid_amounts",
    "settle_bid",
    "next_previous_state",
    "SettlementPayload",
]
