"""
Terms - Value types describing one bid step.

Every object here is built fresh for a computation and never mutated.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuctionTerms:
    """
    Auction configuration.

    Prices are per token in currency subunits, ratios in basis points.
    Callers should keep minimal_auction_bps > bonus_refund_bps; a
    violation is reported by the settlement, not blocked.
    """
    reserve_price_per_token: int
    buyout_price_per_token: int
    minimal_auction_bps: int
    bonus_refund_bps: int
    royalty_bps: int = 0
    protocol_fee_bps: int = 0


@dataclass(frozen=True)
class PreviousBidState:
    """Winning bid the new bid has to beat."""
    previous_price_per_token: int = 0


@dataclass(frozen=True)
class ProposedBid:
    """A bid attempt: price per token and token quantity."""
    new_bid_per_token: int
    quantity: int
