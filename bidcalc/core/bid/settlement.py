"""
Settlement - Full monetary breakdown of one English auction bid step.

Given a proposed bid and the auction terms, computes:
- Thresholds: minimal bid and minimal buyout per token
- Refund to the outbid bidder (principal + bonus)
- Net price kept at stake by the new bidder after funding the bonus
- What the new bidder would receive if outbid in turn
- Protocol fee / royalty / lister split if the bid wins

Validation never raises: violated rules are collected in the result's
errors and every figure is still computed, so callers can display or log
an invalid bid as well as reject it.

Note: for quantity == 1 the per token and total figures coincide
(new_bid_per_token == total_bid_amount, refund_bonus_per_token ==
refund_bonus_amount, new_price_per_token == new_amount,
new_refund_bonus_per_token == new_refund_bonus_amount).
"""

import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, List, Optional, Tuple

from bidcalc.core.bid.rules import (
    apply_bps,
    get_minimal_bid_per_token,
    get_minimal_buyout_per_token,
    normalize_previous_price,
)
from bidcalc.core.bid.schemas import SettlementPayload
from bidcalc.core.bid.terms import AuctionTerms, PreviousBidState, ProposedBid
from bidcalc.utils.logger import get_logger
from bidcalc.utils.validation import format_amount

logger = get_logger("settlement")


# =============================================================================
# Errors
# =============================================================================

class BidError(Enum):
    """Advisory validation failures, in the order they are checked."""
    INVALID_QUANTITY = "Quantity must be greater than 0"
    INVALID_BPS_CONFIGURATION = "Minimal auction bps must be greater than bonus refund bps"
    BID_BELOW_MINIMUM = "New bid price must be greater than or equal to the minimal price"
    REFUND_EXCEEDS_BID = "Refund exceeds new bid amount"
    BONUS_EXCEEDS_BID = "Refund bonus exceeds new bid price"

    @property
    def message(self) -> str:
        return self.value


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class SettlementResult:
    """Every amount derived from one bid, plus the violated rules."""
    errors: Tuple[BidError, ...]
    minimal_bid_per_token: int
    minimal_buyout_per_token: int

    new_bid_per_token: int
    total_bid_amount: int              # paid by the bidder: refund_bonus_amount + new_amount

    refund_bonus_per_token: int
    refund_bonus_amount: int           # bonus the previous bidder gets
    refund_amount_to_previous_bidder: int

    new_price_per_token: int
    new_amount: int                    # at stake for the next round

    # if another valid bid is placed
    new_refund_bonus_per_token: int
    new_refund_bonus_amount: int
    new_refund_amount: int             # received by this bidder when outbid
    new_profit_amount: int             # signed: gain (or loss) when outbid

    # else if the bid wins
    protocol_fee_amount: int
    royalty_amount: int
    lister_amount: int

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_messages(self) -> List[str]:
        return [error.message for error in self.errors]

    def has_error(self, error: BidError) -> bool:
        return error in self.errors

    def to_payload(self) -> SettlementPayload:
        """Convert to the string-typed transport model."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["errors"] = self.error_messages
        return SettlementPayload(**values)

    def to_dict(self) -> Dict[str, object]:
        """camelCase dict with decimal string amounts (JSON safe)."""
        return self.to_payload().model_dump(by_alias=True)


# =============================================================================
# Computation
# =============================================================================

def compute_bid_amounts(
    new_bid_per_token: int,
    quantity: int,
    reserve_price_per_token: int,
    buyout_price_per_token: int,
    previous_price_per_token: Optional[int],
    minimal_auction_bps: int,
    bonus_refund_bps: int,
    royalty_bps: int,
    protocol_fee_bps: int,
) -> SettlementResult:
    """
    Compute the settlement of a proposed bid.

    Args:
        new_bid_per_token: Offered price per token
        quantity: Number of tokens bid for
        reserve_price_per_token: Opening price when there is no previous bid
        buyout_price_per_token: Configured buyout price per token
        previous_price_per_token: Current winning price per token, None if none
        minimal_auction_bps: Minimum raise over the previous price
        bonus_refund_bps: Bonus paid to an outbid bidder
        royalty_bps: Creator royalty taken from the winning amount
        protocol_fee_bps: Protocol fee taken from the winning amount

    Returns:
        SettlementResult, always fully populated
    """
    previous = normalize_previous_price(previous_price_per_token)
    total_bid_amount = new_bid_per_token * quantity

    errors: List[BidError] = []

    if quantity <= 0:
        errors.append(BidError.INVALID_QUANTITY)

    if minimal_auction_bps <= bonus_refund_bps:
        errors.append(BidError.INVALID_BPS_CONFIGURATION)

    minimal_bid_per_token = get_minimal_bid_per_token(
        previous, reserve_price_per_token, minimal_auction_bps
    )
    minimal_buyout_per_token = get_minimal_buyout_per_token(
        previous, buyout_price_per_token, minimal_auction_bps, bonus_refund_bps
    )

    if new_bid_per_token < minimal_bid_per_token:
        errors.append(BidError.BID_BELOW_MINIMUM)

    refund_bonus_per_token = apply_bps(previous, bonus_refund_bps)
    refund_bonus_amount = quantity * refund_bonus_per_token
    refund_amount_to_previous_bidder = quantity * previous + refund_bonus_amount

    if refund_amount_to_previous_bidder >= total_bid_amount:
        errors.append(BidError.REFUND_EXCEEDS_BID)

    # Saturates at 0 rather than going negative
    if refund_bonus_per_token > new_bid_per_token:
        errors.append(BidError.BONUS_EXCEEDS_BID)
        new_price_per_token = 0
    else:
        new_price_per_token = new_bid_per_token - refund_bonus_per_token
    new_amount = new_price_per_token * quantity

    new_refund_bonus_per_token = apply_bps(new_price_per_token, bonus_refund_bps)
    new_refund_bonus_amount = quantity * new_refund_bonus_per_token
    new_refund_amount = new_amount + new_refund_bonus_amount
    new_profit_amount = new_refund_amount - total_bid_amount

    protocol_fee_amount = apply_bps(new_amount, protocol_fee_bps)
    royalty_amount = apply_bps(new_amount, royalty_bps)
    lister_amount = new_amount - protocol_fee_amount - royalty_amount

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"Bid {format_amount(new_bid_per_token)} x {format_amount(quantity)}: "
            f"minimal={format_amount(minimal_bid_per_token)} "
            f"buyout={format_amount(minimal_buyout_per_token)} "
            f"refund={format_amount(refund_amount_to_previous_bidder)}"
        )
    if errors:
        logger.debug(f"Bid failed checks: {', '.join(e.name for e in errors)}")

    return SettlementResult(
        errors=tuple(errors),
        minimal_bid_per_token=minimal_bid_per_token,
        minimal_buyout_per_token=minimal_buyout_per_token,
        new_bid_per_token=new_bid_per_token,
        total_bid_amount=total_bid_amount,
        refund_bonus_per_token=refund_bonus_per_token,
        refund_bonus_amount=refund_bonus_amount,
        refund_amount_to_previous_bidder=refund_amount_to_previous_bidder,
        new_price_per_token=new_price_per_token,
        new_amount=new_amount,
        new_refund_bonus_per_token=new_refund_bonus_per_token,
        new_refund_bonus_amount=new_refund_bonus_amount,
        new_refund_amount=new_refund_amount,
        new_profit_amount=new_profit_amount,
        protocol_fee_amount=protocol_fee_amount,
        royalty_amount=royalty_amount,
        lister_amount=lister_amount,
    )


def settle_bid(
    terms: AuctionTerms,
    bid: ProposedBid,
    previous: Optional[PreviousBidState] = None,
) -> SettlementResult:
    """
    Settle a bid against auction terms.

    Args:
        terms: Auction configuration
        bid: The bid attempt
        previous: Current winning bid, None for the opening bid

    Returns:
        SettlementResult
    """
    return compute_bid_amounts(
        new_bid_per_token=bid.new_bid_per_token,
        quantity=bid.quantity,
        reserve_price_per_token=terms.reserve_price_per_token,
        buyout_price_per_token=terms.buyout_price_per_token,
        previous_price_per_token=previous.previous_price_per_token if previous else None,
        minimal_auction_bps=terms.minimal_auction_bps,
        bonus_refund_bps=terms.bonus_refund_bps,
        royalty_bps=terms.royalty_bps,
        protocol_fee_bps=terms.protocol_fee_bps,
    )


def next_previous_state(result: SettlementResult) -> PreviousBidState:
    """State the following bid has to beat if this one is accepted."""
    return PreviousBidState(previous_price_per_token=result.new_price_per_token)
