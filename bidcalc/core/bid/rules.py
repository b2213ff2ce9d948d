"""
Rules - Minimal bid and minimal buyout thresholds for an English auction.

Both rules are pure functions of the previous price per token and the
auction terms. A previous price of 0 (or None) means no bid has been
placed yet, in which case the configured reserve / buyout price applies
verbatim.

All division truncates toward zero; inputs are non-negative integers.
"""

from typing import Optional

from bidcalc.utils.validation import BPS_DENOMINATOR


# =============================================================================
# Basis Point Arithmetic
# =============================================================================

def apply_bps(amount: int, bps: int) -> int:
    """
    Take a basis point share of an amount.

    result = amount * bps // 10000
    """
    return amount * bps // BPS_DENOMINATOR


def normalize_previous_price(previous_price_per_token: Optional[int]) -> int:
    """Map a missing previous price to 0."""
    return previous_price_per_token if previous_price_per_token else 0


# =============================================================================
# Rules
# =============================================================================

def get_minimal_bid_per_token(
    previous_price_per_token: Optional[int],
    reserve_price_per_token: int,
    minimal_auction_bps: int,
) -> int:
    """
    Compute the lowest acceptable price per token for the next bid.

    Args:
        previous_price_per_token: Current winning price per token, 0/None if none
        reserve_price_per_token: Opening price when there is no previous bid
        minimal_auction_bps: Minimum raise over the previous price

    Returns:
        Minimal bid price per token
    """
    previous = normalize_previous_price(previous_price_per_token)
    if previous > 0:
        return previous + apply_bps(previous, minimal_auction_bps)
    return reserve_price_per_token


def get_minimal_buyout_per_token(
    previous_price_per_token: Optional[int],
    buyout_price_per_token: int,
    minimal_auction_bps: int,
    bonus_refund_bps: int,
) -> int:
    """
    Compute the lowest price per token that counts as a buyout.

    Once a bid exists, the buyout price is topped up with the bonus owed
    to the outbid bidder, and never falls below an ordinary minimal raise.

    Args:
        previous_price_per_token: Current winning price per token, 0/None if none
        buyout_price_per_token: Configured buyout price per token
        minimal_auction_bps: Minimum raise over the previous price
        bonus_refund_bps: Bonus paid to the outbid bidder

    Returns:
        Minimal buyout price per token
    """
    previous = normalize_previous_price(previous_price_per_token)
    if previous > 0:
        from_buyout_price = buyout_price_per_token + apply_bps(previous, bonus_refund_bps)
        from_minimal_raise = previous + apply_bps(previous, minimal_auction_bps)
        return max(from_buyout_price, from_minimal_raise)
    return buyout_price_per_token
