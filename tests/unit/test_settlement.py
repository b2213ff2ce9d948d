"""
Tests for bid settlement.

These tests verify:
1. Reference scenarios (opening bid, raise with refund, invalid quantity)
2. Advisory error accumulation and ordering
3. Conservation of the bid amount and of the fee split
4. Saturation when the bonus exceeds the bid
"""

import logging

import pytest

from bidcalc.core.bid import (
    AuctionTerms,
    BidError,
    PreviousBidState,
    ProposedBid,
    compute_bid_amounts,
    settle_bid,
)


# =============================================================================
# Test Fixtures
# =============================================================================


def make_terms(**overrides) -> AuctionTerms:
    values = dict(
        reserve_price_per_token=100,
        buyout_price_per_token=1_000,
        minimal_auction_bps=500,
        bonus_refund_bps=100,
        royalty_bps=0,
        protocol_fee_bps=0,
    )
    values.update(overrides)
    return AuctionTerms(**values)


def settle(bid: int, quantity: int = 1, previous=None, **terms):
    state = PreviousBidState(previous) if previous is not None else None
    return settle_bid(make_terms(**terms), ProposedBid(bid, quantity), state)


class TestScenarios:
    """Reference scenarios."""

    def test_first_bid(self):
        """No previous bid: reserve is the minimum, nothing refunded."""
        result = settle(100, previous=0)

        assert result.is_valid
        assert result.minimal_bid_per_token == 100
        assert result.minimal_buyout_per_token == 1_000
        assert result.refund_bonus_amount == 0
        assert result.refund_amount_to_previous_bidder == 0
        assert result.new_price_per_token == 100
        assert result.new_refund_bonus_per_token == 1
        assert result.new_refund_amount == 101
        assert result.new_profit_amount == 1

    def test_raise_with_refund(self):
        """Previous 100, bid 106: minimum 105, previous bidder gets 101."""
        result = settle(106, previous=100, royalty_bps=250, protocol_fee_bps=200)

        assert result.errors == ()
        assert result.minimal_bid_per_token == 105
        assert result.minimal_buyout_per_token == 1_001
        assert result.total_bid_amount == 106
        assert result.refund_bonus_per_token == 1
        assert result.refund_amount_to_previous_bidder == 101
        assert result.new_price_per_token == 105
        assert result.new_amount == 105
        assert result.new_refund_amount == 106
        assert result.new_profit_amount == 0
        assert result.protocol_fee_amount == 2
        assert result.royalty_amount == 2
        assert result.lister_amount == 101

    def test_invalid_quantity(self):
        """Quantity 0 is reported and the rest still computes."""
        result = settle(100, quantity=0)

        assert result.has_error(BidError.INVALID_QUANTITY)
        assert result.total_bid_amount == 0
        assert result.minimal_bid_per_token == 100
        assert result.new_price_per_token == 100
        assert result.new_amount == 0
        assert result.lister_amount == 0

    def test_invalid_quantity_also_trips_refund_check(self):
        """0 >= 0: an empty bid cannot cover even a zero refund."""
        result = settle(100, quantity=0)
        assert result.errors == (BidError.INVALID_QUANTITY, BidError.REFUND_EXCEEDS_BID)


class TestValidation:
    """Tests for advisory errors."""

    def test_bps_configuration(self):
        result = settle(100, minimal_auction_bps=100, bonus_refund_bps=100)
        assert result.errors == (BidError.INVALID_BPS_CONFIGURATION,)

    def test_bid_below_minimum(self):
        result = settle(104, previous=100)
        assert result.errors == (BidError.BID_BELOW_MINIMUM,)
        assert result.minimal_bid_per_token == 105

    def test_bid_at_minimum_is_valid(self):
        assert settle(105, previous=100).is_valid

    def test_opening_bid_below_reserve(self):
        result = settle(99, previous=0)
        assert result.errors == (BidError.BID_BELOW_MINIMUM,)

    def test_refund_exceeds_bid(self):
        """A raise that truncates to 0 lets the bid equal the refund."""
        result = settle(10, previous=10)
        # minimal = 10 + 10 * 500 // 10000 = 10, refund = 10 + 0 >= 10
        assert result.errors == (BidError.REFUND_EXCEEDS_BID,)
        assert result.minimal_bid_per_token == 10
        assert result.refund_amount_to_previous_bidder == 10

    def test_messages(self):
        result = settle(100, quantity=0, minimal_auction_bps=100, bonus_refund_bps=100)
        assert result.error_messages == [
            "Quantity must be greater than 0",
            "Minimal auction bps must be greater than bonus refund bps",
            "Refund exceeds new bid amount",
        ]

    def test_error_order(self):
        """Errors follow the order the checks run in."""
        result = settle(
            400, previous=1_000, minimal_auction_bps=6_000, bonus_refund_bps=5_000
        )
        assert result.errors == (
            BidError.BID_BELOW_MINIMUM,
            BidError.REFUND_EXCEEDS_BID,
            BidError.BONUS_EXCEEDS_BID,
        )


class TestBonusExceedsBid:
    """The net price saturates at 0 when the bonus is larger than the bid."""

    def test_clamped(self):
        result = settle(
            400, previous=1_000, minimal_auction_bps=6_000, bonus_refund_bps=5_000
        )
        assert result.refund_bonus_per_token == 500
        assert result.new_price_per_token == 0
        assert result.new_amount == 0
        assert result.new_refund_amount == 0
        assert result.new_profit_amount == -400
        assert result.lister_amount == 0

    def test_equal_bonus_not_reported(self):
        result = settle(
            500, previous=1_000, minimal_auction_bps=6_000, bonus_refund_bps=5_000
        )
        assert not result.has_error(BidError.BONUS_EXCEEDS_BID)
        assert result.new_price_per_token == 0


class TestConservation:
    """Amount conservation properties."""

    CASES = [
        # (bid, quantity, previous, minimal_bps, bonus_bps, royalty_bps, fee_bps)
        (100, 1, 0, 500, 100, 0, 0),
        (106, 1, 100, 500, 100, 250, 200),
        (1_337, 7, 1_200, 1_000, 250, 500, 125),
        (999_999, 13, 900_000, 1_000, 333, 777, 99),
        (105 * 10**28, 10**20, 10**30, 500, 100, 250, 200),
    ]

    @pytest.mark.parametrize("bid,quantity,previous,minimal,bonus,royalty,fee", CASES)
    def test_total_is_bonus_plus_new_amount(self, bid, quantity, previous, minimal, bonus, royalty, fee):
        result = compute_bid_amounts(bid, quantity, 0, 0, previous, minimal, bonus, royalty, fee)
        assert result.is_valid
        assert result.total_bid_amount == result.refund_bonus_amount + result.new_amount

    @pytest.mark.parametrize("bid,quantity,previous,minimal,bonus,royalty,fee", CASES)
    def test_fee_split(self, bid, quantity, previous, minimal, bonus, royalty, fee):
        result = compute_bid_amounts(bid, quantity, 0, 0, previous, minimal, bonus, royalty, fee)
        assert result.new_amount == (
            result.protocol_fee_amount + result.royalty_amount + result.lister_amount
        )

    def test_remainder_goes_to_lister(self):
        """Truncated fee dust stays with the lister."""
        result = compute_bid_amounts(101, 1, 0, 0, None, 500, 100, 50, 50)
        # 101 * 50 // 10000 == 0
        assert result.protocol_fee_amount == 0
        assert result.royalty_amount == 0
        assert result.lister_amount == 101

    def test_large_values_exact(self):
        result = compute_bid_amounts(105 * 10**28, 10**20, 0, 0, 10**30, 500, 100, 0, 0)
        assert result.minimal_bid_per_token == 105 * 10**28
        assert result.refund_bonus_per_token == 10**28
        assert result.new_amount == 104 * 10**48
        assert result.total_bid_amount == 105 * 10**48

    def test_debug_log_with_huge_values(self, caplog):
        caplog.set_level(logging.DEBUG, logger="bidcalc.settlement")
        result = compute_bid_amounts(10**2500, 10**2500, 0, 0, None, 500, 100, 0, 0)
        assert result.is_valid
        assert any("minimal=" in r.getMessage() for r in caplog.records)


class TestQuantityOne:
    """For a single token the per token and total figures coincide."""

    @pytest.mark.parametrize("bid,previous", [(100, 0), (106, 100), (5_000, 4_321)])
    def test_identities(self, bid, previous):
        result = settle(bid, quantity=1, previous=previous)
        assert result.new_bid_per_token == result.total_bid_amount
        assert result.refund_bonus_per_token == result.refund_bonus_amount
        assert result.new_price_per_token == result.new_amount
        assert result.new_refund_bonus_per_token == result.new_refund_bonus_amount


class TestEntryPoints:
    """compute_bid_amounts and settle_bid agree."""

    def test_settle_bid_matches_flat_call(self):
        terms = make_terms(royalty_bps=250, protocol_fee_bps=200)
        via_terms = settle_bid(terms, ProposedBid(250, 4), PreviousBidState(200))
        flat = compute_bid_amounts(250, 4, 100, 1_000, 200, 500, 100, 250, 200)
        assert via_terms == flat

    def test_missing_previous_same_as_zero(self):
        assert settle(100, previous=None) == settle(100, previous=0)

    def test_deterministic(self):
        assert settle(106, previous=100) == settle(106, previous=100)

    def test_result_is_immutable(self):
        result = settle(106, previous=100)
        with pytest.raises(AttributeError):
            result.new_amount = 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
