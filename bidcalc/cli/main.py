"""
bidcalc CLI - Command Line Interface for English auction bid arithmetic

Amounts are read and printed as decimal digit strings.
"""

import json
import logging
from typing import Optional

import click

from bidcalc import __version__
from bidcalc.utils.logger import setup_logging, get_logger
from bidcalc.utils.validation import AmountParseError, format_amount, parse_amount, parse_bps

logger = get_logger("cli")


# =============================================================================
# Parameter Types
# =============================================================================

class AmountType(click.ParamType):
    """Unsigned integer amount given as a decimal digit string."""
    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return parse_amount(value, param.name if param else "amount")
        except AmountParseError as e:
            self.fail(e.reason, param, ctx)


class BpsType(click.ParamType):
    """Basis point ratio between 0 and 10000."""
    name = "bps"

    def convert(self, value, param, ctx):
        try:
            return parse_bps(value, param.name if param else "bps")
        except AmountParseError as e:
            self.fail(e.reason, param, ctx)


AMOUNT = AmountType()
BPS = BpsType()


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-dir", default=None, help="Also write logs to this directory")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False),
              help=".env file with BIDCALC_* defaults")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, log_dir, env_file):
    """English auction bid step calculator"""
    from bidcalc.core.config import load_config

    try:
        config = load_config(env_file)
    except (FileNotFoundError, AmountParseError) as e:
        raise click.UsageError(str(e))

    log_dir = log_dir or config.log_dir
    level = logging.DEBUG if debug else logging.INFO
    setup_logging(level=level, log_dir=log_dir, log_to_file=log_dir is not None)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Rule Commands
# =============================================================================

@cli.command("minimal-bid")
@click.option("--previous", type=AMOUNT, default=None, help="Current winning price per token")
@click.option("--reserve", type=AMOUNT, required=True, help="Reserve price per token")
@click.option("--minimal-auction-bps", type=BPS, required=True, help="Minimum raise in bps")
def minimal_bid(previous, reserve, minimal_auction_bps):
    """Print the minimal acceptable bid per token"""
    from bidcalc.core.bid import get_minimal_bid_per_token

    value = get_minimal_bid_per_token(previous, reserve, minimal_auction_bps)
    _echo_json({"minimalBidPerToken": format_amount(value)})


@cli.command("minimal-buyout")
@click.option("--previous", type=AMOUNT, default=None, help="Current winning price per token")
@click.option("--buyout", type=AMOUNT, required=True, help="Buyout price per token")
@click.option("--minimal-auction-bps", type=BPS, required=True, help="Minimum raise in bps")
@click.option("--bonus-refund-bps", type=BPS, required=True, help="Outbid bonus in bps")
def minimal_buyout(previous, buyout, minimal_auction_bps, bonus_refund_bps):
    """Print the minimal buyout price per token"""
    from bidcalc.core.bid import get_minimal_buyout_per_token

    value = get_minimal_buyout_per_token(
        previous, buyout, minimal_auction_bps, bonus_refund_bps
    )
    _echo_json({"minimalBuyoutPerToken": format_amount(value)})


# =============================================================================
# Settlement Command
# =============================================================================

@cli.command("settle")
@click.option("--bid", "new_bid_per_token", type=AMOUNT, required=True, help="Offered price per token")
@click.option("--quantity", type=AMOUNT, required=True, help="Number of tokens")
@click.option("--previous", type=AMOUNT, default=None, help="Current winning price per token")
@click.option("--reserve", type=AMOUNT, default=None, help="Reserve price per token")
@click.option("--buyout", type=AMOUNT, default=None, help="Buyout price per token")
@click.option("--minimal-auction-bps", type=BPS, default=None, help="Minimum raise in bps")
@click.option("--bonus-refund-bps", type=BPS, default=None, help="Outbid bonus in bps")
@click.option("--royalty-bps", type=BPS, default=None, help="Creator royalty in bps")
@click.option("--protocol-fee-bps", type=BPS, default=None, help="Protocol fee in bps")
@click.option("--strict", is_flag=True, help="Exit with status 1 if the bid fails any check")
@click.pass_context
def settle(
    ctx,
    new_bid_per_token: int,
    quantity: int,
    previous: Optional[int],
    reserve: Optional[int],
    buyout: Optional[int],
    minimal_auction_bps: Optional[int],
    bonus_refund_bps: Optional[int],
    royalty_bps: Optional[int],
    protocol_fee_bps: Optional[int],
    strict: bool,
):
    """Compute refunds, fees and payouts for a proposed bid"""
    from bidcalc.core.bid import PreviousBidState, ProposedBid, settle_bid

    terms = ctx.obj["config"].terms(
        reserve_price_per_token=reserve,
        buyout_price_per_token=buyout,
        minimal_auction_bps=minimal_auction_bps,
        bonus_refund_bps=bonus_refund_bps,
        royalty_bps=royalty_bps,
        protocol_fee_bps=protocol_fee_bps,
    )
    bid = ProposedBid(new_bid_per_token=new_bid_per_token, quantity=quantity)
    state = PreviousBidState(previous) if previous is not None else None

    logger.debug(f"Settling {bid} against {terms}")
    result = settle_bid(terms, bid, state)
    _echo_json(result.to_dict())

    if strict and not result.is_valid:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
