"""
Configuration for bidcalc.

Default auction terms used when a caller (typically the CLI) does not
supply them, overridable from the environment or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from bidcalc.core.bid.terms import AuctionTerms
from bidcalc.utils.logger import get_logger
from bidcalc.utils.validation import BPS_DENOMINATOR, parse_amount, parse_bps

logger = get_logger("config")

ENV_PREFIX = "BIDCALC_"


@dataclass
class BidcalcConfig:
    """Default auction terms and operational settings"""

    # Prices per token (currency subunits)
    reserve_price_per_token: int = 0
    buyout_price_per_token: int = 0

    # Ratios (basis points, 10000 = 100%)
    minimal_auction_bps: int = 500  # Minimum 5% raise over the previous bid
    bonus_refund_bps: int = 100  # 1% bonus to an outbid bidder
    royalty_bps: int = 0
    protocol_fee_bps: int = 0

    # Paths
    log_dir: Optional[Path] = None

    def terms(self, **overrides) -> AuctionTerms:
        """Build AuctionTerms from these defaults, replacing any given fields."""
        values = {
            "reserve_price_per_token": self.reserve_price_per_token,
            "buyout_price_per_token": self.buyout_price_per_token,
            "minimal_auction_bps": self.minimal_auction_bps,
            "bonus_refund_bps": self.bonus_refund_bps,
            "royalty_bps": self.royalty_bps,
            "protocol_fee_bps": self.protocol_fee_bps,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return AuctionTerms(**values)


_AMOUNT_KEYS = ("reserve_price_per_token", "buyout_price_per_token")
_BPS_KEYS = ("minimal_auction_bps", "bonus_refund_bps", "royalty_bps", "protocol_fee_bps")


def _collect_env(env_path: Optional[str]) -> Dict[str, str]:
    """Merge a .env file with the process environment (environment wins)."""
    values: Dict[str, str] = {}
    if env_path:
        path = Path(env_path)
        if not path.is_file():
            raise FileNotFoundError(f"Env file not found: {path}")
        values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    values.update({k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)})
    return values


def load_config(env_path: Optional[str] = None) -> BidcalcConfig:
    """
    Load configuration from the environment and an optional .env file.

    Recognized keys are the BidcalcConfig field names, upper-cased and
    prefixed with BIDCALC_ (e.g. BIDCALC_MINIMAL_AUCTION_BPS).

    Args:
        env_path: Optional path to a .env file

    Returns:
        BidcalcConfig instance

    Raises:
        FileNotFoundError: If env_path is given but missing
        AmountParseError: If a value is not a valid amount or bps
    """
    env = _collect_env(env_path)
    config = BidcalcConfig()

    for key in _AMOUNT_KEYS:
        raw = env.get(ENV_PREFIX + key.upper())
        if raw is not None:
            setattr(config, key, parse_amount(raw, key))

    for key in _BPS_KEYS:
        raw = env.get(ENV_PREFIX + key.upper())
        if raw is not None:
            setattr(config, key, parse_bps(raw, key))

    log_dir = env.get(ENV_PREFIX + "LOG_DIR")
    if log_dir:
        config.log_dir = Path(log_dir)

    logger.debug(f"Loaded config: {config}")
    return config


__all__ = ["BPS_DENOMINATOR", "BidcalcConfig", "load_config"]
