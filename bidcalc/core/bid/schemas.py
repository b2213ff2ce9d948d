"""
Schemas - Transport representation of a settlement.

Amounts are rendered as decimal digit strings so JSON consumers whose
native number type is a double keep full precision.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from bidcalc.utils.validation import format_amount, parse_amount


class SettlementPayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    errors: List[str]
    minimal_bid_per_token: str
    minimal_buyout_per_token: str

    new_bid_per_token: str
    total_bid_amount: str

    refund_bonus_per_token: str
    refund_bonus_amount: str
    refund_amount_to_previous_bidder: str

    new_price_per_token: str
    new_amount: str

    new_refund_bonus_per_token: str
    new_refund_bonus_amount: str
    new_refund_amount: str
    new_profit_amount: str

    protocol_fee_amount: str
    royalty_amount: str
    lister_amount: str

    @field_validator("*", mode="before")
    @classmethod
    def ints_to_decimal_strings(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return format_amount(v)
        return v

    def amount(self, field_name: str) -> int:
        """Read an amount field back as an exact integer."""
        text = getattr(self, field_name)
        if text.startswith("-"):
            return -parse_amount(text[1:], field_name, max_digits=None)
        return parse_amount(text, field_name, max_digits=None)
