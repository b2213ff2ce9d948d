"""
Input Validation - Amount and basis point parsing for bidcalc.

Amounts travel as decimal digit strings so that no precision is lost in
transport. These helpers turn them back into exact integers:
- Unsigned decimal strings only (no sign, no exponent, no fraction)
- Basis points bounded to [0, BPS_DENOMINATOR]
- Tuple-style validators for callers that prefer error messages
"""

import re
from typing import Any, Optional, Tuple, Union

# =============================================================================
# Constants
# =============================================================================

BPS_DENOMINATOR = 10_000

MIN_AMOUNT = 0
MAX_BPS = BPS_DENOMINATOR
MAX_AMOUNT_DIGITS = 1024

_DECIMAL_RE = re.compile(r"^[0-9]+$")


class AmountParseError(ValueError):
    """Raised when an amount cannot be read as an unsigned integer."""

    def __init__(self, name: str, value: Any, reason: str) -> None:
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"{name}: {reason} (got {value!r})")


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value, unbounded if None

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if max_val is not None and value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_bps(value: Any, name: str = "bps") -> Tuple[bool, str]:
    """Validate a basis point ratio (0 to 10000)."""
    return validate_integer(value, name, 0, MAX_BPS)


# =============================================================================
# Decimal Conversion
# =============================================================================

# Below the interpreter's int/str conversion limit (4300 digits)
_CHUNK_DIGITS = 4000
_CHUNK_BITS = _CHUNK_DIGITS * 3


def _digits_to_int(text: str) -> int:
    """Convert a digit string of any length, splitting it into chunks."""
    if len(text) <= _CHUNK_DIGITS:
        return int(text)
    low_len = len(text) // 2
    high = _digits_to_int(text[:-low_len])
    return high * 10**low_len + _digits_to_int(text[-low_len:])


def format_amount(value: int) -> str:
    """
    Render an integer as a decimal string, whatever its size.

    str(int) refuses values above 4300 digits; large values are split
    by a power of ten and rendered half by half.
    """
    if value < 0:
        return "-" + format_amount(-value)
    if value.bit_length() <= _CHUNK_BITS:
        return str(value)
    # about half the decimal digits (log10(2) ~ 0.30103)
    low_len = value.bit_length() * 30103 // 200000
    high, low = divmod(value, 10**low_len)
    return format_amount(high) + format_amount(low).zfill(low_len)


# =============================================================================
# Parsers
# =============================================================================


def parse_amount(
    value: Union[int, str],
    name: str = "amount",
    max_digits: Optional[int] = MAX_AMOUNT_DIGITS,
) -> int:
    """
    Parse an unsigned integer amount.

    Accepts an int or a decimal digit string. Surrounding whitespace is
    ignored; signs, fractions and exponents are rejected.

    Args:
        value: Raw amount
        name: Field name for errors
        max_digits: Longest accepted digit string, unbounded if None

    Returns:
        The amount as int

    Raises:
        AmountParseError: If the value is not an unsigned integer or is too long
    """
    if isinstance(value, str):
        text = value.strip()
        if not _DECIMAL_RE.match(text):
            raise AmountParseError(name, value, "must be a decimal digit string")
        if max_digits is not None and len(text) > max_digits:
            raise AmountParseError(
                name, f"<{len(text)} digits>", f"exceeds max length {max_digits} digits"
            )
        try:
            return _digits_to_int(text)
        except ValueError as e:
            raise AmountParseError(name, f"<{len(text)} digits>", str(e)) from e

    valid, err = validate_integer(value, name)
    if not valid:
        raise AmountParseError(name, value, err)
    return value


def parse_bps(value: Union[int, str], name: str = "bps") -> int:
    """Parse a basis point ratio, bounded to [0, 10000]."""
    bps = parse_amount(value, name)
    valid, err = validate_bps(bps, name)
    if not valid:
        raise AmountParseError(name, value, err)
    return bps


__all__ = [
    "BPS_DENOMINATOR",
    "AmountParseError",
    "validate_integer",
    "validate_bps",
    "format_amount",
    "parse_amount",
    "MAX_AMOUNT_DIGITS",
    "parse_bps",
]
