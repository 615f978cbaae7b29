"""Integer arithmetic utilities for ledger amounts.

All on-chain amounts use int in the smallest unit (wei, 18 implied decimals).
Display amounts are decimal strings. No float anywhere on the money path.
"""

import re

from src.mm_common.errors import InvalidAmountError, InvalidBasisPointsError

DECIMALS = 18
UNIT = 10**DECIMALS
BPS_DENOMINATOR = 10_000

_DECIMAL_RE = re.compile(r"^(\d*)(?:\.(\d*))?$")


def to_smallest_unit(value: str | int) -> int:
    """Parse a display-unit decimal string into an exact smallest-unit integer.

    "0.1" -> 100000000000000000. Trailing fractional zeros beyond 18 digits
    are tolerated; any other 19th+ fractional digit is rejected.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidAmountError(value, "expected a decimal string")
    if isinstance(value, int):
        if value < 0:
            raise InvalidAmountError(value, "must not be negative")
        return value * UNIT

    match = _DECIMAL_RE.match(value.strip())
    if match is None:
        raise InvalidAmountError(value, "not a non-negative decimal number")
    whole, frac = match.group(1), (match.group(2) or "")
    if not whole and not frac:
        raise InvalidAmountError(value, "no digits")

    frac = frac.rstrip("0")
    if len(frac) > DECIMALS:
        raise InvalidAmountError(value, f"more than {DECIMALS} fractional digits")
    return int(whole or "0") * UNIT + int(frac.ljust(DECIMALS, "0") or "0")


def from_smallest_unit(amount: int) -> str:
    """Lossless inverse of to_smallest_unit: 2500000000000000 -> '0.0025'."""
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), UNIT)
    frac_str = f"{frac:0{DECIMALS}d}".rstrip("0")
    if not frac_str:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{frac_str}"


def apply_basis_points(amount: int, bps: int) -> int:
    """floor(amount * bps / 10000). Out-of-range bps are not rejected here."""
    return amount * bps // BPS_DENOMINATOR


def validate_bps(bps: int) -> None:
    """Validate that bps is in the range [0, 10000]."""
    if isinstance(bps, bool) or not isinstance(bps, int) or not (0 <= bps <= BPS_DENOMINATOR):
        raise InvalidBasisPointsError(bps)


def bps_to_percent(bps: int) -> float:
    """Display-only conversion: 250 -> 2.5."""
    return bps / 100
