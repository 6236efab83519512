"""Integer arithmetic utilities for the native payment unit.

All prices, amounts, and balances use int micro-units (1 unit = 1_000_000).
No float, no Decimal.
"""

MICRO_PER_UNIT = 1_000_000


def units_to_micro(units: int) -> int:
    """Whole native units to micro-units: 100 -> 100_000_000."""
    return units * MICRO_PER_UNIT


def micro_to_display(micro: int) -> str:
    """Convert micro-units to a display string: 97_500_000 -> '97.5', -25_000 -> '-0.025'."""
    sign = "-" if micro < 0 else ""
    whole, frac = divmod(abs(micro), MICRO_PER_UNIT)
    if frac == 0:
        return f"{sign}{whole:,}"
    return f"{sign}{whole:,}.{frac:06d}".rstrip("0")


# Amount and balance columns are BIGINT.
MAX_AMOUNT = 2**63 - 1
