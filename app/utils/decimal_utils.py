from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")
# order amounts are stored with four decimal places
STORAGE_QUANTUM = Decimal("0.0001")


def to_decimal(value) -> Decimal:
    """Convert ints, floats, strings and Decimals to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_stored(value: Decimal) -> Decimal:
    """Round half-up to the stored scale so the database never rounds on its own."""
    return to_decimal(value).quantize(STORAGE_QUANTUM, rounding=ROUND_HALF_UP)
