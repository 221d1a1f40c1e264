"""Display-boundary currency helpers.

Amounts travel through the system as integer cents or unrounded Decimal
cents. Rounding to whole cents happens here and nowhere else.
"""

from decimal import Decimal, ROUND_HALF_UP


def round_cents(value: Decimal | int) -> int:
    """Round a (possibly fractional) cents value to whole cents, half up."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(value: Decimal | int, symbol: str = "R$") -> str:
    """
    Format cents for humans using the Brazilian convention.

    123456 -> 'R$ 1.234,56'
    """
    cents = round_cents(value)
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    grouped = f"{whole:,}".replace(",", ".")
    return f"{sign}{symbol} {grouped},{frac:02d}"
