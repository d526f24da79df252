"""Display formatting for monetary values.

Amounts are plain numbers everywhere else in the package; these helpers are for
presentation only.
"""

from decimal import ROUND_HALF_UP, Decimal


def format_brl(amount: float | int | Decimal) -> str:
    """Format an amount in the Brazilian real convention.

    >>> format_brl(1234.56)
    'R$ 1.234,56'
    >>> format_brl(-5)
    '-R$ 5,00'
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    # 1,234.56 -> 1.234,56
    grouped = f"{abs(value):,.2f}".replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"{sign}R$ {grouped}"
