from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any


CURRENCY_PREFIX = "Rp"


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_rupiah_with_decimals(amount: Any, decimals: int = 2) -> str:
    """Indonesian Rupiah, e.g. ``Rp 1.000.000,00``: dot groups, comma decimals."""
    value = _to_decimal(amount).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    value = abs(value)

    text = f"{int(value):,}".replace(",", ".")
    if decimals > 0:
        fraction = f"{value:.{decimals}f}".split(".")[1]
        text = f"{text},{fraction}"
    return f"{sign}{CURRENCY_PREFIX} {text}"


def format_rupiah(amount: Any) -> str:
    return format_rupiah_with_decimals(amount, decimals=0)
