from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping


_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax_amount: Decimal
    adjustments_total: Decimal
    total: Decimal


def _get(obj: Any, *names: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        for n in names:
            if n in obj and obj[n] not in (None, ""):
                return obj[n]
        return default
    for n in names:
        if hasattr(obj, n):
            v = getattr(obj, n)
            if v not in (None, ""):
                return v
    return default


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return _ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _kind(adjustment: Any) -> str:
    kind = _get(adjustment, "kind", "type", default="")
    return str(getattr(kind, "value", kind)).strip().lower()


def compute_subtotal(items: Iterable[Any] | None) -> Decimal:
    """Sum of quantity x unit price over the line items."""
    subtotal = _ZERO
    for item in items or []:
        qty = _to_decimal(_get(item, "quantity", "qty", default=0))
        unit_price = _to_decimal(_get(item, "unit_price", "price", default=0))
        subtotal += qty * unit_price
    return subtotal


def compute_adjustments_total(adjustments: Iterable[Any] | None) -> Decimal:
    """Additions count positive, everything else is deducted."""
    total = _ZERO
    for adjustment in adjustments or []:
        amount = _to_decimal(_get(adjustment, "amount", default=0))
        if _kind(adjustment) == "addition":
            total += amount
        else:
            total -= amount
    return total


def compute_tax_amount(subtotal: Any, tax_rate_percent: Any) -> Decimal:
    return _to_decimal(subtotal) * (_to_decimal(tax_rate_percent) / _HUNDRED)


def compute_total(subtotal: Any, tax_amount: Any, adjustments_total: Any) -> Decimal:
    return _to_decimal(subtotal) + _to_decimal(tax_amount) + _to_decimal(adjustments_total)


def calculate_invoice_totals(
    items: Iterable[Any] | None,
    adjustments: Iterable[Any] | None = None,
    tax_rate: Any = 0,
) -> InvoiceTotals:
    subtotal = compute_subtotal(items)
    tax_amount = compute_tax_amount(subtotal, tax_rate)
    adjustments_total = compute_adjustments_total(adjustments)
    return InvoiceTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        adjustments_total=adjustments_total,
        total=compute_total(subtotal, tax_amount, adjustments_total),
    )


def totals_mismatches(invoice: Any, tolerance: Decimal = Decimal("0.01")) -> list[str]:
    """
    Compare the totals stored on a persisted invoice with a fresh recomputation.

    Returns the names of the fields whose stored value is off by more than
    ``tolerance``. The stored values stay authoritative; this is only a check.
    """
    expected = calculate_invoice_totals(
        _get(invoice, "items", default=[]),
        _get(invoice, "adjustments", default=[]),
        _get(invoice, "tax_rate", default=0),
    )
    mismatches: list[str] = []
    for field in ("subtotal", "tax_amount", "adjustments_total", "total"):
        stored = _to_decimal(_get(invoice, field, default=0))
        if abs(stored - getattr(expected, field)) > tolerance:
            mismatches.append(field)
    return mismatches
