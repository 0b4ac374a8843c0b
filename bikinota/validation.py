from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, NamedTuple


def _get(obj: Any, *names: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        for n in names:
            if n in obj and obj[n] not in (None, ""):
                return obj[n]
        return default
    for n in names:
        v = getattr(obj, n, None)
        if v not in (None, ""):
            return v
    return default


class ValidationIssue(NamedTuple):
    title: str
    description: str


LIMIT_REACHED = ValidationIssue(
    "Limit reached",
    "You have reached your monthly invoice limit. Please upgrade to create more invoices.",
)
MISSING_INFORMATION = ValidationIssue("Missing information", "Please fill in all required fields.")
INVALID_ITEMS = ValidationIssue(
    "Invalid items",
    "Please ensure all items have valid names, quantities, and prices.",
)
INVALID_ADJUSTMENTS = ValidationIssue(
    "Invalid adjustments",
    "Please ensure all adjustments have valid descriptions and amounts.",
)


def _number(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _text(obj: Any, name: str) -> str:
    return str(_get(obj, name, default="") or "").strip()


def _item_is_valid(item: Any) -> bool:
    quantity = _number(_get(item, "quantity", default=None))
    price = _number(_get(item, "unit_price", "price", default=None))
    if not _text(item, "name"):
        return False
    if quantity is None or quantity <= 0 or quantity != quantity.to_integral_value():
        return False
    return price is not None and price >= 0


def _adjustment_is_valid(adjustment: Any) -> bool:
    amount = _number(_get(adjustment, "amount", default=None))
    return bool(_text(adjustment, "description")) and amount is not None and amount >= 0


def validate_invoice_form(
    form: Any,
    *,
    can_create: bool = True,
) -> ValidationIssue | None:
    """
    Return the first problem that blocks submitting the invoice form, or None.

    ``form`` is either an InvoiceDraft or the raw form state mapping.
    The plan limit only applies when creating, pass ``can_create`` accordingly.
    """
    if not can_create:
        return LIMIT_REACHED

    if not _text(form, "customer_name") or not _text(form, "customer_email"):
        return MISSING_INFORMATION

    items: Iterable[Any] = _get(form, "items", default=[]) or []
    items = list(items)
    if not items or not all(_item_is_valid(item) for item in items):
        return INVALID_ITEMS

    adjustments = list(_get(form, "adjustments", default=[]) or [])
    if not all(_adjustment_is_valid(adj) for adj in adjustments):
        return INVALID_ADJUSTMENTS

    return None
