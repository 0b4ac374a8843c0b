import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bikinota.models import InvoiceDraft  # noqa: E402
from bikinota.validation import (  # noqa: E402
    INVALID_ADJUSTMENTS,
    INVALID_ITEMS,
    LIMIT_REACHED,
    MISSING_INFORMATION,
    validate_invoice_form,
)


def _form(**overrides) -> dict:
    form = {
        "customer_name": "Acme",
        "customer_email": "billing@acme.test",
        "due_date": "",
        "tax_rate": 11,
        "items": [{"id": "1", "name": "Design", "description": "", "quantity": 1, "unit_price": 0}],
        "adjustments": [],
    }
    form.update(overrides)
    return form


def test_valid_form_without_due_date() -> None:
    assert validate_invoice_form(_form()) is None


def test_limit_is_checked_first() -> None:
    assert validate_invoice_form(_form(customer_name=""), can_create=False) == LIMIT_REACHED


@pytest.mark.parametrize("field", ["customer_name", "customer_email"])
def test_missing_customer_fields(field: str) -> None:
    assert validate_invoice_form(_form(**{field: "   "})) == MISSING_INFORMATION


@pytest.mark.parametrize(
    "item",
    [
        {"name": "", "quantity": 1, "unit_price": 10},
        {"name": "Design", "quantity": 0, "unit_price": 10},
        {"name": "Design", "quantity": 1.5, "unit_price": 10},
        {"name": "Design", "quantity": None, "unit_price": 10},
        {"name": "Design", "quantity": 1, "unit_price": -1},
        {"name": "Design", "quantity": 1, "unit_price": None},
    ],
)
def test_invalid_items(item: dict) -> None:
    assert validate_invoice_form(_form(items=[item])) == INVALID_ITEMS


def test_items_required() -> None:
    assert validate_invoice_form(_form(items=[])) == INVALID_ITEMS


@pytest.mark.parametrize(
    "adjustment",
    [
        {"description": "", "type": "deduction", "amount": 10},
        {"description": "DP", "type": "deduction", "amount": -10},
        {"description": "DP", "type": "addition", "amount": None},
    ],
)
def test_invalid_adjustments(adjustment: dict) -> None:
    assert validate_invoice_form(_form(adjustments=[adjustment])) == INVALID_ADJUSTMENTS


def test_accepts_draft_model() -> None:
    draft = InvoiceDraft.model_validate(_form(adjustments=[{"description": "Fee", "type": "addition", "amount": 0}]))
    assert validate_invoice_form(draft) is None


def test_issue_messages() -> None:
    assert LIMIT_REACHED.title == "Limit reached"
    assert "upgrade" in LIMIT_REACHED.description
