import sys
from decimal import Decimal
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bikinota.models import (  # noqa: E402
    AdjustmentKind,
    CompanyInfo,
    Invoice,
    InvoiceDraft,
    InvoiceStatus,
    build_invoice_update_payload,
)


def _draft(**overrides) -> InvoiceDraft:
    data = {
        "customer_name": "Acme",
        "customer_email": "billing@acme.test",
        "due_date": "2026-11-01",
        "tax_rate": 11,
        "items": [{"id": "row-1", "name": "Logo", "description": "", "quantity": 2, "unit_price": 1500.5}],
        "adjustments": [{"id": "row-2", "description": "DP", "type": "deduction", "amount": 1000}],
        "bank_account_id": "",
    }
    data.update(overrides)
    return InvoiceDraft.model_validate(data)


def test_create_payload_uses_backend_field_names() -> None:
    payload = _draft().to_create_payload()

    assert payload["items"] == [{"name": "Logo", "description": "", "quantity": 2, "price": 1500.5}]
    assert payload["adjustments"] == [{"description": "DP", "type": "deduction", "amount": 1000}]
    assert payload["tax_rate"] == 11
    assert payload["status"] == "draft"
    assert payload["bank_account_id"] is None
    assert "subtotal" not in payload


def test_create_payload_omits_missing_due_date() -> None:
    payload = _draft(due_date="  ").to_create_payload()
    assert "due_date" not in payload


def test_update_payload_contains_only_given_fields() -> None:
    payload = build_invoice_update_payload({"status": InvoiceStatus.PAID, "tax_rate": Decimal("12.5")})
    assert payload == {"status": "paid", "tax_rate": 12.5}


def test_update_payload_clears_bank_account() -> None:
    assert build_invoice_update_payload({"bank_account_id": ""}) == {"bank_account_id": None}


def test_update_payload_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError):
        build_invoice_update_payload({"total": 5})


def test_invoice_parses_backend_payload() -> None:
    invoice = Invoice.model_validate(
        {
            "id": "42",
            "invoice_number": "INV-2026-0042",
            "customer_name": "Acme",
            "customer_email": "billing@acme.test",
            "due_date": None,
            "tax_rate": 10,
            "status": "sent",
            "items": [{"id": "i1", "name": "Hosting", "description": None, "quantity": 3, "price": 20000}],
            "adjustments": None,
            "subtotal": 60000,
            "tax_amount": 6000,
            "adjustments_total": 0,
            "total": 66000,
            "created_at": "2026-10-01T09:30:00Z",
        }
    )

    assert invoice.status == InvoiceStatus.SENT
    assert invoice.items[0].unit_price == Decimal("20000")
    assert invoice.items[0].description == ""
    assert invoice.items[0].amount == Decimal("60000")
    assert invoice.adjustments == []
    assert invoice.totals.total == Decimal("66000")
    assert invoice.created_at is not None and invoice.created_at.year == 2026


def test_adjustment_signed_amount() -> None:
    draft = _draft(adjustments=[
        {"description": "Fee", "type": "addition", "amount": 500},
        {"description": "DP", "amount": 200},
    ])
    assert [a.kind for a in draft.adjustments] == [AdjustmentKind.ADDITION, AdjustmentKind.DEDUCTION]
    assert [a.signed_amount for a in draft.adjustments] == [Decimal("500"), Decimal("-200")]


def test_company_from_api_blanks_missing_fields() -> None:
    company = CompanyInfo.from_api({"name": "PT Maju", "bank_accounts": [{"id": "b1", "bank_name": "BCA", "is_default": True}]})
    assert company.name == "PT Maju"
    assert company.address == ""
    assert company.default_bank_account().bank_name == "BCA"


def test_company_defaults_are_placeholders() -> None:
    assert CompanyInfo().name == "Your Company Name"
    assert CompanyInfo().default_bank_account() is None
