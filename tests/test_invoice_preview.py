import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bikinota.invoice_calculations import InvoiceTotals  # noqa: E402
from bikinota.invoice_preview import build_invoice_preview_html  # noqa: E402
from bikinota.models import BankAccount, CompanyInfo, Invoice, InvoiceDraft  # noqa: E402


def _draft() -> InvoiceDraft:
    return InvoiceDraft.model_validate(
        {
            "customer_name": "Acme <Corp>",
            "customer_email": "billing@acme.test",
            "tax_rate": 10,
            "items": [{"name": "Design", "quantity": 2, "unit_price": 50000}],
            "adjustments": [
                {"description": "Rush fee", "type": "addition", "amount": 10000},
                {"description": "Down payment", "type": "deduction", "amount": 5000},
            ],
        }
    )


def test_draft_preview_shows_computed_totals() -> None:
    html = build_invoice_preview_html(_draft())

    assert "Acme &lt;Corp&gt;" in html
    assert "Rp 100.000" in html
    assert "Tax (10%)" in html
    assert "+ Rp 10.000" in html
    assert "- Rp 5.000" in html
    assert "Rp 115.000" in html


def test_persisted_invoice_shows_stored_totals() -> None:
    invoice = Invoice.model_validate(
        {
            **_draft().model_dump(),
            "id": "1",
            "invoice_number": "INV-001",
            "subtotal": 100000,
            "tax_amount": 10000,
            "adjustments_total": 5000,
            "total": 115001,
        }
    )
    html = build_invoice_preview_html(invoice)

    assert "Invoice INV-001" in html
    assert "Rp 115.001" in html


def test_explicit_totals_win() -> None:
    totals = InvoiceTotals(subtotal=1, tax_amount=2, adjustments_total=3, total=777)
    assert "Rp 777" in build_invoice_preview_html(_draft(), totals=totals)


def test_company_and_bank_details() -> None:
    company = CompanyInfo(name="PT Maju", phone="", website="")
    bank = BankAccount(id="b1", bank_name="BCA", account_name="PT Maju", account_number="123", swift_code="CENAIDJA")
    html = build_invoice_preview_html(_draft(), company=company, bank_account=bank)

    assert "PT Maju" in html
    assert "Account: 123" in html
    assert "SWIFT: CENAIDJA" in html
