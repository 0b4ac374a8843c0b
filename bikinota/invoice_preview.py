from __future__ import annotations

from html import escape
from typing import Any

from .currency import format_rupiah
from .invoice_calculations import InvoiceTotals, calculate_invoice_totals
from .models import AdjustmentKind, BankAccount, CompanyInfo, Invoice, InvoiceDraft


def _e(value: Any) -> str:
    return escape(str(value or ""))


def _company_html(company: CompanyInfo | None) -> str:
    if company is None:
        return ""
    city_line = " ".join(p for p in [company.city, company.state, company.zip_code] if p.strip())
    lines = [company.address, city_line, company.country, company.email, company.phone, company.website]
    details = "<br>".join(_e(line) for line in lines if line and line.strip())
    return (
        "<div class='invoice-company'>"
        f"<div class='font-semibold text-lg'>{_e(company.name)}</div>"
        f"<div class='text-gray-600'>{details}</div>"
        "</div>"
    )


def _bank_html(bank_account: BankAccount | None) -> str:
    if bank_account is None:
        return ""
    rows = [
        bank_account.bank_name,
        bank_account.account_name,
        f"Account: {bank_account.account_number}",
    ]
    if bank_account.routing_number:
        rows.append(f"Routing: {bank_account.routing_number}")
    if bank_account.swift_code:
        rows.append(f"SWIFT: {bank_account.swift_code}")
    return (
        "<div class='invoice-payment'>"
        "<div class='font-semibold'>Payment details</div>"
        f"<div>{'<br>'.join(_e(r) for r in rows if r)}</div>"
        "</div>"
    )


def build_invoice_preview_html(
    invoice: InvoiceDraft,
    company: CompanyInfo | None = None,
    bank_account: BankAccount | None = None,
    totals: InvoiceTotals | None = None,
) -> str:
    """
    Printable HTML of an invoice.

    Persisted invoices show the totals the backend stored; drafts show the
    locally computed preview unless ``totals`` is passed explicitly.
    """
    if totals is None:
        if isinstance(invoice, Invoice):
            totals = invoice.totals
        else:
            totals = calculate_invoice_totals(invoice.items, invoice.adjustments, invoice.tax_rate)

    number = invoice.invoice_number if isinstance(invoice, Invoice) else ""
    created = ""
    if isinstance(invoice, Invoice) and invoice.created_at is not None:
        created = invoice.created_at.date().isoformat()

    rows_html = ""
    for item in invoice.items:
        desc = f"<div class='text-gray-500 text-xs'>{_e(item.description)}</div>" if item.description else ""
        rows_html += (
            "<tr>"
            f"<td class='text-left'>{_e(item.name)}{desc}</td>"
            f"<td class='text-right'>{item.quantity}</td>"
            f"<td class='text-right'>{format_rupiah(item.unit_price)}</td>"
            f"<td class='text-right'>{format_rupiah(item.amount)}</td>"
            "</tr>"
        )

    adjustment_rows = ""
    for adj in invoice.adjustments:
        sign = "+" if adj.kind == AdjustmentKind.ADDITION else "-"
        adjustment_rows += (
            "<tr class='adjustment'>"
            f"<td colspan='3' class='text-right'>{_e(adj.description)}</td>"
            f"<td class='text-right'>{sign} {format_rupiah(adj.amount)}</td>"
            "</tr>"
        )

    tax_row = ""
    if invoice.tax_rate:
        tax_row = (
            "<tr>"
            f"<td colspan='3' class='text-right'>Tax ({invoice.tax_rate.normalize():f}%)</td>"
            f"<td class='text-right'>{format_rupiah(totals.tax_amount)}</td>"
            "</tr>"
        )

    adjustments_total_row = ""
    if invoice.adjustments:
        sign = "+ " if totals.adjustments_total >= 0 else ""
        adjustments_total_row = (
            "<tr>"
            "<td colspan='3' class='text-right'>Adjustments</td>"
            f"<td class='text-right'>{sign}{format_rupiah(totals.adjustments_total)}</td>"
            "</tr>"
        )

    meta = f"<div class='invoice-number'>Invoice {_e(number)}</div>" if number else ""
    if created:
        meta += f"<div>Date: {_e(created)}</div>"
    if invoice.due_date:
        meta += f"<div>Due: {_e(invoice.due_date)}</div>"

    return (
        "<div class='invoice-preview space-y-4 text-sm'>"
        "<div class='flex justify-between'>"
        f"{_company_html(company)}"
        f"<div class='invoice-meta text-right'>{meta}</div>"
        "</div>"
        "<div class='invoice-bill-to'>"
        "<div class='font-semibold'>Bill to</div>"
        f"<div>{_e(invoice.customer_name)}</div>"
        f"<div class='text-gray-600'>{_e(invoice.customer_email)}</div>"
        "</div>"
        "<table class='w-full text-sm border-collapse'>"
        "<thead>"
        "<tr class='border-b'>"
        "<th class='text-left py-2'>Item</th>"
        "<th class='text-right py-2'>Qty</th>"
        "<th class='text-right py-2'>Price</th>"
        "<th class='text-right py-2'>Amount</th>"
        "</tr>"
        "</thead>"
        f"<tbody>{rows_html}</tbody>"
        "<tfoot>"
        "<tr>"
        "<td colspan='3' class='text-right'>Subtotal</td>"
        f"<td class='text-right'>{format_rupiah(totals.subtotal)}</td>"
        "</tr>"
        f"{tax_row}"
        f"{adjustment_rows}"
        f"{adjustments_total_row}"
        "<tr class='font-semibold'>"
        "<td colspan='3' class='text-right'>Total</td>"
        f"<td class='text-right'>{format_rupiah(totals.total)}</td>"
        "</tr>"
        "</tfoot>"
        "</table>"
        f"{_bank_html(bank_account)}"
        "</div>"
    )
