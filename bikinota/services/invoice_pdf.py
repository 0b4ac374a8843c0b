from __future__ import annotations

import base64
import binascii
import logging
import re
from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from ..currency import format_rupiah
from ..models import AdjustmentKind, BankAccount, CompanyInfo, Invoice


logger = logging.getLogger(__name__)


def _wrap_text(text: str, font: str, size: int, max_width: float) -> list[str]:
    text = (text or "").strip()
    if not text:
        return [""]
    words = text.replace("\n", " ").split()
    lines: list[str] = []
    cur = ""
    for w in words:
        cand = (cur + " " + w).strip() if cur else w
        if stringWidth(cand, font, size) <= max_width:
            cur = cand
        else:
            if cur:
                lines.append(cur)
            cur = w
    if cur:
        lines.append(cur)
    return lines or [""]


def _logo_reader(logo: str) -> ImageReader | None:
    """Company logos are stored by the backend as (data-URL) base64."""
    if not logo:
        return None
    raw = logo.split(",", 1)[1] if logo.startswith("data:") else logo
    try:
        reader = ImageReader(BytesIO(base64.b64decode(raw, validate=True)))
        reader.getSize()
    except (binascii.Error, ValueError, OSError) as exc:
        logger.warning("invoice_pdf.logo_unreadable error=%s", exc)
        return None
    return reader


def build_invoice_filename(invoice: Invoice) -> str:
    base = invoice.invoice_number or invoice.id
    cleaned = re.sub(r"[^\w.\-]+", "_", base.strip(), flags=re.UNICODE)
    return f"invoice_{cleaned or 'draft'}.pdf"


def render_invoice_to_pdf_bytes(
    invoice: Invoice,
    company: CompanyInfo | None = None,
    bank_account: BankAccount | None = None,
) -> bytes:
    """
    Render a persisted invoice as A4 PDF.

    Totals come from the invoice as stored by the backend; the line items
    and adjustments are only listed, never summed here.
    """
    company = company or CompanyInfo()

    buf = BytesIO()
    c = Canvas(buf, pagesize=A4)
    w, h = A4

    margin_x = 18 * mm
    top = h - 18 * mm
    bottom = 18 * mm

    font = "Helvetica"
    font_b = "Helvetica-Bold"

    def text(x, y, s, size=10, bold=False):
        c.setFont(font_b if bold else font, size)
        c.drawString(x, y, str(s or ""))

    def text_r(x_right, y, s, size=10, bold=False):
        c.setFont(font_b if bold else font, size)
        c.drawRightString(x_right, y, str(s or ""))

    # Header
    text(margin_x, top, "INVOICE", size=22, bold=True)
    if invoice.invoice_number:
        text_r(w - margin_x, top + 2, f"#{invoice.invoice_number}", size=10)

    logo = _logo_reader(company.logo)
    if logo is not None:
        iw, ih = logo.getSize()
        scale = min((40 * mm) / iw, (18 * mm) / ih, 1.0)
        c.drawImage(
            logo,
            w - margin_x - iw * scale,
            (h - 6 * mm) - ih * scale,
            width=iw * scale,
            height=ih * scale,
            mask="auto",
        )

    # From block (left)
    y = top - 18
    text(margin_x, y, "From", size=10, bold=True)
    y -= 12
    city_line = " ".join(p for p in [company.city, company.state, company.zip_code] if p)
    for i, line in enumerate([company.name, company.address, city_line, company.country, company.email, company.phone]):
        if line:
            text(margin_x, y, line, size=10, bold=(i == 0))
            y -= 11

    # Right meta block
    meta_x = w - margin_x
    meta_y = top - 20
    created = invoice.created_at.date().isoformat() if invoice.created_at else "-"
    text_r(meta_x, meta_y, "Date", size=9, bold=True)
    text_r(meta_x, meta_y - 11, created, size=9)
    text_r(meta_x, meta_y - 26, "Due date", size=9, bold=True)
    text_r(meta_x, meta_y - 37, invoice.due_date or "-", size=9)
    text_r(meta_x, meta_y - 52, "Status", size=9, bold=True)
    text_r(meta_x, meta_y - 63, invoice.status.value.capitalize(), size=9)

    # Bill to
    rx = w * 0.55
    ry = top - 90
    text(rx, ry, "Bill to", size=10, bold=True)
    ry -= 12
    for line in [invoice.customer_name, invoice.customer_email]:
        if line:
            text(rx, ry, line, size=10)
            ry -= 11

    y = min(y, ry) - 24

    # Table
    table_x = margin_x
    table_w = w - 2 * margin_x
    col_desc = table_w * 0.46
    col_qty = table_w * 0.12
    col_price = table_w * 0.21

    row_h_min = 16
    line_h = 11

    def table_header(y0: float) -> float:
        c.setFont(font_b, 9)
        c.setLineWidth(0.5)
        c.rect(table_x, y0 - 14, table_w, 14, stroke=1, fill=0)
        c.drawString(table_x + 6, y0 - 11, "Item")
        c.drawRightString(table_x + col_desc + col_qty - 6, y0 - 11, "Qty")
        c.drawRightString(table_x + col_desc + col_qty + col_price - 6, y0 - 11, "Price")
        c.drawRightString(table_x + table_w - 6, y0 - 11, "Amount")
        return y0 - 16

    y = table_header(y)
    c.setFont(font, 9)

    for it in invoice.items:
        desc_lines = _wrap_text(it.name, font_b, 9, col_desc - 12)
        if it.description:
            desc_lines += _wrap_text(it.description, font, 9, col_desc - 12)
        needed_h = max(row_h_min, 8 + len(desc_lines) * line_h)

        if y - needed_h < bottom + 55:
            c.showPage()
            y = table_header(top)

        c.rect(table_x, y - needed_h, table_w, needed_h, stroke=1, fill=0)

        ty = y - 12
        for ln in desc_lines:
            c.setFont(font, 9)
            c.drawString(table_x + 6, ty, ln)
            ty -= line_h

        c.setFont(font, 9)
        c.drawRightString(table_x + col_desc + col_qty - 6, y - 12, str(it.quantity))
        c.drawRightString(table_x + col_desc + col_qty + col_price - 6, y - 12, format_rupiah(it.unit_price))
        c.drawRightString(table_x + table_w - 6, y - 12, format_rupiah(it.amount))
        y -= needed_h

    # Totals
    y -= 10
    totals_needed = 80 + 14 * len(invoice.adjustments)
    if y - totals_needed < bottom + 50:
        c.showPage()
        y = top

    label_x = table_x + table_w - 120
    value_x = table_x + table_w - 6

    def total_row(label: str, value: str, bold: bool = False, size: int = 10) -> None:
        nonlocal y
        text_r(label_x, y, label, size=size, bold=bold)
        text_r(value_x, y, value, size=size, bold=bold)
        y -= 14

    total_row("Subtotal", format_rupiah(invoice.subtotal))
    if invoice.tax_rate:
        total_row(f"Tax ({invoice.tax_rate.normalize():f}%)", format_rupiah(invoice.tax_amount))
    for adj in invoice.adjustments:
        sign = "+" if adj.kind == AdjustmentKind.ADDITION else "-"
        total_row(adj.description or "Adjustment", f"{sign} {format_rupiah(adj.amount)}")
    y -= 4
    total_row("Total", format_rupiah(invoice.total), bold=True, size=12)

    # Footer: payment details
    if bank_account is not None:
        footer_y = bottom + 40
        lines = [bank_account.bank_name, bank_account.account_name, f"Account: {bank_account.account_number}"]
        if bank_account.routing_number:
            lines.append(f"Routing: {bank_account.routing_number}")
        if bank_account.swift_code:
            lines.append(f"SWIFT: {bank_account.swift_code}")
        text(margin_x, footer_y + 12, "Payment details", size=8, bold=True)
        for ln in lines[:5]:
            text(margin_x, footer_y, ln, size=8)
            footer_y -= 10

    c.save()
    return buf.getvalue()
