from __future__ import annotations

import logging

from nicegui import ui

from ..container import AppContainer
from ..currency import format_rupiah
from ..invoice_calculations import totals_mismatches
from ..invoice_preview import build_invoice_preview_html
from ..models import Invoice
from ..services.invoice_pdf import build_invoice_filename, render_invoice_to_pdf_bytes
from ..styles import C_BTN_PRIM, C_BTN_SEC, C_CARD, C_NUMERIC, C_PAGE_TITLE, C_SECTION_TITLE, C_TEXT_MUTED
from ..ui_components import back_button, format_invoice_status, invoice_status_badge


logger = logging.getLogger(__name__)


def totals_note(invoice: Invoice) -> str | None:
    """Muted hint shown when the server's totals differ from a local recomputation."""
    mismatches = totals_mismatches(invoice)
    if not mismatches:
        return None
    logger.warning("invoice_detail.totals_mismatch invoice_id=%s fields=%s", invoice.id, ",".join(mismatches))
    return "Totals as calculated by the server."


def _load_invoice(container: AppContainer, invoice_id: str) -> Invoice | None:
    invoice = container.invoices.get(invoice_id)
    if invoice is None:
        container.invoices.refresh()
        invoice = container.invoices.get(invoice_id)
    return invoice


def render_invoice_detail(container: AppContainer, invoice_id: str) -> None:
    invoice = _load_invoice(container, invoice_id)
    if invoice is None:
        with ui.card().classes(C_CARD + " p-8 w-full items-center"):
            ui.label("Invoice not found").classes("text-base font-semibold")
            ui.button("Back to dashboard", on_click=lambda: ui.navigate.to("/dashboard")).classes(C_BTN_SEC)
        return

    company = container.company.company
    bank_account = container.company.resolve_bank_account(invoice.bank_account_id)

    def download_pdf() -> None:
        pdf = render_invoice_to_pdf_bytes(invoice, company, bank_account)
        logger.info("invoice_detail.pdf_downloaded invoice_id=%s bytes=%s", invoice.id, len(pdf))
        ui.download(pdf, build_invoice_filename(invoice))

    with ui.row().classes("w-full items-center justify-between"):
        with ui.row().classes("items-center gap-4"):
            back_button("/dashboard")
            with ui.column().classes("gap-1"):
                ui.label(f"Invoice {invoice.invoice_number}").classes(C_PAGE_TITLE)
                ui.label(format_invoice_status(invoice.status)).classes(invoice_status_badge(invoice.status))
        with ui.row().classes("gap-2"):
            ui.button("Edit", icon="edit", on_click=lambda: ui.navigate.to(f"/invoice/{invoice.id}/edit")).classes(C_BTN_SEC)
            ui.button("Print", icon="print", on_click=lambda: ui.run_javascript("window.print()")).classes(C_BTN_SEC)
            ui.button("Download PDF", icon="download", on_click=download_pdf).classes(C_BTN_PRIM)

    note = totals_note(invoice)
    if note:
        ui.label(note).classes("text-xs text-slate-400")

    with ui.row().classes("w-full gap-6 items-start flex-col md:flex-row md:flex-nowrap"):
        with ui.card().classes(C_CARD + " p-6 w-full md:w-[70%]"):
            ui.html(build_invoice_preview_html(invoice, company, bank_account))

        with ui.card().classes(C_CARD + " p-4 w-full md:w-[30%]"):
            ui.label("Summary").classes(C_SECTION_TITLE)
            with ui.column().classes(f"w-full gap-1 {C_NUMERIC}"):
                for label, value in [
                    ("Subtotal", invoice.subtotal),
                    ("Tax", invoice.tax_amount),
                    ("Adjustments", invoice.adjustments_total),
                ]:
                    with ui.row().classes("w-full justify-between"):
                        ui.label(label).classes(C_TEXT_MUTED)
                        ui.label(format_rupiah(value))
                ui.separator()
                with ui.row().classes("w-full justify-between font-semibold"):
                    ui.label("Total")
                    ui.label(format_rupiah(invoice.total))
            ui.label(f"Customer: {invoice.customer_name}").classes(C_TEXT_MUTED + " mt-2")
            ui.label(f"Due: {invoice.due_date or '-'}").classes(C_TEXT_MUTED)
