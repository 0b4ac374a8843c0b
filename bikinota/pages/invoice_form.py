from __future__ import annotations

import uuid
from typing import Any

from nicegui import ui
from pydantic import ValidationError

from ..api import ApiError
from ..container import AppContainer
from ..currency import format_rupiah
from ..models import UPDATABLE_INVOICE_FIELDS, AdjustmentKind, Invoice, InvoiceDraft, InvoiceStatus
from ..services.invoices import InvoiceStoreError
from ..styles import (
    C_BTN_DANGER,
    C_BTN_PRIM,
    C_BTN_SEC,
    C_CARD,
    C_INPUT,
    C_NUMERIC,
    C_PAGE_TITLE,
    C_SECTION_TITLE,
    C_TEXT_MUTED,
)
from ..ui_components import back_button
from ..validation import validate_invoice_form


STATUS_OPTIONS = {
    InvoiceStatus.DRAFT.value: "Draft",
    InvoiceStatus.SENT.value: "Sent",
    InvoiceStatus.PAID.value: "Paid",
}
ADJUSTMENT_OPTIONS = {
    AdjustmentKind.DEDUCTION.value: "Deduction",
    AdjustmentKind.ADDITION.value: "Addition",
}


def _blank_item() -> dict[str, Any]:
    return {"id": uuid.uuid4().hex, "name": "", "description": "", "quantity": 1, "unit_price": 0}


def _blank_adjustment() -> dict[str, Any]:
    return {"id": uuid.uuid4().hex, "description": "", "type": AdjustmentKind.DEDUCTION.value, "amount": 0}


def _form_state(invoice: Invoice | None) -> dict[str, Any]:
    if invoice is None:
        return {
            "customer_name": "",
            "customer_email": "",
            "due_date": "",
            "tax_rate": 0,
            "status": InvoiceStatus.DRAFT.value,
            "bank_account_id": "",
            "items": [_blank_item()],
            "adjustments": [],
        }
    return {
        "customer_name": invoice.customer_name,
        "customer_email": invoice.customer_email,
        "due_date": invoice.due_date or "",
        "tax_rate": float(invoice.tax_rate),
        "status": invoice.status.value,
        "bank_account_id": invoice.bank_account_id or "",
        "items": [
            {
                "id": item.id or uuid.uuid4().hex,
                "name": item.name,
                "description": item.description,
                "quantity": item.quantity,
                "unit_price": float(item.unit_price),
            }
            for item in invoice.items
        ],
        "adjustments": [
            {
                "id": adj.id or uuid.uuid4().hex,
                "description": adj.description,
                "type": adj.kind.value,
                "amount": float(adj.amount),
            }
            for adj in invoice.adjustments
        ],
    }


def render_invoice_form(container: AppContainer, invoice_id: str | None = None) -> None:
    store = container.invoices
    company = container.company.company

    invoice: Invoice | None = None
    if invoice_id:
        invoice = store.get(invoice_id)
        if invoice is None:
            store.refresh()
            invoice = store.get(invoice_id)
        if invoice is None:
            ui.notify("Invoice not found", color="red")
            ui.navigate.to("/dashboard")
            return

    state = _form_state(invoice)

    def set_field(target: dict[str, Any], key: str, value: Any) -> None:
        target[key] = value
        totals_panel.refresh()

    @ui.refreshable
    def totals_panel() -> None:
        totals = store.preview_totals(state["items"], state["adjustments"], state["tax_rate"])
        with ui.column().classes(f"w-full gap-1 {C_NUMERIC}"):
            with ui.row().classes("w-full justify-between"):
                ui.label("Subtotal").classes(C_TEXT_MUTED)
                ui.label(format_rupiah(totals.subtotal))
            with ui.row().classes("w-full justify-between"):
                ui.label(f"Tax ({state['tax_rate'] or 0:g}%)").classes(C_TEXT_MUTED)
                ui.label(format_rupiah(totals.tax_amount))
            if state["adjustments"]:
                sign = "+ " if totals.adjustments_total >= 0 else ""
                color = "text-emerald-600" if totals.adjustments_total >= 0 else "text-rose-600"
                with ui.row().classes("w-full justify-between"):
                    ui.label("Adjustments").classes(C_TEXT_MUTED)
                    ui.label(f"{sign}{format_rupiah(totals.adjustments_total)}").classes(color)
            ui.separator()
            with ui.row().classes("w-full justify-between font-semibold text-base"):
                ui.label("Total")
                ui.label(format_rupiah(totals.total))
            if invoice is not None:
                ui.label("Final totals are calculated by the server on save.").classes("text-xs text-slate-400")

    @ui.refreshable
    def items_editor() -> None:
        for item in state["items"]:
            with ui.card().classes(C_CARD + " p-3 w-full"):
                with ui.row().classes("w-full gap-3 items-end flex-wrap md:flex-nowrap"):
                    ui.input("Item name", value=item["name"],
                             on_change=lambda e, it=item: set_field(it, "name", e.value)).classes("flex-1")
                    ui.number("Qty", value=item["quantity"], min=1, step=1, format="%.0f",
                              on_change=lambda e, it=item: set_field(it, "quantity", e.value)).classes("w-24")
                    ui.number("Price", value=item["unit_price"], min=0, step=1000,
                              on_change=lambda e, it=item: set_field(it, "unit_price", e.value)).classes("w-40")
                    remove = ui.button(icon="delete", on_click=lambda it=item: remove_item(it)).props("flat round dense")
                    if len(state["items"]) <= 1:
                        remove.disable()
                ui.input("Description (optional)", value=item["description"],
                         on_change=lambda e, it=item: set_field(it, "description", e.value)).classes(C_INPUT)

    @ui.refreshable
    def adjustments_editor() -> None:
        if not state["adjustments"]:
            ui.label("No adjustments. Add a down payment, discount or extra fee.").classes(C_TEXT_MUTED)
        for adj in state["adjustments"]:
            with ui.row().classes("w-full gap-3 items-end flex-wrap md:flex-nowrap"):
                ui.input("Description", value=adj["description"],
                         on_change=lambda e, a=adj: set_field(a, "description", e.value)).classes("flex-1")
                ui.select(ADJUSTMENT_OPTIONS, value=adj["type"], label="Type",
                          on_change=lambda e, a=adj: set_field(a, "type", e.value)).classes("w-36")
                ui.number("Amount", value=adj["amount"], min=0, step=1000,
                          on_change=lambda e, a=adj: set_field(a, "amount", e.value)).classes("w-40")
                ui.button(icon="delete", on_click=lambda a=adj: remove_adjustment(a)).props("flat round dense")

    def add_item() -> None:
        state["items"].append(_blank_item())
        items_editor.refresh()
        totals_panel.refresh()

    def remove_item(item: dict[str, Any]) -> None:
        if len(state["items"]) > 1:
            state["items"].remove(item)
            items_editor.refresh()
            totals_panel.refresh()

    def add_adjustment() -> None:
        state["adjustments"].append(_blank_adjustment())
        adjustments_editor.refresh()
        totals_panel.refresh()

    def remove_adjustment(adj: dict[str, Any]) -> None:
        state["adjustments"].remove(adj)
        adjustments_editor.refresh()
        totals_panel.refresh()

    def submit() -> None:
        can_create = invoice is not None or container.plan.can_create_invoice(store.invoices)
        issue = validate_invoice_form(state, can_create=can_create)
        if issue:
            ui.notify(f"{issue.title}: {issue.description}", color="red")
            return
        try:
            draft = InvoiceDraft.model_validate(state)
        except ValidationError:
            ui.notify("Please check the invoice fields.", color="red")
            return

        try:
            if invoice is None:
                target_id = store.create(draft)
                ui.notify("Invoice created", color="green")
            else:
                store.update(invoice.id, **{name: getattr(draft, name) for name in UPDATABLE_INVOICE_FIELDS})
                target_id = invoice.id
                ui.notify("Invoice updated", color="green")
        except (ApiError, InvoiceStoreError) as e:
            ui.notify(f"Error: {e}", color="red")
            return
        ui.navigate.to(f"/invoice/{target_id}")

    title = "Create new invoice" if invoice is None else f"Edit invoice {invoice.invoice_number}"
    with ui.row().classes("w-full items-center gap-4"):
        back_button("/dashboard" if invoice is None else f"/invoice/{invoice.id}")
        with ui.column().classes("gap-1"):
            ui.label(title).classes(C_PAGE_TITLE)
            ui.label("Fill in the details to generate your invoice").classes(C_TEXT_MUTED)

    with ui.row().classes("w-full gap-6 items-start flex-col md:flex-row md:flex-nowrap"):
        with ui.column().classes("w-full md:w-[65%] gap-4"):
            with ui.card().classes(C_CARD + " p-4 w-full"):
                ui.label("Customer").classes(C_SECTION_TITLE)
                ui.input("Customer name", value=state["customer_name"],
                         on_change=lambda e: state.__setitem__("customer_name", e.value)).classes(C_INPUT)
                ui.input("Customer email", value=state["customer_email"],
                         on_change=lambda e: state.__setitem__("customer_email", e.value)).classes(C_INPUT)
                with ui.row().classes("w-full gap-3"):
                    ui.input("Due date", value=state["due_date"],
                             on_change=lambda e: state.__setitem__("due_date", e.value)).props("type=date").classes("flex-1")
                    ui.select(STATUS_OPTIONS, value=state["status"], label="Status",
                              on_change=lambda e: state.__setitem__("status", e.value)).classes("w-40")

            with ui.card().classes(C_CARD + " p-4 w-full"):
                with ui.row().classes("w-full justify-between items-center"):
                    ui.label("Items").classes(C_SECTION_TITLE)
                    ui.button("Add item", icon="add", on_click=add_item).classes(C_BTN_SEC)
                items_editor()

            with ui.card().classes(C_CARD + " p-4 w-full"):
                with ui.row().classes("w-full justify-between items-center"):
                    ui.label("Adjustments").classes(C_SECTION_TITLE)
                    ui.button("Add adjustment", icon="add", on_click=add_adjustment).classes(C_BTN_SEC)
                adjustments_editor()

        with ui.column().classes("w-full md:w-[35%] gap-4"):
            with ui.card().classes(C_CARD + " p-4 w-full"):
                ui.label("Settings").classes(C_SECTION_TITLE)
                ui.number("Tax rate (%)", value=state["tax_rate"], min=0, max=100, step=0.5,
                          on_change=lambda e: set_field(state, "tax_rate", e.value)).classes(C_INPUT)
                bank_options = {"": "Default account"}
                for ba in company.bank_accounts:
                    bank_options[ba.id] = f"{ba.bank_name} - {ba.account_number}"
                if state["bank_account_id"] not in bank_options:
                    state["bank_account_id"] = ""
                ui.select(bank_options, value=state["bank_account_id"], label="Bank account",
                          on_change=lambda e: state.__setitem__("bank_account_id", e.value or "")).classes(C_INPUT)

            with ui.card().classes(C_CARD + " p-4 w-full"):
                ui.label("Summary").classes(C_SECTION_TITLE)
                totals_panel()

            with ui.row().classes("w-full gap-2 justify-end"):
                ui.button("Cancel", on_click=lambda: ui.navigate.to("/dashboard")).classes(C_BTN_DANGER)
                ui.button("Save invoice" if invoice else "Create invoice", on_click=submit).classes(C_BTN_PRIM)
