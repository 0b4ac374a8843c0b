from __future__ import annotations

import math

from nicegui import ui

from ..api import ApiError
from ..container import AppContainer
from ..currency import format_rupiah
from ..models import Invoice, PlanType
from ..services.plan import FREE_MONTHLY_LIMIT
from ..styles import (
    C_BTN_DANGER,
    C_BTN_PRIM,
    C_BTN_SEC,
    C_CARD,
    C_PAGE_TITLE,
    C_TABLE_HEADER,
    C_TABLE_ROW,
    C_TEXT_MUTED,
)
from ..ui_components import format_invoice_status, invoice_status_badge, kpi_card


def render_dashboard(container: AppContainer) -> None:
    store = container.invoices
    plan = container.plan
    store.refresh()

    stats = store.stats()
    limit = plan.monthly_limit
    limit_text = f"/{int(limit)}" if not math.isinf(limit) else ""

    with ui.dialog() as upgrade_dialog, ui.card().classes(C_CARD + " p-6 w-[460px] max-w-[90vw]"):
        ui.label("Monthly limit reached").classes("text-base font-semibold text-slate-900")
        ui.label(
            f"The free plan includes {FREE_MONTHLY_LIMIT} invoices per month. "
            "Upgrade to create unlimited invoices."
        ).classes(C_TEXT_MUTED)
        with ui.row().classes("justify-end w-full gap-2 mt-2"):
            ui.button("Later", on_click=upgrade_dialog.close).classes(C_BTN_SEC)
            ui.button("Upgrade", on_click=lambda: ui.navigate.to("/billing")).classes(C_BTN_PRIM)

    def on_create() -> None:
        if not plan.can_create_invoice(store.invoices):
            upgrade_dialog.open()
            return
        ui.navigate.to("/invoice/new")

    with ui.row().classes("w-full justify-between items-center"):
        with ui.column().classes("gap-1"):
            ui.label("Dashboard").classes(C_PAGE_TITLE)
            ui.label("Manage your invoices and track your business").classes(C_TEXT_MUTED)
        ui.button("New invoice", icon="add", on_click=on_create).classes(C_BTN_PRIM)

    with ui.element("div").classes("grid grid-cols-1 md:grid-cols-4 gap-4 w-full"):
        kpi_card("Total invoices", str(stats.count), "description", "text-rose-500")
        kpi_card("This month", f"{stats.this_month}{limit_text}", "calendar_month", "text-sky-500")
        kpi_card("Total revenue", format_rupiah(stats.revenue), "payments", "text-emerald-500", hint="Paid invoices")
        kpi_card("Current plan", plan.current_plan.value.capitalize(), "workspace_premium",
                 "text-amber-500" if plan.current_plan == PlanType.UNLIMITED else "text-slate-500")

    if container.company.is_placeholder():
        with ui.card().classes(C_CARD + " p-4 w-full"):
            with ui.row().classes("w-full items-center justify-between"):
                with ui.column().classes("gap-1"):
                    ui.label("Complete your company setup").classes("text-sm font-semibold")
                    ui.label("Add your company information and logo to create professional invoices.").classes(C_TEXT_MUTED)
                ui.button("Set up", on_click=lambda: ui.navigate.to("/company-settings")).classes(C_BTN_SEC)

    _render_invoice_table(container)


@ui.refreshable
def _render_invoice_table(container: AppContainer) -> None:
    store = container.invoices
    invoices = sorted(
        store.invoices,
        key=lambda inv: inv.created_at.timestamp() if inv.created_at else 0.0,
        reverse=True,
    )

    if not invoices:
        with ui.card().classes(C_CARD + " p-8 w-full items-center"):
            ui.icon("description").classes("text-5xl text-slate-300")
            ui.label("No invoices yet").classes("text-sm font-semibold text-slate-700")
            ui.label("Create your first invoice to get started.").classes(C_TEXT_MUTED)
        return

    def do_delete(invoice: Invoice, dialog) -> None:
        dialog.close()
        try:
            store.delete(invoice.id)
        except ApiError as e:
            ui.notify(f"Failed to delete invoice: {e.message}", color="red")
            return
        ui.notify("Invoice deleted", color="green")
        _render_invoice_table.refresh()

    def confirm_delete(invoice: Invoice) -> None:
        with ui.dialog() as dialog, ui.card().classes(C_CARD + " p-6"):
            ui.label(f"Delete invoice {invoice.invoice_number}?").classes("text-base font-semibold")
            ui.label("This cannot be undone.").classes(C_TEXT_MUTED)
            with ui.row().classes("justify-end w-full gap-2 mt-2"):
                ui.button("Cancel", on_click=dialog.close).classes(C_BTN_SEC)
                ui.button("Delete", on_click=lambda: do_delete(invoice, dialog)).classes(C_BTN_DANGER)
        dialog.open()

    with ui.card().classes(C_CARD + " p-0 w-full overflow-hidden"):
        with ui.row().classes(C_TABLE_HEADER):
            ui.label("Invoice").classes("w-32")
            ui.label("Customer").classes("flex-1")
            ui.label("Date").classes("w-28")
            ui.label("Total").classes("w-36 text-right")
            ui.label("Status").classes("w-20")
            ui.label("").classes("w-36")

        for inv in invoices:
            with ui.row().classes(C_TABLE_ROW + " items-center"):
                ui.label(inv.invoice_number or "-").classes("w-32 font-mono")
                with ui.column().classes("flex-1 gap-0"):
                    ui.label(inv.customer_name)
                    ui.label(inv.customer_email).classes("text-xs text-slate-500")
                ui.label(inv.created_at.date().isoformat() if inv.created_at else "-").classes("w-28 font-mono")
                ui.label(format_rupiah(inv.total)).classes("w-36 text-right font-mono")
                with ui.element("div").classes("w-20"):
                    ui.label(format_invoice_status(inv.status)).classes(invoice_status_badge(inv.status))
                with ui.row().classes("w-36 gap-1 justify-end"):
                    ui.button(icon="visibility", on_click=lambda i=inv: ui.navigate.to(f"/invoice/{i.id}")).props("flat round dense")
                    ui.button(icon="edit", on_click=lambda i=inv: ui.navigate.to(f"/invoice/{i.id}/edit")).props("flat round dense")
                    ui.button(icon="delete", on_click=lambda i=inv: confirm_delete(i)).props("flat round dense color=negative")
