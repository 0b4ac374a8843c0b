from contextlib import contextmanager

from nicegui import ui

from .models import InvoiceStatus
from .styles import (
    C_BADGE_BLUE,
    C_BADGE_GRAY,
    C_BADGE_GREEN,
    C_BTN_SEC,
    C_CARD,
    C_CARD_HOVER,
    C_NUMERIC,
    C_SECTION_TITLE,
)

NAV_ITEMS = [
    ("Dashboard", "/dashboard", "home"),
    ("Company", "/company-settings", "business"),
    ("Billing", "/billing", "workspace_premium"),
]


def format_invoice_status(status) -> str:
    mapping = {
        InvoiceStatus.DRAFT: "Draft",
        InvoiceStatus.SENT: "Sent",
        InvoiceStatus.PAID: "Paid",
    }
    try:
        return mapping[InvoiceStatus(status)]
    except ValueError:
        return str(status)


def invoice_status_badge(status) -> str:
    if status == InvoiceStatus.PAID: return C_BADGE_GREEN
    if status == InvoiceStatus.SENT: return C_BADGE_BLUE
    return C_BADGE_GRAY


def navbar(active_path: str = "") -> None:
    with ui.row().classes("w-full items-center justify-between px-6 py-3 bg-white border-b border-slate-200"):
        ui.label("Bikinota").classes("text-lg font-bold text-rose-600")
        with ui.row().classes("gap-2"):
            for label, path, icon in NAV_ITEMS:
                btn = ui.button(label, icon=icon, on_click=lambda p=path: ui.navigate.to(p)).props("flat no-caps")
                btn.classes("text-slate-900 font-semibold" if path == active_path else "text-slate-600")


def kpi_card(label, value, icon, color, hint: str | None = None):
    with ui.card().classes(f"{C_CARD} {C_CARD_HOVER} p-5 relative overflow-hidden min-h-[120px]"):
        ui.icon(icon).classes(f"absolute right-4 bottom-4 text-6xl {color} opacity-10")
        with ui.column().classes("gap-2 z-10"):
            with ui.row().classes("items-center gap-2"):
                ui.icon(icon).classes(f"text-base {color}")
                ui.label(label).classes("text-xs font-bold text-slate-400 uppercase tracking-wider")
            ui.label(value).classes(f"text-2xl font-bold text-slate-800 {C_NUMERIC}")
            if hint:
                ui.label(hint).classes("text-xs text-slate-500")


@contextmanager
def settings_card(title: str | None = None, classes: str = ""):
    with ui.card().classes(f"{C_CARD} p-6 w-full {classes}".strip()) as card:
        if title:
            ui.label(title).classes(C_SECTION_TITLE)
        yield card


def back_button(target: str = "/dashboard") -> None:
    ui.button("Back", icon="arrow_back", on_click=lambda: ui.navigate.to(target)).classes(C_BTN_SEC)
