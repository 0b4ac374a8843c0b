from __future__ import annotations

from typing import Any

from nicegui import ui

from ..api import ApiError
from ..container import AppContainer
from ..models import BankAccount
from ..services.company import CompanyServiceError
from ..styles import (
    C_BADGE_GREEN,
    C_BTN_DANGER,
    C_BTN_PRIM,
    C_BTN_SEC,
    C_CARD,
    C_INPUT,
    C_PAGE_TITLE,
    C_TEXT_MUTED,
)
from ..ui_components import back_button, settings_card


PROFILE_FIELDS = [
    ("name", "Company name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("website", "Website"),
    ("address", "Address"),
    ("city", "City"),
    ("state", "State / Province"),
    ("zip_code", "ZIP / Postal code"),
    ("country", "Country"),
]

BANK_FIELDS = [
    ("bank_name", "Bank name"),
    ("account_name", "Account holder"),
    ("account_number", "Account number"),
    ("swift_code", "SWIFT code (optional)"),
    ("routing_number", "Routing number (optional)"),
]
REQUIRED_BANK_FIELDS = ("bank_name", "account_name", "account_number")


def _run(action, success_message: str) -> bool:
    try:
        action()
    except (ApiError, CompanyServiceError) as e:
        ui.notify(f"Error: {e}", color="red")
        return False
    ui.notify(success_message, color="green")
    return True


def render_company_settings(container: AppContainer) -> None:
    service = container.company
    company = service.company

    profile: dict[str, Any] = {name: getattr(company, name) for name, _ in PROFILE_FIELDS}
    if service.is_placeholder():
        # start from an empty form rather than the sample values
        profile = {name: "" for name, _ in PROFILE_FIELDS}

    with ui.row().classes("w-full items-center gap-4"):
        back_button("/dashboard")
        with ui.column().classes("gap-1"):
            ui.label("Company settings").classes(C_PAGE_TITLE)
            ui.label("This information appears on every invoice").classes(C_TEXT_MUTED)

    with settings_card("Company profile"):
        with ui.element("div").classes("grid grid-cols-1 md:grid-cols-2 gap-3 w-full"):
            for name, label in PROFILE_FIELDS:
                ui.input(label, value=profile[name],
                         on_change=lambda e, n=name: profile.__setitem__(n, e.value or "")).classes(C_INPUT)

        def save_profile() -> None:
            if not (profile.get("name") or "").strip():
                ui.notify("Company name is required", color="red")
                return
            _run(lambda: service.update_company_info(**profile), "Company information saved")

        with ui.row().classes("w-full justify-end"):
            ui.button("Save", on_click=save_profile).classes(C_BTN_PRIM)

    with settings_card("Logo"):
        if company.logo:
            src = company.logo if company.logo.startswith("data:") else f"data:image/png;base64,{company.logo}"
            ui.image(src).classes("w-40 h-20 object-contain")

            def remove_logo() -> None:
                if _run(service.remove_logo, "Logo removed"):
                    ui.navigate.to("/company-settings")

            ui.button("Remove logo", icon="delete", on_click=remove_logo).classes(C_BTN_DANGER)
        else:
            ui.label("No logo uploaded.").classes(C_TEXT_MUTED)

    with settings_card("Bank accounts"):
        _bank_accounts(container)


@ui.refreshable
def _bank_accounts(container: AppContainer) -> None:
    service = container.company
    accounts = service.company.bank_accounts

    def open_editor(account: BankAccount | None = None) -> None:
        values: dict[str, Any] = {
            name: (getattr(account, name) or "") if account else "" for name, _ in BANK_FIELDS
        }
        with ui.dialog() as dialog, ui.card().classes(C_CARD + " p-6 w-[460px] max-w-[90vw]"):
            ui.label("Edit bank account" if account else "Add bank account").classes("text-base font-semibold")
            for name, label in BANK_FIELDS:
                ui.input(label, value=values[name],
                         on_change=lambda e, n=name: values.__setitem__(n, e.value or "")).classes(C_INPUT)

            def save() -> None:
                missing = [n for n in REQUIRED_BANK_FIELDS if not values[n].strip()]
                if missing:
                    ui.notify("Bank name, account holder and account number are required", color="red")
                    return
                if account is None:
                    ok = _run(lambda: service.add_bank_account(**values), "Bank account added")
                else:
                    ok = _run(lambda: service.update_bank_account(account.id, **values), "Bank account updated")
                if ok:
                    dialog.close()
                    _bank_accounts.refresh()

            with ui.row().classes("justify-end w-full gap-2 mt-2"):
                ui.button("Cancel", on_click=dialog.close).classes(C_BTN_SEC)
                ui.button("Save", on_click=save).classes(C_BTN_PRIM)
        dialog.open()

    def delete(account: BankAccount) -> None:
        if _run(lambda: service.delete_bank_account(account.id), "Bank account deleted"):
            _bank_accounts.refresh()

    def make_default(account: BankAccount) -> None:
        if _run(lambda: service.set_default_bank_account(account.id), "Default bank account updated"):
            _bank_accounts.refresh()

    if not accounts:
        ui.label("No bank accounts yet. Add one to show payment details on invoices.").classes(C_TEXT_MUTED)

    for account in accounts:
        with ui.row().classes("w-full items-center justify-between border-b border-slate-200/70 py-2"):
            with ui.column().classes("gap-0"):
                with ui.row().classes("items-center gap-2"):
                    ui.label(account.bank_name).classes("text-sm font-semibold")
                    if account.is_default:
                        ui.label("Default").classes(C_BADGE_GREEN)
                ui.label(f"{account.account_name} · {account.account_number}").classes(C_TEXT_MUTED)
            with ui.row().classes("gap-1"):
                if not account.is_default:
                    ui.button("Set default", on_click=lambda a=account: make_default(a)).props("flat dense no-caps")
                ui.button(icon="edit", on_click=lambda a=account: open_editor(a)).props("flat round dense")
                ui.button(icon="delete", on_click=lambda a=account: delete(a)).props("flat round dense color=negative")

    with ui.row().classes("w-full justify-end"):
        ui.button("Add bank account", icon="add", on_click=lambda: open_editor()).classes(C_BTN_SEC)
