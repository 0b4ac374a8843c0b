from __future__ import annotations

from nicegui import ui

from ..api import ApiError
from ..container import AppContainer
from ..models import PlanType
from ..services.plan import FREE_MONTHLY_LIMIT, PlanServiceError
from ..styles import C_BADGE_GREEN, C_BTN_PRIM, C_BTN_SEC, C_CARD, C_PAGE_TITLE, C_TEXT_MUTED
from ..ui_components import back_button


PLANS = [
    (PlanType.FREE, "Free", "Rp 0", [f"{FREE_MONTHLY_LIMIT} invoices per month", "PDF download", "Bank account details"]),
    (PlanType.UNLIMITED, "Unlimited", "Rp 49.000 / month", ["Unlimited invoices", "PDF download", "Bank account details"]),
]


@ui.refreshable
def render_billing(container: AppContainer) -> None:
    plan = container.plan
    used = plan.invoices_this_month(container.invoices.invoices)

    def switch(target: PlanType) -> None:
        if target == PlanType.UNLIMITED:
            try:
                url = plan.checkout_link()
            except (ApiError, PlanServiceError) as e:
                ui.notify(f"Failed to start checkout: {e}", color="red")
                return
            ui.navigate.to(url)
            return

        try:
            plan.upgrade_to_plan(PlanType.FREE)
        except (ApiError, PlanServiceError) as e:
            ui.notify(f"Failed to update plan: {e}", color="red")
            return
        ui.notify(f"You are now on the free plan with {FREE_MONTHLY_LIMIT} invoices per month", color="green")
        render_billing.refresh()

    with ui.row().classes("w-full items-center gap-4"):
        back_button("/dashboard")
        with ui.column().classes("gap-1"):
            ui.label("Billing").classes(C_PAGE_TITLE)
            if plan.current_plan == PlanType.FREE:
                ui.label(f"{used} of {FREE_MONTHLY_LIMIT} invoices used this month").classes(C_TEXT_MUTED)
            else:
                ui.label(f"{used} invoices created this month").classes(C_TEXT_MUTED)

    with ui.element("div").classes("grid grid-cols-1 md:grid-cols-2 gap-4 w-full"):
        for plan_type, title, price, features in PLANS:
            current = plan.current_plan == plan_type
            border = " border-rose-400" if current else ""
            with ui.card().classes(C_CARD + border + " p-6 gap-3"):
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(title).classes("text-lg font-bold text-slate-900")
                    if current:
                        ui.label("Current plan").classes(C_BADGE_GREEN)
                ui.label(price).classes("text-2xl font-bold text-slate-800")
                for feature in features:
                    with ui.row().classes("items-center gap-2"):
                        ui.icon("check").classes("text-emerald-500")
                        ui.label(feature).classes(C_TEXT_MUTED)
                if not current:
                    label = "Upgrade" if plan_type == PlanType.UNLIMITED else "Switch to free"
                    cls = C_BTN_PRIM if plan_type == PlanType.UNLIMITED else C_BTN_SEC
                    ui.button(label, on_click=lambda p=plan_type: switch(p)).classes(cls + " w-full")
