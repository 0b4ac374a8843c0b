from __future__ import annotations

from nicegui import ui

from ..container import AppContainer
from ..styles import C_BTN_PRIM, C_BTN_SEC, C_CARD, C_TEXT_MUTED


# the backend activates the plan from the payment webhook, give it a moment
VERIFY_DELAY_SECONDS = 10.0

STATUS_TEXT = {
    "verifying": (
        "hourglass_top",
        "text-sky-500",
        "Processing payment",
        "Please wait while we verify your payment and activate your subscription...",
    ),
    "success": (
        "check_circle",
        "text-emerald-500",
        "Payment successful!",
        "Your subscription has been activated. You now have unlimited invoices.",
    ),
    "pending": (
        "schedule",
        "text-amber-500",
        "Payment received",
        "We're processing your subscription activation. Your plan will be updated automatically.",
    ),
    "error": (
        "error",
        "text-rose-500",
        "Verification error",
        "There was an issue verifying your payment. Please contact support if the problem persists.",
    ),
}


def render_payment_success(container: AppContainer, checkout_id: str | None = None) -> None:
    state = {"status": "verifying" if checkout_id else "error"}

    @ui.refreshable
    def status_card() -> None:
        icon, color, title, text = STATUS_TEXT[state["status"]]
        with ui.card().classes(C_CARD + " p-8 w-full items-center text-center gap-3"):
            ui.icon(icon).classes(f"text-6xl {color}")
            ui.label(title).classes("text-xl font-bold text-slate-900")
            ui.label(text).classes(C_TEXT_MUTED)
            if checkout_id:
                ui.label(f"Checkout ID: {checkout_id}").classes("text-xs text-slate-500 font-mono")
            with ui.row().classes("gap-2 mt-2"):
                ui.button("Go to dashboard", on_click=lambda: ui.navigate.to("/dashboard")).classes(C_BTN_PRIM)
                ui.button("Billing", on_click=lambda: ui.navigate.to("/billing")).classes(C_BTN_SEC)

    def verify() -> None:
        state["status"] = container.plan.payment_status(checkout_id)
        status_card.refresh()

    status_card()
    if checkout_id:
        ui.timer(VERIFY_DELAY_SECONDS, verify, once=True)
