from __future__ import annotations

import logging

from nicegui import app, ui

from .container import create_app_container
from .env import app_port, load_env
from .logging_setup import setup_logging
from .pages import (
    render_billing,
    render_company_settings,
    render_dashboard,
    render_invoice_detail,
    render_invoice_form,
    render_payment_success,
)
from .styles import C_BG, C_CONTAINER
from .ui_components import navbar


load_env()
setup_logging()

logger = logging.getLogger(__name__)

CONTAINER = create_app_container()


@app.on_startup
def _load_initial_state() -> None:
    CONTAINER.refresh_all()
    logger.info("app.started api=%s", CONTAINER.client.base_url)


@app.on_shutdown
def _close_client() -> None:
    CONTAINER.close()


def layout_wrapper(active_path: str, content_func) -> None:
    with ui.element("div").classes(C_BG + " w-full"):
        navbar(active_path)
        with ui.column().classes(C_CONTAINER):
            content_func()


@ui.page("/")
def index():
    ui.navigate.to("/dashboard")


@ui.page("/dashboard")
def dashboard_page():
    layout_wrapper("/dashboard", lambda: render_dashboard(CONTAINER))


@ui.page("/invoice/new")
def invoice_new_page():
    layout_wrapper("/dashboard", lambda: render_invoice_form(CONTAINER))


@ui.page("/invoice/{invoice_id}")
def invoice_detail_page(invoice_id: str):
    layout_wrapper("/dashboard", lambda: render_invoice_detail(CONTAINER, invoice_id))


@ui.page("/invoice/{invoice_id}/edit")
def invoice_edit_page(invoice_id: str):
    layout_wrapper("/dashboard", lambda: render_invoice_form(CONTAINER, invoice_id))


@ui.page("/company-settings")
def company_settings_page():
    layout_wrapper("/company-settings", lambda: render_company_settings(CONTAINER))


@ui.page("/billing")
def billing_page():
    layout_wrapper("/billing", lambda: render_billing(CONTAINER))


@ui.page("/payment/success")
def payment_success_page(checkout_id: str | None = None):
    layout_wrapper("/billing", lambda: render_payment_success(CONTAINER, checkout_id))


def main() -> None:
    ui.run(title="Bikinota", port=app_port(), reload=False, favicon="🧾")


if __name__ in {"__main__", "__mp_main__"}:
    main()
