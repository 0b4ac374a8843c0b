from __future__ import annotations

from dataclasses import dataclass

from .api import ApiClient, client_from_env
from .services.company import CompanyService
from .services.invoices import InvoiceStore
from .services.plan import PlanService


@dataclass(frozen=True)
class AppContainer:
    client: ApiClient
    invoices: InvoiceStore
    company: CompanyService
    plan: PlanService

    def refresh_all(self) -> None:
        self.invoices.refresh()
        self.company.refresh()
        self.plan.refresh()

    def close(self) -> None:
        self.client.close()


def create_app_container(client: ApiClient | None = None) -> AppContainer:
    client = client or client_from_env()
    return AppContainer(
        client=client,
        invoices=InvoiceStore(client),
        company=CompanyService(client),
        plan=PlanService(client),
    )
