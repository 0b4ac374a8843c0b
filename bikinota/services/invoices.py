from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from pydantic import ValidationError

from ..api import ApiClient, ApiError, ApiResponse
from ..invoice_calculations import InvoiceTotals, calculate_invoice_totals
from ..models import Invoice, InvoiceDraft, InvoiceStatus, build_invoice_update_payload


logger = logging.getLogger(__name__)

_ENDPOINT = "/api/invoice"
_DIVERGENCE_TOLERANCE = Decimal("0.01")


class InvoiceStoreError(Exception):
    pass


@dataclass
class InvoiceStats:
    count: int = 0
    this_month: int = 0
    revenue: Decimal = Decimal("0")
    by_status: dict[str, int] = field(default_factory=dict)


def _local_created_at(invoice: Invoice) -> datetime | None:
    created = invoice.created_at
    if created is None:
        return None
    if created.tzinfo is not None:
        return created.astimezone()
    return created


def count_invoices_in_month(invoices: Iterable[Invoice], now: datetime | None = None) -> int:
    now = now or datetime.now()
    count = 0
    for invoice in invoices:
        created = _local_created_at(invoice)
        if created and created.year == now.year and created.month == now.month:
            count += 1
    return count


def _diverging_fields(preview: InvoiceTotals, server: InvoiceTotals) -> list[str]:
    return [
        name
        for name in ("subtotal", "tax_amount", "adjustments_total", "total")
        if abs(getattr(preview, name) - getattr(server, name)) > _DIVERGENCE_TOLERANCE
    ]


class InvoiceStore:
    """
    Client-side list of the user's invoices.

    The backend is the system of record: every create/update adopts the
    invoice it echoes back, totals included, even when the local preview
    computed something else. Divergences are only logged.
    """

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.invoices: list[Invoice] = []
        self.is_loading = False

    # ---------- queries ----------

    def get(self, invoice_id: str) -> Invoice | None:
        return next((inv for inv in self.invoices if inv.id == invoice_id), None)

    @staticmethod
    def preview_totals(items: Any, adjustments: Any = None, tax_rate: Any = 0) -> InvoiceTotals:
        return calculate_invoice_totals(items, adjustments, tax_rate)

    def stats(self, now: datetime | None = None) -> InvoiceStats:
        by_status = Counter(inv.status.value for inv in self.invoices)
        revenue = sum(
            (inv.total for inv in self.invoices if inv.status == InvoiceStatus.PAID),
            Decimal("0"),
        )
        return InvoiceStats(
            count=len(self.invoices),
            this_month=count_invoices_in_month(self.invoices, now),
            revenue=revenue,
            by_status=dict(by_status),
        )

    # ---------- backend calls ----------

    def refresh(self) -> list[Invoice]:
        self.is_loading = True
        try:
            response = self.client.get(_ENDPOINT)
            if response.success and response.data is not None:
                self.invoices = self._parse_invoices(response.data)
        except ApiError as exc:
            logger.error("invoices.fetch_failed error=%s", exc)
            self.invoices = []
        finally:
            self.is_loading = False
        return list(self.invoices)

    def create(self, draft: InvoiceDraft) -> str:
        preview = draft.preview_totals()
        try:
            response = self.client.post(_ENDPOINT, draft.to_create_payload())
        except ApiError as exc:
            logger.error("invoices.create_failed status=%s error=%s", exc.status, exc)
            raise

        invoice = self._adopt(response, "create")
        self._log_divergence(invoice, preview)
        self.invoices.append(invoice)
        logger.info("invoices.created id=%s number=%s", invoice.id, invoice.invoice_number)
        return invoice.id

    def update(self, invoice_id: str, **fields: Any) -> Invoice:
        payload = build_invoice_update_payload(fields)
        preview = self._preview_for_update(invoice_id, fields)
        try:
            response = self.client.put(f"{_ENDPOINT}/{invoice_id}", payload)
        except ApiError as exc:
            logger.error("invoices.update_failed id=%s status=%s error=%s", invoice_id, exc.status, exc)
            raise

        invoice = self._adopt(response, "update")
        if preview is not None:
            self._log_divergence(invoice, preview)

        for idx, existing in enumerate(self.invoices):
            if existing.id == invoice_id:
                self.invoices[idx] = invoice
                break
        else:
            self.invoices.append(invoice)
        logger.info("invoices.updated id=%s", invoice_id)
        return invoice

    def delete(self, invoice_id: str) -> None:
        try:
            self.client.delete(f"{_ENDPOINT}/{invoice_id}")
        except ApiError as exc:
            logger.error("invoices.delete_failed id=%s status=%s error=%s", invoice_id, exc.status, exc)
            raise
        self.invoices = [inv for inv in self.invoices if inv.id != invoice_id]
        logger.info("invoices.deleted id=%s", invoice_id)

    # ---------- helpers ----------

    @staticmethod
    def _parse_invoices(records: Iterable[Any]) -> list[Invoice]:
        # one malformed record must not hide the others
        invoices: list[Invoice] = []
        for record in records:
            try:
                invoices.append(Invoice.model_validate(record))
            except ValidationError as exc:
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.error("invoices.parse_failed id=%s error=%s", record_id, exc)
        return invoices

    @staticmethod
    def _adopt(response: ApiResponse, action: str) -> Invoice:
        if not (response.success and response.data):
            raise InvoiceStoreError(f"Failed to {action} invoice. Please try again.")
        try:
            return Invoice.model_validate(response.data)
        except ValidationError as exc:
            logger.error("invoices.%s_invalid_response error=%s", action, exc)
            raise InvoiceStoreError(f"Failed to {action} invoice. Please try again.") from exc

    def _preview_for_update(self, invoice_id: str, fields: dict[str, Any]) -> InvoiceTotals | None:
        current = self.get(invoice_id)
        if current is None:
            return None
        return calculate_invoice_totals(
            fields.get("items", current.items),
            fields.get("adjustments", current.adjustments),
            fields.get("tax_rate", current.tax_rate),
        )

    @staticmethod
    def _log_divergence(invoice: Invoice, preview: InvoiceTotals) -> None:
        diverging = _diverging_fields(preview, invoice.totals)
        if diverging:
            logger.warning(
                "invoices.totals_diverged id=%s fields=%s preview_total=%s server_total=%s",
                invoice.id,
                ",".join(diverging),
                preview.total,
                invoice.total,
            )
